"""Tests for the public blog API and the article CSV ingestion in `data/ingest_articles.py`."""
from datetime import datetime
from pathlib import Path

from data.blog_articles import BLOG_ARTICLES
from data.ingest_articles import estimate_read_time, parse_articles_csv, seed_articles_from_csv
from database import models
from database.database import seed_blog_articles

FIXTURE = str(Path(__file__).resolve().parent.parent / "data" / "fixtures" / "blog_articles.csv")


def test_list_is_public_and_newest_first(api):
    res = api.get("/api/blog")
    assert res.status_code == 200
    articles = res.json()
    assert len(articles) == len(BLOG_ARTICLES)
    dates = [a["published_at"] for a in articles]
    assert dates == sorted(dates, reverse=True)

    first = articles[0]
    assert first["title"] == "Vücut Kitle İndeksi Neyi Söyler, Neyi Söylemez?"
    assert first["published_display"] == "27.05.2024"
    assert first["slug"] == "vucut-kitle-indeksi-neyi-soyler-neyi-soylemez"


def test_search_category_and_limit(api):
    found = api.get("/api/blog", params={"search": "protein"}).json()
    assert [a["category"] for a in found] == ["makro"]
    assert [a["title"] for a in api.get("/api/blog", params={"category": "diyet"}).json()] == [
        "Aralıklı Oruç Herkes İçin Uygun mu?"
    ]
    assert len(api.get("/api/blog", params={"limit": 2}).json()) == 2
    assert api.get("/api/blog", params={"category": "yok"}).json() == []


def test_get_article(api, db):
    article = db.query(models.BlogArticle).filter_by(category="makro").one()
    res = api.get(f"/api/blog/{article.id}")
    assert res.status_code == 200
    assert res.json()["author"] == article.author

    missing = api.get("/api/blog/999")
    assert missing.status_code == 404
    assert missing.json()["details"]["resource"] == "Blog article"


def test_builtin_seed_only_fills_an_empty_table(db):
    assert seed_blog_articles(db) == 0
    assert db.query(models.BlogArticle).count() == len(BLOG_ARTICLES)


def test_parse_articles_csv_skips_bad_rows():
    rows = parse_articles_csv(FIXTURE)
    assert [r["title"] for r in rows] == [
        "Lif Tüketimini Artırmanın 7 Yolu",
        "Sporcu Beslenmesinde Karbonhidrat Zamanlaması",
    ]
    fiber, sport = rows
    assert fiber["published_at"] == datetime(2024, 6, 12)
    assert fiber["read_time"] == 4
    assert fiber["image_url"] is None
    assert sport["published_at"] == datetime(2024, 7, 3, 9, 30)
    assert sport["content"] is None
    assert sport["read_time"] == 5


def test_estimate_read_time():
    assert estimate_read_time(None) == 5
    assert estimate_read_time("kısa") == 1
    assert estimate_read_time(" ".join(["kelime"] * 401)) == 3


def test_seed_articles_is_idempotent(db):
    before = db.query(models.BlogArticle).count()
    assert seed_articles_from_csv(FIXTURE, session=db) == 2
    assert db.query(models.BlogArticle).count() == before + 2
    assert seed_articles_from_csv(FIXTURE, session=db) == 0
    assert db.query(models.BlogArticle).count() == before + 2
