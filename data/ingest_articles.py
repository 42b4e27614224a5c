"""Utilities to ingest blog article CSV files into the application's database.

This module provides:
- parse_articles_csv(csv_path): returns a list of normalized article dicts
- seed_articles_from_csv(csv_path, session): idempotently seeds the blog table

Expected columns: `title`, `summary`, `author`, `published_at` and optionally
`content`, `category`, `read_time`, `image_url`. Dates may use any of the
formats accepted by `services.date_formatter.parse_datetime`.
"""
from __future__ import annotations

from typing import List, Dict
import logging
import math
import pandas as pd

from database.database import WriteSessionLocal
from database import models
from services.date_formatter import parse_datetime

logger = logging.getLogger("data.ingest_articles")

REQUIRED_COLUMNS = ("title", "summary", "author")
DEFAULT_READ_TIME = 5
WORDS_PER_MINUTE = 200


def _clean(val):
    """Return a stripped string, or None for blank/NaN cells."""
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return None
    text = str(val).strip()
    return text or None


def estimate_read_time(content: str | None) -> int:
    """Minutes needed to read `content` at 200 words per minute (at least 1)."""
    if not content:
        return DEFAULT_READ_TIME
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))


def parse_articles_csv(csv_path: str) -> List[Dict]:
    """Parse the CSV and return a list of normalized article dictionaries.

    Rows missing a required column or carrying an unparseable date are
    skipped and logged.
    """
    logger.info("Parsing articles CSV: %s", csv_path)
    df = pd.read_csv(csv_path, encoding="utf-8", dtype=str)
    df = df.rename(columns=lambda s: s.strip().lower())

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Articles CSV is missing columns: {', '.join(missing)}")

    articles = []
    for idx, row in df.iterrows():
        title = _clean(row.get("title"))
        summary = _clean(row.get("summary"))
        author = _clean(row.get("author"))
        if not (title and summary and author):
            logger.warning("Skipping row %s: title, summary and author are required", idx)
            continue

        published_at = parse_datetime(_clean(row.get("published_at")))
        if published_at is None:
            logger.warning("Skipping row %s (%s): unparseable published_at", idx, title)
            continue

        content = _clean(row.get("content"))
        read_time_raw = _clean(row.get("read_time"))
        try:
            read_time = int(float(read_time_raw)) if read_time_raw else estimate_read_time(content)
        except ValueError:
            read_time = estimate_read_time(content)

        articles.append({
            "title": title,
            "summary": summary,
            "content": content,
            "author": author,
            "category": _clean(row.get("category")),
            "published_at": published_at,
            "read_time": read_time,
            "image_url": _clean(row.get("image_url")),
        })

    logger.info("Parsed %s articles from CSV", len(articles))
    return articles


def seed_articles_from_csv(csv_path: str, session=None) -> int:
    """Idempotently seed the blog table from the CSV file.

    Existing articles are matched by title and skipped.

    Returns:
        Number of articles added.
    """
    close_session = False
    if session is None:
        session = WriteSessionLocal()
        close_session = True
    try:
        added = 0
        for item in parse_articles_csv(csv_path):
            existing = session.query(models.BlogArticle).filter(models.BlogArticle.title == item["title"]).first()
            if existing:
                continue
            session.add(models.BlogArticle(**item))
            added += 1
        if added:
            session.commit()
        logger.info("Seeded %s new articles into DB", added)
        return added
    finally:
        if close_session:
            session.close()


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser("Seed blog articles from CSV into the DB")
    p.add_argument("csv_path", nargs="?", default="data/fixtures/blog_articles.csv")
    args = p.parse_args()
    print(f"Added {seed_articles_from_csv(args.csv_path)} articles")
