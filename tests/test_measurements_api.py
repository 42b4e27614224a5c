"""Tests for measurement recording, body-fat estimation and the progress summary."""
from datetime import datetime

from conftest import make_client
from database import models
from api.measurements import estimate_body_fat


def test_create_measurement_estimates_body_fat(api, headers, db, user):
    client = make_client(db, user, birth_date=datetime(1990, 1, 1).date())
    res = api.post(f"/api/clients/{client.id}/measurements", headers=headers, json={
        "date": "15.03.2024",
        "weight": 88.0,
        "waist": 95,
        "images": ["/uploads/olcum/a.jpg"],
    })
    assert res.status_code == 201
    body = res.json()
    assert body["date"].startswith("2024-03-15")
    assert body["images"] == ["/uploads/olcum/a.jpg"]

    age = datetime.now().year - 1990
    bmi = 88.0 / (1.78 ** 2)
    expected = 1.2 * bmi + 0.23 * age - 16.2
    assert abs(body["body_fat_percentage"] - expected) <= 0.051

    activity = db.query(models.Activity).filter_by(type="measurement").one()
    assert client.name in activity.description


def test_explicit_body_fat_is_kept(api, headers, client_record):
    res = api.post(f"/api/clients/{client_record.id}/measurements", headers=headers,
                   json={"weight": 80, "body_fat_percentage": 21.4})
    assert res.json()["body_fat_percentage"] == 21.4


def test_body_fat_needs_weight_height_and_gender(db, user):
    no_gender = make_client(db, user, email="a@diyetim.com.tr", gender=None)
    assert estimate_body_fat(no_gender, 80, None) is None
    no_height = make_client(db, user, email="b@diyetim.com.tr", height=None)
    assert estimate_body_fat(no_height, 80, None) is None
    assert estimate_body_fat(no_height, 80, 170) is not None
    assert estimate_body_fat(no_height, None, 170) is None


def test_measurement_date_defaults_to_now(api, headers, client_record):
    before = models.utcnow().replace(microsecond=0)
    res = api.post(f"/api/clients/{client_record.id}/measurements", headers=headers, json={"weight": 90})
    assert datetime.fromisoformat(res.json()["date"]) >= before


def test_list_is_newest_first(api, headers, client_record):
    for day, weight in (("2024-01-10", 92), ("2024-03-10", 88), ("2024-02-10", 90)):
        api.post(f"/api/clients/{client_record.id}/measurements", headers=headers,
                 json={"date": day, "weight": weight})
    rows = api.get(f"/api/clients/{client_record.id}/measurements", headers=headers).json()
    assert [r["weight"] for r in rows] == [88, 90, 92]


def test_summary(api, headers, client_record):
    empty = api.get(f"/api/clients/{client_record.id}/measurements/summary", headers=headers).json()
    assert empty["count"] == 0 and empty["latest"] is None

    for day, weight in (("2024-01-10", 92), ("2024-03-10", 85.5)):
        api.post(f"/api/clients/{client_record.id}/measurements", headers=headers,
                 json={"date": day, "weight": weight})
    summary = api.get(f"/api/clients/{client_record.id}/measurements/summary", headers=headers).json()
    assert summary["count"] == 2
    assert summary["first"]["weight"] == 92
    assert summary["latest"]["weight"] == 85.5
    assert summary["weight_change"] == -6.5
    assert summary["remaining_to_target"] == -5.5
    assert summary["bmi"] == 26.99
    assert summary["bmi_classification"] == "Fazla Kilolu"


def test_update_and_delete_measurement(api, headers, other_headers, client_record):
    created = api.post(f"/api/clients/{client_record.id}/measurements", headers=headers,
                       json={"weight": 90, "notes": "ilk ölçüm"}).json()

    upd = api.put(f"/api/measurements/{created['id']}", headers=headers,
                  json={"weight": 89.4, "images": ["/uploads/x.png"]})
    assert upd.status_code == 200
    assert upd.json()["weight"] == 89.4
    assert upd.json()["notes"] == "ilk ölçüm"
    assert upd.json()["images"] == ["/uploads/x.png"]

    assert api.put(f"/api/measurements/{created['id']}", headers=other_headers, json={"weight": 1}).status_code == 403
    assert api.delete(f"/api/measurements/{created['id']}", headers=headers).status_code == 204
    assert api.delete(f"/api/measurements/{created['id']}", headers=headers).status_code == 404


def test_measurements_of_foreign_client_are_forbidden(api, other_headers, client_record):
    assert api.get(f"/api/clients/{client_record.id}/measurements", headers=other_headers).status_code == 403
    res = api.post(f"/api/clients/{client_record.id}/measurements", headers=other_headers, json={"weight": 80})
    assert res.status_code == 403


def test_weight_change_refreshes_body_fat(api, headers, client_record):
    created = api.post(f"/api/clients/{client_record.id}/measurements", headers=headers,
                       json={"weight": 92}).json()

    lighter = api.put(f"/api/measurements/{created['id']}", headers=headers, json={"weight": 70}).json()
    assert lighter["body_fat_percentage"] == estimate_body_fat(client_record, 70, None)
    assert lighter["body_fat_percentage"] < created["body_fat_percentage"]

    explicit = api.put(f"/api/measurements/{created['id']}", headers=headers,
                       json={"weight": 75, "body_fat_percentage": 19.0}).json()
    assert explicit["body_fat_percentage"] == 19.0

    notes_only = api.put(f"/api/measurements/{created['id']}", headers=headers, json={"notes": "sabah"}).json()
    assert notes_only["body_fat_percentage"] == 19.0
