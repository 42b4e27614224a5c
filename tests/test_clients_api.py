"""Tests for the clients API: CRUD, filters, ownership and activity logging."""
import pytest

from conftest import make_client
from core.exceptions import NotFoundError, PermissionDeniedError
from api.clients import get_owned_client
from database import models


def test_create_client_normalises_input(api, headers, db, user):
    res = api.post("/api/clients", headers=headers, json={
        "name": "Elif Şahin",
        "email": "Elif@Diyetim.com.tr",
        "phone": "0532 765 43 21",
        "birth_date": "15/03/1990",
        "gender": "female",
        "height": 165,
        "starting_weight": 72,
        "target_weight": 62,
        "activity_level": "light",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["email"] == "elif@diyetim.com.tr"
    assert body["birth_date"] == "1990-03-15"
    assert body["phone"] == "+90 532 765 43 21"
    assert body["status"] == "active"
    assert body["telegram_linked"] is False

    activity = db.query(models.Activity).filter_by(user_id=user.id).one()
    assert activity.type == "client"
    assert activity.description == "Yeni danışan eklendi: Elif Şahin"


def test_create_client_rejects_unparseable_birth_date(api, headers):
    res = api.post("/api/clients", headers=headers, json={
        "name": "Elif Şahin", "email": "elif@diyetim.com.tr", "birth_date": "31.02.1990",
    })
    assert res.status_code == 422


def test_list_clients_filters_and_sorts(api, headers, db, user, other_user):
    make_client(db, user, name="Zehra Ak", email="zehra@diyetim.com.tr", phone="+90 532 000 00 01")
    make_client(db, user, name="Ali Veli", email="ali@diyetim.com.tr", status="inactive")
    make_client(db, user, name="Burak Tan", email="burak@diyetim.com.tr")
    make_client(db, other_user, name="Başkasının Danışanı", email="x@diyetim.com.tr")

    names = [c["name"] for c in api.get("/api/clients", headers=headers).json()]
    assert names == ["Ali Veli", "Burak Tan", "Zehra Ak"]

    active = api.get("/api/clients", headers=headers, params={"status": "active"}).json()
    assert {c["name"] for c in active} == {"Burak Tan", "Zehra Ak"}

    by_email = api.get("/api/clients", headers=headers, params={"search": "burak@"}).json()
    assert [c["name"] for c in by_email] == ["Burak Tan"]
    by_phone = api.get("/api/clients", headers=headers, params={"search": "000 00 01"}).json()
    assert [c["name"] for c in by_phone] == ["Zehra Ak"]

    newest = api.get("/api/clients", headers=headers, params={"sort": "-created_at"}).json()
    assert newest[0]["name"] == "Burak Tan"
    assert api.get("/api/clients", headers=headers, params={"sort": "age"}).status_code == 422


def test_get_update_client(api, headers, client_record):
    res = api.get(f"/api/clients/{client_record.id}", headers=headers)
    assert res.status_code == 200
    assert res.json()["name"] == client_record.name

    upd = api.put(f"/api/clients/{client_record.id}", headers=headers,
                  json={"target_weight": 78.5, "status": "inactive", "birth_date": "1985-07-01", "name": None})
    assert upd.status_code == 200
    body = upd.json()
    assert body["target_weight"] == 78.5
    assert body["status"] == "inactive"
    assert body["birth_date"] == "1985-07-01"
    assert body["name"] == client_record.name
    assert body["starting_weight"] == client_record.starting_weight


def test_missing_and_foreign_clients(api, headers, other_headers, client_record):
    assert api.get("/api/clients/9999", headers=headers).status_code == 404
    foreign = api.get(f"/api/clients/{client_record.id}", headers=other_headers)
    assert foreign.status_code == 403
    assert foreign.json()["details"]["resource"] == "Client"
    assert api.delete(f"/api/clients/{client_record.id}", headers=other_headers).status_code == 403


def test_delete_client_cascades(api, headers, db, user, client_record):
    db.add(models.Measurement(client_id=client_record.id, weight=90))
    db.add(models.Appointment(client_id=client_record.id, user_id=user.id,
                              date=models.utcnow(), duration=30))
    db.commit()

    res = api.delete(f"/api/clients/{client_record.id}", headers=headers)
    assert res.status_code == 204
    db.expire_all()
    assert db.query(models.Client).count() == 0
    assert db.query(models.Measurement).count() == 0
    assert db.query(models.Appointment).count() == 0


def test_get_owned_client_direct(db, user, other_user, client_record):
    assert get_owned_client(db, client_record.id, user).id == client_record.id
    with pytest.raises(PermissionDeniedError):
        get_owned_client(db, client_record.id, other_user)
    with pytest.raises(NotFoundError):
        get_owned_client(db, 12345, user)
