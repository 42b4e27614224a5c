"""Tests for the stateless calculation endpoints."""


def test_bmi(api):
    res = api.get("/api/calculations/bmi", params={"weight": 70, "height": 175})
    assert res.status_code == 200
    assert res.json() == {"bmi": 22.86, "classification": "Normal"}

    heavy = api.get("/api/calculations/bmi", params={"weight": 130, "height": 170}).json()
    assert heavy["classification"] == "Aşırı Obez (Sınıf 3)"
    assert api.get("/api/calculations/bmi", params={"weight": 70, "height": 0}).status_code == 422


def test_calories(api):
    res = api.post("/api/calculations/calories", json={
        "weight": 70, "height": 175, "age": 30, "gender": "male", "activity_level": "moderate",
    })
    assert res.status_code == 200
    assert res.json() == {"bmr": 1649, "calories": 2556}


def test_calories_rejects_unknown_inputs(api):
    base = {"weight": 70, "height": 175, "age": 30, "gender": "male", "activity_level": "moderate"}
    bad_level = api.post("/api/calculations/calories", json={**base, "activity_level": "extreme"})
    assert bad_level.status_code == 400
    assert bad_level.json()["details"]["field"] == "activity_level"
    bad_gender = api.post("/api/calculations/calories", json={**base, "gender": "other"})
    assert bad_gender.status_code == 400
    assert bad_gender.json()["details"]["field"] == "gender"


def test_macros(api):
    res = api.post("/api/calculations/macros", json={"calories": 2000})
    assert res.json() == {"protein": 150, "carbs": 200, "fat": 67}

    custom = api.post("/api/calculations/macros", json={
        "calories": 1800, "protein_pct": 25, "carb_pct": 50, "fat_pct": 25,
    })
    assert custom.json() == {"protein": 113, "carbs": 225, "fat": 50}

    bad = api.post("/api/calculations/macros", json={"calories": 2000, "protein_pct": 50})
    assert bad.status_code == 400


def test_body_fat(api):
    res = api.post("/api/calculations/body-fat", json={"weight": 70, "height": 175, "age": 30, "gender": "female"})
    assert res.json() == {"bmi": 22.86, "body_fat_percentage": 28.9}
