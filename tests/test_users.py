from sqlalchemy import text

from health_tracker import models
from health_tracker.auth import verify_password

from conftest import TestingSessionLocal, make_medication


def test_demo_user_is_created_on_first_request(client):
    me = client.get("/api/me").json()
    assert me["username"] == "demo"
    assert me["healthProfile"]["age"] is None
    assert me["healthProfileStatus"]["isComplete"] is False
    assert me["showOnboarding"] is True

    # Later requests resolve to the same user
    assert client.get("/api/me").json()["id"] == me["id"]


def test_register_user(client):
    response = client.post("/api/users", json={"username": "alice", "password": "secret"})
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "alice"
    assert "password" not in body and "hashedPassword" not in body

    db = TestingSessionLocal()
    try:
        user = db.query(models.User).filter(models.User.username == "alice").one()
        assert user.hashed_password != "secret"
        assert verify_password("secret", user.hashed_password)
    finally:
        db.close()


def test_duplicate_username_is_400(client):
    client.post("/api/users", json={"username": "alice", "password": "secret"})
    response = client.post("/api/users", json={"username": "alice", "password": "other"})
    assert response.status_code == 400


def test_header_selects_the_user(client, other_user):
    assert client.get("/api/me", headers=other_user).json()["username"] == "alice"


def test_malformed_user_header_is_400(client):
    response = client.get("/api/medications", headers={"X-User-ID": "abc"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid User ID format in X-User-ID header."


def test_unknown_user_header_is_404(client):
    response = client.get("/api/medications", headers={"X-User-ID": "9999"})
    assert response.status_code == 404


def test_entities_are_scoped_to_user(client, other_user):
    medication = make_medication(client)

    assert client.get("/api/medications", headers=other_user).json() == []
    assert client.get(f"/api/medications/{medication['id']}", headers=other_user).status_code == 404
    assert client.delete(f"/api/medications/{medication['id']}", headers=other_user).status_code == 404
    assert client.get(f"/api/medications/{medication['id']}").status_code == 200


def test_complete_profile(client):
    response = client.patch(
        "/api/me/health-profile",
        json={"age": 42, "sex": "female", "heightCm": 168, "weightKg": 61.5, "allergies": ["penicillin"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["healthProfile"]["age"] == 42
    assert body["healthProfile"]["allergies"] == ["penicillin"]
    assert body["healthProfileStatus"]["isComplete"] is True
    assert body["healthProfileStatus"]["lastUpdated"] is not None
    assert body["healthProfileStatus"]["skippedAt"] is None

    assert client.get("/api/me").json()["showOnboarding"] is False


def test_partial_profile_is_not_complete(client):
    body = client.patch("/api/me/health-profile", json={"age": 42, "heightCm": 168}).json()
    assert body["healthProfileStatus"]["isComplete"] is False
    assert client.get("/api/me").json()["showOnboarding"] is True


def test_profile_patch_merges_with_stored_fields(client):
    client.patch("/api/me/health-profile", json={"age": 42, "heightCm": 168, "conditions": ["asthma"]})

    body = client.patch("/api/me/health-profile", json={"weightKg": 70, "age": None}).json()

    assert body["healthProfile"]["age"] == 42
    assert body["healthProfile"]["conditions"] == ["asthma"]
    assert body["healthProfileStatus"]["isComplete"] is True


def test_skip_hides_onboarding_until_next_update(client):
    skipped = client.post("/api/me/health-profile/skip")
    assert skipped.status_code == 200
    status = skipped.json()["healthProfileStatus"]
    assert status["skippedAt"] is not None
    assert status["isComplete"] is False
    assert client.get("/api/me").json()["showOnboarding"] is False

    client.patch("/api/me/health-profile", json={"age": 30})

    me = client.get("/api/me").json()
    assert me["healthProfileStatus"]["skippedAt"] is None
    assert me["showOnboarding"] is True


def test_skip_keeps_profile(client):
    client.patch("/api/me/health-profile", json={"age": 42})
    client.post("/api/me/health-profile/skip")

    assert client.get("/api/me").json()["healthProfile"]["age"] == 42


def test_profile_validation(client):
    for body in ({"age": 0}, {"age": 151}, {"heightCm": 20}, {"weightKg": 600},
                 {"sex": "unknown"}, {"activityLevel": "extreme"}, {"allergies": "peanuts"}):
        response = client.patch("/api/me/health-profile", json=body)
        assert response.status_code == 400, body


def test_unknown_profile_fields_are_ignored(client):
    response = client.patch("/api/me/health-profile", json={"age": 30, "favouriteColour": "blue"})
    assert response.status_code == 200
    assert "favouriteColour" not in response.json()["healthProfile"]


def test_profile_is_encrypted_at_rest(client):
    client.patch("/api/me/health-profile", json={"age": 42, "conditions": ["asthma"]})

    db = TestingSessionLocal()
    try:
        stored = db.execute(text("SELECT health_profile FROM users")).scalar()
        assert b"asthma" not in bytes(stored)
        assert db.query(models.User).one().health_profile["conditions"] == ["asthma"]
    finally:
        db.close()


def test_empty_profile_update_still_clears_skip(client):
    client.post("/api/me/health-profile/skip")

    body = client.patch("/api/me/health-profile", json={}).json()

    assert body["healthProfileStatus"]["skippedAt"] is None
    assert body["healthProfileStatus"]["lastUpdated"] is not None
    assert client.get("/api/me").json()["showOnboarding"] is True


def test_skip_never_changes_completion(client):
    client.patch("/api/me/health-profile", json={"age": 42, "heightCm": 168, "weightKg": 61.5})

    status = client.post("/api/me/health-profile/skip").json()["healthProfileStatus"]

    assert status["isComplete"] is True
    assert status["skippedAt"] is not None
    assert client.get("/api/me").json()["healthProfileStatus"]["isComplete"] is True
