def test_reminder_crud(client):
    created = client.post(
        "/api/reminders",
        json={"title": "Evening walk", "time": "18:30", "days": ["monday", "friday"], "type": "activity"},
    )
    assert created.status_code == 201
    reminder = created.json()
    assert reminder["enabled"] is True
    assert reminder["relatedId"] is None

    assert client.get(f"/api/reminders/{reminder['id']}").json()["title"] == "Evening walk"

    updated = client.patch(f"/api/reminders/{reminder['id']}", json={"enabled": False, "days": ["sunday"]}).json()
    assert updated["enabled"] is False
    assert updated["days"] == ["sunday"]
    assert updated["time"] == "18:30"

    assert client.delete(f"/api/reminders/{reminder['id']}").status_code == 204
    assert client.get("/api/reminders").json() == []


def test_reminder_validation(client):
    base = {"title": "Pills", "time": "08:00", "days": ["monday"], "type": "medication"}
    for override in ({"time": "8am"}, {"days": ["funday"]}, {"type": "meal"}):
        response = client.post("/api/reminders", json={**base, **override})
        assert response.status_code == 400, override


def test_missing_reminder_is_404(client):
    response = client.patch("/api/reminders/77", json={"enabled": False})
    assert response.status_code == 404
    assert response.json()["detail"] == "Reminder not found"


def test_pill_stack_crud(client):
    created = client.post(
        "/api/pill-stacks",
        json={"name": "Morning Stack", "timeBlock": "morning", "scheduledTime": "08:00"},
    )
    assert created.status_code == 201
    stack = created.json()
    assert stack["timeBlock"] == "morning"
    assert stack["description"] is None

    updated = client.patch(f"/api/pill-stacks/{stack['id']}", json={"description": "With breakfast"}).json()
    assert updated["description"] == "With breakfast"
    assert updated["name"] == "Morning Stack"

    assert [s["id"] for s in client.get("/api/pill-stacks").json()] == [stack["id"]]
    assert client.delete(f"/api/pill-stacks/{stack['id']}").status_code == 204
    assert client.get(f"/api/pill-stacks/{stack['id']}").status_code == 404


def test_deleting_a_stack_leaves_pills_untouched(client):
    stack = client.post("/api/pill-stacks", json={"name": "Evening", "timeBlock": "evening"}).json()
    medication = client.post(
        "/api/medications",
        json={"name": "Statin", "dosage": "20mg", "frequency": "Daily", "stackId": stack["id"]},
    ).json()

    client.delete(f"/api/pill-stacks/{stack['id']}")

    assert client.get(f"/api/medications/{medication['id']}").json()["stackId"] == stack["id"]


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_null_enabled_on_patch_is_ignored(client):
    reminder = client.post(
        "/api/reminders", json={"title": "Pills", "time": "08:00", "days": ["monday"], "type": "medication"},
    ).json()

    updated = client.patch(f"/api/reminders/{reminder['id']}", json={"enabled": None, "days": None}).json()

    assert updated["enabled"] is True
    assert updated["days"] == ["monday"]
