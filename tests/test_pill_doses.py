from conftest import make_medication, make_supplement

DAY = "2024-05-06"


def generate(client, date=DAY, headers=None):
    response = client.post("/api/pill-doses/generate", json={"date": date}, headers=headers or {})
    assert response.status_code == 200, response.text
    return response.json()


def test_generate_creates_pending_dose_per_active_pill(client):
    medication = make_medication(client)
    supplement = make_supplement(client, timeBlock="evening")
    make_medication(client, name="Old prescription", active=False)

    doses = generate(client)

    keys = {(d["pillType"], d["pillId"], d["scheduledTimeBlock"]) for d in doses}
    assert keys == {
        ("medication", medication["id"], "morning"),
        ("supplement", supplement["id"], "evening"),
    }
    assert all(d["status"] == "pending" for d in doses)
    assert all(d["scheduledDate"] == DAY for d in doses)
    assert all(d["takenAt"] is None and d["snoozedUntil"] is None for d in doses)


def test_generate_is_idempotent(client):
    make_medication(client)
    make_supplement(client)

    first = generate(client)
    second = generate(client)

    assert sorted(d["id"] for d in first) == sorted(d["id"] for d in second)
    assert len(client.get("/api/pill-doses").json()) == 2


def test_generate_keeps_existing_status(client):
    make_medication(client)
    dose = generate(client)[0]
    client.patch(f"/api/pill-doses/{dose['id']}", json={"status": "taken", "takenAt": "2024-05-06T08:05:00"})

    again = generate(client)

    assert len(again) == 1
    assert again[0]["status"] == "taken"
    assert again[0]["takenAt"] == "2024-05-06T08:05:00"


def test_pill_without_time_block_defaults_to_morning(client):
    make_medication(client, timeBlock=None)

    doses = generate(client)

    assert [d["scheduledTimeBlock"] for d in doses] == ["morning"]


def test_changing_time_block_adds_a_second_dose(client):
    medication = make_medication(client)
    generate(client)

    client.patch(f"/api/medications/{medication['id']}", json={"timeBlock": "bedtime"})
    doses = generate(client)

    assert sorted(d["scheduledTimeBlock"] for d in doses) == ["bedtime", "morning"]


def test_dates_are_generated_independently(client):
    make_medication(client)
    generate(client, "2024-05-06")
    generate(client, "2024-05-07")

    assert len(client.get("/api/pill-doses").json()) == 2
    filtered = client.get("/api/pill-doses", params={"date": "2024-05-07"}).json()
    assert [d["scheduledDate"] for d in filtered] == ["2024-05-07"]


def test_generate_without_date_is_400(client):
    response = client.post("/api/pill-doses/generate", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "Date is required"


def test_generate_with_bad_date_is_400(client):
    response = client.post("/api/pill-doses/generate", json={"date": "2024-13-45"})
    assert response.status_code == 400


def test_list_with_bad_date_filter_is_400(client):
    assert client.get("/api/pill-doses", params={"date": "tomorrow"}).status_code == 400


def test_manual_create_and_duplicate_conflict(client):
    medication = make_medication(client)
    body = {
        "pillType": "medication",
        "pillId": medication["id"],
        "scheduledDate": DAY,
        "scheduledTimeBlock": "morning",
    }

    created = client.post("/api/pill-doses", json=body)
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    duplicate = client.post("/api/pill-doses", json=body)
    assert duplicate.status_code == 409

    # The generator sees the manual dose and adds nothing
    assert len(generate(client)) == 1


def test_dose_status_transitions(client):
    make_medication(client)
    dose = generate(client)[0]

    snoozed = client.patch(
        f"/api/pill-doses/{dose['id']}",
        json={"status": "snoozed", "snoozedUntil": "2024-05-06T08:15:00"},
    ).json()
    assert snoozed["status"] == "snoozed"
    assert snoozed["snoozedUntil"] == "2024-05-06T08:15:00"

    taken = client.patch(
        f"/api/pill-doses/{dose['id']}",
        json={"status": "taken", "takenAt": "2024-05-06T08:20:00", "snoozedUntil": None},
    ).json()
    assert taken["status"] == "taken"
    assert taken["takenAt"] == "2024-05-06T08:20:00"
    assert taken["snoozedUntil"] is None


def test_untaking_a_dose_clears_taken_at(client):
    make_medication(client)
    dose = generate(client)[0]
    client.patch(f"/api/pill-doses/{dose['id']}", json={"status": "taken", "takenAt": "2024-05-06T08:05:00"})

    reverted = client.patch(f"/api/pill-doses/{dose['id']}", json={"status": "pending", "takenAt": None}).json()

    assert reverted["status"] == "pending"
    assert reverted["takenAt"] is None


def test_null_status_leaves_status_unchanged(client):
    make_medication(client)
    dose = generate(client)[0]

    updated = client.patch(f"/api/pill-doses/{dose['id']}", json={"status": None}).json()

    assert updated["status"] == "pending"


def test_delete_dose(client):
    make_medication(client)
    dose = generate(client)[0]

    assert client.delete(f"/api/pill-doses/{dose['id']}").status_code == 204
    assert client.delete(f"/api/pill-doses/{dose['id']}").status_code == 404
    assert client.patch(f"/api/pill-doses/{dose['id']}", json={"status": "taken"}).status_code == 404


def test_doses_are_generated_per_user(client, other_user):
    make_medication(client)
    make_supplement(client, headers=other_user)

    mine = generate(client)
    theirs = generate(client, headers=other_user)

    assert [d["pillType"] for d in mine] == ["medication"]
    assert [d["pillType"] for d in theirs] == ["supplement"]
