from health_tracker.llm_schemas import InteractionCheckResult, InteractionFinding

from conftest import make_medication, make_supplement


def test_check_stores_findings(client, fake_ai):
    medication = make_medication(client)
    supplement = make_supplement(client)

    response = client.post("/api/interactions/check")

    assert response.status_code == 200
    interactions = response.json()
    assert len(interactions) == 1
    assert interactions[0]["medicationId"] == medication["id"]
    assert interactions[0]["supplementId"] == supplement["id"]
    assert interactions[0]["severity"] == "moderate"
    assert interactions[0]["separationMinutes"] == 120
    assert client.get("/api/interactions").json() == interactions


def test_check_replaces_previous_results(client, fake_ai):
    make_medication(client)
    make_supplement(client)
    first_ids = [i["id"] for i in client.post("/api/interactions/check").json()]

    second = client.post("/api/interactions/check").json()

    assert len(second) == 1
    assert second[0]["id"] not in first_ids


def test_only_active_pills_are_sent(client, fake_ai):
    active = make_medication(client)
    make_medication(client, name="Paused", active=False)
    make_supplement(client)

    client.post("/api/interactions/check")

    medications, supplements = fake_ai.interaction_calls[-1]
    assert [m.id for m in medications] == [active["id"]]
    assert len(supplements) == 1


def test_no_supplements_clears_interactions(client, fake_ai):
    make_medication(client)
    supplement = make_supplement(client)
    client.post("/api/interactions/check")

    client.patch(f"/api/supplements/{supplement['id']}", json={"active": False})

    assert client.post("/api/interactions/check").json() == []
    assert client.get("/api/interactions").json() == []


def test_ai_failure_clears_interactions(client, fake_ai):
    make_medication(client)
    make_supplement(client)
    assert len(client.post("/api/interactions/check").json()) == 1

    fake_ai.interaction_result = InteractionCheckResult(error="AI request failed: timeout")
    response = client.post("/api/interactions/check")

    assert response.status_code == 200
    assert response.json() == []
    assert client.get("/api/interactions").json() == []


def test_findings_for_unknown_pills_are_dropped(client, fake_ai):
    medication = make_medication(client)
    supplement = make_supplement(client)
    fake_ai.interaction_result = InteractionCheckResult(interactions=[
        InteractionFinding(
            medication_id=medication["id"], supplement_id=supplement["id"], severity="mild",
            description="Minor effect.", recommendation="Monitor.",
        ),
        InteractionFinding(
            medication_id=999, supplement_id=supplement["id"], severity="severe",
            description="Made up.", recommendation="Ignore.",
        ),
    ])

    interactions = client.post("/api/interactions/check").json()

    assert [i["severity"] for i in interactions] == ["mild"]
    assert interactions[0]["separationMinutes"] is None


def test_interactions_are_scoped_to_user(client, other_user):
    make_medication(client)
    make_supplement(client)
    client.post("/api/interactions/check")

    assert client.get("/api/interactions", headers=other_user).json() == []
    assert client.post("/api/interactions/check", headers=other_user).json() == []
    assert len(client.get("/api/interactions").json()) == 1
