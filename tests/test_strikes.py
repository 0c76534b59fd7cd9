def test_strike_points_default_to_one(create):
    member = create("/api/members", {"name": "Ryder"})

    strike = create("/api/strikes", {"member_id": member["id"], "reason": "Late"})

    assert strike["points"] == 1
    assert strike["issued_by"]


def test_points_must_be_positive(client, admin_headers, create):
    member = create("/api/members", {"name": "Ryder"})

    response = client.post("/api/strikes", json={"member_id": member["id"], "points": 0}, headers=admin_headers)

    assert response.status_code == 400


def test_summary_totals_and_risk_flag(client, create):
    ryder = create("/api/members", {"name": "Ryder"})
    carl = create("/api/members", {"name": "Carl"})
    for points in (1, 2, 3):
        create("/api/strikes", {"member_id": ryder["id"], "points": points})

    summary = client.get("/api/strikes/summary").json()

    assert [row["name"] for row in summary] == ["Ryder", "Carl"]
    assert summary[0]["strike_count"] == 3
    assert summary[0]["total_strike_points"] == 6
    assert summary[0]["at_risk"] is True
    assert summary[1]["strike_count"] == 0
    assert summary[1]["total_strike_points"] == 0
    assert summary[1]["at_risk"] is False


def test_summary_follows_strike_removal(client, admin_headers, create):
    ryder = create("/api/members", {"name": "Ryder"})
    strike = create("/api/strikes", {"member_id": ryder["id"], "points": 4})

    assert client.get("/api/strikes/summary").json()[0]["at_risk"] is True
    client.delete(f"/api/strikes/{strike['id']}", headers=admin_headers)

    row = client.get("/api/strikes/summary").json()[0]
    assert row["total_strike_points"] == 0
    assert row["at_risk"] is False


def test_filter_strikes_by_member(client, create):
    ryder = create("/api/members", {"name": "Ryder"})
    carl = create("/api/members", {"name": "Carl"})
    create("/api/strikes", {"member_id": ryder["id"]})
    create("/api/strikes", {"member_id": carl["id"]})

    strikes = client.get("/api/strikes", params={"member_id": carl["id"]}).json()

    assert [s["member_id"] for s in strikes] == [carl["id"]]


def test_patch_strike_reason(client, admin_headers, create):
    ryder = create("/api/members", {"name": "Ryder"})
    strike = create("/api/strikes", {"member_id": ryder["id"], "reason": "Late"})

    updated = client.patch("/api/strikes", json={"id": strike["id"], "reason": None}, headers=admin_headers).json()[0]

    assert updated["reason"] is None
    assert updated["points"] == 1
