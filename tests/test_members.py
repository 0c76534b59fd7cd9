def test_create_member_returns_single_row_array(client, admin_headers):
    response = client.post("/api/members", json={"name": "Carl", "tag": "CJ"}, headers=admin_headers)

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    member = rows[0]
    assert member["name"] == "Carl"
    assert member["tag"] == "CJ"
    assert member["notes"] is None
    assert member["id"]
    assert member["added_by"]
    assert member["created_at"]


def test_list_members_newest_first(client, create):
    first = create("/api/members", {"name": "Carl"})
    second = create("/api/members", {"name": "Sweet"})

    ids = [m["id"] for m in client.get("/api/members").json()]

    assert ids == [second["id"], first["id"]]


def test_create_member_requires_name(client, admin_headers):
    response = client.post("/api/members", json={"tag": "x"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}


def test_blank_name_counts_as_missing(client, admin_headers):
    response = client.post("/api/members", json={"name": "   "}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}


def test_patch_keeps_omitted_fields(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl", "tag": "CJ", "notes": "west side"})

    response = client.patch("/api/members", json={"id": member["id"], "tag": "C"}, headers=admin_headers)

    assert response.status_code == 200
    updated = response.json()[0]
    assert updated["tag"] == "C"
    assert updated["name"] == "Carl"
    assert updated["notes"] == "west side"


def test_patch_null_clears_optional_field(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl", "tag": "CJ"})

    updated = client.patch("/api/members", json={"id": member["id"], "tag": None}, headers=admin_headers).json()[0]

    assert updated["tag"] is None


def test_patch_null_on_required_field_is_rejected(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl"})

    response = client.patch("/api/members", json={"id": member["id"], "name": None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "name cannot be null"}


def test_patch_without_id_is_400(client, admin_headers):
    response = client.patch("/api/members", json={"name": "Ghost"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "id is required"}


def test_patch_unknown_id_is_404(client, admin_headers):
    response = client.patch("/api/members", json={"id": "missing", "name": "Ghost"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Member not found"}


def test_delete_is_idempotent(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl"})

    first = client.delete(f"/api/members/{member['id']}", headers=admin_headers)
    second = client.delete(f"/api/members/{member['id']}", headers=admin_headers)

    assert first.status_code == 204
    assert second.status_code == 204
    assert client.get("/api/members").json() == []


def test_delete_member_leaves_strikes_in_place(client, admin_headers, create):
    member = create("/api/members", {"name": "Ryder"})
    create("/api/strikes", {"member_id": member["id"], "points": 2})

    client.delete(f"/api/members/{member['id']}", headers=admin_headers)

    strikes = client.get("/api/strikes").json()
    assert [s["member_id"] for s in strikes] == [member["id"]]
    assert client.get("/api/strikes/summary").json() == []


def test_timestamps_are_utc(client, create):
    member = create("/api/members", {"name": "Carl"})

    listed = client.get("/api/members").json()[0]

    assert member["created_at"].endswith(("+00:00", "Z"))
    assert listed["created_at"] == member["created_at"]


def test_text_is_stored_exactly_as_sent(client, admin_headers, create):
    member = create("/api/members", {"name": " Carl ", "notes": "  indented note  "})

    assert member["name"] == " Carl "
    assert member["notes"] == "  indented note  "

    updated = client.patch(
        "/api/members", json={"id": member["id"], "tag": "\tCJ\n"}, headers=admin_headers
    ).json()[0]
    assert updated["tag"] == "\tCJ\n"
    assert client.get("/api/members").json()[0]["notes"] == "  indented note  "


def test_blank_name_rejected_on_patch(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl"})

    response = client.patch("/api/members", json={"id": member["id"], "name": "  "}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}
