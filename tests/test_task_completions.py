from datetime import date


def test_completion_date_defaults_to_today(create):
    task = create("/api/tasks", {"title": "Collect scrap"})

    completion = create("/api/task-completions", {"task_id": task["id"]})

    assert completion["date"] == date.today().isoformat()
    assert completion["completed"] is False
    assert completion["amount_collected"] == 0
    assert completion["noted_by"]


def test_same_day_logs_are_kept_separately(client, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    member = create("/api/members", {"name": "Carl"})
    for amount in (10, 15):
        create("/api/task-completions", {
            "task_id": task["id"], "member_id": member["id"], "date": "2024-05-01",
            "amount_collected": amount, "completed": amount >= 15,
        })

    rows = client.get("/api/task-completions").json()
    daily = client.get("/api/task-completions/daily").json()

    assert len(rows) == 2
    assert daily == [{
        "task_id": task["id"],
        "member_id": member["id"],
        "date": "2024-05-01",
        "entries": 2,
        "completed_count": 1,
        "total_collected": 25,
    }]


def test_invalid_date_is_rejected(client, admin_headers, create):
    task = create("/api/tasks", {"title": "Collect scrap"})

    response = client.post(
        "/api/task-completions", json={"task_id": task["id"], "date": "yesterday"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("date")


def test_list_is_capped_by_limit(client, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    for _ in range(3):
        create("/api/task-completions", {"task_id": task["id"]})

    assert len(client.get("/api/task-completions", params={"limit": 2}).json()) == 2
    assert client.get("/api/task-completions", params={"limit": 0}).status_code == 400


def test_history_groups_by_member(client, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    carl = create("/api/members", {"name": "Carl"})
    sweet = create("/api/members", {"name": "Sweet"})
    create("/api/members", {"name": "Idle"})
    create("/api/task-completions", {"task_id": task["id"], "member_id": carl["id"], "amount_collected": 5, "completed": True})
    create("/api/task-completions", {"task_id": task["id"], "member_id": carl["id"], "amount_collected": 7})
    create("/api/task-completions", {"task_id": task["id"], "member_id": sweet["id"], "amount_collected": 1})

    history = client.get("/api/task-completions/history").json()

    assert [entry["member"]["name"] for entry in history] == ["Carl", "Sweet"]
    assert history[0]["completed_count"] == 1
    assert history[0]["total_collected"] == 12
    assert len(history[0]["completions"]) == 2


def test_patch_completion(client, admin_headers, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    completion = create("/api/task-completions", {"task_id": task["id"], "date": "2024-05-01"})

    updated = client.patch(
        "/api/task-completions",
        json={"id": completion["id"], "completed": True, "date": "2024-05-02"},
        headers=admin_headers,
    ).json()[0]

    assert updated["completed"] is True
    assert updated["date"] == "2024-05-02"


def test_completed_cannot_be_nulled(client, admin_headers, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    completion = create("/api/task-completions", {"task_id": task["id"]})

    response = client.patch(
        "/api/task-completions", json={"id": completion["id"], "completed": None}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "completed cannot be null"}


def test_delete_completion(client, admin_headers, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    completion = create("/api/task-completions", {"task_id": task["id"]})

    assert client.delete(f"/api/task-completions/{completion['id']}", headers=admin_headers).status_code == 204
    assert client.get("/api/task-completions").json() == []


def test_anonymous_edit_keeps_original_noter(client, create, monkeypatch):
    from fundmanager.config import settings

    task = create("/api/tasks", {"title": "Collect scrap"})
    completion = create("/api/task-completions", {"task_id": task["id"]})
    monkeypatch.setattr(settings, "require_admin_for_writes", False)

    updated = client.patch("/api/task-completions", json={"id": completion["id"], "amount_collected": 9}).json()[0]

    assert updated["amount_collected"] == 9
    assert updated["noted_by"] == completion["noted_by"]
