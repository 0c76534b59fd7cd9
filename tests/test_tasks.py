def test_task_defaults(create):
    task = create("/api/tasks", {"title": "Collect scrap"})

    assert task["recurrence"] == "daily"
    assert task["required_amount"] == 0
    assert task["assigned_member_id"] is None
    assert task["created_by"]


def test_task_rejects_unknown_recurrence(client, admin_headers):
    response = client.post("/api/tasks", json={"title": "X", "recurrence": "weekly"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("recurrence")


def test_filter_tasks_by_assignee(client, create):
    member = create("/api/members", {"name": "Carl"})
    mine = create("/api/tasks", {"title": "Collect scrap", "assigned_member_id": member["id"]})
    create("/api/tasks", {"title": "Sweep"})

    tasks = client.get("/api/tasks", params={"assigned_member_id": member["id"]}).json()

    assert [t["id"] for t in tasks] == [mine["id"]]


def test_unassign_task_with_null(client, admin_headers, create):
    member = create("/api/members", {"name": "Carl"})
    task = create("/api/tasks", {"title": "Collect scrap", "assigned_member_id": member["id"]})

    updated = client.patch(
        "/api/tasks", json={"id": task["id"], "assigned_member_id": None}, headers=admin_headers
    ).json()[0]

    assert updated["assigned_member_id"] is None
    assert updated["title"] == "Collect scrap"


def test_delete_task_keeps_completions(client, admin_headers, create):
    task = create("/api/tasks", {"title": "Collect scrap"})
    create("/api/task-completions", {"task_id": task["id"], "amount_collected": 5})

    assert client.delete(f"/api/tasks/{task['id']}", headers=admin_headers).status_code == 204

    assert client.get("/api/tasks").json() == []
    assert len(client.get("/api/task-completions").json()) == 1
