"""Dashboard — verifies tenant-scoped figures through the API.

Invariants:
    - Figures only count the caller's tenant
    - Subtasks never count toward task figures
    - The period/startDate/endDate window narrows task figures only
    - Top goals/objectives are the Urgent ones with their task completion share
"""


async def _post(client, kind: str, **body) -> dict:
    res = await client.post(f"/api/v1/{kind}", json=body)
    assert res.status_code == 201, res.text
    return res.json()


async def test_summary_rates(client, other_tenant, headers_for):
    done = (await _post(client, "tasks", title="Done", status="Completed"))["task"]
    await _post(client, "tasks", title="Open")
    await client.post("/api/v1/tasks", json={
        "title": "Child", "parentId": done["id"],
        "parentStatus": "Completed", "parentProgress": 100,
    })
    await _post(client, "risks", title="Mitigated", status="Completed")
    await client.post(
        "/api/v1/tasks", json={"title": "Theirs", "status": "Completed"},
        headers=headers_for(other_tenant),
    )

    summary = (await client.get("/api/v1/dashboard/summary")).json()["summary"]
    cards = {card["name"]: card for card in summary}
    tasks = cards["Tasks Completion Rate"]
    assert (tasks["count"], tasks["progress"]) == (2, "50%")
    assert cards["Resolved / Challenges"]["progress"] == "0%"
    assert cards["Mitigated / Risks"]["progress"] == "100%"


async def test_progress_within_period(client):
    period = await _post(client, "periods", name="Sprint 9")
    await _post(client, "tasks", title="Reviewing", status="In review", periodId=period["id"])
    await _post(client, "tasks", title="Finished", status="Completed", periodId=period["id"])
    await _post(client, "tasks", title="Backlog")

    res = await client.get("/api/v1/dashboard/progress", params={"period": period["id"]})
    assert res.status_code == 200
    body = res.json()
    assert body["inProgress"]["value"] == 50
    assert body["completed"]["value"] == 50
    assert body["notStarted"]["value"] == 0


async def test_top_goals_are_urgent_with_task_share(client):
    urgent = await _post(client, "goals", title="Urgent goal", priority="Urgent")
    await _post(client, "goals", title="Calm goal", priority="Low")
    await _post(client, "tasks", title="A", goalId=urgent["id"], status="Completed")
    await _post(client, "tasks", title="B", goalId=urgent["id"])

    top = (await client.get("/api/v1/dashboard/top-goals")).json()
    assert top == [{
        "id": urgent["id"], "title": "Urgent goal", "priority": "Urgent", "progress": 50,
    }]


async def test_top_objectives_respect_date_window(client):
    objective = await _post(client, "objectives", title="Urgent objective", priority="Urgent")
    await _post(client, "tasks", title="Early", objectiveId=objective["id"],
                status="Completed", endDate=1_000)
    await _post(client, "tasks", title="Late", objectiveId=objective["id"], endDate=9_000)

    top = (await client.get("/api/v1/dashboard/top-objectives", params={"endDate": "5000"})).json()
    assert [(o["title"], o["progress"]) for o in top] == [("Urgent objective", 100)]


async def test_malformed_period_is_400(client):
    res = await client.get("/api/v1/dashboard/progress", params={"period": "nope"})
    assert res.status_code == 400
