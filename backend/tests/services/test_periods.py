"""Periods — verifies lifecycle, the active period, and the completion cascade.

Invariants:
    - Completing a period archives its Completed tasks in place
    - Every other task of the period (including status NULL) returns to the backlog
    - Completion is idempotent
"""

from uuid import UUID

from sqlalchemy import select

from iperformance.models import Task


async def _period(client, **body) -> dict:
    res = await client.post("/api/v1/periods", json=body)
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_mints_code(client):
    period = await _period(client, name="Sprint 1")
    assert period["code"] == "PR-1"
    assert period["status"] == "Not started"


async def test_duplicate_name_is_409(client):
    await _period(client, name="Sprint 1")
    res = await client.post("/api/v1/periods", json={"name": "Sprint 1"})
    assert res.status_code == 409


async def test_active_period(client):
    assert (await client.get("/api/v1/periods/active")).json() == {}
    await _period(client, name="Idle")
    running = await _period(client, name="Running", status="In progress")
    assert (await client.get("/api/v1/periods/active")).json()["id"] == running["id"]


async def test_malformed_period_id_is_400(client):
    assert (await client.get("/api/v1/periods/not-a-uuid")).status_code == 400


async def test_update_recomputes_days_left(client):
    period = await _period(client, name="Sprint 2")
    res = await client.patch(f"/api/v1/periods/{period['id']}", json={
        "startDate": 4_102_444_800_000,
        "endDate": 4_102_444_800_000 + 5 * 86_400_000,
    })
    body = res.json()
    assert body["daysLeft"] == 5
    assert body["updatedAt"] is not None


async def test_null_description_rejected(client):
    period = await _period(client, name="Sprint 4", description="two weeks")
    res = await client.patch(f"/api/v1/periods/{period['id']}", json={"description": None})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_newest_first(client):
    await _period(client, name="A")
    await _period(client, name="B")
    names = [p["name"] for p in (await client.get("/api/v1/periods")).json()["periods"]]
    assert sorted(names) == ["A", "B"]


async def test_complete_period_cascade(client, tenant, test_session_factory):
    period = await _period(client, name="Sprint 3", status="In progress")
    done = (await client.post("/api/v1/tasks", json={
        "title": "Shipped", "status": "Completed", "periodId": period["id"],
    })).json()["task"]
    (await client.post("/api/v1/tasks", json={
        "title": "Unfinished", "status": "In progress", "periodId": period["id"],
    })).json()
    async with test_session_factory() as db:
        db.add(Task(
            company_domain=tenant.company_domain, code="TS-99", title="Legacy",
            status=None, period_id=UUID(period["id"]),
        ))
        await db.commit()

    res = await client.post(f"/api/v1/periods/{period['id']}/complete")
    assert res.status_code == 200
    body = res.json()
    assert body["period"]["status"] == "Completed"
    assert (body["archivedTasks"], body["movedToBacklog"]) == (1, 2)

    archived = (await client.get(
        "/api/v1/tasks", params={"period": period["id"], "view": "archived"},
    )).json()
    assert [t["id"] for t in archived["tasks"]] == [done["id"]]
    backlog = (await client.get("/api/v1/tasks")).json()
    assert sorted(t["title"] for t in backlog["tasks"]) == ["Legacy", "Unfinished"]

    again = (await client.post(f"/api/v1/periods/{period['id']}/complete")).json()
    assert again["movedToBacklog"] == 0

    async with test_session_factory() as db:
        kept = (await db.execute(
            select(Task).where(Task.id == UUID(done["id"])),
        )).scalar_one()
    assert str(kept.period_id) == period["id"]
