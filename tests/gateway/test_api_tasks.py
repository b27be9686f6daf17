"""任务查询路由测试 -- 抬头、汇总、执行页面、操作历史、物料目录"""

import uuid

from httpx import AsyncClient


async def _add(client: AsyncClient, seed, delta: int, material_id: str | None = None):
    resp = await client.post(
        f"/api/tasks/{seed.task_id}/materials/{material_id or seed.material_id}/delta",
        json={"action_id": str(uuid.uuid4()), "delta": delta},
        headers={"X-Actor-Id": seed.operator_id},
    )
    assert resp.status_code == 200
    return resp


class TestTaskHeader:
    async def test_header(self, client: AsyncClient, seed):
        resp = await client.get(f"/api/tasks/{seed.task_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["task_no"] == "T-0001"
        assert data["status"] == "NEW"
        assert data["vehicle_plate"] == "WA 12345"

    async def test_header_not_found(self, client: AsyncClient, seed):
        resp = await client.get(f"/api/tasks/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.json()["ok"] is False


class TestSummaries:
    async def test_global_summary(self, client: AsyncClient, started):
        await _add(client, started, 3)

        resp = await client.get(f"/api/tasks/{started.task_id}/summary")
        assert resp.status_code == 200
        items = resp.json()["items"]
        assert [i["number"] for i in items] == [10, 20]
        assert (items[0]["plan"], items[0]["current"]) == (5, 8)
        assert "before" not in items[0]

    async def test_session_summary_uses_query_actor(self, client: AsyncClient, started):
        await client.post(
            f"/api/tasks/{started.task_id}/sessions",
            headers={"X-Actor-Id": started.operator_id},
        )
        await _add(client, started, 2)

        resp = await client.get(
            f"/api/tasks/{started.task_id}/sessions/summary",
            params={"actorId": started.operator_id},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] is not None
        row = data["items"][0]
        assert (row["before"], row["added"], row["current"]) == (5, 2, 7)

    async def test_session_summary_explicit_session(self, client: AsyncClient, started):
        first = await client.post(
            f"/api/tasks/{started.task_id}/sessions",
            headers={"X-Actor-Id": started.operator_id},
        )
        await _add(client, started, 2)
        await client.post(
            f"/api/tasks/{started.task_id}/sessions",
            headers={"X-Actor-Id": started.operator_id},
        )

        session_id = first.json()["session_id"]
        resp = await client.get(
            f"/api/tasks/{started.task_id}/sessions/summary",
            params={"session_id": session_id},
            headers={"X-Actor-Id": started.operator_id},
        )
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["items"][0]["added"] == 2

    async def test_session_summary_requires_actor(self, client: AsyncClient, started):
        resp = await client.get(f"/api/tasks/{started.task_id}/sessions/summary")
        assert resp.status_code == 403


class TestExecutionView:
    async def test_execute_opens_session(self, client: AsyncClient, started):
        resp = await client.get(
            f"/api/tasks/{started.task_id}/execute",
            headers={"X-Actor-Id": started.operator_id},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["header"]["id"] == started.task_id
        assert data["session_id"] is not None
        assert data["items"][0]["before"] == 5

    async def test_execute_unknown_actor_falls_back(self, client: AsyncClient, started):
        resp = await client.get(
            f"/api/tasks/{started.task_id}/execute",
            headers={"X-Actor-Id": str(uuid.uuid4())},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] is None
        assert data["items"][0]["current"] == 5

    async def test_execute_unknown_task(self, client: AsyncClient, seed):
        resp = await client.get(
            f"/api/tasks/{uuid.uuid4()}/execute",
            headers={"X-Actor-Id": seed.operator_id},
        )
        assert resp.status_code == 404


class TestMaterialHistory:
    async def test_history_and_meta(self, client: AsyncClient, started):
        await _add(client, started, 1)
        await _add(client, started, 4, started.second_material_id)

        resp = await client.get(f"/api/tasks/{started.task_id}/material-history")
        assert resp.status_code == 200
        data = resp.json()
        assert data["meta"] == {"limit": 50, "count": 2}
        first = data["items"][0]
        assert first["delta"] == 4
        assert first["actor_name"] == "op1"
        assert first["material_name"] == "Pallet EUR"

    async def test_history_limit_clamped(self, client: AsyncClient, started):
        await _add(client, started, 1)

        resp = await client.get(
            f"/api/tasks/{started.task_id}/material-history", params={"limit": "9999"}
        )
        assert resp.json()["meta"]["limit"] == 200

        resp = await client.get(
            f"/api/tasks/{started.task_id}/material-history", params={"limit": "abc"}
        )
        assert resp.json()["meta"]["limit"] == 50

    async def test_history_unknown_task(self, client: AsyncClient, seed):
        resp = await client.get(f"/api/tasks/{uuid.uuid4()}/material-history")
        assert resp.status_code == 404


class TestMaterials:
    async def test_list_materials(self, client: AsyncClient, seed):
        resp = await client.get("/api/materials")
        assert resp.status_code == 200
        materials = resp.json()["materials"]
        assert [m["number"] for m in materials] == [5, 10, 20]
        assert materials[0]["active"] is False
