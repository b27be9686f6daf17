"""TaskExecutionService 补充操作测试 -- 历史、目录、执行页面"""

import uuid

import pytest
from loadledger.core.errors import ExecutionError
from loadledger.core.models import DeltaRequest, ErrorKind, SessionSummaryItem
from loadledger.core.service import clamp_history_limit


def _add(seed, delta, material_id=None):
    return DeltaRequest(
        action_id=str(uuid.uuid4()),
        task_id=seed.task_id,
        material_id=material_id or seed.material_id,
        actor_id=seed.operator_id,
        delta=delta,
    )


class TestClampHistoryLimit:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 50),
            ("abc", 50),
            (0, 50),
            (-5, 50),
            ("10", 10),
            (200, 200),
            (500, 200),
        ],
    )
    def test_clamp(self, raw, expected):
        assert clamp_history_limit(raw) == expected


class TestMaterialHistory:
    async def test_history_newest_first(self, service, started):
        await service.apply_delta(_add(started, 1))
        await service.apply_delta(_add(started, 2, started.second_material_id))
        await service.apply_delta(_add(started, 3))

        history = await service.list_material_history(started.task_id)
        assert [h.delta for h in history] == [3, 2, 1]
        assert history[1].material_id == started.second_material_id

    async def test_history_limit(self, service, started):
        for _ in range(3):
            await service.apply_delta(_add(started, 1))

        history = await service.list_material_history(started.task_id, limit=2)
        assert len(history) == 2

    async def test_history_unknown_task(self, service, seed):
        with pytest.raises(ExecutionError) as exc_info:
            await service.list_material_history(str(uuid.uuid4()))
        assert exc_info.value.kind == ErrorKind.NOT_FOUND


class TestListMaterials:
    async def test_includes_inactive_ordered_by_number(self, service, seed):
        materials = await service.list_materials()
        assert [m.number for m in materials] == [5, 10, 20]
        assert materials[0].active is False


class TestExecutionView:
    async def test_known_actor_opens_session(self, service, store_group, started):
        view = await service.open_execution_view(started.task_id, started.operator_id)

        assert view.header.id == started.task_id
        assert view.actor_id == started.operator_id
        assert view.session_id is not None
        assert all(isinstance(i, SessionSummaryItem) for i in view.items)

        async with store_group.snapshot() as uow:
            latest = await uow.session_store.get_latest_session(
                started.task_id, started.operator_id
            )
        assert latest.id == view.session_id

    async def test_each_visit_opens_new_session(self, service, started):
        first = await service.open_execution_view(started.task_id, started.operator_id)
        await service.apply_delta(_add(started, 2))
        second = await service.open_execution_view(started.task_id, started.operator_id)

        assert first.session_id != second.session_id
        row = next(i for i in second.items if i.material_id == started.material_id)
        assert (row.before, row.added, row.current) == (7, 0, 7)

    async def test_unknown_actor_falls_back(self, service, started):
        view = await service.open_execution_view(started.task_id, str(uuid.uuid4()))
        assert view.session_id is None
        assert len(view.items) == 2
        assert not any(isinstance(i, SessionSummaryItem) for i in view.items)

    async def test_no_actor_falls_back(self, service, started):
        view = await service.open_execution_view(started.task_id, None)
        assert view.actor_id is None
        assert view.session_id is None

    async def test_unknown_task(self, service, seed):
        with pytest.raises(ExecutionError) as exc_info:
            await service.open_execution_view(str(uuid.uuid4()), seed.operator_id)
        assert exc_info.value.kind == ErrorKind.NOT_FOUND
