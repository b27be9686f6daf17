"""全局 pytest 配置 -- 临时 SQLite 数据库 + 种子数据 fixture"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import pytest_asyncio
from loadledger.core.models import Actor, Material, PlanItem, Task, TaskStatus
from loadledger.core.service import TaskExecutionService
from loadledger.core.store import StoreGroup, create_store_group


@dataclass
class Seed:
    """种子数据 ID 集合

    task 指派给 operator；计划：material=5，second_material=2。
    inactive_material 停用，不在计划中。
    """

    task_id: str
    operator_id: str
    other_operator_id: str
    material_id: str
    second_material_id: str
    inactive_material_id: str


def new_id() -> str:
    return str(uuid.uuid4())


async def seed_catalog_and_task(
    store_group: StoreGroup,
    status: TaskStatus = TaskStatus.NEW,
) -> Seed:
    """写入两个操作者、三个物料和一个带计划项的任务"""
    seed = Seed(
        task_id=new_id(),
        operator_id=new_id(),
        other_operator_id=new_id(),
        material_id=new_id(),
        second_material_id=new_id(),
        inactive_material_id=new_id(),
    )
    async with store_group.transaction() as uow:
        await uow.catalog_store.create_actor(Actor(id=seed.operator_id, login="op1"))
        await uow.catalog_store.create_actor(Actor(id=seed.other_operator_id, login="op2"))
        # 故意乱序写入，验证按 number 排序
        await uow.catalog_store.create_material(
            Material(id=seed.second_material_id, number=20, name="Pallet EUR")
        )
        await uow.catalog_store.create_material(
            Material(id=seed.material_id, number=10, name="Crate 600x400")
        )
        await uow.catalog_store.create_material(
            Material(id=seed.inactive_material_id, number=5, name="Old box", active=False)
        )
        await uow.task_store.create_task(
            Task(
                id=seed.task_id,
                task_no="T-0001",
                status=status,
                operator_id=seed.operator_id,
                vehicle_plate="WA 12345",
                created_at=datetime.now(UTC),
            )
        )
        await uow.task_store.add_plan_item(
            PlanItem(task_id=seed.task_id, material_id=seed.material_id, qty=5)
        )
        await uow.task_store.add_plan_item(
            PlanItem(task_id=seed.task_id, material_id=seed.second_material_id, qty=2)
        )
    return seed


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> StoreGroup:
    """提供已初始化 schema 的 StoreGroup"""
    return await create_store_group(str(tmp_db_path))


@pytest_asyncio.fixture
async def service(store_group: StoreGroup) -> TaskExecutionService:
    return TaskExecutionService(store_group)


@pytest_asyncio.fixture
async def seed(store_group: StoreGroup) -> Seed:
    """NEW 状态的任务与目录数据"""
    return await seed_catalog_and_task(store_group)


@pytest_asyncio.fixture
async def started(service: TaskExecutionService, seed: Seed) -> Seed:
    """已由指派操作员开始的任务"""
    await service.start_task(seed.task_id, seed.operator_id)
    return seed
