"""gateway 测试配置 -- FastAPI app + httpx AsyncClient"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from loadledger.core.store import StoreGroup


@pytest_asyncio.fixture
async def test_app(tmp_db_path: Path, store_group: StoreGroup):
    os.environ["LOADLEDGER_DB_PATH"] = str(tmp_db_path)

    from loadledger.gateway.main import create_app

    app = create_app()

    # 手动初始化（绕过 lifespan）
    app.state.store_group = store_group

    yield app

    os.environ.pop("LOADLEDGER_DB_PATH", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
