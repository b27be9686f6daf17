"""CLI 入口模块 -- python -m loadledger.core <command>

支持的命令：
  init-db              创建/升级 SQLite schema
  summary <task_id>    打印任务的全局汇总
"""

import asyncio
import sys

from .config import get_db_path
from .errors import ExecutionError


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m loadledger.core <command>")
        print("命令:")
        print("  init-db              创建/升级 SQLite schema")
        print("  summary <task_id>    打印任务的全局汇总")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "summary":
        if len(sys.argv) < 3:
            print("用法: python -m loadledger.core summary <task_id>")
            sys.exit(1)
        asyncio.run(print_summary(sys.argv[2]))
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, summary")
        sys.exit(1)


async def init_database() -> None:
    """执行 schema 初始化"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")
    await create_store_group(db_path)
    print("schema 已就绪")


async def print_summary(task_id: str) -> None:
    """打印 plan / current 两列汇总"""
    from .service import TaskExecutionService
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    service = TaskExecutionService(store_group)

    try:
        header = await service.get_task_header(task_id)
    except ExecutionError as e:
        print(f"错误: {e.message}")
        sys.exit(1)
    summary = await service.get_task_exec_summary(task_id)

    print(f"任务 {header.task_no} [{header.status}]")
    for item in summary.items:
        print(f"  #{item.number:<4} {item.name:<30} plan={item.plan:<5} current={item.current}")


if __name__ == "__main__":
    main()
