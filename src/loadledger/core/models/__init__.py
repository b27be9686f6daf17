"""loadledger Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .action import ExecAction
from .catalog import Actor, Material
from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ErrorKind,
    ExecSource,
    TaskStatus,
    validate_transition,
)
from .results import (
    DeltaRequest,
    DeltaResult,
    ExecutionView,
    MaterialHistoryItem,
    SessionResult,
    SessionSummaryItem,
    SessionSummaryResult,
    StartResult,
    SummaryItem,
    SummaryResult,
)
from .session import OperatorSession, OperatorSnapshot
from .task import ExecItem, PlanItem, Task, TaskHeader

__all__ = [
    # 枚举
    "TaskStatus",
    "ExecSource",
    "ErrorKind",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # Task
    "Task",
    "TaskHeader",
    "PlanItem",
    "ExecItem",
    # Catalog
    "Material",
    "Actor",
    # Ledger
    "ExecAction",
    # Session
    "OperatorSession",
    "OperatorSnapshot",
    # Results
    "DeltaRequest",
    "StartResult",
    "DeltaResult",
    "SessionResult",
    "SummaryItem",
    "SessionSummaryItem",
    "SummaryResult",
    "SessionSummaryResult",
    "MaterialHistoryItem",
    "ExecutionView",
]
