"""枚举定义 -- 任务状态机、执行项来源、领域错误类别

包含 TaskStatus 状态机、VALID_TRANSITIONS 合法流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态机

    状态只能单向推进，核心层不提供重新打开。
    """

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"

    # 终态（由计划/调度侧推进）
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.NEW: {TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED},
    TaskStatus.IN_PROGRESS: {TaskStatus.CLOSED, TaskStatus.CANCELLED},
    # 终态不可再流转
    TaskStatus.CLOSED: set(),
    TaskStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {
    TaskStatus.CLOSED,
    TaskStatus.CANCELLED,
}


class ExecSource(StrEnum):
    """执行项来源"""

    PLAN = "PLAN"


class ErrorKind(StrEnum):
    """领域错误类别 -- 由边界层映射为传输层状态码"""

    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
