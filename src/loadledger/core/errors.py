"""领域错误 -- 三类可由调用方恢复的失败

NOT_FOUND / FORBIDDEN / CONFLICT 是一个封闭集合，用同一个异常类型携带类别，
由边界层映射为传输层状态码。其他异常一律视为内部故障。
"""

from .models.enums import ErrorKind


class ExecutionError(Exception):
    """任务执行领域错误"""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        """
        Args:
            kind: 错误类别
            message: 可展示给调用方的描述
        """
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def not_found(cls, message: str) -> "ExecutionError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def forbidden(cls, message: str) -> "ExecutionError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def conflict(cls, message: str) -> "ExecutionError":
        return cls(ErrorKind.CONFLICT, message)

    def __repr__(self) -> str:
        return f"ExecutionError({self.kind.value}, {self.message!r})"
