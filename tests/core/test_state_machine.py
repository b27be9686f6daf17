"""状态机流转单元测试

测试内容：
1. 合法流转通过
2. 非法流转被拒绝
3. 终态不可再流转
"""

import pytest
from loadledger.core.models.enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    TaskStatus,
    validate_transition,
)


class TestStateMachineTransitions:
    """状态机流转验证"""

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (TaskStatus.NEW, TaskStatus.IN_PROGRESS),
            (TaskStatus.NEW, TaskStatus.CANCELLED),
            (TaskStatus.IN_PROGRESS, TaskStatus.CLOSED),
            (TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED),
        ],
    )
    def test_valid_transition(self, from_status: TaskStatus, to_status: TaskStatus):
        assert validate_transition(from_status, to_status) is True

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (TaskStatus.NEW, TaskStatus.NEW),
            (TaskStatus.NEW, TaskStatus.CLOSED),
            (TaskStatus.IN_PROGRESS, TaskStatus.NEW),
            (TaskStatus.IN_PROGRESS, TaskStatus.IN_PROGRESS),
        ],
    )
    def test_invalid_transition(self, from_status: TaskStatus, to_status: TaskStatus):
        """不允许回退或原地流转"""
        assert validate_transition(from_status, to_status) is False

    def test_terminal_states_cannot_transition(self):
        for terminal in TERMINAL_STATES:
            assert VALID_TRANSITIONS[terminal] == set()
            for target in TaskStatus:
                assert validate_transition(terminal, target) is False, (
                    f"终态 {terminal} 不应能流转到 {target}"
                )

    def test_valid_transitions_completeness(self):
        for state in TaskStatus:
            assert state in VALID_TRANSITIONS, f"{state} 未在 VALID_TRANSITIONS 中定义"
