"""输入校验单元测试 -- UUID 形状与增量解析"""

import uuid

import pytest
from loadledger.core.errors import ExecutionError
from loadledger.core.models import ErrorKind
from loadledger.core.validation import check_delta_bounds, is_uuid, parse_delta


class TestIsUuid:
    def test_uuid4_accepted(self):
        assert is_uuid(str(uuid.uuid4())) is True

    def test_uppercase_accepted(self):
        assert is_uuid(str(uuid.uuid4()).upper()) is True

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "not-a-uuid",
            "00000000-0000-0000-0000-000000000001",  # 版本位为 0
            "12345678-1234-4234-7234-123456789abc",  # 变体位非法
            123,
        ],
    )
    def test_rejected(self, value):
        assert is_uuid(value) is False


class TestParseDelta:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (3, 3),
            (-1, -1),
            ("7", 7),
            (" 12 ", 12),
            ("+5", 5),
            (4.0, 4),
            ("2.0", 2),
            ("1e3", 1000),
        ],
    )
    def test_integer_like_values(self, raw, expected):
        assert parse_delta(raw) == expected

    @pytest.mark.parametrize("raw", [None, True, 1.5, "abc", "1.5", "", [1]])
    def test_non_integer_is_conflict(self, raw):
        with pytest.raises(ExecutionError) as exc_info:
            parse_delta(raw)
        assert exc_info.value.kind == ErrorKind.CONFLICT

    @pytest.mark.parametrize(
        "raw",
        [
            "1_000",  # Python 数字分隔符
            "١٢",  # 阿拉伯-印度数字 12
            "１２",  # 全角 12
            "nan",
            "inf",
            "0x10",
        ],
    )
    def test_non_ascii_decimal_text_is_conflict(self, raw):
        with pytest.raises(ExecutionError) as exc_info:
            parse_delta(raw)
        assert exc_info.value.kind == ErrorKind.CONFLICT
        assert exc_info.value.message == "delta must be an integer"


class TestDeltaBounds:
    @pytest.mark.parametrize("delta", [-1, 1, 2, 999, 1000])
    def test_legal(self, delta):
        check_delta_bounds(delta)

    @pytest.mark.parametrize(
        "delta,message",
        [
            (0, "delta cannot be 0"),
            (-2, "negative delta not allowed (except -1)"),
            (-1001, "negative delta not allowed (except -1)"),
            (1001, "delta too large"),
        ],
    )
    def test_illegal(self, delta, message):
        with pytest.raises(ExecutionError) as exc_info:
            check_delta_bounds(delta)
        assert exc_info.value.kind == ErrorKind.CONFLICT
        assert exc_info.value.message == message
