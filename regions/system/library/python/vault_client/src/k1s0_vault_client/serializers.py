"""Vault API の値エンコード／デコード"""

from __future__ import annotations

import dataclasses
import re
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, TypeVar

from .exceptions import VaultError, VaultErrorCodes

E = TypeVar("E", bound=Enum)

_DURATION_PATTERN = re.compile(r"^(?P<value>\d+)(?P<unit>[smhd]?)$")
_DURATION_UNITS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}
# Vault はナノ秒精度の小数部を返すためマイクロ秒までに切り詰める
_FRACTION_PATTERN = re.compile(r"\.(\d{6})\d+")


def format_duration(value: timedelta) -> str:
    """timedelta を Vault の期間文字列（例: ``"3600s"``）に変換する。"""
    return f"{int(value.total_seconds())}s"


def parse_duration(value: Any) -> timedelta | None:
    """Vault の期間表現を timedelta に変換する。

    整数（秒）、数字のみの文字列、または ``s``/``m``/``h``/``d`` 単位付き文字列を受け付ける。
    """
    if value is None:
        return None
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise _invalid_duration(value)
    if isinstance(value, int | float):
        return timedelta(seconds=int(value))
    match = _DURATION_PATTERN.match(str(value).strip())
    if match is None:
        raise _invalid_duration(value)
    return timedelta(seconds=int(match.group("value")) * _DURATION_UNITS[match.group("unit")])


def _invalid_duration(value: Any) -> VaultError:
    return VaultError(
        code=VaultErrorCodes.INVALID_ARGUMENT,
        message=f"Invalid duration format: {value}, expected format: 1, 1s, 1m, 1h, or 1d",
    )


def parse_enum(enum_type: type[E], value: Any) -> E | None:
    """文字列を enum 値に変換する。None はそのまま None を返す。"""
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError as e:
        valid = ", ".join(str(member.value) for member in enum_type)
        raise VaultError(
            code=VaultErrorCodes.INVALID_ARGUMENT,
            message=f"Invalid enum value: {value}. Valid values are: {valid}",
            cause=e,
        ) from e


def require_enum(enum_type: type[E], value: Any) -> E:
    """必須の enum フィールドを変換する。None も不正な値として扱う。"""
    result = parse_enum(enum_type, value)
    if result is None:
        valid = ", ".join(str(member.value) for member in enum_type)
        raise VaultError(
            code=VaultErrorCodes.INVALID_ARGUMENT,
            message=f"Invalid enum value: {value}. Valid values are: {valid}",
        )
    return result


def parse_instant(value: Any) -> datetime | None:
    """RFC 3339 文字列または Unix 秒を UTC の datetime に変換する。

    空文字列と None は None として扱う。
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=UTC)
    text = _FRACTION_PATTERN.sub(r".\1", str(value))
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise VaultError(
            code=VaultErrorCodes.DECODE_ERROR,
            message=f"Invalid instant format: {value}",
            cause=e,
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def encode_value(value: Any) -> Any:
    """ペイロード値を JSON 互換の値に再帰的に変換する。None のフィールドは除外する。"""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: encode_value(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if getattr(value, f.name) is not None
        }
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, list | tuple | set):
        return [encode_value(v) for v in value]
    return value


def to_payload(payload: Any) -> dict[str, Any]:
    """dataclass のペイロードをリクエストボディ用の辞書に変換する。"""
    if payload is None:
        return {}
    encoded = encode_value(payload)
    if not isinstance(encoded, dict):
        raise VaultError(
            code=VaultErrorCodes.INVALID_ARGUMENT,
            message=f"Payload must encode to a JSON object: {type(payload).__name__}",
        )
    return encoded
