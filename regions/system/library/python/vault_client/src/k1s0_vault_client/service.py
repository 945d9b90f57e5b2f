"""機能別クライアントの基底クラス"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from .exceptions import VaultError, VaultErrorCodes
from .http_client import (
    ResponseFields,
    VaultHttpClient,
    decode_field,
    decode_field_or_none,
)
from .models import LoginResponse
from .paths import add_url_child_path

T = TypeVar("T")


class VaultService:
    """マウントパスを保持し、ディスパッチャへリクエストを委譲する。"""

    def __init__(self, http: VaultHttpClient, path: str) -> None:
        self._http = http
        self.path = path

    def _path(self, *children: str) -> str:
        result = self.path
        for child in children:
            result = add_url_child_path(result, child)
        return result

    @staticmethod
    def _decode(factory: Callable[[Any], T], value: Any) -> T:
        try:
            return factory(value)
        except VaultError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise VaultError(
                code=VaultErrorCodes.DECODE_ERROR,
                message=f"Failed to decode response: {e!r}",
                cause=e,
            ) from e

    def _data(self, resp: httpx.Response, factory: Callable[[Any], T]) -> T:
        return self._decode(factory, decode_field(resp, ResponseFields.DATA))

    def _data_or_none(self, resp: httpx.Response, factory: Callable[[Any], T]) -> T | None:
        data = decode_field_or_none(resp, ResponseFields.DATA)
        if data is None:
            return None
        return self._decode(factory, data)

    def _auth(self, resp: httpx.Response) -> LoginResponse:
        return self._decode(LoginResponse.from_dict, decode_field(resp, ResponseFields.AUTH))
