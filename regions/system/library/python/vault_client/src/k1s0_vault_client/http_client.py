"""Vault HTTP リクエストディスパッチャ"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from .exceptions import VaultAPIError, VaultError, VaultErrorCodes, VaultFieldNotFoundError
from .paths import build_base_url

logger = structlog.get_logger(__name__)

TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"
MERGE_PATCH_CONTENT_TYPE = "application/merge-patch+json"


class ResponseFields:
    """Vault レスポンスの共通フィールド名。"""

    DATA: str = "data"
    AUTH: str = "auth"
    WARNINGS: str = "warnings"


class VaultHttpClient:
    """httpx を使った Vault API ディスパッチャ。

    トークンと名前空間は可変で、次のリクエストから反映される。
    """

    def __init__(
        self,
        base_url: str,
        api_path: str = "v1",
        token: str | None = None,
        namespace: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = build_base_url(base_url, api_path)
        self.token = token
        self.namespace = namespace
        self._timeout_seconds = timeout_seconds

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.token is not None:
            headers[TOKEN_HEADER] = self.token
        if self.namespace is not None:
            headers[NAMESPACE_HEADER] = self.namespace
        return headers

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers(),
            timeout=self._timeout_seconds,
        )

    def _handle_error(self, resp: httpx.Response, context: str) -> None:
        if resp.is_success or not resp.content:
            return
        try:
            body = resp.json()
        except ValueError:
            raise VaultAPIError([resp.text], resp.status_code) from None
        errors = find_errors(body)
        logger.warning(
            "vault api error",
            context=context,
            status=resp.status_code,
            errors=errors,
        )
        raise VaultAPIError(errors, resp.status_code)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        merge_patch: bool = False,
    ) -> httpx.Response:
        """Vault API にリクエストを送信する。

        非 2xx でボディがある場合は VaultAPIError を送出する。
        """
        context = f"{method} {path}"
        headers: dict[str, str] = {}
        content: bytes | None = None
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
            headers["Content-Type"] = MERGE_PATCH_CONTENT_TYPE if merge_patch else "application/json"
        if params is not None:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            async with self._make_client() as client:
                resp = await client.request(
                    method,
                    path,
                    content=content,
                    params=params,
                    headers=headers,
                )
            logger.debug("vault request", method=method, path=path, status=resp.status_code)
            self._handle_error(resp, context)
            return resp
        except VaultError:
            raise
        except httpx.HTTPError as e:
            raise VaultError(
                code=VaultErrorCodes.HTTP_ERROR,
                message=f"Failed to {context}: {e}",
                cause=e,
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None) -> httpx.Response:
        return await self.request("POST", path, json_body=json_body)

    async def put(self, path: str, json_body: Any = None) -> httpx.Response:
        return await self.request("PUT", path, json_body=json_body)

    async def patch(self, path: str, json_body: Any = None) -> httpx.Response:
        return await self.request("PATCH", path, json_body=json_body, merge_patch=True)

    async def delete(self, path: str) -> httpx.Response:
        return await self.request("DELETE", path)

    async def list_request(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self.request("LIST", path, params=params)

    async def list_data(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """LIST リクエストを送り ``data`` を返す。

        Vault は一覧が空のとき ``errors`` が空の 404 を返すため、その場合は空の辞書とする。
        """
        try:
            resp = await self.list_request(path, params)
        except VaultAPIError as e:
            if e.status_code == 404 and not e.errors:
                return {}
            raise
        data = decode_field_or_none(resp, ResponseFields.DATA)
        return data if isinstance(data, dict) else {}

    async def list_keys(self, path: str) -> list[str]:
        data = await self.list_data(path)
        return list(data.get("keys") or [])


def find_errors(body: Any) -> list[str]:
    """エラーレスポンスから ``errors`` 配列、または ``data.error`` を取り出す。"""
    if not isinstance(body, dict):
        return []
    errors = body.get("errors")
    if isinstance(errors, list):
        return [str(error) for error in errors]
    data = body.get(ResponseFields.DATA)
    if isinstance(data, dict) and data.get("error") is not None:
        return [str(data["error"])]
    return []


def is_success(resp: httpx.Response) -> bool:
    return resp.is_success


def _json_body(resp: httpx.Response) -> dict[str, Any] | None:
    if not resp.content:
        return None
    try:
        body = resp.json()
    except ValueError as e:
        raise VaultError(
            code=VaultErrorCodes.DECODE_ERROR,
            message=f"Failed to decode response body: {e}",
            cause=e,
        ) from e
    if not isinstance(body, dict):
        raise VaultError(
            code=VaultErrorCodes.DECODE_ERROR,
            message="Response body is not a JSON object",
        )
    return body


def decode_body(resp: httpx.Response) -> dict[str, Any]:
    """レスポンスボディ全体を辞書として返す。空のボディは VaultAPIError。"""
    body = _json_body(resp)
    if body is None:
        raise VaultAPIError()
    return body


def decode_field(resp: httpx.Response, field: str) -> Any:
    """レスポンスボディから指定フィールドを取り出す。

    Raises:
        VaultAPIError: ボディが空の場合
        VaultFieldNotFoundError: フィールドが存在しない場合
    """
    body = decode_body(resp)
    value = body.get(field)
    if value is None:
        raise VaultFieldNotFoundError(field)
    return value


def decode_field_or_none(resp: httpx.Response, field: str) -> Any:
    """レスポンスボディから指定フィールドを取り出す。ボディが空なら None。"""
    body = _json_body(resp)
    if body is None:
        return None
    return body.get(field)


def decode_warnings(resp: httpx.Response) -> list[str]:
    return list(decode_field_or_none(resp, ResponseFields.WARNINGS) or [])
