"""Userpass 認証メソッド"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import is_success
from ..models import LoginResponse, TokenSettings
from ..service import VaultService
from ..serializers import to_payload


@dataclass(kw_only=True)
class UserpassWriteUserPayload(TokenSettings):
    password: str | None = None


@dataclass(kw_only=True)
class UserpassReadUserResponse(TokenSettings):
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserpassReadUserResponse:
        return cls(**cls.token_fields_from_dict(data))


class VaultAuthUserpass(VaultService):
    """Userpass 認証メソッドのクライアント。"""

    DEFAULT_PATH = "userpass"

    async def create_or_update_user(self, username: str, payload: UserpassWriteUserPayload) -> bool:
        resp = await self._http.post(self._path("users", username), to_payload(payload))
        return is_success(resp)

    async def read_user(self, username: str) -> UserpassReadUserResponse:
        resp = await self._http.get(self._path("users", username))
        return self._data(resp, UserpassReadUserResponse.from_dict)

    async def delete_user(self, username: str) -> bool:
        return is_success(await self._http.delete(self._path("users", username)))

    async def update_password(self, username: str, password: str) -> bool:
        resp = await self._http.post(
            self._path("users", username, "password"), {"password": password}
        )
        return is_success(resp)

    async def update_policies(self, username: str, policies: list[str]) -> bool:
        resp = await self._http.post(
            self._path("users", username, "policies"), {"token_policies": policies}
        )
        return is_success(resp)

    async def list(self) -> list[str]:
        return await self._http.list_keys(self._path("users"))

    async def login(self, username: str, password: str) -> LoginResponse:
        resp = await self._http.post(self._path("login", username), {"password": password})
        return self._auth(resp)
