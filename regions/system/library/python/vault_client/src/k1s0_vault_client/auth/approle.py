"""AppRole 認証メソッド"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from ..http_client import decode_warnings, is_success
from ..models import LoginResponse, TokenSettings
from ..serializers import parse_duration, parse_instant, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class AppRoleCreateOrUpdatePayload(TokenSettings):
    """ロール作成・更新ペイロード。"""

    bind_secret_id: bool | None = None
    secret_id_bound_cidrs: list[str] | None = None
    secret_id_num_uses: int | None = None
    secret_id_ttl: timedelta | None = None
    local_secret_ids: bool | None = None


@dataclass(kw_only=True)
class AppRoleGenerateSecretIdPayload:
    """Secret ID 生成ペイロード。metadata は JSON 文字列。"""

    metadata: str | None = None
    cidr_list: list[str] | None = None
    token_bound_cidrs: list[str] | None = None
    num_uses: int | None = None
    ttl: timedelta | None = None


@dataclass(kw_only=True)
class AppRoleCreateCustomSecretIdPayload(AppRoleGenerateSecretIdPayload):
    """任意の Secret ID を登録するペイロード。"""

    secret_id: str


@dataclass
class AppRoleLoginPayload:
    role_id: str
    secret_id: str


@dataclass(kw_only=True)
class AppRoleReadRoleResponse(TokenSettings):
    """ロール読み取りレスポンス。"""

    bind_secret_id: bool = True
    local_secret_ids: bool = False
    secret_id_bound_cidrs: list[str] | None = None
    secret_id_num_uses: int = 0
    secret_id_ttl: timedelta | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppRoleReadRoleResponse:
        return cls(
            bind_secret_id=data.get("bind_secret_id", True),
            local_secret_ids=data.get("local_secret_ids", False),
            secret_id_bound_cidrs=data.get("secret_id_bound_cidrs"),
            secret_id_num_uses=data.get("secret_id_num_uses", 0),
            secret_id_ttl=parse_duration(data.get("secret_id_ttl")),
            **cls.token_fields_from_dict(data),
        )


@dataclass
class AppRoleWriteSecretIdResponse:
    """Secret ID 生成レスポンス。"""

    secret_id: str
    secret_id_accessor: str
    secret_id_num_uses: int = 0
    secret_id_ttl: timedelta | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppRoleWriteSecretIdResponse:
        return cls(
            secret_id=data["secret_id"],
            secret_id_accessor=data["secret_id_accessor"],
            secret_id_num_uses=data.get("secret_id_num_uses", 0),
            secret_id_ttl=parse_duration(data.get("secret_id_ttl")),
        )


@dataclass
class AppRoleLookUpSecretIdResponse:
    """Secret ID 参照レスポンス。"""

    secret_id_accessor: str
    cidr_list: list[str] = field(default_factory=list)
    creation_time: datetime | None = None
    expiration_time: datetime | None = None
    last_updated_time: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    secret_id_num_uses: int = 0
    secret_id_ttl: timedelta | None = None
    token_bound_cidrs: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppRoleLookUpSecretIdResponse:
        return cls(
            secret_id_accessor=data["secret_id_accessor"],
            cidr_list=data.get("cidr_list") or [],
            creation_time=parse_instant(data.get("creation_time")),
            expiration_time=parse_instant(data.get("expiration_time")),
            last_updated_time=parse_instant(data.get("last_updated_time")),
            metadata=data.get("metadata") or {},
            secret_id_num_uses=data.get("secret_id_num_uses", 0),
            secret_id_ttl=parse_duration(data.get("secret_id_ttl")),
            token_bound_cidrs=data.get("token_bound_cidrs") or [],
        )


class VaultAuthAppRole(VaultService):
    """AppRole 認証メソッドのクライアント。"""

    DEFAULT_PATH = "approle"

    async def list(self) -> list[str]:
        """ロール名の一覧を返す。"""
        return await self._http.list_keys(self._path("role"))

    async def create_or_update(
        self, role_name: str, payload: AppRoleCreateOrUpdatePayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("role", role_name),
            to_payload(payload or AppRoleCreateOrUpdatePayload()),
        )
        return is_success(resp)

    async def read(self, role_name: str) -> AppRoleReadRoleResponse:
        resp = await self._http.get(self._path("role", role_name))
        return self._data(resp, AppRoleReadRoleResponse.from_dict)

    async def delete(self, role_name: str) -> bool:
        return is_success(await self._http.delete(self._path("role", role_name)))

    async def read_role_id(self, role_name: str) -> str:
        resp = await self._http.get(self._path("role", role_name, "role-id"))
        return self._data(resp, lambda data: str(data["role_id"]))

    async def update_role_id(self, role_name: str, role_id: str) -> bool:
        resp = await self._http.post(
            self._path("role", role_name, "role-id"), {"role_id": role_id}
        )
        return is_success(resp)

    async def generate_secret_id(
        self, role_name: str, payload: AppRoleGenerateSecretIdPayload | None = None
    ) -> AppRoleWriteSecretIdResponse:
        resp = await self._http.post(
            self._path("role", role_name, "secret-id"),
            to_payload(payload or AppRoleGenerateSecretIdPayload()),
        )
        return self._data(resp, AppRoleWriteSecretIdResponse.from_dict)

    async def secret_id_accessors(self, role_name: str) -> list[str]:
        return await self._http.list_keys(self._path("role", role_name, "secret-id"))

    async def read_secret_id(
        self, role_name: str, secret_id: str
    ) -> AppRoleLookUpSecretIdResponse | None:
        """Secret ID を参照する。存在しない場合 Vault は空ボディを返すため None になる。"""
        resp = await self._http.post(
            self._path("role", role_name, "secret-id", "lookup"), {"secret_id": secret_id}
        )
        return self._data_or_none(resp, AppRoleLookUpSecretIdResponse.from_dict)

    async def destroy_secret_id(self, role_name: str, secret_id: str) -> bool:
        resp = await self._http.post(
            self._path("role", role_name, "secret-id", "destroy"), {"secret_id": secret_id}
        )
        return is_success(resp)

    async def read_secret_id_accessor(
        self, role_name: str, secret_id_accessor: str
    ) -> AppRoleLookUpSecretIdResponse:
        resp = await self._http.post(
            self._path("role", role_name, "secret-id-accessor", "lookup"),
            {"secret_id_accessor": secret_id_accessor},
        )
        return self._data(resp, AppRoleLookUpSecretIdResponse.from_dict)

    async def destroy_secret_id_accessor(self, role_name: str, secret_id_accessor: str) -> bool:
        resp = await self._http.post(
            self._path("role", role_name, "secret-id-accessor", "destroy"),
            {"secret_id_accessor": secret_id_accessor},
        )
        return is_success(resp)

    async def create_custom_secret_id(
        self, role_name: str, payload: AppRoleCreateCustomSecretIdPayload
    ) -> AppRoleWriteSecretIdResponse:
        resp = await self._http.post(
            self._path("role", role_name, "custom-secret-id"), to_payload(payload)
        )
        return self._data(resp, AppRoleWriteSecretIdResponse.from_dict)

    async def login(self, payload: AppRoleLoginPayload) -> LoginResponse:
        resp = await self._http.post(self._path("login"), to_payload(payload))
        return self._auth(resp)

    async def tidy_tokens(self) -> list[str]:
        """期限切れの Secret ID を削除し、Vault の警告メッセージを返す。"""
        resp = await self._http.post(self._path("tidy", "secret-id"))
        return decode_warnings(resp)
