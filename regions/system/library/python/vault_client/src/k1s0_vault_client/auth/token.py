"""Token 認証メソッド"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from ..http_client import decode_warnings, is_success
from ..models import LoginResponse, TokenInfo, TokenSettings, TokenType
from ..serializers import format_duration, parse_duration, parse_enum, parse_instant, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class TokenCreatePayload:
    """トークン作成ペイロード。role_name を指定すると create/{role_name} に送信する。"""

    id: str | None = None
    role_name: str | None = None
    policies: list[str] | None = None
    meta: dict[str, str] | None = None
    no_parent: bool | None = None
    no_default_policy: bool | None = None
    renewable: bool | None = None
    ttl: timedelta | None = None
    type: TokenType | None = None
    explicit_max_ttl: timedelta | None = None
    display_name: str | None = None
    num_uses: int | None = None
    period: timedelta | None = None
    entity_alias: str | None = None


@dataclass(kw_only=True)
class TokenRenewPayload:
    token: str
    increment: timedelta | None = None


@dataclass(kw_only=True)
class TokenRenewAccessorPayload:
    accessor: str
    increment: timedelta | None = None


@dataclass(kw_only=True)
class TokenWriteRolePayload(TokenSettings):
    """トークンロール作成・更新ペイロード。"""

    allowed_policies: list[str] | None = None
    disallowed_policies: list[str] | None = None
    allowed_policies_glob: list[str] | None = None
    disallowed_policies_glob: list[str] | None = None
    orphan: bool | None = None
    renewable: bool | None = None
    path_suffix: str | None = None
    allowed_entity_aliases: list[str] | None = None


@dataclass
class TokenLookupResponse:
    """トークン参照レスポンス。"""

    id: str
    accessor: str = ""
    creation_time: datetime | None = None
    creation_ttl: timedelta | None = None
    display_name: str = ""
    entity_id: str = ""
    expire_time: datetime | None = None
    explicit_max_ttl: timedelta | None = None
    issue_time: datetime | None = None
    meta: dict[str, str] | None = None
    num_uses: int = 0
    orphan: bool = False
    path: str = ""
    policies: list[str] = field(default_factory=list)
    renewable: bool = False
    ttl: timedelta | None = None
    type: TokenType = TokenType.SERVICE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenLookupResponse:
        return cls(
            id=data["id"],
            accessor=data.get("accessor", ""),
            creation_time=parse_instant(data.get("creation_time")),
            creation_ttl=parse_duration(data.get("creation_ttl")),
            display_name=data.get("display_name", ""),
            entity_id=data.get("entity_id", ""),
            expire_time=parse_instant(data.get("expire_time")),
            explicit_max_ttl=parse_duration(data.get("explicit_max_ttl")),
            issue_time=parse_instant(data.get("issue_time")),
            meta=data.get("meta"),
            num_uses=data.get("num_uses", 0),
            orphan=data.get("orphan", False),
            path=data.get("path", ""),
            policies=data.get("policies") or [],
            renewable=data.get("renewable", False),
            ttl=parse_duration(data.get("ttl")),
            type=parse_enum(TokenType, data.get("type")) or TokenType.SERVICE,
        )

    def to_token_info(self, token: str) -> TokenInfo:
        """参照結果から TokenInfo を生成する（期限 = expire_time）。"""
        return TokenInfo(
            token=token,
            accessor=self.accessor,
            token_policies=self.policies,
            metadata=self.meta or {},
            expiration_date=self.expire_time,
            renewable=self.renewable,
            entity_id=self.entity_id,
            token_type=self.type,
            orphan=self.orphan,
            num_uses=self.num_uses,
        )


@dataclass
class TokenReadRoleResponse:
    name: str
    allowed_entity_aliases: list[str] | None = None
    allowed_policies: list[str] = field(default_factory=list)
    allowed_policies_glob: list[str] = field(default_factory=list)
    disallowed_policies: list[str] = field(default_factory=list)
    disallowed_policies_glob: list[str] = field(default_factory=list)
    explicit_max_ttl: timedelta | None = None
    orphan: bool = False
    path_suffix: str = ""
    period: timedelta | None = None
    renewable: bool = True
    token_bound_cidrs: list[str] = field(default_factory=list)
    token_explicit_max_ttl: timedelta | None = None
    token_no_default_policy: bool = False
    token_period: timedelta | None = None
    token_type: TokenType = TokenType.DEFAULT_SERVICE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenReadRoleResponse:
        return cls(
            name=data["name"],
            allowed_entity_aliases=data.get("allowed_entity_aliases"),
            allowed_policies=data.get("allowed_policies") or [],
            allowed_policies_glob=data.get("allowed_policies_glob") or [],
            disallowed_policies=data.get("disallowed_policies") or [],
            disallowed_policies_glob=data.get("disallowed_policies_glob") or [],
            explicit_max_ttl=parse_duration(data.get("explicit_max_ttl")),
            orphan=data.get("orphan", False),
            path_suffix=data.get("path_suffix", ""),
            period=parse_duration(data.get("period")),
            renewable=data.get("renewable", True),
            token_bound_cidrs=data.get("token_bound_cidrs") or [],
            token_explicit_max_ttl=parse_duration(data.get("token_explicit_max_ttl")),
            token_no_default_policy=data.get("token_no_default_policy", False),
            token_period=parse_duration(data.get("token_period")),
            token_type=parse_enum(TokenType, data.get("token_type"))
            or TokenType.DEFAULT_SERVICE,
        )


class VaultAuthToken(VaultService):
    """Token 認証メソッドのクライアント。"""

    DEFAULT_PATH = "token"

    async def list_accessors(self) -> list[str]:
        return await self._http.list_keys(self._path("accessors"))

    async def create_token(self, payload: TokenCreatePayload | None = None) -> LoginResponse:
        payload = payload or TokenCreatePayload()
        if payload.role_name:
            path = self._path("create", payload.role_name)
            payload = dataclasses.replace(payload, role_name=None)
        else:
            path = self._path("create")
        resp = await self._http.post(path, to_payload(payload))
        return self._auth(resp)

    async def lookup_token(self, token: str) -> TokenLookupResponse:
        resp = await self._http.post(self._path("lookup"), {"token": token})
        return self._data(resp, TokenLookupResponse.from_dict)

    async def lookup_self_token(self) -> TokenLookupResponse:
        resp = await self._http.get(self._path("lookup-self"))
        return self._data(resp, TokenLookupResponse.from_dict)

    async def lookup_accessor(self, accessor: str) -> TokenLookupResponse:
        resp = await self._http.post(self._path("lookup-accessor"), {"accessor": accessor})
        return self._data(resp, TokenLookupResponse.from_dict)

    async def renew_token(self, payload: TokenRenewPayload) -> LoginResponse:
        resp = await self._http.post(self._path("renew"), to_payload(payload))
        return self._auth(resp)

    async def renew_self_token(self, increment: timedelta | None = None) -> LoginResponse:
        body = {} if increment is None else {"increment": format_duration(increment)}
        resp = await self._http.post(self._path("renew-self"), body)
        return self._auth(resp)

    async def renew_accessor(self, payload: TokenRenewAccessorPayload) -> LoginResponse:
        resp = await self._http.post(self._path("renew-accessor"), to_payload(payload))
        return self._auth(resp)

    async def revoke_token(self, token: str) -> bool:
        return is_success(await self._http.post(self._path("revoke"), {"token": token}))

    async def revoke_self_token(self) -> bool:
        return is_success(await self._http.post(self._path("revoke-self")))

    async def revoke_accessor(self, accessor: str) -> bool:
        resp = await self._http.post(self._path("revoke-accessor"), {"accessor": accessor})
        return is_success(resp)

    async def revoke_token_and_orphan_children(self, token: str) -> bool:
        """トークンを失効させ、子トークンは孤児として残す。"""
        return is_success(await self._http.post(self._path("revoke-orphan"), {"token": token}))

    async def read_token_role(self, role_name: str) -> TokenReadRoleResponse:
        resp = await self._http.get(self._path("roles", role_name))
        return self._data(resp, TokenReadRoleResponse.from_dict)

    async def list_token_roles(self) -> list[str]:
        return await self._http.list_keys(self._path("roles"))

    async def create_or_update_token_role(
        self, role_name: str, payload: TokenWriteRolePayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("roles", role_name), to_payload(payload or TokenWriteRolePayload())
        )
        return is_success(resp)

    async def delete_token_role(self, role_name: str) -> bool:
        return is_success(await self._http.delete(self._path("roles", role_name)))

    async def tidy_tokens(self) -> list[str]:
        return decode_warnings(await self._http.post(self._path("tidy")))
