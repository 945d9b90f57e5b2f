"""認証メソッド管理（sys/auth）"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from ..http_client import is_success
from ..models import ListingVisibility, TokenType
from ..serializers import parse_duration, parse_enum, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class EnableMethodConfig:
    """認証メソッド有効化時のマウント設定。"""

    default_lease_ttl: timedelta | None = None
    max_lease_ttl: timedelta | None = None
    audit_non_hmac_request_keys: list[str] | None = None
    audit_non_hmac_response_keys: list[str] | None = None
    listing_visibility: ListingVisibility | None = None
    passthrough_request_headers: list[str] | None = None
    allowed_response_headers: list[str] | None = None
    plugin_version: str | None = None


@dataclass(kw_only=True)
class EnableMethodPayload:
    type: str
    description: str | None = None
    config: EnableMethodConfig | None = None
    external_entropy_access: bool | None = None
    local: bool | None = None
    options: dict[str, str] | None = None
    plugin_name: str | None = None
    plugin_version: str | None = None
    seal_wrap: bool | None = None


@dataclass(kw_only=True)
class UserLockoutConfig:
    lockout_threshold: int | None = None
    lockout_duration: timedelta | None = None
    lockout_counter_reset: timedelta | None = None
    lockout_disable: bool | None = None


@dataclass(kw_only=True)
class AuthTuneConfigurationParametersPayload:
    """認証メソッドのチューニングペイロード。"""

    default_lease_ttl: timedelta | None = None
    max_lease_ttl: timedelta | None = None
    description: str | None = None
    audit_non_hmac_request_keys: list[str] | None = None
    audit_non_hmac_response_keys: list[str] | None = None
    listing_visibility: ListingVisibility | None = None
    passthrough_request_headers: list[str] | None = None
    allowed_response_headers: list[str] | None = None
    plugin_version: str | None = None
    options: dict[str, str] | None = None
    token_type: TokenType | None = None
    user_lockout_config: UserLockoutConfig | None = None


@dataclass
class AuthMountConfig:
    default_lease_ttl: timedelta | None = None
    max_lease_ttl: timedelta | None = None
    token_type: TokenType | None = None
    force_no_cache: bool = False
    audit_non_hmac_request_keys: list[str] | None = None
    audit_non_hmac_response_keys: list[str] | None = None
    listing_visibility: ListingVisibility | None = None
    passthrough_request_headers: list[str] | None = None
    allowed_response_headers: list[str] | None = None
    plugin_version: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthMountConfig:
        return cls(
            default_lease_ttl=parse_duration(data.get("default_lease_ttl")),
            max_lease_ttl=parse_duration(data.get("max_lease_ttl")),
            token_type=parse_enum(TokenType, data.get("token_type")),
            force_no_cache=data.get("force_no_cache", False),
            audit_non_hmac_request_keys=data.get("audit_non_hmac_request_keys"),
            audit_non_hmac_response_keys=data.get("audit_non_hmac_response_keys"),
            listing_visibility=_listing_visibility(data.get("listing_visibility")),
            passthrough_request_headers=data.get("passthrough_request_headers"),
            allowed_response_headers=data.get("allowed_response_headers"),
            plugin_version=data.get("plugin_version") or None,
        )


@dataclass
class AuthReadConfigurationResponse:
    """有効化済み認証メソッドの設定。"""

    type: str
    accessor: str = ""
    config: AuthMountConfig = field(default_factory=AuthMountConfig)
    deprecation_status: str | None = None
    description: str = ""
    external_entropy_access: bool = False
    local: bool = False
    options: dict[str, str] | None = None
    plugin_version: str = ""
    running_plugin_version: str = ""
    running_sha256: str = ""
    seal_wrap: bool = False
    uuid: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthReadConfigurationResponse:
        return cls(
            type=data["type"],
            accessor=data.get("accessor", ""),
            config=AuthMountConfig.from_dict(data.get("config") or {}),
            deprecation_status=data.get("deprecation_status"),
            description=data.get("description") or "",
            external_entropy_access=data.get("external_entropy_access", False),
            local=data.get("local", False),
            options=data.get("options"),
            plugin_version=data.get("plugin_version") or "",
            running_plugin_version=data.get("running_plugin_version") or "",
            running_sha256=data.get("running_sha256") or "",
            seal_wrap=data.get("seal_wrap", False),
            uuid=data.get("uuid", ""),
        )


@dataclass
class AuthReadTuningInformationResponse:
    """認証メソッドのチューニング情報。"""

    default_lease_ttl: timedelta | None = None
    max_lease_ttl: timedelta | None = None
    description: str = ""
    force_no_cache: bool = False
    token_type: TokenType = TokenType.DEFAULT_SERVICE
    audit_non_hmac_request_keys: list[str] | None = None
    audit_non_hmac_response_keys: list[str] | None = None
    allowed_response_headers: list[str] | None = None
    passthrough_request_headers: list[str] | None = None
    allowed_managed_keys: list[str] | None = None
    external_entropy_access: bool | None = None
    listing_visibility: ListingVisibility | None = None
    options: dict[str, str] | None = None
    plugin_version: str | None = None
    user_lockout_counter_reset_duration: timedelta | None = None
    user_lockout_disable: bool | None = None
    user_lockout_duration: timedelta | None = None
    user_lockout_threshold: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthReadTuningInformationResponse:
        return cls(
            default_lease_ttl=parse_duration(data.get("default_lease_ttl")),
            max_lease_ttl=parse_duration(data.get("max_lease_ttl")),
            description=data.get("description") or "",
            force_no_cache=data.get("force_no_cache", False),
            token_type=parse_enum(TokenType, data.get("token_type")) or TokenType.DEFAULT_SERVICE,
            audit_non_hmac_request_keys=data.get("audit_non_hmac_request_keys"),
            audit_non_hmac_response_keys=data.get("audit_non_hmac_response_keys"),
            allowed_response_headers=data.get("allowed_response_headers"),
            passthrough_request_headers=data.get("passthrough_request_headers"),
            allowed_managed_keys=data.get("allowed_managed_keys"),
            external_entropy_access=data.get("external_entropy_access"),
            listing_visibility=_listing_visibility(data.get("listing_visibility")),
            options=data.get("options"),
            plugin_version=data.get("plugin_version") or None,
            user_lockout_counter_reset_duration=parse_duration(
                data.get("user_lockout_counter_reset_duration")
            ),
            user_lockout_disable=data.get("user_lockout_disable"),
            user_lockout_duration=parse_duration(data.get("user_lockout_duration")),
            user_lockout_threshold=data.get("user_lockout_threshold"),
        )


def _listing_visibility(value: Any) -> ListingVisibility | None:
    # 未設定の場合 Vault は空文字列を返す
    if not value:
        return None
    return parse_enum(ListingVisibility, value)


class VaultSystemAuth(VaultService):
    """認証メソッドの有効化・無効化・チューニングを行うクライアント。"""

    DEFAULT_PATH = "auth"

    async def list(self) -> dict[str, AuthReadConfigurationResponse]:
        resp = await self._http.get(self.path)
        return self._data(
            resp,
            lambda data: {
                path: AuthReadConfigurationResponse.from_dict(method)
                for path, method in data.items()
            },
        )

    async def enable(self, path: str, payload: EnableMethodPayload) -> bool:
        return is_success(await self._http.post(self._path(path), to_payload(payload)))

    async def read_configuration(self, path: str) -> AuthReadConfigurationResponse:
        resp = await self._http.get(self._path(path))
        return self._data(resp, AuthReadConfigurationResponse.from_dict)

    async def disable(self, path: str) -> bool:
        return is_success(await self._http.delete(self._path(path)))

    async def read_tuning(self, path: str) -> AuthReadTuningInformationResponse:
        resp = await self._http.get(self._path(path, "tune"))
        return self._data(resp, AuthReadTuningInformationResponse.from_dict)

    async def tune(self, path: str, payload: AuthTuneConfigurationParametersPayload) -> bool:
        return is_success(await self._http.post(self._path(path, "tune"), to_payload(payload)))
