"""vault_client 共通データモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from .serializers import parse_duration, parse_enum


class TokenType(StrEnum):
    """Vault トークン種別。"""

    SERVICE = "service"
    DEFAULT_SERVICE = "default-service"
    BATCH = "batch"
    DEFAULT_BATCH = "default-batch"
    DEFAULT = "default"


class AuditDeviceType(StrEnum):
    """監査デバイス種別。"""

    FILE = "file"
    SOCKET = "socket"
    SYSLOG = "syslog"


class ListingVisibility(StrEnum):
    """認証メソッドの UI 一覧表示設定。"""

    HIDDEN = "hidden"
    UNAUTH = "unauth"


@dataclass(kw_only=True)
class TokenSettings:
    """ロール・ユーザー共通の token_* 設定。"""

    token_ttl: timedelta | None = None
    token_max_ttl: timedelta | None = None
    token_policies: list[str] | None = None
    token_bound_cidrs: list[str] | None = None
    token_explicit_max_ttl: timedelta | None = None
    token_no_default_policy: bool | None = None
    token_num_uses: int | None = None
    token_period: timedelta | None = None
    token_type: TokenType | None = None

    @staticmethod
    def token_fields_from_dict(data: dict[str, Any]) -> dict[str, Any]:
        """レスポンス辞書から token_* フィールドを取り出す。"""
        return {
            "token_ttl": parse_duration(data.get("token_ttl")),
            "token_max_ttl": parse_duration(data.get("token_max_ttl")),
            "token_policies": data.get("token_policies"),
            "token_bound_cidrs": data.get("token_bound_cidrs"),
            "token_explicit_max_ttl": parse_duration(data.get("token_explicit_max_ttl")),
            "token_no_default_policy": data.get("token_no_default_policy"),
            "token_num_uses": data.get("token_num_uses"),
            "token_period": parse_duration(data.get("token_period")),
            "token_type": parse_enum(TokenType, data.get("token_type")),
        }


@dataclass
class LoginResponse:
    """ログイン・トークン作成時に ``auth`` フィールドで返る情報。"""

    client_token: str
    accessor: str = ""
    policies: list[str] = field(default_factory=list)
    token_policies: list[str] = field(default_factory=list)
    metadata: dict[str, str] | None = None
    lease_duration: timedelta = field(default_factory=timedelta)
    renewable: bool = False
    entity_id: str = ""
    token_type: TokenType = TokenType.SERVICE
    orphan: bool = False
    num_uses: int = 0
    mfa_requirement: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoginResponse:
        return cls(
            client_token=data["client_token"],
            accessor=data.get("accessor", ""),
            policies=data.get("policies") or [],
            token_policies=data.get("token_policies") or [],
            metadata=data.get("metadata"),
            lease_duration=parse_duration(data.get("lease_duration", 0)) or timedelta(),
            renewable=data.get("renewable", False),
            entity_id=data.get("entity_id", ""),
            token_type=parse_enum(TokenType, data.get("token_type")) or TokenType.SERVICE,
            orphan=data.get("orphan", False),
            num_uses=data.get("num_uses", 0),
            mfa_requirement=data.get("mfa_requirement"),
        )


@dataclass
class TokenInfo:
    """クライアントが保持している現在のトークン情報。"""

    token: str
    accessor: str | None = None
    token_policies: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    expiration_date: datetime | None = None
    renewable: bool = False
    entity_id: str = ""
    token_type: TokenType = TokenType.SERVICE
    orphan: bool = True
    num_uses: int = 0

    @classmethod
    def from_login_response(cls, response: LoginResponse) -> TokenInfo:
        """ログインレスポンスから TokenInfo を生成する（期限 = 現在時刻 + lease_duration）。"""
        expiration = None
        if response.lease_duration > timedelta():
            expiration = datetime.now(UTC) + response.lease_duration
        return cls(
            token=response.client_token,
            accessor=response.accessor,
            token_policies=response.token_policies,
            metadata=response.metadata or {},
            expiration_date=expiration,
            renewable=response.renewable,
            entity_id=response.entity_id,
            token_type=response.token_type,
            orphan=response.orphan,
            num_uses=response.num_uses,
        )

    def expires_in(self, now: datetime | None = None) -> timedelta | None:
        """有効期限までの残り時間。期限なしの場合は None。"""
        if self.expiration_date is None:
            return None
        return self.expiration_date - (now or datetime.now(UTC))


@dataclass
class KeyInfoList:
    """``keys`` と ``key_info`` を返す LIST レスポンス。"""

    keys: list[str] = field(default_factory=list)
    key_info: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> KeyInfoList:
        data = data or {}
        return cls(
            keys=data.get("keys") or [],
            key_info=data.get("key_info") or {},
        )


@dataclass
class VaultMounts:
    """各機能クライアントのマウントパス。既定値は Vault の既定マウント。"""

    auth: str = "auth"
    approle: str = "approle"
    kubernetes: str = "kubernetes"
    oidc: str = "oidc"
    userpass: str = "userpass"
    token: str = "token"
    kv2: str = "secret"
    system: str = "sys"
    audit: str = "audit"
    system_auth: str = "auth"
    namespaces: str = "namespaces"
    identity: str = "identity"
    entity: str = "entity"
    identity_oidc: str = "oidc"


@dataclass
class VaultClientConfig:
    """Vault クライアント設定。"""

    base_url: str
    api_path: str = "v1"
    token: str | None = None
    namespace: str | None = None
    timeout_seconds: float = 10.0
    lookup_token: bool = False
    auto_renew_token: bool = False
    renew_before_seconds: float = 60.0
    renew_retry_seconds: float = 10.0
    mounts: VaultMounts = field(default_factory=VaultMounts)
