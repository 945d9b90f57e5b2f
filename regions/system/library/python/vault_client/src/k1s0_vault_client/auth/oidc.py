"""JWT/OIDC 認証メソッド"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import Any

from ..http_client import is_success
from ..models import LoginResponse, TokenSettings
from ..serializers import parse_duration, parse_enum, to_payload
from ..service import VaultService


class OIDCBoundClaimsType(StrEnum):
    STRING = "string"
    GLOB = "glob"


class OIDCResponseType(StrEnum):
    CODE = "code"
    ID_TOKEN = "id_token"


class OIDCRoleType(StrEnum):
    OIDC = "oidc"
    JWT = "jwt"


class OIDCResponseMode(StrEnum):
    NONE = ""
    QUERY = "query"
    FORM_POST = "form_post"


@dataclass
class JwksPair:
    jwks_url: str
    jwks_ca_pem: str | None = None


@dataclass(kw_only=True)
class OIDCConfigurePayload:
    """JWT/OIDC 認証の設定ペイロード。"""

    oidc_discovery_url: str | None = None
    oidc_discovery_ca_pem: str | None = None
    oidc_client_id: str | None = None
    oidc_client_secret: str | None = None
    oidc_response_mode: OIDCResponseMode | None = None
    oidc_response_types: list[OIDCResponseType] | None = None
    jwks_url: str | None = None
    jwks_ca_pem: str | None = None
    jwks_pairs: list[JwksPair] | None = None
    jwt_validation_pubkeys: list[str] | None = None
    bound_issuer: str | None = None
    jwt_supported_algs: list[str] | None = None
    default_role: str | None = None
    provider_config: dict[str, Any] | None = None
    namespace_in_state: bool | None = None


@dataclass
class OIDCConfigureResponse:
    bound_issuer: str = ""
    default_role: str = ""
    jwks_ca_pem: str = ""
    jwks_pairs: list[JwksPair] = field(default_factory=list)
    jwks_url: str = ""
    jwt_supported_algs: list[str] = field(default_factory=list)
    jwt_validation_pubkeys: list[str] = field(default_factory=list)
    namespace_in_state: bool = True
    oidc_client_id: str = ""
    oidc_discovery_ca_pem: str = ""
    oidc_discovery_url: str = ""
    oidc_response_mode: OIDCResponseMode = OIDCResponseMode.NONE
    oidc_response_types: list[OIDCResponseType] = field(default_factory=list)
    provider_config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCConfigureResponse:
        return cls(
            bound_issuer=data.get("bound_issuer") or "",
            default_role=data.get("default_role") or "",
            jwks_ca_pem=data.get("jwks_ca_pem") or "",
            jwks_pairs=[
                JwksPair(jwks_url=p["jwks_url"], jwks_ca_pem=p.get("jwks_ca_pem"))
                for p in data.get("jwks_pairs") or []
            ],
            jwks_url=data.get("jwks_url") or "",
            jwt_supported_algs=data.get("jwt_supported_algs") or [],
            jwt_validation_pubkeys=data.get("jwt_validation_pubkeys") or [],
            namespace_in_state=data.get("namespace_in_state", True),
            oidc_client_id=data.get("oidc_client_id") or "",
            oidc_discovery_ca_pem=data.get("oidc_discovery_ca_pem") or "",
            oidc_discovery_url=data.get("oidc_discovery_url") or "",
            oidc_response_mode=parse_enum(OIDCResponseMode, data.get("oidc_response_mode"))
            or OIDCResponseMode.NONE,
            oidc_response_types=[
                OIDCResponseType(t) for t in data.get("oidc_response_types") or []
            ],
            provider_config=data.get("provider_config") or {},
        )


@dataclass(kw_only=True)
class OIDCCreateOrUpdatePayload(TokenSettings):
    """ロール作成・更新ペイロード。"""

    user_claim: str
    allowed_redirect_uris: list[str]
    role_type: OIDCRoleType | None = None
    bound_audiences: list[str] | None = None
    user_claim_json_pointer: bool | None = None
    clock_skew_leeway: timedelta | None = None
    expiration_leeway: timedelta | None = None
    not_before_leeway: timedelta | None = None
    bound_subject: str | None = None
    bound_claims: dict[str, Any] | None = None
    bound_claims_type: OIDCBoundClaimsType | None = None
    groups_claim: str | None = None
    claim_mappings: dict[str, str] | None = None
    oidc_scopes: list[str] | None = None
    verbose_oidc_logging: bool | None = None
    max_age: timedelta | None = None


@dataclass(kw_only=True)
class OIDCReadRoleResponse(TokenSettings):
    user_claim: str
    allowed_redirect_uris: list[str] = field(default_factory=list)
    role_type: OIDCRoleType = OIDCRoleType.OIDC
    bound_audiences: list[str] | None = None
    user_claim_json_pointer: bool = False
    clock_skew_leeway: timedelta | None = None
    expiration_leeway: timedelta | None = None
    not_before_leeway: timedelta | None = None
    bound_subject: str = ""
    bound_claims: dict[str, Any] | None = None
    bound_claims_type: OIDCBoundClaimsType = OIDCBoundClaimsType.STRING
    groups_claim: str = ""
    claim_mappings: dict[str, str] | None = None
    oidc_scopes: list[str] | None = None
    verbose_oidc_logging: bool = False
    max_age: timedelta | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadRoleResponse:
        return cls(
            user_claim=data["user_claim"],
            allowed_redirect_uris=data.get("allowed_redirect_uris") or [],
            role_type=parse_enum(OIDCRoleType, data.get("role_type")) or OIDCRoleType.OIDC,
            bound_audiences=data.get("bound_audiences"),
            user_claim_json_pointer=data.get("user_claim_json_pointer", False),
            clock_skew_leeway=parse_duration(data.get("clock_skew_leeway")),
            expiration_leeway=parse_duration(data.get("expiration_leeway")),
            not_before_leeway=parse_duration(data.get("not_before_leeway")),
            bound_subject=data.get("bound_subject") or "",
            bound_claims=data.get("bound_claims"),
            bound_claims_type=parse_enum(OIDCBoundClaimsType, data.get("bound_claims_type"))
            or OIDCBoundClaimsType.STRING,
            groups_claim=data.get("groups_claim") or "",
            claim_mappings=data.get("claim_mappings"),
            oidc_scopes=data.get("oidc_scopes"),
            verbose_oidc_logging=data.get("verbose_oidc_logging", False),
            max_age=parse_duration(data.get("max_age")),
            **cls.token_fields_from_dict(data),
        )


@dataclass(kw_only=True)
class OIDCAuthorizationUrlPayload:
    redirect_uri: str
    role: str | None = None
    client_nonce: str | None = None


@dataclass(kw_only=True)
class OIDCCallbackPayload:
    state: str
    code: str
    nonce: str | None = None
    client_nonce: str | None = None


@dataclass(kw_only=True)
class OIDCJwtLoginPayload:
    jwt: str
    role: str | None = None


class VaultAuthOIDC(VaultService):
    """JWT/OIDC 認証メソッドのクライアント。"""

    DEFAULT_PATH = "oidc"

    async def configure(self, payload: OIDCConfigurePayload) -> bool:
        return is_success(await self._http.post(self._path("config"), to_payload(payload)))

    async def read_configuration(self) -> OIDCConfigureResponse:
        resp = await self._http.get(self._path("config"))
        return self._data(resp, OIDCConfigureResponse.from_dict)

    async def create_or_update_role(
        self, role_name: str, payload: OIDCCreateOrUpdatePayload
    ) -> bool:
        resp = await self._http.post(self._path("role", role_name), to_payload(payload))
        return is_success(resp)

    async def read_role(self, role_name: str) -> OIDCReadRoleResponse:
        resp = await self._http.get(self._path("role", role_name))
        return self._data(resp, OIDCReadRoleResponse.from_dict)

    async def list(self) -> list[str]:
        return await self._http.list_keys(self._path("role"))

    async def delete_role(self, role_name: str) -> bool:
        return is_success(await self._http.delete(self._path("role", role_name)))

    async def oidc_authorization_url(self, payload: OIDCAuthorizationUrlPayload) -> str:
        """OIDC プロバイダの認可 URL を取得する。"""
        resp = await self._http.post(self._path("oidc", "auth_url"), to_payload(payload))
        return self._data(resp, lambda data: str(data["auth_url"]))

    async def oidc_callback(self, payload: OIDCCallbackPayload) -> LoginResponse:
        """認可コードをトークンと交換する。"""
        resp = await self._http.get(
            self._path("oidc", "callback"),
            params={
                "state": payload.state,
                "nonce": payload.nonce,
                "code": payload.code,
                "client_nonce": payload.client_nonce,
            },
        )
        return self._auth(resp)

    async def jwt_login(self, payload: OIDCJwtLoginPayload) -> LoginResponse:
        resp = await self._http.post(self._path("login"), to_payload(payload))
        return self._auth(resp)
