"""Identity OIDC プロバイダ（identity/oidc）"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import Any

from ..http_client import decode_body, is_success
from ..models import KeyInfoList
from ..serializers import encode_value, parse_duration, require_enum, to_payload
from ..service import VaultService


class ClientType(StrEnum):
    CONFIDENTIAL = "confidential"
    PUBLIC = "public"


class IdentityOIDCResponseType(StrEnum):
    CODE = "code"


@dataclass(kw_only=True)
class OIDCCreateOrUpdateProviderPayload:
    issuer: str | None = None
    allowed_client_ids: list[str] | None = None
    scopes_supported: list[str] | None = None


@dataclass
class OIDCReadProviderResponse:
    issuer: str
    allowed_client_ids: list[str] = field(default_factory=list)
    scopes_supported: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadProviderResponse:
        return cls(
            issuer=data["issuer"],
            allowed_client_ids=data.get("allowed_client_ids") or [],
            scopes_supported=data.get("scopes_supported") or [],
        )


@dataclass(kw_only=True)
class OIDCCreateOrUpdateScopePayload:
    """スコープ作成・更新ペイロード。template は JSON 文字列。"""

    template: str | None = None
    description: str | None = None


@dataclass
class OIDCReadScopeResponse:
    template: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadScopeResponse:
        return cls(
            template=data.get("template") or "",
            description=data.get("description") or "",
        )

    def decode_template(self, base64_encoded: bool = False) -> Any:
        """テンプレートを JSON としてデコードする。"""
        text = self.template
        if base64_encoded:
            text = base64.b64decode(text).decode("utf-8")
        return json.loads(text)


@dataclass(kw_only=True)
class OIDCCreateOrUpdateClientPayload:
    key: str | None = None
    redirect_uris: list[str] | None = None
    assignments: list[str] | None = None
    client_type: ClientType | None = None
    id_token_ttl: timedelta | None = None
    access_token_ttl: timedelta | None = None


@dataclass
class OIDCReadClientResponse:
    """OIDC クライアント読み取りレスポンス。"""

    client_id: str
    key: str = ""
    redirect_uris: list[str] = field(default_factory=list)
    assignments: list[str] = field(default_factory=list)
    client_secret: str | None = None
    client_type: ClientType = ClientType.CONFIDENTIAL
    id_token_ttl: timedelta | None = None
    access_token_ttl: timedelta | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadClientResponse:
        return cls(
            client_id=data["client_id"],
            key=data.get("key", ""),
            redirect_uris=data.get("redirect_uris") or [],
            assignments=data.get("assignments") or [],
            client_secret=data.get("client_secret"),
            client_type=require_enum(ClientType, data.get("client_type", "confidential")),
            id_token_ttl=parse_duration(data.get("id_token_ttl")),
            access_token_ttl=parse_duration(data.get("access_token_ttl")),
        )


@dataclass(kw_only=True)
class OIDCCreateOrUpdateAssignmentPayload:
    entity_ids: list[str] | None = None
    group_ids: list[str] | None = None


@dataclass
class OIDCReadAssignmentResponse:
    entity_ids: list[str] = field(default_factory=list)
    group_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadAssignmentResponse:
        return cls(
            entity_ids=data.get("entity_ids") or [],
            group_ids=data.get("group_ids") or [],
        )


@dataclass
class OIDCReadProviderOpenIDConfigurationResponse:
    """プロバイダの OpenID Connect ディスカバリドキュメント。

    主要な項目以外は extra に格納する。
    """

    issuer: str
    authorization_endpoint: str
    jwks_uri: str
    response_types_supported: list[str] = field(default_factory=list)
    subject_types_supported: list[str] = field(default_factory=list)
    id_token_signing_alg_values_supported: list[str] = field(default_factory=list)
    token_endpoint: str | None = None
    userinfo_endpoint: str | None = None
    scopes_supported: list[str] | None = None
    grant_types_supported: list[str] | None = None
    token_endpoint_auth_methods_supported: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _KNOWN = (
        "issuer",
        "authorization_endpoint",
        "jwks_uri",
        "response_types_supported",
        "subject_types_supported",
        "id_token_signing_alg_values_supported",
        "token_endpoint",
        "userinfo_endpoint",
        "scopes_supported",
        "grant_types_supported",
        "token_endpoint_auth_methods_supported",
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCReadProviderOpenIDConfigurationResponse:
        return cls(
            issuer=data["issuer"],
            authorization_endpoint=data["authorization_endpoint"],
            jwks_uri=data["jwks_uri"],
            response_types_supported=data.get("response_types_supported") or [],
            subject_types_supported=data.get("subject_types_supported") or [],
            id_token_signing_alg_values_supported=(
                data.get("id_token_signing_alg_values_supported") or []
            ),
            token_endpoint=data.get("token_endpoint"),
            userinfo_endpoint=data.get("userinfo_endpoint"),
            scopes_supported=data.get("scopes_supported"),
            grant_types_supported=data.get("grant_types_supported"),
            token_endpoint_auth_methods_supported=data.get(
                "token_endpoint_auth_methods_supported"
            ),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN},
        )


@dataclass
class JWK:
    kty: str
    kid: str
    use: str = ""
    alg: str = ""
    n: str = ""
    e: str = ""
    key_ops: list[str] | None = None
    x5u: str | None = None
    x5c: list[str] | None = None
    x5t: str | None = None
    x5t_s256: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JWK:
        return cls(
            kty=data["kty"],
            kid=data["kid"],
            use=data.get("use", ""),
            alg=data.get("alg", ""),
            n=data.get("n", ""),
            e=data.get("e", ""),
            key_ops=data.get("key_ops"),
            x5u=data.get("x5u"),
            x5c=data.get("x5c"),
            x5t=data.get("x5t"),
            x5t_s256=data.get("x5t#S256"),
        )


@dataclass(kw_only=True)
class OIDCAuthorizationEndpointPayload:
    """認可エンドポイントのクエリパラメータ。"""

    scope: str
    client_id: str
    redirect_uri: str
    state: str
    nonce: str
    response_type: IdentityOIDCResponseType = IdentityOIDCResponseType.CODE
    max_age: int | None = None
    code_challenge: str | None = None
    code_challenge_method: str | None = None


@dataclass
class OIDCAuthorizationEndpointResponse:
    code: str
    state: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OIDCAuthorizationEndpointResponse:
        return cls(code=data["code"], state=data.get("state"))


class VaultIdentityOIDC(VaultService):
    """Vault を OIDC プロバイダとして構成するクライアント。"""

    DEFAULT_PATH = "oidc"

    async def create_or_update_provider(
        self, name: str, payload: OIDCCreateOrUpdateProviderPayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("provider", name),
            to_payload(payload or OIDCCreateOrUpdateProviderPayload()),
        )
        return is_success(resp)

    async def read_provider(self, name: str) -> OIDCReadProviderResponse:
        resp = await self._http.get(self._path("provider", name))
        return self._data(resp, OIDCReadProviderResponse.from_dict)

    async def list_providers(self, allowed_client_id: str | None = None) -> KeyInfoList:
        data = await self._http.list_data(
            self._path("provider"), params={"allowed_client_id": allowed_client_id}
        )
        return self._decode(KeyInfoList.from_dict, data)

    async def delete_provider(self, name: str) -> bool:
        return is_success(await self._http.delete(self._path("provider", name)))

    async def read_provider_openid_configuration(
        self, name: str
    ) -> OIDCReadProviderOpenIDConfigurationResponse:
        resp = await self._http.get(
            self._path("provider", name, ".well-known", "openid-configuration")
        )
        return self._decode(OIDCReadProviderOpenIDConfigurationResponse.from_dict, decode_body(resp))

    async def read_provider_public_keys(self, name: str) -> list[JWK]:
        resp = await self._http.get(self._path("provider", name, ".well-known", "keys"))
        return self._decode(
            lambda body: [JWK.from_dict(key) for key in body.get("keys") or []],
            decode_body(resp),
        )

    async def authorization_endpoint(
        self, name: str, payload: OIDCAuthorizationEndpointPayload
    ) -> OIDCAuthorizationEndpointResponse:
        resp = await self._http.get(
            self._path("provider", name, "authorize"), params=encode_value(payload)
        )
        return self._decode(OIDCAuthorizationEndpointResponse.from_dict, decode_body(resp))

    async def create_or_update_scope(
        self, name: str, payload: OIDCCreateOrUpdateScopePayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("scope", name), to_payload(payload or OIDCCreateOrUpdateScopePayload())
        )
        return is_success(resp)

    async def read_scope(self, name: str) -> OIDCReadScopeResponse:
        resp = await self._http.get(self._path("scope", name))
        return self._data(resp, OIDCReadScopeResponse.from_dict)

    async def list_scopes(self) -> list[str]:
        return await self._http.list_keys(self._path("scope"))

    async def delete_scope(self, name: str) -> bool:
        return is_success(await self._http.delete(self._path("scope", name)))

    async def create_or_update_client(
        self, name: str, payload: OIDCCreateOrUpdateClientPayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("client", name), to_payload(payload or OIDCCreateOrUpdateClientPayload())
        )
        return is_success(resp)

    async def read_client(self, name: str) -> OIDCReadClientResponse:
        resp = await self._http.get(self._path("client", name))
        return self._data(resp, OIDCReadClientResponse.from_dict)

    async def list_clients(self) -> KeyInfoList:
        data = await self._http.list_data(self._path("client"))
        return self._decode(KeyInfoList.from_dict, data)

    async def delete_client(self, name: str) -> bool:
        return is_success(await self._http.delete(self._path("client", name)))

    async def create_or_update_assignment(
        self, name: str, payload: OIDCCreateOrUpdateAssignmentPayload | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("assignment", name),
            to_payload(payload or OIDCCreateOrUpdateAssignmentPayload()),
        )
        return is_success(resp)

    async def read_assignment(self, name: str) -> OIDCReadAssignmentResponse:
        resp = await self._http.get(self._path("assignment", name))
        return self._data(resp, OIDCReadAssignmentResponse.from_dict)

    async def list_assignments(self) -> list[str]:
        return await self._http.list_keys(self._path("assignment"))

    async def delete_assignment(self, name: str) -> bool:
        return is_success(await self._http.delete(self._path("assignment", name)))
