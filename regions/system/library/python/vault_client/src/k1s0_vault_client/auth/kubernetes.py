"""Kubernetes 認証メソッド"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..http_client import is_success
from ..models import LoginResponse, TokenSettings
from ..serializers import parse_enum, to_payload
from ..service import VaultService


class KubernetesAliasNameSource(StrEnum):
    SERVICEACCOUNT_UID = "serviceaccount_uid"
    SERVICEACCOUNT_NAME = "serviceaccount_name"


@dataclass(kw_only=True)
class KubernetesConfigureAuthPayload:
    """Kubernetes 認証の設定ペイロード。"""

    kubernetes_host: str
    kubernetes_ca_cert: str | None = None
    pem_keys: list[str] | None = None
    disable_local_ca_jwt: bool | None = None
    token_reviewer_jwt: str | None = None


@dataclass
class KubernetesConfigureAuthResponse:
    kubernetes_host: str
    kubernetes_ca_cert: str = ""
    pem_keys: list[str] = field(default_factory=list)
    disable_local_ca_jwt: bool = False
    issuer: str = ""
    disable_iss_validation: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KubernetesConfigureAuthResponse:
        return cls(
            kubernetes_host=data["kubernetes_host"],
            kubernetes_ca_cert=data.get("kubernetes_ca_cert") or "",
            pem_keys=data.get("pem_keys") or [],
            disable_local_ca_jwt=data.get("disable_local_ca_jwt", False),
            issuer=data.get("issuer") or "",
            disable_iss_validation=data.get("disable_iss_validation", True),
        )


@dataclass(kw_only=True)
class KubernetesCreateOrUpdatePayload(TokenSettings):
    """ロール作成・更新ペイロード。"""

    bound_service_account_names: list[str]
    bound_service_account_namespaces: list[str]
    audience: str | None = None
    alias_name_source: KubernetesAliasNameSource | None = None


@dataclass(kw_only=True)
class KubernetesReadRoleResponse(TokenSettings):
    bound_service_account_names: list[str] = field(default_factory=list)
    bound_service_account_namespaces: list[str] = field(default_factory=list)
    audience: str | None = None
    alias_name_source: KubernetesAliasNameSource = KubernetesAliasNameSource.SERVICEACCOUNT_UID

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KubernetesReadRoleResponse:
        return cls(
            bound_service_account_names=data.get("bound_service_account_names") or [],
            bound_service_account_namespaces=data.get("bound_service_account_namespaces") or [],
            audience=data.get("audience") or None,
            alias_name_source=parse_enum(
                KubernetesAliasNameSource, data.get("alias_name_source")
            )
            or KubernetesAliasNameSource.SERVICEACCOUNT_UID,
            **cls.token_fields_from_dict(data),
        )


@dataclass
class KubernetesLoginPayload:
    role: str
    jwt: str


class VaultAuthKubernetes(VaultService):
    """Kubernetes 認証メソッドのクライアント。"""

    DEFAULT_PATH = "kubernetes"

    async def configure(self, payload: KubernetesConfigureAuthPayload) -> bool:
        return is_success(await self._http.post(self._path("config"), to_payload(payload)))

    async def read_configuration(self) -> KubernetesConfigureAuthResponse:
        resp = await self._http.get(self._path("config"))
        return self._data(resp, KubernetesConfigureAuthResponse.from_dict)

    async def create_or_update_role(
        self, role_name: str, payload: KubernetesCreateOrUpdatePayload
    ) -> bool:
        resp = await self._http.post(self._path("role", role_name), to_payload(payload))
        return is_success(resp)

    async def read_role(self, role_name: str) -> KubernetesReadRoleResponse:
        resp = await self._http.get(self._path("role", role_name))
        return self._data(resp, KubernetesReadRoleResponse.from_dict)

    async def list(self) -> list[str]:
        return await self._http.list_keys(self._path("role"))

    async def delete_role(self, role_name: str) -> bool:
        return is_success(await self._http.delete(self._path("role", role_name)))

    async def login(self, payload: KubernetesLoginPayload) -> LoginResponse:
        """サービスアカウントの JWT でログインする。"""
        resp = await self._http.post(self._path("login"), to_payload(payload))
        return self._auth(resp)
