"""KV バージョン 2 シークレットエンジン"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from ..http_client import is_success
from ..serializers import parse_duration, parse_instant, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class KvV2ConfigureRequest:
    cas_required: bool | None = None
    delete_version_after: timedelta | None = None
    max_versions: int | None = None


@dataclass
class KvV2ReadConfigurationResponse:
    cas_required: bool = False
    delete_version_after: timedelta | None = None
    max_versions: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KvV2ReadConfigurationResponse:
        return cls(
            cas_required=data.get("cas_required", False),
            delete_version_after=parse_duration(data.get("delete_version_after")),
            max_versions=data.get("max_versions", 0),
        )


@dataclass
class KvV2VersionMetadata:
    """シークレットの 1 バージョン分のメタデータ。"""

    created_time: datetime | None = None
    deletion_time: datetime | None = None
    destroyed: bool = False
    version: int = 0
    custom_metadata: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KvV2VersionMetadata:
        return cls(
            created_time=parse_instant(data.get("created_time")),
            deletion_time=parse_instant(data.get("deletion_time")),
            destroyed=data.get("destroyed", False),
            version=data.get("version", 0),
            custom_metadata=data.get("custom_metadata"),
        )


@dataclass
class KvV2ReadResponse:
    """シークレット読み取りレスポンス。削除済みバージョンでは data が None。"""

    data: dict[str, Any] | None
    metadata: KvV2VersionMetadata

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KvV2ReadResponse:
        return cls(
            data=data.get("data"),
            metadata=KvV2VersionMetadata.from_dict(data.get("metadata") or {}),
        )


@dataclass
class KvV2ReadSubkeysResponse:
    metadata: KvV2VersionMetadata
    subkeys: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KvV2ReadSubkeysResponse:
        return cls(
            metadata=KvV2VersionMetadata.from_dict(data.get("metadata") or {}),
            subkeys=data.get("subkeys") or {},
        )


@dataclass(kw_only=True)
class KvV2WriteMetadataRequest:
    max_versions: int | None = None
    cas_required: bool | None = None
    delete_version_after: timedelta | None = None
    custom_metadata: dict[str, str] | None = None


@dataclass
class KvV2ReadMetadataResponse:
    """シークレットメタデータ読み取りレスポンス。"""

    cas_required: bool = False
    created_time: datetime | None = None
    current_version: int = 0
    custom_metadata: dict[str, Any] | None = None
    delete_version_after: timedelta | None = None
    max_versions: int = 0
    oldest_version: int = 0
    updated_time: datetime | None = None
    versions: dict[int, KvV2VersionMetadata] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KvV2ReadMetadataResponse:
        return cls(
            cas_required=data.get("cas_required", False),
            created_time=parse_instant(data.get("created_time")),
            current_version=data.get("current_version", 0),
            custom_metadata=data.get("custom_metadata"),
            delete_version_after=parse_duration(data.get("delete_version_after")),
            max_versions=data.get("max_versions", 0),
            oldest_version=data.get("oldest_version", 0),
            updated_time=parse_instant(data.get("updated_time")),
            versions={
                int(version): KvV2VersionMetadata.from_dict({**meta, "version": int(version)})
                for version, meta in (data.get("versions") or {}).items()
            },
        )


class VaultKV2Engine(VaultService):
    """KV v2 シークレットエンジンのクライアント。"""

    DEFAULT_PATH = "secret"

    async def configure(self, payload: KvV2ConfigureRequest | None = None) -> bool:
        resp = await self._http.post(
            self._path("config"), to_payload(payload or KvV2ConfigureRequest())
        )
        return is_success(resp)

    async def read_configuration(self) -> KvV2ReadConfigurationResponse:
        resp = await self._http.get(self._path("config"))
        return self._data(resp, KvV2ReadConfigurationResponse.from_dict)

    async def read_secret(self, path: str, version: int | None = None) -> KvV2ReadResponse:
        """シークレットを読み取る。version 省略時は最新バージョン。"""
        resp = await self._http.get(self._path("data", path), params={"version": version})
        return self._data(resp, KvV2ReadResponse.from_dict)

    async def create_or_update_secret(
        self, path: str, data: dict[str, Any], cas: int | None = None
    ) -> KvV2VersionMetadata:
        resp = await self._http.post(self._path("data", path), _write_body(data, cas))
        return self._data(resp, KvV2VersionMetadata.from_dict)

    async def patch_secret(
        self, path: str, data: dict[str, Any], cas: int | None = None
    ) -> KvV2VersionMetadata:
        resp = await self._http.patch(self._path("data", path), _write_body(data, cas))
        return self._data(resp, KvV2VersionMetadata.from_dict)

    async def read_secret_subkeys(
        self, path: str, version: int | None = None, depth: int | None = None
    ) -> KvV2ReadSubkeysResponse:
        resp = await self._http.get(
            self._path("subkeys", path), params={"version": version, "depth": depth}
        )
        return self._data(resp, KvV2ReadSubkeysResponse.from_dict)

    async def delete_secret_latest_version(self, path: str) -> bool:
        return is_success(await self._http.delete(self._path("data", path)))

    async def delete_secret_versions(self, path: str, versions: list[int]) -> bool:
        resp = await self._http.post(self._path("delete", path), {"versions": versions})
        return is_success(resp)

    async def undelete_secret_versions(self, path: str, versions: list[int]) -> bool:
        resp = await self._http.post(self._path("undelete", path), {"versions": versions})
        return is_success(resp)

    async def destroy_secret_versions(self, path: str, versions: list[int]) -> bool:
        """指定バージョンのデータを完全に削除する。"""
        resp = await self._http.put(self._path("destroy", path), {"versions": versions})
        return is_success(resp)

    async def list_secrets(self, path: str) -> list[str]:
        return await self._http.list_keys(self._path("metadata", path))

    async def read_secret_metadata(self, path: str) -> KvV2ReadMetadataResponse:
        resp = await self._http.get(self._path("metadata", path))
        return self._data(resp, KvV2ReadMetadataResponse.from_dict)

    async def create_or_update_metadata(
        self, path: str, payload: KvV2WriteMetadataRequest | None = None
    ) -> bool:
        resp = await self._http.post(
            self._path("metadata", path), to_payload(payload or KvV2WriteMetadataRequest())
        )
        return is_success(resp)

    async def patch_metadata(
        self, path: str, payload: KvV2WriteMetadataRequest | None = None
    ) -> bool:
        resp = await self._http.patch(
            self._path("metadata", path), to_payload(payload or KvV2WriteMetadataRequest())
        )
        return is_success(resp)

    async def delete_metadata_and_all_versions(self, path: str) -> bool:
        return is_success(await self._http.delete(self._path("metadata", path)))


def _write_body(data: dict[str, Any], cas: int | None) -> dict[str, Any]:
    body: dict[str, Any] = {"data": data}
    if cas is not None:
        body["options"] = {"cas": cas}
    return body
