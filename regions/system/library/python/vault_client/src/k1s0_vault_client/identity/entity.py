"""Identity エンティティ（identity/entity）"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..http_client import is_success
from ..models import KeyInfoList
from ..serializers import parse_instant, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class EntityCreateOrUpdatePayload:
    name: str | None = None
    id: str | None = None
    metadata: dict[str, str] | None = None
    policies: list[str] | None = None
    disabled: bool | None = None


@dataclass(kw_only=True)
class EntityUpdateByIdPayload:
    name: str | None = None
    metadata: dict[str, str] | None = None
    policies: list[str] | None = None
    disabled: bool | None = None


@dataclass(kw_only=True)
class EntityCreateOrUpdateByNamePayload:
    metadata: dict[str, str] | None = None
    policies: list[str] | None = None
    disabled: bool | None = None


@dataclass(kw_only=True)
class EntityMergePayload:
    """エンティティ統合ペイロード。"""

    from_entity_ids: list[str]
    to_entity_id: str
    force: bool | None = None
    conflicting_alias_ids_to_keep: list[str] | None = None


@dataclass
class EntityCreateResponse:
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityCreateResponse:
        return cls(id=data["id"], name=data["name"])


@dataclass
class EntityReadResponse:
    """エンティティ読み取りレスポンス。"""

    id: str
    name: str
    aliases: list[dict[str, Any]] = field(default_factory=list)
    creation_time: datetime | None = None
    direct_group_ids: list[str] = field(default_factory=list)
    disabled: bool = False
    group_ids: list[str] = field(default_factory=list)
    inherited_group_ids: list[str] = field(default_factory=list)
    last_update_time: datetime | None = None
    merged_entity_ids: list[str] | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    namespace_id: str = ""
    policies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityReadResponse:
        return cls(
            id=data["id"],
            name=data["name"],
            aliases=data.get("aliases") or [],
            creation_time=parse_instant(data.get("creation_time")),
            direct_group_ids=data.get("direct_group_ids") or [],
            disabled=data.get("disabled", False),
            group_ids=data.get("group_ids") or [],
            inherited_group_ids=data.get("inherited_group_ids") or [],
            last_update_time=parse_instant(data.get("last_update_time")),
            merged_entity_ids=data.get("merged_entity_ids"),
            metadata=data.get("metadata") or {},
            namespace_id=data.get("namespace_id", ""),
            policies=data.get("policies") or [],
        )


class VaultIdentityEntity(VaultService):
    """Identity エンティティのクライアント。"""

    DEFAULT_PATH = "entity"

    async def create_or_update(
        self, payload: EntityCreateOrUpdatePayload | None = None
    ) -> EntityCreateResponse | None:
        """エンティティを作成する。id 指定の更新では Vault が 204 を返すため None になる。"""
        resp = await self._http.post(
            self.path, to_payload(payload or EntityCreateOrUpdatePayload())
        )
        return self._data_or_none(resp, EntityCreateResponse.from_dict)

    async def read_by_id(self, entity_id: str) -> EntityReadResponse:
        resp = await self._http.get(self._path("id", entity_id))
        return self._data(resp, EntityReadResponse.from_dict)

    async def update_by_id(self, entity_id: str, payload: EntityUpdateByIdPayload) -> bool:
        resp = await self._http.post(self._path("id", entity_id), to_payload(payload))
        return is_success(resp)

    async def delete_by_id(self, entity_id: str) -> bool:
        return is_success(await self._http.delete(self._path("id", entity_id)))

    async def batch_delete(self, entity_ids: list[str]) -> bool:
        resp = await self._http.post(self._path("batch-delete"), {"entity_ids": entity_ids})
        return is_success(resp)

    async def list_by_id(self) -> KeyInfoList:
        data = await self._http.list_data(self._path("id"))
        return self._decode(KeyInfoList.from_dict, data)

    async def create_or_update_by_name(
        self, name: str, payload: EntityCreateOrUpdateByNamePayload | None = None
    ) -> EntityCreateResponse | None:
        resp = await self._http.post(
            self._path("name", name), to_payload(payload or EntityCreateOrUpdateByNamePayload())
        )
        return self._data_or_none(resp, EntityCreateResponse.from_dict)

    async def read_by_name(self, name: str) -> EntityReadResponse:
        resp = await self._http.get(self._path("name", name))
        return self._data(resp, EntityReadResponse.from_dict)

    async def delete_by_name(self, name: str) -> bool:
        return is_success(await self._http.delete(self._path("name", name)))

    async def list_by_name(self) -> list[str]:
        return await self._http.list_keys(self._path("name"))

    async def merge(self, payload: EntityMergePayload) -> bool:
        return is_success(await self._http.post(self._path("merge"), to_payload(payload)))
