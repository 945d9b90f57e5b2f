"""名前空間管理（sys/namespaces）"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..http_client import is_success
from ..service import VaultService


@dataclass
class NamespaceInformation:
    id: str
    path: str
    custom_metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NamespaceInformation:
        return cls(
            id=data["id"],
            path=data["path"],
            custom_metadata=data.get("custom_metadata") or {},
        )


class VaultSystemNamespaces(VaultService):
    """Vault Enterprise の名前空間を操作するクライアント。"""

    DEFAULT_PATH = "namespaces"

    async def list(self) -> list[str]:
        return await self._http.list_keys(self.path)

    async def create(self, path: str, custom_metadata: dict[str, str] | None = None) -> bool:
        body = None if custom_metadata is None else {"custom_metadata": custom_metadata}
        return is_success(await self._http.post(self._path(path), body))

    async def patch(self, path: str, custom_metadata: dict[str, str]) -> bool:
        resp = await self._http.patch(self._path(path), {"custom_metadata": custom_metadata})
        return is_success(resp)

    async def delete(self, path: str) -> bool:
        return is_success(await self._http.delete(self._path(path)))

    async def read(self, path: str) -> NamespaceInformation:
        resp = await self._http.get(self._path(path))
        return self._data(resp, NamespaceInformation.from_dict)

    async def lock(self, path: str | None = None) -> bool:
        """API ロックを有効にする。path 省略時は現在の名前空間が対象。"""
        return is_success(await self._http.post(self._api_lock_path("lock", path)))

    async def unlock(self, path: str | None = None, unlock_key: str | None = None) -> bool:
        body = None if unlock_key is None else {"unlock_key": unlock_key}
        return is_success(await self._http.post(self._api_lock_path("unlock", path), body))

    def _api_lock_path(self, action: str, path: str | None) -> str:
        if path:
            return self._path("api-lock", action, path)
        return self._path("api-lock", action)
