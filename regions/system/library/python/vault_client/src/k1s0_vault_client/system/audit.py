"""監査デバイス管理（sys/audit）"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..http_client import is_success
from ..models import AuditDeviceType
from ..serializers import require_enum, to_payload
from ..service import VaultService


@dataclass(kw_only=True)
class AuditingEnableDevicePayload:
    type: AuditDeviceType
    description: str | None = None
    local: bool | None = None
    options: dict[str, str] | None = None


@dataclass
class AuditingDeviceResponse:
    type: AuditDeviceType
    path: str
    description: str = ""
    local: bool = False
    options: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditingDeviceResponse:
        return cls(
            type=require_enum(AuditDeviceType, data.get("type")),
            path=data["path"],
            description=data.get("description") or "",
            local=data.get("local", False),
            options=data.get("options") or {},
        )


class VaultSystemAudit(VaultService):
    """監査デバイスの一覧・有効化・無効化を行うクライアント。"""

    DEFAULT_PATH = "audit"

    async def list(self) -> dict[str, AuditingDeviceResponse]:
        resp = await self._http.get(self.path)
        return self._data(
            resp,
            lambda data: {
                path: AuditingDeviceResponse.from_dict(device) for path, device in data.items()
            },
        )

    async def enable(self, path: str, payload: AuditingEnableDevicePayload) -> bool:
        return is_success(await self._http.post(self._path(path), to_payload(payload)))

    async def disable(self, path: str) -> bool:
        return is_success(await self._http.delete(self._path(path)))
