"""Vault sys エンドポイントクライアント。"""

from .audit import AuditingDeviceResponse, AuditingEnableDevicePayload, VaultSystemAudit
from .auth import (
    AuthMountConfig,
    AuthReadConfigurationResponse,
    AuthReadTuningInformationResponse,
    AuthTuneConfigurationParametersPayload,
    EnableMethodConfig,
    EnableMethodPayload,
    UserLockoutConfig,
    VaultSystemAuth,
)
from .namespaces import NamespaceInformation, VaultSystemNamespaces

__all__ = [
    "AuditingDeviceResponse",
    "AuditingEnableDevicePayload",
    "AuthMountConfig",
    "AuthReadConfigurationResponse",
    "AuthReadTuningInformationResponse",
    "AuthTuneConfigurationParametersPayload",
    "EnableMethodConfig",
    "EnableMethodPayload",
    "NamespaceInformation",
    "UserLockoutConfig",
    "VaultSystemAudit",
    "VaultSystemAuth",
    "VaultSystemNamespaces",
]
