"""k1s0 vault client library."""

from .client import VaultAuth, VaultClient, VaultIdentity, VaultSecretEngine, VaultSystem
from .exceptions import VaultAPIError, VaultError, VaultErrorCodes, VaultFieldNotFoundError
from .http_client import ResponseFields, VaultHttpClient
from .models import (
    AuditDeviceType,
    KeyInfoList,
    ListingVisibility,
    LoginResponse,
    TokenInfo,
    TokenSettings,
    TokenType,
    VaultClientConfig,
    VaultMounts,
)
from .paths import add_url_child_path, build_base_url
from .settings import VaultSettings, load_settings

__all__ = [
    "AuditDeviceType",
    "KeyInfoList",
    "ListingVisibility",
    "LoginResponse",
    "ResponseFields",
    "TokenInfo",
    "TokenSettings",
    "TokenType",
    "VaultAPIError",
    "VaultAuth",
    "VaultClient",
    "VaultClientConfig",
    "VaultError",
    "VaultErrorCodes",
    "VaultFieldNotFoundError",
    "VaultHttpClient",
    "VaultIdentity",
    "VaultMounts",
    "VaultSecretEngine",
    "VaultSettings",
    "VaultSystem",
    "add_url_child_path",
    "build_base_url",
    "load_settings",
]
