"""Vault シークレットエンジンクライアント。"""

from .kv2 import (
    KvV2ConfigureRequest,
    KvV2ReadConfigurationResponse,
    KvV2ReadMetadataResponse,
    KvV2ReadResponse,
    KvV2ReadSubkeysResponse,
    KvV2VersionMetadata,
    KvV2WriteMetadataRequest,
    VaultKV2Engine,
)

__all__ = [
    "KvV2ConfigureRequest",
    "KvV2ReadConfigurationResponse",
    "KvV2ReadMetadataResponse",
    "KvV2ReadResponse",
    "KvV2ReadSubkeysResponse",
    "KvV2VersionMetadata",
    "KvV2WriteMetadataRequest",
    "VaultKV2Engine",
]
