"""Vault identity エンドポイントクライアント。"""

from .entity import (
    EntityCreateOrUpdateByNamePayload,
    EntityCreateOrUpdatePayload,
    EntityCreateResponse,
    EntityMergePayload,
    EntityReadResponse,
    EntityUpdateByIdPayload,
    VaultIdentityEntity,
)
from .oidc import (
    JWK,
    ClientType,
    IdentityOIDCResponseType,
    OIDCAuthorizationEndpointPayload,
    OIDCAuthorizationEndpointResponse,
    OIDCCreateOrUpdateAssignmentPayload,
    OIDCCreateOrUpdateClientPayload,
    OIDCCreateOrUpdateProviderPayload,
    OIDCCreateOrUpdateScopePayload,
    OIDCReadAssignmentResponse,
    OIDCReadClientResponse,
    OIDCReadProviderOpenIDConfigurationResponse,
    OIDCReadProviderResponse,
    OIDCReadScopeResponse,
    VaultIdentityOIDC,
)

__all__ = [
    "ClientType",
    "EntityCreateOrUpdateByNamePayload",
    "EntityCreateOrUpdatePayload",
    "EntityCreateResponse",
    "EntityMergePayload",
    "EntityReadResponse",
    "EntityUpdateByIdPayload",
    "IdentityOIDCResponseType",
    "JWK",
    "OIDCAuthorizationEndpointPayload",
    "OIDCAuthorizationEndpointResponse",
    "OIDCCreateOrUpdateAssignmentPayload",
    "OIDCCreateOrUpdateClientPayload",
    "OIDCCreateOrUpdateProviderPayload",
    "OIDCCreateOrUpdateScopePayload",
    "OIDCReadAssignmentResponse",
    "OIDCReadClientResponse",
    "OIDCReadProviderOpenIDConfigurationResponse",
    "OIDCReadProviderResponse",
    "OIDCReadScopeResponse",
    "VaultIdentityEntity",
    "VaultIdentityOIDC",
]
