"""Vault 認証メソッドクライアント。"""

from .approle import (
    AppRoleCreateCustomSecretIdPayload,
    AppRoleCreateOrUpdatePayload,
    AppRoleGenerateSecretIdPayload,
    AppRoleLoginPayload,
    AppRoleLookUpSecretIdResponse,
    AppRoleReadRoleResponse,
    AppRoleWriteSecretIdResponse,
    VaultAuthAppRole,
)
from .kubernetes import (
    KubernetesAliasNameSource,
    KubernetesConfigureAuthPayload,
    KubernetesConfigureAuthResponse,
    KubernetesCreateOrUpdatePayload,
    KubernetesLoginPayload,
    KubernetesReadRoleResponse,
    VaultAuthKubernetes,
)
from .oidc import (
    JwksPair,
    OIDCAuthorizationUrlPayload,
    OIDCBoundClaimsType,
    OIDCCallbackPayload,
    OIDCConfigurePayload,
    OIDCConfigureResponse,
    OIDCCreateOrUpdatePayload,
    OIDCJwtLoginPayload,
    OIDCReadRoleResponse,
    OIDCResponseMode,
    OIDCResponseType,
    OIDCRoleType,
    VaultAuthOIDC,
)
from .token import (
    TokenCreatePayload,
    TokenLookupResponse,
    TokenReadRoleResponse,
    TokenRenewAccessorPayload,
    TokenRenewPayload,
    TokenWriteRolePayload,
    VaultAuthToken,
)
from .userpass import UserpassReadUserResponse, UserpassWriteUserPayload, VaultAuthUserpass

__all__ = [
    "AppRoleCreateCustomSecretIdPayload",
    "AppRoleCreateOrUpdatePayload",
    "AppRoleGenerateSecretIdPayload",
    "AppRoleLoginPayload",
    "AppRoleLookUpSecretIdResponse",
    "AppRoleReadRoleResponse",
    "AppRoleWriteSecretIdResponse",
    "JwksPair",
    "KubernetesAliasNameSource",
    "KubernetesConfigureAuthPayload",
    "KubernetesConfigureAuthResponse",
    "KubernetesCreateOrUpdatePayload",
    "KubernetesLoginPayload",
    "KubernetesReadRoleResponse",
    "OIDCAuthorizationUrlPayload",
    "OIDCBoundClaimsType",
    "OIDCCallbackPayload",
    "OIDCConfigurePayload",
    "OIDCConfigureResponse",
    "OIDCCreateOrUpdatePayload",
    "OIDCJwtLoginPayload",
    "OIDCReadRoleResponse",
    "OIDCResponseMode",
    "OIDCResponseType",
    "OIDCRoleType",
    "TokenCreatePayload",
    "TokenLookupResponse",
    "TokenReadRoleResponse",
    "TokenRenewAccessorPayload",
    "TokenRenewPayload",
    "TokenWriteRolePayload",
    "UserpassReadUserResponse",
    "UserpassWriteUserPayload",
    "VaultAuthAppRole",
    "VaultAuthKubernetes",
    "VaultAuthOIDC",
    "VaultAuthToken",
    "VaultAuthUserpass",
]
