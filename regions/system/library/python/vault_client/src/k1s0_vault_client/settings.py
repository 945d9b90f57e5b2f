"""YAML 設定ファイルからのクライアント設定読み込み"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import VaultError, VaultErrorCodes
from .models import VaultClientConfig, VaultMounts

# 環境変数名 → 設定キー
ENV_OVERRIDES = {
    "VAULT_ADDR": "url",
    "VAULT_TOKEN": "token",
    "VAULT_NAMESPACE": "namespace",
}


class MountsSection(BaseModel):
    """マウントパス設定。"""

    auth: str = "auth"
    approle: str = "approle"
    kubernetes: str = "kubernetes"
    oidc: str = "oidc"
    userpass: str = "userpass"
    token: str = "token"
    kv2: str = "secret"
    system: str = "sys"
    audit: str = "audit"
    system_auth: str = "auth"
    namespaces: str = "namespaces"
    identity: str = "identity"
    entity: str = "entity"
    identity_oidc: str = "oidc"


class VaultSettings(BaseModel):
    """Vault クライアント設定。"""

    url: str
    api_path: str = "v1"
    token: str | None = None
    namespace: str | None = None
    timeout_seconds: float = Field(default=10.0, gt=0)
    lookup_token: bool = False
    auto_renew_token: bool = False
    renew_before_seconds: float = Field(default=60.0, ge=0)
    renew_retry_seconds: float = Field(default=10.0, gt=0)
    mounts: MountsSection = Field(default_factory=MountsSection)

    def to_client_config(self) -> VaultClientConfig:
        return VaultClientConfig(
            base_url=self.url,
            api_path=self.api_path,
            token=self.token,
            namespace=self.namespace,
            timeout_seconds=self.timeout_seconds,
            lookup_token=self.lookup_token,
            auto_renew_token=self.auto_renew_token,
            renew_before_seconds=self.renew_before_seconds,
            renew_retry_seconds=self.renew_retry_seconds,
            mounts=VaultMounts(**self.mounts.model_dump()),
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise VaultError(
            code=VaultErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise VaultError(
            code=VaultErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise VaultError(
            code=VaultErrorCodes.PARSE_YAML,
            message=f"Config root must be a mapping: {path}",
        )
    return data


def load_settings(path: Path, env: Mapping[str, str] | None = None) -> VaultSettings:
    """設定ファイルを読み込んで VaultSettings を返す。

    path: YAML 設定ファイルパス。トップレベルに ``vault`` キーがあればその配下を使う。
    env: 上書きに使う環境変数（省略時は os.environ）。VAULT_ADDR / VAULT_TOKEN / VAULT_NAMESPACE。
    """
    data = _read_yaml(path)
    section = data.get("vault", data)
    if not isinstance(section, dict):
        raise VaultError(
            code=VaultErrorCodes.VALIDATION,
            message="Config validation failed: 'vault' must be a mapping",
        )
    environ = os.environ if env is None else env
    for name, key in ENV_OVERRIDES.items():
        value = environ.get(name)
        if value:
            section[key] = value
    try:
        return VaultSettings.model_validate(section)
    except ValidationError as e:
        raise VaultError(
            code=VaultErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
