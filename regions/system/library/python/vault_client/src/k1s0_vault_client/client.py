"""Vault クライアント（トップレベル）"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from datetime import timedelta
from types import TracebackType

import structlog

from .auth.approle import VaultAuthAppRole
from .auth.kubernetes import VaultAuthKubernetes
from .auth.oidc import VaultAuthOIDC
from .auth.token import VaultAuthToken
from .auth.userpass import VaultAuthUserpass
from .exceptions import VaultError, VaultErrorCodes
from .http_client import VaultHttpClient
from .identity.entity import VaultIdentityEntity
from .identity.oidc import VaultIdentityOIDC
from .models import LoginResponse, TokenInfo, VaultClientConfig, VaultMounts
from .paths import add_url_child_path
from .secret.kv2 import VaultKV2Engine
from .system.audit import VaultSystemAudit
from .system.auth import VaultSystemAuth
from .system.namespaces import VaultSystemNamespaces

logger = structlog.get_logger(__name__)


class VaultAuth:
    """認証メソッド群と現在のトークンを保持する。"""

    def __init__(self, http: VaultHttpClient, mounts: VaultMounts) -> None:
        self._http = http
        self.path = mounts.auth
        self.approle = VaultAuthAppRole(http, add_url_child_path(self.path, mounts.approle))
        self.kubernetes = VaultAuthKubernetes(http, add_url_child_path(self.path, mounts.kubernetes))
        self.oidc = VaultAuthOIDC(http, add_url_child_path(self.path, mounts.oidc))
        self.userpass = VaultAuthUserpass(http, add_url_child_path(self.path, mounts.userpass))
        self.token = VaultAuthToken(http, add_url_child_path(self.path, mounts.token))
        self.token_info: TokenInfo | None = (
            None if http.token is None else TokenInfo(token=http.token)
        )
        self._renew_task: asyncio.Task[None] | None = None

    @property
    def client_token(self) -> str | None:
        return self._http.token

    @client_token.setter
    def client_token(self, value: str | None) -> None:
        self._http.token = value
        self.token_info = None if value is None else TokenInfo(token=value)

    async def login(self, login: Awaitable[LoginResponse]) -> LoginResponse:
        """ログイン処理を実行し、返されたトークンを以後のリクエストに使用する。

        例::

            await client.auth.login(client.auth.userpass.login("alice", "secret"))
        """
        response = await login
        self._http.token = response.client_token
        self.token_info = TokenInfo.from_login_response(response)
        logger.info("vault login succeeded", accessor=response.accessor)
        return response

    async def lookup_token_info(self) -> TokenInfo:
        """lookup-self で現在のトークン情報を取得して保持する。"""
        token = self._http.token
        if token is None:
            raise VaultError(
                code=VaultErrorCodes.INVALID_ARGUMENT,
                message="A token must be set to look up its information",
            )
        lookup = await self.token.lookup_self_token()
        self.token_info = lookup.to_token_info(token)
        return self.token_info

    @property
    def auto_renew_enabled(self) -> bool:
        return self._renew_task is not None and not self._renew_task.done()

    def enable_auto_renew_token(
        self, renew_before_seconds: float = 60.0, retry_seconds: float = 10.0
    ) -> bool:
        """有効期限の renew_before_seconds 秒前に renew-self を行うタスクを開始する。

        既にタスクが動いている場合は何もせず False を返す。
        """
        if self.auto_renew_enabled:
            return False
        self._renew_task = asyncio.create_task(
            self._renew_loop(renew_before_seconds, retry_seconds)
        )
        return True

    async def disable_auto_renew_token(self) -> None:
        if self._renew_task is not None:
            self._renew_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._renew_task
            self._renew_task = None

    def _next_renew_delay(self, renew_before_seconds: float) -> float | None:
        info = self.token_info
        if info is None or not info.renewable:
            return None
        remaining = info.expires_in()
        if remaining is None:
            return None
        return max((remaining - timedelta(seconds=renew_before_seconds)).total_seconds(), 0.0)

    async def _renew_loop(self, renew_before_seconds: float, retry_seconds: float) -> None:
        """トークン自動更新ループ。

        更新後のリースが renew_before_seconds 以下の場合（短い TTL や max TTL 到達間近）は
        リースの半分、ただし retry_seconds 以上待ってから次の更新を行う。
        """
        delay = self._next_renew_delay(renew_before_seconds)
        while delay is not None:
            await asyncio.sleep(delay)
            try:
                response = await self.token.renew_self_token()
            except VaultError as e:
                logger.error("failed to renew vault token", error=str(e))
                delay = retry_seconds
                continue
            self.token_info = TokenInfo.from_login_response(response)
            lease_seconds = response.lease_duration.total_seconds()
            logger.info("vault token renewed", lease_duration=int(lease_seconds))
            delay = self._next_renew_delay(renew_before_seconds)
            if delay is not None and lease_seconds <= renew_before_seconds:
                delay = max(lease_seconds / 2, retry_seconds)
        logger.info("vault token is not renewable, auto renew stopped")


class VaultSecretEngine:
    """シークレットエンジン群。"""

    def __init__(self, http: VaultHttpClient, mounts: VaultMounts) -> None:
        self.kv2 = VaultKV2Engine(http, mounts.kv2)


class VaultSystem:
    """sys 配下のエンドポイント群。"""

    def __init__(self, http: VaultHttpClient, mounts: VaultMounts) -> None:
        self.path = mounts.system
        self.audit = VaultSystemAudit(http, add_url_child_path(self.path, mounts.audit))
        self.auth = VaultSystemAuth(http, add_url_child_path(self.path, mounts.system_auth))
        self.namespaces = VaultSystemNamespaces(
            http, add_url_child_path(self.path, mounts.namespaces)
        )


class VaultIdentity:
    """identity 配下のエンドポイント群。"""

    def __init__(self, http: VaultHttpClient, mounts: VaultMounts) -> None:
        self.path = mounts.identity
        self.entity = VaultIdentityEntity(http, add_url_child_path(self.path, mounts.entity))
        self.oidc = VaultIdentityOIDC(http, add_url_child_path(self.path, mounts.identity_oidc))


class VaultClient:
    """Vault HTTP API クライアント。

    ``client.auth.approle`` や ``client.secret.kv2`` のように機能別クライアントへ辿れる。
    token と namespace は変更可能で、次のリクエストから反映される。
    """

    def __init__(self, config: VaultClientConfig) -> None:
        self._config = config
        self._http = VaultHttpClient(
            base_url=config.base_url,
            api_path=config.api_path,
            token=config.token,
            namespace=config.namespace,
            timeout_seconds=config.timeout_seconds,
        )
        self.auth = VaultAuth(self._http, config.mounts)
        self.secret = VaultSecretEngine(self._http, config.mounts)
        self.system = VaultSystem(self._http, config.mounts)
        self.identity = VaultIdentity(self._http, config.mounts)

    @classmethod
    async def create(cls, config: VaultClientConfig) -> VaultClient:
        """クライアントを生成し、設定に応じてトークン参照と自動更新を開始する。

        初期化に失敗した場合はクライアントを閉じて例外を再送出する。
        """
        client = cls(config)
        try:
            if config.lookup_token:
                await client.auth.lookup_token_info()
            if config.auto_renew_token:
                if not config.lookup_token:
                    logger.warning(
                        "auto_renew_token without lookup_token has no expiration to schedule from, "
                        "auto renew stops until token info is set by login or lookup"
                    )
                client.auth.enable_auto_renew_token(
                    renew_before_seconds=config.renew_before_seconds,
                    retry_seconds=config.renew_retry_seconds,
                )
        except Exception:
            await client.aclose()
            raise
        return client

    @property
    def config(self) -> VaultClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def token(self) -> str | None:
        return self.auth.client_token

    @token.setter
    def token(self, value: str | None) -> None:
        self.auth.client_token = value

    @property
    def namespace(self) -> str | None:
        return self._http.namespace

    @namespace.setter
    def namespace(self, value: str | None) -> None:
        self._http.namespace = value

    async def aclose(self) -> None:
        await self.auth.disable_auto_renew_token()

    async def __aenter__(self) -> VaultClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
