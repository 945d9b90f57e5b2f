"""VaultClient のユニットテスト（respx モック）"""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx
from k1s0_vault_client import (
    LoginResponse,
    TokenInfo,
    VaultAPIError,
    VaultClient,
    VaultClientConfig,
    VaultError,
    VaultErrorCodes,
    VaultMounts,
)
from respx.models import Route
from structlog.testing import capture_logs

BASE_URL = "http://vault.example.com:8200"
API_URL = f"{BASE_URL}/v1"

LOOKUP_SELF = {
    "data": {
        "id": "s.root",
        "accessor": "acc",
        "expire_time": "2099-01-01T00:00:00Z",
        "policies": ["root"],
        "renewable": True,
        "type": "service",
    }
}


def make_client(**kwargs: object) -> VaultClient:
    return VaultClient(VaultClientConfig(base_url=BASE_URL, **kwargs))


async def wait_until_called(route: Route, count: int = 1) -> None:
    for _ in range(200):
        if route.call_count >= count:
            return
        await asyncio.sleep(0.01)


def test_client_wires_feature_paths() -> None:
    """各機能クライアントが既定のマウントパスで構成されること。"""
    client = make_client()
    assert client.base_url == f"{API_URL}/"
    assert client.auth.approle.path == "auth/approle"
    assert client.auth.kubernetes.path == "auth/kubernetes"
    assert client.auth.oidc.path == "auth/oidc"
    assert client.auth.userpass.path == "auth/userpass"
    assert client.auth.token.path == "auth/token"
    assert client.secret.kv2.path == "secret"
    assert client.system.audit.path == "sys/audit"
    assert client.system.auth.path == "sys/auth"
    assert client.system.namespaces.path == "sys/namespaces"
    assert client.identity.entity.path == "identity/entity"
    assert client.identity.oidc.path == "identity/oidc"


@respx.mock
async def test_custom_mounts() -> None:
    """独自のマウントパスでリクエストが送信されること。"""
    route = respx.get(f"{API_URL}/kv/data/app").mock(
        return_value=httpx.Response(200, json={"data": {"data": {"a": "b"}, "metadata": {}}})
    )
    client = make_client(token="s.root", mounts=VaultMounts(kv2="kv", userpass="ldap-users"))
    assert client.auth.userpass.path == "auth/ldap-users"
    secret = await client.secret.kv2.read_secret("app")
    assert secret.data == {"a": "b"}
    assert route.called


@respx.mock
async def test_token_and_namespace_are_mutable() -> None:
    """トークンと名前空間の変更が次のリクエストに反映されること。"""
    route = respx.route(method="LIST", url=f"{API_URL}/auth/approle/role").mock(
        return_value=httpx.Response(200, json={"data": {"keys": []}})
    )
    client = make_client(token="s.first")
    await client.auth.approle.list()
    first = route.calls.last.request
    assert first.headers["X-Vault-Token"] == "s.first"
    assert "X-Vault-Namespace" not in first.headers

    client.token = "s.second"
    client.namespace = "team-a"
    await client.auth.approle.list()
    second = route.calls.last.request
    assert second.headers["X-Vault-Token"] == "s.second"
    assert second.headers["X-Vault-Namespace"] == "team-a"
    assert client.auth.token_info == TokenInfo(token="s.second")

    client.namespace = None
    await client.auth.approle.list()
    assert "X-Vault-Namespace" not in route.calls.last.request.headers


@respx.mock
async def test_login_sets_token() -> None:
    """ログイン後のリクエストに取得したトークンが使われること。"""
    respx.post(f"{API_URL}/auth/userpass/login/alice").mock(
        return_value=httpx.Response(
            200,
            json={
                "auth": {
                    "client_token": "s.alice",
                    "accessor": "acc",
                    "lease_duration": 3600,
                    "renewable": True,
                }
            },
        )
    )
    list_route = respx.route(method="LIST", url=f"{API_URL}/auth/token/accessors").mock(
        return_value=httpx.Response(200, json={"data": {"keys": ["acc"]}})
    )
    client = make_client()
    response = await client.auth.login(client.auth.userpass.login("alice", "secret"))
    assert isinstance(response, LoginResponse)
    assert client.token == "s.alice"

    info = client.auth.token_info
    assert info is not None
    assert info.renewable is True
    remaining = info.expires_in()
    assert remaining is not None
    assert timedelta(minutes=59) < remaining <= timedelta(hours=1)

    await client.auth.token.list_accessors()
    assert list_route.calls.last.request.headers["X-Vault-Token"] == "s.alice"


@respx.mock
async def test_create_with_lookup_token() -> None:
    """lookup_token 指定時にトークン情報が取得されること。"""
    respx.get(f"{API_URL}/auth/token/lookup-self").mock(
        return_value=httpx.Response(200, json=LOOKUP_SELF)
    )
    client = await VaultClient.create(
        VaultClientConfig(base_url=BASE_URL, token="s.root", lookup_token=True)
    )
    info = client.auth.token_info
    assert info is not None
    assert info.accessor == "acc"
    assert info.expiration_date == datetime(2099, 1, 1, tzinfo=UTC)
    await client.aclose()


@respx.mock
async def test_create_with_lookup_token_failure() -> None:
    """トークン参照に失敗した場合は例外が送出されること。"""
    respx.get(f"{API_URL}/auth/token/lookup-self").mock(
        return_value=httpx.Response(403, json={"errors": ["permission denied"]})
    )
    with pytest.raises(VaultAPIError):
        await VaultClient.create(
            VaultClientConfig(
                base_url=BASE_URL, token="s.bad", lookup_token=True, auto_renew_token=True
            )
        )


async def test_lookup_token_info_without_token() -> None:
    """トークン未設定で参照すると INVALID_ARGUMENT になること。"""
    client = make_client()
    with pytest.raises(VaultError) as exc_info:
        await client.auth.lookup_token_info()
    assert exc_info.value.code == VaultErrorCodes.INVALID_ARGUMENT


@respx.mock
async def test_auto_renew_token() -> None:
    """有効期限前にトークンが自動更新されること。"""
    route = respx.post(f"{API_URL}/auth/token/renew-self").mock(
        return_value=httpx.Response(
            200,
            json={
                "auth": {"client_token": "s.root", "lease_duration": 7200, "renewable": True}
            },
        )
    )
    async with make_client(token="s.root") as client:
        client.auth.token_info = TokenInfo(
            token="s.root",
            renewable=True,
            expiration_date=datetime.now(UTC) + timedelta(seconds=30),
        )
        client.auth.enable_auto_renew_token(renew_before_seconds=60, retry_seconds=0.01)
        assert client.auth.auto_renew_enabled
        await wait_until_called(route)
        assert route.call_count == 1
        await asyncio.sleep(0.05)
        info = client.auth.token_info
        assert info is not None
        remaining = info.expires_in()
        assert remaining is not None
        assert remaining > timedelta(hours=1)
    assert not client.auth.auto_renew_enabled


@respx.mock
async def test_auto_renew_token_retries_after_failure() -> None:
    """更新失敗時はリトライ間隔後に再試行されること。"""
    route = respx.post(f"{API_URL}/auth/token/renew-self").mock(
        side_effect=[
            httpx.Response(500, json={"errors": ["internal error"]}),
            httpx.Response(
                200,
                json={
                    "auth": {"client_token": "s.root", "lease_duration": 7200, "renewable": True}
                },
            ),
        ]
    )
    client = make_client(token="s.root")
    client.auth.token_info = TokenInfo(
        token="s.root",
        renewable=True,
        expiration_date=datetime.now(UTC) + timedelta(seconds=5),
    )
    client.auth.enable_auto_renew_token(renew_before_seconds=60, retry_seconds=0.01)
    await wait_until_called(route, count=2)
    assert route.call_count == 2
    await client.aclose()


async def test_auto_renew_stops_for_non_renewable_token() -> None:
    """更新不可のトークンでは自動更新タスクが終了すること。"""
    client = make_client(token="s.root")
    client.auth.token_info = TokenInfo(token="s.root", renewable=False)
    client.auth.enable_auto_renew_token()
    await asyncio.sleep(0.01)
    assert not client.auth.auto_renew_enabled
    await client.aclose()


@respx.mock
async def test_auto_renew_waits_when_lease_is_shorter_than_renew_window() -> None:
    """更新後のリースが更新猶予より短くても連続して更新しないこと。"""
    route = respx.post(f"{API_URL}/auth/token/renew-self").mock(
        return_value=httpx.Response(
            200,
            json={"auth": {"client_token": "s.root", "lease_duration": 30, "renewable": True}},
        )
    )
    client = make_client(token="s.root")
    client.auth.token_info = TokenInfo(
        token="s.root",
        renewable=True,
        expiration_date=datetime.now(UTC) + timedelta(seconds=30),
    )
    client.auth.enable_auto_renew_token()
    await wait_until_called(route)
    await asyncio.sleep(0.5)
    assert route.call_count == 1
    assert client.auth.auto_renew_enabled
    await client.aclose()


async def test_enable_auto_renew_token_reports_running_task() -> None:
    """既に自動更新タスクが動いている場合は False を返すこと。"""
    client = make_client(token="s.root")
    client.auth.token_info = TokenInfo(
        token="s.root",
        renewable=True,
        expiration_date=datetime.now(UTC) + timedelta(hours=1),
    )
    assert client.auth.enable_auto_renew_token() is True
    assert client.auth.enable_auto_renew_token() is False
    await client.aclose()
    assert not client.auth.auto_renew_enabled


def test_config_token_initializes_token_info() -> None:
    """設定で渡したトークンから token_info が初期化されること。"""
    assert make_client(token="s.root").auth.token_info == TokenInfo(token="s.root")
    assert make_client().auth.token_info is None


async def test_create_warns_auto_renew_without_lookup_token() -> None:
    """lookup_token なしで auto_renew_token を指定すると警告が出ること。"""
    with capture_logs() as logs:
        client = await VaultClient.create(
            VaultClientConfig(base_url=BASE_URL, token="s.root", auto_renew_token=True)
        )
    await client.aclose()
    assert any(
        entry["log_level"] == "warning" and "lookup_token" in entry["event"] for entry in logs
    )
