"""identity エンドポイント（entity / oidc）のユニットテスト（respx モック）"""

import base64
import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx
from k1s0_vault_client.exceptions import VaultAPIError
from k1s0_vault_client.http_client import VaultHttpClient
from k1s0_vault_client.identity.entity import (
    EntityCreateOrUpdateByNamePayload,
    EntityCreateOrUpdatePayload,
    EntityMergePayload,
    EntityUpdateByIdPayload,
    VaultIdentityEntity,
)
from k1s0_vault_client.identity.oidc import (
    ClientType,
    OIDCAuthorizationEndpointPayload,
    OIDCCreateOrUpdateAssignmentPayload,
    OIDCCreateOrUpdateClientPayload,
    OIDCCreateOrUpdateProviderPayload,
    OIDCCreateOrUpdateScopePayload,
    OIDCReadScopeResponse,
    VaultIdentityOIDC,
)

BASE_URL = "http://vault.example.com:8200"
ENTITY_URL = f"{BASE_URL}/v1/identity/entity"
OIDC_URL = f"{BASE_URL}/v1/identity/oidc"


def make_entity_client() -> VaultIdentityEntity:
    return VaultIdentityEntity(VaultHttpClient(BASE_URL, token="s.root"), "identity/entity")


def make_oidc_client() -> VaultIdentityOIDC:
    return VaultIdentityOIDC(VaultHttpClient(BASE_URL, token="s.root"), "identity/oidc")


# --- entity ---


@respx.mock
async def test_entity_create() -> None:
    """エンティティ作成で ID と名前が返ること。"""
    route = respx.post(ENTITY_URL).mock(
        return_value=httpx.Response(200, json={"data": {"id": "e-1", "name": "alice"}})
    )
    result = await make_entity_client().create_or_update(
        EntityCreateOrUpdatePayload(name="alice", policies=["dev"])
    )
    assert result is not None
    assert result.id == "e-1"
    assert result.name == "alice"
    assert json.loads(route.calls.last.request.content) == {"name": "alice", "policies": ["dev"]}


@respx.mock
async def test_entity_update_returns_none() -> None:
    """既存エンティティの更新で空ボディの場合 None が返ること。"""
    respx.post(ENTITY_URL).mock(return_value=httpx.Response(204))
    result = await make_entity_client().create_or_update(
        EntityCreateOrUpdatePayload(id="e-1", disabled=True)
    )
    assert result is None


@respx.mock
async def test_entity_read_by_id() -> None:
    """ID によるエンティティ読み取りができること。"""
    respx.get(f"{ENTITY_URL}/id/e-1").mock(
        return_value=httpx.Response(
            200,
            json={
                "data": {
                    "id": "e-1",
                    "name": "alice",
                    "aliases": [{"id": "a-1", "mount_accessor": "auth_userpass_1", "name": "alice"}],
                    "creation_time": "2024-02-01T09:00:00.987654321Z",
                    "last_update_time": "2024-02-02T09:00:00Z",
                    "metadata": {"team": "a"},
                    "policies": ["dev"],
                    "namespace_id": "root",
                }
            },
        )
    )
    entity = await make_entity_client().read_by_id("e-1")
    assert entity.name == "alice"
    assert entity.aliases[0]["mount_accessor"] == "auth_userpass_1"
    assert entity.creation_time == datetime(2024, 2, 1, 9, 0, 0, 987654, tzinfo=UTC)
    assert entity.metadata == {"team": "a"}
    assert entity.disabled is False


@respx.mock
async def test_entity_update_and_delete_by_id() -> None:
    """ID による更新と削除ができること。"""
    update = respx.post(f"{ENTITY_URL}/id/e-1").mock(return_value=httpx.Response(204))
    respx.delete(f"{ENTITY_URL}/id/e-1").mock(return_value=httpx.Response(204))
    client = make_entity_client()
    assert await client.update_by_id("e-1", EntityUpdateByIdPayload(policies=["ops"])) is True
    assert await client.delete_by_id("e-1") is True
    assert json.loads(update.calls.last.request.content) == {"policies": ["ops"]}


@respx.mock
async def test_entity_batch_delete() -> None:
    """一括削除で ID 一覧が送信されること。"""
    route = respx.post(f"{ENTITY_URL}/batch-delete").mock(return_value=httpx.Response(204))
    assert await make_entity_client().batch_delete(["e-1", "e-2"]) is True
    assert json.loads(route.calls.last.request.content) == {"entity_ids": ["e-1", "e-2"]}


@respx.mock
async def test_entity_list_by_id() -> None:
    """ID 一覧と key_info が返ること。"""
    respx.route(method="LIST", url=f"{ENTITY_URL}/id").mock(
        return_value=httpx.Response(
            200,
            json={"data": {"keys": ["e-1"], "key_info": {"e-1": {"name": "alice"}}}},
        )
    )
    result = await make_entity_client().list_by_id()
    assert result.keys == ["e-1"]
    assert result.key_info["e-1"]["name"] == "alice"


@respx.mock
async def test_entity_list_by_id_empty() -> None:
    """エンティティがない場合は空の一覧になること。"""
    respx.route(method="LIST", url=f"{ENTITY_URL}/id").mock(
        return_value=httpx.Response(404, json={"errors": []})
    )
    result = await make_entity_client().list_by_id()
    assert result.keys == []
    assert result.key_info == {}


@respx.mock
async def test_entity_by_name() -> None:
    """名前によるエンティティ操作ができること。"""
    create = respx.post(f"{ENTITY_URL}/name/bob").mock(
        return_value=httpx.Response(200, json={"data": {"id": "e-2", "name": "bob"}})
    )
    respx.get(f"{ENTITY_URL}/name/bob").mock(
        return_value=httpx.Response(200, json={"data": {"id": "e-2", "name": "bob"}})
    )
    respx.route(method="LIST", url=f"{ENTITY_URL}/name").mock(
        return_value=httpx.Response(200, json={"data": {"keys": ["bob"]}})
    )
    respx.delete(f"{ENTITY_URL}/name/bob").mock(return_value=httpx.Response(204))
    client = make_entity_client()

    created = await client.create_or_update_by_name(
        "bob", EntityCreateOrUpdateByNamePayload(metadata={"team": "b"})
    )
    assert created is not None
    assert created.id == "e-2"
    assert (await client.read_by_name("bob")).id == "e-2"
    assert await client.list_by_name() == ["bob"]
    assert await client.delete_by_name("bob") is True
    assert json.loads(create.calls.last.request.content) == {"metadata": {"team": "b"}}


@respx.mock
async def test_entity_merge() -> None:
    """エンティティ統合ペイロードが送信されること。"""
    route = respx.post(f"{ENTITY_URL}/merge").mock(return_value=httpx.Response(204))
    payload = EntityMergePayload(from_entity_ids=["e-2"], to_entity_id="e-1", force=True)
    assert await make_entity_client().merge(payload) is True
    assert json.loads(route.calls.last.request.content) == {
        "from_entity_ids": ["e-2"],
        "to_entity_id": "e-1",
        "force": True,
    }


# --- oidc provider ---


@respx.mock
async def test_oidc_provider_crud() -> None:
    """プロバイダの作成・読み取り・削除ができること。"""
    create = respx.post(f"{OIDC_URL}/provider/main").mock(return_value=httpx.Response(204))
    respx.get(f"{OIDC_URL}/provider/main").mock(
        return_value=httpx.Response(
            200,
            json={
                "data": {
                    "issuer": "http://vault.example.com:8200/v1/identity/oidc/provider/main",
                    "allowed_client_ids": ["*"],
                    "scopes_supported": ["user"],
                }
            },
        )
    )
    respx.delete(f"{OIDC_URL}/provider/main").mock(return_value=httpx.Response(204))
    client = make_oidc_client()

    payload = OIDCCreateOrUpdateProviderPayload(allowed_client_ids=["*"], scopes_supported=["user"])
    assert await client.create_or_update_provider("main", payload) is True
    provider = await client.read_provider("main")
    assert provider.issuer.endswith("/provider/main")
    assert provider.allowed_client_ids == ["*"]
    assert await client.delete_provider("main") is True
    assert json.loads(create.calls.last.request.content) == {
        "allowed_client_ids": ["*"],
        "scopes_supported": ["user"],
    }


@respx.mock
async def test_oidc_list_providers_with_filter() -> None:
    """allowed_client_id がクエリで送信されること。"""
    route = respx.route(method="LIST", url=f"{OIDC_URL}/provider").mock(
        return_value=httpx.Response(
            200,
            json={"data": {"keys": ["default"], "key_info": {"default": {"issuer": "x"}}}},
        )
    )
    result = await make_oidc_client().list_providers(allowed_client_id="cid")
    assert result.keys == ["default"]
    assert route.calls.last.request.url.params["allowed_client_id"] == "cid"


@respx.mock
async def test_oidc_read_openid_configuration() -> None:
    """ディスカバリドキュメントが data なしのボディから読み取れること。"""
    respx.get(f"{OIDC_URL}/provider/main/.well-known/openid-configuration").mock(
        return_value=httpx.Response(
            200,
            json={
                "issuer": "http://vault/v1/identity/oidc/provider/main",
                "authorization_endpoint": "http://vault/ui/vault/identity/oidc/provider/main/authorize",
                "token_endpoint": "http://vault/v1/identity/oidc/provider/main/token",
                "jwks_uri": "http://vault/v1/identity/oidc/provider/main/.well-known/keys",
                "response_types_supported": ["code"],
                "subject_types_supported": ["public"],
                "id_token_signing_alg_values_supported": ["RS256"],
                "request_uri_parameter_supported": False,
            },
        )
    )
    config = await make_oidc_client().read_provider_openid_configuration("main")
    assert config.issuer == "http://vault/v1/identity/oidc/provider/main"
    assert config.response_types_supported == ["code"]
    assert config.token_endpoint == "http://vault/v1/identity/oidc/provider/main/token"
    assert config.extra == {"request_uri_parameter_supported": False}


@respx.mock
async def test_oidc_read_public_keys() -> None:
    """公開鍵一覧が JWK として読み取れること。"""
    respx.get(f"{OIDC_URL}/provider/main/.well-known/keys").mock(
        return_value=httpx.Response(
            200,
            json={
                "keys": [
                    {
                        "kty": "RSA",
                        "kid": "k-1",
                        "use": "sig",
                        "alg": "RS256",
                        "n": "abc",
                        "e": "AQAB",
                        "x5t#S256": "thumb",
                    }
                ]
            },
        )
    )
    keys = await make_oidc_client().read_provider_public_keys("main")
    assert len(keys) == 1
    assert keys[0].kid == "k-1"
    assert keys[0].x5t_s256 == "thumb"


@respx.mock
async def test_oidc_authorization_endpoint() -> None:
    """認可エンドポイントにクエリが送信され code が返ること。"""
    route = respx.get(f"{OIDC_URL}/provider/main/authorize").mock(
        return_value=httpx.Response(200, json={"code": "auth-code", "state": "st"})
    )
    payload = OIDCAuthorizationEndpointPayload(
        scope="openid",
        client_id="cid",
        redirect_uri="http://app/callback",
        state="st",
        nonce="nn",
    )
    result = await make_oidc_client().authorization_endpoint("main", payload)
    assert result.code == "auth-code"
    assert result.state == "st"
    params = route.calls.last.request.url.params
    assert params["response_type"] == "code"
    assert params["client_id"] == "cid"
    assert "max_age" not in params


@respx.mock
async def test_oidc_authorization_endpoint_error() -> None:
    """認可エラーは data.error から VaultAPIError になること。"""
    respx.get(f"{OIDC_URL}/provider/main/authorize").mock(
        return_value=httpx.Response(400, json={"data": {"error": "invalid_client_id"}})
    )
    payload = OIDCAuthorizationEndpointPayload(
        scope="openid", client_id="bad", redirect_uri="http://app/callback", state="s", nonce="n"
    )
    with pytest.raises(VaultAPIError) as exc_info:
        await make_oidc_client().authorization_endpoint("main", payload)
    assert exc_info.value.errors == ["invalid_client_id"]


# --- oidc scope / client / assignment ---


@respx.mock
async def test_oidc_scope() -> None:
    """スコープの作成・読み取り・一覧・削除ができること。"""
    template = '{"groups": {{identity.entity.groups.names}}}'
    create = respx.post(f"{OIDC_URL}/scope/groups").mock(return_value=httpx.Response(204))
    respx.get(f"{OIDC_URL}/scope/groups").mock(
        return_value=httpx.Response(
            200, json={"data": {"template": template, "description": "groups"}}
        )
    )
    respx.route(method="LIST", url=f"{OIDC_URL}/scope").mock(
        return_value=httpx.Response(200, json={"data": {"keys": ["groups"]}})
    )
    respx.delete(f"{OIDC_URL}/scope/groups").mock(return_value=httpx.Response(204))
    client = make_oidc_client()

    payload = OIDCCreateOrUpdateScopePayload(template=template, description="groups")
    assert await client.create_or_update_scope("groups", payload) is True
    scope = await client.read_scope("groups")
    assert scope.template == template
    assert await client.list_scopes() == ["groups"]
    assert await client.delete_scope("groups") is True
    assert json.loads(create.calls.last.request.content)["description"] == "groups"


def test_oidc_scope_decode_template() -> None:
    """Base64 エンコードされたテンプレートをデコードできること。"""
    encoded = base64.b64encode(b'{"email": "a@example.com"}').decode("ascii")
    scope = OIDCReadScopeResponse(template=encoded)
    assert scope.decode_template(base64_encoded=True) == {"email": "a@example.com"}
    assert OIDCReadScopeResponse(template='{"a": 1}').decode_template() == {"a": 1}


@respx.mock
async def test_oidc_client() -> None:
    """OIDC クライアントの作成・読み取り・一覧・削除ができること。"""
    create = respx.post(f"{OIDC_URL}/client/app").mock(return_value=httpx.Response(204))
    respx.get(f"{OIDC_URL}/client/app").mock(
        return_value=httpx.Response(
            200,
            json={
                "data": {
                    "client_id": "cid",
                    "client_secret": "hvo_secret",
                    "client_type": "public",
                    "key": "default",
                    "redirect_uris": ["http://app/callback"],
                    "assignments": ["allow_all"],
                    "id_token_ttl": 86400,
                    "access_token_ttl": 3600,
                }
            },
        )
    )
    respx.route(method="LIST", url=f"{OIDC_URL}/client").mock(
        return_value=httpx.Response(
            200, json={"data": {"keys": ["app"], "key_info": {"app": {"client_id": "cid"}}}}
        )
    )
    respx.delete(f"{OIDC_URL}/client/app").mock(return_value=httpx.Response(204))
    client = make_oidc_client()

    payload = OIDCCreateOrUpdateClientPayload(
        redirect_uris=["http://app/callback"],
        assignments=["allow_all"],
        client_type=ClientType.PUBLIC,
        id_token_ttl=timedelta(days=1),
    )
    assert await client.create_or_update_client("app", payload) is True
    oidc_client = await client.read_client("app")
    assert oidc_client.client_id == "cid"
    assert oidc_client.client_type == ClientType.PUBLIC
    assert oidc_client.id_token_ttl == timedelta(days=1)
    listed = await client.list_clients()
    assert listed.key_info["app"]["client_id"] == "cid"
    assert await client.delete_client("app") is True
    assert json.loads(create.calls.last.request.content) == {
        "redirect_uris": ["http://app/callback"],
        "assignments": ["allow_all"],
        "client_type": "public",
        "id_token_ttl": "86400s",
    }


@respx.mock
async def test_oidc_assignment() -> None:
    """割り当ての作成・読み取り・一覧・削除ができること。"""
    create = respx.post(f"{OIDC_URL}/assignment/devs").mock(return_value=httpx.Response(204))
    respx.get(f"{OIDC_URL}/assignment/devs").mock(
        return_value=httpx.Response(
            200, json={"data": {"entity_ids": ["e-1"], "group_ids": []}}
        )
    )
    respx.route(method="LIST", url=f"{OIDC_URL}/assignment").mock(
        return_value=httpx.Response(200, json={"data": {"keys": ["allow_all", "devs"]}})
    )
    respx.delete(f"{OIDC_URL}/assignment/devs").mock(return_value=httpx.Response(204))
    client = make_oidc_client()

    payload = OIDCCreateOrUpdateAssignmentPayload(entity_ids=["e-1"])
    assert await client.create_or_update_assignment("devs", payload) is True
    assignment = await client.read_assignment("devs")
    assert assignment.entity_ids == ["e-1"]
    assert assignment.group_ids == []
    assert await client.list_assignments() == ["allow_all", "devs"]
    assert await client.delete_assignment("devs") is True
    assert json.loads(create.calls.last.request.content) == {"entity_ids": ["e-1"]}
