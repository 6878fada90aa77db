import uuid
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.api.dependencies.services import get_file_service
from app.core.response_codes import ResponseCodeEnum
from app.infra.db.session import get_session
from app.main import app
from app.repo.crud.recipes.recipe_repo import RecipeRepository
from tests.helpers import auth_header, make_token

API = "/api/v1"


@pytest_asyncio.fixture
async def client(session_maker, file_service):
    async def override_get_session():
        async with session_maker() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_file_service] = lambda: file_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# --- 发现页 ---

@pytest.mark.asyncio
async def test_discovery_endpoint_paginates(client, seed):
    for i in range(3):
        await seed.recipe(f"Recipe {i}")

    response = await client.get(f"{API}/recipes", params={"per_page": 2})
    body = response.json()

    assert response.status_code == 200
    assert body["code"] == ResponseCodeEnum.SUCCESS.code
    assert [item["title"] for item in body["data"]["items"]] == ["Recipe 2", "Recipe 1"]
    assert body["data"]["has_next"] is True


@pytest.mark.asyncio
async def test_discovery_endpoint_accepts_repeated_tag_ids(client, seed):
    a = await seed.tag("a")
    b = await seed.tag("b")
    await seed.recipe("A", tags=[a])
    await seed.recipe("B", tags=[b])
    await seed.recipe("C")

    response = await client.get(f"{API}/recipes", params=[("tag_ids", str(a.id)), ("tag_ids", str(b.id))])

    assert {item["title"] for item in response.json()["data"]["items"]} == {"A", "B"}


@pytest.mark.asyncio
async def test_discovery_endpoint_search_and_preset(client, seed):
    vegan = await seed.tag("vegan")
    await seed.recipe("Chocolate Mousse", tags=[vegan])
    await seed.recipe("Chocolate Cake")

    response = await client.get(f"{API}/recipes", params={"search": "chocolate", "preset": "vegan"})

    assert [item["title"] for item in response.json()["data"]["items"]] == ["Chocolate Mousse"]


@pytest.mark.asyncio
async def test_discovery_endpoint_reports_listing_failure(client):
    failing = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
    with patch.object(RecipeRepository, "list_discoverable", failing):
        response = await client.get(f"{API}/recipes", params={"page": 3})

    body = response.json()
    assert body["code"] == ResponseCodeEnum.RECIPE_LISTING_FAILED.code
    assert body["data"]["items"] == []
    assert body["data"]["page"] == 3
    assert body["data"]["error"]


# --- 认证 ---

@pytest.mark.asyncio
async def test_create_recipe_requires_login(client):
    response = await client.post(f"{API}/recipes", json={"title": "Pie"})
    assert response.status_code == 401
    assert response.json()["code"] == ResponseCodeEnum.AUTH_ERROR.code


@pytest.mark.asyncio
async def test_invalid_and_expired_tokens_are_rejected(client, seed):
    user = await seed.user()

    bad = await client.post(
        f"{API}/recipes", json={"title": "Pie"},
        headers={"Authorization": f"Bearer {make_token(user.id, secret='wrong-secret-0123456789abcdef-0123456789')}"},
    )
    expired = await client.post(
        f"{API}/recipes", json={"title": "Pie"},
        headers={"Authorization": f"Bearer {make_token(user.id, expires_in=-60)}"},
    )

    assert bad.status_code == 401
    assert bad.json()["code"] == ResponseCodeEnum.TOKEN_INVALID.code
    assert expired.status_code == 401
    assert expired.json()["code"] == ResponseCodeEnum.TOKEN_EXPIRED.code


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_unauthorized(client):
    response = await client.post(f"{API}/recipes", json={"title": "Pie"}, headers=auth_header(uuid.uuid4()))
    assert response.status_code == 401


# --- 菜谱 ---

@pytest.mark.asyncio
async def test_recipe_crud_flow(client, seed):
    user = await seed.user("alice")
    tag = await seed.tag("dessert")
    headers = auth_header(user.id)

    created = await client.post(
        f"{API}/recipes",
        json={"title": "Pie", "tag_ids": [str(tag.id)], "image_paths": ["alice/pie.jpg"]},
        headers=headers,
    )
    assert created.status_code == 201
    recipe_id = created.json()["data"]["id"]

    detail = (await client.get(f"{API}/recipes/{recipe_id}")).json()["data"]
    assert detail["author_username"] == "alice"
    assert detail["tags"][0]["name"] == "dessert"
    assert detail["images"][0]["url"].startswith("https://signed.test/alice/pie.jpg")

    updated = await client.put(f"{API}/recipes/{recipe_id}", json={"title": "Apple Pie"}, headers=headers)
    assert updated.json()["data"]["title"] == "Apple Pie"

    deleted = await client.delete(f"{API}/recipes/{recipe_id}", headers=headers)
    assert deleted.json()["code"] == ResponseCodeEnum.SUCCESS.code

    missing = await client.get(f"{API}/recipes/{recipe_id}")
    assert missing.json()["code"] == ResponseCodeEnum.NOT_FOUND.code

    purged = await client.delete(f"{API}/recipes/{recipe_id}/permanent", headers=headers)
    assert purged.json()["data"] == {"failed_objects": []}


@pytest.mark.asyncio
async def test_update_by_non_owner_is_forbidden(client, seed):
    owner = await seed.user("owner")
    other = await seed.user("other")
    recipe = await seed.recipe("Mine", user=owner)

    response = await client.put(
        f"{API}/recipes/{recipe.id}", json={"title": "Stolen"}, headers=auth_header(other.id)
    )

    assert response.status_code == 200
    assert response.json()["code"] == ResponseCodeEnum.FORBIDDEN.code


@pytest.mark.asyncio
async def test_invalid_payload_is_422(client, seed):
    user = await seed.user()
    response = await client.post(f"{API}/recipes", json={"title": "   "}, headers=auth_header(user.id))
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["   ", None])
async def test_update_with_blank_or_null_title_is_422(client, seed, title):
    user = await seed.user()
    recipe = await seed.recipe("Soup", user=user)

    response = await client.put(f"{API}/recipes/{recipe.id}", json={"title": title}, headers=auth_header(user.id))
    assert response.status_code == 422

    detail = await client.get(f"{API}/recipes/{recipe.id}")
    assert detail.json()["data"]["title"] == "Soup"
    listed = await client.get(f"{API}/recipes")
    assert [item["title"] for item in listed.json()["data"]["items"]] == ["Soup"]


# --- 标签 / 难度 ---

@pytest.mark.asyncio
async def test_tag_admin_endpoints(client, seed):
    admin = await seed.user("admin", is_admin=True)
    user = await seed.user("user")

    forbidden = await client.post(f"{API}/tags", json={"name": "new"}, headers=auth_header(user.id))
    assert forbidden.json()["code"] == ResponseCodeEnum.FORBIDDEN.code

    created = await client.post(f"{API}/tags", json={"name": " new "}, headers=auth_header(admin.id))
    assert created.status_code == 201
    tag_id = created.json()["data"]["id"]

    duplicate = await client.post(f"{API}/tags", json={"name": "NEW"}, headers=auth_header(admin.id))
    assert duplicate.json()["code"] == ResponseCodeEnum.ALREADY_EXISTS.code

    renamed = await client.put(f"{API}/tags/{tag_id}", json={"name": "fresh"}, headers=auth_header(admin.id))
    assert renamed.json()["data"]["name"] == "fresh"

    listed = await client.get(f"{API}/tags")
    assert [t["name"] for t in listed.json()["data"]] == ["fresh"]

    await client.delete(f"{API}/tags/{tag_id}", headers=auth_header(admin.id))
    assert (await client.get(f"{API}/tags")).json()["data"] == []


@pytest.mark.asyncio
async def test_efforts_are_public(client, seed):
    await seed.effort("hard")
    await seed.effort("easy")

    response = await client.get(f"{API}/efforts")

    assert [e["name"] for e in response.json()["data"]] == ["easy", "hard"]


# --- 评论 ---

@pytest.mark.asyncio
async def test_comment_endpoints(client, seed):
    alice = await seed.user("alice")
    bob = await seed.user("bob")
    recipe = await seed.recipe("Pie")

    posted = await client.post(
        f"{API}/recipes/{recipe.id}/comments", json={"body": "Lovely", "rating": 4}, headers=auth_header(alice.id)
    )
    assert posted.status_code == 201
    comment_id = posted.json()["data"]["id"]

    listed = (await client.get(f"{API}/recipes/{recipe.id}/comments")).json()["data"]
    assert [(c["body"], c["author_username"]) for c in listed] == [("Lovely", "alice")]

    not_mine = await client.delete(f"{API}/comments/{comment_id}", headers=auth_header(bob.id))
    assert not_mine.json()["code"] == ResponseCodeEnum.FORBIDDEN.code

    mine = await client.delete(f"{API}/comments/{comment_id}", headers=auth_header(alice.id))
    assert mine.json()["code"] == ResponseCodeEnum.SUCCESS.code


@pytest.mark.asyncio
async def test_rating_out_of_range_is_422(client, seed):
    user = await seed.user()
    recipe = await seed.recipe("Pie")
    response = await client.post(
        f"{API}/recipes/{recipe.id}/comments", json={"body": "x", "rating": 9}, headers=auth_header(user.id)
    )
    assert response.status_code == 422


# --- 收藏 ---

@pytest.mark.asyncio
async def test_favorites_and_collections(client, seed):
    user = await seed.user("alice")
    other = await seed.user("bob")
    recipe = await seed.recipe("Pie")
    headers = auth_header(user.id)

    toggled = await client.post(f"{API}/favorites/{recipe.id}/toggle", headers=headers)
    assert toggled.json()["data"]["is_member"] is True
    state = await client.get(f"{API}/favorites/{recipe.id}", headers=headers)
    assert state.json()["data"]["is_favorite"] is True

    created = await client.post(f"{API}/collections", json={"name": "Sunday"}, headers=headers)
    collection_id = created.json()["data"]["id"]
    await client.post(f"{API}/collections/{collection_id}/recipes/{recipe.id}/toggle", headers=headers)

    mine = await client.get(f"{API}/collections/{collection_id}", headers=headers)
    assert [r["title"] for r in mine.json()["data"]["recipes"]] == ["Pie"]

    hidden = await client.get(f"{API}/collections/{collection_id}", headers=auth_header(other.id))
    assert hidden.json()["code"] == ResponseCodeEnum.NOT_FOUND.code

    listed = await client.get(f"{API}/collections", headers=headers)
    assert [c["name"] for c in listed.json()["data"]] == ["Sunday"]


@pytest.mark.asyncio
async def test_update_collection_endpoint(client, seed):
    user = await seed.user("alice")
    collection = await seed.collection(user, "Sunday")

    renamed = await client.put(
        f"{API}/collections/{collection.id}", json={"name": "Brunch", "is_public": True}, headers=auth_header(user.id)
    )
    assert renamed.json()["data"]["name"] == "Brunch"
    assert renamed.json()["data"]["is_public"] is True

    blank = await client.put(f"{API}/collections/{collection.id}", json={"name": "  "}, headers=auth_header(user.id))
    assert blank.status_code == 422


# --- 用户 ---

@pytest.mark.asyncio
async def test_admin_bans_user_who_then_cannot_post(client, seed):
    admin = await seed.user("admin", is_admin=True)
    troll = await seed.user("troll")
    recipe = await seed.recipe("Pie")

    forbidden = await client.post(f"{API}/users/{admin.id}/ban/toggle", headers=auth_header(troll.id))
    assert forbidden.json()["code"] == ResponseCodeEnum.FORBIDDEN.code

    banned = await client.post(f"{API}/users/{troll.id}/ban/toggle", headers=auth_header(admin.id))
    assert banned.json()["data"]["is_banned"] is True

    comment = await client.post(
        f"{API}/recipes/{recipe.id}/comments", json={"body": "spam"}, headers=auth_header(troll.id)
    )
    assert comment.json()["code"] == ResponseCodeEnum.USER_BANNED.code


@pytest.mark.asyncio
async def test_admin_lists_users(client, seed):
    admin = await seed.user("admin", is_admin=True)
    await seed.user("alice")
    await seed.user("bob")

    response = await client.get(f"{API}/users", params={"search": "ali"}, headers=auth_header(admin.id))
    data = response.json()["data"]

    assert [u["username"] for u in data["items"]] == ["alice"]
    assert data["total"] == 1

    not_admin = await client.get(f"{API}/users", headers=auth_header(uuid.UUID(data["items"][0]["id"])))
    assert not_admin.json()["code"] == ResponseCodeEnum.FORBIDDEN.code


@pytest.mark.asyncio
async def test_profile_endpoints(client, seed, storage_client):
    user = await seed.user("alice")
    headers = auth_header(user.id)
    key = f"{user.id}/avatar.png"

    updated = await client.put(
        f"{API}/users/me", json={"username": "alicia", "bio": "Baker", "profile_picture": key}, headers=headers
    )
    assert updated.json()["data"]["username"] == "alicia"
    assert updated.json()["data"]["profile_picture_url"].startswith(f"https://signed.test/{key}")

    me = await client.get(f"{API}/users/me", headers=headers)
    assert me.json()["data"]["bio"] == "Baker"

    removed = await client.delete(f"{API}/users/me/profile-picture", headers=headers)
    assert removed.json()["data"]["profile_picture"] is None
    assert storage_client.removed == [key]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"username": "   "}, {"username": None}, {"profile_picture": None}])
async def test_profile_update_with_blank_or_null_fields_is_422(client, seed, payload):
    user = await seed.user("alice")
    response = await client.put(f"{API}/users/me", json=payload, headers=auth_header(user.id))
    assert response.status_code == 422
