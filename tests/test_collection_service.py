import pydantic
import pytest

from app.core.exceptions import (
    AlreadyExistsException,
    BusinessRuleException,
    NotFoundException,
    PermissionDeniedException,
)
from app.schemas.collections.collection_schemas import CollectionCreate, CollectionUpdate
from app.services.collections.collection_service import CollectionService, FAVORITES_NAME
from app.services.recipes.recipe_discovery_service import RecipeDiscoveryService
from tests.helpers import as_context


@pytest.fixture
def service(factory, file_service) -> CollectionService:
    discovery = RecipeDiscoveryService(factory, file_service=file_service)
    return CollectionService(factory, discovery_service=discovery)


@pytest.mark.asyncio
async def test_create_and_list_collections(service, seed):
    user = await seed.user()
    ctx = as_context(user)

    await service.create_collection(ctx, CollectionCreate(name="Weeknight"))
    await service.create_collection(ctx, CollectionCreate(name="Baking", is_public=True))

    names = [c.name for c in await service.list_my_collections(ctx)]
    assert names == ["Baking", "Weeknight"]


@pytest.mark.asyncio
async def test_duplicate_and_reserved_names_are_rejected(service, seed):
    user = await seed.user()
    ctx = as_context(user)
    await service.create_collection(ctx, CollectionCreate(name="Weeknight"))

    with pytest.raises(AlreadyExistsException):
        await service.create_collection(ctx, CollectionCreate(name="Weeknight"))
    with pytest.raises(AlreadyExistsException):
        await service.create_collection(ctx, CollectionCreate(name=FAVORITES_NAME))


@pytest.mark.asyncio
async def test_toggle_recipe_membership(service, seed):
    user = await seed.user()
    collection = await seed.collection(user, "Mine")
    recipe = await seed.recipe("Stew")
    ctx = as_context(user)

    added = await service.toggle_recipe_in_collection(ctx, collection.id, recipe.id)
    removed = await service.toggle_recipe_in_collection(ctx, collection.id, recipe.id)

    assert added.is_member is True
    assert removed.is_member is False


@pytest.mark.asyncio
async def test_cannot_toggle_in_someone_elses_collection(service, seed):
    owner = await seed.user("owner")
    other = await seed.user("other")
    collection = await seed.collection(owner, "Private")
    recipe = await seed.recipe("Stew")

    with pytest.raises(PermissionDeniedException):
        await service.toggle_recipe_in_collection(as_context(other), collection.id, recipe.id)


@pytest.mark.asyncio
async def test_get_collection_returns_summaries_excluding_deleted(service, seed):
    user = await seed.user()
    collection = await seed.collection(user, "Mine")
    kept = await seed.recipe("Kept", images=["k.jpg"])
    gone = await seed.recipe("Gone")
    ctx = as_context(user)
    await service.toggle_recipe_in_collection(ctx, collection.id, kept.id)
    await service.toggle_recipe_in_collection(ctx, collection.id, gone.id)
    gone.is_deleted = True
    await service.factory.commit()

    detail = await service.get_collection(ctx, collection.id)

    assert [r.id for r in detail.recipes] == [kept.id]
    assert detail.recipes[0].preview_url == "https://signed.test/k.jpg?expires=3600"


@pytest.mark.asyncio
async def test_private_collection_hidden_from_others(service, seed):
    owner = await seed.user("owner")
    other = await seed.user("other")
    private = await seed.collection(owner, "Private")
    public = await seed.collection(owner, "Public", is_public=True)

    with pytest.raises(NotFoundException):
        await service.get_collection(as_context(other), private.id)
    with pytest.raises(NotFoundException):
        await service.get_collection(None, private.id)
    assert (await service.get_collection(None, public.id)).name == "Public"


@pytest.mark.asyncio
async def test_delete_collection(service, seed):
    user = await seed.user()
    collection = await seed.collection(user, "Temp")
    recipe = await seed.recipe("Stew")
    ctx = as_context(user)
    await service.toggle_recipe_in_collection(ctx, collection.id, recipe.id)

    await service.delete_collection(ctx, collection.id)

    assert await service.list_my_collections(ctx) == []


@pytest.mark.asyncio
async def test_favorites_created_on_first_toggle(service, seed):
    user = await seed.user()
    recipe = await seed.recipe("Pie")
    ctx = as_context(user)

    assert await service.is_favorite(ctx, recipe.id) is False
    result = await service.toggle_favorite(ctx, recipe.id)

    assert result.is_member is True
    assert await service.is_favorite(ctx, recipe.id) is True
    # Favorites 不出现在普通收藏夹列表中
    assert await service.list_my_collections(ctx) == []

    again = await service.toggle_favorite(ctx, recipe.id)
    assert again.collection_id == result.collection_id
    assert again.is_member is False


@pytest.mark.asyncio
async def test_favorite_unknown_recipe(service, seed):
    user = await seed.user()
    recipe = await seed.recipe("Gone", is_deleted=True)

    with pytest.raises(NotFoundException):
        await service.toggle_favorite(as_context(user), recipe.id)


@pytest.mark.asyncio
async def test_update_collection_renames_and_publishes(service, seed):
    user = await seed.user()
    ctx = as_context(user)
    collection = await service.create_collection(ctx, CollectionCreate(name="Weeknight"))

    updated = await service.update_collection(
        ctx, collection.id, CollectionUpdate(name=" Quick dinners ", is_public=True)
    )

    assert updated.name == "Quick dinners"
    assert updated.is_public is True
    assert updated.description is None


@pytest.mark.asyncio
async def test_update_collection_rejects_taken_and_reserved_names(service, seed):
    user = await seed.user()
    ctx = as_context(user)
    await service.create_collection(ctx, CollectionCreate(name="Baking"))
    collection = await service.create_collection(ctx, CollectionCreate(name="Weeknight"))

    with pytest.raises(AlreadyExistsException):
        await service.update_collection(ctx, collection.id, CollectionUpdate(name="Baking"))
    with pytest.raises(AlreadyExistsException):
        await service.update_collection(ctx, collection.id, CollectionUpdate(name=FAVORITES_NAME))


@pytest.mark.asyncio
async def test_only_owner_can_update_collection(service, seed):
    owner = await seed.user("owner")
    other = await seed.user("other")
    collection = await seed.collection(owner, "Mine")

    with pytest.raises(PermissionDeniedException):
        await service.update_collection(as_context(other), collection.id, CollectionUpdate(is_public=True))


@pytest.mark.asyncio
async def test_favorites_collection_cannot_be_updated(service, seed):
    user = await seed.user()
    recipe = await seed.recipe("Pie")
    membership = await service.toggle_favorite(as_context(user), recipe.id)

    with pytest.raises(BusinessRuleException):
        await service.update_collection(as_context(user), membership.collection_id, CollectionUpdate(is_public=True))


@pytest.mark.parametrize("payload", [{"name": "   "}, {"name": None}, {"is_public": None}])
def test_collection_update_rejects_blank_or_null_fields(payload):
    with pytest.raises(pydantic.ValidationError):
        CollectionUpdate(**payload)
