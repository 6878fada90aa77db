import uuid

import pytest

from app.core.exceptions import (
    AlreadyExistsException,
    NotFoundException,
    PermissionDeniedException,
    UserBannedException,
)
from app.schemas.recipes.comment_schemas import CommentCreate
from app.schemas.recipes.effort_schemas import EffortCreate, EffortUpdate
from app.schemas.recipes.tag_schemas import TagCreate, TagUpdate
from app.services.recipes.comment_service import CommentService
from app.services.recipes.effort_service import EffortService
from app.services.recipes.tag_service import TagService
from tests.helpers import as_context


# --- 标签 / 难度 ---

@pytest.mark.asyncio
async def test_tags_are_listed_by_name(factory, seed):
    await seed.tag("soup")
    await seed.tag("baking")
    service = TagService(factory)

    assert [t.name for t in await service.list_tags()] == ["baking", "soup"]


@pytest.mark.asyncio
async def test_tag_names_are_unique_case_insensitively(factory, seed):
    await seed.tag("Vegan")
    service = TagService(factory)

    with pytest.raises(AlreadyExistsException):
        await service.create_tag(TagCreate(name="  vegan "))


@pytest.mark.asyncio
async def test_rename_tag(factory, seed):
    tag = await seed.tag("quik")
    other = await seed.tag("slow")
    service = TagService(factory)

    renamed = await service.update_tag(tag.id, TagUpdate(name="Quick"))
    assert renamed.name == "Quick"
    # 只改大小写也允许
    assert (await service.update_tag(tag.id, TagUpdate(name="quick"))).name == "quick"
    with pytest.raises(AlreadyExistsException):
        await service.update_tag(other.id, TagUpdate(name="QUICK"))


@pytest.mark.asyncio
async def test_delete_tag_removes_links(factory, seed):
    tag = await seed.tag("old")
    await seed.recipe("R", tags=[tag])
    service = TagService(factory)

    await service.delete_tag(tag.id)

    assert await service.list_tags() == []
    assert await service.tag_repo.list_links() == []
    with pytest.raises(NotFoundException):
        await service.delete_tag(tag.id)


@pytest.mark.asyncio
async def test_effort_lifecycle(factory, seed):
    service = EffortService(factory)

    effort = await service.create_effort(EffortCreate(name="Easy"))
    with pytest.raises(AlreadyExistsException):
        await service.create_effort(EffortCreate(name="easy"))
    await service.update_effort(effort.id, EffortUpdate(name="Simple"))
    await seed.recipe("R", efforts=[effort])

    assert [e.name for e in await service.list_efforts()] == ["Simple"]
    await service.delete_effort(effort.id)
    assert await service.list_efforts() == []
    assert await service.effort_repo.list_links() == []


# --- 评论 ---

@pytest.fixture
def comment_service(factory, file_service) -> CommentService:
    return CommentService(factory, file_service=file_service)


@pytest.mark.asyncio
async def test_comments_newest_first_with_author(comment_service, seed, storage_client):
    alice = await seed.user("alice", profile_picture="alice/avatar.png")
    bob = await seed.user("bob")
    recipe = await seed.recipe("Pie")

    await comment_service.add_comment(as_context(alice), recipe.id, CommentCreate(body="first", rating=5))
    await comment_service.add_comment(as_context(bob), recipe.id, CommentCreate(body="second"))

    comments = await comment_service.list_comments(recipe.id)

    assert [c.body for c in comments] == ["second", "first"]
    assert comments[0].author_username == "bob"
    assert comments[0].author_avatar_url is None
    assert comments[1].author_avatar_url == "https://signed.test/alice/avatar.png?expires=3600"
    assert comments[1].rating == 5


@pytest.mark.asyncio
async def test_banned_user_cannot_comment(comment_service, seed):
    user = await seed.user("troll", is_banned=True)
    recipe = await seed.recipe("Pie")

    with pytest.raises(UserBannedException):
        await comment_service.add_comment(as_context(user), recipe.id, CommentCreate(body="spam"))


@pytest.mark.asyncio
async def test_comment_on_missing_recipe(comment_service, seed):
    user = await seed.user()

    with pytest.raises(NotFoundException):
        await comment_service.add_comment(as_context(user), uuid.uuid4(), CommentCreate(body="hello"))


@pytest.mark.asyncio
async def test_only_author_deletes_comment(comment_service, seed):
    alice = await seed.user("alice")
    bob = await seed.user("bob")
    recipe = await seed.recipe("Pie")
    comment = await comment_service.add_comment(as_context(alice), recipe.id, CommentCreate(body="mine"))

    with pytest.raises(PermissionDeniedException):
        await comment_service.delete_comment(as_context(bob), comment.id)

    await comment_service.delete_comment(as_context(alice), comment.id)
    assert await comment_service.list_comments(recipe.id) == []
