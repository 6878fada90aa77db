import uuid

import pytest

from app.core.exceptions import (
    AlreadyExistsException,
    BusinessRuleException,
    FileException,
    NotFoundException,
    UnauthorizedException,
)
from app.schemas.users.user_schemas import UserProfileUpdate
from app.services.users.user_service import UserService
from tests.helpers import as_context


@pytest.fixture
def service(factory, file_service) -> UserService:
    return UserService(factory, file_service=file_service)


@pytest.mark.asyncio
async def test_unknown_user_has_no_context(service):
    with pytest.raises(UnauthorizedException):
        await service.get_user_context(uuid.uuid4())


# --- 管理员：用户管理 ---

@pytest.mark.asyncio
async def test_toggle_ban_round_trip(service, seed):
    admin = await seed.user("admin", is_admin=True)
    troll = await seed.user("troll")

    banned = await service.toggle_ban(as_context(admin), troll.id)
    assert banned.is_banned is True
    assert (await service.get_user_context(troll.id)).is_banned is True

    unbanned = await service.toggle_ban(as_context(admin), troll.id)
    assert unbanned.is_banned is False


@pytest.mark.asyncio
async def test_toggle_admin(service, seed):
    admin = await seed.user("admin", is_admin=True)
    helper = await seed.user("helper")

    promoted = await service.toggle_admin(as_context(admin), helper.id)

    assert promoted.is_admin is True


@pytest.mark.asyncio
async def test_admin_cannot_toggle_own_account(service, seed):
    admin = await seed.user("admin", is_admin=True)

    with pytest.raises(BusinessRuleException):
        await service.toggle_ban(as_context(admin), admin.id)
    with pytest.raises(BusinessRuleException):
        await service.toggle_admin(as_context(admin), admin.id)


@pytest.mark.asyncio
async def test_toggle_unknown_user_is_not_found(service, seed):
    admin = await seed.user("admin", is_admin=True)

    with pytest.raises(NotFoundException):
        await service.toggle_ban(as_context(admin), uuid.uuid4())


@pytest.mark.asyncio
async def test_page_list_users_searches_username_and_email(service, seed):
    for name in ("alice", "bob", "carol"):
        await seed.user(name)

    by_name = await service.page_list_users(search="ALI")
    everyone = await service.page_list_users(page=1, per_page=2, search="example.com")
    wildcard = await service.page_list_users(search="%")

    assert [u.username for u in by_name.items] == ["alice"]
    assert everyone.total == 3
    assert everyone.total_pages == 2
    assert len(everyone.items) == 2
    assert wildcard.items == []


@pytest.mark.asyncio
async def test_page_list_users_second_page(service, seed):
    for name in ("alice", "bob", "carol"):
        await seed.user(name)

    first = await service.page_list_users(page=1, per_page=2)
    second = await service.page_list_users(page=2, per_page=2)

    names = {u.username for u in first.items} | {u.username for u in second.items}
    assert names == {"alice", "bob", "carol"}
    assert len(second.items) == 1


# --- 个人资料 ---

@pytest.mark.asyncio
async def test_update_profile_changes_name_bio_and_picture(service, seed):
    user = await seed.user("alice")
    key = f"{user.id}/avatar.png"

    profile = await service.update_profile(
        as_context(user), UserProfileUpdate(username=" alicia ", bio="Home cook", profile_picture=key)
    )

    assert profile.username == "alicia"
    assert profile.bio == "Home cook"
    assert profile.profile_picture == key
    assert profile.profile_picture_url == f"https://signed.test/{key}?expires=3600"


@pytest.mark.asyncio
async def test_update_profile_rejects_taken_username(service, seed):
    await seed.user("bob")
    alice = await seed.user("alice")

    with pytest.raises(AlreadyExistsException):
        await service.update_profile(as_context(alice), UserProfileUpdate(username="BOB"))


@pytest.mark.asyncio
async def test_update_profile_keeps_own_username_in_other_case(service, seed):
    alice = await seed.user("alice")

    profile = await service.update_profile(as_context(alice), UserProfileUpdate(username="Alice"))

    assert profile.username == "Alice"


@pytest.mark.asyncio
async def test_picture_outside_own_folder_is_rejected(service, seed):
    alice = await seed.user("alice")
    bob = await seed.user("bob")

    with pytest.raises(BusinessRuleException):
        await service.update_profile(as_context(alice), UserProfileUpdate(profile_picture=f"{bob.id}/avatar.png"))


@pytest.mark.asyncio
async def test_replacing_picture_deletes_old_object(service, seed, storage_client):
    user = await seed.user("alice")
    old_key = f"{user.id}/old.png"
    await service.update_profile(as_context(user), UserProfileUpdate(profile_picture=old_key))

    await service.update_profile(as_context(user), UserProfileUpdate(profile_picture=f"{user.id}/new.png"))

    assert storage_client.removed == [old_key]


@pytest.mark.asyncio
async def test_remove_profile_picture(service, seed, storage_client):
    user = await seed.user("alice")
    key = f"{user.id}/avatar.png"
    await service.update_profile(as_context(user), UserProfileUpdate(profile_picture=key))

    profile = await service.remove_profile_picture(as_context(user))

    assert profile.profile_picture is None
    assert profile.profile_picture_url is None
    assert storage_client.removed == [key]


@pytest.mark.asyncio
async def test_remove_profile_picture_keeps_it_when_storage_fails(service, seed, storage_client):
    user = await seed.user("alice")
    key = f"{user.id}/avatar.png"
    await service.update_profile(as_context(user), UserProfileUpdate(profile_picture=key))
    storage_client.fail_on.add(key)

    with pytest.raises(FileException):
        await service.remove_profile_picture(as_context(user))

    storage_client.fail_on.clear()
    assert (await service.get_profile(as_context(user))).profile_picture == key


@pytest.mark.asyncio
async def test_remove_without_picture_is_a_no_op(service, seed, storage_client):
    user = await seed.user("alice")

    profile = await service.remove_profile_picture(as_context(user))

    assert profile.profile_picture is None
    assert storage_client.removed == []
