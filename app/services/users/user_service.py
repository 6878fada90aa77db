import math
from typing import Optional
from uuid import UUID

from app.core.exceptions import (
    AlreadyExistsException,
    BusinessRuleException,
    NotFoundException,
    UnauthorizedException,
)
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.users.user import User
from app.repo.crud.users.user_repo import UserRepository
from app.schemas.common.page_schemas import PageResponse
from app.schemas.users.user_context import UserContext
from app.schemas.users.user_schemas import UserProfileRead, UserProfileUpdate, UserRead
from app.services._base_service import BaseService
from app.services.file.file_service import FileService

AVATAR_PROFILE = "profile_pictures"


class UserService(BaseService):
    """
    用户服务层。
    用户的注册、登录由外部身份服务负责，这里只把 token 中的用户 id 映射为本地资料，
    并提供个人资料维护与管理员的用户管理。
    """

    def __init__(self, repo_factory: RepositoryFactory, file_service: FileService):
        super().__init__()
        self.factory = repo_factory
        self.file_service = file_service
        self.user_repo: UserRepository = repo_factory.get_repo_by_type(UserRepository)

    async def get_user_context(self, user_id: UUID) -> UserContext:
        """token 有效但本地没有对应的用户资料时，视为未认证。"""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            self.logger.warning(f"⚠️ token 中的用户 {user_id} 没有本地资料")
            raise UnauthorizedException(message="用户不存在")
        return UserContext.model_validate(user)

    async def get_user_by_id(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException("用户不存在")
        return user

    # ==========================
    # 个人资料
    # ==========================

    async def _to_profile(self, user: User) -> UserProfileRead:
        profile = UserProfileRead.model_validate(user)
        profile.profile_picture_url = await self.file_service.resolve_url_or_none(
            user.profile_picture, AVATAR_PROFILE
        )
        return profile

    async def get_profile(self, user: UserContext) -> UserProfileRead:
        return await self._to_profile(await self.get_user_by_id(user.id))

    async def update_profile(self, user: UserContext, updates: UserProfileUpdate) -> UserProfileRead:
        """
        【事务性】修改用户名、简介或头像。
        更换头像时，旧头像对象在事务提交后删除，删除失败只记录日志。
        """
        db_user = await self.get_user_by_id(user.id)
        update_data = updates.model_dump(exclude_unset=True)

        new_username = update_data.get("username")
        if new_username and new_username.lower() != db_user.username.lower():
            if await self.user_repo.find_by_username(new_username):
                raise AlreadyExistsException("用户名已被使用")

        new_picture = update_data.get("profile_picture")
        if new_picture and not new_picture.startswith(f"{user.id}/"):
            raise BusinessRuleException("头像必须上传到自己的目录下")
        old_picture = db_user.profile_picture if new_picture and new_picture != db_user.profile_picture else None

        try:
            db_user = await self.user_repo.update(db_user, update_data)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"更新个人资料失败 (user={user.id}): {e}")
            await self.factory.rollback()
            raise e

        if old_picture:
            failed = await self.file_service.delete_files([old_picture], AVATAR_PROFILE)
            if failed:
                self.logger.error(f"资料已更新，但删除旧头像 {old_picture} 失败")
        return await self._to_profile(db_user)

    async def remove_profile_picture(self, user: UserContext) -> UserProfileRead:
        """
        【事务性】先删除存储中的头像对象，成功后再清空资料中的头像。
        存储删除失败时抛出 FileException，资料保持不变。
        """
        db_user = await self.get_user_by_id(user.id)
        if not db_user.profile_picture:
            return await self._to_profile(db_user)

        await self.file_service.delete_file(db_user.profile_picture, AVATAR_PROFILE)
        try:
            db_user = await self.user_repo.update(db_user, {"profile_picture": None})
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"清除头像失败 (user={user.id}): {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🖼️ 用户 {user.id} 删除了头像")
        return await self._to_profile(db_user)

    # ==========================
    # 管理员：用户管理
    # ==========================

    async def page_list_users(
            self,
            page: int = 1,
            per_page: int = 10,
            search: Optional[str] = None,
    ) -> PageResponse[UserRead]:
        search = search.strip() if search else None
        users, total = await self.user_repo.get_paged_users(page=page, per_page=per_page, search=search or None)
        return PageResponse(
            items=[UserRead.model_validate(u) for u in users],
            page=page,
            per_page=per_page,
            total=total,
            total_pages=math.ceil(total / per_page) if total else 0,
        )

    async def _toggle_flag(self, admin: UserContext, user_id: UUID, field: str) -> UserRead:
        if user_id == admin.id:
            raise BusinessRuleException("不能修改自己的账号状态")
        user = await self.get_user_by_id(user_id)
        value = not getattr(user, field)
        try:
            user = await self.user_repo.update(user, {field: value})
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"修改用户 {user_id} 的 {field} 失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🛡️ 管理员 {admin.id} 将用户 {user_id} 的 {field} 设为 {value}")
        return UserRead.model_validate(user)

    async def toggle_ban(self, admin: UserContext, user_id: UUID) -> UserRead:
        """封禁 / 解封用户。被封禁的用户不能发布菜谱和评论。"""
        return await self._toggle_flag(admin, user_id, "is_banned")

    async def toggle_admin(self, admin: UserContext, user_id: UUID) -> UserRead:
        return await self._toggle_flag(admin, user_id, "is_admin")
