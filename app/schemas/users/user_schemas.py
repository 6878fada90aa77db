# app/schemas/users/user_schemas.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class UserRead(BaseModel):
    """管理后台用户列表中的一行。"""
    id: UUID
    username: str
    email: Optional[str] = None
    is_admin: bool
    is_banned: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserProfileRead(UserRead):
    bio: Optional[str] = None
    profile_picture: Optional[str] = Field(None, description="头像在对象存储中的 key")
    profile_picture_url: Optional[str] = Field(None, description="解析后的头像地址，解析失败时为空")


class UserProfileUpdate(BaseModel):
    """
    用户修改自己的资料，所有字段可选。
    profile_picture 是客户端已上传到 profile_pictures 存储中的对象 key，
    必须位于 "{用户id}/" 目录下。
    """
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    profile_picture: Optional[str] = Field(None, min_length=1, max_length=500)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("用户名不能为空")
        return v.strip()

    @field_validator("profile_picture")
    @classmethod
    def reject_null_picture(cls, v: Optional[str]) -> str:
        # 删除头像走单独的接口
        if v is None:
            raise ValueError("删除头像请使用 DELETE /users/me/profile-picture")
        return v
