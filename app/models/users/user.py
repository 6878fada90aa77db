from typing import Optional

from sqlmodel import Field

from app.models.base.base_model import BaseModel


class User(BaseModel, table=True):
    """
    本地用户资料。id 与外部身份服务中的用户 id (JWT 的 sub) 一致，
    注册与登录流程由身份服务负责。
    """
    __tablename__ = "user"

    username: str = Field(index=True, nullable=False, unique=True, max_length=50)
    email: Optional[str] = Field(default=None, index=True, unique=True)
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_picture: Optional[str] = Field(default=None, description="头像在对象存储中的 key")

    is_admin: bool = Field(default=False)
    is_banned: bool = Field(default=False)
