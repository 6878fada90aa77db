# 专门用于接口上下文中注入当前用户的身份信息
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserContext(BaseModel):
    id: UUID
    username: str
    email: Optional[str] = None
    is_admin: bool = False
    is_banned: bool = False

    model_config = {"from_attributes": True}
