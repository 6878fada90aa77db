# app/models/base/soft_delete_mixin.py
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field


class SoftDeleteMixin:
    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True)
    )
