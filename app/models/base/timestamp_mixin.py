# app/models/base/timestamp_mixin.py
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field

from app.models._model_utils.datetime import utcnow


class TimestampMixin:
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utcnow},
    )
