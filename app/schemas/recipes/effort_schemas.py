# app/schemas/recipes/effort_schemas.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class EffortBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="难度名称, e.g. 'Easy'")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("难度名称不能为空")
        return v


class EffortRead(BaseModel):
    id: UUID
    name: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class EffortCreate(EffortBase):
    pass


class EffortUpdate(EffortBase):
    pass
