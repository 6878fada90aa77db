import re
import uuid

from sqlalchemy.orm import declared_attr
from sqlmodel import SQLModel, Field

from app.models.base.timestamp_mixin import TimestampMixin
from app.models.base.soft_delete_mixin import SoftDeleteMixin
from app.models._model_utils.guid import GUID


def camel_to_snake(name: str) -> str:
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


class AutoTableNameMixin:
    @declared_attr
    def __tablename__(cls):
        return camel_to_snake(cls.__name__)


class IdMixin:
    id: uuid.UUID = Field(default_factory=GUID.generate, sa_type=GUID(), primary_key=True, index=True)


class BaseModel(
    AutoTableNameMixin,
    SQLModel,
    TimestampMixin,
    IdMixin
):
    """所有业务表的基类：UUID 主键 + 创建/更新时间。"""
    __abstract__ = True


class SoftDeleteModel(BaseModel, SoftDeleteMixin):
    """支持软删除的业务表基类。"""
    __abstract__ = True
