# app/core/exceptions/__init__.py

from .base_exception import (
    BaseBusinessException,
    NotFoundException,
    AlreadyExistsException,
    PermissionDeniedException,
    BusinessRuleException,
    FileException,
)
from .jwt_exceptions import (
    UnauthorizedException,
    InvalidTokenException,
    TokenExpiredException,
)
from .recipes_exception import (
    RecipeListingException,
    UserBannedException,
)

__all__ = [
    "BaseBusinessException",
    "NotFoundException",
    "AlreadyExistsException",
    "PermissionDeniedException",
    "BusinessRuleException",
    "FileException",

    "UnauthorizedException",
    "InvalidTokenException",
    "TokenExpiredException",

    "RecipeListingException",
    "UserBannedException",
]
