# app/models/__init__.py

# === 用户模块 ===
from app.models.users.user import User

# === 菜谱模块 ===
from app.models.recipes.recipe import (
    Recipe,
    RecipeImage,
    Tag,
    Effort,
    RecipeTagLink,
    RecipeEffortLink,
)
from app.models.recipes.comment import Comment

# === 收藏夹模块 ===
from app.models.collections.collection import Collection, CollectionRecipeLink
