# app/api/dependencies/services.py
from fastapi import Depends

from app.infra.db.get_repo_factory import get_repository_factory, RepositoryFactory
from app.infra.storage.storage_factory import storage_factory
from app.services.collections.collection_service import CollectionService
from app.services.file.file_service import FileService
from app.services.recipes.comment_service import CommentService
from app.services.recipes.effort_service import EffortService
from app.services.recipes.recipe_discovery_service import RecipeDiscoveryService
from app.services.recipes.recipe_service import RecipeService
from app.services.recipes.tag_service import TagService
from app.services.users.user_service import UserService

file_service_instance = FileService(factory=storage_factory)


def get_file_service() -> FileService:
    """FileService 无状态，全局共享一个实例。"""
    return file_service_instance


def get_user_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
    file_service: FileService = Depends(get_file_service),
) -> UserService:
    return UserService(repo_factory=repo_factory, file_service=file_service)


def get_discovery_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
    file_service: FileService = Depends(get_file_service),
) -> RecipeDiscoveryService:
    return RecipeDiscoveryService(repo_factory, file_service=file_service)


def get_recipes_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
    file_service: FileService = Depends(get_file_service),
) -> RecipeService:
    return RecipeService(repo_factory, file_service=file_service)


def get_comment_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
    file_service: FileService = Depends(get_file_service),
) -> CommentService:
    return CommentService(repo_factory, file_service=file_service)


def get_tag_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
) -> TagService:
    """Dependency provider for TagService."""
    return TagService(repo_factory)


def get_effort_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
) -> EffortService:
    return EffortService(repo_factory)


def get_collection_service(
    repo_factory: RepositoryFactory = Depends(get_repository_factory),
    discovery_service: RecipeDiscoveryService = Depends(get_discovery_service),
) -> CollectionService:
    return CollectionService(repo_factory, discovery_service=discovery_service)
