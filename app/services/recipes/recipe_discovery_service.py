# app/services/recipes/recipe_discovery_service.py

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.enums.recipe_enums import DiscoveryPreset
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.recipes.recipe import Recipe
from app.repo.crud.recipes.effort_repo import EffortRepository
from app.repo.crud.recipes.recipe_image_repo import RecipeImageRepository
from app.repo.crud.recipes.recipe_repo import RecipeRepository
from app.repo.crud.recipes.tag_repo import TagRepository
from app.schemas.recipes.discovery_schemas import DiscoveryQuery, DiscoveryPage
from app.schemas.recipes.recipe_schemas import NamedRef, RecipeSummary
from app.services._base_service import BaseService
from app.services.file.file_service import FileService
from app.services.recipes.discovery_state import DiscoveryStateTracker

# 数据库不可达时可能抛出的异常
STORE_ERRORS = (SQLAlchemyError, OSError)


class RecipeDiscoveryService(BaseService):
    """
    菜谱发现流水线：把分页与筛选条件转换成一页可直接展示的菜谱摘要。

    1. 解析预设 (vegetarian / vegan) 为标签 id，并入需要的标签集合
    2. 一次查询取回过滤后的当前页 (过滤在分页之前完成)
    3. 批量补充标签、难度名称
    4. 取出每个菜谱 sort_order 最小的图片，并发解析成 URL

    只有第 2 步失败会中止并返回带 error 的空结果；其余步骤失败只影响对应的补充字段。
    """

    def __init__(self, factory: RepositoryFactory, file_service: FileService):
        super().__init__()
        self.factory = factory
        self.file_service = file_service
        self.recipe_repo: RecipeRepository = factory.get_repo_by_type(RecipeRepository)
        self.tag_repo: TagRepository = factory.get_repo_by_type(TagRepository)
        self.effort_repo: EffortRepository = factory.get_repo_by_type(EffortRepository)
        self.image_repo: RecipeImageRepository = factory.get_repo_by_type(RecipeImageRepository)

    async def discover(self, query: DiscoveryQuery) -> DiscoveryPage:
        per_page = min(query.per_page, self.settings.discovery.max_page_size)

        needed_tag_ids = list(query.tag_ids)
        preset_tag_id = await self._resolve_preset(query.preset)
        if preset_tag_id is not None and preset_tag_id not in needed_tag_ids:
            needed_tag_ids.append(preset_tag_id)

        try:
            recipes = await self.recipe_repo.list_discoverable(
                page=query.page,
                per_page=per_page,
                tag_ids=needed_tag_ids,
                effort_ids=query.effort_ids,
                search=query.search,
            )
        except STORE_ERRORS as e:
            self.logger.error(f"❌ 菜谱列表查询失败 (page={query.page}): {e}")
            return DiscoveryPage(
                items=[], page=query.page, per_page=per_page, has_next=False, error=str(e) or e.__class__.__name__
            )

        items = await self.build_summaries(recipes)
        self.logger.info(
            f"🔎 发现页 page={query.page} per_page={per_page} tags={len(needed_tag_ids)} "
            f"efforts={len(query.effort_ids)} search={query.search!r} -> {len(items)} 条"
        )
        return DiscoveryPage(
            items=items,
            page=query.page,
            per_page=per_page,
            has_next=len(recipes) == per_page,
        )

    async def refresh(self, tracker: DiscoveryStateTracker, query: DiscoveryQuery) -> Optional[DiscoveryPage]:
        """
        带请求序号的刷新：只有最新一次请求的结果会写入 tracker。
        tracker 由调用方按列表视图持有，见 DiscoveryStateTracker。
        被后来的请求取代的结果返回 None。
        """
        seq = tracker.begin(query)
        page = await self.discover(query)
        if tracker.commit(seq, page):
            return page
        return None

    async def build_summaries(self, recipes: Sequence[Recipe]) -> List[RecipeSummary]:
        """为一组菜谱补充标签、难度与预览图，保持传入顺序。"""
        if not recipes:
            return []

        recipe_ids = [r.id for r in recipes]
        tags_by_recipe, efforts_by_recipe = await self._load_taxonomy(recipe_ids)
        preview_paths = await self._load_preview_paths(recipe_ids)
        preview_urls = await self.file_service.resolve_urls(
            preview_paths, self.settings.discovery.image_profile
        )

        return [
            RecipeSummary(
                id=r.id,
                title=r.title,
                ingredients=r.ingredients,
                cook_time_mins=r.cook_time_mins,
                user_id=r.user_id,
                created_at=r.created_at,
                preview_url=preview_urls.get(r.id),
                tags=None if tags_by_recipe is None else tags_by_recipe.get(r.id, []),
                efforts=None if efforts_by_recipe is None else efforts_by_recipe.get(r.id, []),
            )
            for r in recipes
        ]

    # --- 内部辅助方法 ---

    async def _resolve_preset(self, preset: DiscoveryPreset) -> Optional[UUID]:
        """预设按名称 (大小写不敏感的精确匹配) 解析为标签 id，找不到则不生效。"""
        if preset == DiscoveryPreset.ALL:
            return None

        cfg = self.settings.discovery
        tag_name = cfg.vegetarian_tag_name if preset == DiscoveryPreset.VEGETARIAN else cfg.vegan_tag_name
        try:
            tag = await self.tag_repo.find_by_name(tag_name)
        except STORE_ERRORS as e:
            self.logger.warning(f"⚠️ 预设 {preset.value} 解析失败，忽略该预设: {e}")
            return None

        if tag is None:
            self.logger.debug(f"预设 {preset.value} 没有对应的标签，忽略")
            return None
        return tag.id

    async def _load_taxonomy(
        self, recipe_ids: List[UUID]
    ) -> Tuple[Optional[Dict[UUID, List[NamedRef]]], Optional[Dict[UUID, List[NamedRef]]]]:
        tags_by_recipe: Optional[Dict[UUID, List[NamedRef]]] = None
        efforts_by_recipe: Optional[Dict[UUID, List[NamedRef]]] = None

        try:
            tag_links = await self.tag_repo.list_links(recipe_ids)
            tags = await self.tag_repo.get_by_ids({link.tag_id for link in tag_links})
            tags_by_recipe = self._group_names(
                [(link.recipe_id, link.tag_id) for link in tag_links], {t.id: t.name for t in tags}
            )
        except STORE_ERRORS as e:
            self.logger.warning(f"⚠️ 加载菜谱标签失败: {e}")

        try:
            effort_links = await self.effort_repo.list_links(recipe_ids)
            efforts = await self.effort_repo.get_by_ids({link.effort_id for link in effort_links})
            efforts_by_recipe = self._group_names(
                [(link.recipe_id, link.effort_id) for link in effort_links], {e.id: e.name for e in efforts}
            )
        except STORE_ERRORS as e:
            self.logger.warning(f"⚠️ 加载菜谱难度失败: {e}")

        return tags_by_recipe, efforts_by_recipe

    @staticmethod
    def _group_names(pairs: List[Tuple[UUID, UUID]], names: Dict[UUID, str]) -> Dict[UUID, List[NamedRef]]:
        grouped: Dict[UUID, List[NamedRef]] = defaultdict(list)
        for recipe_id, ref_id in pairs:
            # 关联到已删除或不存在的条目时跳过
            if ref_id in names:
                grouped[recipe_id].append(NamedRef(id=ref_id, name=names[ref_id]))
        for refs in grouped.values():
            refs.sort(key=lambda ref: ref.name.lower())
        return dict(grouped)

    async def _load_preview_paths(self, recipe_ids: List[UUID]) -> Dict[UUID, str]:
        """每个菜谱 sort_order 最小的图片作为预览图。"""
        try:
            images = await self.image_repo.list_for_recipes(recipe_ids)
        except STORE_ERRORS as e:
            self.logger.warning(f"⚠️ 加载菜谱图片失败，预览图置空: {e}")
            return {}

        previews: Dict[UUID, str] = {}
        for image in images:
            # 已按 sort_order 升序，第一张即预览图
            previews.setdefault(image.recipe_id, image.image_path)
        return previews
