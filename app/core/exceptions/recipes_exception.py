from app.core.exceptions.base_exception import BaseBusinessException
from app.core.response_codes import ResponseCodeEnum


class RecipeListingException(BaseBusinessException):
    """菜谱主查询失败。携带一个空的结果页，前端据此展示空列表与错误提示。"""
    def __init__(self, message: str = None, page=None):
        super().__init__(ResponseCodeEnum.RECIPE_LISTING_FAILED, message=message)
        self.page = page


class UserBannedException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.USER_BANNED, message=message)
