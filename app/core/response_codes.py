from enum import Enum


class ResponseCodeEnum(Enum):

    # === 通用响应码 ===
    SUCCESS = (0, "请求成功")
    CREATED = (201, "资源创建成功")
    VALIDATION_ERROR = (40001, "参数验证失败")
    BUSINESS_RULE_VIOLATION = (40002, "操作违反业务规则")
    AUTH_ERROR = (40100, "认证失败")
    FORBIDDEN = (40300, "没有权限")
    NOT_FOUND = (40400, "资源不存在")
    ALREADY_EXISTS = (40900, "资源已存在")
    SERVER_ERROR = (50000, "服务器内部错误")

    # === Token 相关 ===
    TOKEN_EXPIRED = (40104, "Token 已过期")
    TOKEN_INVALID = (40105, "无效 Token")

    # === 用户相关 ===
    USER_BANNED = (40310, "用户已被封禁")

    # === 菜谱相关 ===
    RECIPE_LISTING_FAILED = (50010, "加载菜谱列表失败")

    # === 文件/存储 ===
    FILE_EXCEPTION = (50020, "文件存储操作失败")

    def __init__(self, code: int, message: str):
        self._code = code
        self._message = message

    @property
    def code(self):
        return self._code

    @property
    def message(self):
        return self._message
