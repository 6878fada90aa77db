from enum import Enum


class DiscoveryPreset(str, Enum):
    """
    发现页的快捷筛选。
    继承自 str 和 Enum，可以让成员在 API 中作为字符串值直接使用。
    """
    ALL = 'all'                 # 不额外筛选
    VEGETARIAN = 'vegetarian'   # 追加名为 vegetarian 的标签
    VEGAN = 'vegan'             # 追加名为 vegan 的标签


class DiscoveryStatus(str, Enum):
    LOADING = 'loading'
    READY = 'ready'
