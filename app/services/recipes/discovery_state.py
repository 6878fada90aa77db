# app/services/recipes/discovery_state.py

from typing import Optional

from app.core.logger import get_logger
from app.enums.recipe_enums import DiscoveryStatus
from app.schemas.recipes.discovery_schemas import DiscoveryPage, DiscoveryQuery

logger = get_logger(__name__)


class DiscoveryStateTracker:
    """
    一个发现列表消费者的状态：LOADING -> READY -> LOADING ...，没有终止状态。
    由会反复刷新同一个列表视图的调用方持有，每个视图一个实例；
    无状态的 HTTP 接口 GET /recipes 不经过它，直接调用 discover()。

    每次刷新通过 begin() 领取一个单调递增的序号；
    只有序号等于最新发出的序号时，commit() 才会写入结果，旧请求的结果直接丢弃。
    """

    def __init__(self):
        self._latest_seq = 0
        self.status: DiscoveryStatus = DiscoveryStatus.LOADING
        self.query: Optional[DiscoveryQuery] = None
        self.page: Optional[DiscoveryPage] = None

    @property
    def latest_seq(self) -> int:
        return self._latest_seq

    def begin(self, query: DiscoveryQuery) -> int:
        self._latest_seq += 1
        self.status = DiscoveryStatus.LOADING
        self.query = query
        return self._latest_seq

    def is_current(self, seq: int) -> bool:
        return seq == self._latest_seq

    def commit(self, seq: int, page: DiscoveryPage) -> bool:
        if not self.is_current(seq):
            logger.debug(f"丢弃过期的发现结果 seq={seq}, latest={self._latest_seq}")
            return False
        self.page = page
        self.status = DiscoveryStatus.READY
        return True
