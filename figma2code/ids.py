"""id 產生器.

元件庫載入時缺 id 的項目需要補上隨機後綴；測試時改注入 SequentialIds 以取得可重現的結果。
"""

import itertools
import uuid
from typing import Callable, Dict

IdFactory = Callable[[str], str]


def random_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:9]}"


class SequentialIds:
    """依 prefix 各自遞增的 id 產生器（測試用）."""

    def __init__(self, start: int = 1):
        self._start = start
        self._counters: Dict[str, itertools.count] = {}

    def __call__(self, prefix: str) -> str:
        counter = self._counters.setdefault(prefix, itertools.count(self._start))
        return f"{prefix}-{next(counter)}"
