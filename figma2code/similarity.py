"""名稱相似度（元件 / 屬性 fuzzy matching 使用）."""

import re

import Levenshtein

_NON_ALNUM = re.compile(r"[^a-z0-9]")

CONTAINMENT_SCORE = 0.9


def normalize(text: str) -> str:
    """轉小寫並去除非英數字元."""
    return _NON_ALNUM.sub("", (text or "").lower())


def levenshtein(a: str, b: str) -> int:
    """經典編輯距離（插入 / 刪除 / 取代成本皆為 1）."""
    return Levenshtein.distance(a, b)


def name_similarity(a: str, b: str) -> float:
    """正規化後：相等 1.0、互相包含 0.9，否則 1 − 編輯距離 / 較長長度；任一為空回傳 0."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    left, right = normalize(a), normalize(b)
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    if left in right or right in left:
        return CONTAINMENT_SCORE
    return 1.0 - levenshtein(left, right) / max(len(left), len(right))
