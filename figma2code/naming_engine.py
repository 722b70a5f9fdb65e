"""
命名引擎 — Figma 圖層名稱 → 程式碼識別字 / 檔名 / selector

PascalCase 用於元件識別字；kebab-case 用於 selector、CSS class 與檔名。
"""

import re
from dataclasses import dataclass
from typing import Optional

_STRIP_CHARS = re.compile(r"[^\w\s-]")
_WORD_SPLIT = re.compile(r"[\s_-]+")
_CAMEL_HUMP = re.compile(r"([a-z])([A-Z])")
_KEBAB_SPACES = re.compile(r"[\s_]+")


@dataclass
class NamingConfig:
    """命名引擎設定."""
    fallback_name: str = "Component"
    selector_prefix: str = "app"
    library_alias_prefix: str = "Ui"


def to_pascal_case(name: str, fallback: str = "Component") -> str:
    """去除非文字字元，依空白 / 底線 / 連字號切字後各字首大寫、其餘小寫."""
    words = [w for w in _WORD_SPLIT.split(_STRIP_CHARS.sub("", name or "")) if w]
    result = "".join(w[:1].upper() + w[1:].lower() for w in words)
    if not result:
        return fallback
    if result[0].isdigit():
        return f"{fallback}{result}"
    return result


def to_kebab_case(name: str) -> str:
    """大寫前插入連字號、空白與底線轉連字號、全部小寫."""
    slug = _CAMEL_HUMP.sub(r"\1-\2", name or "")
    slug = _KEBAB_SPACES.sub("-", slug).lower()
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug or "component"


class NamingEngine:
    """產生元件識別字、檔名與 selector."""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def component_name(self, name: str) -> str:
        return to_pascal_case(name, self.config.fallback_name)

    def kebab(self, name: str) -> str:
        return to_kebab_case(name)

    def selector(self, name: str) -> str:
        return f"{self.config.selector_prefix}-{to_kebab_case(self.component_name(name))}"

    def library_identifier(self, target_name: str, component_name: str) -> str:
        """元件庫匯入名稱；與產生的元件同名時加上前綴避免衝突."""
        identifier = to_pascal_case(target_name, self.config.fallback_name)
        if identifier == component_name:
            return f"{self.config.library_alias_prefix}{identifier}"
        return identifier

    def file_name(self, name: str, framework: str, typescript: bool = False) -> str:
        pascal = self.component_name(name)
        if framework == "react":
            return f"{pascal}.{'tsx' if typescript else 'jsx'}"
        if framework == "vue":
            return f"{pascal}.vue"
        if framework == "angular":
            return f"{to_kebab_case(pascal)}.component.ts"
        return f"{to_kebab_case(pascal)}.html"


def preview_component_tree(tree: dict, indent: int = 0) -> str:
    """除錯用：印出元件樹（build_component_tree 的輸出）."""
    lines = []
    prefix = "  " * indent
    kind = tree.get("type", "?")
    name = tree.get("name", "root" if kind == "root" else "???")
    label = f"{prefix}├─ {name}  [{kind}]"
    if tree.get("componentId"):
        label += f"  <{tree['componentId']}>"
    elif tree.get("nodeType"):
        label += f"  <{tree['nodeType']}>"
    lines.append(label)
    for child in tree.get("children", []):
        lines.append(preview_component_tree(child, indent + 1))
    return "\n".join(lines)
