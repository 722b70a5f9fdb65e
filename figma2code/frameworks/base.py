"""片段產生器共用的 context 與字串工具."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..mapper import ComponentMapping

ARCHETYPES = ("button", "input", "card", "navigation")


@dataclass(frozen=True)
class SnippetContext:
    """單一元件產生時需要的資訊（皆為唯讀）."""
    mapping: ComponentMapping
    component_name: str
    kebab_name: str
    selector: str
    library_export: str
    library_name: str
    library_package: str = "your-ui-library"
    typescript: bool = False
    styling: str = "css"

    @property
    def archetype(self) -> str:
        kind = (self.mapping.target_type or "").lower()
        return kind if kind in ARCHETYPES else "default"

    @property
    def description(self) -> str:
        return self.mapping.target_description or "A component generated from a Figma design"

    def value(self, target_property: str, default: Any = None) -> Any:
        return self.mapping.value_for(target_property, default)

    def part(self, suffix: str) -> str:
        """元件庫子元件名稱，例如 CardHeader."""
        return f"{self.library_export}{suffix}"

    def library_import(self, *parts: str) -> str:
        main = self.library_export
        if self.library_name != self.library_export:
            main = f"{self.library_export} as {self.library_name}"
        names = [main] + [self.part(p) for p in parts]
        return f"import {{ {', '.join(names)} }} from '{self.library_package}';"


@dataclass(frozen=True)
class LayoutEntry:
    name: str
    component_name: str
    kebab_name: str
    selector: str
    file_stem: str


@dataclass(frozen=True)
class LayoutContext:
    entries: Tuple[LayoutEntry, ...] = ()
    typescript: bool = False
    styling: str = "css"
    component_name: str = "Layout"
    kebab_name: str = "layout"
    selector: str = "app-layout"


def js_string(value: Any) -> str:
    text = str(value).replace("\\", "\\\\").replace("'", "\\'").replace("\n", " ")
    return f"'{text}'"


def js_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    return js_string(value)


def text(value: Any) -> str:
    """放進 HTML / 模板標記內的文字."""
    return html.escape(str(value), quote=True)


def lines(*parts: str) -> str:
    return "\n".join(parts)


def media_block(selector: str, declarations: Dict[str, str], max_width: int = 640) -> str:
    body = "\n".join(f"    {k}: {v};" for k, v in declarations.items())
    return f"@media (max-width: {max_width}px) {{\n  .{selector} {{\n{body}\n  }}\n}}"


def css_rule(selector: str, declarations: Dict[str, str]) -> str:
    body = "\n".join(f"  {k}: {v};" for k, v in declarations.items())
    return f".{selector} {{\n{body}\n}}"


def layout_declarations(ctx: SnippetContext) -> Dict[str, str]:
    """default 片段使用：若有 layout 類屬性對應就帶入 display / gap 等."""
    decl: Dict[str, str] = {"display": str(ctx.value("display", "flex"))}
    direction = ctx.value("flexDirection")
    decl["flex-direction"] = direction or "column"
    gap = ctx.value("gap")
    decl["gap"] = f"{gap}px" if isinstance(gap, (int, float)) and gap else "1rem"
    justify = ctx.value("justifyContent")
    if justify:
        decl["justify-content"] = {"start": "flex-start", "end": "flex-end"}.get(justify, justify)
    padding = ctx.value("padding")
    if isinstance(padding, dict) and any(padding.values()):
        decl["padding"] = " ".join(
            f"{padding.get(side, 0)}px" for side in ("top", "right", "bottom", "left")
        )
    return decl
