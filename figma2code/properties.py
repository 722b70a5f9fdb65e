"""
節點屬性 — 將 Figma 節點的原始欄位拆成已知的屬性種類

Geometry / Paint(fill, stroke) / Effect / TextStyle / AutoLayout，
其餘無法辨識的欄位原樣保留在 passthrough，供後續版本或 fuzzy mapping 使用。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# 節點結構欄位（不屬於屬性）
_STRUCTURAL_KEYS = {"id", "name", "type", "children", "visible"}

_GEOMETRY_KEYS = {
    "absoluteBoundingBox", "size", "cornerRadius", "rectangleCornerRadii",
    "strokeWeight", "opacity", "blendMode",
}
_PAINT_KEYS = {"fills", "strokes"}
_EFFECT_KEYS = {"effects"}
_TEXT_KEYS = {
    "characters", "fontSize", "fontName", "fontWeight", "style",
    "textAlignHorizontal", "textAlignVertical", "letterSpacing",
    "lineHeight", "textCase", "textDecoration", "textStyleId",
}
_AUTO_LAYOUT_KEYS = {
    "layoutMode", "primaryAxisSizingMode", "counterAxisSizingMode",
    "primaryAxisAlignItems", "counterAxisAlignItems", "itemSpacing",
    "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
}
_CLAIMED_KEYS = _GEOMETRY_KEYS | _PAINT_KEYS | _EFFECT_KEYS | _TEXT_KEYS | _AUTO_LAYOUT_KEYS


def _channel(value: float) -> int:
    # 0..1 → 0..255，四捨五入（0.5 進位）
    return int(math.floor(value * 255 + 0.5))


def format_number(value: Any) -> str:
    """數字輸出：整數值不帶小數點（1.0 → '1'）."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclass(frozen=True)
class Color:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Color"]:
        if not isinstance(raw, dict):
            return None
        return cls(
            r=float(raw.get("r", 0)),
            g=float(raw.get("g", 0)),
            b=float(raw.get("b", 0)),
            a=float(raw.get("a", 1)),
        )

    def to_rgba255(self) -> Tuple[int, int, int, float]:
        return _channel(self.r), _channel(self.g), _channel(self.b), self.a

    def key(self) -> str:
        r, g, b, a = self.to_rgba255()
        return f"rgba({r},{g},{b},{format_number(a)})"


@dataclass(frozen=True)
class Paint:
    """單一 fill 或 stroke."""
    kind: str
    type: str
    visible: bool = True
    color: Optional[Color] = None
    opacity: Optional[float] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, kind: str, raw: dict) -> "Paint":
        return cls(
            kind=kind,
            type=raw.get("type", ""),
            visible=raw.get("visible", True) is not False,
            color=Color.from_raw(raw.get("color")),
            opacity=_number(raw.get("opacity")),
            raw=dict(raw),
        )

    @property
    def is_solid(self) -> bool:
        return self.type == "SOLID" and self.color is not None


@dataclass(frozen=True)
class Effect:
    type: str
    visible: bool = True
    color: Optional[Color] = None
    offset_x: float = 0
    offset_y: float = 0
    radius: float = 0
    spread: float = 0
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict) -> "Effect":
        offset = raw.get("offset") or {}
        return cls(
            type=raw.get("type", ""),
            visible=raw.get("visible", True) is not False,
            color=Color.from_raw(raw.get("color")),
            offset_x=offset.get("x", 0),
            offset_y=offset.get("y", 0),
            radius=raw.get("radius", 0) or 0,
            spread=raw.get("spread", 0) or 0,
            raw=dict(raw),
        )

    @property
    def is_drop_shadow(self) -> bool:
        return self.type == "DROP_SHADOW"

    def shadow_key(self) -> str:
        parts = (self.offset_x, self.offset_y, self.radius, self.spread)
        return ",".join(format_number(p) for p in parts)


@dataclass(frozen=True)
class Geometry:
    width: Optional[float] = None
    height: Optional[float] = None
    corner_radius: Optional[float] = None
    stroke_weight: Optional[float] = None
    opacity: Optional[float] = None
    blend_mode: Optional[str] = None

    @classmethod
    def from_raw(cls, node: dict) -> "Geometry":
        bbox = node.get("absoluteBoundingBox") or {}
        size = node.get("size") or {}  # REST API 的 size 是 {x, y} 向量
        return cls(
            width=_number(bbox.get("width", size.get("x"))),
            height=_number(bbox.get("height", size.get("y"))),
            corner_radius=_number(node.get("cornerRadius")),
            stroke_weight=_number(node.get("strokeWeight")),
            opacity=_number(node.get("opacity")),
            blend_mode=node.get("blendMode"),
        )


@dataclass(frozen=True)
class TextStyle:
    characters: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    font_weight: Optional[float] = None
    text_align_horizontal: Optional[str] = None
    text_align_vertical: Optional[str] = None
    letter_spacing: Any = None
    line_height: Any = None
    text_case: Optional[str] = None
    text_decoration: Optional[str] = None
    text_style_id: Optional[str] = None

    @classmethod
    def from_raw(cls, node: dict) -> Optional["TextStyle"]:
        """TEXT 節點或帶字型欄位的節點才會有 TextStyle；同時支援 plugin 格式與 REST 的 style 物件."""
        style = node.get("style") if isinstance(node.get("style"), dict) else {}
        if node.get("type") != "TEXT" and not (_TEXT_KEYS & set(node)) and not style:
            return None

        font_name = node.get("fontName")
        if isinstance(font_name, dict):
            family = font_name.get("family")
        elif isinstance(font_name, str):
            family = font_name
        else:
            family = style.get("fontFamily")

        def pick(key: str):
            return node.get(key, style.get(key))

        return cls(
            characters=node.get("characters"),
            font_size=_number(pick("fontSize")),
            font_family=family,
            font_weight=_number(pick("fontWeight")),
            text_align_horizontal=pick("textAlignHorizontal"),
            text_align_vertical=pick("textAlignVertical"),
            letter_spacing=pick("letterSpacing"),
            line_height=node.get("lineHeight", style.get("lineHeightPx")),
            text_case=pick("textCase"),
            text_decoration=pick("textDecoration"),
            text_style_id=node.get("textStyleId"),
        )

    def to_value(self) -> dict:
        """TEXT 樣式紀錄的 value payload."""
        return {
            "fontSize": self.font_size,
            "fontName": self.font_family,
            "textAlignHorizontal": self.text_align_horizontal,
            "textAlignVertical": self.text_align_vertical,
            "letterSpacing": self.letter_spacing,
            "lineHeight": self.line_height,
            "textCase": self.text_case,
            "textDecoration": self.text_decoration,
        }


@dataclass(frozen=True)
class AutoLayout:
    layout_mode: Optional[str] = None
    primary_axis_sizing_mode: Optional[str] = None
    counter_axis_sizing_mode: Optional[str] = None
    primary_axis_align_items: Optional[str] = None
    counter_axis_align_items: Optional[str] = None
    item_spacing: Optional[float] = None
    padding_top: Optional[float] = None
    padding_right: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None

    @classmethod
    def from_raw(cls, node: dict) -> Optional["AutoLayout"]:
        if not (_AUTO_LAYOUT_KEYS & set(node)):
            return None
        return cls(
            layout_mode=node.get("layoutMode"),
            primary_axis_sizing_mode=node.get("primaryAxisSizingMode"),
            counter_axis_sizing_mode=node.get("counterAxisSizingMode"),
            primary_axis_align_items=node.get("primaryAxisAlignItems"),
            counter_axis_align_items=node.get("counterAxisAlignItems"),
            item_spacing=_number(node.get("itemSpacing")),
            padding_top=_number(node.get("paddingTop")),
            padding_right=_number(node.get("paddingRight")),
            padding_bottom=_number(node.get("paddingBottom")),
            padding_left=_number(node.get("paddingLeft")),
        )

    @property
    def is_active(self) -> bool:
        """是否真的啟用 Auto Layout（layoutMode NONE 不算）."""
        if self.layout_mode and self.layout_mode != "NONE":
            return True
        return bool(self.primary_axis_sizing_mode or self.counter_axis_sizing_mode)

    def padding(self) -> Dict[str, float]:
        return {
            "top": self.padding_top or 0,
            "right": self.padding_right or 0,
            "bottom": self.padding_bottom or 0,
            "left": self.padding_left or 0,
        }

    def spacing_values(self) -> list:
        values = [
            self.item_spacing, self.padding_top, self.padding_right,
            self.padding_bottom, self.padding_left,
        ]
        return [v for v in values if v is not None]


@dataclass(frozen=True)
class NodeProperties:
    """單一節點的全部屬性."""
    geometry: Geometry = field(default_factory=Geometry)
    fills: Tuple[Paint, ...] = ()
    strokes: Tuple[Paint, ...] = ()
    effects: Tuple[Effect, ...] = ()
    text: Optional[TextStyle] = None
    auto_layout: Optional[AutoLayout] = None
    passthrough: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, node: dict) -> "NodeProperties":
        fills = tuple(Paint.from_raw("fill", f) for f in node.get("fills") or [] if isinstance(f, dict))
        strokes = tuple(Paint.from_raw("stroke", s) for s in node.get("strokes") or [] if isinstance(s, dict))
        effects = tuple(Effect.from_raw(e) for e in node.get("effects") or [] if isinstance(e, dict))
        passthrough = {
            k: v for k, v in node.items()
            if k not in _STRUCTURAL_KEYS and k not in _CLAIMED_KEYS
        }
        return cls(
            geometry=Geometry.from_raw(node),
            fills=fills,
            strokes=strokes,
            effects=effects,
            text=TextStyle.from_raw(node),
            auto_layout=AutoLayout.from_raw(node),
            passthrough=passthrough,
        )

    # ─── 查詢 ───

    def visible_fills(self) -> Tuple[Paint, ...]:
        return tuple(f for f in self.fills if f.visible)

    def visible_strokes(self) -> Tuple[Paint, ...]:
        return tuple(s for s in self.strokes if s.visible)

    def visible_effects(self) -> Tuple[Effect, ...]:
        return tuple(e for e in self.effects if e.visible)

    def drop_shadows(self) -> Tuple[Effect, ...]:
        return tuple(e for e in self.visible_effects() if e.is_drop_shadow)

    @property
    def corner_radius(self) -> Optional[float]:
        return self.geometry.corner_radius

    @property
    def opacity(self) -> Optional[float]:
        return self.geometry.opacity

    @property
    def layout_mode(self) -> Optional[str]:
        return self.auto_layout.layout_mode if self.auto_layout else None

    @property
    def font_size(self) -> Optional[float]:
        return self.text.font_size if self.text else None

    def as_dict(self) -> Dict[str, Any]:
        """攤平成 camelCase 的 dict（未定義的欄位不輸出）."""
        g = self.geometry
        out: Dict[str, Any] = {
            "width": g.width,
            "height": g.height,
            "cornerRadius": g.corner_radius,
            "strokeWeight": g.stroke_weight,
            "opacity": g.opacity,
            "blendMode": g.blend_mode,
        }
        if self.fills:
            out["fills"] = [f.raw for f in self.fills]
        if self.strokes:
            out["strokes"] = [s.raw for s in self.strokes]
        if self.effects:
            out["effects"] = [e.raw for e in self.effects]
        if self.text:
            t = self.text
            out.update({
                "characters": t.characters,
                "fontSize": t.font_size,
                "fontFamily": t.font_family,
                "fontWeight": t.font_weight,
                "textAlignHorizontal": t.text_align_horizontal,
                "textAlignVertical": t.text_align_vertical,
                "letterSpacing": t.letter_spacing,
                "lineHeight": t.line_height,
                "textCase": t.text_case,
                "textDecoration": t.text_decoration,
                "textStyleId": t.text_style_id,
            })
        if self.auto_layout:
            a = self.auto_layout
            out.update({
                "layoutMode": a.layout_mode,
                "primaryAxisSizingMode": a.primary_axis_sizing_mode,
                "counterAxisSizingMode": a.counter_axis_sizing_mode,
                "primaryAxisAlignItems": a.primary_axis_align_items,
                "counterAxisAlignItems": a.counter_axis_align_items,
                "itemSpacing": a.item_spacing,
                "paddingTop": a.padding_top,
                "paddingRight": a.padding_right,
                "paddingBottom": a.padding_bottom,
                "paddingLeft": a.padding_left,
            })
        out.update(self.passthrough)
        return {k: v for k, v in out.items() if v is not None}
