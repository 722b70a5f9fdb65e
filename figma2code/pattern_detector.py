"""
UI 樣式偵測 — button / input / card / navigation / layout

每個偵測器都是純函式 (node, index) -> ComponentPattern | None，
以 DEFAULT_DETECTORS 登錄；同一節點可同時符合多個類型，全部保留。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .figma_reader import DesignNode, NodeIndex

logger = logging.getLogger(__name__)

CONTAINER_TYPES = ("FRAME", "GROUP", "COMPONENT", "INSTANCE")

# 信心值微調
NAME_MATCH_BONUS = 0.1
MATCHED_NODES_BONUS = 0.05
MATCHED_NODES_THRESHOLD = 3
FEW_PROPERTIES_PENALTY = 0.1
MIN_PROPERTIES = 2

# 各類型的初始信心值（button 另以名稱/圓角/文字計分）
INPUT_CONFIDENCE = 0.8
CARD_CONFIDENCE = 0.75
NAVIGATION_CONFIDENCE = 0.7
LAYOUT_CONFIDENCE = 0.8

_BUTTON_NAME = re.compile(r"button|btn", re.IGNORECASE)
_INPUT_NAME = re.compile(r"input|field|textfield|text field", re.IGNORECASE)
_CARD_NAME = re.compile(r"card", re.IGNORECASE)
_NAV_NAME = re.compile(r"nav|menu|sidebar|header", re.IGNORECASE)
_NAV_ITEM_NAME = re.compile(r"link|item|button", re.IGNORECASE)
_LAYOUT_NAME = re.compile(r"layout|container|grid|flex", re.IGNORECASE)
_VERTICAL_NAME = re.compile(r"sidebar|vertical", re.IGNORECASE)

_INPUT_TYPES = ("email", "password", "number", "search")

_ALIGNMENT = {"CENTER": "center", "MAX": "end", "END": "end", "SPACE_BETWEEN": "space-between"}


def _clamp(value: float) -> float:
    # 統一四捨五入到小數 4 位，避免浮點誤差影響門檻比較
    return round(min(1.0, max(0.0, value)), 4)


@dataclass(frozen=True)
class ComponentPattern:
    id: str
    type: str
    node_id: str
    name: str
    confidence: float
    properties: Dict[str, Any] = field(default_factory=dict)
    matched_nodes: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "nodeId": self.node_id,
            "name": self.name,
            "confidence": self.confidence,
            "properties": dict(self.properties),
            "matchedNodes": list(self.matched_nodes),
        }


Detector = Callable[[DesignNode, NodeIndex], Optional[ComponentPattern]]


def _text_child(node: DesignNode, index: NodeIndex) -> Optional[DesignNode]:
    for child in index.children_of(node):
        if child.type == "TEXT":
            return child
    return None


def _is_disabled(node: DesignNode) -> bool:
    opacity = node.properties.opacity
    return opacity is not None and opacity < 1


# ─── button ───────────────────────────────────────────────────────────────

def detect_button(node: DesignNode, index: NodeIndex) -> Optional[ComponentPattern]:
    props = node.properties
    name_match = bool(_BUTTON_NAME.search(node.name))
    fills = props.visible_fills()
    has_radius = props.corner_radius is not None
    text = _text_child(node, index)
    if not ((name_match or (has_radius and fills)) and text):
        return None

    if node.name.strip().lower() == "button":
        confidence = 0.5
    elif name_match:
        confidence = 0.3
    else:
        confidence = 0.0
    if has_radius:
        confidence += 0.2
    confidence += 0.3

    variant = "primary"
    if fills and fills[0].opacity is not None and fills[0].opacity < 1:
        variant = "secondary"
    if not fills or (fills[0].is_solid and fills[0].color.a == 0):
        variant = "outline"

    font_size = text.properties.font_size
    size = "md"
    if font_size is not None:
        if font_size < 14:
            size = "sm"
        elif font_size > 16:
            size = "lg"

    label = (text.properties.text.characters if text.properties.text else None) or "Button"
    return ComponentPattern(
        id=f"button-{node.id}",
        type="button",
        node_id=node.id,
        name=node.name,
        confidence=_clamp(confidence),
        properties={
            "variant": variant,
            "size": size,
            "label": label,
            "disabled": _is_disabled(node),
        },
        matched_nodes=(node.id, text.id),
    )


# ─── input ────────────────────────────────────────────────────────────────

def detect_input(node: DesignNode, index: NodeIndex) -> Optional[ComponentPattern]:
    name_match = bool(_INPUT_NAME.search(node.name))
    shape_match = node.type in ("RECTANGLE", "FRAME") and bool(node.properties.visible_strokes())
    text = _text_child(node, index)
    if not ((name_match or shape_match) and text):
        return None

    lowered = node.name.lower()
    input_type = next((t for t in _INPUT_TYPES if t in lowered), "text")
    placeholder = (text.properties.text.characters if text.properties.text else None) or "Placeholder"
    return ComponentPattern(
        id=f"input-{node.id}",
        type="input",
        node_id=node.id,
        name=node.name,
        confidence=INPUT_CONFIDENCE,
        properties={
            "type": input_type,
            "placeholder": placeholder,
            "disabled": _is_disabled(node),
            "required": False,
        },
        matched_nodes=(node.id, text.id),
    )


# ─── card ─────────────────────────────────────────────────────────────────

def shadow_elevation(radius: float) -> int:
    """陰影模糊半徑 → elevation 等級 1..4."""
    if radius < 2:
        return 1
    if radius < 4:
        return 2
    if radius < 8:
        return 3
    return 4


def detect_card(node: DesignNode, index: NodeIndex) -> Optional[ComponentPattern]:
    props = node.properties
    shadows = props.drop_shadows()
    radius = props.corner_radius or 0
    shape_match = node.type in CONTAINER_TYPES and (radius > 0 or bool(shadows))
    if not ((_CARD_NAME.search(node.name) or shape_match) and len(node.children) >= 2):
        return None

    children = index.children_of(node)
    has_header = any("header" in c.name.lower() or c.type == "TEXT" for c in children)
    has_footer = any(
        "footer" in c.name.lower()
        or (c.type == "FRAME" and any("button" in g.name.lower() for g in index.children_of(c)))
        for c in children
    )
    if shadows:
        variant = "elevated"
        elevation = shadow_elevation(shadows[0].radius)
    else:
        variant = "outlined" if props.visible_strokes() else "flat"
        elevation = 0

    return ComponentPattern(
        id=f"card-{node.id}",
        type="card",
        node_id=node.id,
        name=node.name,
        confidence=CARD_CONFIDENCE,
        properties={
            "hasHeader": has_header,
            "hasFooter": has_footer,
            "hasShadow": bool(shadows),
            "elevation": elevation,
            "variant": variant,
            "cornerRadius": radius,
        },
        matched_nodes=(node.id,) + tuple(node.children),
    )


# ─── navigation ───────────────────────────────────────────────────────────

def detect_navigation(node: DesignNode, index: NodeIndex) -> Optional[ComponentPattern]:
    children = index.children_of(node)
    items = [c for c in children if c.type == "TEXT" or _NAV_ITEM_NAME.search(c.name)]
    name_match = bool(_NAV_NAME.search(node.name))
    structure_match = node.type in CONTAINER_TYPES and len(node.children) >= 2 and bool(items)
    if not (name_match or structure_match):
        return None

    lowered = node.name.lower()
    vertical = bool(_VERTICAL_NAME.search(node.name)) or node.properties.layout_mode == "VERTICAL"
    return ComponentPattern(
        id=f"navigation-{node.id}",
        type="navigation",
        node_id=node.id,
        name=node.name,
        confidence=NAVIGATION_CONFIDENCE,
        properties={
            "orientation": "vertical" if vertical else "horizontal",
            "itemCount": len(items),
            "isHeader": "header" in lowered,
            "isSidebar": "sidebar" in lowered,
        },
        matched_nodes=(node.id,) + tuple(c.id for c in items),
    )


# ─── layout ───────────────────────────────────────────────────────────────

def detect_layout(node: DesignNode, index: NodeIndex) -> Optional[ComponentPattern]:
    auto = node.properties.auto_layout
    has_auto_layout = auto is not None and auto.is_active
    if not (has_auto_layout or _LAYOUT_NAME.search(node.name)):
        return None
    if node.type not in CONTAINER_TYPES or len(node.children) < 2:
        return None

    mode = auto.layout_mode if auto else None
    if "grid" in node.name.lower():
        layout_type = "grid"
    elif mode == "VERTICAL":
        layout_type = "flex-column"
    elif mode == "HORIZONTAL":
        layout_type = "flex-row"
    else:
        layout_type = "flex"

    align = auto.primary_axis_align_items if auto else None
    return ComponentPattern(
        id=f"layout-{node.id}",
        type="layout",
        node_id=node.id,
        name=node.name,
        confidence=LAYOUT_CONFIDENCE,
        properties={
            "type": layout_type,
            "spacing": (auto.item_spacing if auto else None) or 0,
            "alignment": _ALIGNMENT.get(align, "start"),
            "padding": auto.padding() if auto else {"top": 0, "right": 0, "bottom": 0, "left": 0},
        },
        matched_nodes=(node.id,),
    )


DEFAULT_DETECTORS: Mapping[str, Detector] = {
    "button": detect_button,
    "input": detect_input,
    "card": detect_card,
    "navigation": detect_navigation,
    "layout": detect_layout,
}


def apply_confidence_adjustments(pattern: ComponentPattern) -> ComponentPattern:
    """名稱含類型 +0.1、matched 節點 >3 +0.05、推得屬性 <2 −0.1；結果限制在 [0, 1]."""
    confidence = pattern.confidence
    if pattern.type in pattern.name.lower():
        confidence = min(1.0, confidence + NAME_MATCH_BONUS)
    if len(pattern.matched_nodes) > MATCHED_NODES_THRESHOLD:
        confidence = min(1.0, confidence + MATCHED_NODES_BONUS)
    if len(pattern.properties) < MIN_PROPERTIES:
        confidence = max(0.0, confidence - FEW_PROPERTIES_PENALTY)
    return replace(pattern, confidence=_clamp(confidence))


def detect_patterns(nodes, detectors: Optional[Mapping[str, Detector]] = None) -> Tuple[ComponentPattern, ...]:
    """逐類型掃描所有節點，回傳調整後的 pattern 清單."""
    detectors = DEFAULT_DETECTORS if detectors is None else detectors
    index = NodeIndex(nodes)
    found: List[ComponentPattern] = []
    for archetype, detector in detectors.items():
        hits = 0
        for node in nodes:
            pattern = detector(node, index)
            if pattern is None:
                continue
            found.append(apply_confidence_adjustments(pattern))
            hits += 1
        logger.debug("Detector '%s' matched %d nodes", archetype, hits)
    return tuple(found)
