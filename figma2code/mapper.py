"""
元件對應 — 來源元件 → 目標元件庫

第一輪依偵測到的 pattern 類型比對 library 元件的 type；
第二輪對剩下的元件以名稱相似度做 fuzzy matching。
最後統一套用信心值公式（60% 結構 + 40% 屬性平均，再依屬性覆蓋率 ±0.1）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import LibraryNotLoadedError, NoComponentsError
from .figma_reader import ComponentEntity, DesignNode, NodeIndex
from .library import TargetLibrary, TargetLibraryComponent
from .pattern_detector import ComponentPattern
from .similarity import name_similarity
from .style_validator import nearest_standard

logger = logging.getLogger(__name__)

# fuzzy matching 門檻
COMPONENT_MATCH_THRESHOLD = 0.6
PROPERTY_MATCH_THRESHOLD = 0.7

# 信心值公式
STRUCTURAL_WEIGHT = 0.6
PROPERTY_WEIGHT = 0.4
HIGH_COVERAGE = 0.7
LOW_COVERAGE = 0.3
COVERAGE_ADJUSTMENT = 0.1

BORDER_RADIUS_SCALE = (0, 2, 4, 8, 16, 24)

CONTAINER_NODE_TYPES = ("CANVAS", "FRAME", "GROUP", "SECTION")


@dataclass(frozen=True)
class MappingThresholds:
    component: float = COMPONENT_MATCH_THRESHOLD
    property: float = PROPERTY_MATCH_THRESHOLD


@dataclass(frozen=True)
class PropertyMapping:
    source_property: str
    target_property: str
    value: Any
    confidence: float
    transform: str = "direct"  # direct / rename / snap / derive / fuzzy

    def to_dict(self) -> dict:
        return {
            "sourceProperty": self.source_property,
            "targetProperty": self.target_property,
            "value": self.value,
            "confidence": self.confidence,
            "transform": self.transform,
        }


@dataclass(frozen=True)
class ComponentMapping:
    id: str
    source_id: str
    source_name: str
    target_id: str
    target_name: str
    target_type: str
    pattern_type: str
    confidence: float
    property_mappings: Tuple[PropertyMapping, ...] = ()
    matched_nodes: Tuple[str, ...] = ()
    target_description: str = ""

    def value_for(self, target_property: str, default: Any = None) -> Any:
        """取得對應到某個目標屬性的值."""
        for pm in self.property_mappings:
            if pm.target_property == target_property:
                return pm.value
        return default

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "sourceName": self.source_name,
            "targetId": self.target_id,
            "targetName": self.target_name,
            "targetType": self.target_type,
            "patternType": self.pattern_type,
            "confidence": self.confidence,
            "propertyMappings": [pm.to_dict() for pm in self.property_mappings],
            "matchedNodes": list(self.matched_nodes),
        }


@dataclass(frozen=True)
class MappingResult:
    mappings: Tuple[ComponentMapping, ...]
    mapped_count: int
    total_count: int
    unmapped_components: Tuple[ComponentEntity, ...] = ()

    def get(self, mapping_id: str) -> Optional[ComponentMapping]:
        for mapping in self.mappings:
            if mapping.id == mapping_id:
                return mapping
        return None

    def to_dict(self) -> dict:
        return {
            "mappings": [m.to_dict() for m in self.mappings],
            "mappedCount": self.mapped_count,
            "totalCount": self.total_count,
            "unmappedComponents": [
                {"id": c.id, "name": c.name, "type": c.type} for c in self.unmapped_components
            ],
        }


# ─── 各類型屬性規則 ───────────────────────────────────────────────────────

def _add(out: List[PropertyMapping], target: TargetLibraryComponent, source: str,
         target_prop: str, value: Any, confidence: float, transform: str = "direct") -> None:
    if value is None or not target.has_property(target_prop):
        return
    out.append(PropertyMapping(source, target_prop, value, confidence, transform))


def map_button_properties(pattern: ComponentPattern, target: TargetLibraryComponent) -> List[PropertyMapping]:
    p = pattern.properties
    out: List[PropertyMapping] = []
    _add(out, target, "variant", "variant", p.get("variant"), 0.9)
    _add(out, target, "size", "size", p.get("size"), 0.8)
    if target.has_property("children"):
        _add(out, target, "label", "children", p.get("label"), 0.9, "rename")
    else:
        _add(out, target, "label", "label", p.get("label"), 0.9)
    _add(out, target, "disabled", "disabled", p.get("disabled"), 0.9)
    return out


def map_input_properties(pattern: ComponentPattern, target: TargetLibraryComponent) -> List[PropertyMapping]:
    p = pattern.properties
    out: List[PropertyMapping] = []
    _add(out, target, "type", "type", p.get("type"), 0.9)
    _add(out, target, "placeholder", "placeholder", p.get("placeholder"), 0.9)
    _add(out, target, "disabled", "disabled", p.get("disabled"), 0.9)
    _add(out, target, "required", "required", p.get("required"), 0.7)
    return out


def map_card_properties(pattern: ComponentPattern, target: TargetLibraryComponent) -> List[PropertyMapping]:
    p = pattern.properties
    out: List[PropertyMapping] = []
    _add(out, target, "hasHeader", "withHeader", p.get("hasHeader"), 0.8, "rename")
    _add(out, target, "hasFooter", "withFooter", p.get("hasFooter"), 0.8, "rename")
    _add(out, target, "hasShadow", "elevation", p.get("elevation"), 0.7, "derive")
    radius = p.get("cornerRadius")
    if radius is not None:
        snapped = nearest_standard(radius, BORDER_RADIUS_SCALE)
        confidence = 0.9 if snapped == radius else 0.7
        _add(out, target, "cornerRadius", "borderRadius", snapped, confidence, "snap")
    return out


def map_navigation_properties(pattern: ComponentPattern, target: TargetLibraryComponent) -> List[PropertyMapping]:
    p = pattern.properties
    out: List[PropertyMapping] = []
    _add(out, target, "orientation", "orientation", p.get("orientation"), 0.9)
    if p.get("isHeader"):
        _add(out, target, "isHeader", "variant", "header", 0.8, "derive")
    elif p.get("isSidebar"):
        _add(out, target, "isSidebar", "variant", "sidebar", 0.8, "derive")
    else:
        _add(out, target, "isHeader", "variant", "default", 0.8, "derive")
    return out


def map_layout_properties(pattern: ComponentPattern, target: TargetLibraryComponent) -> List[PropertyMapping]:
    p = pattern.properties
    layout_type = p.get("type")
    out: List[PropertyMapping] = []
    if layout_type:
        _add(out, target, "type", "display", "grid" if layout_type == "grid" else "flex", 0.9, "derive")
    if layout_type in ("flex-row", "flex-column"):
        direction = "row" if layout_type == "flex-row" else "column"
        _add(out, target, "type", "flexDirection", direction, 0.9, "derive")
    _add(out, target, "spacing", "gap", p.get("spacing"), 0.8, "rename")
    _add(out, target, "alignment", "justifyContent", p.get("alignment"), 0.8, "rename")
    _add(out, target, "padding", "padding", p.get("padding"), 0.9)
    return out


PropertyRule = Callable[[ComponentPattern, TargetLibraryComponent], List[PropertyMapping]]

PROPERTY_RULES: Mapping[str, PropertyRule] = {
    "button": map_button_properties,
    "input": map_input_properties,
    "card": map_card_properties,
    "navigation": map_navigation_properties,
    "layout": map_layout_properties,
}


# ─── 信心值 ───────────────────────────────────────────────────────────────

def finalize_confidence(confidence: float, property_mappings: Sequence[PropertyMapping],
                        target_property_count: int) -> float:
    """60% 結構信心 + 40% 屬性平均；屬性覆蓋率 >70% +0.1、<30% −0.1."""
    if property_mappings:
        average = sum(pm.confidence for pm in property_mappings) / len(property_mappings)
        confidence = STRUCTURAL_WEIGHT * confidence + PROPERTY_WEIGHT * average
    # 目標元件沒有宣告任何屬性時無法計算覆蓋率，不調整
    if target_property_count:
        ratio = len(property_mappings) / target_property_count
        if ratio > HIGH_COVERAGE:
            confidence = min(1.0, confidence + COVERAGE_ADJUSTMENT)
        elif ratio < LOW_COVERAGE:
            confidence = max(0.0, confidence - COVERAGE_ADJUSTMENT)
    return round(min(1.0, max(0.0, confidence)), 4)


def best_property_match(source_property: str, target: TargetLibraryComponent,
                        threshold: float = PROPERTY_MATCH_THRESHOLD) -> Optional[Tuple[str, float]]:
    best: Optional[Tuple[str, float]] = None
    for name in target.properties:
        score = name_similarity(source_property, name)
        if best is None or score > best[1]:
            best = (name, score)
    if best and best[1] > threshold:
        return best
    return None


# ─── map ──────────────────────────────────────────────────────────────────

def _pattern_pass(components, patterns, library, rules) -> List[ComponentMapping]:
    by_node: Dict[str, List[ComponentPattern]] = {}
    for pattern in patterns:
        by_node.setdefault(pattern.node_id, []).append(pattern)

    mappings = []
    for component in components:
        node_patterns = by_node.get(component.id)
        if not node_patterns:
            continue
        top = max(node_patterns, key=lambda p: p.confidence)
        candidates = [c for c in library.components if c.type.lower() == top.type.lower()]
        if not candidates:
            continue
        target = max(candidates, key=lambda c: name_similarity(component.name, c.name))
        rule = rules.get(top.type)
        property_mappings = rule(top, target) if rule else []
        mappings.append(_mapping(component, target, top.type, top.confidence,
                                 property_mappings, top.matched_nodes))
        logger.debug("Pattern match: %s → %s (%s)", component.name, target.name, top.type)
    return mappings


def _fallback_pass(components, library, thresholds: MappingThresholds) -> List[ComponentMapping]:
    mappings = []
    for component in components:
        if not library.components:
            break
        scored = [(name_similarity(component.name, c.name), c) for c in library.components]
        score, target = max(scored, key=lambda s: s[0])
        if score <= thresholds.component:
            continue
        property_mappings = []
        for prop, value in component.properties.as_dict().items():
            match = best_property_match(prop, target, thresholds.property)
            if match:
                property_mappings.append(
                    PropertyMapping(prop, match[0], value, round(match[1], 4), "fuzzy")
                )
        mappings.append(_mapping(component, target, "unknown", round(score, 4),
                                 property_mappings, (component.id,)))
        logger.debug("Fallback match: %s → %s (similarity %.2f)", component.name, target.name, score)
    return mappings


def _mapping(component, target, pattern_type, confidence, property_mappings, matched_nodes) -> ComponentMapping:
    return ComponentMapping(
        id=f"mapping-{component.id}-{target.id}",
        source_id=component.id,
        source_name=component.name,
        target_id=target.id,
        target_name=target.name,
        target_type=target.type,
        pattern_type=pattern_type,
        confidence=finalize_confidence(confidence, property_mappings, len(target.properties)),
        property_mappings=tuple(property_mappings),
        matched_nodes=tuple(matched_nodes),
        target_description=target.description,
    )


def map_components(
    components: Sequence[ComponentEntity],
    nodes: Sequence[DesignNode],
    patterns: Sequence[ComponentPattern],
    library: Optional[TargetLibrary],
    thresholds: Optional[MappingThresholds] = None,
    rules: Optional[Mapping[str, PropertyRule]] = None,
) -> MappingResult:
    """將來源元件對應到目標元件庫."""
    if library is None:
        raise LibraryNotLoadedError("Target library not loaded")
    if not components:
        raise NoComponentsError("No design components to map")
    thresholds = thresholds or MappingThresholds()
    rules = PROPERTY_RULES if rules is None else rules

    index = NodeIndex(nodes)
    stale = [c.id for c in components if c.id not in index]
    if stale:
        logger.warning("Components not found in the node list: %s", ", ".join(stale))

    mappings = _pattern_pass(components, patterns, library, rules)
    mapped = {m.source_id for m in mappings}
    leftovers = [c for c in components if c.id not in mapped]
    mappings.extend(_fallback_pass(leftovers, library, thresholds))
    mapped = {m.source_id for m in mappings}

    unmapped = tuple(c for c in components if c.id not in mapped)
    logger.info("Mapped %d/%d components (%d unmapped)", len(mapped), len(components), len(unmapped))
    return MappingResult(
        mappings=tuple(mappings),
        mapped_count=len(mapped),
        total_count=len(components),
        unmapped_components=unmapped,
    )


# ─── component tree ───────────────────────────────────────────────────────

def build_component_tree(nodes: Sequence[DesignNode], mappings: Sequence[ComponentMapping]) -> dict:
    """把頁面節點樹轉成以目標元件庫表示的版面樹."""
    index = NodeIndex(nodes)
    by_source = {m.source_id: m for m in mappings}
    roots = [n for n in nodes if n.parent_id is None]
    return {
        "type": "root",
        "children": [_convert(n, index, by_source) for n in roots],
        "mappings": [
            {
                "id": m.id,
                "sourceId": m.source_id,
                "targetId": m.target_id,
                "targetName": m.target_name,
                "confidence": m.confidence,
            }
            for m in mappings
        ],
    }


def _convert(node: DesignNode, index: NodeIndex, by_source: Dict[str, ComponentMapping]) -> dict:
    children = [_convert(c, index, by_source) for c in index.children_of(node)]
    mapping = by_source.get(node.id)
    if mapping:
        return {
            "type": "component",
            "componentId": mapping.target_id,
            "name": mapping.target_name,
            "properties": {pm.target_property: pm.value for pm in mapping.property_mappings},
            "children": children,
        }

    props = node.properties
    if node.type in CONTAINER_NODE_TYPES:
        auto = props.auto_layout
        style: Dict[str, Any] = {"display": "block"}
        if auto and auto.is_active:
            style = {
                "display": "flex",
                "flexDirection": "column" if auto.layout_mode == "VERTICAL" else "row",
                "gap": auto.item_spacing or 0,
                "padding": auto.padding(),
            }
        return {"type": "container", "name": node.name, "properties": style, "children": children}

    if node.type == "TEXT":
        text = props.text
        fills = [f for f in props.visible_fills() if f.is_solid]
        return {
            "type": "text",
            "name": node.name,
            "properties": {
                "text": text.characters if text else "",
                "fontSize": text.font_size if text else None,
                "fontWeight": text.font_weight if text else None,
                "color": fills[0].color.key() if fills else None,
            },
        }

    return {"type": "element", "name": node.name, "nodeType": node.type, "children": children}
