"""
樣式一致性檢查 — color / typography / spacing / border-radius / shadow

各類別一個純函式 (nodes) -> list[StyleIssue]，以 DEFAULT_VALIDATORS 登錄。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .figma_reader import DesignNode
from .properties import format_number

logger = logging.getLogger(__name__)

COLOR_SIMILARITY_THRESHOLD = 20
MAX_COLORS = 10
MAX_FONT_SIZES = 5
MAX_FONT_FAMILIES = 2
MAX_SPACING_VALUES = 8
MAX_RADIUS_VALUES = 5
MAX_SHADOW_VARIANTS = 3

STANDARD_FONT_SIZES = (12, 14, 16, 18, 20, 24, 30, 36, 48, 60, 72)
STANDARD_SPACING = (0, 4, 8, 12, 16, 20, 24, 32, 40, 48, 64, 80, 96, 128)
STANDARD_RADII = (0, 2, 4, 8, 12, 16, 24, 32)

SEVERITY_WEIGHTS = {"error": 0.2, "warning": 0.1, "info": 0.05}


@dataclass(frozen=True)
class StyleIssue:
    id: str
    category: str
    severity: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def affected_nodes(self) -> List[str]:
        return list(self.details.get("affectedNodes", []))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "severity": self.severity,
            "message": self.message,
            "details": dict(self.details),
            "suggestion": self.suggestion,
        }


Validator = Callable[[Sequence[DesignNode]], List[StyleIssue]]


def nearest_standard(value: float, scale: Sequence[float]) -> float:
    """刻度中最接近的值；距離相同時取較小者."""
    return min(scale, key=lambda s: abs(s - value))


def on_scale(value: float, scale: Sequence[float]) -> bool:
    """值本身或四捨五入（.5 進位）後落在刻度上."""
    return value in scale or math.floor(value + 0.5) in scale


def _collect(pairs) -> Dict[Any, List[str]]:
    # (value, node_id) → {value: [node ids]}，保留首次出現順序
    out: Dict[Any, List[str]] = {}
    for value, node_id in pairs:
        ids = out.setdefault(value, [])
        if node_id not in ids:
            ids.append(node_id)
    return out


# ─── color ────────────────────────────────────────────────────────────────

def collect_colors(nodes: Sequence[DesignNode], include_strokes: bool = True) -> Dict[str, dict]:
    """rgba key → {"rgba": (r, g, b, a), "nodes": [...], "count": n}."""
    colors: Dict[str, dict] = {}
    for node in nodes:
        paints = node.properties.fills + (node.properties.strokes if include_strokes else ())
        for paint in paints:
            if not (paint.visible and paint.is_solid):
                continue
            key = paint.color.key()
            entry = colors.setdefault(key, {"rgba": paint.color.to_rgba255(), "nodes": [], "count": 0})
            entry["count"] += 1
            if node.id not in entry["nodes"]:
                entry["nodes"].append(node.id)
    return colors


def color_distance(a: Tuple[int, int, int, float], b: Tuple[int, int, int, float]) -> float:
    """RGB 與 alpha×255 的歐氏距離."""
    return math.sqrt(
        (a[0] - b[0]) ** 2
        + (a[1] - b[1]) ** 2
        + (a[2] - b[2]) ** 2
        + ((a[3] - b[3]) * 255) ** 2
    )


def validate_colors(nodes: Sequence[DesignNode]) -> List[StyleIssue]:
    colors = collect_colors(nodes)
    keys = list(colors)
    issues: List[StyleIssue] = []

    processed = set()
    for key in keys:
        if key in processed:
            continue
        processed.add(key)
        group = [key]
        for other in keys:
            if other in processed:
                continue
            if color_distance(colors[key]["rgba"], colors[other]["rgba"]) < COLOR_SIMILARITY_THRESHOLD:
                group.append(other)
                processed.add(other)
        if len(group) > 1:
            affected: List[str] = []
            for member in group:
                affected.extend(n for n in colors[member]["nodes"] if n not in affected)
            issues.append(StyleIssue(
                id=f"color-similar-{key}",
                category="color",
                severity="warning",
                message=f"Found {len(group)} similar colors that could be consolidated",
                details={"colors": group, "affectedNodes": affected},
                suggestion=f"Consider using a single color token such as {key}",
            ))

    if len(colors) > MAX_COLORS:
        issues.append(StyleIssue(
            id="color-too-many",
            category="color",
            severity="warning",
            message=f"Design uses {len(colors)} distinct colors",
            details={"colorCount": len(colors), "colors": keys},
            suggestion=f"Limit the palette to {MAX_COLORS} colors or fewer",
        ))
    return issues


# ─── typography ───────────────────────────────────────────────────────────

def validate_typography(nodes: Sequence[DesignNode]) -> List[StyleIssue]:
    text_nodes = [n for n in nodes if n.type == "TEXT" and n.properties.text]
    sizes = _collect(
        (n.properties.text.font_size, n.id) for n in text_nodes
        if n.properties.text.font_size is not None
    )
    families = _collect(
        (n.properties.text.font_family, n.id) for n in text_nodes
        if n.properties.text.font_family
    )
    issues: List[StyleIssue] = []

    if len(sizes) > MAX_FONT_SIZES:
        issues.append(StyleIssue(
            id="typography-too-many-sizes",
            category="typography",
            severity="warning",
            message=f"Design uses {len(sizes)} different font sizes",
            details={"fontSizes": sorted(sizes)},
            suggestion=f"Limit the type scale to {MAX_FONT_SIZES} sizes or fewer",
        ))
    if len(families) > MAX_FONT_FAMILIES:
        issues.append(StyleIssue(
            id="typography-too-many-families",
            category="typography",
            severity="warning",
            message=f"Design uses {len(families)} different font families",
            details={"fontFamilies": list(families)},
            suggestion=f"Limit the design to {MAX_FONT_FAMILIES} font families",
        ))

    for size, node_ids in sizes.items():
        if on_scale(size, STANDARD_FONT_SIZES):
            continue
        nearest = nearest_standard(size, STANDARD_FONT_SIZES)
        issues.append(StyleIssue(
            id=f"typography-non-standard-{format_number(size)}",
            category="typography",
            severity="info",
            message=f"Font size {format_number(size)}px is not part of the standard type scale",
            details={"fontSize": size, "nearestStandard": nearest, "affectedNodes": node_ids},
            suggestion=f"Consider using {nearest}px instead",
        ))
    return issues


# ─── spacing / radius ─────────────────────────────────────────────────────

def _scale_issues(category: str, prefix: str, label: str, values: Dict[float, List[str]],
                  scale: Sequence[float], max_values: int) -> List[StyleIssue]:
    issues: List[StyleIssue] = []
    if len(values) > max_values:
        issues.append(StyleIssue(
            id=f"{prefix}-too-many-values",
            category=category,
            severity="warning",
            message=f"Design uses {len(values)} different {label} values",
            details={"values": sorted(values)},
            suggestion=f"Limit {label} to {max_values} values from a consistent scale",
        ))
    for value, node_ids in values.items():
        if on_scale(value, scale):
            continue
        nearest = nearest_standard(value, scale)
        issues.append(StyleIssue(
            id=f"{prefix}-non-standard-{format_number(value)}",
            category=category,
            severity="info",
            message=f"{label.capitalize()} value {format_number(value)}px is not on the standard scale",
            details={"value": value, "nearestStandard": nearest, "affectedNodes": node_ids},
            suggestion=f"Consider using {nearest}px instead",
        ))
    return issues


def collect_spacing(nodes: Sequence[DesignNode]) -> Dict[float, List[str]]:
    return _collect(
        (value, n.id)
        for n in nodes if n.properties.auto_layout
        for value in n.properties.auto_layout.spacing_values()
    )


def validate_spacing(nodes: Sequence[DesignNode]) -> List[StyleIssue]:
    return _scale_issues("spacing", "spacing", "spacing", collect_spacing(nodes),
                         STANDARD_SPACING, MAX_SPACING_VALUES)


def validate_border_radius(nodes: Sequence[DesignNode]) -> List[StyleIssue]:
    radii = _collect(
        (n.properties.corner_radius, n.id) for n in nodes
        if n.properties.corner_radius is not None
    )
    return _scale_issues("border-radius", "radius", "border radius", radii,
                         STANDARD_RADII, MAX_RADIUS_VALUES)


# ─── shadow ───────────────────────────────────────────────────────────────

def validate_shadows(nodes: Sequence[DesignNode]) -> List[StyleIssue]:
    shadows = _collect(
        (effect.shadow_key(), n.id)
        for n in nodes for effect in n.properties.drop_shadows()
    )
    if len(shadows) <= MAX_SHADOW_VARIANTS:
        return []
    affected: List[str] = []
    for node_ids in shadows.values():
        affected.extend(n for n in node_ids if n not in affected)
    return [StyleIssue(
        id="shadow-too-many-variations",
        category="shadow",
        severity="warning",
        message=f"Design uses {len(shadows)} different drop shadow variations",
        details={"shadows": list(shadows), "affectedNodes": affected},
        suggestion=f"Define at most {MAX_SHADOW_VARIANTS} elevation levels",
    )]


DEFAULT_VALIDATORS: Mapping[str, Validator] = {
    "color": validate_colors,
    "typography": validate_typography,
    "spacing": validate_spacing,
    "border-radius": validate_border_radius,
    "shadow": validate_shadows,
}


def validate_styles(nodes: Sequence[DesignNode],
                    validators: Optional[Mapping[str, Validator]] = None) -> Tuple[StyleIssue, ...]:
    validators = DEFAULT_VALIDATORS if validators is None else validators
    issues: List[StyleIssue] = []
    for category, validator in validators.items():
        found = validator(nodes)
        logger.debug("Style check '%s' found %d issues", category, len(found))
        issues.extend(found)
    return tuple(issues)


def consistency_score(issues: Sequence[StyleIssue]) -> float:
    """1 − Σ 嚴重度權重，最低 0."""
    penalty = sum(SEVERITY_WEIGHTS.get(i.severity, 0) for i in issues)
    return round(max(0.0, 1.0 - penalty), 4)
