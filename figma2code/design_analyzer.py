"""
設計分析 — pattern 偵測 + 樣式一致性檢查 + 設計系統 metadata

analyze() 是純函式：相同輸入永遠得到相同結果，不保留任何狀態。
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import UninitializedStateError
from .figma_reader import ComponentEntity, DesignNode, DesignTree, StyleRecord
from .pattern_detector import ComponentPattern, Detector, detect_patterns
from .style_validator import (
    StyleIssue,
    Validator,
    collect_colors,
    collect_spacing,
    consistency_score,
    validate_styles,
)

logger = logging.getLogger(__name__)

NEUTRAL_CHANNEL_DELTA = 10
BODY_SIZE_RANGE = (14, 18)
SMALL_SIZE_RANGE = (10, 14)


@dataclass(frozen=True)
class AnalysisResult:
    patterns: Tuple[ComponentPattern, ...]
    average_confidence: float
    issues: Tuple[StyleIssue, ...]
    consistency_score: float
    metadata: Dict[str, Any] = field(default_factory=dict)
    enriched_nodes: Tuple[dict, ...] = ()

    def patterns_for(self, node_id: str) -> List[ComponentPattern]:
        return [p for p in self.patterns if p.node_id == node_id]

    def to_dict(self) -> dict:
        return {
            "patterns": [p.to_dict() for p in self.patterns],
            "averageConfidence": self.average_confidence,
            "issues": [i.to_dict() for i in self.issues],
            "consistencyScore": self.consistency_score,
            "metadata": self.metadata,
            "enrichedNodes": list(self.enriched_nodes),
        }


def analyze(
    tree: Optional[DesignTree],
    nodes: Sequence[DesignNode],
    styles: Sequence[StyleRecord] = (),
    components: Sequence[ComponentEntity] = (),
    *,
    detectors: Optional[Mapping[str, Detector]] = None,
    validators: Optional[Mapping[str, Validator]] = None,
) -> AnalysisResult:
    """分析攤平後的節點，回傳 pattern、樣式問題與 metadata."""
    if tree is None or not nodes:
        raise UninitializedStateError("Design tree not parsed: run the tree parser before analysis")

    patterns = detect_patterns(nodes, detectors)
    issues = validate_styles(nodes, validators)
    average = (
        round(sum(p.confidence for p in patterns) / len(patterns), 4) if patterns else 0.0
    )
    metadata = build_metadata(nodes, styles, components, patterns, issues)
    enriched = enrich_nodes(nodes, patterns, issues)

    logger.info(
        "Analysis: %d patterns (avg confidence %.2f), %d style issues",
        len(patterns), average, len(issues),
    )
    return AnalysisResult(
        patterns=patterns,
        average_confidence=average,
        issues=issues,
        consistency_score=consistency_score(issues),
        metadata=metadata,
        enriched_nodes=enriched,
    )


# ─── metadata ─────────────────────────────────────────────────────────────

def build_metadata(nodes, styles, components, patterns, issues) -> Dict[str, Any]:
    return {
        "componentCount": len(components),
        "nodeCount": len(nodes),
        "styleCount": len(styles),
        "patternCount": len(patterns),
        "issueCount": len(issues),
        "colorPalette": extract_color_palette(nodes),
        "typographySystem": extract_typography_system(nodes),
        "spacingSystem": extract_spacing_system(nodes),
    }


def _is_neutral(rgba) -> bool:
    r, g, b = rgba[0], rgba[1], rgba[2]
    return (
        abs(r - g) < NEUTRAL_CHANNEL_DELTA
        and abs(g - b) < NEUTRAL_CHANNEL_DELTA
        and abs(r - b) < NEUTRAL_CHANNEL_DELTA
    )


def extract_color_palette(nodes: Sequence[DesignNode]) -> Dict[str, Any]:
    """依 fill 使用次數排序，前三名為 primary / secondary / accent，灰階歸 neutral."""
    colors = collect_colors(nodes, include_strokes=False)
    ranked = sorted(colors.items(), key=lambda kv: -kv[1]["count"])
    entries = [
        {"color": key, "count": info["count"], "usage": list(info["nodes"])}
        for key, info in ranked
    ]
    keys = [e["color"] for e in entries]
    return {
        "colors": entries,
        "categorized": {
            "primary": keys[:1],
            "secondary": keys[1:2],
            "accent": keys[2:3],
            "neutral": [key for key, info in ranked if _is_neutral(info["rgba"])],
            "all": keys,
        },
    }


def _most_common_in(counter: Counter, low: float, high: float) -> Optional[float]:
    for size, _ in counter.most_common():
        if low <= size <= high:
            return size
    return None


def extract_typography_system(nodes: Sequence[DesignNode]) -> Dict[str, Any]:
    sizes: Counter = Counter()
    families: Counter = Counter()
    for node in nodes:
        text = node.properties.text
        if node.type != "TEXT" or not text:
            continue
        if text.font_size is not None:
            sizes[text.font_size] += 1
        if text.font_family:
            families[text.font_family] += 1

    ordered_sizes = sorted(sizes)
    descending = sorted(sizes, reverse=True)
    ranked_families = [f for f, _ in families.most_common()]
    return {
        "fontSizes": [{"size": s, "count": sizes[s]} for s in ordered_sizes],
        "fontFamilies": [{"family": f, "count": families[f]} for f in ranked_families],
        "categorized": {
            "sizes": {
                "heading1": descending[0] if descending else None,
                "heading2": descending[1] if len(descending) > 1 else None,
                "heading3": descending[2] if len(descending) > 2 else None,
                "body": _most_common_in(sizes, *BODY_SIZE_RANGE),
                "small": _most_common_in(sizes, *SMALL_SIZE_RANGE),
                "all": ordered_sizes,
            },
            "primaryFont": ranked_families[0] if ranked_families else None,
            "secondaryFont": ranked_families[1] if len(ranked_families) > 1 else None,
        },
    }


def extract_spacing_system(nodes: Sequence[DesignNode]) -> Dict[str, Any]:
    spacing = collect_spacing(nodes)
    counts = Counter()
    for node in nodes:
        if node.properties.auto_layout:
            counts.update(node.properties.auto_layout.spacing_values())
    scale = sorted(spacing)
    return {
        "values": [{"value": v, "count": counts[v]} for v in scale],
        "scale": scale,
    }


# ─── enrichment ───────────────────────────────────────────────────────────

def enrich_nodes(nodes, patterns, issues) -> Tuple[dict, ...]:
    """每個節點附上引用它的 pattern id 與 issue id."""
    pattern_refs: Dict[str, List[str]] = {}
    for pattern in patterns:
        for node_id in pattern.matched_nodes:
            pattern_refs.setdefault(node_id, []).append(pattern.id)
    issue_refs: Dict[str, List[str]] = {}
    for issue in issues:
        for node_id in issue.affected_nodes():
            issue_refs.setdefault(node_id, []).append(issue.id)

    enriched = []
    for node in nodes:
        data = node.to_dict()
        data["patterns"] = pattern_refs.get(node.id, [])
        data["styleIssues"] = issue_refs.get(node.id, [])
        enriched.append(data)
    return tuple(enriched)
