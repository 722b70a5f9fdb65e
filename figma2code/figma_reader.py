"""
Figma 設計檔讀取 — 解析、攤平、擷取樣式、辨識元件

輸入為 Figma 匯出的 JSON（name / document.children / components / styles），
輸出 ParseResult 供後續分析、mapping 使用。所有結果建立後即不再修改。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import MalformedDocumentError
from .properties import NodeProperties

logger = logging.getLogger(__name__)

COMPONENT_TYPES = ("COMPONENT", "INSTANCE")


@dataclass(frozen=True)
class DesignNode:
    id: str
    name: str
    type: str
    parent_id: Optional[str]
    depth: int
    children: Tuple[str, ...] = ()
    visible: bool = True
    properties: NodeProperties = field(default_factory=NodeProperties)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "parentId": self.parent_id,
            "depth": self.depth,
            "children": list(self.children),
            "visible": self.visible,
            "properties": self.properties.as_dict(),
        }


@dataclass(frozen=True)
class DesignPage:
    id: str
    name: str
    type: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def children(self) -> list:
        return self.raw.get("children") or []


@dataclass(frozen=True)
class DesignTree:
    name: str
    pages: Tuple[DesignPage, ...]
    last_modified: Optional[str] = None
    thumbnail_url: Optional[str] = None
    version: str = "1"
    schema_version: int = 0
    raw_components: Dict[str, Any] = field(default_factory=dict, repr=False)
    raw_styles: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "lastModified": self.last_modified,
            "thumbnailUrl": self.thumbnail_url,
            "version": self.version,
            "schemaVersion": self.schema_version,
            "pages": [{"id": p.id, "name": p.name, "type": p.type} for p in self.pages],
        }


@dataclass(frozen=True)
class StyleRecord:
    id: str
    name: str
    type: str  # FILL / TEXT / EFFECT
    value: Any
    node_id: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "type": self.type,
                "value": self.value, "nodeId": self.node_id}


@dataclass(frozen=True)
class ComponentEntity:
    id: str
    name: str
    type: str
    properties: NodeProperties
    children: Tuple[str, ...] = ()
    styles: Tuple[StyleRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "properties": self.properties.as_dict(),
            "children": list(self.children),
            "styles": [s.id for s in self.styles],
        }


@dataclass(frozen=True)
class ParseResult:
    tree: DesignTree
    nodes: Tuple[DesignNode, ...]
    styles: Tuple[StyleRecord, ...]
    components: Tuple[ComponentEntity, ...]

    def to_dict(self) -> dict:
        return {
            "tree": self.tree.to_dict(),
            "nodes": [n.to_dict() for n in self.nodes],
            "styles": [s.to_dict() for s in self.styles],
            "components": [c.to_dict() for c in self.components],
        }


class NodeIndex:
    """攤平節點的唯讀查詢表."""

    def __init__(self, nodes):
        self._by_id: Dict[str, DesignNode] = {n.id: n for n in nodes}

    def get(self, node_id: str) -> Optional[DesignNode]:
        return self._by_id.get(node_id)

    def children_of(self, node: DesignNode) -> List[DesignNode]:
        return [self._by_id[c] for c in node.children if c in self._by_id]

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


# ─── parse ────────────────────────────────────────────────────────────────

def build_tree(raw: Any) -> DesignTree:
    """驗證頂層結構並建立頁面清單."""
    if not isinstance(raw, dict):
        raise MalformedDocumentError("Invalid Figma file format: expected a JSON object")
    document = raw.get("document")
    if not isinstance(document, dict):
        raise MalformedDocumentError("Invalid Figma file format: missing document")
    pages_raw = document.get("children")
    if not isinstance(pages_raw, list):
        raise MalformedDocumentError("Invalid Figma file format: missing document.children")

    pages = []
    for index, page in enumerate(pages_raw):
        if not isinstance(page, dict):
            raise MalformedDocumentError(f"Invalid Figma file format: page #{index} is not an object")
        pages.append(DesignPage(
            id=str(page.get("id") or f"page-{index}"),
            name=page.get("name", f"Page {index + 1}"),
            type=page.get("type", "CANVAS"),
            raw=page,
        ))

    return DesignTree(
        name=raw.get("name") or "Untitled Design",
        pages=tuple(pages),
        last_modified=raw.get("lastModified"),
        thumbnail_url=raw.get("thumbnailUrl"),
        version=str(raw.get("version") or "1"),
        schema_version=raw.get("schemaVersion") or 0,
        raw_components=raw.get("components") or {},
        raw_styles=raw.get("styles") or {},
    )


def parse(raw: Any) -> ParseResult:
    """解析設計檔：建樹 → 攤平 → 擷取樣式 → 辨識元件."""
    tree = build_tree(raw)
    nodes = flatten(tree)
    styles = extract_styles(nodes)
    components = identify_components(nodes, styles)
    logger.info(
        "Parsed '%s': %d pages, %d nodes, %d styles, %d components",
        tree.name, len(tree.pages), len(nodes), len(styles), len(components),
    )
    return ParseResult(tree=tree, nodes=nodes, styles=styles, components=components)


# ─── flatten ──────────────────────────────────────────────────────────────

def flatten(tree: DesignTree) -> Tuple[DesignNode, ...]:
    """深度優先攤平：父節點在前、兄弟依序，每個節點恰好出現一次."""
    out: List[DesignNode] = []
    seen: set = set()
    for page in tree.pages:
        _flatten(page.raw, None, 0, page.id, out, seen)
    return tuple(out)


def _flatten(raw: dict, parent_id: Optional[str], depth: int, node_id: str,
             out: List[DesignNode], seen: set) -> None:
    if node_id in seen:
        raise MalformedDocumentError(f"Duplicate node id '{node_id}'")
    seen.add(node_id)

    raw_children = raw.get("children") or []
    child_ids = []
    for index, child in enumerate(raw_children):
        if not isinstance(child, dict):
            raise MalformedDocumentError(f"Node '{node_id}' has a non-object child at #{index}")
        child_ids.append(str(child.get("id") or f"{node_id}:{index}"))

    out.append(DesignNode(
        id=node_id,
        name=raw.get("name", "Unnamed"),
        type=raw.get("type", "FRAME"),
        parent_id=parent_id,
        depth=depth,
        children=tuple(child_ids),
        visible=raw.get("visible", True) is not False,
        properties=NodeProperties.from_raw(raw),
    ))
    for child, child_id in zip(raw_children, child_ids):
        _flatten(child, node_id, depth + 1, child_id, out, seen)


# ─── styles / components ──────────────────────────────────────────────────

def extract_styles(nodes) -> Tuple[StyleRecord, ...]:
    """每個可見 fill、每個有字級的 TEXT 節點、每個可見 effect 各產生一筆紀錄."""
    records: List[StyleRecord] = []
    for node in nodes:
        props = node.properties
        for fill in props.fills:
            if fill.type and fill.visible:
                records.append(StyleRecord(
                    id=f"fill-{node.id}-{fill.type}",
                    name=f"{node.name} Fill",
                    type="FILL",
                    value=fill.raw,
                    node_id=node.id,
                ))
        if node.type == "TEXT" and props.font_size is not None:
            records.append(StyleRecord(
                id=f"text-{node.id}",
                name=f"{node.name} Text",
                type="TEXT",
                value=props.text.to_value(),
                node_id=node.id,
            ))
        for effect in props.effects:
            if effect.type and effect.visible:
                records.append(StyleRecord(
                    id=f"effect-{node.id}-{effect.type}",
                    name=f"{node.name} Effect",
                    type="EFFECT",
                    value=effect.raw,
                    node_id=node.id,
                ))
    return tuple(records)


def identify_components(nodes, styles=()) -> Tuple[ComponentEntity, ...]:
    """挑出 COMPONENT / INSTANCE 節點，附上子節點 id 與掛在其上的樣式紀錄."""
    by_node: Dict[str, List[StyleRecord]] = {}
    for record in styles:
        by_node.setdefault(record.node_id, []).append(record)

    return tuple(
        ComponentEntity(
            id=node.id,
            name=node.name,
            type=node.type,
            properties=node.properties,
            children=node.children,
            styles=tuple(by_node.get(node.id, ())),
        )
        for node in nodes
        if node.type in COMPONENT_TYPES
    )
