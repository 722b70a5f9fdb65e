"""
目標設計系統元件庫

load_library() 驗證 JSON 並補齊預設值；缺 id 的項目由注入的 id_factory 產生。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidLibraryFormatError
from .ids import IdFactory, random_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertySpec:
    type: str = "string"
    required: bool = False
    default: Any = None
    options: Tuple[Any, ...] = ()

    @classmethod
    def from_raw(cls, raw: Any) -> "PropertySpec":
        if isinstance(raw, dict):
            return cls(
                type=str(raw.get("type", "string")),
                required=bool(raw.get("required", False)),
                default=raw.get("default"),
                options=tuple(raw.get("options") or ()),
            )
        if isinstance(raw, str):
            return cls(type=raw)
        return cls(type=type(raw).__name__ if raw is not None else "string", default=raw)

    def to_dict(self) -> dict:
        out = {"type": self.type, "required": self.required}
        if self.default is not None:
            out["default"] = self.default
        if self.options:
            out["options"] = list(self.options)
        return out


@dataclass(frozen=True)
class TargetLibraryComponent:
    id: str
    name: str
    type: str = "unknown"
    description: str = ""
    properties: Dict[str, PropertySpec] = field(default_factory=dict)
    variants: Tuple[Any, ...] = ()
    tags: Tuple[str, ...] = ()
    category: str = "uncategorized"

    def has_property(self, name: str) -> bool:
        return name in self.properties

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "properties": {k: v.to_dict() for k, v in self.properties.items()},
            "variants": list(self.variants),
            "tags": list(self.tags),
            "category": self.category,
        }


@dataclass(frozen=True)
class TargetLibrary:
    id: str
    name: str
    version: str
    description: str
    components: Tuple[TargetLibraryComponent, ...]

    def get(self, component_id: str) -> Optional[TargetLibraryComponent]:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "components": [c.to_dict() for c in self.components],
        }


def _component(raw: dict, id_factory: IdFactory) -> TargetLibraryComponent:
    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}
    return TargetLibraryComponent(
        id=str(raw.get("id") or id_factory("lib-component")),
        name=raw.get("name") or "Unnamed Component",
        type=raw.get("type") or "unknown",
        description=raw.get("description") or "",
        properties={name: PropertySpec.from_raw(spec) for name, spec in properties.items()},
        variants=tuple(raw.get("variants") or ()),
        tags=tuple(raw.get("tags") or ()),
        category=raw.get("category") or "uncategorized",
    )


def load_library(raw: Any, id_factory: Optional[IdFactory] = None) -> TargetLibrary:
    """驗證元件庫 JSON 並正規化；缺 components 陣列時拋 InvalidLibraryFormatError."""
    id_factory = id_factory or random_id
    if not isinstance(raw, dict) or not isinstance(raw.get("components"), list):
        raise InvalidLibraryFormatError("Invalid library format: missing components array")

    components = []
    for index, item in enumerate(raw["components"]):
        if not isinstance(item, dict):
            logger.warning("Library component #%d is not an object; using defaults", index)
            item = {}
        components.append(_component(item, id_factory))

    library = TargetLibrary(
        id=str(raw.get("id") or id_factory("library")),
        name=raw.get("name") or "Unnamed Library",
        version=str(raw.get("version") or "1.0.0"),
        description=raw.get("description") or "",
        components=tuple(components),
    )
    logger.info("Loaded library '%s' with %d components", library.name, len(components))
    return library
