"""各框架的片段產生器；每個模組提供 component_slots / layout_slots."""

from types import ModuleType
from typing import Dict

from ..errors import UnsupportedFrameworkError
from . import angular, html, react, vue
from .base import LayoutContext, LayoutEntry, SnippetContext

GENERATORS: Dict[str, ModuleType] = {
    "react": react,
    "vue": vue,
    "angular": angular,
    "html": html,
}


def get_generator(framework: str) -> ModuleType:
    try:
        return GENERATORS[framework]
    except KeyError:
        raise UnsupportedFrameworkError(f"Unsupported framework: {framework}") from None


__all__ = ["GENERATORS", "get_generator", "SnippetContext", "LayoutContext", "LayoutEntry"]
