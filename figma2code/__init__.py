"""
figma2code — Figma 設計檔 → UI 元件程式碼（Python 管線）

解析 → 分析 → 對應元件庫 → 產生程式碼 → 驗證。
"""

__version__ = "0.1.0"

from .errors import (
    Figma2CodeError,
    InvalidLibraryFormatError,
    LibraryNotLoadedError,
    MalformedDocumentError,
    NoComponentsError,
    NoMappingsSelectedError,
    SourceLoadError,
    UninitializedStateError,
    UnsupportedFrameworkError,
)
from .ids import SequentialIds, random_id
from .figma_reader import parse, flatten, extract_styles, identify_components
from .pattern_detector import DEFAULT_DETECTORS, detect_patterns
from .style_validator import DEFAULT_VALIDATORS, validate_styles
from .design_analyzer import analyze
from .similarity import name_similarity
from .library import load_library
from .mapper import MappingThresholds, build_component_tree, map_components
from .naming_engine import NamingConfig, NamingEngine
from .templates import Template, get_template
from .generator import FrameworkConfig, generate_code, write_artifacts
from .validator import validate
from .config import load_config, validate_config
from .pipeline import DesignSession, run_batch, run_pipeline

__all__ = [
    "__version__",
    "Figma2CodeError",
    "InvalidLibraryFormatError",
    "LibraryNotLoadedError",
    "MalformedDocumentError",
    "NoComponentsError",
    "NoMappingsSelectedError",
    "SourceLoadError",
    "UninitializedStateError",
    "UnsupportedFrameworkError",
    "SequentialIds",
    "random_id",
    "parse",
    "flatten",
    "extract_styles",
    "identify_components",
    "DEFAULT_DETECTORS",
    "detect_patterns",
    "DEFAULT_VALIDATORS",
    "validate_styles",
    "analyze",
    "name_similarity",
    "load_library",
    "MappingThresholds",
    "build_component_tree",
    "map_components",
    "NamingConfig",
    "NamingEngine",
    "Template",
    "get_template",
    "FrameworkConfig",
    "generate_code",
    "write_artifacts",
    "validate",
    "load_config",
    "validate_config",
    "DesignSession",
    "run_batch",
    "run_pipeline",
]
