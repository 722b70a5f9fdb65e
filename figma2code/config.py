"""設定檔載入與基本驗證."""

import json
from pathlib import Path
from typing import Any, Optional

from .generator import STYLING_OPTIONS, FrameworkConfig
from .mapper import MappingThresholds
from .templates import FRAMEWORKS

DEFAULT_CONFIG_PATH = "figma2code.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"framework", "mapping", "generation", "output", "library", "watch"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "framework": {"name", "typescript", "styling", "libraryPackage"},
    "mapping": {"componentThreshold", "propertyThreshold"},
    "generation": {"generateLayout"},
    "output": {"dir", "report"},
    "library": {"path"},
    "watch": {"debounce"},
}

_NUMERIC_KEYS = (
    ("mapping", "componentThreshold"),
    ("mapping", "propertyThreshold"),
    ("watch", "debounce"),
)


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def _section(cfg: dict, name: str) -> dict:
    value = cfg.get(name, {})
    return value if isinstance(value, dict) else {}


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 JSON 物件，已忽略")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    # framework.name / framework.styling 值驗證
    framework = _section(cfg, "framework")
    name = framework.get("name")
    if name and name not in FRAMEWORKS:
        _warn(f"framework.name '{name}' 不在已知值中（{', '.join(FRAMEWORKS)}）")
    styling = framework.get("styling")
    if styling and styling not in STYLING_OPTIONS:
        _warn(f"framework.styling '{styling}' 不在已知值中（{', '.join(STYLING_OPTIONS)}）")

    # 數值欄位類型
    for section, key in _NUMERIC_KEYS:
        val = _section(cfg, section).get(key)
        if val is not None and (isinstance(val, bool) or not isinstance(val, (int, float))):
            _warn(f"{section}.{key} 應為數字，目前是 {type(val).__name__}")

    # library.path 存在性提示（可能由 --library 覆蓋）
    library_path = _section(cfg, "library").get("path")
    if library_path and not str(library_path).startswith(("http://", "https://")) \
            and not Path(library_path).exists():
        _warn(f"library.path '{library_path}' 檔案不存在")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def framework_from_config(cfg: dict, name: Optional[str] = None, typescript: Optional[bool] = None,
                          styling: Optional[str] = None) -> FrameworkConfig:
    """config 的 framework 區塊 → FrameworkConfig；非 None 的參數（CLI 旗標）優先。"""
    section = _section(cfg, "framework")
    defaults = FrameworkConfig()
    return FrameworkConfig(
        name=name or section.get("name") or defaults.name,
        typescript=bool(section.get("typescript", False)) if typescript is None else typescript,
        styling=styling or section.get("styling") or defaults.styling,
        library_package=section.get("libraryPackage") or defaults.library_package,
    )


def thresholds_from_config(cfg: dict) -> MappingThresholds:
    section = _section(cfg, "mapping")
    defaults = MappingThresholds()
    component = section.get("componentThreshold")
    prop = section.get("propertyThreshold")
    return MappingThresholds(
        component=float(component) if isinstance(component, (int, float)) else defaults.component,
        property=float(prop) if isinstance(prop, (int, float)) else defaults.property,
    )
