"""
Generator — 對應結果 → React / Vue / Angular / HTML 元件程式碼

每個 mapping 產生一個 artifact；單一 artifact 失敗時只記錄在該 artifact，
其餘照常產生。layout 只組合成功的元件。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from .errors import NoMappingsSelectedError, UnsupportedFrameworkError
from .frameworks import LayoutContext, LayoutEntry, SnippetContext, get_generator
from .mapper import ComponentMapping
from .naming_engine import NamingEngine, to_kebab_case
from .templates import FRAMEWORKS, get_template

logger = logging.getLogger(__name__)

STYLING_OPTIONS = ("css", "tailwind", "styled")
DEFAULT_LIBRARY_PACKAGE = "your-ui-library"
LAYOUT_ID = "layout"
LAYOUT_NAME = "Layout"


@dataclass(frozen=True)
class FrameworkConfig:
    """目標框架設定；typescript 只對 react / vue 生效."""
    name: str = "react"
    typescript: bool = False
    styling: str = "css"
    library_package: str = DEFAULT_LIBRARY_PACKAGE

    def __post_init__(self):
        if self.name not in FRAMEWORKS:
            raise UnsupportedFrameworkError(
                f"Unsupported framework: {self.name} (expected one of {', '.join(FRAMEWORKS)})"
            )

    @property
    def uses_typescript(self) -> bool:
        return self.typescript and self.name in ("react", "vue")

    @property
    def language(self) -> str:
        if self.name == "angular":
            return "typescript"
        if self.name == "html":
            return "html"
        return "typescript" if self.uses_typescript else "javascript"


@dataclass(frozen=True)
class GeneratedArtifact:
    id: str
    name: str
    code: str
    language: str
    success: bool
    error: Optional[str] = None
    file_name: str = ""

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "language": self.language,
            "success": self.success,
            "fileName": self.file_name,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    message: str
    components: tuple = ()
    layout: Optional[GeneratedArtifact] = None
    framework: str = "react"
    timestamp: str = ""

    def artifacts(self) -> List[GeneratedArtifact]:
        """元件 artifact 加上 layout（若有）."""
        items = list(self.components)
        if self.layout is not None:
            items.append(self.layout)
        return items

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "components": [c.to_dict() for c in self.components],
            "layout": self.layout.to_dict() if self.layout else None,
            "framework": self.framework,
            "timestamp": self.timestamp,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def error_code(message: str, framework: str, subject: str = "code") -> str:
    """失敗 artifact 的程式碼內容（以註解呈現錯誤）."""
    if framework == "html":
        return f"<!-- Error generating {subject}: {message} -->"
    return f"// Error generating {subject}: {message}"


def render_component(mapping: ComponentMapping, config: FrameworkConfig,
                     naming: Optional[NamingEngine] = None, name: Optional[str] = None) -> str:
    """以框架樣板 + 片段產生器輸出單一元件的程式碼；name 預設為 mapping.source_name."""
    naming = naming or NamingEngine()
    name = name or mapping.source_name
    component_name = naming.component_name(name)
    library_export = naming.component_name(mapping.target_name)
    ctx = SnippetContext(
        mapping=mapping,
        component_name=component_name,
        kebab_name=to_kebab_case(component_name),
        selector=naming.selector(name),
        library_export=library_export,
        library_name=naming.library_identifier(mapping.target_name, component_name),
        library_package=config.library_package,
        typescript=config.uses_typescript,
        styling=config.styling,
    )
    slots = get_generator(config.name).component_slots(ctx)
    return get_template(config.name, config.uses_typescript).render(slots)


def render_layout(artifacts: Sequence[GeneratedArtifact], config: FrameworkConfig,
                  naming: Optional[NamingEngine] = None) -> str:
    naming = naming or NamingEngine()
    entries = []
    for artifact in artifacts:
        component_name = naming.component_name(artifact.name)
        entries.append(LayoutEntry(
            name=artifact.name,
            component_name=component_name,
            kebab_name=to_kebab_case(component_name),
            selector=naming.selector(artifact.name),
            file_stem=Path(artifact.file_name).stem,
        ))
    ctx = LayoutContext(
        entries=tuple(entries),
        typescript=config.uses_typescript,
        styling=config.styling,
        component_name=naming.component_name(LAYOUT_NAME),
        kebab_name=to_kebab_case(LAYOUT_NAME),
        selector=naming.selector(LAYOUT_NAME),
    )
    slots = get_generator(config.name).layout_slots(ctx)
    return get_template(config.name, config.uses_typescript).render(slots)


def unique_names(mappings: Sequence[ComponentMapping], naming: NamingEngine,
                 reserved: Iterable[str] = ()) -> List[str]:
    """同一次產生內元件識別字不可重複；撞名時在圖層名稱後加上 2、3…"""
    used = {naming.component_name(r) for r in reserved}
    names = []
    for mapping in mappings:
        name = mapping.source_name
        suffix = 2
        while naming.component_name(name) in used:
            name = f"{mapping.source_name} {suffix}"
            suffix += 1
        used.add(naming.component_name(name))
        names.append(name)
    return names


def _generate_one(mapping: ComponentMapping, config: FrameworkConfig, naming: NamingEngine,
                  name: Optional[str] = None) -> GeneratedArtifact:
    name = name or mapping.source_name
    file_name = naming.file_name(name, config.name, config.uses_typescript)
    try:
        code = render_component(mapping, config, naming, name)
    except Exception as e:
        logger.error("Error generating code for component %s: %s", name, e)
        return GeneratedArtifact(
            id=mapping.id,
            name=name,
            code=error_code(str(e), config.name),
            language=config.language,
            success=False,
            error=str(e),
            file_name=file_name,
        )
    return GeneratedArtifact(
        id=mapping.id,
        name=name,
        code=code,
        language=config.language,
        success=True,
        file_name=file_name,
    )


def _generate_layout(components: Sequence[GeneratedArtifact], config: FrameworkConfig,
                     naming: NamingEngine) -> GeneratedArtifact:
    file_name = naming.file_name(LAYOUT_NAME, config.name, config.uses_typescript)
    ok = [c for c in components if c.success]
    try:
        code = render_layout(ok, config, naming)
    except Exception as e:
        logger.error("Error generating layout code: %s", e)
        return GeneratedArtifact(
            id=LAYOUT_ID,
            name=LAYOUT_NAME,
            code=error_code(str(e), config.name, "layout code"),
            language=config.language,
            success=False,
            error=str(e),
            file_name=file_name,
        )
    return GeneratedArtifact(
        id=LAYOUT_ID,
        name=LAYOUT_NAME,
        code=code,
        language=config.language,
        success=True,
        file_name=file_name,
    )


def generate_code(
    mappings: Sequence[ComponentMapping],
    mapping_ids: Iterable[str],
    framework: FrameworkConfig,
    generate_layout: bool = False,
    clock: Optional[Callable[[], datetime]] = None,
    naming: Optional[NamingEngine] = None,
) -> GenerationResult:
    """為選取的 mapping 產生程式碼."""
    wanted = set(mapping_ids)
    selected = [m for m in mappings if m.id in wanted]
    if not selected:
        raise NoMappingsSelectedError("No valid component mappings selected")
    naming = naming or NamingEngine()
    clock = clock or _utc_now

    logger.info("Generating %s code for %d components", framework.name, len(selected))
    names = unique_names(selected, naming, (LAYOUT_NAME,) if generate_layout else ())
    components = tuple(_generate_one(m, framework, naming, n) for m, n in zip(selected, names))
    layout = _generate_layout(components, framework, naming) if generate_layout else None

    success = all(c.success for c in components)
    return GenerationResult(
        success=success,
        message="Code generation completed successfully" if success else "Some components failed to generate",
        components=components,
        layout=layout,
        framework=framework.name,
        timestamp=clock().isoformat(),
    )


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_artifacts(result: GenerationResult, output_dir) -> List[Path]:
    """把成功的 artifact 寫入 output_dir，回傳寫出的路徑."""
    base = Path(output_dir)
    written = []
    for artifact in result.artifacts():
        if not artifact.success:
            logger.warning("Skipping failed artifact %s: %s", artifact.name, artifact.error)
            continue
        path = base / artifact.file_name
        _write(path, artifact.code)
        written.append(path)
    return written
