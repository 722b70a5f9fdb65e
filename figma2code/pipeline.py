"""
Pipeline — 五個階段串接

    parse → analyze → load library → map → generate → validate

run_pipeline 是純函式；DesignSession 只是保存中間結果的薄封裝，
在前置階段尚未執行時拋 UninitializedStateError。
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from . import design_analyzer, figma_reader, generator, library as library_mod, mapper, validator
from .design_analyzer import AnalysisResult
from .errors import Figma2CodeError, UninitializedStateError
from .figma_reader import ParseResult
from .generator import FrameworkConfig, GenerationResult
from .ids import IdFactory
from .library import TargetLibrary
from .mapper import MappingResult, MappingThresholds
from .validator import ValidationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineReport:
    parse: ParseResult
    analysis: AnalysisResult
    library: TargetLibrary
    mapping: MappingResult
    generation: GenerationResult
    validation: ValidationReport

    def summary(self) -> dict:
        return {
            "design": self.parse.tree.name,
            "nodes": len(self.parse.nodes),
            "components": len(self.parse.components),
            "patterns": len(self.analysis.patterns),
            "styleIssues": len(self.analysis.issues),
            "mapped": self.mapping.mapped_count,
            "total": self.mapping.total_count,
            "generated": sum(1 for a in self.generation.artifacts() if a.success),
            "overallScore": self.validation.overall_score,
            "productionReady": self.validation.is_production_ready,
        }

    def to_dict(self) -> dict:
        return {
            "summary": self.summary(),
            "analysis": self.analysis.to_dict(),
            "library": self.library.to_dict(),
            "mapping": self.mapping.to_dict(),
            "generation": self.generation.to_dict(),
            "validation": self.validation.to_dict(),
        }


def run_pipeline(
    document: Any,
    library: Any,
    framework: Optional[FrameworkConfig] = None,
    *,
    generate_layout: bool = False,
    thresholds: Optional[MappingThresholds] = None,
    id_factory: Optional[IdFactory] = None,
) -> PipelineReport:
    """依序執行五個階段；所有 mapping 都會被選取產生程式碼."""
    framework = framework or FrameworkConfig()
    parsed = figma_reader.parse(document)
    analysis = design_analyzer.analyze(parsed.tree, parsed.nodes, parsed.styles, parsed.components)
    target = library if isinstance(library, TargetLibrary) else library_mod.load_library(library, id_factory)
    mapping = mapper.map_components(parsed.components, parsed.nodes, analysis.patterns, target, thresholds)
    generation = generator.generate_code(
        mapping.mappings, [m.id for m in mapping.mappings], framework, generate_layout=generate_layout,
    )
    report = validator.validate(generation, framework.name)
    return PipelineReport(
        parse=parsed,
        analysis=analysis,
        library=target,
        mapping=mapping,
        generation=generation,
        validation=report,
    )


# ─── batch ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BatchJob:
    name: str
    document: Any
    library: Any
    framework: Optional[FrameworkConfig] = None
    generate_layout: bool = False


@dataclass(frozen=True)
class BatchOutcome:
    name: str
    report: Optional[PipelineReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.report is not None


def run_batch(jobs: Sequence[BatchJob], max_workers: int = 4,
              thresholds: Optional[MappingThresholds] = None,
              id_factory: Optional[IdFactory] = None) -> List[BatchOutcome]:
    """多份設計檔平行處理；單一檔案內的階段仍依序執行。結果順序與 jobs 相同."""
    outcomes: List[Optional[BatchOutcome]] = [None] * len(jobs)
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(
                run_pipeline,
                job.document,
                job.library,
                job.framework,
                generate_layout=job.generate_layout,
                thresholds=thresholds,
                id_factory=id_factory,
            ): index
            for index, job in enumerate(jobs)
        }
        for future in concurrent.futures.as_completed(future_to_index):
            index = future_to_index[future]
            job = jobs[index]
            try:
                outcomes[index] = BatchOutcome(name=job.name, report=future.result())
            except Figma2CodeError as exc:
                logger.warning("Pipeline failed for %s: %s", job.name, exc)
                outcomes[index] = BatchOutcome(name=job.name, error=str(exc))
    return [o for o in outcomes if o is not None]


# ─── session ──────────────────────────────────────────────────────────────

class DesignSession:
    """保存各階段結果的薄封裝，方便互動式或 CLI 逐步操作."""

    def __init__(self, id_factory: Optional[IdFactory] = None):
        self.id_factory = id_factory
        self.parsed: Optional[ParseResult] = None
        self.analysis: Optional[AnalysisResult] = None
        self.library: Optional[TargetLibrary] = None
        self.mapping: Optional[MappingResult] = None
        self.generation: Optional[GenerationResult] = None
        self.framework: Optional[FrameworkConfig] = None

    def _require(self, value, message: str):
        if value is None:
            raise UninitializedStateError(message)
        return value

    def parse(self, document: Any) -> ParseResult:
        self.parsed = figma_reader.parse(document)
        self.analysis = self.mapping = self.generation = None
        return self.parsed

    def analyze(self) -> AnalysisResult:
        parsed = self._require(self.parsed, "Design tree not parsed: call parse() first")
        self.analysis = design_analyzer.analyze(parsed.tree, parsed.nodes, parsed.styles, parsed.components)
        return self.analysis

    def load_library(self, raw: Any) -> TargetLibrary:
        self.library = library_mod.load_library(raw, self.id_factory)
        self.mapping = self.generation = None
        return self.library

    def map(self, thresholds: Optional[MappingThresholds] = None) -> MappingResult:
        parsed = self._require(self.parsed, "Design tree not parsed: call parse() first")
        analysis = self._require(self.analysis, "Design not analyzed: call analyze() first")
        self.mapping = mapper.map_components(
            parsed.components, parsed.nodes, analysis.patterns, self.library, thresholds,
        )
        return self.mapping

    def generate(self, framework: FrameworkConfig, mapping_ids: Optional[Iterable[str]] = None,
                 generate_layout: bool = False) -> GenerationResult:
        mapping = self._require(self.mapping, "Components not mapped: call map() first")
        ids = [m.id for m in mapping.mappings] if mapping_ids is None else list(mapping_ids)
        self.generation = generator.generate_code(mapping.mappings, ids, framework, generate_layout)
        self.framework = framework
        return self.generation

    def validate(self) -> ValidationReport:
        generation = self._require(self.generation, "No generated code: call generate() first")
        return validator.validate(generation, generation.framework)
