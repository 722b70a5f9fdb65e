"""
程式碼驗證 — syntax / style / responsiveness 三類啟發式檢查

不是真正的 parser：括號計數、子字串與 regex 判斷。
每類檢查是一組純函式 (artifact, framework) -> list[ValidationIssue]。
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .generator import GeneratedArtifact, GenerationResult

logger = logging.getLogger(__name__)

SYNTAX_WEIGHTS = {"error": 0.3, "warning": 0.1, "info": 0.03}
STYLE_WEIGHTS = {"critical": 0.25, "warning": 0.1, "info": 0.02}
RESPONSIVENESS_WEIGHTS = {"error": 0.3, "warning": 0.15, "info": 0.05}
OVERALL_WEIGHTS = {"syntax": 0.5, "style": 0.3, "responsiveness": 0.2}

PRODUCTION_READY_SCORE = 0.8
RESPONSIVE_SCORE = 0.7
MAX_LINE_LENGTH = 100
MAX_INDENT_JUMP = 2
QUOTE_MIX_LIMIT = 3
FIXED_UNIT_LIMIT = 5
BREAKPOINTS = ("mobile", "tablet", "desktop")

VOID_ELEMENTS = frozenset((
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
))

_OPEN_TAG = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)\b[^>]*>")
_CLOSE_TAG = re.compile(r"</([a-zA-Z][a-zA-Z0-9-]*)\s*>")
_REACT_CONST = re.compile(r"const\s+([A-Za-z0-9_]+)\s*(?::[^=]+)?=")
_VUE_NAME = re.compile(r"name:\s*['\"]([A-Za-z0-9_-]+)['\"]")
_FIXED_UNITS = re.compile(r"\d+px")
_RELATIVE_UNITS = re.compile(r"\d+rem|\d+em|\d+%|\d+v[wh]|calc\(")
_FLEX_DISPLAY = re.compile(r"display\s*:\s*['\"]?(flex|grid|inline-flex)")
_FLEX_CLASS = re.compile(r"class(?:Name)?=\"[^\"]*\b(flex|grid)\b")
_CAMEL_HUMP = re.compile(r"[a-z][A-Z]")
_IMPORT_CLAUSE = re.compile(r"""^\s*import\s+(?!type\b)([^'"]+?)\s+from\s+['"]""", re.MULTILINE)


@dataclass(frozen=True)
class ValidationIssue:
    id: str
    category: str
    severity: str
    message: str
    component: str = ""
    line: Optional[int] = None
    suggestion: str = ""
    critical: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": "style-critical" if self.critical else self.category,
            "severity": self.severity,
            "message": self.message,
            "location": {"component": self.component, "line": self.line},
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class CheckResult:
    passed: bool
    score: float
    issues: Tuple[ValidationIssue, ...] = ()
    critical_issues: int = 0
    is_responsive: bool = False
    tested_breakpoints: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "score": self.score,
            "issues": [i.to_dict() for i in self.issues],
            "criticalIssues": self.critical_issues,
            "isResponsive": self.is_responsive,
            "testedBreakpoints": list(self.tested_breakpoints),
        }


@dataclass(frozen=True)
class ValidationReport:
    success: bool
    message: str
    syntax: CheckResult
    style: CheckResult
    responsiveness: CheckResult
    overall_score: float
    is_production_ready: bool
    issues: Tuple[ValidationIssue, ...] = field(default_factory=tuple)
    timestamp: str = ""

    def issues_for(self, artifact_id: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.id.endswith(f"-{artifact_id}")]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "syntaxCheck": self.syntax.to_dict(),
            "styleCheck": self.style.to_dict(),
            "responsivenessCheck": self.responsiveness.to_dict(),
            "overallScore": self.overall_score,
            "isProductionReady": self.is_production_ready,
            "issues": [i.to_dict() for i in self.issues],
            "timestamp": self.timestamp,
        }


Check = Callable[[GeneratedArtifact, str], List[ValidationIssue]]


def _issue(category: str, check: str, artifact: GeneratedArtifact, severity: str, message: str,
           suggestion: str = "", line: Optional[int] = None, critical: bool = False) -> ValidationIssue:
    return ValidationIssue(
        id=f"{category}-{check}-{artifact.id}",
        category=category,
        severity=severity,
        message=message,
        component=artifact.name,
        line=line,
        suggestion=suggestion,
        critical=critical,
    )


def _line_of(code: str, needle: str) -> Optional[int]:
    for i, line in enumerate(code.split("\n"), start=1):
        if needle in line:
            return i
    return None


# ─── syntax ───────────────────────────────────────────────────────────────

def check_brackets(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework not in ("react", "vue", "angular"):
        return []
    code = artifact.code
    issues = []
    if code.count("{") != code.count("}"):
        issues.append(_issue("syntax", "unbalanced-braces", artifact, "error", "Unbalanced curly braces",
                             "Ensure all opening braces have matching closing braces"))
    if code.count("(") != code.count(")"):
        issues.append(_issue("syntax", "unbalanced-parens", artifact, "error", "Unbalanced parentheses",
                             "Ensure all opening parentheses have matching closing parentheses"))
    return issues


def check_imports(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    code = artifact.code
    if framework not in ("react", "vue"):
        return []
    issues = []
    if "import " not in code and "require(" not in code:
        issues.append(_issue("syntax", "missing-imports", artifact, "warning", "Missing import statements",
                             "Add necessary import statements at the top of the file", line=1))
    has_markup = "<" in code and "/>" in code
    react_imported = "import React" in code or "from 'react'" in code or 'from "react"' in code
    if framework == "react" and has_markup and not react_imported:
        issues.append(_issue("syntax", "missing-react-import", artifact, "error",
                             "Missing React import in JSX file", "Add `import React from 'react';`", line=1))
    return issues


def import_bindings(code: str) -> List[str]:
    """所有 import 宣告引入的本地名稱（default、named、`as` 別名）."""
    names = []
    for match in _IMPORT_CLAUSE.finditer(code):
        clause = match.group(1)
        named = re.search(r"\{([^}]*)\}", clause)
        default = clause[:named.start()] if named else clause
        default = default.strip().rstrip(",").strip()
        if default:
            # `* as ns` 只引入 ns
            names.append(default.split()[-1])
        if named:
            for item in named.group(1).split(","):
                item = item.strip()
                if item:
                    names.append(item.split(" as ")[-1].strip())
    return names


def check_duplicate_imports(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework not in ("react", "vue", "angular"):
        return []
    counts = Counter(import_bindings(artifact.code))
    duplicates = [name for name, n in counts.items() if n > 1]
    if not duplicates:
        return []
    return [_issue("syntax", "duplicate-imports", artifact, "error",
                   f"Duplicate import binding: {', '.join(duplicates)}",
                   "Import each name only once", line=_line_of(artifact.code, f"import {duplicates[0]}"))]


def check_vue_blocks(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework != "vue":
        return []
    code = artifact.code
    issues = []
    for tag, check in (("template", "invalid-template"), ("script", "invalid-script"), ("style", "invalid-style")):
        opened = re.search(rf"<{tag}[\s>]", code)
        if opened and f"</{tag}>" not in code:
            issues.append(_issue("syntax", check, artifact, "error", f"Unclosed {tag} tag",
                                 f"Close the <{tag}> block", line=_line_of(code, f"<{tag}")))
    return issues


def check_angular_component(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework != "angular":
        return []
    code = artifact.code
    issues = []
    if "@Component" not in code:
        issues.append(_issue("syntax", "missing-component-decorator", artifact, "error",
                             "Missing @Component decorator", "Decorate the class with @Component"))
    if "template:" in code and "`" not in code:
        issues.append(_issue("syntax", "invalid-template-syntax", artifact, "error", "Invalid template syntax",
                             "Wrap inline templates in backticks", line=_line_of(code, "template:")))
    return issues


def unbalanced_tags(code: str) -> Dict[str, int]:
    """tag 名稱 → 開啟數 - 關閉數（只列出不平衡者）；忽略自我關閉與 void element."""
    opened: Counter = Counter()
    for match in _OPEN_TAG.finditer(code):
        name = match.group(1).lower()
        if match.group(0).endswith("/>") or name in VOID_ELEMENTS:
            continue
        opened[name] += 1
    closed = Counter(m.group(1).lower() for m in _CLOSE_TAG.finditer(code))
    return {
        name: opened[name] - closed[name]
        for name in sorted(set(opened) | set(closed))
        if opened[name] != closed[name]
    }


def check_html_document(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework != "html":
        return []
    code = artifact.code
    issues = []
    if "<!doctype html>" not in code.lower():
        issues.append(_issue("syntax", "missing-doctype", artifact, "warning", "Missing DOCTYPE declaration",
                             "Add <!DOCTYPE html> at the top of the file", line=1))
    diff = unbalanced_tags(code)
    if diff:
        names = ", ".join(diff)
        issues.append(_issue("syntax", "unbalanced-html-tags", artifact, "error",
                             f"Unbalanced HTML tags: {names}", "Ensure every opening tag has a closing tag"))
    return issues


SYNTAX_CHECKS: Tuple[Check, ...] = (
    check_imports,
    check_duplicate_imports,
    check_brackets,
    check_vue_blocks,
    check_angular_component,
    check_html_document,
)


# ─── style ────────────────────────────────────────────────────────────────

def check_indentation(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    lines = artifact.code.split("\n")
    previous = None
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        indent = len(line) - len(line.lstrip())
        if previous is not None:
            prev_indent, prev_line = previous
            boundary = "{" in prev_line or "(" in prev_line or "}" in line or ")" in line
            if abs(indent - prev_indent) > MAX_INDENT_JUMP and not boundary:
                return [_issue("style", "inconsistent-indent", artifact, "warning", "Inconsistent indentation",
                               "Use a consistent indentation step", line=i + 1)]
        previous = (indent, line)
    return []


def check_line_length(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    long_lines = [i for i, line in enumerate(artifact.code.split("\n"), start=1) if len(line) > MAX_LINE_LENGTH]
    if not long_lines:
        return []
    return [_issue("style", "line-too-long", artifact, "info",
                   f"Found {len(long_lines)} lines that exceed {MAX_LINE_LENGTH} characters",
                   "Break long lines for readability", line=long_lines[0])]


def check_quotes(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    single = artifact.code.count("'")
    double = artifact.code.count('"')
    if min(single, double) > QUOTE_MIX_LIMIT:
        return [_issue("style", "inconsistent-quotes", artifact, "info", "Inconsistent quote style",
                       "Prefer one quote style for string literals")]
    return []


def check_naming(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    code = artifact.code
    if framework == "react":
        match = _REACT_CONST.search(code)
        issues = []
        if match and not match.group(1)[0].isupper():
            name = match.group(1)
            issues.append(_issue("style", "component-naming", artifact, "warning",
                                 "Component name should use PascalCase", f"Rename `{name}` to PascalCase",
                                 line=_line_of(code, f"const {name}"), critical=True))
        if "props." in code and "...props" not in code:
            issues.append(_issue("style", "prop-destructuring", artifact, "info", "Props should be destructured",
                                 "Destructure props in the function signature", line=_line_of(code, "props.")))
        return issues
    if framework == "vue":
        match = _VUE_NAME.search(code)
        if match:
            name = match.group(1)
            multi_word = "-" in name or "_" in name or _CAMEL_HUMP.search(name)
            if not multi_word:
                return [_issue("style", "component-naming", artifact, "info",
                               "Vue component names should be multi-word",
                               "Use a multi-word component name", line=_line_of(code, "name:"))]
    return []


STYLE_CHECKS: Tuple[Check, ...] = (check_indentation, check_line_length, check_quotes, check_naming)


# ─── responsiveness ───────────────────────────────────────────────────────

def has_flexible_layout(code: str) -> bool:
    return bool(_FLEX_DISPLAY.search(code) or _FLEX_CLASS.search(code))


def check_media_queries(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if framework == "react" or "@media" in artifact.code:
        return []
    return [_issue("responsiveness", "no-media-queries", artifact, "warning", "No media queries found",
                   "Add media queries for small and large screens")]


def check_units(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    fixed = len(_FIXED_UNITS.findall(artifact.code))
    relative = len(_RELATIVE_UNITS.findall(artifact.code))
    if fixed > FIXED_UNIT_LIMIT and relative < fixed / 2:
        return [_issue("responsiveness", "fixed-units", artifact, "warning", "Excessive use of fixed pixel units",
                       "Prefer rem, em or % units")]
    return []


def check_flexible_layout(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    if "layout" in artifact.name.lower() and not has_flexible_layout(artifact.code):
        return [_issue("responsiveness", "no-flexible-layout", artifact, "warning",
                       "No flexible layout system detected", "Use flexbox or grid for layouts")]
    return []


def check_viewport(artifact: GeneratedArtifact, framework: str) -> List[ValidationIssue]:
    code = artifact.code
    if framework == "html" and not ("viewport" in code and "width=device-width" in code):
        return [_issue("responsiveness", "no-viewport-meta", artifact, "error", "Missing viewport meta tag",
                       '<meta name="viewport" content="width=device-width, initial-scale=1.0">')]
    return []


RESPONSIVENESS_CHECKS: Tuple[Check, ...] = (
    check_media_queries,
    check_units,
    check_flexible_layout,
    check_viewport,
)

DEFAULT_CHECKS: Mapping[str, Tuple[Check, ...]] = {
    "syntax": SYNTAX_CHECKS,
    "style": STYLE_CHECKS,
    "responsiveness": RESPONSIVENESS_CHECKS,
}


# ─── scores ───────────────────────────────────────────────────────────────

def _count(issues: Sequence[ValidationIssue], severity: str) -> int:
    return sum(1 for i in issues if i.severity == severity)


def is_critical(issue: ValidationIssue) -> bool:
    return issue.severity == "error" or (issue.severity == "warning" and issue.critical)


def syntax_score(issues: Sequence[ValidationIssue]) -> float:
    penalty = sum(SYNTAX_WEIGHTS[s] * _count(issues, s) for s in SYNTAX_WEIGHTS)
    return round(max(0.0, 1 - penalty), 4)


def style_score(issues: Sequence[ValidationIssue]) -> float:
    critical = sum(1 for i in issues if is_critical(i))
    warnings = sum(1 for i in issues if i.severity == "warning" and not i.critical)
    penalty = (STYLE_WEIGHTS["critical"] * critical + STYLE_WEIGHTS["warning"] * warnings
               + STYLE_WEIGHTS["info"] * _count(issues, "info"))
    return round(max(0.0, 1 - penalty), 4)


def responsiveness_score(issues: Sequence[ValidationIssue]) -> float:
    penalty = sum(RESPONSIVENESS_WEIGHTS[s] * _count(issues, s) for s in RESPONSIVENESS_WEIGHTS)
    return round(max(0.0, 1 - penalty), 4)


def overall_score(syntax: float, style: float, responsiveness: float) -> float:
    return round(
        OVERALL_WEIGHTS["syntax"] * syntax
        + OVERALL_WEIGHTS["style"] * style
        + OVERALL_WEIGHTS["responsiveness"] * responsiveness,
        4,
    )


def _run(checks: Sequence[Check], artifacts: Sequence[GeneratedArtifact], framework: str) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for artifact in artifacts:
        for check in checks:
            issues.extend(check(artifact, framework))
    return issues


def validate(
    result: GenerationResult,
    framework: Optional[str] = None,
    checks: Optional[Mapping[str, Sequence[Check]]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ValidationReport:
    """驗證所有產生的 artifact（含 layout）."""
    framework = framework or result.framework
    checks = DEFAULT_CHECKS if checks is None else checks
    artifacts = result.artifacts()

    syntax_issues = _run(checks.get("syntax", ()), artifacts, framework)
    style_issues = _run(checks.get("style", ()), artifacts, framework)
    responsive_issues = _run(checks.get("responsiveness", ()), artifacts, framework)

    syntax_errors = _count(syntax_issues, "error")
    critical = sum(1 for i in style_issues if is_critical(i))
    r_score = responsiveness_score(responsive_issues)
    syntax = CheckResult(passed=syntax_errors == 0, score=syntax_score(syntax_issues),
                         issues=tuple(syntax_issues))
    style = CheckResult(passed=critical == 0, score=style_score(style_issues),
                        issues=tuple(style_issues), critical_issues=critical)
    responsiveness = CheckResult(
        passed=_count(responsive_issues, "error") == 0,
        score=r_score,
        issues=tuple(responsive_issues),
        is_responsive=r_score >= RESPONSIVE_SCORE,
        tested_breakpoints=BREAKPOINTS,
    )

    overall = overall_score(syntax.score, style.score, responsiveness.score)
    ready = overall >= PRODUCTION_READY_SCORE and syntax_errors == 0 and critical == 0
    all_issues = tuple(syntax_issues + style_issues + responsive_issues)
    logger.info("Validated %d artifacts: overall %.2f, %d issues", len(artifacts), overall, len(all_issues))
    return ValidationReport(
        success=_count(all_issues, "error") == 0,
        message="Code validation passed, ready for production" if ready else "Code validation completed with issues",
        syntax=syntax,
        style=style,
        responsiveness=responsiveness,
        overall_score=overall,
        is_production_ready=ready,
        issues=all_issues,
        timestamp=(clock or (lambda: datetime.now(timezone.utc)))().isoformat(),
    )
