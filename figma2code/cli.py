#!/usr/bin/env python3
"""
figma2code CLI — Figma 設計檔 → UI 元件程式碼

  figma2code parse design.json                 # 攤平節點、列出元件
  figma2code analyze design.json               # pattern 偵測 + 樣式檢查
  figma2code map design.json -l library.json   # 對應到元件庫
  figma2code generate design.json -l library.json --framework vue --output ./out
  figma2code watch design.json -l library.json # 檔案變更時自動 generate
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from rich.logging import RichHandler
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from . import __version__
from .config import (
    DEFAULT_CONFIG_PATH,
    framework_from_config,
    load_config,
    thresholds_from_config,
)
from .errors import Figma2CodeError, SourceLoadError
from .generator import STYLING_OPTIONS, write_artifacts
from .mapper import build_component_tree
from .naming_engine import preview_component_tree
from .pipeline import DesignSession
from .sources import is_url, load_json_source
from .templates import FRAMEWORKS


def configure_logging(level: int = logging.INFO) -> None:
    """以 Rich handler 設定 logging（只在 CLI 進入點呼叫）."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load(source: str, what: str):
    """讀取 JSON 來源；HTTP 錯誤給出友善訊息後往上拋."""
    try:
        return load_json_source(source)
    except SourceLoadError as e:
        if e.status_code == 403:
            print(f"❌ HTTP 403：沒有權限讀取{what} '{source}'。")
        elif e.status_code == 404:
            print(f"❌ HTTP 404：找不到{what} '{source}'，請確認網址是否正確。")
        raise


def _library_source(args, config: dict):
    return getattr(args, "library", None) or config.get("library", {}).get("path")


def _open_session(args, config: dict, with_library: bool = False) -> DesignSession:
    session = DesignSession()
    parsed = session.parse(_load(args.document, "設計檔"))
    print(f"   ✅ Parsed '{parsed.tree.name}': {len(parsed.nodes)} nodes, {len(parsed.components)} components")
    if with_library:
        source = _library_source(args, config)
        if not source:
            raise SourceLoadError("No library given: use --library or set library.path in the config")
        lib = session.load_library(_load(source, "元件庫"))
        print(f"   ✅ Loaded library '{lib.name}' ({len(lib.components)} components)")
    return session


def _write_json(path: str, data) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    print(f"   📄 Saved to {out}")


def cmd_parse(args, config: dict) -> int:
    """Parse: 攤平設計檔並列出元件."""
    print(f"🔍 Parsing {args.document}")
    session = _open_session(args, config)
    for component in session.parsed.components:
        print(f"   • {component.name}  [{component.type}]  <{component.id}>")
    if args.output:
        _write_json(args.output, session.parsed.to_dict())
    return 0


def cmd_analyze(args, config: dict) -> int:
    """Analyze: pattern 偵測與樣式一致性報告."""
    print(f"🔍 Analyzing {args.document}")
    session = _open_session(args, config)
    analysis = session.analyze()
    print(f"   ✅ {len(analysis.patterns)} patterns (avg confidence {analysis.average_confidence:.2f})")
    for pattern in analysis.patterns:
        print(f"   • {pattern.type:<11} {pattern.name}  ({pattern.confidence:.2f})")
    if analysis.issues:
        print(f"   ⚠️  {len(analysis.issues)} style issues (consistency {analysis.consistency_score:.2f})")
        for issue in analysis.issues:
            print(f"     - [{issue.severity}] {issue.message}")
    if args.output:
        _write_json(args.output, analysis.to_dict())
    return 0


def cmd_map(args, config: dict) -> int:
    """Map: 將設計元件對應到目標元件庫."""
    print(f"🔍 Mapping {args.document}")
    session = _open_session(args, config, with_library=True)
    session.analyze()
    result = session.map(thresholds_from_config(config))
    print(f"   ✅ Mapped {result.mapped_count}/{result.total_count} components")
    for m in result.mappings:
        print(f"   • {m.source_name} → {m.target_name}  [{m.pattern_type}]  ({m.confidence:.2f})")
    for component in result.unmapped_components:
        print(f"   ⚠️  Unmapped: {component.name}")
    if args.tree:
        print(preview_component_tree(build_component_tree(session.parsed.nodes, result.mappings)))
    if args.output:
        _write_json(args.output, result.to_dict())
    return 0


def _framework(args, config: dict):
    return framework_from_config(
        config,
        name=getattr(args, "framework", None),
        typescript=True if getattr(args, "typescript", False) else None,
        styling=getattr(args, "styling", None),
    )


def perform_generate(args, config: dict) -> bool:
    """完整跑一次五個階段並寫出檔案；generate 與 watch 共用."""
    framework = _framework(args, config)
    session = _open_session(args, config, with_library=True)
    session.analyze()
    mapping = session.map(thresholds_from_config(config))
    print(f"   ✅ Mapped {mapping.mapped_count}/{mapping.total_count} components")
    if not mapping.mappings:
        print("   ❌ No components could be mapped to the library.")
        return False

    layout = args.layout or bool(config.get("generation", {}).get("generateLayout", False))
    result = session.generate(framework, generate_layout=layout)
    for artifact in result.artifacts():
        mark = "✅" if artifact.success else "❌"
        print(f"   {mark} {artifact.file_name}" + ("" if artifact.success else f": {artifact.error}"))

    output_dir = args.output or config.get("output", {}).get("dir") or "./generated"
    written = write_artifacts(result, output_dir)
    print(f"   📄 Wrote {len(written)} files to {output_dir}")

    report = session.validate()
    verdict = "ready for production" if report.is_production_ready else "needs review"
    print(
        f"   📊 Validation: overall {report.overall_score:.2f} "
        f"(syntax {report.syntax.score:.2f}, style {report.style.score:.2f}, "
        f"responsive {report.responsiveness.score:.2f}): {verdict}"
    )
    for issue in report.issues:
        if issue.severity == "error":
            print(f"     - ❌ {issue.component}: {issue.message}")

    report_path = args.report or config.get("output", {}).get("report")
    if report_path:
        _write_json(report_path, {"generation": result.to_dict(), "validation": report.to_dict()})
    return result.success


def cmd_generate(args, config: dict) -> int:
    """Generate: 設計檔 + 元件庫 → 元件程式碼."""
    print(f"🚀 Generating code from {args.document}")
    return 0 if perform_generate(args, config) else 1


_WATCHED_EXTENSIONS = (".json",)


class ChangeHandler(FileSystemEventHandler):
    """檔案變更事件處理器，帶 debounce 防抖；只處理 watched_paths 內的檔案。"""

    def __init__(self, callback, debounce: float = 1.0, watched_paths=None):
        self.callback = callback
        self.last_trigger = 0.0
        self.debounce_seconds = debounce
        self.watched_paths = {str(Path(p).resolve()) for p in (watched_paths or ())}

    def on_modified(self, event):
        if event.is_directory:
            return
        if not event.src_path.endswith(_WATCHED_EXTENSIONS):
            return
        if self.watched_paths and str(Path(event.src_path).resolve()) not in self.watched_paths:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 File changed: {event.src_path}")
        self.callback()


def cmd_watch(args, config: dict) -> int:
    """Watch: 設計檔或元件庫變更時自動重新 generate."""
    sources = [args.document, _library_source(args, config)]
    local = [s for s in sources if s and not is_url(s)]
    if not local:
        print("❌ 沒有可監聽的本機檔案（URL 來源無法 watch）。")
        return 1

    def regenerate():
        try:
            perform_generate(args, config)
        except Figma2CodeError as e:
            print(f"   ❌ {e}")

    print("👀 Watching for changes:")
    for path in local:
        print(f"   {path}")
    print("   Press Ctrl+C to stop.")
    regenerate()

    debounce = config.get("watch", {}).get("debounce", 1.0)
    handler = ChangeHandler(regenerate, debounce=debounce, watched_paths=local)
    observer = Observer()
    for directory in sorted({str(Path(p).resolve().parent) for p in local}):
        observer.schedule(handler, path=directory, recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
        observer.stop()
    finally:
        observer.join()
    return 0


def _add_library(p) -> None:
    p.add_argument("--library", "-l", help="Target library JSON (path or URL); defaults to library.path")


def _add_generation(p) -> None:
    p.add_argument("--framework", "-f", choices=FRAMEWORKS, help="Target framework")
    p.add_argument("--typescript", action="store_true", help="Emit TypeScript (react / vue)")
    p.add_argument("--styling", choices=STYLING_OPTIONS, help="Styling approach")
    p.add_argument("--layout", action="store_true", help="Also generate a layout composing all components")
    p.add_argument("--output", "-o", help="Output directory")
    p.add_argument("--report", help="Write a JSON generation + validation report")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma2code",
        description="figma2code: Figma design export → UI component code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    parse_p = sub.add_parser("parse", help="Flatten a design export and list its components",
        epilog="Examples:\n  figma2code parse design.json\n  figma2code parse design.json --output parsed.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    parse_p.add_argument("document", help="Design JSON (path or URL)")
    parse_p.add_argument("--output", "-o", help="Write the parse result as JSON")

    analyze_p = sub.add_parser("analyze", help="Detect UI patterns and style inconsistencies",
        epilog="Examples:\n  figma2code analyze design.json\n  figma2code analyze design.json --output analysis.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    analyze_p.add_argument("document", help="Design JSON (path or URL)")
    analyze_p.add_argument("--output", "-o", help="Write the analysis as JSON")

    map_p = sub.add_parser("map", help="Map design components to a target library",
        epilog="Examples:\n  figma2code map design.json -l library.json\n  figma2code map design.json -l library.json --tree",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    map_p.add_argument("document", help="Design JSON (path or URL)")
    _add_library(map_p)
    map_p.add_argument("--tree", action="store_true", help="Print the mapped component tree")
    map_p.add_argument("--output", "-o", help="Write the mappings as JSON")

    gen_p = sub.add_parser("generate", help="Generate component code",
        epilog="Examples:\n  figma2code generate design.json -l library.json --framework react --output ./out\n"
               "  figma2code generate design.json -l library.json -f vue --typescript --layout",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    gen_p.add_argument("document", help="Design JSON (path or URL)")
    _add_library(gen_p)
    _add_generation(gen_p)

    watch_p = sub.add_parser("watch", help="Regenerate when the design or library file changes",
        epilog="Examples:\n  figma2code watch design.json -l library.json --output ./out",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    watch_p.add_argument("document", help="Design JSON path")
    _add_library(watch_p)
    _add_generation(watch_p)
    return parser


_COMMANDS = {
    "parse": cmd_parse,
    "analyze": cmd_analyze,
    "map": cmd_map,
    "generate": cmd_generate,
    "watch": cmd_watch,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    config = load_config(args.config)

    command = _COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1
    try:
        return command(args, config)
    except Figma2CodeError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
