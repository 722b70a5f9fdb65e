"""讀取設計文件 / 元件庫 JSON：本機檔案或 http(s) URL."""

import json
import logging
from pathlib import Path
from typing import Any

import requests

from .errors import SourceLoadError

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return str(source).startswith(("http://", "https://"))


def _fetch(url: str, timeout: float) -> Any:
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        raise SourceLoadError(f"HTTP {status} while fetching {url}", status_code=status) from e
    except requests.RequestException as e:
        raise SourceLoadError(f"Failed to fetch {url}: {e}") from e
    try:
        return resp.json()
    except ValueError as e:
        raise SourceLoadError(f"Response from {url} is not valid JSON") from e


def _read(path: Path) -> Any:
    if not path.exists():
        raise SourceLoadError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SourceLoadError(f"Invalid JSON in {path}: {e}") from e


def load_json_source(source: str, timeout: float = 10) -> Any:
    """載入 JSON；URL 走 requests，其餘視為本機路徑."""
    logger.debug("Loading JSON source %s", source)
    if is_url(source):
        return _fetch(source, timeout)
    return _read(Path(source))
