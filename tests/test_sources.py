"""
sources 單元測試：本機檔案與 URL（requests 以 mock 取代）。
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from figma2code.errors import SourceLoadError
from figma2code.sources import is_url, load_json_source


def test_is_url():
    assert is_url("https://api.figma.com/v1/files/abc")
    assert is_url("http://localhost/lib.json")
    assert not is_url("design.json")


# ─── 本機檔案 ───────────────────────────────────────────────────────────────

def test_reads_local_file(tmp_path):
    path = tmp_path / "design.json"
    path.write_text(json.dumps({"name": "X"}), encoding="utf-8")
    assert load_json_source(str(path)) == {"name": "X"}


def test_missing_file(tmp_path):
    with pytest.raises(SourceLoadError, match="File not found"):
        load_json_source(str(tmp_path / "missing.json"))


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SourceLoadError, match="Invalid JSON"):
        load_json_source(str(path))


# ─── URL ────────────────────────────────────────────────────────────────────

class TestFetch:

    URL = "https://example.com/design.json"

    @patch("figma2code.sources.requests.get")
    def test_success(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(return_value={"ok": True}))
        assert load_json_source(self.URL, timeout=3) == {"ok": True}
        mock_get.assert_called_once_with(self.URL, timeout=3)

    @patch("figma2code.sources.requests.get")
    def test_http_error_keeps_status(self, mock_get):
        resp = MagicMock(status_code=404)
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
        mock_get.return_value = resp
        with pytest.raises(SourceLoadError) as exc:
            load_json_source(self.URL)
        assert exc.value.status_code == 404
        assert "HTTP 404" in str(exc.value)

    @patch("figma2code.sources.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(SourceLoadError, match="Failed to fetch"):
            load_json_source(self.URL)

    @patch("figma2code.sources.requests.get")
    def test_non_json_response(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(side_effect=ValueError("nope")))
        with pytest.raises(SourceLoadError, match="not valid JSON"):
            load_json_source(self.URL)
