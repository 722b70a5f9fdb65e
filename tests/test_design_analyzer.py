"""
design_analyzer 單元測試：analyze 結果、metadata 擷取、節點附註。
"""
import pytest

from builders import document, node, primary_button, solid, text
from figma2code.design_analyzer import (
    analyze,
    extract_color_palette,
    extract_spacing_system,
    extract_typography_system,
)
from figma2code.errors import UninitializedStateError
from figma2code.figma_reader import build_tree, flatten, parse


def analyze_doc(raw):
    parsed = parse(raw)
    return analyze(parsed.tree, parsed.nodes, parsed.styles, parsed.components)


# ─── analyze ────────────────────────────────────────────────────────────────

class TestAnalyze:

    def setup_method(self):
        self.raw = document(
            primary_button(),
            node("2:1", "Stack", layoutMode="VERTICAL", itemSpacing=18,
                 children=[text("2:2", "One"), text("2:3", "Two")]),
        )

    def test_requires_parsed_tree(self):
        with pytest.raises(UninitializedStateError):
            analyze(None, ())

    def test_is_idempotent(self):
        assert analyze_doc(self.raw) == analyze_doc(self.raw)

    def test_button_detected(self):
        result = analyze_doc(self.raw)
        buttons = [p for p in result.patterns if p.type == "button"]
        assert buttons[0].node_id == "1:1"
        assert result.patterns_for("1:1") == buttons

    def test_average_confidence(self):
        result = analyze_doc(self.raw)
        expected = round(sum(p.confidence for p in result.patterns) / len(result.patterns), 4)
        assert result.average_confidence == expected

    def test_consistency_reflects_issues(self):
        result = analyze_doc(self.raw)
        assert any(i.id == "spacing-non-standard-18" for i in result.issues)
        assert result.consistency_score < 1.0

    def test_clean_design_scores_one(self, parsed_button):
        result = analyze(parsed_button.tree, parsed_button.nodes, parsed_button.styles,
                         parsed_button.components)
        assert result.issues == ()
        assert result.consistency_score == 1.0

    def test_no_patterns_average_zero(self):
        result = analyze_doc(document(node("1:1", "Plain", "RECTANGLE")))
        assert result.patterns == ()
        assert result.average_confidence == 0.0

    def test_metadata_counts(self):
        result = analyze_doc(self.raw)
        meta = result.metadata
        assert meta["nodeCount"] == 6
        assert meta["componentCount"] == 1
        assert meta["patternCount"] == len(result.patterns)
        assert meta["issueCount"] == len(result.issues)

    def test_enriched_nodes_reference_patterns_and_issues(self):
        result = analyze_doc(self.raw)
        enriched = {n["id"]: n for n in result.enriched_nodes}
        assert "button-1:1" in enriched["1:1"]["patterns"]
        assert "button-1:1" in enriched["1:1-label"]["patterns"]
        assert "spacing-non-standard-18" in enriched["2:1"]["styleIssues"]
        assert enriched["2:2"]["styleIssues"] == []

    def test_to_dict_shape(self):
        data = analyze_doc(self.raw).to_dict()
        assert set(data) == {"patterns", "averageConfidence", "issues", "consistencyScore",
                             "metadata", "enrichedNodes"}


# ─── metadata 擷取 ──────────────────────────────────────────────────────────

def nodes_of(*children):
    return flatten(build_tree(document(*children)))


def test_color_palette_ranked_by_usage():
    nodes = nodes_of(
        node("1:1", "a", fills=[solid(37, 99, 235)]),
        node("1:2", "b", fills=[solid(37, 99, 235)]),
        node("1:3", "c", fills=[solid(128, 128, 128)]),
        node("1:4", "d", strokes=[solid(255, 0, 0)]),
    )
    palette = extract_color_palette(nodes)
    cat = palette["categorized"]
    assert cat["primary"] == ["rgba(37,99,235,1)"]
    assert cat["secondary"] == ["rgba(128,128,128,1)"]
    assert cat["accent"] == []
    assert cat["neutral"] == ["rgba(128,128,128,1)"]
    assert palette["colors"][0]["usage"] == ["1:1", "1:2"]


def test_typography_system():
    nodes = nodes_of(
        text("1:1", "h", font_size=32, font_family="Poppins"),
        text("1:2", "b", font_size=16),
        text("1:3", "b", font_size=16),
        text("1:4", "s", font_size=12),
    )
    system = extract_typography_system(nodes)
    sizes = system["categorized"]["sizes"]
    assert sizes["heading1"] == 32
    assert sizes["heading2"] == 16
    assert sizes["heading3"] == 12
    assert sizes["body"] == 16
    assert sizes["small"] == 12
    assert system["categorized"]["primaryFont"] == "Inter"
    assert system["categorized"]["secondaryFont"] == "Poppins"


def test_spacing_system():
    nodes = nodes_of(
        node("1:1", "a", layoutMode="HORIZONTAL", itemSpacing=8, paddingTop=16),
        node("1:2", "b", layoutMode="VERTICAL", itemSpacing=8),
    )
    system = extract_spacing_system(nodes)
    assert system["scale"] == [8, 16]
    assert system["values"] == [{"value": 8, "count": 2}, {"value": 16, "count": 1}]
