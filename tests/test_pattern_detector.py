"""
pattern_detector 單元測試：各偵測器的判定條件、推得屬性、信心值調整。
"""
from builders import document, node, primary_button, shadow, solid, text
from figma2code.figma_reader import NodeIndex, build_tree, flatten
from figma2code.pattern_detector import (
    DEFAULT_DETECTORS,
    ComponentPattern,
    apply_confidence_adjustments,
    detect_button,
    detect_card,
    detect_input,
    detect_layout,
    detect_navigation,
    detect_patterns,
    shadow_elevation,
)


def nodes_of(*children):
    return flatten(build_tree(document(*children)))


def find(nodes, node_id):
    return next(n for n in nodes if n.id == node_id)


def run(detector, *children, target="1:1"):
    nodes = nodes_of(*children)
    return detector(find(nodes, target), NodeIndex(nodes))


# ─── button ─────────────────────────────────────────────────────────────────

class TestButton:

    def test_primary_button_scenario(self):
        nodes = nodes_of(primary_button())
        patterns = detect_patterns(nodes)
        buttons = [p for p in patterns if p.type == "button"]
        assert len(buttons) == 1
        btn = buttons[0]
        assert btn.id == "button-1:1"
        assert btn.confidence >= 0.9
        assert btn.properties["label"] == "Submit"
        assert btn.properties["variant"] == "primary"
        assert btn.properties["size"] == "md"
        assert btn.properties["disabled"] is False

    def test_exact_name_scores_higher(self):
        exact = run(detect_button, node("1:1", "Button", "FRAME", children=[text("1:2", "Go")]))
        partial = run(detect_button, node("1:1", "Big btn", "FRAME", children=[text("1:2", "Go")]))
        assert exact.confidence == 0.8
        assert partial.confidence == 0.6

    def test_shape_without_name_needs_radius_and_fill(self):
        hit = run(detect_button, node("1:1", "Thing", "FRAME", cornerRadius=8,
                                      fills=[solid(0, 0, 0)], children=[text("1:2", "Go")]))
        assert hit is not None
        assert hit.confidence == 0.5
        miss = run(detect_button, node("1:1", "Thing", "FRAME", fills=[solid(0, 0, 0)],
                                       children=[text("1:2", "Go")]))
        assert miss is None

    def test_no_text_child_no_button(self):
        assert run(detect_button, node("1:1", "Button", "FRAME", children=[])) is None

    def test_outline_and_secondary_variants(self):
        outline = run(detect_button, node("1:1", "Button", "FRAME", fills=[solid(0, 0, 0, a=0)],
                                          children=[text("1:2", "Go")]))
        assert outline.properties["variant"] == "outline"
        secondary = run(detect_button, node("1:1", "Button", "FRAME", fills=[solid(0, 0, 0, opacity=0.5)],
                                            children=[text("1:2", "Go")]))
        assert secondary.properties["variant"] == "secondary"

    def test_size_from_font(self):
        small = run(detect_button, node("1:1", "Button", children=[text("1:2", "Go", font_size=12)]))
        large = run(detect_button, node("1:1", "Button", children=[text("1:2", "Go", font_size=20)]))
        assert small.properties["size"] == "sm"
        assert large.properties["size"] == "lg"

    def test_translucent_node_is_disabled(self):
        hit = run(detect_button, node("1:1", "Button", opacity=0.4, children=[text("1:2", "Go")]))
        assert hit.properties["disabled"] is True


# ─── input ──────────────────────────────────────────────────────────────────

def test_input_type_and_placeholder():
    hit = run(detect_input, node("1:1", "Email Input", children=[text("1:2", "you@example.com")]))
    assert hit.type == "input"
    assert hit.properties["type"] == "email"
    assert hit.properties["placeholder"] == "you@example.com"
    assert hit.confidence == 0.8


def test_input_from_stroked_shape():
    hit = run(detect_input, node("1:1", "Box", "FRAME", strokes=[solid(0, 0, 0)],
                                 children=[text("1:2", "Search")]))
    assert hit is not None
    assert hit.properties["type"] == "text"


# ─── card ───────────────────────────────────────────────────────────────────

class TestCard:

    def test_elevated_card(self):
        hit = run(detect_card, node("1:1", "Product", "FRAME", cornerRadius=8, effects=[shadow(radius=6)],
                                    children=[text("1:2", "Title"), node("1:3", "Footer")]))
        assert hit.properties["variant"] == "elevated"
        assert hit.properties["elevation"] == 3
        assert hit.properties["hasHeader"] is True
        assert hit.properties["hasFooter"] is True
        assert hit.matched_nodes == ("1:1", "1:2", "1:3")

    def test_needs_two_children(self):
        assert run(detect_card, node("1:1", "Card", children=[text("1:2", "Only")])) is None

    def test_outlined_and_flat(self):
        outlined = run(detect_card, node("1:1", "Card", strokes=[solid(0, 0, 0)],
                                         children=[node("1:2", "a"), node("1:3", "b")]))
        flat = run(detect_card, node("1:1", "Card", children=[node("1:2", "a"), node("1:3", "b")]))
        assert outlined.properties["variant"] == "outlined"
        assert flat.properties["variant"] == "flat"
        assert flat.properties["elevation"] == 0

    def test_shadow_elevation_levels(self):
        assert [shadow_elevation(r) for r in (1, 3, 6, 12)] == [1, 2, 3, 4]


# ─── navigation ─────────────────────────────────────────────────────────────

def test_sidebar_navigation_is_vertical():
    hit = run(detect_navigation, node("1:1", "Sidebar", children=[
        text("1:2", "Home"), text("1:3", "Settings"), node("1:4", "Divider", "LINE"),
    ]))
    assert hit.properties["orientation"] == "vertical"
    assert hit.properties["itemCount"] == 2
    assert hit.properties["isSidebar"] is True
    assert hit.properties["isHeader"] is False


def test_navigation_by_structure():
    hit = run(detect_navigation, node("1:1", "Top", "FRAME", children=[
        node("1:2", "Link A", "TEXT"), node("1:3", "Link B", "TEXT"),
    ]))
    assert hit.properties["orientation"] == "horizontal"


# ─── layout ─────────────────────────────────────────────────────────────────

def test_auto_layout_column():
    hit = run(detect_layout, node("1:1", "Stack", "FRAME", layoutMode="VERTICAL", itemSpacing=16,
                                  primaryAxisAlignItems="CENTER", paddingLeft=8,
                                  children=[node("1:2", "a"), node("1:3", "b")]))
    assert hit.properties["type"] == "flex-column"
    assert hit.properties["spacing"] == 16
    assert hit.properties["alignment"] == "center"
    assert hit.properties["padding"]["left"] == 8


def test_grid_by_name_and_container_requirement():
    grid = run(detect_layout, node("1:1", "Gallery Grid", "FRAME",
                                   children=[node("1:2", "a"), node("1:3", "b")]))
    assert grid.properties["type"] == "grid"
    rect = run(detect_layout, node("1:1", "Layout", "RECTANGLE"))
    assert rect is None


# ─── 信心值調整 ─────────────────────────────────────────────────────────────

class TestConfidenceAdjustments:

    def make(self, **kwargs):
        base = dict(id="x-1", type="card", node_id="1", name="Thing", confidence=0.75,
                    properties={"a": 1, "b": 2}, matched_nodes=("1",))
        base.update(kwargs)
        return ComponentPattern(**base)

    def test_name_bonus(self):
        assert apply_confidence_adjustments(self.make(name="Product Card")).confidence == 0.85

    def test_matched_nodes_bonus(self):
        adjusted = apply_confidence_adjustments(self.make(matched_nodes=("1", "2", "3", "4")))
        assert adjusted.confidence == 0.8

    def test_few_properties_penalty(self):
        assert apply_confidence_adjustments(self.make(properties={"a": 1})).confidence == 0.65

    def test_capped_at_one(self):
        adjusted = apply_confidence_adjustments(self.make(name="card", confidence=0.98,
                                                          matched_nodes=("1", "2", "3", "4")))
        assert adjusted.confidence == 1.0

    def test_floored_at_zero(self):
        assert apply_confidence_adjustments(self.make(confidence=0.05, properties={})).confidence == 0.0


def test_confidence_always_in_range():
    nodes = nodes_of(
        primary_button(),
        node("2:1", "Card Nav Layout", "FRAME", layoutMode="HORIZONTAL", cornerRadius=4,
             effects=[shadow()], children=[text("2:2", "A"), text("2:3", "B"), node("2:4", "Button")]),
    )
    for pattern in detect_patterns(nodes):
        assert 0.0 <= pattern.confidence <= 1.0


def test_same_node_can_match_several_types():
    nodes = nodes_of(node("1:1", "Header Nav", "FRAME", layoutMode="HORIZONTAL",
                          children=[text("1:2", "Home"), text("1:3", "About")]))
    types = {p.type for p in detect_patterns(nodes) if p.node_id == "1:1"}
    assert {"navigation", "layout"} <= types


def test_custom_detector_registry():
    nodes = nodes_of(primary_button())
    only_buttons = detect_patterns(nodes, {"button": DEFAULT_DETECTORS["button"]})
    assert [p.type for p in only_buttons] == ["button"]
    assert detect_patterns(nodes, {}) == ()
