"""
figma_reader 單元測試：建樹驗證、攤平、樣式擷取、元件辨識。
"""
import pytest

from builders import document, node, shadow, solid, text
from figma2code.errors import MalformedDocumentError
from figma2code.figma_reader import (
    build_tree,
    extract_styles,
    flatten,
    identify_components,
    parse,
)


def nested_document():
    return document(
        node("1:1", "Hero", "FRAME", children=[
            text("1:2", "Welcome"),
            node("1:3", "Actions", "FRAME", children=[
                node("1:4", "Shape", "RECTANGLE"),
            ]),
        ]),
    )


# ─── build_tree / malformed input ───────────────────────────────────────────

class TestMalformedDocument:

    def test_empty_object_rejected(self):
        with pytest.raises(MalformedDocumentError):
            parse({})

    def test_missing_children_rejected(self):
        with pytest.raises(MalformedDocumentError, match="document.children"):
            parse({"name": "X", "document": {}})

    def test_non_object_rejected(self):
        with pytest.raises(MalformedDocumentError):
            build_tree(["not", "a", "dict"])

    def test_non_object_child_rejected(self):
        raw = document(node("1:1", "Frame", children=["oops"]))
        with pytest.raises(MalformedDocumentError):
            parse(raw)

    def test_duplicate_ids_rejected(self):
        raw = document(node("1:1", "A"), node("1:1", "B"))
        with pytest.raises(MalformedDocumentError, match="Duplicate"):
            parse(raw)


def test_tree_defaults():
    tree = build_tree({"document": {"children": [{"name": "P"}]}})
    assert tree.name == "Untitled Design"
    assert tree.pages[0].id == "page-0"
    assert tree.pages[0].type == "CANVAS"


# ─── flatten ────────────────────────────────────────────────────────────────

class TestFlatten:

    def setup_method(self):
        self.tree = build_tree(nested_document())
        self.nodes = flatten(self.tree)

    def test_every_node_exactly_once(self):
        ids = [n.id for n in self.nodes]
        assert ids == ["0:1", "1:1", "1:2", "1:3", "1:4"]
        assert len(set(ids)) == len(ids)

    def test_depth_increases_by_one(self):
        by_id = {n.id: n for n in self.nodes}
        for n in self.nodes:
            if n.parent_id is None:
                assert n.depth == 0
            else:
                assert n.depth == by_id[n.parent_id].depth + 1

    def test_children_reference_ids(self):
        hero = next(n for n in self.nodes if n.id == "1:1")
        assert hero.children == ("1:2", "1:3")

    def test_missing_child_id_is_positional(self):
        raw = document(node("1:1", "Frame", children=[{"name": "anon", "type": "RECTANGLE"}]))
        nodes = flatten(build_tree(raw))
        assert nodes[-1].id == "1:1:0"
        assert nodes[-1].parent_id == "1:1"

    def test_invisible_flag(self):
        raw = document(node("1:1", "Hidden", visible=False))
        assert flatten(build_tree(raw))[-1].visible is False


# ─── styles ─────────────────────────────────────────────────────────────────

def test_extract_styles_ids_and_types():
    raw = document(
        node("1:1", "Card", "FRAME", fills=[solid(255, 255, 255)], effects=[shadow()],
             children=[text("1:2", "Title", font_size=20)]),
    )
    styles = extract_styles(flatten(build_tree(raw)))
    ids = [s.id for s in styles]
    assert ids == ["fill-1:1-SOLID", "effect-1:1-DROP_SHADOW", "text-1:2"]
    text_style = styles[-1]
    assert text_style.type == "TEXT"
    assert text_style.value["fontSize"] == 20
    assert text_style.value["fontName"] == "Inter"


def test_extract_styles_skips_invisible_paints():
    raw = document(node("1:2", "Muted", fills=[solid(0, 0, 0, visible=False)]))
    assert extract_styles(flatten(build_tree(raw))) == ()


def test_hidden_node_keeps_its_styles():
    """節點本身 visible=False 不影響紀錄；只看 paint / effect 自己的 visible"""
    raw = document(node("2:1", "Hidden Box", "RECTANGLE", visible=False, fills=[solid(10, 10, 10)]))
    styles = extract_styles(flatten(build_tree(raw)))
    assert [s.id for s in styles] == ["fill-2:1-SOLID"]


# ─── components ─────────────────────────────────────────────────────────────

def test_identify_components_attaches_styles():
    raw = document(
        node("1:1", "Button", "COMPONENT", fills=[solid(0, 0, 255)], children=[text("1:2", "Go")]),
        node("2:1", "Button instance", "INSTANCE"),
        node("3:1", "Frame", "FRAME"),
    )
    nodes = flatten(build_tree(raw))
    styles = extract_styles(nodes)
    components = identify_components(nodes, styles)
    assert [c.id for c in components] == ["1:1", "2:1"]
    assert components[0].children == ("1:2",)
    assert [s.id for s in components[0].styles] == ["fill-1:1-SOLID"]


def test_parse_result_to_dict(parsed_button):
    data = parsed_button.to_dict()
    assert data["tree"]["name"] == "Test Design"
    assert len(data["nodes"]) == 3
    assert data["components"][0]["name"] == "Primary Button"
    assert data["nodes"][1]["properties"]["cornerRadius"] == 4
