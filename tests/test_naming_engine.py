"""
NamingEngine 單元測試
圖層名稱 → PascalCase 識別字 / kebab-case selector / 檔名
"""
import pytest

from figma2code.naming_engine import (
    NamingConfig,
    NamingEngine,
    preview_component_tree,
    to_kebab_case,
    to_pascal_case,
)


# ─── PascalCase ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("Primary Button", "PrimaryButton"),
    ("primary-button", "PrimaryButton"),
    ("nav_bar item", "NavBarItem"),
    ("Card (new)", "CardNew"),
    ("iconButton", "Iconbutton"),
])
def test_pascal_case(raw, expected):
    assert to_pascal_case(raw) == expected


def test_pascal_case_fallback():
    assert to_pascal_case("!!!") == "Component"
    assert to_pascal_case("") == "Component"
    assert to_pascal_case(None, fallback="Widget") == "Widget"


def test_pascal_case_leading_digit_prefixed():
    assert to_pascal_case("3d card") == "Component3dCard"


# ─── kebab-case ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("PrimaryButton", "primary-button"),
    ("Primary Button", "primary-button"),
    ("a__b  c", "a-b-c"),
    ("Card (new)!", "card-new"),
    ("", "component"),
])
def test_kebab_case(raw, expected):
    assert to_kebab_case(raw) == expected


# ─── NamingEngine ───────────────────────────────────────────────────────────

class TestNamingEngine:

    def setup_method(self):
        self.eng = NamingEngine()

    def test_selector(self):
        assert self.eng.selector("Primary Button") == "app-primary-button"

    def test_custom_selector_prefix(self):
        eng = NamingEngine(NamingConfig(selector_prefix="ds"))
        assert eng.selector("Card") == "ds-card"

    def test_library_identifier_aliased_on_collision(self):
        assert self.eng.library_identifier("Button", "Button") == "UiButton"
        assert self.eng.library_identifier("Button", "PrimaryButton") == "Button"

    @pytest.mark.parametrize("framework,typescript,expected", [
        ("react", False, "PrimaryButton.jsx"),
        ("react", True, "PrimaryButton.tsx"),
        ("vue", False, "PrimaryButton.vue"),
        ("angular", False, "primary-button.component.ts"),
        ("html", False, "primary-button.html"),
    ])
    def test_file_name(self, framework, typescript, expected):
        assert self.eng.file_name("Primary Button", framework, typescript) == expected


# ─── preview ────────────────────────────────────────────────────────────────

def test_preview_component_tree():
    tree = {
        "type": "root",
        "children": [
            {"type": "container", "name": "Page 1", "children": [
                {"type": "component", "name": "Button", "componentId": "ui-button", "children": []},
                {"type": "element", "name": "Line", "nodeType": "LINE", "children": []},
            ]},
        ],
    }
    lines = preview_component_tree(tree).split("\n")
    assert lines[0] == "├─ root  [root]"
    assert lines[1] == "  ├─ Page 1  [container]"
    assert lines[2] == "    ├─ Button  [component]  <ui-button>"
    assert lines[3] == "    ├─ Line  [element]  <LINE>"
