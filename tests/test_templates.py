"""
Template 單元測試：slot 替換、縮排、框架樣板選擇。
"""
import pytest

from figma2code.errors import UnsupportedFrameworkError
from figma2code.templates import REACT, TEMPLATES, Template, get_template, template_key


class TestRender:

    def setup_method(self):
        self.tpl = Template("t", "\na {{x}} b\n  {{block}}\nend\n")

    def test_inline_and_block_slots(self):
        out = self.tpl.render({"x": "1", "block": "l1\nl2"})
        assert out == "a 1 b\n  l1\n  l2\nend\n"

    def test_empty_block_line_removed(self):
        assert self.tpl.render({"x": "1"}) == "a 1 b\nend\n"

    def test_missing_inline_slot_is_empty(self):
        assert self.tpl.render({"block": "z"}).startswith("a  b\n")

    def test_values_not_rescanned(self):
        out = self.tpl.render({"x": "{{block}}", "block": "{{x}}"})
        assert out == "a {{block}} b\n  {{x}}\nend\n"

    def test_blank_lines_inside_block_not_indented(self):
        out = self.tpl.render({"x": "", "block": "one\n\ntwo"})
        assert "  one\n\n  two" in out


def test_mustache_expressions_are_not_slots():
    tpl = Template("vue-like", "<p>{{ label }}</p>{{name}}")
    assert tpl.slots == ("name",)
    assert tpl.render({"name": "X"}) == "<p>{{ label }}</p>X\n"


def test_react_template_slots():
    assert REACT.slots == ("imports", "componentName", "componentDescription", "props", "hooks", "jsx")


@pytest.mark.parametrize("framework,typescript,key", [
    ("react", False, "react"),
    ("react", True, "react-ts"),
    ("vue", True, "vue-ts"),
    ("angular", True, "angular"),
    ("html", True, "html"),
])
def test_template_key(framework, typescript, key):
    assert template_key(framework, typescript) == key
    assert get_template(framework, typescript) is TEMPLATES[key]


def test_unknown_framework():
    with pytest.raises(UnsupportedFrameworkError):
        get_template("svelte")
