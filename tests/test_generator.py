"""
generator 單元測試：四種框架輸出、layout、單一元件失敗的隔離、寫檔。
"""
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from figma2code.errors import NoMappingsSelectedError, UnsupportedFrameworkError
from figma2code.generator import (
    FrameworkConfig,
    error_code,
    generate_code,
    render_component,
    write_artifacts,
)
from figma2code.mapper import ComponentMapping, PropertyMapping


def make_mapping(source_id="1:1", source_name="Primary Button", target_name="Button",
                 target_type="button", props=None):
    props = props if props is not None else {
        "variant": "primary", "size": "md", "children": "Submit", "disabled": False,
    }
    return ComponentMapping(
        id=f"mapping-{source_id}-ui-{target_type}",
        source_id=source_id,
        source_name=source_name,
        target_id=f"ui-{target_type}",
        target_name=target_name,
        target_type=target_type,
        pattern_type=target_type,
        confidence=0.9,
        property_mappings=tuple(PropertyMapping(k, k, v, 0.9) for k, v in props.items()),
        matched_nodes=(source_id,),
    )


FIXED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def generate(mappings, config, layout=False):
    return generate_code(mappings, [m.id for m in mappings], config, layout, clock=lambda: FIXED)


# ─── FrameworkConfig ────────────────────────────────────────────────────────

class TestFrameworkConfig:

    def test_unknown_framework_rejected(self):
        with pytest.raises(UnsupportedFrameworkError):
            FrameworkConfig(name="svelte")

    def test_typescript_only_for_react_and_vue(self):
        assert FrameworkConfig("react", typescript=True).uses_typescript
        assert FrameworkConfig("vue", typescript=True).uses_typescript
        assert not FrameworkConfig("html", typescript=True).uses_typescript

    @pytest.mark.parametrize("name,typescript,language", [
        ("react", False, "javascript"),
        ("react", True, "typescript"),
        ("angular", False, "typescript"),
        ("html", False, "html"),
    ])
    def test_language(self, name, typescript, language):
        assert FrameworkConfig(name, typescript=typescript).language == language


# ─── 各框架輸出 ─────────────────────────────────────────────────────────────

class TestReact:

    def test_button(self):
        code = render_component(make_mapping(), FrameworkConfig("react"))
        assert code.startswith("import React from 'react';\n")
        assert "import { Button } from 'your-ui-library';" in code
        assert "const PrimaryButton = ({" in code
        assert "label = 'Submit'," in code
        assert "<Button" in code
        assert "export default PrimaryButton;" in code

    def test_typescript_props_interface(self):
        code = render_component(make_mapping(), FrameworkConfig("react", typescript=True))
        assert "export interface PrimaryButtonProps {" in code
        assert "const PrimaryButton: React.FC<PrimaryButtonProps> = ({" in code
        assert "variant?: 'primary' | 'secondary' | 'outline';" in code

    def test_library_alias_on_name_collision(self):
        code = render_component(make_mapping(source_name="Button"), FrameworkConfig("react"))
        assert "import { Button as UiButton } from 'your-ui-library';" in code
        assert "<UiButton" in code
        assert "const Button = ({" in code

    def test_custom_library_package(self):
        config = FrameworkConfig("react", library_package="@acme/ui")
        assert "from '@acme/ui';" in render_component(make_mapping(), config)

    def test_card_sub_components(self):
        mapping = make_mapping(source_name="Product Card", target_name="Card", target_type="card",
                               props={"withHeader": True, "withFooter": False, "elevation": 2})
        code = render_component(mapping, FrameworkConfig("react"))
        assert "import { Card, CardHeader, CardContent } from 'your-ui-library';" in code
        assert "elevation = 2," in code
        assert "CardFooter" not in code

    @pytest.mark.parametrize("styling,fragment", [
        ("css", "style={{ display: 'flex', flexDirection: 'column', gap: '1rem' }}"),
        ("tailwind", 'className="avatar-frame flex flex-col gap-4"'),
        ("styled", "import styled from 'styled-components';"),
    ])
    def test_default_archetype_styling(self, styling, fragment):
        mapping = make_mapping(source_name="Avatar Frame", target_name="Avatar", target_type="avatar", props={})
        code = render_component(mapping, FrameworkConfig("react", styling=styling))
        assert fragment in code


class TestOtherFrameworks:

    def test_vue(self):
        code = render_component(make_mapping(), FrameworkConfig("vue"))
        assert code.startswith("<template>\n")
        assert "name: 'PrimaryButton'," in code
        assert "{{ label }}" in code
        assert "label: { type: String, default: 'Submit' }," in code
        assert "@media (max-width: 640px)" in code
        assert "<style scoped>" in code

    def test_vue_typescript(self):
        code = render_component(make_mapping(), FrameworkConfig("vue", typescript=True))
        assert '<script lang="ts">' in code
        assert "export default defineComponent({" in code
        assert "type: String as PropType<'primary' | 'secondary' | 'outline'>" in code

    def test_angular(self):
        code = render_component(make_mapping(), FrameworkConfig("angular"))
        assert "selector: 'app-primary-button'," in code
        assert "export class PrimaryButtonComponent {" in code
        assert "@Input() label = 'Submit';" in code
        assert "styleUrls: ['./primary-button.component.css']" in code
        assert "{{ label }}" in code

    def test_html(self):
        code = render_component(make_mapping(), FrameworkConfig("html"))
        assert code.startswith("<!DOCTYPE html>\n")
        assert "<title>Primary Button</title>" in code
        assert '<button class="primary-button primary-button--primary" id="primary-button">Submit</button>' in code
        assert '<meta name="viewport"' in code

    def test_html_escapes_text(self):
        mapping = make_mapping(props={"children": "<b>Go</b>"})
        code = render_component(mapping, FrameworkConfig("html"))
        assert "&lt;b&gt;Go&lt;/b&gt;" in code


# ─── generate_code ──────────────────────────────────────────────────────────

class TestGenerateCode:

    def setup_method(self):
        self.button = make_mapping()
        self.card = make_mapping(source_id="2:1", source_name="Product Card", target_name="Card",
                                 target_type="card", props={"elevation": 1})

    def test_selection_required(self):
        with pytest.raises(NoMappingsSelectedError, match="No valid component mappings selected"):
            generate_code([self.button], ["missing"], FrameworkConfig())

    def test_unknown_ids_ignored(self):
        result = generate_code([self.button, self.card], [self.card.id, "missing"], FrameworkConfig(),
                               clock=lambda: FIXED)
        assert [c.id for c in result.components] == [self.card.id]

    def test_success_result(self):
        result = generate([self.button], FrameworkConfig())
        assert result.success
        assert result.message == "Code generation completed successfully"
        assert result.framework == "react"
        assert result.timestamp == "2024-01-01T00:00:00+00:00"
        artifact = result.components[0]
        assert artifact.file_name == "PrimaryButton.jsx"
        assert artifact.language == "javascript"
        assert artifact.error is None

    def test_layout_composes_components(self):
        result = generate([self.button, self.card], FrameworkConfig(), layout=True)
        layout = result.layout
        assert layout.id == "layout"
        assert layout.file_name == "Layout.jsx"
        assert "import PrimaryButton from './PrimaryButton';" in layout.code
        assert "<ProductCard />" in layout.code
        assert len(result.artifacts()) == 3

    def test_one_failure_is_isolated(self):
        real = render_component

        def flaky(mapping, config, naming=None, name=None):
            if mapping.source_id == "2:1":
                raise ValueError("boom")
            return real(mapping, config, naming, name)

        with patch("figma2code.generator.render_component", side_effect=flaky):
            result = generate([self.button, self.card], FrameworkConfig(), layout=True)

        assert not result.success
        assert result.message == "Some components failed to generate"
        ok, failed = result.components
        assert ok.success
        assert failed.success is False
        assert failed.error == "boom"
        assert failed.code == "// Error generating code: boom"
        assert "ProductCard" not in result.layout.code
        assert "<PrimaryButton />" in result.layout.code

    def test_layout_failure_reported_on_layout(self):
        with patch("figma2code.generator.render_layout", side_effect=RuntimeError("nope")):
            result = generate([self.button], FrameworkConfig("html"), layout=True)
        assert result.success
        assert result.layout.success is False
        assert result.layout.code == "<!-- Error generating layout code: nope -->"

    def test_to_dict(self):
        data = generate([self.button], FrameworkConfig()).to_dict()
        assert data["layout"] is None
        assert data["components"][0]["fileName"] == "PrimaryButton.jsx"


# ─── 同名元件 ───────────────────────────────────────────────────────────────

class TestDuplicateNames:
    """同一個元件的多個 instance 通常同名；識別字與檔名要在同一次產生內唯一。"""

    def setup_method(self):
        self.first = make_mapping()
        self.second = make_mapping(source_id="1:2")

    def test_suffix_on_collision(self):
        result = generate([self.first, self.second], FrameworkConfig(), layout=True)
        assert [c.name for c in result.components] == ["Primary Button", "Primary Button 2"]
        assert [c.file_name for c in result.components] == ["PrimaryButton.jsx", "PrimaryButton2.jsx"]
        assert "const PrimaryButton2" in result.components[1].code
        layout = result.layout.code
        assert layout.count("import PrimaryButton from './PrimaryButton';") == 1
        assert "import PrimaryButton2 from './PrimaryButton2';" in layout
        assert "<PrimaryButton2 />" in layout

    def test_html_file_names(self):
        result = generate([self.first, self.second], FrameworkConfig("html"))
        assert [c.file_name for c in result.components] == ["primary-button.html", "primary-button2.html"]

    def test_layout_name_reserved(self):
        page = make_mapping(source_id="3:1", source_name="Layout")
        with_layout = generate([page], FrameworkConfig(), layout=True)
        assert with_layout.components[0].file_name == "Layout2.jsx"
        assert with_layout.layout.file_name == "Layout.jsx"
        without = generate([page], FrameworkConfig())
        assert without.components[0].file_name == "Layout.jsx"

    def test_every_file_written(self, tmp_path):
        result = generate([self.first, self.second], FrameworkConfig(), layout=True)
        written = write_artifacts(result, tmp_path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["Layout.jsx", "PrimaryButton.jsx", "PrimaryButton2.jsx"]
        assert len(written) == 3


def test_error_code_comment_style():
    assert error_code("x", "react") == "// Error generating code: x"
    assert error_code("x", "html") == "<!-- Error generating code: x -->"


def test_write_artifacts_skips_failures(tmp_path):
    button = make_mapping()
    card = make_mapping(source_id="2:1", source_name="Product Card", target_name="Card", target_type="card")
    with patch("figma2code.generator.render_component", side_effect=["ok", RuntimeError("bad")]):
        result = generate([button, card], FrameworkConfig())
    written = write_artifacts(result, tmp_path / "out")
    assert written == [tmp_path / "out" / "PrimaryButton.jsx"]
    assert written[0].read_text(encoding="utf-8") == "ok"
