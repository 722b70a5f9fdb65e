"""純 HTML 片段產生器：一份含 style / body / script 的完整頁面."""

from typing import Dict

from .base import (
    LayoutContext,
    SnippetContext,
    css_rule,
    layout_declarations,
    lines,
    media_block,
    text,
)


def _styles(ctx: SnippetContext, decl: Dict[str, str], mobile: Dict[str, str]) -> str:
    return lines(css_rule(ctx.kebab_name, decl), "", media_block(ctx.kebab_name, mobile))


def _button(ctx: SnippetContext) -> Dict[str, str]:
    label = ctx.value("children", ctx.value("label", "Button"))
    variant = ctx.value("variant", "primary")
    disabled = " disabled" if ctx.value("disabled") else ""
    return {
        "styles": _styles(
            ctx,
            {
                "display": "inline-flex",
                "align-items": "center",
                "padding": "0.5rem 1rem",
                "border-radius": "4px",
                "cursor": "pointer",
            },
            {"width": "100%"},
        ),
        "body": (
            f'<button class="{ctx.kebab_name} {ctx.kebab_name}--{text(variant)}" '
            f'id="{ctx.kebab_name}"{disabled}>{text(label)}</button>'
        ),
        "script": lines(
            f"document.getElementById('{ctx.kebab_name}').addEventListener('click', function (event) {{",
            f"  console.log('{ctx.component_name} clicked', event);",
            "});",
        ),
    }


def _input(ctx: SnippetContext) -> Dict[str, str]:
    placeholder = text(ctx.value("placeholder", ""))
    attrs = [f'type="{text(ctx.value("type", "text"))}"', f'placeholder="{placeholder}"']
    if ctx.value("disabled"):
        attrs.append("disabled")
    if ctx.value("required"):
        attrs.append("required")
    return {
        "styles": _styles(
            ctx,
            {"display": "block", "width": "100%", "padding": "0.5rem", "box-sizing": "border-box"},
            {"font-size": "1rem"},
        ),
        "body": f'<input class="{ctx.kebab_name}" id="{ctx.kebab_name}" {" ".join(attrs)}>',
        "script": lines(
            f"document.getElementById('{ctx.kebab_name}').addEventListener('input', function (event) {{",
            f"  console.log('{ctx.component_name} value', event.target.value);",
            "});",
        ),
    }


def _card(ctx: SnippetContext) -> Dict[str, str]:
    radius = ctx.value("borderRadius", 8)
    elevation = ctx.value("elevation", 1) or 0
    body = [f'<div class="{ctx.kebab_name}">']
    if ctx.value("withHeader", True):
        body.append(f'  <div class="{ctx.kebab_name}__header">{text(ctx.mapping.source_name)}</div>')
    body.append(f'  <div class="{ctx.kebab_name}__content"></div>')
    if ctx.value("withFooter", False):
        body.append(f'  <div class="{ctx.kebab_name}__footer"></div>')
    body.append("</div>")
    return {
        "styles": _styles(
            ctx,
            {
                "display": "flex",
                "flex-direction": "column",
                "border-radius": f"{radius}px",
                "box-shadow": f"0 {elevation}px {elevation * 2}px rgba(0, 0, 0, 0.15)",
            },
            {"border-radius": "0"},
        ),
        "body": lines(*body),
        "script": "",
    }


def _navigation(ctx: SnippetContext) -> Dict[str, str]:
    vertical = ctx.value("orientation") == "vertical"
    return {
        "styles": _styles(
            ctx,
            {"display": "flex", "flex-direction": "column" if vertical else "row", "gap": "1rem"},
            {"flex-direction": "column"},
        ),
        "body": lines(
            f'<nav class="{ctx.kebab_name}" id="{ctx.kebab_name}">',
            '  <a href="#" class="active">Home</a>',
            '  <a href="#">About</a>',
            '  <a href="#">Contact</a>',
            "</nav>",
        ),
        "script": lines(
            f"document.querySelectorAll('#{ctx.kebab_name} a').forEach(function (link) {{",
            "  link.addEventListener('click', function (event) {",
            "    event.preventDefault();",
            f"    document.querySelectorAll('#{ctx.kebab_name} a').forEach(function (other) {{",
            "      other.classList.remove('active');",
            "    });",
            "    link.classList.add('active');",
            "  });",
            "});",
        ),
    }


def _default(ctx: SnippetContext) -> Dict[str, str]:
    return {
        "styles": _styles(ctx, layout_declarations(ctx), {"flex-direction": "column"}),
        "body": lines(
            f'<div class="{ctx.kebab_name}">',
            f"  <!-- {text(ctx.mapping.source_name)} content -->",
            "</div>",
        ),
        "script": "",
    }


SNIPPETS = {
    "button": _button,
    "input": _input,
    "card": _card,
    "navigation": _navigation,
    "default": _default,
}


def component_slots(ctx: SnippetContext) -> Dict[str, str]:
    slots = SNIPPETS.get(ctx.archetype, _default)(ctx)
    slots["title"] = text(ctx.mapping.source_name or ctx.component_name)
    return slots


def layout_slots(ctx: LayoutContext) -> Dict[str, str]:
    sections = [
        f'<section class="{e.kebab_name}"><!-- {text(e.name)} --></section>' for e in ctx.entries
    ]
    return {
        "title": "Layout",
        "styles": lines(
            css_rule("layout", {"display": "flex", "flex-direction": "column", "gap": "1rem"}),
            "",
            media_block("layout", {"gap": "0.5rem"}),
        ),
        "body": lines('<div class="layout">', *(f"  {s}" for s in sections), "</div>"),
        "script": "",
    }
