"""Vue 片段產生器（Options API，JS / TS）."""

from typing import Dict

from .base import (
    LayoutContext,
    SnippetContext,
    css_rule,
    js_literal,
    js_string,
    layout_declarations,
    lines,
    media_block,
)
from ..naming_engine import to_kebab_case


def _prop(name: str, kind: str, default, ts_type: str = "", typescript: bool = False) -> str:
    type_expr = f"{kind} as PropType<{ts_type}>" if typescript and ts_type else kind
    return f"{name}: {{ type: {type_expr}, default: {default} }},"


def _components(ctx: SnippetContext, *parts: str) -> str:
    names = [ctx.library_name] + [ctx.part(p) for p in parts]
    return f"components: {{ {', '.join(names)} }},"


def _responsive_styles(ctx: SnippetContext, decl: Dict[str, str], mobile: Dict[str, str]) -> str:
    return lines(css_rule(ctx.kebab_name, decl), "", media_block(ctx.kebab_name, mobile))


def _button(ctx: SnippetContext) -> Dict[str, str]:
    ts = ctx.typescript
    label = ctx.value("children", ctx.value("label", "Button"))
    event_arg = "event: MouseEvent" if ts else "event"
    return {
        "imports": ctx.library_import(),
        "props": lines(
            _prop("variant", "String", js_string(ctx.value("variant", "primary")),
                  "'primary' | 'secondary' | 'outline'", ts),
            _prop("size", "String", js_string(ctx.value("size", "md")), "'sm' | 'md' | 'lg'", ts),
            _prop("label", "String", js_string(label)),
            _prop("disabled", "Boolean", js_literal(bool(ctx.value("disabled", False)))),
        ),
        "options": lines(
            _components(ctx),
            "emits: ['click'],",
            "methods: {",
            f"  handleClick({event_arg}) {{",
            "    if (!this.disabled) {",
            "      this.$emit('click', event);",
            "    }",
            "  }",
            "}",
        ),
        "template": lines(
            f"<{ctx.library_name}",
            f'  class="{ctx.kebab_name}"',
            '  :variant="variant"',
            '  :size="size"',
            '  :disabled="disabled"',
            '  @click="handleClick"',
            ">",
            "  {{ label }}",
            f"</{ctx.library_name}>",
        ),
        "styles": _responsive_styles(
            ctx,
            {"display": "inline-flex", "align-items": "center", "justify-content": "center"},
            {"width": "100%"},
        ),
    }


def _input(ctx: SnippetContext) -> Dict[str, str]:
    value_arg = "value: string" if ctx.typescript else "value"
    return {
        "imports": ctx.library_import(),
        "props": lines(
            _prop("type", "String", js_string(ctx.value("type", "text"))),
            _prop("placeholder", "String", js_string(ctx.value("placeholder", ""))),
            _prop("modelValue", "String", "''"),
            _prop("disabled", "Boolean", js_literal(bool(ctx.value("disabled", False)))),
            _prop("required", "Boolean", js_literal(bool(ctx.value("required", False)))),
        ),
        "options": lines(
            _components(ctx),
            "emits: ['update:modelValue'],",
            "methods: {",
            f"  onInput({value_arg}) {{",
            "    this.$emit('update:modelValue', value);",
            "  }",
            "}",
        ),
        "template": lines(
            f"<{ctx.library_name}",
            f'  class="{ctx.kebab_name}"',
            '  :type="type"',
            '  :placeholder="placeholder"',
            '  :model-value="modelValue"',
            '  :disabled="disabled"',
            '  :required="required"',
            '  @update:model-value="onInput"',
            "/>",
        ),
        "styles": _responsive_styles(ctx, {"display": "block", "width": "100%"}, {"font-size": "1rem"}),
    }


def _card(ctx: SnippetContext) -> Dict[str, str]:
    radius = ctx.value("borderRadius", 8)
    return {
        "imports": ctx.library_import("Header", "Content", "Footer"),
        "props": lines(
            _prop("title", "String", "''"),
            _prop("withHeader", "Boolean", js_literal(bool(ctx.value("withHeader", True)))),
            _prop("withFooter", "Boolean", js_literal(bool(ctx.value("withFooter", False)))),
            _prop("elevation", "Number", js_literal(ctx.value("elevation", 1))),
        ),
        "options": _components(ctx, "Header", "Content", "Footer"),
        "template": lines(
            f'<{ctx.library_name} class="{ctx.kebab_name}" :elevation="elevation">',
            f'  <{ctx.part("Header")} v-if="withHeader">',
            '    <slot name="header">{{ title }}</slot>',
            f'  </{ctx.part("Header")}>',
            f'  <{ctx.part("Content")}>',
            "    <slot />",
            f'  </{ctx.part("Content")}>',
            f'  <{ctx.part("Footer")} v-if="withFooter">',
            '    <slot name="footer" />',
            f'  </{ctx.part("Footer")}>',
            f"</{ctx.library_name}>",
        ),
        "styles": _responsive_styles(
            ctx,
            {"display": "flex", "flex-direction": "column", "border-radius": f"{radius}px"},
            {"border-radius": "0"},
        ),
    }


def _navigation(ctx: SnippetContext) -> Dict[str, str]:
    ts = ctx.typescript
    items_default = "() => []"
    id_arg = "id: string" if ts else "id"
    return {
        "imports": ctx.library_import("Item"),
        "props": lines(
            _prop("items", "Array", items_default, "Array<{ id: string; label: string }>", ts),
            _prop("activeItem", "String", "null"),
            _prop("orientation", "String", js_string(ctx.value("orientation", "horizontal"))),
            _prop("variant", "String", js_string(ctx.value("variant", "default"))),
        ),
        "options": lines(
            _components(ctx, "Item"),
            "emits: ['item-click'],",
            "data() {",
            "  return { active: this.activeItem };",
            "},",
            "watch: {",
            "  activeItem(value) {",
            "    this.active = value;",
            "  }",
            "},",
            "methods: {",
            f"  select({id_arg}) {{",
            "    this.active = id;",
            "    this.$emit('item-click', id);",
            "  }",
            "}",
        ),
        "template": lines(
            f'<{ctx.library_name} class="{ctx.kebab_name}" :orientation="orientation" :variant="variant">',
            f"  <{ctx.part('Item')}",
            '    v-for="item in items"',
            '    :key="item.id"',
            '    :active="item.id === active"',
            '    @click="select(item.id)"',
            "  >",
            "    {{ item.label }}",
            f"  </{ctx.part('Item')}>",
            f"</{ctx.library_name}>",
        ),
        "styles": _responsive_styles(
            ctx,
            {"display": "flex", "flex-direction": "column" if ctx.value("orientation") == "vertical" else "row"},
            {"flex-direction": "column"},
        ),
    }


def _default(ctx: SnippetContext) -> Dict[str, str]:
    return {
        "template": lines(f'<div class="{ctx.kebab_name}">', "  <slot />", "</div>"),
        "styles": _responsive_styles(ctx, layout_declarations(ctx), {"flex-direction": "column"}),
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
    for key in ("imports", "props", "options"):
        slots.setdefault(key, "")
    slots["componentName"] = ctx.component_name
    return slots


def layout_slots(ctx: LayoutContext) -> Dict[str, str]:
    names = [e.component_name for e in ctx.entries]
    return {
        "componentName": ctx.component_name,
        "imports": lines(*(f"import {e.component_name} from './{e.file_stem}.vue';" for e in ctx.entries)),
        "props": "",
        "options": f"components: {{ {', '.join(names)} }}," if names else "",
        "template": lines(
            '<div class="layout">',
            *(f"  <{to_kebab_case(name)} />" for name in names),
            "  <slot />",
            "</div>",
        ),
        "styles": lines(
            css_rule("layout", {"display": "flex", "flex-direction": "column", "gap": "1rem"}),
            "",
            media_block("layout", {"gap": "0.5rem"}),
        ),
    }
