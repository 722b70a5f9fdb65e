"""React 片段產生器（JSX / TSX）."""

from typing import Dict

from .base import LayoutContext, SnippetContext, js_literal, js_string, layout_declarations, lines

INDEX_SIGNATURE = "[key: string]: unknown;"


def _button(ctx: SnippetContext) -> Dict[str, str]:
    label = ctx.value("children", ctx.value("label", "Button"))
    return {
        "imports": ctx.library_import(),
        "props": lines(
            f"variant = {js_string(ctx.value('variant', 'primary'))},",
            f"size = {js_string(ctx.value('size', 'md'))},",
            f"label = {js_string(label)},",
            "onClick,",
            f"disabled = {js_literal(bool(ctx.value('disabled', False)))},",
            "...rest",
        ),
        "propsInterface": lines(
            "/** Visual variant */",
            "variant?: 'primary' | 'secondary' | 'outline';",
            "/** Button size */",
            "size?: 'sm' | 'md' | 'lg';",
            "/** Button label */",
            "label?: string;",
            "/** Click handler */",
            "onClick?: () => void;",
            "/** Whether the button is disabled */",
            "disabled?: boolean;",
            INDEX_SIGNATURE,
        ),
        "jsx": lines(
            f"<{ctx.library_name}",
            "  variant={variant}",
            "  size={size}",
            "  disabled={disabled}",
            "  onClick={onClick}",
            "  {...rest}",
            ">",
            "  {label}",
            f"</{ctx.library_name}>",
        ),
    }


def _input(ctx: SnippetContext) -> Dict[str, str]:
    change_type = "(e: React.ChangeEvent<HTMLInputElement>) => void"
    return {
        "imports": ctx.library_import(),
        "props": lines(
            f"type = {js_string(ctx.value('type', 'text'))},",
            f"placeholder = {js_string(ctx.value('placeholder', ''))},",
            "value = '',",
            "onChange,",
            f"disabled = {js_literal(bool(ctx.value('disabled', False)))},",
            f"required = {js_literal(bool(ctx.value('required', False)))},",
            "...rest",
        ),
        "propsInterface": lines(
            "/** Input type */",
            "type?: string;",
            "/** Placeholder text */",
            "placeholder?: string;",
            "/** Current value */",
            "value?: string;",
            "/** Change handler */",
            f"onChange?: {change_type};",
            "/** Whether the input is disabled */",
            "disabled?: boolean;",
            "/** Whether the input is required */",
            "required?: boolean;",
            INDEX_SIGNATURE,
        ),
        "hooks": lines(
            "// Controlled usage:",
            "// const [inputValue, setInputValue] = React.useState(value);",
        ),
        "jsx": lines(
            f"<{ctx.library_name}",
            "  type={type}",
            "  placeholder={placeholder}",
            "  value={value}",
            "  onChange={onChange}",
            "  disabled={disabled}",
            "  required={required}",
            "  {...rest}",
            "/>",
        ),
    }


def _card(ctx: SnippetContext) -> Dict[str, str]:
    with_header = ctx.value("withHeader", True)
    with_footer = ctx.value("withFooter", True)
    parts = ["Content"]
    body = [f"<{ctx.library_name} elevation={{elevation}} {{...rest}}>"]
    if with_header:
        parts.insert(0, "Header")
        body.append(f"  {{title && <{ctx.part('Header')}>{{title}}</{ctx.part('Header')}>}}")
    body.extend([
        f"  <{ctx.part('Content')}>",
        "    {content}",
        f"  </{ctx.part('Content')}>",
    ])
    if with_footer:
        parts.append("Footer")
        body.append(f"  {{footer && <{ctx.part('Footer')}>{{footer}}</{ctx.part('Footer')}>}}")
    body.append(f"</{ctx.library_name}>")
    return {
        "imports": ctx.library_import(*parts),
        "props": lines(
            "title = '',",
            "content = null,",
            "footer = null,",
            f"elevation = {js_literal(ctx.value('elevation', 1))},",
            "...rest",
        ),
        "propsInterface": lines(
            "/** Card title */",
            "title?: string;",
            "/** Card body */",
            "content?: React.ReactNode;",
            "/** Card footer */",
            "footer?: React.ReactNode;",
            "/** Shadow level */",
            "elevation?: number;",
            INDEX_SIGNATURE,
        ),
        "jsx": lines(*body),
    }


def _navigation(ctx: SnippetContext) -> Dict[str, str]:
    id_type = ": string" if ctx.typescript else ""
    return {
        "imports": ctx.library_import("Item"),
        "props": lines(
            "items = [],",
            "activeItem = null,",
            f"orientation = {js_string(ctx.value('orientation', 'horizontal'))},",
            f"variant = {js_string(ctx.value('variant', 'default'))},",
            "onItemClick,",
            "...rest",
        ),
        "propsInterface": lines(
            "/** Navigation items */",
            "items?: Array<{ id: string; label: string }>;",
            "/** Active item id */",
            "activeItem?: string | null;",
            "/** Layout direction */",
            "orientation?: 'horizontal' | 'vertical';",
            "/** Visual variant */",
            "variant?: 'default' | 'header' | 'sidebar';",
            "/** Item click handler */",
            "onItemClick?: (id: string) => void;",
            INDEX_SIGNATURE,
        ),
        "hooks": lines(
            "const [active, setActive] = React.useState(activeItem);",
            "",
            "React.useEffect(() => {",
            "  setActive(activeItem);",
            "}, [activeItem]);",
            "",
            f"const handleItemClick = (id{id_type}) => {{",
            "  setActive(id);",
            "  if (onItemClick) {",
            "    onItemClick(id);",
            "  }",
            "};",
        ),
        "jsx": lines(
            f"<{ctx.library_name} orientation={{orientation}} variant={{variant}} {{...rest}}>",
            "  {items.map((item) => (",
            f"    <{ctx.part('Item')}",
            "      key={item.id}",
            "      active={item.id === active}",
            "      onClick={() => handleItemClick(item.id)}",
            "    >",
            "      {item.label}",
            f"    </{ctx.part('Item')}>",
            "  ))}",
            f"</{ctx.library_name}>",
        ),
    }


def _default(ctx: SnippetContext) -> Dict[str, str]:
    decl = layout_declarations(ctx)
    comment = f"  {{/* {ctx.mapping.source_name} content */}}"
    slots = {
        "props": "...props",
        "propsInterface": INDEX_SIGNATURE,
    }
    if ctx.styling == "tailwind":
        direction = "flex-row" if decl.get("flex-direction") == "row" else "flex-col"
        slots["jsx"] = lines(
            f'<div className="{ctx.kebab_name} {decl["display"]} {direction} gap-4" {{...props}}>',
            comment,
            "</div>",
        )
    elif ctx.styling == "styled":
        css = "\n".join(f"  {k}: {v};" for k, v in decl.items())
        slots["imports"] = lines(
            "import styled from 'styled-components';",
            "",
            "const Wrapper = styled.div`",
            css,
            "`;",
        )
        slots["jsx"] = lines("<Wrapper {...props}>", comment, "</Wrapper>")
    else:
        style = ", ".join(f"{_camel(k)}: {js_string(v)}" for k, v in decl.items())
        slots["jsx"] = lines(
            f'<div className="{ctx.kebab_name}" style={{{{ {style} }}}} {{...props}}>',
            comment,
            "</div>",
        )
    return slots


def _camel(css_property: str) -> str:
    head, *rest = css_property.split("-")
    return head + "".join(p.capitalize() for p in rest)


SNIPPETS = {
    "button": _button,
    "input": _input,
    "card": _card,
    "navigation": _navigation,
    "default": _default,
}


def component_slots(ctx: SnippetContext) -> Dict[str, str]:
    slots = SNIPPETS.get(ctx.archetype, _default)(ctx)
    slots.setdefault("imports", "")
    slots.setdefault("hooks", "")
    slots["componentName"] = ctx.component_name
    slots["componentDescription"] = ctx.description
    return slots


def layout_slots(ctx: LayoutContext) -> Dict[str, str]:
    imports = [f"import {e.component_name} from './{e.file_stem}';" for e in ctx.entries]
    children = [f"  <{e.component_name} />" for e in ctx.entries]
    if ctx.styling == "tailwind":
        opening = '<div className="layout flex flex-col gap-4" {...rest}>'
    else:
        opening = "<div className=\"layout\" style={{ display: 'flex', flexDirection: 'column', gap: '1rem' }} {...rest}>"
    return {
        "componentName": ctx.component_name,
        "componentDescription": "Layout that composes the generated components",
        "imports": lines(*imports),
        "props": lines("children,", "...rest"),
        "propsInterface": lines(
            "/** Extra content rendered after the generated components */",
            "children?: React.ReactNode;",
            INDEX_SIGNATURE,
        ),
        "hooks": "",
        "jsx": lines(opening, *children, "  {children}", "</div>"),
    }
