"""Angular 片段產生器（standalone 樣板字串 + @Input / @Output）."""

from typing import Dict

from .base import LayoutContext, SnippetContext, js_literal, js_string, lines, text


def _button(ctx: SnippetContext) -> Dict[str, str]:
    label = ctx.value("children", ctx.value("label", "Button"))
    return {
        "inputs": lines(
            f"@Input() variant: 'primary' | 'secondary' | 'outline' = {js_string(ctx.value('variant', 'primary'))};",
            f"@Input() size: 'sm' | 'md' | 'lg' = {js_string(ctx.value('size', 'md'))};",
            f"@Input() label = {js_string(label)};",
            f"@Input() disabled = {js_literal(bool(ctx.value('disabled', False)))};",
        ),
        "outputs": "@Output() clicked = new EventEmitter<MouseEvent>();",
        "methods": lines(
            "onClick(event: MouseEvent): void {",
            "  if (!this.disabled) {",
            "    this.clicked.emit(event);",
            "  }",
            "}",
        ),
        "template": lines(
            "<button",
            f'  class="{ctx.kebab_name} {ctx.kebab_name}--{{{{ variant }}}} {ctx.kebab_name}--{{{{ size }}}}"',
            '  [disabled]="disabled"',
            '  (click)="onClick($event)"',
            ">",
            "  {{ label }}",
            "</button>",
        ),
    }


def _input(ctx: SnippetContext) -> Dict[str, str]:
    return {
        "inputs": lines(
            f"@Input() type = {js_string(ctx.value('type', 'text'))};",
            f"@Input() placeholder = {js_string(ctx.value('placeholder', ''))};",
            "@Input() value = '';",
            f"@Input() disabled = {js_literal(bool(ctx.value('disabled', False)))};",
            f"@Input() required = {js_literal(bool(ctx.value('required', False)))};",
        ),
        "outputs": "@Output() valueChange = new EventEmitter<string>();",
        "methods": lines(
            "onInput(event: Event): void {",
            "  this.value = (event.target as HTMLInputElement).value;",
            "  this.valueChange.emit(this.value);",
            "}",
        ),
        "template": lines(
            "<input",
            f'  class="{ctx.kebab_name}"',
            '  [type]="type"',
            '  [placeholder]="placeholder"',
            '  [value]="value"',
            '  [disabled]="disabled"',
            '  [required]="required"',
            '  (input)="onInput($event)"',
            "/>",
        ),
    }


def _card(ctx: SnippetContext) -> Dict[str, str]:
    return {
        "inputs": lines(
            "@Input() title = '';",
            f"@Input() withHeader = {js_literal(bool(ctx.value('withHeader', True)))};",
            f"@Input() withFooter = {js_literal(bool(ctx.value('withFooter', False)))};",
            f"@Input() elevation = {js_literal(ctx.value('elevation', 1))};",
        ),
        "outputs": "",
        "methods": "",
        "template": lines(
            f'<div class="{ctx.kebab_name}" [class.elevated]="elevation > 0">',
            f'  <div class="{ctx.kebab_name}__header" *ngIf="withHeader">{{{{ title }}}}</div>',
            f'  <div class="{ctx.kebab_name}__content">',
            "    <ng-content></ng-content>",
            "  </div>",
            f'  <div class="{ctx.kebab_name}__footer" *ngIf="withFooter">',
            '    <ng-content select="[footer]"></ng-content>',
            "  </div>",
            "</div>",
        ),
    }


def _navigation(ctx: SnippetContext) -> Dict[str, str]:
    orientation = ctx.value("orientation", "horizontal")
    return {
        "inputs": lines(
            "@Input() items: Array<{ id: string; label: string }> = [];",
            "@Input() activeItem: string | null = null;",
            f"@Input() orientation: 'horizontal' | 'vertical' = {js_string(orientation)};",
            f"@Input() variant = {js_string(ctx.value('variant', 'default'))};",
        ),
        "outputs": "@Output() itemClick = new EventEmitter<string>();",
        "methods": lines(
            "select(id: string): void {",
            "  this.activeItem = id;",
            "  this.itemClick.emit(id);",
            "}",
        ),
        "template": lines(
            f'<nav class="{ctx.kebab_name} {ctx.kebab_name}--{{{{ orientation }}}}">',
            "  <a",
            '    *ngFor="let item of items"',
            '    [class.active]="item.id === activeItem"',
            '    (click)="select(item.id)"',
            "  >",
            "    {{ item.label }}",
            "  </a>",
            "</nav>",
        ),
    }


def _default(ctx: SnippetContext) -> Dict[str, str]:
    return {
        "inputs": "",
        "outputs": "",
        "methods": "",
        "template": lines(
            f'<div class="{ctx.kebab_name}" style="display: flex; flex-direction: column; gap: 1rem;">',
            f"  <!-- {text(ctx.mapping.source_name)} content -->",
            "  <ng-content></ng-content>",
            "</div>",
        ),
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
    slots["imports"] = ""
    slots["componentName"] = ctx.component_name
    slots["selector"] = ctx.selector
    slots["kebabCaseName"] = ctx.kebab_name
    return slots


def layout_slots(ctx: LayoutContext) -> Dict[str, str]:
    return {
        "imports": "",
        "componentName": ctx.component_name,
        "selector": ctx.selector,
        "kebabCaseName": ctx.kebab_name,
        "inputs": "",
        "outputs": "",
        "methods": "",
        "template": lines(
            '<div class="layout" style="display: flex; flex-direction: column; gap: 1rem;">',
            *(f"  <{e.selector}></{e.selector}>" for e in ctx.entries),
            "  <ng-content></ng-content>",
            "</div>",
        ),
    }
