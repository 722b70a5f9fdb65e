"""
程式碼樣板 — 具名 slot 替換

`{{slot}}` 只做一次替換，填入的內容不會再被掃描；Vue/Angular 的 `{{ expr }}`（含空白）不是 slot。
獨佔一行的 slot 會把多行內容縮排到 slot 所在欄位；內容為空時整行移除。
"""

import re
from typing import Dict, Mapping, Tuple

from .errors import UnsupportedFrameworkError

_SLOT = re.compile(r"\{\{(\w+)\}\}")
_STANDALONE_SLOT = re.compile(r"([ \t]*)\{\{(\w+)\}\}[ \t]*")

FRAMEWORKS = ("react", "vue", "angular", "html")


class Template:
    """不可變的具名 slot 樣板."""

    def __init__(self, name: str, text: str):
        self._name = name
        self._text = text.strip("\n") + "\n"

    @property
    def name(self) -> str:
        return self._name

    @property
    def text(self) -> str:
        return self._text

    @property
    def slots(self) -> Tuple[str, ...]:
        seen = []
        for match in _SLOT.finditer(self._text):
            if match.group(1) not in seen:
                seen.append(match.group(1))
        return tuple(seen)

    def render(self, values: Mapping[str, object]) -> str:
        """填入 slot；未提供的 slot 以空字串取代."""
        out = []
        for line in self._text.split("\n"):
            standalone = _STANDALONE_SLOT.fullmatch(line)
            if standalone:
                indent, slot = standalone.groups()
                value = str(values.get(slot, "") or "")
                if not value.strip():
                    continue
                out.extend(indent + v if v.strip() else "" for v in value.split("\n"))
                continue
            out.append(_SLOT.sub(lambda m: str(values.get(m.group(1), "") or ""), line))
        return "\n".join(out)

    def __repr__(self) -> str:
        return f"Template({self._name!r}, slots={self.slots!r})"


REACT = Template("react", """
import React from 'react';
{{imports}}

/**
 * {{componentName}} component
 * {{componentDescription}}
 */
const {{componentName}} = ({
  {{props}}
}) => {
  {{hooks}}

  return (
    {{jsx}}
  );
};

export default {{componentName}};
""")

REACT_TS = Template("react-ts", """
import React from 'react';
{{imports}}

/**
 * Props for the {{componentName}} component
 */
export interface {{componentName}}Props {
  {{propsInterface}}
}

/**
 * {{componentName}} component
 * {{componentDescription}}
 */
const {{componentName}}: React.FC<{{componentName}}Props> = ({
  {{props}}
}) => {
  {{hooks}}

  return (
    {{jsx}}
  );
};

export default {{componentName}};
""")

VUE = Template("vue", """
<template>
  {{template}}
</template>

<script>
{{imports}}

export default {
  name: '{{componentName}}',
  props: {
    {{props}}
  },
  {{options}}
};
</script>

<style scoped>
{{styles}}
</style>
""")

VUE_TS = Template("vue-ts", """
<template>
  {{template}}
</template>

<script lang="ts">
import { defineComponent, PropType } from 'vue';
{{imports}}

export default defineComponent({
  name: '{{componentName}}',
  props: {
    {{props}}
  },
  {{options}}
});
</script>

<style scoped>
{{styles}}
</style>
""")

ANGULAR = Template("angular", """
import { Component, Input, Output, EventEmitter } from '@angular/core';
{{imports}}

@Component({
  selector: '{{selector}}',
  template: `
    {{template}}
  `,
  styleUrls: ['./{{kebabCaseName}}.component.css']
})
export class {{componentName}}Component {
  {{inputs}}

  {{outputs}}

  {{methods}}
}
""")

HTML = Template("html", """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{title}}</title>
  <style>
    {{styles}}
  </style>
</head>
<body>
  {{body}}

  <script>
    {{script}}
  </script>
</body>
</html>
""")

TEMPLATES: Dict[str, Template] = {
    t.name: t for t in (REACT, REACT_TS, VUE, VUE_TS, ANGULAR, HTML)
}


def template_key(framework: str, typescript: bool = False) -> str:
    if framework not in FRAMEWORKS:
        raise UnsupportedFrameworkError(f"Unsupported framework: {framework}")
    if typescript and framework in ("react", "vue"):
        return f"{framework}-ts"
    return framework


def get_template(framework: str, typescript: bool = False) -> Template:
    return TEMPLATES[template_key(framework, typescript)]
