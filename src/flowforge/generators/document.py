"""Shared layout for per-server text artifacts.

A document is a '# title' line followed by one '## server' block per
server, each block holding one line per item and ending with a blank
line.
"""

from __future__ import annotations

import jinja2

_DOCUMENT_TEMPLATE = jinja2.Template("""\
# {{ title }}
{% for name, lines in sections %}

## {{ name }}
{% for line in lines %}
{{ line }}
{% endfor %}
{% endfor %}
""", trim_blocks=True)


def render_document(title: str, sections: dict[str, list[str]]) -> str:
    """Render sections in lexicographic order of their server names."""
    ordered = [(name, sections[name]) for name in sorted(sections)]
    return _DOCUMENT_TEMPLATE.render(title=title, sections=ordered)
