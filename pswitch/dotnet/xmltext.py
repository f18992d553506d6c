"""Locate and edit MSBuild elements in raw project text.

Edits are applied to exact character spans of the original text, so
everything outside the touched element keeps its formatting, comments and
line endings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable
from xml.sax.saxutils import escape, unescape

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_ATTR_RE = re.compile(r"""([\w.:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_ENTITIES = {"&quot;": '"', "&apos;": "'"}


def _start_tag_re(tag: str) -> re.Pattern:
    return re.compile(
        r"<" + re.escape(tag) + r"""(?=[\s/>])(?P<attrs>(?:[^>"']|"[^"]*"|'[^']*')*?)(?P<close>/?)>"""
    )


@dataclass
class Element:
    """An element's span in the raw text.

    ``start``/``end`` cover the whole element, ``tag_end`` the start tag.
    """
    tag: str
    start: int
    tag_end: int
    end: int
    attributes: dict[str, str]

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def start_tag(self, source: str) -> str:
        return source[self.start:self.tag_end]


def parse_attributes(attrs: str) -> dict[str, str]:
    result = {}
    for match in _ATTR_RE.finditer(attrs):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        result[match.group(1)] = unescape(value, _ENTITIES)
    return result


def quote_attribute(value: str) -> str:
    """Escape a value for a double-quoted attribute, leaving apostrophes."""
    return escape(value, {'"': "&quot;"})


def iter_elements(text: str, tag: str):
    """Yield every ``tag`` element outside XML comments, in document order."""
    comments = [m.span() for m in _COMMENT_RE.finditer(text)]
    end_tag = f"</{tag}>"

    for match in _start_tag_re(tag).finditer(text):
        if any(s <= match.start() < e for s, e in comments):
            continue
        if match.group("close"):
            end = match.end()
        else:
            close = text.find(end_tag, match.end())
            if close < 0:
                continue
            end = close + len(end_tag)
        yield Element(
            tag=tag,
            start=match.start(),
            tag_end=match.end(),
            end=end,
            attributes=parse_attributes(match.group("attrs")),
        )


def find_element(text: str, tag: str, predicate: Callable[[Element], bool]) -> Element | None:
    """Return the first ``tag`` element matching ``predicate``."""
    return next((e for e in iter_elements(text, tag) if predicate(e)), None)


def set_attribute(start_tag: str, name: str, value: str) -> str:
    """Set an attribute on a start tag, appending it after the last one."""
    quoted = quote_attribute(value)
    existing = re.compile(r"""(\s)""" + re.escape(name) + r"""\s*=\s*(?:"[^"]*"|'[^']*')""")
    if existing.search(start_tag):
        return existing.sub(lambda m: f'{m.group(1)}{name}="{quoted}"', start_tag, count=1)

    closing = "/>" if start_tag.endswith("/>") else ">"
    body = start_tag[:-len(closing)]
    stripped = body.rstrip()
    trailing = body[len(stripped):]
    return f'{stripped} {name}="{quoted}"{trailing}{closing}'


def remove_attribute(start_tag: str, name: str) -> str:
    pattern = re.compile(r"""\s+""" + re.escape(name) + r"""\s*=\s*(?:"[^"]*"|'[^']*')""")
    return pattern.sub("", start_tag, count=1)


def render_element(tag: str, attributes: dict[str, str]) -> str:
    """Render a self-closing element, attributes in the given order."""
    attrs = "".join(f' {k}="{quote_attribute(v)}"' for k, v in attributes.items())
    return f"<{tag}{attrs} />"


def splice(text: str, edits: list[tuple[int, int, str]]) -> str:
    """Replace (start, end) spans with new text; spans must not overlap."""
    for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
        text = text[:start] + replacement + text[end:]
    return text


def line_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Widen a span to whole lines when nothing else shares them."""
    line_start = text.rfind("\n", 0, start) + 1
    if text[line_start:start].strip():
        return start, end
    newline = text.find("\n", end)
    line_end = len(text) if newline < 0 else newline + 1
    if text[end:line_end].strip():
        return start, end
    return line_start, line_end
