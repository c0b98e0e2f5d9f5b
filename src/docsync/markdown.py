"""Markdown parsing helpers built on markdown-it-py.

Documents are never re-serialized. The token stream is only used to find
where links, images, reference definitions and headings live; rewrites are
then spliced into the original text so everything else stays byte-identical.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.token import Token

_LINE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+$")
_CODE_BLOCKS = {"fence", "code_block", "html_block"}
# A link destination as written: `<...>` or a run with at most one level of parens.
_DESTINATION = r"(<(?:[^<>\r\n\\]|\\.)*>|(?:[^\s()\\]|\\.|\([^\s()\\]*\))+)"
_INLINE_DESTINATION = re.compile(r"(\]\(\s*)" + _DESTINATION)
_DEFINITION = re.compile(
    r"^( {0,3}\[(?:[^\]\\]|\\.)+\]:[ \t]*)" + _DESTINATION + r"(?=[ \t]|\r?\n|$)",
    re.MULTILINE,
)
_BACKTICKS = re.compile(r"(\\*)(`+)")

Rewrite = Callable[[str], Optional[str]]
LineRange = Tuple[int, int]


def _build_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable("table")
    # Keep destinations exactly as written: no percent-encoding, no scheme filter.
    md.normalizeLink = lambda url: url
    md.validateLink = lambda url: True
    return md


_parser = _build_parser()


@dataclass
class Heading:
    title: str
    start: int
    end: int


def split_lines(text: str) -> List[str]:
    """Split on the same line breaks markdown-it counts, keeping terminators."""
    return _LINE.findall(text)


def parse(text: str) -> Tuple[List[Token], dict]:
    env: dict = {}
    tokens = _parser.parse(text, env)
    return tokens, env


def _target(token: Token) -> Optional[str]:
    if token.type == "link_open":
        if token.markup in ("autolink", "linkify"):
            return None
        href = token.attrGet("href")
    elif token.type == "image":
        href = token.attrGet("src")
    else:
        return None
    return None if href is None else str(href)


def _iter_inline(tokens: List[Token]) -> Iterator[Tuple[Optional[LineRange], Token]]:
    # Table body cells carry no map of their own and inherit the one of their row.
    last_map: Optional[LineRange] = None
    for block in tokens:
        if block.map is not None:
            last_map = (block.map[0], block.map[1])
        if block.type == "inline" and block.children:
            yield last_map, block


def iter_link_nodes(tokens: List[Token]) -> Iterator[Tuple[Optional[LineRange], Token, str]]:
    """Yield ``(lines, node, url)`` for every link and image in the document.

    ``lines`` is the source line range of the enclosing block.
    """
    for lines_range, block in _iter_inline(tokens):
        for node in block.children or ():
            url = _target(node)
            if url is not None:
                yield lines_range, node, url


def link_targets(text: str) -> List[str]:
    """All link, image and reference definition targets, in document order."""
    tokens, env = parse(text)
    targets = [url for _, _, url in iter_link_nodes(tokens)]
    # Definitions already reached through a reference link are not repeated.
    seen = set(targets)
    targets.extend(
        ref["href"] for ref in env.get("references", {}).values() if ref["href"] not in seen
    )
    return targets


def first_heading(text: str, level: int = 1) -> Optional[Heading]:
    """Return the first ATX heading of ``level``; code blocks never count."""
    tokens, _ = parse(text)
    tag = f"h{level}"
    for index, token in enumerate(tokens):
        if token.type != "heading_open" or token.tag != tag or not token.markup.startswith("#"):
            continue
        if token.map is None:
            continue
        inline = tokens[index + 1]
        return Heading(title=inline.content.strip(), start=token.map[0], end=token.map[1])
    return None


def _code_lines(tokens: List[Token]) -> Set[int]:
    lines: Set[int] = set()
    for token in tokens:
        if token.type in _CODE_BLOCKS and token.map is not None:
            lines.update(range(token.map[0], token.map[1]))
    return lines


def _code_spans(chunk: str) -> List[Tuple[int, int]]:
    """Character ranges of the backtick code spans in ``chunk``."""
    spans: List[Tuple[int, int]] = []
    pos = 0
    while True:
        opener = _BACKTICKS.search(chunk, pos)
        if opener is None:
            return spans
        start, ticks = opener.start(2), opener.group(2)
        # An odd run of backslashes escapes the first backtick.
        if len(opener.group(1)) % 2:
            start, ticks = start + 1, ticks[1:]
        pos = opener.end()
        if not ticks:
            continue
        closer = re.compile(r"(?<!`)%s(?!`)" % ticks).search(chunk, pos)
        if closer is not None:
            spans.append((start, closer.end()))
            pos = closer.end()


def _splice(match: re.Match, mapping: Mapping[str, str], code: Sequence[Tuple[int, int]] = ()) -> str:
    if any(start <= match.start() < end for start, end in code):
        return match.group(0)
    raw = match.group(2)
    angle = raw.startswith("<") and raw.endswith(">")
    # markdown-it reports destinations with escapes and entities decoded.
    replacement = mapping.get(unescapeAll(raw[1:-1] if angle else raw))
    if replacement is None:
        return match.group(0)
    return match.group(1) + (f"<{replacement}>" if angle else replacement)


def rewrite_link_targets(text: str, rewrite: Rewrite) -> str:
    """Pass every link/image target through ``rewrite`` and splice in the results.

    ``rewrite`` returns the new target or ``None`` to keep the original.
    """
    tokens, env = parse(text)
    lines = split_lines(text)

    with_code: Set[LineRange] = {
        lines_range
        for lines_range, block in _iter_inline(tokens)
        if lines_range is not None and any(child.type == "code_inline" for child in block.children or ())
    }
    by_block: Dict[LineRange, Dict[str, str]] = {}
    for lines_range, _, url in iter_link_nodes(tokens):
        if lines_range is None:
            continue
        replacement = rewrite(url)
        if replacement is not None and replacement != url:
            by_block.setdefault(lines_range, {})[url] = replacement

    for (start, end), mapping in by_block.items():
        chunk = "".join(lines[start:end])
        code = _code_spans(chunk) if (start, end) in with_code else []
        lines[start] = _INLINE_DESTINATION.sub(lambda m: _splice(m, mapping, code), chunk)
        for index in range(start + 1, min(end, len(lines))):
            lines[index] = ""

    definitions: Dict[str, str] = {}
    for ref in env.get("references", {}).values():
        href = ref["href"]
        replacement = rewrite(href)
        if replacement is not None and replacement != href:
            definitions[href] = replacement
    if definitions:
        skip = _code_lines(tokens)
        for index, line in enumerate(lines):
            if index in skip or "]:" not in line:
                continue
            lines[index] = _DEFINITION.sub(lambda m: _splice(m, definitions), line)

    return "".join(lines)


__all__ = [
    "Heading",
    "first_heading",
    "iter_link_nodes",
    "link_targets",
    "parse",
    "rewrite_link_targets",
    "split_lines",
]
