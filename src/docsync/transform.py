from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional, Union

from .markdown import first_heading, rewrite_link_targets, split_lines

UNTITLED = "Untitled"

PathLike = Union[str, Path]
Resolver = Callable[[str, Optional[PathLike]], Optional[str]]


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def extract_title(text: str) -> str:
    heading = first_heading(text)
    return heading.title if heading else UNTITLED


def strip_first_heading(text: str) -> str:
    """Drop the first top-level heading and the blank lines right after it."""
    heading = first_heading(text)
    if heading is None:
        return text
    lines = split_lines(text)
    end = heading.end
    while end < len(lines) and not lines[end].strip():
        end += 1
    return "".join(lines[: heading.start] + lines[end:])


def build_front_matter(
    title: str,
    description: Optional[str] = None,
    sidebar_order: Optional[int] = None,
    sidebar_label: Optional[str] = None,
    edit_url: bool = True,
) -> str:
    lines = ["---", f"title: {_quote(title)}"]
    if description:
        lines.append(f"description: {_quote(description)}")
    if sidebar_order is not None or sidebar_label:
        lines.append("sidebar:")
        if sidebar_label:
            lines.append(f"  label: {_quote(sidebar_label)}")
        if sidebar_order is not None:
            lines.append(f"  order: {sidebar_order}")
    if not edit_url:
        lines.append("editUrl: false")
    lines.append("---")
    return "\n".join(lines) + "\n\n"


def transform(
    text: str,
    *,
    source_file: Optional[PathLike] = None,
    resolver: Optional[Resolver] = None,
    description: Optional[str] = None,
    sidebar_order: Optional[int] = None,
    sidebar_label: Optional[str] = None,
    edit_url: bool = True,
) -> str:
    """Turn a source markdown document into a published page with front matter."""
    title = extract_title(text)
    body = strip_first_heading(text)
    if resolver is not None:
        body = rewrite_link_targets(body, lambda url: resolver(url, source_file))

    body = body.lstrip("\r\n").rstrip()
    front_matter = build_front_matter(title, description, sidebar_order, sidebar_label, edit_url)
    return front_matter + (body + "\n" if body else "")


__all__ = [
    "UNTITLED",
    "build_front_matter",
    "extract_title",
    "strip_first_heading",
    "transform",
]
