"""Split the tutorial article into one page per ``## Part N: Title`` section."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import TutorialStructureError
from .transform import Resolver, transform

PART_HEADING = re.compile(r"^## Part (\d+):\s*(.+)$")
# A level-2 heading that looks like a part heading but is not in the exact format.
# Deeper headings such as "### Part 1 recap" are ordinary content.
_PART_LIKE = re.compile(r"^##(?!#)\s*part\s*\d", re.IGNORECASE)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class TutorialPart:
    number: int
    title: str
    start: int


@dataclass(frozen=True)
class MalformedHeading:
    line_number: int
    text: str


@dataclass(frozen=True)
class Page:
    filename: str
    text: str


@dataclass
class TutorialSplit:
    introduction: Optional[Page]
    parts: List[Page]
    errors: List[str] = field(default_factory=list)

    @property
    def pages(self) -> List[Page]:
        return ([self.introduction] if self.introduction else []) + self.parts


def match_part_heading(line: str) -> Optional[re.Match]:
    """Single recognizer for tutorial part headings."""
    return PART_HEADING.match(line.rstrip("\r\n"))


def scan_parts(text: str) -> Tuple[List[TutorialPart], List[MalformedHeading]]:
    parts: List[TutorialPart] = []
    malformed: List[MalformedHeading] = []
    offset = 0
    for line_number, line in enumerate(text.splitlines(keepends=True), start=1):
        match = match_part_heading(line)
        if match:
            parts.append(TutorialPart(int(match.group(1)), match.group(2).strip(), offset))
        elif _PART_LIKE.match(line):
            malformed.append(MalformedHeading(line_number, line.strip()))
        offset += len(line)
    return parts, malformed


def find_parts(text: str) -> List[TutorialPart]:
    return scan_parts(text)[0]


def validate_parts(
    parts: List[TutorialPart],
    expected: Optional[int],
    malformed: Optional[List[MalformedHeading]] = None,
) -> List[str]:
    """Collect every structural problem instead of stopping at the first."""
    errors: List[str] = []
    if not parts:
        errors.append('no "## Part N:" headings found')
    else:
        for position, part in enumerate(parts, start=1):
            if part.number != position:
                errors.append(
                    f"part numbering is non-sequential (expected Part {position}, found Part {part.number})"
                )
                break
        if expected is not None and len(parts) != expected:
            errors.append(f"expected {expected} parts, found {len(parts)}")
    for heading in malformed or ():
        errors.append(f"malformed part heading at line {heading.line_number}: {heading.text!r}")
    return errors


def part_slug(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).rstrip("-")
    return slug or "part"


def part_filename(part: TutorialPart) -> str:
    return f"{part.number:02d}-{part_slug(part.title)}.md"


def split_tutorial(
    text: str,
    expected_parts: Optional[int],
    *,
    source_file: Optional[PathLike] = None,
    resolver: Optional[Resolver] = None,
    strict: bool = False,
) -> TutorialSplit:
    parts, malformed = scan_parts(text)
    errors = validate_parts(parts, expected_parts, malformed)
    if errors and strict:
        raise TutorialStructureError(errors)

    if not parts:
        page = Page("index.md", transform(text, source_file=source_file, resolver=resolver, sidebar_order=0))
        return TutorialSplit(introduction=page, parts=[], errors=errors)

    introduction = None
    preamble = text[: parts[0].start].strip()
    if preamble:
        introduction = Page(
            "index.md",
            transform(
                preamble,
                source_file=source_file,
                resolver=resolver,
                sidebar_order=0,
                sidebar_label="Introduction",
            ),
        )

    pages: List[Page] = []
    for index, part in enumerate(parts):
        end = parts[index + 1].start if index + 1 < len(parts) else len(text)
        content = text[part.start:end].strip()
        # Promote the marker to a top-level heading carrying just the title.
        _, _, rest = content.partition("\n")
        content = f"# {part.title}\n{rest}"
        rendered = transform(
            content,
            source_file=source_file,
            resolver=resolver,
            sidebar_order=part.number,
            sidebar_label=f"Part {part.number}: {part.title}",
        )
        pages.append(Page(part_filename(part), rendered))

    return TutorialSplit(introduction=introduction, parts=pages, errors=errors)


__all__ = [
    "MalformedHeading",
    "PART_HEADING",
    "Page",
    "TutorialPart",
    "TutorialSplit",
    "find_parts",
    "match_part_heading",
    "part_filename",
    "part_slug",
    "scan_parts",
    "split_tutorial",
    "validate_parts",
]
