from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from .links import is_absolute_or_special, split_link_target
from .markdown import link_targets


@dataclass
class UnresolvedLink:
    file: str
    url: str


def is_unresolved_relative_link(url: str) -> bool:
    return not is_absolute_or_special(split_link_target(url)[0])


def _iter_markdown(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.rglob("*")):
        if path.is_file() and path.suffix in (".md", ".mdx"):
            yield path


def find_unresolved_links(directory: Path) -> List[UnresolvedLink]:
    findings: List[UnresolvedLink] = []
    for path in _iter_markdown(directory):
        rel = path.relative_to(directory).as_posix()
        for url in link_targets(path.read_text(encoding="utf-8")):
            if is_unresolved_relative_link(url):
                findings.append(UnresolvedLink(file=rel, url=url))
    return findings


def write_report(findings: List[UnresolvedLink], output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    data = [{"file": finding.file, "url": finding.url} for finding in findings]
    output.write_text(json.dumps(data, indent=2))


__all__ = ["UnresolvedLink", "find_unresolved_links", "is_unresolved_relative_link", "write_report"]
