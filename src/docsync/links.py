"""Rewrite relative markdown links to published site URLs.

Resolution order for one link, first hit wins:

1. literal rules from the manifest (``./CONFIGURATION.md`` and friends);
2. structural rules: the link target is resolved on disk and mapped from
   its position under a known source root to the page it is published as;
3. prefix rules pointing repository paths at the GitHub browser.

Anything else is left alone.
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePosixPath
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from .manifest import (
    LINK_PREFIX_REWRITES,
    LINK_REWRITES,
    MANUAL_DOCS,
    ROUTE_TABLE,
    PrefixRule,
    RootRoutes,
    manual_doc_slugs,
    site_route,
)
from .sources import Sources

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)

PathLike = Union[str, Path]


def split_link_target(url: str) -> Tuple[str, str]:
    """Split ``url`` into its path and the ``?query``/``#fragment`` suffix."""
    match = re.search(r"[?#]", url)
    if match is None:
        return url, ""
    return url[: match.start()], url[match.start():]


def is_absolute_or_special(path: str) -> bool:
    if not path:
        return True
    if path.startswith("/") or path.startswith("#"):
        return True
    return bool(_SCHEME.match(path))


def apply_literal_rewrite(url: str, rewrites: Mapping[str, str]) -> Optional[str]:
    for source, target in rewrites.items():
        if url == source:
            return target
        if url.startswith(f"{source}#") or url.startswith(f"{source}?"):
            return target + url[len(source):]
    return None


def apply_prefix_rewrite(url: str, rules: Sequence[PrefixRule]) -> Optional[str]:
    path, suffix = split_link_target(url)
    if is_absolute_or_special(path):
        return None
    normalized = path[2:] if path.startswith("./") else path
    for rule in rules:
        if not normalized.startswith(rule.match_prefix):
            continue
        remainder = normalized[len(rule.match_prefix):] if rule.strip_prefix else normalized
        return f"{rule.destination_prefix}{remainder}{suffix}"
    return None


def source_relative_path(root: Optional[PathLike], target: PathLike) -> Optional[str]:
    """Return ``target`` relative to ``root`` in posix form, if strictly inside it."""
    if root is None:
        return None
    rel = os.path.relpath(os.fspath(target), os.fspath(root)).replace("\\", "/")
    if not rel or rel == "." or rel == ".." or rel.startswith("../"):
        return None
    return rel


class LinkResolver:
    def __init__(
        self,
        sources: Sources,
        rewrites: Mapping[str, str] = LINK_REWRITES,
        prefix_rules: Sequence[PrefixRule] = LINK_PREFIX_REWRITES,
        route_table: Mapping[str, RootRoutes] = ROUTE_TABLE,
        manual_docs=MANUAL_DOCS,
    ) -> None:
        self.sources = sources
        self.rewrites = dict(rewrites)
        self.prefix_rules = tuple(prefix_rules)
        self.route_table = dict(route_table)
        self._manual: Dict[str, Tuple[str, str]] = manual_doc_slugs(manual_docs)

    def resolve(self, url: str, source_file: Optional[PathLike] = None) -> Optional[str]:
        """Return the rewritten URL, or ``None`` to leave ``url`` untouched."""
        literal = apply_literal_rewrite(url, self.rewrites)
        if literal is not None:
            return literal

        structural = self.resolve_structural(url, source_file)
        if structural is not None:
            return structural

        return apply_prefix_rewrite(url, self.prefix_rules)

    __call__ = resolve

    def resolve_structural(self, url: str, source_file: Optional[PathLike]) -> Optional[str]:
        if source_file is None:
            return None
        path, suffix = split_link_target(url)
        if is_absolute_or_special(path):
            return None
        target = os.path.normpath(os.path.join(os.path.dirname(os.fspath(source_file)), path))
        route = self.route_for(target)
        if route is None:
            return None
        return f"{route}{suffix}"

    def route_for(self, source_path: PathLike) -> Optional[str]:
        """Map a file under one of the source roots to its published route."""
        for key, routes in self.route_table.items():
            rel = source_relative_path(self.sources[key], source_path)
            if rel is None:
                continue
            route = self._route_in_root(rel, routes)
            if route is not None:
                return route
        return None

    def _route_in_root(self, rel: str, routes: RootRoutes) -> Optional[str]:
        if rel in routes.files:
            return site_route(routes.files[rel])
        if routes.manual_sections and rel in self._manual:
            section, slug = self._manual[rel]
            return site_route(section, slug)

        parts = PurePosixPath(rel)
        if len(parts.parts) < 2 or parts.suffix.lower() != ".md":
            return None
        top = parts.parts[0].lower()
        for directory, prefix in routes.subdirectories.items():
            if top == directory.lower():
                return site_route(prefix, parts.stem.lower())
        return None


__all__ = [
    "LinkResolver",
    "apply_literal_rewrite",
    "apply_prefix_rewrite",
    "is_absolute_or_special",
    "source_relative_path",
    "split_link_target",
]
