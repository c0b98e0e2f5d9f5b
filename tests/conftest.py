from __future__ import annotations

import dataclasses
import pathlib

import pytest

from docsync.config import SyncConfig
from docsync.manifest import MANUAL_DOCS

TUTORIAL = (
    "# Tutorial\n"
    "\n"
    "Intro text.\n"
    "\n"
    "## Part 1: Setup\n"
    "\n"
    "Step one. Read the [configuration guide](../delivery-process/docs/CONFIGURATION.md#presets).\n"
    "\n"
    "## Part 2: Build\n"
    "\n"
    "Step two.\n"
)

METHODOLOGY = """\
# Methodology

Start with [config](./CONFIGURATION.md) and the [taxonomy](./TAXONOMY.md#levels).

See the [README](../README.md), the [index](./INDEX.md) and the
[core area](../docs-live/product-areas/CORE.md).

Specs live in [the repo](delivery-process/specs/process.feature).
External [docs](https://example.com/guide) stay as they are.

```markdown
[not a link](./CONFIGURATION.md)
```
"""


@dataclasses.dataclass
class SourceTree:
    root: pathlib.Path
    upstream: pathlib.Path
    docs: pathlib.Path
    docs_live: pathlib.Path
    docs_generated: pathlib.Path
    tutorial: pathlib.Path

    @property
    def target(self) -> pathlib.Path:
        return self.root / "src" / "content" / "docs" / "delivery-process"

    def config(self, **kwargs) -> SyncConfig:
        kwargs.setdefault("expected_tutorial_parts", 2)
        kwargs.setdefault("env", {})
        return SyncConfig.create(self.root, **kwargs)


def _write(path: pathlib.Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def source_tree(tmp_path: pathlib.Path) -> SourceTree:
    """Local sibling layout: ``../delivery-process`` next to the site root."""
    root = tmp_path / "site"
    root.mkdir()
    upstream = tmp_path / "delivery-process"
    docs = upstream / "docs"
    docs_live = upstream / "docs-live"
    docs_generated = upstream / "docs-generated"
    tutorial = tmp_path / "delivery-process-tutorials" / "TUTORIAL-ARTICLE-v1.md"

    for entries in MANUAL_DOCS.values():
        for entry in entries:
            _write(docs / entry.source, f"# {entry.slug.title()}\n\nBody of {entry.source}.\n")
    _write(docs / "METHODOLOGY.md", METHODOLOGY)
    _write(docs / "INDEX.md", "# Index\n")

    _write(docs_live / "PRODUCT-AREAS.md", "# Product Areas\n\n- [Core](product-areas/CORE.md)\n")
    _write(docs_live / "product-areas" / "CORE.md", "# Core\n\nBack to [areas](../PRODUCT-AREAS.md).\n")
    _write(docs_live / "product-areas" / "ANNOTATION.md", "# Annotation\n\nSee [Core](./CORE.md#rules).\n")
    _write(docs_live / "DECISIONS.md", "# Decisions\n\n- [ADR 1](decisions/ADR-001-sessions.md)\n")
    _write(docs_live / "decisions" / "ADR-001-sessions.md", "# ADR 1\n\n[Index](../DECISIONS.md)\n")

    _write(docs_generated / "BUSINESS-RULES.md", "# Business Rules\n\n[Core rules](business-rules/core.md)\n")
    _write(docs_generated / "business-rules" / "core.md", "# Core Rules\n")
    _write(docs_generated / "TAXONOMY.md", "# Taxonomy\n\n[Status](taxonomy/status.md)\n")
    _write(docs_generated / "taxonomy" / "status.md", "# Status\n")
    _write(
        docs_generated / "docs" / "REFERENCE-SAMPLE.md",
        "# Reference Sample\n\nBuilt by [factory](src/config/factory.ts).\n",
    )

    _write(tutorial, TUTORIAL)

    return SourceTree(root, upstream, docs, docs_live, docs_generated, tutorial)
