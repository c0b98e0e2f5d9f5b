from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from .manifest import SITE_SLUG

REQUIRED_ARTIFACTS = (
    "index.html",
    "docs/index.html",
    f"{SITE_SLUG}/index.html",
    f"{SITE_SLUG}/guides/methodology/index.html",
    f"{SITE_SLUG}/tutorial/10-advanced-process-data-api/index.html",
    "sitemap-index.xml",
)


def missing_artifacts(dist: Path, required: Sequence[str] = REQUIRED_ARTIFACTS) -> List[str]:
    return [name for name in required if not (dist / name).exists()]


__all__ = ["REQUIRED_ARTIFACTS", "missing_artifacts"]
