"""Shared documentation manifest for the delivery-process docs tree.

Section structure, source locations and link rules live here only; the
sync pipeline and the link resolver derive everything else from these tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

SITE_SLUG = "delivery-process"
REPO_URL = "https://github.com/libar-dev/delivery-process"
REPO_BLOB = f"{REPO_URL}/blob/main/"
DOCS_TARGET = f"src/content/docs/{SITE_SLUG}"


@dataclass(frozen=True)
class ManualDoc:
    source: str
    slug: str
    order: int


@dataclass(frozen=True)
class Section:
    label: str
    directory: str


@dataclass(frozen=True)
class SourceSpec:
    key: str
    label: str
    local: str
    ci: str
    packaged: Optional[str] = None
    env_var: Optional[str] = None


@dataclass(frozen=True)
class RequiredFile:
    key: str
    relative_path: str
    label: str


@dataclass(frozen=True)
class PrefixRule:
    match_prefix: str
    destination_prefix: str
    strip_prefix: bool = False


@dataclass(frozen=True)
class RootRoutes:
    """Structural route table for one source root.

    ``files`` maps a root-relative path to route segments, ``subdirectories``
    maps a top-level directory name to the route its pages live under. When
    ``manual_sections`` is set, manual docs from the manifest resolve too.
    """

    files: Mapping[str, str] = field(default_factory=dict)
    subdirectories: Mapping[str, str] = field(default_factory=dict)
    manual_sections: bool = False


MANUAL_DOCS: Dict[str, Tuple[ManualDoc, ...]] = {
    "guides": (
        ManualDoc("METHODOLOGY.md", "methodology", 1),
        ManualDoc("CONFIGURATION.md", "configuration", 2),
        ManualDoc("SESSION-GUIDES.md", "session-guides", 3),
        ManualDoc("GHERKIN-PATTERNS.md", "gherkin-patterns", 4),
        ManualDoc("ANNOTATION-GUIDE.md", "annotation-guide", 5),
        ManualDoc("PUBLISHING.md", "publishing", 6),
    ),
    "reference": (
        ManualDoc("ARCHITECTURE.md", "architecture", 1),
        ManualDoc("PROCESS-API.md", "process-api", 2),
        ManualDoc("PROCESS-GUARD.md", "process-guard", 3),
        ManualDoc("VALIDATION.md", "validation", 4),
        ManualDoc("TAXONOMY.md", "taxonomy", 5),
    ),
}

SECTIONS: Tuple[Section, ...] = (
    Section("Tutorial", "tutorial"),
    Section("Guides", "guides"),
    Section("Reference", "reference"),
    Section("Product Areas", "product-areas"),
    Section("Architecture Decisions", "decisions"),
    Section("Generated Reference", "generated"),
)

SYNC_SUBDIRS: Tuple[str, ...] = tuple(section.directory for section in SECTIONS)

_PACKAGE = "node_modules/@libar-dev/delivery-process"

SOURCE_SPECS: Tuple[SourceSpec, ...] = (
    SourceSpec(
        "docs",
        "delivery-process/docs",
        "../delivery-process/docs",
        "./delivery-process/docs",
        f"{_PACKAGE}/docs",
        "SYNC_SOURCE_DOCS",
    ),
    SourceSpec(
        "docs-live",
        "delivery-process/docs-live",
        "../delivery-process/docs-live",
        "./delivery-process/docs-live",
        f"{_PACKAGE}/docs-live",
        "SYNC_SOURCE_DOCS_LIVE",
    ),
    SourceSpec(
        "docs-generated",
        "delivery-process/docs-generated",
        "../delivery-process/docs-generated",
        "./delivery-process/docs-generated",
        f"{_PACKAGE}/docs-generated",
        "SYNC_SOURCE_DOCS_GENERATED",
    ),
    SourceSpec(
        "tutorial",
        "delivery-process-tutorials/TUTORIAL-ARTICLE-v1.md",
        "../delivery-process-tutorials/TUTORIAL-ARTICLE-v1.md",
        "./delivery-process-tutorials/TUTORIAL-ARTICLE-v1.md",
        None,
        "SYNC_SOURCE_TUTORIAL",
    ),
)

SOURCE_LABELS: Dict[str, str] = {spec.key: spec.label for spec in SOURCE_SPECS}


def _required(key: str, relative_path: str) -> RequiredFile:
    return RequiredFile(key, relative_path, f"{SOURCE_LABELS[key]}/{relative_path}")


REQUIRED_SOURCE_FILES: Tuple[RequiredFile, ...] = (
    *(_required("docs", doc.source) for doc in MANUAL_DOCS["guides"]),
    *(_required("docs", doc.source) for doc in MANUAL_DOCS["reference"]),
    _required("docs-live", "PRODUCT-AREAS.md"),
    _required("docs-live", "DECISIONS.md"),
    _required("docs-generated", "BUSINESS-RULES.md"),
    _required("docs-generated", "TAXONOMY.md"),
)

ROUTE_TABLE: Dict[str, RootRoutes] = {
    "docs": RootRoutes(
        files={"INDEX.md": "", "README.md": "getting-started"},
        manual_sections=True,
    ),
    "docs-live": RootRoutes(
        files={"PRODUCT-AREAS.md": "product-areas", "DECISIONS.md": "decisions"},
        subdirectories={"product-areas": "product-areas", "decisions": "decisions"},
    ),
    "docs-generated": RootRoutes(
        files={
            "BUSINESS-RULES.md": "generated/business-rules",
            "TAXONOMY.md": "generated/taxonomy",
            "docs/REFERENCE-SAMPLE.md": "generated/reference-sample",
        },
        subdirectories={
            "business-rules": "generated/business-rules",
            "taxonomy": "generated/taxonomy",
        },
    ),
}

EXTRA_LINK_REWRITES: Dict[str, str] = {
    "./INDEX.md": f"/{SITE_SLUG}/",
    "../README.md": f"/{SITE_SLUG}/getting-started/",
    "../CHANGELOG.md": f"{REPO_BLOB}CHANGELOG.md",
    "../SECURITY.md": f"{REPO_BLOB}SECURITY.md",
    "../CLAUDE.md": f"{REPO_BLOB}CLAUDE.md",
    "../src/taxonomy/": f"{REPO_URL}/tree/main/src/taxonomy/",
    "../tests/features/validation/fsm-validator.feature": (
        f"{REPO_BLOB}tests/features/validation/fsm-validator.feature"
    ),
    "../tests/features/behavior/session-handoffs.feature": (
        f"{REPO_BLOB}tests/features/behavior/session-handoffs.feature"
    ),
}

# Source paths like `delivery-process/specs/...` map to repo-root `specs/...`.
LINK_PREFIX_REWRITES: Tuple[PrefixRule, ...] = (
    PrefixRule("delivery-process/", REPO_BLOB, strip_prefix=True),
    PrefixRule("src/", REPO_BLOB),
    PrefixRule("tests/", REPO_BLOB),
    PrefixRule("specs/", REPO_BLOB),
    PrefixRule("decisions/", REPO_BLOB),
)


def site_route(*segments: str) -> str:
    """Return the canonical site URL for route segments below the site slug."""
    parts = [SITE_SLUG] + [seg.strip("/") for seg in segments if seg and seg.strip("/")]
    return "/" + "/".join(parts) + "/"


def manual_doc_slugs(
    manual_docs: Mapping[str, Tuple[ManualDoc, ...]] = MANUAL_DOCS,
) -> Dict[str, Tuple[str, str]]:
    """Map each manual source file name to its ``(section, slug)``."""
    return {
        doc.source: (section, doc.slug)
        for section, docs in manual_docs.items()
        for doc in docs
    }


def derive_link_rewrites(
    manual_docs: Mapping[str, Tuple[ManualDoc, ...]] = MANUAL_DOCS,
    extra: Mapping[str, str] = EXTRA_LINK_REWRITES,
) -> Dict[str, str]:
    """Build the literal link table from the manual docs plus fixed extras."""
    rewrites = {
        f"./{source}": site_route(section, slug)
        for source, (section, slug) in manual_doc_slugs(manual_docs).items()
    }
    rewrites.update(extra)
    return rewrites


LINK_REWRITES: Dict[str, str] = derive_link_rewrites()


__all__ = [
    "DOCS_TARGET",
    "EXTRA_LINK_REWRITES",
    "LINK_PREFIX_REWRITES",
    "LINK_REWRITES",
    "MANUAL_DOCS",
    "ManualDoc",
    "PrefixRule",
    "REQUIRED_SOURCE_FILES",
    "ROUTE_TABLE",
    "RequiredFile",
    "RootRoutes",
    "SECTIONS",
    "SITE_SLUG",
    "SOURCE_LABELS",
    "SOURCE_SPECS",
    "SYNC_SUBDIRS",
    "Section",
    "SourceSpec",
    "derive_link_rewrites",
    "manual_doc_slugs",
    "site_route",
]
