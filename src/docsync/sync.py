"""Build-time content pipeline for the delivery-process docs.

Copies markdown from the delivery-process package and the tutorials repo,
injects front matter, strips the H1, rewrites internal links and splits the
tutorial into its parts.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import SyncConfig
from .errors import MissingSourceFilesError, MissingSourcesError, SyncError
from .links import LinkResolver
from .manifest import MANUAL_DOCS, REQUIRED_SOURCE_FILES, SECTIONS, SOURCE_LABELS, SYNC_SUBDIRS
from .sources import Sources, resolve_sources
from .transform import transform
from .tutorial import split_tutorial

console = Console()
err_console = Console(stderr=True)

_SECTION_LABELS = {section.directory: section.label for section in SECTIONS}


@dataclass
class SyncReport:
    warnings: List[str] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def clean_dir(path: Path) -> None:
    """Remove everything inside ``path`` but keep the directory itself."""
    if not path.is_dir():
        return
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def markdown_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        (entry for entry in directory.iterdir() if entry.is_file() and entry.name.endswith(".md")),
        key=lambda entry: entry.name,
    )


class ContentSync:
    def __init__(self, config: SyncConfig, sources: Optional[Sources] = None) -> None:
        self.config = config
        self.sources = sources if sources is not None else resolve_sources(config.root, config.env)
        self.resolver = LinkResolver(self.sources)
        self.report = SyncReport()

    def log(self, message: str) -> None:
        if self.config.verbose:
            console.log(escape(message))

    def warn(self, message: str) -> None:
        self.report.warnings.append(message)
        err_console.print(f"[yellow]WARNING:[/] {escape(message)}")

    def _relative(self, path: Path) -> str:
        try:
            return f"./{path.relative_to(self.config.root).as_posix()}"
        except ValueError:
            return str(path)

    # -- validation --

    def missing_sources(self) -> List[str]:
        return [spec.label for spec in self.sources.missing()]

    def missing_source_files(self) -> List[str]:
        return [
            required.label
            for required in REQUIRED_SOURCE_FILES
            if self.sources[required.key] is not None
            and not (self.sources[required.key] / required.relative_path).exists()
        ]

    def validate_inputs(self) -> None:
        """Check roots and required files; strict mode raises once with every missing item."""
        roots = self.missing_sources()
        files = self.missing_source_files()
        if self.config.strict:
            if roots:
                raise MissingSourcesError(roots + files)
            if files:
                raise MissingSourceFilesError(files)
            return
        if roots:
            self.warn(f"Missing recommended sources: {', '.join(roots)}")
        if files:
            self.warn(f"Missing recommended source files: {', '.join(files)}")
        if roots or files:
            self.warn("Continuing because strict mode is disabled")

    # -- copying --

    def write(self, dest: Path, text: str) -> None:
        ensure_dir(dest.parent)
        dest.write_text(text, encoding="utf-8")
        self.report.written.append(dest)

    def copy_and_process(
        self,
        src: Path,
        dest: Path,
        sidebar_order: Optional[int] = None,
        sidebar_label: Optional[str] = None,
        edit_url: bool = True,
    ) -> None:
        content = src.read_text(encoding="utf-8")
        processed = transform(
            content,
            source_file=src,
            resolver=self.resolver,
            sidebar_order=sidebar_order,
            sidebar_label=sidebar_label,
            edit_url=edit_url,
        )
        self.write(dest, processed)
        self.log(f"{src.name} -> {self._relative(dest)}")

    def _copy_directory(self, src_dir: Path, dest_dir: Path, first_order: int) -> None:
        for order, src in enumerate(markdown_files(src_dir), start=first_order):
            self.copy_and_process(src, dest_dir / src.name.lower(), sidebar_order=order, edit_url=False)

    # -- sections --

    def sync_manual_docs(self) -> None:
        docs = self.sources["docs"]
        if docs is None:
            self.warn(f"{SOURCE_LABELS['docs']}/ not found, skipping manual docs")
            return

        console.print("Syncing manual docs...")
        for section, entries in MANUAL_DOCS.items():
            target_dir = self.config.target / section
            ensure_dir(target_dir)
            for entry in entries:
                src = docs / entry.source
                if not src.exists():
                    self.warn(f"{entry.source} not found")
                    continue
                self.copy_and_process(src, target_dir / f"{entry.slug}.md", sidebar_order=entry.order)

    def _sync_live_section(self, directory: str, index_name: str) -> None:
        label = _SECTION_LABELS[directory]
        live = self.sources["docs-live"]
        if live is None:
            self.warn(f"{SOURCE_LABELS['docs-live']}/ not found, skipping {label.lower()}")
            return

        console.print(f"Syncing {label.lower()}...")
        target_dir = self.config.target / directory
        ensure_dir(target_dir)

        index_src = live / index_name
        if index_src.exists():
            self.copy_and_process(
                index_src, target_dir / "index.md", sidebar_order=0, sidebar_label="Overview", edit_url=False
            )
        self._copy_directory(live / directory, target_dir, first_order=1)

    def sync_product_areas(self) -> None:
        self._sync_live_section("product-areas", "PRODUCT-AREAS.md")

    def sync_decisions(self) -> None:
        self._sync_live_section("decisions", "DECISIONS.md")

    def sync_generated(self) -> None:
        generated = self.sources["docs-generated"]
        if generated is None:
            self.warn(f"{SOURCE_LABELS['docs-generated']}/ not found, skipping generated docs")
            return

        console.print("Syncing generated reference docs...")
        target_dir = self.config.target / "generated"
        ensure_dir(target_dir)

        for index_name, directory, label, order in (
            ("BUSINESS-RULES.md", "business-rules", "Business Rules", 0),
            ("TAXONOMY.md", "taxonomy", "Taxonomy", 10),
        ):
            index_src = generated / index_name
            if not index_src.exists():
                continue
            dest_dir = target_dir / directory
            self.copy_and_process(
                index_src, dest_dir / "index.md", sidebar_order=order, sidebar_label=label, edit_url=False
            )
            self._copy_directory(generated / directory, dest_dir, first_order=order + 1)

        sample = generated / "docs" / "REFERENCE-SAMPLE.md"
        if sample.exists():
            self.copy_and_process(sample, target_dir / "reference-sample.md", sidebar_order=20, edit_url=False)

    def sync_tutorial(self) -> None:
        tutorial = self.sources["tutorial"]
        if tutorial is None:
            self.warn(f"{SOURCE_LABELS['tutorial']} not found, skipping tutorial")
            return

        console.print("Syncing and splitting tutorial...")
        target_dir = self.config.target / "tutorial"
        ensure_dir(target_dir)

        split = split_tutorial(
            tutorial.read_text(encoding="utf-8"),
            self.config.expected_tutorial_parts,
            source_file=tutorial,
            resolver=self.resolver,
            strict=self.config.strict,
        )
        if split.errors:
            self.warn(f"Tutorial structure validation failed: {'; '.join(split.errors)}")
        if not split.parts:
            self.warn("Tutorial fallback: copying tutorial as a single page")

        for page in split.pages:
            self.write(target_dir / page.filename, page.text)
            self.log(f"Tutorial -> tutorial/{page.filename}")
        if split.parts:
            console.print(f"Tutorial split into {len(split.parts)} parts")

    # -- driver --

    def report_sources(self) -> None:
        for key, path in self.sources:
            if path is not None:
                self.log(f"Source {key}: {path}")
            else:
                err_console.print(f"Source {escape(key)}: [red]NOT FOUND[/]")

    def sync(self) -> SyncReport:
        console.print("Starting content sync...")
        console.print(f"Target: {escape(str(self.config.target))}")
        console.print(f"Strict mode: {'ON' if self.config.strict else 'OFF'}")
        self.report_sources()

        # Fail before cleanup when required inputs are missing.
        self.validate_inputs()

        for subdir in SYNC_SUBDIRS:
            clean_dir(self.config.target / subdir)

        self.sync_manual_docs()
        self.sync_product_areas()
        self.sync_decisions()
        self.sync_generated()
        self.sync_tutorial()

        console.print("Done!")
        return self.report


def run(config: SyncConfig) -> int:
    """Run the sync and return the process exit status."""
    try:
        ContentSync(config).sync()
    except SyncError as exc:
        items = "\n".join(f"  - {escape(item)}" for item in exc.items)
        body = f"{escape(exc.message)}:\n{items}" if items else escape(exc.message)
        err_console.print(Panel.fit(body, title=f"ERROR: {exc.title}", style="red"))
        return exc.exit_code
    return 0


__all__ = ["ContentSync", "SyncReport", "clean_dir", "ensure_dir", "markdown_files", "run"]
