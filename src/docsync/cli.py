from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .audit import find_unresolved_links, write_report
from .config import DEFAULT_EXPECTED_PARTS, SyncConfig
from .manifest import DOCS_TARGET
from .sync import run
from .verify import missing_artifacts

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="Sync delivery-process documentation into the website content tree.")


def project_root() -> Path:
    """Return the git repository root, or the working directory outside a checkout."""
    try:
        out = subprocess.check_output(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=Path.cwd(),
            text=True,
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError):
        return Path.cwd()
    return Path(out.strip())


@app.command()
def sync(
    root: Optional[Path] = typer.Option(None, "--root", help="Website project root."),
    target: Optional[Path] = typer.Option(None, "--target", help="Output docs directory."),
    strict: bool = typer.Option(False, "--strict", help="Treat missing inputs as fatal (implied by CI=true)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file written."),
    expected_parts: int = typer.Option(
        DEFAULT_EXPECTED_PARTS,
        "--expected-parts",
        envvar="TUTORIAL_EXPECTED_PARTS",
        help="Number of parts the tutorial must split into.",
    ),
) -> None:
    """Copy, transform and split upstream docs into the site tree."""
    config = SyncConfig.create(
        root or project_root(),
        target=target,
        strict=strict,
        verbose=verbose,
        expected_tutorial_parts=expected_parts,
    )
    code = run(config)
    if code:
        raise typer.Exit(code=code)


@app.command("check-links")
def check_links(
    target: Optional[Path] = typer.Option(None, "--target", help="Synced docs directory to scan."),
    report: Optional[Path] = typer.Option(None, "--report", help="Write findings as JSON."),
) -> None:
    """Fail if any synced page still carries an unresolved relative link."""
    directory = target or project_root() / DOCS_TARGET
    if not directory.is_dir():
        err_console.print(f"Docs directory not found: {escape(str(directory))}")
        raise typer.Exit(code=1)

    findings = find_unresolved_links(directory)
    if report is not None:
        write_report(findings, report)
        console.log(f"Report written to {escape(str(report))}")

    if findings:
        lines = "\n".join(f"{escape(item.file)}: {escape(item.url)}" for item in findings)
        err_console.print(Panel.fit(lines, title="Unresolved Links", style="red"))
        raise typer.Exit(code=1)

    console.print(Panel.fit("No unresolved relative links", title="Verified", style="green"))


@app.command("verify-build")
def verify_build(
    dist: Optional[Path] = typer.Option(None, "--dist", help="Built site directory."),
) -> None:
    """Check that the built site contains the expected artifacts."""
    directory = dist or project_root() / "dist"
    missing = missing_artifacts(directory)
    if missing:
        lines = "\n".join(f"  - {escape(name)}" for name in missing)
        err_console.print(
            Panel.fit(f"Missing expected build artifacts:\n{lines}", title="Verification Failed", style="red")
        )
        raise typer.Exit(code=1)

    console.print(Panel.fit("Required build artifacts are present.", title="Verified", style="green"))


__all__ = ["app"]
