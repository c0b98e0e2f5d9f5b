"""Tests for the document transformer."""

from __future__ import annotations

import pathlib

from docsync import transform
from docsync.links import LinkResolver
from docsync.sources import Sources


def _resolver(tmp_path: pathlib.Path) -> LinkResolver:
    return LinkResolver(Sources({"docs": tmp_path / "docs"}))


def test_extract_title_defaults_to_untitled() -> None:
    assert transform.extract_title("No heading here.\n\n## Only h2\n") == "Untitled"


def test_extract_title_uses_first_h1() -> None:
    assert transform.extract_title("intro\n\n# First\n\n# Second\n") == "First"


def test_strip_first_heading_removes_following_blank_lines_only_once() -> None:
    text = "# Title\n\n\nBody\n\n# Another\n"

    assert transform.strip_first_heading(text) == "Body\n\n# Another\n"


def test_strip_first_heading_without_heading_is_identity() -> None:
    assert transform.strip_first_heading("Just text\n") == "Just text\n"


def test_front_matter_minimal() -> None:
    assert transform.build_front_matter("Guide") == '---\ntitle: "Guide"\n---\n\n'


def test_front_matter_all_fields() -> None:
    result = transform.build_front_matter(
        'Say "hi"', description="About it", sidebar_order=3, sidebar_label="Hi", edit_url=False
    )

    assert result == (
        "---\n"
        'title: "Say \\"hi\\""\n'
        'description: "About it"\n'
        "sidebar:\n"
        '  label: "Hi"\n'
        "  order: 3\n"
        "editUrl: false\n"
        "---\n\n"
    )


def test_front_matter_order_zero_is_emitted() -> None:
    assert "  order: 0\n" in transform.build_front_matter("T", sidebar_order=0)


def test_transform_rewrites_manual_doc_link(tmp_path: pathlib.Path) -> None:
    source = tmp_path / "docs" / "METHODOLOGY.md"
    text = "# Methodology\n\nSee [config](./CONFIGURATION.md).\n"

    result = transform.transform(text, source_file=source, resolver=_resolver(tmp_path), sidebar_order=1)

    assert result == (
        "---\n"
        'title: "Methodology"\n'
        "sidebar:\n"
        "  order: 1\n"
        "---\n\n"
        "See [config](/delivery-process/guides/configuration/).\n"
    )


def test_transform_leaves_unmatched_links_untouched(tmp_path: pathlib.Path) -> None:
    text = "# T\n\n[x](../elsewhere/file.md) and [y](https://example.com)  \nnext\n"

    result = transform.transform(text, source_file=tmp_path / "docs" / "A.md", resolver=_resolver(tmp_path))

    assert result.endswith("[x](../elsewhere/file.md) and [y](https://example.com)  \nnext\n")


def test_transform_is_deterministic(tmp_path: pathlib.Path) -> None:
    text = "# T\n\n[a](./INDEX.md#top) [b](src/x.ts)\n"
    kwargs = dict(source_file=tmp_path / "docs" / "A.md", resolver=_resolver(tmp_path), sidebar_label="L")

    assert transform.transform(text, **kwargs) == transform.transform(text, **kwargs)


def test_transform_without_resolver_keeps_links() -> None:
    result = transform.transform("# T\n\n[a](./CONFIGURATION.md)\n")

    assert result.endswith("[a](./CONFIGURATION.md)\n")


def test_transform_empty_body() -> None:
    assert transform.transform("# Only Title\n") == '---\ntitle: "Only Title"\n---\n\n'
