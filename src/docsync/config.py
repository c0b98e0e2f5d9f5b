from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .manifest import DOCS_TARGET

DEFAULT_EXPECTED_PARTS = 10


def ci_detected(env: Mapping[str, str]) -> bool:
    return env.get("CI") == "true"


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run, threaded explicitly through the pipeline."""

    root: Path
    target: Path
    strict: bool = False
    verbose: bool = False
    expected_tutorial_parts: Optional[int] = DEFAULT_EXPECTED_PARTS
    env: Mapping[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def create(
        cls,
        root: Path,
        target: Optional[Path] = None,
        strict: bool = False,
        verbose: bool = False,
        expected_tutorial_parts: Optional[int] = DEFAULT_EXPECTED_PARTS,
        env: Optional[Mapping[str, str]] = None,
    ) -> "SyncConfig":
        env = dict(os.environ) if env is None else dict(env)
        root = Path(os.path.abspath(root))
        if target is None:
            target = root / DOCS_TARGET
        return cls(
            root=root,
            target=Path(os.path.abspath(target)),
            strict=strict or ci_detected(env),
            verbose=verbose,
            expected_tutorial_parts=expected_tutorial_parts,
            env=env,
        )


__all__ = ["DEFAULT_EXPECTED_PARTS", "SyncConfig", "ci_detected"]
