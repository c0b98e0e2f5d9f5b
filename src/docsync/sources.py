from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .manifest import SOURCE_SPECS, SourceSpec


def _absolute(root: Path, candidate: str) -> Path:
    # Normalise `..` without following symlinks.
    return Path(os.path.abspath(os.path.join(root, candidate)))


def resolve_source(
    root: Path,
    local: str,
    ci: str,
    packaged: Optional[str] = None,
    env_var: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Return the first existing source location, or ``None``.

    An override variable wins outright: when set, it is the only candidate.
    """
    env = os.environ if env is None else env
    if env_var and env.get(env_var):
        overridden = _absolute(root, env[env_var])
        return overridden if overridden.exists() else None

    candidates = (_absolute(root, path) for path in (local, ci, packaged) if path)
    return next((path for path in candidates if path.exists()), None)


@dataclass(frozen=True)
class Sources:
    """Resolved source roots for one run; ``None`` marks an unresolved root."""

    roots: Mapping[str, Optional[Path]]

    def __getitem__(self, key: str) -> Optional[Path]:
        return self.roots.get(key)

    def __iter__(self) -> Iterator[Tuple[str, Optional[Path]]]:
        return iter(self.roots.items())

    def missing(self, specs: Tuple[SourceSpec, ...] = SOURCE_SPECS) -> List[SourceSpec]:
        return [spec for spec in specs if self[spec.key] is None]


def resolve_sources(
    root: Path,
    env: Optional[Mapping[str, str]] = None,
    specs: Tuple[SourceSpec, ...] = SOURCE_SPECS,
) -> Sources:
    roots: Dict[str, Optional[Path]] = {
        spec.key: resolve_source(root, spec.local, spec.ci, spec.packaged, spec.env_var, env)
        for spec in specs
    }
    return Sources(roots)


__all__ = ["Sources", "resolve_source", "resolve_sources"]
