from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

# 100 x 100 at most; the augmented system is N x (N + 1) bits.
MAX_CELLS = 10000


@dataclass(frozen=True)
class SolverConfig:
    max_cells: int = MAX_CELLS
    strict: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> "SolverConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown solver options: {unknown}")
        cfg = cls(
            max_cells=int(data.get("max_cells", MAX_CELLS)),
            strict=bool(data.get("strict", False)),
        )
        if cfg.max_cells < 1:
            raise ValueError(f"max_cells must be positive, got {cfg.max_cells}")
        return cfg


def load_config(path: str | Path) -> SolverConfig:
    """Read the ``solver:`` section of a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    return SolverConfig.from_dict(raw.get("solver"))
