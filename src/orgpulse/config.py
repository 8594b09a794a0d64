"""Configuration constants for orgpulse."""

import os

# Seed and profile used when the caller does not pass one.
DEFAULT_SEED: int = 42
DEFAULT_PROFILE: str = "balanced"

# Environment variable that overrides DEFAULT_SEED for the CLI.
SEED_ENV_VAR: str = "ORGPULSE_SEED"

# Branching ranges per parent level: (min, max, target).
LEVEL_RANGES: dict[str, tuple[int, int, int]] = {
    "branch": (2, 6, 3),
    "division": (2, 12, 4),
    "department": (2, 12, 5),
}

# Composite score weights: self, children, dependency health.
SELF_WEIGHT: float = 0.55
CHILD_WEIGHT: float = 0.35
DEPENDENCY_WEIGHT: float = 0.10

# Leaf status thresholds on the composite score.
GREEN_THRESHOLD: int = 80
YELLOW_THRESHOLD: int = 60

# Penalty contributed by each dependency target, by its status.
DEPENDENCY_PENALTIES: dict[str, int] = {"red": 12, "yellow": 6, "green": 0}
MAX_DEPENDENCY_PENALTY: int = 40

# Full bottom-up sweeps per aggregation.
SCORE_PASSES: int = 3

# Zoom windowing.
DEFAULT_VISIBLE_DEPTH: int = 3
MAX_VISIBLE_DEPTH: int = 3

# Pressure marks.
PRIMARY_TIER_SIZE: int = 4
PRESSURE_EASING_EXPONENT: float = 0.7
MIN_EDGE_WEIGHT: int = 1
MAX_EDGE_WEIGHT: int = 10

# Deepest level index still drawn when lifting focus targets (division).
FOCUS_VISIBLE_LEVEL: int = 2


def resolve_default_seed() -> int:
    """Return the seed from ORGPULSE_SEED, falling back to DEFAULT_SEED."""
    raw = os.environ.get(SEED_ENV_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_SEED
    try:
        return int(raw)
    except ValueError:
        msg = f"{SEED_ENV_VAR} must be an integer, got {raw!r}"
        raise ValueError(msg) from None
