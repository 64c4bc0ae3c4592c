"""
Score to tier mapping.

Two banding schemes exist. The standard scheme is used for tier filtering
and drag-to-tier edits:

    S 90-100, A 80-89, B 70-79, C 60-69, D 50-59, F 0-49

The display scheme is the finer seven-band grading shown next to cards:

    S 95+, A 90+, B 75+, C 60+, D 45+, E 30+, F below

Unscored cards fall into the "Unscored" bucket in both schemes.
"""

from dataclasses import dataclass

from cubecraft.config import MAX_SCORE, MIN_SCORE
from cubecraft.models.failure import CubeValidationError

UNSCORED = "Unscored"


@dataclass(frozen=True, slots=True)
class TierBand:
    label: str
    lower: int
    upper: int

    @property
    def midpoint(self) -> int:
        return (self.lower + self.upper + 1) // 2


def _bands(*thresholds: tuple[str, int]) -> tuple[TierBand, ...]:
    """Build closed integer bands from descending (label, lower bound) pairs."""
    bands = []
    upper = MAX_SCORE
    for label, lower in thresholds:
        bands.append(TierBand(label, lower, upper))
        upper = lower - 1
    return tuple(bands)


SCHEMES: dict[str, tuple[TierBand, ...]] = {
    "standard": _bands(("S", 90), ("A", 80), ("B", 70), ("C", 60), ("D", 50), ("F", MIN_SCORE)),
    "display": _bands(
        ("S", 95), ("A", 90), ("B", 75), ("C", 60), ("D", 45), ("E", 30), ("F", MIN_SCORE)
    ),
}


def _scheme(scheme: str) -> tuple[TierBand, ...]:
    bands = SCHEMES.get(scheme)
    if bands is None:
        raise CubeValidationError(
            f"Unknown tier scheme: {scheme}",
            detail=f"Available: {', '.join(SCHEMES)}",
        )
    return bands


def tier_of(score: float | None, scheme: str = "standard") -> str:
    """Tier label for a score; out-of-range scores land in the end bands."""
    if score is None:
        return UNSCORED
    bands = _scheme(scheme)
    for band in bands:
        if score >= band.lower:
            return band.label
    return bands[-1].label


def score_for_tier(label: str, scheme: str = "standard") -> int:
    """Representative score for a tier: the midpoint of its band."""
    for band in _scheme(scheme):
        if band.label == label:
            return band.midpoint
    raise CubeValidationError(
        f"Unknown tier: {label}",
        detail=f"Available: {', '.join(tier_labels(scheme))}",
    )


def tier_labels(scheme: str = "standard") -> list[str]:
    """Tier labels, best first."""
    return [band.label for band in _scheme(scheme)]


def tier_bands(scheme: str = "standard") -> tuple[TierBand, ...]:
    return _scheme(scheme)
