"""
Verdict aggregation shared by both risk engines

Only clamping, tiering, de-duplication and category selection live here.
Score direction is NOT shared: email scores grow with danger, website
scores grow with safety, and each engine applies its own deltas.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

# Website security-score tiers, highest floor first
WEBSITE_TIERS: Tuple[Tuple[int, str], ...] = (
    (80, "safe"),
    (60, "low"),
    (40, "medium"),
    (20, "high"),
)
LOWEST_TIER = "critical"


@dataclass(frozen=True)
class CategoryHint:
    """Threat family suggested by an analyzer, with selection weight"""
    category: str
    weight: int


@dataclass
class IndicatorResult:
    """Output of a single indicator analyzer"""
    score: int = 0
    indicators: List[str] = field(default_factory=list)
    hints: List[CategoryHint] = field(default_factory=list)

    def add(self, score: int, indicator: str, *hints: CategoryHint) -> None:
        self.score += score
        self.indicators.append(indicator)
        self.hints.extend(hints)


def clamp_score(score: float, low: int = 0, high: int = 100) -> int:
    """Round and clamp a raw score into [low, high]"""
    return int(max(low, min(high, round(score))))


def dedupe_indicators(indicators: Iterable[str]) -> List[str]:
    """Remove duplicate indicator strings, keeping first-seen order"""
    return list(dict.fromkeys(indicators))


def tier_for_score(score: int, tiers: Sequence[Tuple[int, str]] = WEBSITE_TIERS,
                   lowest: str = LOWEST_TIER) -> str:
    """Map a score to the first tier whose floor it reaches"""
    for floor, name in tiers:
        if score >= floor:
            return name
    return lowest


def select_category(hints: Iterable[CategoryHint], default: Optional[str] = None) -> Optional[str]:
    """
    Pick the highest-weight category hint.

    Ties go to the hint emitted first, so analyzer order stays meaningful.
    """
    best: Optional[CategoryHint] = None
    for hint in hints:
        if best is None or hint.weight > best.weight:
            best = hint
    return best.category if best else default
