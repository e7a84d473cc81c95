"""
Trust score computation.

Every surface that shows a score (search, scan, home, stack and the product
view) goes through this module so the thresholds and labels stay in one place.

    score = clamp(50 + 10 * certifications - 50 * fda_flagged - 15 * off_market, 0, 100)

The off-market penalty is only applied for the single product view.
"""
from enum import Enum
from typing import List, Tuple

from interfaces.productModels import CertificationSet, TrustScoreResult

BASE_SCORE = 50
CERTIFICATION_BONUS = 10
FDA_PENALTY = 50
OFF_MARKET_PENALTY = 15
MIN_SCORE = 0
MAX_SCORE = 100

# Certifications that count towards the bonus
POSITIVE_CERTIFICATIONS = (
    "usp_verified",
    "informed_sport",
    "informed_choice",
    "nsf_certified",
    "bscg",
    "ifos",
)

# (minimum score, label), checked top-down
CATEGORY_THRESHOLDS: List[Tuple[int, str]] = [
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
]
LOWEST_CATEGORY = "Poor"


class ScoringView(str, Enum):
    LIST = "list"
    DETAIL = "detail"


def count_positive_certifications(certs: CertificationSet) -> int:
    return sum(1 for name in POSITIVE_CERTIFICATIONS if getattr(certs, name))


def categorize_score(score: int) -> str:
    for minimum, label in CATEGORY_THRESHOLDS:
        if score >= minimum:
            return label
    return LOWEST_CATEGORY


def clamp_score(raw: int) -> int:
    return min(MAX_SCORE, max(MIN_SCORE, raw))


def score_from_bonus(
    certifications_bonus: int,
    fda_flagged: bool,
    off_market: bool = False,
    view: ScoringView = ScoringView.LIST,
    certification_count: int = 0,
) -> TrustScoreResult:
    """Score from an already summed certification bonus.

    Used when the data layer returns the bonus breakdown instead of the raw
    flags. Penalties, clamping and categories match calculate_trust_score.
    """
    raw = BASE_SCORE + int(certifications_bonus or 0)
    if fda_flagged:
        raw -= FDA_PENALTY
    if off_market and view == ScoringView.DETAIL:
        raw -= OFF_MARKET_PENALTY

    score = clamp_score(raw)
    return TrustScoreResult(
        score=score,
        category=categorize_score(score),
        certification_count=certification_count,
    )


def calculate_trust_score(
    certs: CertificationSet,
    off_market: bool = False,
    view: ScoringView = ScoringView.LIST,
) -> TrustScoreResult:
    count = count_positive_certifications(certs)
    return score_from_bonus(
        certifications_bonus=count * CERTIFICATION_BONUS,
        fda_flagged=certs.fda_flagged,
        off_market=off_market,
        view=view,
        certification_count=count,
    )
