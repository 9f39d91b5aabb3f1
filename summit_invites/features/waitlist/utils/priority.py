import re
from enum import Enum


class CompanyRevenue(str, Enum):
    BAND_100K_500K = "$100k-$500k"
    BAND_500K_1M = "$500k-$1mi"
    BAND_1M_3M = "$1mi-$3mi"
    BAND_3M_5M = "$3mi-$5mi"
    BAND_5M_PLUS = "$5mi+"


REVENUE_POINTS = {
    CompanyRevenue.BAND_100K_500K: 10,
    CompanyRevenue.BAND_500K_1M: 20,
    CompanyRevenue.BAND_1M_3M: 30,
    CompanyRevenue.BAND_3M_5M: 40,
    CompanyRevenue.BAND_5M_PLUS: 50,
}

# Highest tier first; the first tier with a keyword in the role wins.
ROLE_TIERS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("CEO", "FOUNDER", "COFOUNDER"), 40),
    (("CTO", "VP", "PRESIDENT"), 30),
    (("DIRECTOR", "HEAD"), 20),
    (("MANAGER", "LEAD"), 10),
)

# Whole words only, so "CTO" never matches inside "DIRECTOR".
_TIER_PATTERNS = tuple(
    (re.compile(r"\b(?:" + "|".join(keywords) + r")\b"), points) for keywords, points in ROLE_TIERS
)


def revenue_points(company_revenue: str) -> int:
    try:
        return REVENUE_POINTS[CompanyRevenue(company_revenue)]
    except ValueError:
        return 0


def role_points(role: str) -> int:
    role_upper = (role or "").upper()
    for pattern, points in _TIER_PATTERNS:
        if pattern.search(role_upper):
            return points
    return 0


def calculate_priority_score(company_revenue: str, role: str) -> int:
    """Sort key for the admin waitlist: revenue band points plus leadership bonus."""
    return revenue_points(company_revenue) + role_points(role)
