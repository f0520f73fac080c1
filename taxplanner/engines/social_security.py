"""Taxable Social Security benefits (Pub. 915 worksheet, simplified).

Provisional income = income other than Social Security + half of gross
benefits. Tier boundaries come from the repository's ``social_security``
threshold rules, the same records the trap detector reads.
"""

import logging
from decimal import Decimal

from pydantic import BaseModel

from taxplanner.models.tax_data import ThresholdRule

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HALF = Decimal("0.5")
# Statutory maximum inclusion, assumed when no tier data exists.
MAX_INCLUSION_RATE = Decimal("0.85")


class SocialSecurityResult(BaseModel):
    provisional_income: Decimal
    taxable_benefits: Decimal
    tier: int  # 0, 50 or 85 (percent of benefits potentially taxable)


def compute_taxable_social_security(
    benefits: Decimal,
    other_income: Decimal,
    rules: list[ThresholdRule],
) -> SocialSecurityResult:
    """Apply the two-tier inclusion worksheet.

    ``rules`` are the filing status's social_security rules ordered by tier;
    their magnitudes are the inclusion rates (0.50, 0.85).
    """
    benefits = max(benefits, ZERO)
    provisional = max(other_income, ZERO) + benefits * HALF
    if benefits == ZERO:
        return SocialSecurityResult(provisional_income=provisional, taxable_benefits=ZERO, tier=0)

    if len(rules) < 2:
        logger.warning(
            "Social Security tier data missing; assuming %s%% of benefits are taxable",
            MAX_INCLUSION_RATE * 100,
        )
        return SocialSecurityResult(
            provisional_income=provisional,
            taxable_benefits=benefits * MAX_INCLUSION_RATE,
            tier=85,
        )

    lower, upper = sorted(rules, key=lambda r: r.tier)[:2]
    t1, t2 = lower.threshold_value, upper.threshold_value
    r1 = lower.magnitude if lower.magnitude is not None else HALF
    r2 = upper.magnitude if upper.magnitude is not None else MAX_INCLUSION_RATE

    if provisional <= t1:
        return SocialSecurityResult(provisional_income=provisional, taxable_benefits=ZERO, tier=0)

    if provisional <= t2:
        taxable = min(r1 * benefits, r1 * (provisional - t1))
        return SocialSecurityResult(provisional_income=provisional, taxable_benefits=taxable, tier=int(r1 * 100))

    base = min(r1 * benefits, r1 * (t2 - t1))
    taxable = min(r2 * benefits, base + r2 * (provisional - t2))
    return SocialSecurityResult(provisional_income=provisional, taxable_benefits=taxable, tier=int(r2 * 100))
