"""Bundled reference tax data, 2022-2025.

Federal brackets, long-term capital gains brackets, standard deductions, AMT
parameters, Medicare IRMAA tiers, Social Security taxability tiers, ACA premium
cap bands, HHS poverty guidelines and a handful of state schedules. Keyed by
tax year and filing status. Never hardcode any of these in computation code;
engines read them through TaxDataRepository.

Sources:
  - 2022: IRS Rev. Proc. 2021-45
  - 2023: IRS Rev. Proc. 2022-38
  - 2024: IRS Rev. Proc. 2023-34, FTB Publication 1001 (2024)
  - 2025: IRS Rev. Proc. 2024-40, Pub. L. 119-21 (standard deduction correction)
  - IRMAA: CMS Medicare Parts B & D premium fact sheets, 2022-2025
  - Social Security: IRC Section 86, Pub. 915 worksheet
  - ACA: IRC Section 36B applicable percentage table (simplified bands)
  - Poverty guidelines: HHS, 48 contiguous states
"""

from datetime import date
from decimal import Decimal

from taxplanner.models.enums import (
    ConsequenceType,
    FilingStatus,
    IncomeType,
    ThresholdCategory,
    ThresholdUnit,
)
from taxplanner.models.tax_data import (
    AmtExemption,
    BracketTable,
    DeductionTable,
    PovertyGuideline,
    TaxDataVersion,
    ThresholdRule,
)

Schedule = list[tuple[Decimal | None, Decimal]]

# ---------------------------------------------------------------------------
# Data versions. A correction only carries the records it changes.
# ---------------------------------------------------------------------------
VERSIONS: list[TaxDataVersion] = [
    TaxDataVersion(
        id="2022.1.0",
        year=2022,
        version="1.0",
        effective_date=date(2021, 11, 10),
        published_date=date(2021, 11, 10),
        description="Inflation adjustments for tax year 2022",
        legislation_reference="Rev. Proc. 2021-45",
    ),
    TaxDataVersion(
        id="2023.1.0",
        year=2023,
        version="1.0",
        effective_date=date(2022, 10, 18),
        published_date=date(2022, 10, 18),
        description="Inflation adjustments for tax year 2023",
        legislation_reference="Rev. Proc. 2022-38",
    ),
    TaxDataVersion(
        id="2024.1.0",
        year=2024,
        version="1.0",
        effective_date=date(2023, 11, 9),
        published_date=date(2023, 11, 9),
        description="Inflation adjustments for tax year 2024",
        legislation_reference="Rev. Proc. 2023-34",
    ),
    TaxDataVersion(
        id="2025.1.0",
        year=2025,
        version="1.0",
        effective_date=date(2024, 10, 22),
        published_date=date(2024, 10, 22),
        description="Inflation adjustments for tax year 2025",
        legislation_reference="Rev. Proc. 2024-40",
    ),
    TaxDataVersion(
        id="2025.1.1",
        year=2025,
        version="1.1",
        effective_date=date(2025, 7, 4),
        published_date=date(2025, 7, 4),
        is_correction=True,
        description="Mid-year standard deduction increase",
        legislation_reference="Pub. L. 119-21",
    ),
]

# ---------------------------------------------------------------------------
# Federal ordinary income brackets: {year: {filing_status: [(upper_bound, rate), ...]}}
# Upper bound is Decimal or None for the top bracket.
# Qualifying surviving spouse uses the MFJ schedules.
# ---------------------------------------------------------------------------
FEDERAL_BRACKETS: dict[int, dict[FilingStatus, Schedule]] = {
    2022: {
        FilingStatus.SINGLE: [
            (Decimal("10275"), Decimal("0.10")),
            (Decimal("41775"), Decimal("0.12")),
            (Decimal("89075"), Decimal("0.22")),
            (Decimal("170050"), Decimal("0.24")),
            (Decimal("215950"), Decimal("0.32")),
            (Decimal("539900"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFJ: [
            (Decimal("20550"), Decimal("0.10")),
            (Decimal("83550"), Decimal("0.12")),
            (Decimal("178150"), Decimal("0.22")),
            (Decimal("340100"), Decimal("0.24")),
            (Decimal("431900"), Decimal("0.32")),
            (Decimal("647850"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFS: [
            (Decimal("10275"), Decimal("0.10")),
            (Decimal("41775"), Decimal("0.12")),
            (Decimal("89075"), Decimal("0.22")),
            (Decimal("170050"), Decimal("0.24")),
            (Decimal("215950"), Decimal("0.32")),
            (Decimal("323925"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("14650"), Decimal("0.10")),
            (Decimal("55900"), Decimal("0.12")),
            (Decimal("89050"), Decimal("0.22")),
            (Decimal("170050"), Decimal("0.24")),
            (Decimal("215950"), Decimal("0.32")),
            (Decimal("539900"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
    },
    2023: {
        FilingStatus.SINGLE: [
            (Decimal("11000"), Decimal("0.10")),
            (Decimal("44725"), Decimal("0.12")),
            (Decimal("95375"), Decimal("0.22")),
            (Decimal("182100"), Decimal("0.24")),
            (Decimal("231250"), Decimal("0.32")),
            (Decimal("578125"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFJ: [
            (Decimal("22000"), Decimal("0.10")),
            (Decimal("89450"), Decimal("0.12")),
            (Decimal("190750"), Decimal("0.22")),
            (Decimal("364200"), Decimal("0.24")),
            (Decimal("462500"), Decimal("0.32")),
            (Decimal("693750"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFS: [
            (Decimal("11000"), Decimal("0.10")),
            (Decimal("44725"), Decimal("0.12")),
            (Decimal("95375"), Decimal("0.22")),
            (Decimal("182100"), Decimal("0.24")),
            (Decimal("231250"), Decimal("0.32")),
            (Decimal("346875"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("15700"), Decimal("0.10")),
            (Decimal("59850"), Decimal("0.12")),
            (Decimal("95350"), Decimal("0.22")),
            (Decimal("182100"), Decimal("0.24")),
            (Decimal("231250"), Decimal("0.32")),
            (Decimal("578100"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
    },
    2024: {
        FilingStatus.SINGLE: [
            (Decimal("11600"), Decimal("0.10")),
            (Decimal("47150"), Decimal("0.12")),
            (Decimal("100525"), Decimal("0.22")),
            (Decimal("191950"), Decimal("0.24")),
            (Decimal("243725"), Decimal("0.32")),
            (Decimal("609350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFJ: [
            (Decimal("23200"), Decimal("0.10")),
            (Decimal("94300"), Decimal("0.12")),
            (Decimal("201050"), Decimal("0.22")),
            (Decimal("383900"), Decimal("0.24")),
            (Decimal("487450"), Decimal("0.32")),
            (Decimal("731200"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFS: [
            (Decimal("11600"), Decimal("0.10")),
            (Decimal("47150"), Decimal("0.12")),
            (Decimal("100525"), Decimal("0.22")),
            (Decimal("191950"), Decimal("0.24")),
            (Decimal("243725"), Decimal("0.32")),
            (Decimal("365600"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("16550"), Decimal("0.10")),
            (Decimal("63100"), Decimal("0.12")),
            (Decimal("100500"), Decimal("0.22")),
            (Decimal("191950"), Decimal("0.24")),
            (Decimal("243700"), Decimal("0.32")),
            (Decimal("609350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
    },
    2025: {
        FilingStatus.SINGLE: [
            (Decimal("11925"), Decimal("0.10")),
            (Decimal("48475"), Decimal("0.12")),
            (Decimal("103350"), Decimal("0.22")),
            (Decimal("197300"), Decimal("0.24")),
            (Decimal("250525"), Decimal("0.32")),
            (Decimal("626350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFJ: [
            (Decimal("23850"), Decimal("0.10")),
            (Decimal("96950"), Decimal("0.12")),
            (Decimal("206700"), Decimal("0.22")),
            (Decimal("394600"), Decimal("0.24")),
            (Decimal("501050"), Decimal("0.32")),
            (Decimal("751600"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFS: [
            (Decimal("11925"), Decimal("0.10")),
            (Decimal("48475"), Decimal("0.12")),
            (Decimal("103350"), Decimal("0.22")),
            (Decimal("197300"), Decimal("0.24")),
            (Decimal("250525"), Decimal("0.32")),
            (Decimal("375800"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("17000"), Decimal("0.10")),
            (Decimal("64850"), Decimal("0.12")),
            (Decimal("103350"), Decimal("0.22")),
            (Decimal("197300"), Decimal("0.24")),
            (Decimal("250500"), Decimal("0.32")),
            (Decimal("626350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
    },
}

# ---------------------------------------------------------------------------
# Federal LTCG rate brackets: taxable-income thresholds for the 0%/15%/20% rates.
# Per IRC Section 1(h).
# ---------------------------------------------------------------------------
FEDERAL_LTCG_BRACKETS: dict[int, dict[FilingStatus, Schedule]] = {
    2022: {
        FilingStatus.SINGLE: [
            (Decimal("41675"), Decimal("0.00")),
            (Decimal("459750"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFJ: [
            (Decimal("83350"), Decimal("0.00")),
            (Decimal("517200"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFS: [
            (Decimal("41675"), Decimal("0.00")),
            (Decimal("258600"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.HOH: [
            (Decimal("55800"), Decimal("0.00")),
            (Decimal("488500"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
    },
    2023: {
        FilingStatus.SINGLE: [
            (Decimal("44625"), Decimal("0.00")),
            (Decimal("492300"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFJ: [
            (Decimal("89250"), Decimal("0.00")),
            (Decimal("553850"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFS: [
            (Decimal("44625"), Decimal("0.00")),
            (Decimal("276900"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.HOH: [
            (Decimal("59750"), Decimal("0.00")),
            (Decimal("523050"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
    },
    2024: {
        FilingStatus.SINGLE: [
            (Decimal("47025"), Decimal("0.00")),
            (Decimal("518900"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFJ: [
            (Decimal("94050"), Decimal("0.00")),
            (Decimal("583750"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFS: [
            (Decimal("47025"), Decimal("0.00")),
            (Decimal("291850"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.HOH: [
            (Decimal("63000"), Decimal("0.00")),
            (Decimal("551350"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
    },
    2025: {
        FilingStatus.SINGLE: [
            (Decimal("48350"), Decimal("0.00")),
            (Decimal("533400"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFJ: [
            (Decimal("96700"), Decimal("0.00")),
            (Decimal("600050"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFS: [
            (Decimal("48350"), Decimal("0.00")),
            (Decimal("300000"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.HOH: [
            (Decimal("64750"), Decimal("0.00")),
            (Decimal("566700"), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
    },
}

# ---------------------------------------------------------------------------
# Federal standard deduction
# ---------------------------------------------------------------------------
FEDERAL_STANDARD_DEDUCTION: dict[int, dict[FilingStatus, Decimal]] = {
    2022: {
        FilingStatus.SINGLE: Decimal("12950"),
        FilingStatus.MFJ: Decimal("25900"),
        FilingStatus.MFS: Decimal("12950"),
        FilingStatus.HOH: Decimal("19400"),
    },
    2023: {
        FilingStatus.SINGLE: Decimal("13850"),
        FilingStatus.MFJ: Decimal("27700"),
        FilingStatus.MFS: Decimal("13850"),
        FilingStatus.HOH: Decimal("20800"),
    },
    2024: {
        FilingStatus.SINGLE: Decimal("14600"),
        FilingStatus.MFJ: Decimal("29200"),
        FilingStatus.MFS: Decimal("14600"),
        FilingStatus.HOH: Decimal("21900"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("15000"),
        FilingStatus.MFJ: Decimal("30000"),
        FilingStatus.MFS: Decimal("15000"),
        FilingStatus.HOH: Decimal("22500"),
    },
}

# Pub. L. 119-21 raised the 2025 standard deduction mid-year (version 2025.1.1).
FEDERAL_STANDARD_DEDUCTION_2025_CORRECTION: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("15750"),
    FilingStatus.MFJ: Decimal("31500"),
    FilingStatus.MFS: Decimal("15750"),
    FilingStatus.HOH: Decimal("23625"),
}

# ---------------------------------------------------------------------------
# AMT (Form 6251): exemption, exemption phase-out start, 28% breakpoint.
# MFS uses half the 28% breakpoint.
# ---------------------------------------------------------------------------
AMT_EXEMPTION: dict[int, dict[FilingStatus, Decimal]] = {
    2022: {
        FilingStatus.SINGLE: Decimal("75900"),
        FilingStatus.MFJ: Decimal("118100"),
        FilingStatus.MFS: Decimal("59050"),
        FilingStatus.HOH: Decimal("75900"),
    },
    2023: {
        FilingStatus.SINGLE: Decimal("81300"),
        FilingStatus.MFJ: Decimal("126500"),
        FilingStatus.MFS: Decimal("63250"),
        FilingStatus.HOH: Decimal("81300"),
    },
    2024: {
        FilingStatus.SINGLE: Decimal("85700"),
        FilingStatus.MFJ: Decimal("133300"),
        FilingStatus.MFS: Decimal("66650"),
        FilingStatus.HOH: Decimal("85700"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("88100"),
        FilingStatus.MFJ: Decimal("137000"),
        FilingStatus.MFS: Decimal("68500"),
        FilingStatus.HOH: Decimal("88100"),
    },
}

AMT_PHASEOUT_START: dict[int, dict[FilingStatus, Decimal]] = {
    2022: {
        FilingStatus.SINGLE: Decimal("539900"),
        FilingStatus.MFJ: Decimal("1079800"),
        FilingStatus.MFS: Decimal("539900"),
        FilingStatus.HOH: Decimal("539900"),
    },
    2023: {
        FilingStatus.SINGLE: Decimal("578150"),
        FilingStatus.MFJ: Decimal("1156300"),
        FilingStatus.MFS: Decimal("578150"),
        FilingStatus.HOH: Decimal("578150"),
    },
    2024: {
        FilingStatus.SINGLE: Decimal("609350"),
        FilingStatus.MFJ: Decimal("1218700"),
        FilingStatus.MFS: Decimal("609350"),
        FilingStatus.HOH: Decimal("609350"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("626350"),
        FilingStatus.MFJ: Decimal("1252700"),
        FilingStatus.MFS: Decimal("626350"),
        FilingStatus.HOH: Decimal("626350"),
    },
}

AMT_28_PERCENT_THRESHOLD: dict[int, Decimal] = {
    2022: Decimal("206100"),
    2023: Decimal("220700"),
    2024: Decimal("232600"),
    2025: Decimal("239100"),
}

# ---------------------------------------------------------------------------
# Medicare IRMAA (Parts B + D). MAGI thresholds for SINGLE; MFJ doubles the
# dollar amounts except the top tier, which is 750k. Surcharges are monthly,
# per enrollee: (Part B, Part D).
# ---------------------------------------------------------------------------
IRMAA_SINGLE_THRESHOLDS: dict[int, list[Decimal]] = {
    2022: [Decimal("91000"), Decimal("114000"), Decimal("142000"), Decimal("170000"), Decimal("500000")],
    2023: [Decimal("97000"), Decimal("123000"), Decimal("153000"), Decimal("183000"), Decimal("500000")],
    2024: [Decimal("103000"), Decimal("129000"), Decimal("161000"), Decimal("193000"), Decimal("500000")],
    2025: [Decimal("106000"), Decimal("133000"), Decimal("167000"), Decimal("200000"), Decimal("500000")],
}

IRMAA_MFJ_THRESHOLDS: dict[int, list[Decimal]] = {
    2022: [Decimal("182000"), Decimal("228000"), Decimal("284000"), Decimal("340000"), Decimal("750000")],
    2023: [Decimal("194000"), Decimal("246000"), Decimal("306000"), Decimal("366000"), Decimal("750000")],
    2024: [Decimal("206000"), Decimal("258000"), Decimal("322000"), Decimal("386000"), Decimal("750000")],
    2025: [Decimal("212000"), Decimal("266000"), Decimal("334000"), Decimal("400000"), Decimal("750000")],
}

# Married filing separately (lived with spouse): only the two top surcharges apply,
# starting at the single tier-1 threshold and at this upper threshold.
IRMAA_MFS_UPPER_THRESHOLD: dict[int, Decimal] = {
    2022: Decimal("409000"),
    2023: Decimal("403000"),
    2024: Decimal("397000"),
    2025: Decimal("394000"),
}

IRMAA_SURCHARGES: dict[int, list[tuple[Decimal, Decimal]]] = {
    2022: [
        (Decimal("68.00"), Decimal("12.40")),
        (Decimal("170.10"), Decimal("32.10")),
        (Decimal("272.20"), Decimal("51.70")),
        (Decimal("374.20"), Decimal("71.30")),
        (Decimal("408.20"), Decimal("77.90")),
    ],
    2023: [
        (Decimal("65.90"), Decimal("12.20")),
        (Decimal("164.80"), Decimal("31.50")),
        (Decimal("263.70"), Decimal("50.70")),
        (Decimal("362.60"), Decimal("70.00")),
        (Decimal("395.60"), Decimal("76.40")),
    ],
    2024: [
        (Decimal("69.90"), Decimal("12.90")),
        (Decimal("174.70"), Decimal("33.30")),
        (Decimal("279.50"), Decimal("53.80")),
        (Decimal("384.30"), Decimal("74.20")),
        (Decimal("419.30"), Decimal("81.00")),
    ],
    2025: [
        (Decimal("74.00"), Decimal("13.70")),
        (Decimal("185.00"), Decimal("35.30")),
        (Decimal("295.90"), Decimal("57.00")),
        (Decimal("406.90"), Decimal("78.60")),
        (Decimal("443.90"), Decimal("85.80")),
    ],
}

# ---------------------------------------------------------------------------
# Social Security benefit taxation tiers (IRC Section 86). Statutory, not indexed.
# (base amount, adjusted base amount); MFS assumes the spouses lived together.
# ---------------------------------------------------------------------------
SOCIAL_SECURITY_TIERS: dict[FilingStatus, tuple[Decimal, Decimal]] = {
    FilingStatus.SINGLE: (Decimal("25000"), Decimal("34000")),
    FilingStatus.HOH: (Decimal("25000"), Decimal("34000")),
    FilingStatus.QSS: (Decimal("25000"), Decimal("34000")),
    FilingStatus.MFJ: (Decimal("32000"), Decimal("44000")),
    FilingStatus.MFS: (Decimal("0"), Decimal("0")),
}
SOCIAL_SECURITY_INCLUSION_RATES = (Decimal("0.50"), Decimal("0.85"))

# ---------------------------------------------------------------------------
# ACA premium tax credit bands: (FPL % boundary, expected contribution above it).
# Below the first boundary the contribution is 0%. None = no subsidy (cliff).
# ---------------------------------------------------------------------------
ACA_BANDS: list[tuple[Decimal, Decimal | None]] = [
    (Decimal("150"), Decimal("0.02")),
    (Decimal("200"), Decimal("0.04")),
    (Decimal("250"), Decimal("0.06")),
    (Decimal("300"), Decimal("0.085")),
    (Decimal("400"), None),
]

POVERTY_GUIDELINES: dict[int, tuple[Decimal, Decimal]] = {
    2022: (Decimal("13590"), Decimal("4720")),
    2023: (Decimal("14580"), Decimal("5140")),
    2024: (Decimal("15060"), Decimal("5380")),
    2025: (Decimal("15650"), Decimal("5500")),
}

# ---------------------------------------------------------------------------
# State schedules. California per R&TC Section 17041 / FTB Publication 1001;
# the 2025 CA schedule repeats 2024 until FTB indexing is published.
# ---------------------------------------------------------------------------
_CA_SINGLE: Schedule = [
    (Decimal("10412"), Decimal("0.01")),
    (Decimal("24684"), Decimal("0.02")),
    (Decimal("38959"), Decimal("0.04")),
    (Decimal("54081"), Decimal("0.06")),
    (Decimal("68350"), Decimal("0.08")),
    (Decimal("349137"), Decimal("0.093")),
    (Decimal("418961"), Decimal("0.103")),
    (Decimal("698271"), Decimal("0.113")),
    (None, Decimal("0.123")),
]
_CA_MFJ: Schedule = [
    (Decimal("20824"), Decimal("0.01")),
    (Decimal("49368"), Decimal("0.02")),
    (Decimal("77918"), Decimal("0.04")),
    (Decimal("108162"), Decimal("0.06")),
    (Decimal("136700"), Decimal("0.08")),
    (Decimal("698274"), Decimal("0.093")),
    (Decimal("837922"), Decimal("0.103")),
    (Decimal("1396542"), Decimal("0.113")),
    (None, Decimal("0.123")),
]
_CA_HOH: Schedule = [
    (Decimal("20839"), Decimal("0.01")),
    (Decimal("49371"), Decimal("0.02")),
    (Decimal("63644"), Decimal("0.04")),
    (Decimal("78765"), Decimal("0.06")),
    (Decimal("93037"), Decimal("0.08")),
    (Decimal("474824"), Decimal("0.093")),
    (Decimal("569790"), Decimal("0.103")),
    (Decimal("949649"), Decimal("0.113")),
    (None, Decimal("0.123")),
]

STATE_BRACKETS: dict[str, dict[int, dict[FilingStatus, Schedule]]] = {
    "CA": {
        year: {
            FilingStatus.SINGLE: _CA_SINGLE,
            FilingStatus.MFJ: _CA_MFJ,
            FilingStatus.MFS: _CA_SINGLE,
            FilingStatus.HOH: _CA_HOH,
        }
        for year in (2024, 2025)
    },
}

STATE_STANDARD_DEDUCTION: dict[str, dict[int, dict[FilingStatus, Decimal]]] = {
    "CA": {
        year: {
            FilingStatus.SINGLE: Decimal("5540"),
            FilingStatus.MFJ: Decimal("11080"),
            FilingStatus.MFS: Decimal("5540"),
            FilingStatus.HOH: Decimal("11080"),
        }
        for year in (2024, 2025)
    },
}

# Flat-rate states apply one rate to all income for every year and status.
STATE_FLAT_RATES: dict[str, Decimal] = {
    "IL": Decimal("0.0495"),
    "PA": Decimal("0.0307"),
    "MA": Decimal("0.05"),
}

NO_INCOME_TAX_STATES = ("TX", "FL", "WA", "NV")

REFERENCE_YEARS = (2022, 2023, 2024, 2025)


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------

def _with_surviving_spouse(by_status: dict) -> dict:
    """QSS shares the MFJ schedule wherever it is not listed explicitly."""
    if FilingStatus.QSS not in by_status and FilingStatus.MFJ in by_status:
        return {**by_status, FilingStatus.QSS: by_status[FilingStatus.MFJ]}
    return by_status


def _base_version_id(year: int) -> str:
    return f"{year}.1.0"


def _irmaa_rules(year: int, version_id: str) -> list[ThresholdRule]:
    surcharges = [b + d for b, d in IRMAA_SURCHARGES[year]]
    template = "MAGI above ${threshold:,.0f} triggers IRMAA tier {tier}"
    rules: list[ThresholdRule] = []

    tiered = {
        FilingStatus.SINGLE: IRMAA_SINGLE_THRESHOLDS[year],
        FilingStatus.HOH: IRMAA_SINGLE_THRESHOLDS[year],
        FilingStatus.QSS: IRMAA_SINGLE_THRESHOLDS[year],
        FilingStatus.MFJ: IRMAA_MFJ_THRESHOLDS[year],
    }
    for status, thresholds in tiered.items():
        for tier, (threshold, surcharge) in enumerate(zip(thresholds, surcharges), 1):
            rules.append(ThresholdRule(
                id=f"irmaa-{year}-{status.value.lower()}-{tier}",
                category=ThresholdCategory.IRMAA,
                year=year,
                filing_status=status,
                threshold_value=threshold,
                consequence_type=ConsequenceType.CLIFF,
                magnitude=surcharge,
                description_template=template,
                version_id=version_id,
                tier=tier,
            ))

    mfs_thresholds = [IRMAA_SINGLE_THRESHOLDS[year][0], IRMAA_MFS_UPPER_THRESHOLD[year]]
    for tier, (threshold, surcharge) in enumerate(zip(mfs_thresholds, surcharges[3:]), 4):
        rules.append(ThresholdRule(
            id=f"irmaa-{year}-{FilingStatus.MFS.value.lower()}-{tier}",
            category=ThresholdCategory.IRMAA,
            year=year,
            filing_status=FilingStatus.MFS,
            threshold_value=threshold,
            consequence_type=ConsequenceType.CLIFF,
            magnitude=surcharge,
            description_template=template,
            version_id=version_id,
            tier=tier,
        ))
    return rules


def _social_security_rules(year: int, version_id: str) -> list[ThresholdRule]:
    rules: list[ThresholdRule] = []
    for status, boundaries in SOCIAL_SECURITY_TIERS.items():
        for tier, (threshold, rate) in enumerate(
            zip(boundaries, SOCIAL_SECURITY_INCLUSION_RATES), 1
        ):
            rules.append(ThresholdRule(
                id=f"ss-{year}-{status.value.lower()}-{tier}",
                category=ThresholdCategory.SOCIAL_SECURITY,
                year=year,
                filing_status=status,
                threshold_value=threshold,
                consequence_type=ConsequenceType.PHASE_IN,
                magnitude=rate,
                description_template=(
                    "Provisional income above ${threshold:,.0f} makes up to "
                    "{inclusion_pct}% of benefits taxable"
                ),
                version_id=version_id,
                tier=tier,
            ))
    return rules


def _aca_rules(year: int, version_id: str) -> list[ThresholdRule]:
    rules: list[ThresholdRule] = []
    for status in FilingStatus:
        for tier, (fpl_percent, cap) in enumerate(ACA_BANDS, 1):
            rules.append(ThresholdRule(
                id=f"aca-{year}-{status.value.lower()}-{int(fpl_percent)}",
                category=ThresholdCategory.ACA,
                year=year,
                filing_status=status,
                threshold_value=fpl_percent,
                consequence_type=ConsequenceType.CLIFF,
                magnitude=cap,
                description_template=(
                    "Income above {threshold}% of the poverty level changes the "
                    "required premium contribution"
                    if cap is not None
                    else "Income above {threshold}% of the poverty level ends the premium tax credit"
                ),
                version_id=version_id,
                unit=ThresholdUnit.FPL_PERCENT,
                tier=tier,
            ))
    return rules


def seed_reference_data(repository) -> None:
    """Append the bundled reference data to a TaxDataRepository."""
    for version in VERSIONS:
        repository.add_version(version)

    for year in REFERENCE_YEARS:
        version_id = _base_version_id(year)

        for income_type, source in (
            (IncomeType.ORDINARY, FEDERAL_BRACKETS),
            (IncomeType.CAPITAL_GAINS, FEDERAL_LTCG_BRACKETS),
        ):
            for status, schedule in _with_surviving_spouse(source[year]).items():
                repository.add_bracket_table(BracketTable.from_bounds(
                    schedule,
                    version_id=version_id,
                    year=year,
                    filing_status=status,
                    income_type=income_type,
                ))

        for status, amount in _with_surviving_spouse(FEDERAL_STANDARD_DEDUCTION[year]).items():
            repository.add_standard_deduction(DeductionTable(
                version_id=version_id, year=year, filing_status=status, amount=amount,
            ))

        exemptions = _with_surviving_spouse(AMT_EXEMPTION[year])
        phaseouts = _with_surviving_spouse(AMT_PHASEOUT_START[year])
        for status, exemption in exemptions.items():
            breakpoint_ = AMT_28_PERCENT_THRESHOLD[year]
            if status == FilingStatus.MFS:
                breakpoint_ = breakpoint_ / 2
            repository.add_bracket_table(BracketTable.from_bounds(
                [(breakpoint_, Decimal("0.26")), (None, Decimal("0.28"))],
                version_id=version_id,
                year=year,
                filing_status=status,
                income_type=IncomeType.AMT,
            ))
            repository.add_amt_exemption(AmtExemption(
                version_id=version_id,
                year=year,
                filing_status=status,
                exemption=exemption,
                phaseout_start=phaseouts[status],
            ))

        first, additional = POVERTY_GUIDELINES[year]
        repository.add_poverty_guideline(PovertyGuideline(
            version_id=version_id, year=year, first_person=first, additional_person=additional,
        ))

        for rule in (
            _irmaa_rules(year, version_id)
            + _social_security_rules(year, version_id)
            + _aca_rules(year, version_id)
        ):
            repository.add_threshold_rule(rule)

        _seed_states(repository, year, version_id)

    for status, amount in _with_surviving_spouse(FEDERAL_STANDARD_DEDUCTION_2025_CORRECTION).items():
        repository.add_standard_deduction(DeductionTable(
            version_id="2025.1.1", year=2025, filing_status=status, amount=amount,
        ))


def _seed_states(repository, year: int, version_id: str) -> None:
    for state, years in STATE_BRACKETS.items():
        if year not in years:
            continue
        for status, schedule in _with_surviving_spouse(years[year]).items():
            repository.add_bracket_table(BracketTable.from_bounds(
                schedule,
                version_id=version_id,
                year=year,
                filing_status=status,
                income_type=IncomeType.STATE,
                jurisdiction=state,
            ))
        deductions = STATE_STANDARD_DEDUCTION.get(state, {}).get(year, {})
        for status, amount in _with_surviving_spouse(deductions).items():
            repository.add_standard_deduction(DeductionTable(
                version_id=version_id,
                year=year,
                filing_status=status,
                jurisdiction=state,
                amount=amount,
            ))

    flat = {**STATE_FLAT_RATES, **{state: Decimal("0") for state in NO_INCOME_TAX_STATES}}
    for state, rate in flat.items():
        for status in FilingStatus:
            repository.add_bracket_table(BracketTable.from_bounds(
                [(None, rate)],
                version_id=version_id,
                year=year,
                filing_status=status,
                income_type=IncomeType.STATE,
                jurisdiction=state,
            ))
