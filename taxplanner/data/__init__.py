"""Tax reference data: versioned repository, bundled seed data, dataset loader."""

from taxplanner.data.loader import build_repository, load_dataset, parse_dataset
from taxplanner.data.repository import TaxDataRepository, TaxYearRegistry

__all__ = [
    "TaxDataRepository",
    "TaxYearRegistry",
    "build_repository",
    "load_dataset",
    "parse_dataset",
]
