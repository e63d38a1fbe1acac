"""Settlement hierarchy loaded from YAML configuration.

Regions contain companies, companies contain settlements. The flattened
file order is the master list the engine scores.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True)
class Company:
    name: str
    settlements: tuple[str, ...]


@dataclass(frozen=True)
class Region:
    name: str
    companies: tuple[Company, ...]


_REGIONS_CACHE: list[Region] | None = None
_DEFAULT_PATH = Path(__file__).resolve().parent / "settlements.yaml"


def load_regions(path: Path | None = None) -> list[Region]:
    """Load the region hierarchy from YAML.

    Args:
        path: Path to settlements.yaml. Defaults to the bundled settlements.yaml.

    Returns:
        Regions in file order.

    Raises:
        ValueError: A settlement appears more than once.
    """
    global _REGIONS_CACHE
    if _REGIONS_CACHE is not None and path is None:
        return _REGIONS_CACHE

    yaml_path = path or _DEFAULT_PATH
    with open(yaml_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    regions = [
        Region(
            name=r["name"],
            companies=tuple(
                Company(name=c["name"], settlements=tuple(c.get("settlements") or ()))
                for c in r.get("companies") or ()
            ),
        )
        for r in data["regions"]
    ]

    names = all_settlements(regions)
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"Duplicate settlements in {yaml_path}: {', '.join(dupes)}")

    if path is None:
        _REGIONS_CACHE = regions

    return regions


def all_settlements(regions: list[Region] | None = None) -> list[str]:
    """Flat master list, in file order."""
    regions = regions if regions is not None else load_regions()
    return [s for r in regions for c in r.companies for s in c.settlements]


def company_of(settlement: str, regions: list[Region] | None = None) -> str | None:
    regions = regions if regions is not None else load_regions()
    for region in regions:
        for company in region.companies:
            if settlement in company.settlements:
                return company.name
    return None


def region_of(settlement: str, regions: list[Region] | None = None) -> str | None:
    regions = regions if regions is not None else load_regions()
    for region in regions:
        for company in region.companies:
            if settlement in company.settlements:
                return region.name
    return None
