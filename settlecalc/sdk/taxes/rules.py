"""Tax rules loading.

Rules are bundled per calendar year in settlecalc/tax_rules/{year}.yaml.
A file with the same name in the user's config directory
(see settlecalc.sdk.config.get_rules_override_dir) takes precedence.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml

from ..config import get_rules_override_dir, get_setting
from ..errors import TaxRulesNotFoundError
from .schemas import TaxRules

logger = logging.getLogger(__name__)


def _get_tax_rules_dir() -> Path:
    """Get the bundled tax_rules directory path."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> settlecalc
    return package_root / "tax_rules"


def _rules_dirs() -> list[Path]:
    """Directories searched for rules files, override first."""
    return [get_rules_override_dir(), _get_tax_rules_dir()]


def get_available_years() -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    years = set()
    for rules_dir in _rules_dirs():
        if rules_dir.is_dir():
            years.update(int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


def _resolve_year(year: Optional[Union[int, str]]) -> int:
    """Pick the rules year to load.

    Explicit year wins, then the rules_year setting, then the newest
    available year. A year without a file falls back to the newest prior
    year, since tables stay in force until replaced.
    """
    available = get_available_years()
    if not available:
        raise TaxRulesNotFoundError("No tax rules files found")

    if year is None:
        year = get_setting("rules_year")
    if year is None:
        return available[0]

    target = int(year)
    if target in available:
        return target

    prior = [y for y in available if y < target]
    if not prior:
        raise TaxRulesNotFoundError(
            f"Tax rules not found for year {target} (available: {sorted(available)})"
        )
    logger.debug("No tax rules for %s, falling back to %s", target, prior[0])
    return prior[0]


def _find_rules_file(year: int) -> Path:
    for rules_dir in _rules_dirs():
        candidate = rules_dir / f"{year}.yaml"
        if candidate.exists():
            return candidate
    raise TaxRulesNotFoundError(f"Tax rules file not found for year {year}")


@lru_cache(maxsize=None)
def _load_tax_rules_cached(year: int) -> TaxRules:
    config_file = _find_rules_file(year)
    logger.debug("Loading tax rules from %s", config_file)
    with open(config_file, "r") as f:
        data = yaml.safe_load(f)
    return TaxRules.model_validate(data)


def load_tax_rules(year: Optional[Union[int, str]] = None) -> TaxRules:
    """Load and validate tax rules for a year.

    Args:
        year: Calendar year (e.g. 2024). None uses settings/newest year.

    Returns:
        Validated TaxRules

    Raises:
        TaxRulesNotFoundError: If no rules file covers the year
        pydantic.ValidationError: If the rules file is malformed
    """
    return _load_tax_rules_cached(_resolve_year(year))


def clear_rules_cache() -> None:
    """Drop cached rules (after editing override files, or in tests)."""
    _load_tax_rules_cached.cache_clear()
