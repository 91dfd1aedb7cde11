"""Shared fixtures for settle-calc unit tests.

Every test runs against an isolated config directory (via
SETTLE_CALC_CONFIG_PATH) so user settings and rules overrides never leak in.
"""

from datetime import date

import pytest

from settlecalc.sdk import Employee, Partner, load_tax_rules
from settlecalc.sdk.schemas import Dependent
from settlecalc.sdk.taxes import clear_rules_cache


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("SETTLE_CALC_CONFIG_PATH", str(config_dir))
    clear_rules_cache()
    yield {"config_dir": config_dir}
    clear_rules_cache()


@pytest.fixture
def rules():
    """2024 tax rules (bundled)."""
    return load_tax_rules(2024)


@pytest.fixture
def employee():
    """Employee earning 3000.00, admitted 2023-01-10, no dependents."""
    return Employee(name="Ana", salary=3000.0, admitted_on=date(2023, 1, 10))


@pytest.fixture
def employee_with_dependents():
    return Employee(
        name="Bruno",
        salary=1500.0,
        admitted_on=date(2022, 5, 2),
        dependents=[
            Dependent(name="Leo", withholding_eligible=True, family_allowance_eligible=True),
            Dependent(name="Mia", withholding_eligible=True, family_allowance_eligible=True),
        ],
    )


@pytest.fixture
def partner():
    return Partner(name="Carla", pro_labore=5000.0, joined_on=date(2020, 3, 1), ownership_share=50)
