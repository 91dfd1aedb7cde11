"""Input file loading for CLI commands.

Ledger files are YAML (JSON is accepted too, as a YAML subset):

    year: 2024
    subject:
      salary: 3000
      admitted_on: 2023-02-01
      dependents:
        - {name: Leo, withholding_eligible: true, family_allowance_eligible: true}
    rubricas:
      - {id: overtime, code: "200", description: Overtime 50%, kind: earning,
         affects_contribution: true, affects_fund: true, affects_withholding: true,
         auto_rule: overtime}
    events:
      - {rubrica: overtime, reference: 10}
"""

from pathlib import Path
from typing import Dict

import click
import yaml
from pydantic import ValidationError

from settlecalc.sdk import (
    CompensationSubject,
    RubricaLedger,
    Rubrica,
    SettlementInputError,
    TaxRules,
    subject_from_dict,
)


def load_input_file(path: str) -> dict:
    """Load a YAML/JSON input file into a dict."""
    with open(Path(path), "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise click.ClickException(f"Input file must contain a mapping: {path}")
    return data


def load_subject(data: dict) -> CompensationSubject:
    if "subject" not in data:
        raise click.ClickException("Input file has no 'subject' section")
    try:
        return subject_from_dict(data["subject"])
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid subject: {e}")


def load_rubricas(data: dict) -> Dict[str, Rubrica]:
    catalog = {}
    for item in data.get("rubricas", []):
        try:
            rubrica = Rubrica.model_validate(item)
        except ValidationError as e:
            raise click.ClickException(f"Invalid rubrica {item.get('id', '?')}: {e}")
        catalog[rubrica.id] = rubrica
    return catalog


def build_ledger(data: dict, rules: TaxRules) -> RubricaLedger:
    """Replay the file's events onto a freshly seeded ledger."""
    subject = load_subject(data)
    catalog = load_rubricas(data)
    ledger = RubricaLedger(subject, rules)

    for entry in data.get("events", []):
        rubrica_id = entry.get("rubrica")
        if rubrica_id not in catalog:
            raise click.ClickException(f"Event references unknown rubrica {rubrica_id!r}")
        try:
            ledger.add_event(catalog[rubrica_id], entry.get("reference"))
            for field in ("earning_amount", "deduction_amount"):
                if field in entry:
                    ledger.update_event(rubrica_id, field, entry[field])
        except SettlementInputError as e:
            raise click.ClickException(str(e))
    return ledger
