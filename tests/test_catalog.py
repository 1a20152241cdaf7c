import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.core.catalog import CatalogError, load_catalog


def test_packaged_catalog_describes_every_page():
    catalog = load_catalog()

    assert set(catalog.entities) == {
        "bids",
        "rfis",
        "submittals",
        "invoices",
        "payments",
        "quotes",
        "approvals",
        "documents",
        "emails",
        "contracts",
    }
    bids = catalog.entity("bids")
    assert bids.scope == "global"
    assert bids.board_columns == ["draft", "submitted", "under-review", "won", "lost", "cancelled"]
    assert bids.sort_kinds()["estimatedValue"] == "number"
    assert catalog.entity("approvals").collection == "approval-requests"
    assert catalog.entity("rfis").status_options()[0].label == "Draft"


def test_wizard_steps_are_loaded_in_order():
    wizard = load_catalog().wizard("contract_generator")

    assert wizard.entity == "contracts"
    assert [step.id for step in wizard.steps] == ["basic", "parties", "terms", "scope", "provisions", "review"]
    assert [item.field for item in wizard.steps[0].required] == ["title", "projectName", "startDate"]


def test_unknown_names_raise_catalog_error():
    catalog = load_catalog()
    with pytest.raises(CatalogError):
        catalog.entity("timesheets")
    with pytest.raises(CatalogError):
        catalog.wizard("payroll")


def test_missing_catalog_file(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.yaml")


def test_board_columns_must_be_statuses(tmp_path):
    path = tmp_path / "entities.yaml"
    path.write_text(
        """
entities:
  rfis:
    label: RFIs
    singular: RFI
    collection: rfis
    statuses:
      - {value: Draft}
    board_columns: [Draft, Closed]
""",
        encoding="utf-8",
    )
    with pytest.raises(CatalogError) as excinfo:
        load_catalog(path)
    assert "Closed" in str(excinfo.value)


def test_sum_stat_requires_field(tmp_path):
    path = tmp_path / "entities.yaml"
    path.write_text(
        """
entities:
  invoices:
    label: Invoices
    singular: invoice
    collection: invoices
    stats:
      - {name: totalInvoiced, kind: sum}
""",
        encoding="utf-8",
    )
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_wizard_must_target_known_entity(tmp_path):
    path = tmp_path / "entities.yaml"
    path.write_text(
        """
entities: {}
wizards:
  contract_generator:
    label: Contract Generator
    entity: contracts
    steps:
      - {id: basic, label: Basic Information}
""",
        encoding="utf-8",
    )
    with pytest.raises(CatalogError):
        load_catalog(path)
