"""Entity catalog: vocabularies, searchable fields and page layout per record type."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from constructx.core.settings import CONFIG_DIR
from constructx.domain import ASCENDING, StatusOption

logger = logging.getLogger(__name__)

SortKind = Literal["text", "number", "date", "enum", "bool"]


class CatalogError(RuntimeError):
    """Raised when the entity catalog cannot be loaded."""


class StatusDefinition(BaseModel):
    value: str
    label: str | None = None
    color: str | None = None

    def option(self) -> StatusOption:
        return StatusOption(value=self.value, label=self.label or self.value, color=self.color)


class FilterDefinition(BaseModel):
    name: str
    field: str
    label: str | None = None
    options: list[str] = Field(default_factory=list)


class SortFieldDefinition(BaseModel):
    field: str
    kind: SortKind = "text"
    label: str | None = None


class StatDefinition(BaseModel):
    name: str
    kind: Literal["count", "sum"] = "count"
    field: str | None = None
    where: dict[str, list[str]] = Field(default_factory=dict)
    overdue_field: str | None = None

    @model_validator(mode="after")
    def _sum_needs_field(self) -> "StatDefinition":
        if self.kind == "sum" and not self.field:
            raise ValueError(f"stat {self.name!r} sums nothing: field is required")
        return self


class EntityDefinition(BaseModel):
    name: str
    label: str
    singular: str
    collection: str
    scope: Literal["nested", "query", "global"] = "nested"
    status_field: str = "status"
    statuses: list[StatusDefinition] = Field(default_factory=list)
    search_fields: list[str] = Field(default_factory=list)
    filters: list[FilterDefinition] = Field(default_factory=list)
    sort_fields: list[SortFieldDefinition] = Field(default_factory=list)
    default_sort: str | None = None
    default_direction: Literal["asc", "desc"] = ASCENDING
    board_columns: list[str] = Field(default_factory=list)
    board_total_field: str | None = None
    stats: list[StatDefinition] = Field(default_factory=list)
    bulk_status: bool = True

    @model_validator(mode="after")
    def _check_references(self) -> "EntityDefinition":
        sort_names = {item.field for item in self.sort_fields}
        if self.default_sort and self.default_sort not in sort_names:
            raise ValueError(f"{self.name}: default_sort {self.default_sort!r} is not a sort field")
        values = {item.value for item in self.statuses}
        unknown = [column for column in self.board_columns if column not in values]
        if unknown:
            raise ValueError(f"{self.name}: board columns {unknown} are not statuses")
        return self

    @property
    def status_values(self) -> list[str]:
        return [item.value for item in self.statuses]

    def status_options(self) -> list[StatusOption]:
        return [item.option() for item in self.statuses]

    def filter_fields(self) -> dict[str, str]:
        return {item.name: item.field for item in self.filters}

    def sort_kinds(self) -> dict[str, str]:
        return {item.field: item.kind for item in self.sort_fields}

    def summary(self) -> dict[str, object]:
        return {
            "name": self.name,
            "label": self.label,
            "statuses": [item.model_dump() for item in self.statuses],
            "filters": [item.model_dump() for item in self.filters],
            "sort_fields": [item.model_dump() for item in self.sort_fields],
            "default_sort": {"key": self.default_sort, "direction": self.default_direction},
            "board": bool(self.board_columns),
        }


class RequiredField(BaseModel):
    field: str
    label: str


class WizardStepDefinition(BaseModel):
    id: str
    label: str
    description: str = ""
    required: list[RequiredField] = Field(default_factory=list)


class WizardDefinition(BaseModel):
    name: str
    label: str
    entity: str
    defaults: dict[str, object] = Field(default_factory=dict)
    steps: list[WizardStepDefinition]

    @model_validator(mode="after")
    def _has_steps(self) -> "WizardDefinition":
        if not self.steps:
            raise ValueError(f"wizard {self.name!r} has no steps")
        return self


class Catalog(BaseModel):
    entities: dict[str, EntityDefinition]
    wizards: dict[str, WizardDefinition] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _wizards_target_entities(self) -> "Catalog":
        for wizard in self.wizards.values():
            if wizard.entity not in self.entities:
                raise ValueError(f"wizard {wizard.name!r} targets unknown entity {wizard.entity!r}")
        return self

    def entity(self, name: str) -> EntityDefinition:
        try:
            return self.entities[name]
        except KeyError as exc:
            raise CatalogError(f"unknown entity {name!r}") from exc

    def wizard(self, name: str) -> WizardDefinition:
        try:
            return self.wizards[name]
        except KeyError as exc:
            raise CatalogError(f"unknown wizard {name!r}") from exc


def _inject_names(section: dict | None) -> dict:
    named: dict[str, dict] = {}
    for name, body in (section or {}).items():
        item = dict(body or {})
        item.setdefault("name", name)
        named[name] = item
    return named


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate the YAML catalog."""

    path = path or CONFIG_DIR / "entities.yaml"
    if not path.exists():
        raise CatalogError(f"catalog not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp) or {}
    try:
        catalog = Catalog(
            entities=_inject_names(raw.get("entities")),
            wizards=_inject_names(raw.get("wizards")),
        )
    except ValidationError as exc:
        raise CatalogError(f"invalid catalog {path}: {exc}") from exc
    logger.debug("loaded catalog %s with %d entities", path, len(catalog.entities))
    return catalog


_catalog: Catalog | None = None


def configure_catalog(catalog: Catalog) -> None:
    global _catalog
    _catalog = catalog


def get_catalog() -> Catalog:
    """Return the process-wide catalog, loading the packaged one on first use."""

    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog


__all__ = [
    "Catalog",
    "CatalogError",
    "EntityDefinition",
    "WizardDefinition",
    "configure_catalog",
    "get_catalog",
    "load_catalog",
]
