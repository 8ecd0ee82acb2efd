"""
Listing categories served by the API.

Each category is a `Resource`: a table name plus an ordered list of text
columns. Everything else (DDL, insert/select/delete statements, parameter
binding order, routes) is derived from it, so adding a category means adding
one entry to `RESOURCES`.

Identifiers are double-quoted in the generated SQL. Column names are
camelCase and Postgres folds unquoted names to lower case, which would change
the keys clients get back.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CONTACT_FIELDS = ("facebookLink", "telegramLink")


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class Resource:
    name: str
    fields: tuple[str, ...]
    label: str

    @property
    def table(self) -> str:
        return quote_ident(self.name)

    def _column_list(self) -> str:
        return ", ".join(quote_ident(f) for f in self.fields)

    def create_table_sql(self) -> str:
        columns = ",\n    ".join(f"{quote_ident(f)} TEXT" for f in self.fields)
        return (
            f"CREATE TABLE IF NOT EXISTS {self.table} (\n"
            f"    id SERIAL PRIMARY KEY,\n"
            f"    {columns}\n"
            f")"
        )

    def select_all_sql(self) -> str:
        # No ORDER BY: row order is whatever the database returns.
        return f"SELECT id, {self._column_list()} FROM {self.table}"

    def insert_sql(self) -> str:
        placeholders = ", ".join(f"${i}" for i in range(1, len(self.fields) + 1))
        return f"INSERT INTO {self.table} ({self._column_list()}) VALUES ({placeholders}) RETURNING id"

    def delete_by_id_sql(self) -> str:
        return f"DELETE FROM {self.table} WHERE id = $1 RETURNING id"

    def bind(self, values: Mapping[str, Any] | None) -> tuple[str | None, ...]:
        """
        Positional insert arguments in field order.

        Missing keys become None, unknown keys are dropped, and non-string
        scalars are stored as their text form.
        """
        values = values or {}
        return tuple(_as_text(values.get(f)) for f in self.fields)


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


RESOURCES: tuple[Resource, ...] = (
    Resource(
        name="jobs",
        label="Job",
        fields=(
            "name",
            "pinkCard",
            "speakThai",
            "paymentMethod",
            "dailySalary",
            "monthlySalary",
            "accommodation",
            *CONTACT_FIELDS,
        ),
    ),
    Resource(
        name="hotels",
        label="Hotel",
        fields=("name", "location", "pricePerNight", "amenities", *CONTACT_FIELDS),
    ),
    Resource(
        name="restaurants",
        label="Restaurant",
        fields=("name", "cuisineType", "location", "priceRange", *CONTACT_FIELDS),
    ),
    Resource(
        name="travel",
        label="Travel",
        fields=("destination", "travelType", "duration", "price", *CONTACT_FIELDS),
    ),
    Resource(
        name="identity",
        label="Identity",
        fields=("name", "documentType", "location", "price", *CONTACT_FIELDS),
    ),
)

_BY_NAME = {r.name: r for r in RESOURCES}


def get_resource(name: str) -> Resource:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown resource: {name}") from None


def schema_statements(resources: tuple[Resource, ...] = RESOURCES) -> list[str]:
    return [r.create_table_sql() for r in resources]
