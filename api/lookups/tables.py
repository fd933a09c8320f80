"""
Lookup table descriptors.

Table and column names here are the only identifiers interpolated into SQL by
the lookups repository; values always travel as parameters.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LookupTable:
    table: str
    id_column: str
    label: str
    path: str

    @property
    def not_found_message(self) -> str:
        return f"{self.label.capitalize()} not found"

    @property
    def conflict_message(self) -> str:
        return f"A {self.label} with that name already exists"

    @property
    def invalid_id_message(self) -> str:
        return f"Invalid {self.id_column}"


DEPARTMENTS = LookupTable(table="department", id_column="department_id", label="department", path="/departments")
STATUSES = LookupTable(table="status", id_column="status_id", label="status", path="/statuses")

ALL_TABLES = (DEPARTMENTS, STATUSES)
