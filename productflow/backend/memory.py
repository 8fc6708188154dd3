"""In-process catalog backend.

Backs ``wizard run --dry-run`` and the test suite. Rows live in plain
dicts keyed by table name and get UUID ids on insert, like the hosted
tables do.
"""

import copy
import re
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from .base import BackendError, CatalogBackend, Filters, FilterValue, ILike, In, Row

# "name(col, col)" inside a select list
_EMBED = re.compile(r"^(\w+)\((.*)\)$")


def _split_columns(columns: str) -> List[str]:
    """Split a select list on top-level commas."""
    parts, depth, current = [], 0, ""
    for ch in "".join(columns.split()):
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current += ch
    if current:
        parts.append(current)
    return parts


def _matches(row: Row, column: str, expected: FilterValue) -> bool:
    actual = row.get(column)
    if expected is None:
        return actual is None
    if isinstance(expected, In):
        return actual in expected.values
    if isinstance(expected, ILike):
        if actual is None:
            return False
        pattern = "".join(
            ".*" if ch in "*%" else re.escape(ch) for ch in expected.pattern
        )
        return re.fullmatch(pattern, str(actual), flags=re.IGNORECASE) is not None
    return actual == expected


class MemoryBackend(CatalogBackend):
    """
    Catalog backend kept in memory.

    Embedded selects such as ``product_option_values(id,value)`` on
    ``product_options`` are resolved through the ``<singular>_id`` foreign
    key naming the catalog schema uses.
    """

    name = "memory"

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None):
        self.tables: Dict[str, List[Row]] = copy.deepcopy(tables) if tables else {}
        self.fail_on: Dict[str, str] = {}
        self.insert_log: List[Tuple[str, List[Row]]] = []

    def fail_inserts_into(self, table: str, message: str = "insert failed") -> None:
        """Make the next inserts into ``table`` raise (for failure paths)."""
        self.fail_on[table] = message

    def rows(self, table: str) -> List[Row]:
        return self.tables.setdefault(table, [])

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Row]:
        matched = [
            row for row in self.rows(table)
            if all(_matches(row, col, val) for col, val in (filters or {}).items())
        ]

        if order:
            column, _, direction = order.partition(".")
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column)),
                         reverse=direction == "desc")

        if limit is not None:
            matched = matched[:limit]

        return [self._project(table, row, columns) for row in matched]

    def insert(
        self,
        table: str,
        rows: Union[Row, List[Row]],
        returning: str = "id",
    ) -> List[Row]:
        if table in self.fail_on:
            raise BackendError(self.fail_on[table], status_code=400)

        payload = rows if isinstance(rows, list) else [rows]
        created = []
        for row in payload:
            stored = dict(row)
            stored.setdefault("id", str(uuid.uuid4()))
            self.rows(table).append(stored)
            created.append(stored)

        self.insert_log.append((table, [dict(r) for r in created]))
        return [self._project(table, row, returning) for row in created]

    def ping(self) -> bool:
        return True

    def _project(self, table: str, row: Row, columns: str) -> Row:
        result: Row = {}
        for column in _split_columns(columns):
            if column == "*":
                result.update(row)
                continue
            embed = _EMBED.match(column)
            if embed:
                related, inner = embed.groups()
                foreign_key = f"{table.rstrip('s')}_id"
                result[related] = [
                    self._project(related, child, inner)
                    for child in self.rows(related)
                    if child.get(foreign_key) == row.get("id")
                ]
            else:
                result[column] = row.get(column)
        return result

    def __repr__(self) -> str:
        counts = {name: len(rows) for name, rows in self.tables.items()}
        return f"{self.__class__.__name__}({counts})"
