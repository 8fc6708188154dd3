"""Base catalog backend class, filter types and errors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union


class BackendError(Exception):
    """Exception raised when the backend rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


@dataclass(frozen=True)
class In:
    """Column value is one of ``values``."""
    values: Iterable[Any]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class ILike:
    """Case-insensitive pattern match; ``*`` is the wildcard."""
    pattern: str


FilterValue = Union[str, int, float, bool, None, In, ILike]
Filters = Dict[str, FilterValue]
Row = Dict[str, Any]


class CatalogBackend(ABC):
    """
    Base class for catalog data access.

    Mirrors the small subset of a PostgREST client the wizard uses:
    filtered selects and inserts that return generated columns.
    """

    name: str = "base"

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Row]:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: PostgREST select list (may embed related tables)
            filters: Column filters, combined with AND
            limit: Maximum number of rows
            order: Column to order by, optionally suffixed with ``.desc``

        Returns:
            Matching rows
        """
        pass

    @abstractmethod
    def insert(
        self,
        table: str,
        rows: Union[Row, List[Row]],
        returning: str = "id",
    ) -> List[Row]:
        """
        Insert one or more rows.

        Args:
            table: Table name
            rows: Row or list of rows
            returning: Columns to return for the created rows

        Returns:
            Created rows projected to ``returning``
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Check the backend answers."""
        pass

    def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Filters] = None,
    ) -> Optional[Row]:
        """Select the first matching row, or None."""
        rows = self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
