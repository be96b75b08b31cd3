import copy
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

USERS_TABLE = "users"
SWAPS_TABLE = "swaps"
FEEDBACKS_TABLE = "feedbacks"


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentStore(ABC):
    """
    Table-of-documents storage used by every service.

    Filters are equality matches. ``filters`` must all match; ``or_filters`` is a
    list of equality groups of which at least one must match.
    """

    name = "abstract"

    async def execute_query(
        self,
        table: str,
        query_type: str,
        data: Optional[Document] = None,
        filters: Optional[Dict[str, Any]] = None,
        or_filters: Optional[List[Dict[str, Any]]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ):
        """
        Execute a query against the store.

        Args:
            table: The table to query
            query_type: One of select, insert, update, delete, count
            data: The document to insert or the fields to update
            filters: Equality filters that must all match
            or_filters: Equality groups of which at least one must match
            order_by: Mapping of column to "asc" or "desc"
            limit: The maximum number of rows to return

        Returns:
            A list of documents, or an int for count queries
        """
        logger.debug("Executing %s on table %s (filters=%s, or_filters=%s)", query_type, table, filters, or_filters)

        if query_type == "select":
            return await self.select(table, filters, or_filters, order_by, limit)
        elif query_type == "insert":
            if not data:
                raise ValueError("Data is required for insert operations")
            return await self.insert(table, data)
        elif query_type == "update":
            if not data:
                raise ValueError("Data is required for update operations")
            if not filters:
                raise ValueError("Filters are required for update operations")
            return await self.update(table, filters, data)
        elif query_type == "delete":
            if not filters and not or_filters:
                raise ValueError("Filters are required for delete operations")
            return await self.delete(table, filters, or_filters)
        elif query_type == "count":
            return await self.count(table, filters)
        else:
            raise ValueError(f"Invalid query type: {query_type}")

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        or_filters: Optional[List[Dict[str, Any]]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ...

    @abstractmethod
    async def insert(self, table: str, data: Document) -> List[Document]:
        ...

    @abstractmethod
    async def update(self, table: str, filters: Dict[str, Any], data: Document) -> List[Document]:
        ...

    @abstractmethod
    async def delete(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        or_filters: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Document]:
        ...

    @abstractmethod
    async def count(self, table: str, filters: Optional[Dict[str, Any]] = None) -> int:
        ...


class MemoryStore(DocumentStore):
    """Process-local store. Documents are copied in and out so callers never share state with it."""

    name = "memory"

    def __init__(self):
        self._tables: Dict[str, List[Document]] = {}

    def _rows(self, table: str) -> List[Document]:
        return self._tables.setdefault(table, [])

    @staticmethod
    def _matches(
        row: Document,
        filters: Optional[Dict[str, Any]],
        or_filters: Optional[List[Dict[str, Any]]],
    ) -> bool:
        if filters and any(row.get(key) != value for key, value in filters.items()):
            return False
        if or_filters and not any(
            all(row.get(key) == value for key, value in group.items()) for group in or_filters
        ):
            return False
        return True

    async def select(self, table, filters=None, or_filters=None, order_by=None, limit=None):
        rows = [row for row in self._rows(table) if self._matches(row, filters, or_filters)]

        if order_by:
            # Stable sorts applied last key first leave the first key primary
            for key, direction in reversed(list(order_by.items())):
                reverse = direction.lower() == "desc"
                rows.sort(key=lambda x: x.get(key) or "", reverse=reverse)

        if limit is not None:
            rows = rows[:limit]

        return copy.deepcopy(rows)

    async def insert(self, table, data):
        row = copy.deepcopy(data)
        self._rows(table).append(row)
        return [copy.deepcopy(row)]

    async def update(self, table, filters, data):
        updated = []
        for row in self._rows(table):
            if self._matches(row, filters, None):
                row.update(copy.deepcopy(data))
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table, filters=None, or_filters=None):
        kept, removed = [], []
        for row in self._rows(table):
            if self._matches(row, filters, or_filters):
                removed.append(row)
            else:
                kept.append(row)
        self._tables[table] = kept
        return removed

    async def count(self, table, filters=None):
        return sum(1 for row in self._rows(table) if self._matches(row, filters, None))