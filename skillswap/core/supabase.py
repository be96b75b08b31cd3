import logging
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from .config import Settings
from .exceptions import ConfigurationError
from .storage import DocumentStore, MemoryStore

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    # PostgREST expects lowercase booleans in filter strings
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _or_clause(or_filters: List[Dict[str, Any]]) -> str:
    parts = []
    for group in or_filters:
        conditions = [f"{key}.eq.{_format_value(value)}" for key, value in group.items()]
        if len(conditions) == 1:
            parts.append(conditions[0])
        else:
            parts.append(f"and({','.join(conditions)})")
    return ",".join(parts)


class SupabaseStore(DocumentStore):
    """DocumentStore backed by Supabase tables (users, swaps, feedbacks)."""

    name = "supabase"

    def __init__(self, client: Client):
        self.client = client

    def _apply_filters(self, query, filters, or_filters):
        for key, value in (filters or {}).items():
            query = query.eq(key, _format_value(value))
        if or_filters:
            query = query.or_(_or_clause(or_filters))
        return query

    async def select(self, table, filters=None, or_filters=None, order_by=None, limit=None):
        try:
            query = self._apply_filters(self.client.table(table).select("*"), filters, or_filters)
            for key, direction in (order_by or {}).items():
                query = query.order(key, desc=direction.lower() == "desc")
            if limit is not None:
                query = query.limit(limit)
            return query.execute().data
        except Exception:
            logger.exception("Select on table %s failed", table)
            raise

    async def insert(self, table, data):
        try:
            return self.client.table(table).insert(data).execute().data
        except Exception:
            logger.exception("Insert into table %s failed", table)
            raise

    async def update(self, table, filters, data):
        try:
            query = self._apply_filters(self.client.table(table).update(data), filters, None)
            return query.execute().data
        except Exception:
            logger.exception("Update on table %s failed", table)
            raise

    async def delete(self, table, filters=None, or_filters=None):
        try:
            query = self._apply_filters(self.client.table(table).delete(), filters, or_filters)
            return query.execute().data
        except Exception:
            logger.exception("Delete on table %s failed", table)
            raise

    async def count(self, table, filters=None):
        try:
            query = self._apply_filters(self.client.table(table).select("id", count="exact"), filters, None)
            return query.execute().count or 0
        except Exception:
            logger.exception("Count on table %s failed", table)
            raise


def get_supabase_client(settings: Settings) -> Client:
    """Get Supabase client instance."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_KEY must be set in environment variables"
        )
    return create_client(settings.supabase_url, settings.supabase_key)


def build_store(settings: Settings) -> DocumentStore:
    """
    Create the store selected by ``STORAGE_BACKEND``.

    Args:
        settings: Application settings

    Returns:
        A MemoryStore or a SupabaseStore
    """
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "supabase":
        logger.info("Connecting to Supabase at %s", settings.supabase_url)
        return SupabaseStore(get_supabase_client(settings))
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
