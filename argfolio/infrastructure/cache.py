"""In-process query cache for repository reads.

Entries are keyed by ``(entity, params)``. Writers invalidate a whole entity
so every cached read of that entity is reloaded on the next access.
"""

from collections.abc import Callable, Hashable
from datetime import date
from typing import Any, TypeVar

from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import Movement


T = TypeVar("T")


class QueryCache:
    """Dictionary cache keyed by entity name and query parameters."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, Hashable], Any] = {}

    def get_or_load(
        self,
        entity: str,
        params: Hashable,
        loader: Callable[[], T],
    ) -> T:
        """Return the cached value, loading and storing it on a miss.

        Args:
            entity: Entity name such as ``movements``.
            params: Hashable query parameters.
            loader: Callable producing the value on a miss.

        Returns:
            T: Cached or freshly loaded value.
        """
        key = (entity, params)
        if key not in self._entries:
            self._entries[key] = loader()
        return self._entries[key]

    def invalidate(self, entity: str | None = None) -> None:
        """Drop cached entries for an entity, or all entries when None."""
        if entity is None:
            self._entries.clear()
            return
        for key in [key for key in self._entries if key[0] == entity]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


class CachedMovementsRepository(MovementsRepositoryPort):
    """Movements repository decorator that caches reads.

    Every write goes to the wrapped repository and then invalidates the
    ``movements`` entity.
    """

    ENTITY = "movements"

    def __init__(
        self,
        inner: MovementsRepositoryPort,
        cache: QueryCache | None = None,
    ) -> None:
        self._inner = inner
        self._cache = cache or QueryCache()

    def fetch_movements(
        self,
        instrument_id: str,
        account_id: str,
    ) -> list[Movement]:
        return list(
            self._cache.get_or_load(
                self.ENTITY,
                ("position", instrument_id, account_id),
                lambda: tuple(
                    self._inner.fetch_movements(instrument_id, account_id)
                ),
            )
        )

    def fetch_all_movements(self) -> list[Movement]:
        return list(
            self._cache.get_or_load(
                self.ENTITY,
                ("all",),
                lambda: tuple(self._inner.fetch_all_movements()),
            )
        )

    def fetch_account_movements(self, account_id: str) -> list[Movement]:
        return list(
            self._cache.get_or_load(
                self.ENTITY,
                ("account", account_id),
                lambda: tuple(self._inner.fetch_account_movements(account_id)),
            )
        )

    def upsert_movements(self, movements: list[Movement]) -> int:
        try:
            return self._inner.upsert_movements(movements)
        finally:
            self._cache.invalidate(self.ENTITY)

    def record_accrual(
        self,
        account_id: str,
        movements: list[Movement],
        accrued_through: date,
    ) -> None:
        try:
            self._inner.record_accrual(account_id, movements, accrued_through)
        finally:
            self._cache.invalidate(self.ENTITY)


__all__ = ["QueryCache", "CachedMovementsRepository"]
