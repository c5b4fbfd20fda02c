"""Port for reading and writing instruments."""

from typing import Protocol

from argfolio.domain.models import Instrument


class InstrumentsRepositoryPort(Protocol):
    """Port exposing access to instruments."""

    def fetch_instruments(self) -> list[Instrument]:
        """Return every instrument."""

    def fetch_instrument(self, instrument_id: str) -> Instrument | None:
        """Return one instrument, or None when it does not exist."""

    def upsert_instruments(self, instruments: list[Instrument]) -> int:
        """Insert or replace instruments by id and return the count written."""


__all__ = ["InstrumentsRepositoryPort"]
