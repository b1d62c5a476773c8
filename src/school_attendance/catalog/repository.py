from __future__ import annotations

from typing import Protocol, Sequence

from .model import FormEntry


class CatalogRepository(Protocol):
    def list_all(self) -> Sequence[FormEntry]:
        raise NotImplementedError

    def insert(self, entry: FormEntry) -> None:
        raise NotImplementedError
