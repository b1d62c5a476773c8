from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..core.constants import DEFAULT_FORMS
from .model import FormCatalog, FormEntry
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


class CatalogNotReadyError(RuntimeError):
    """Raised at startup when the catalog has not been seeded."""


class CatalogService:
    """Use case: seed and serve the form/class catalog.

    The catalog is loaded once at startup and treated as read-only afterwards;
    seed_defaults() is the only writer.
    """

    def __init__(self, catalog: CatalogRepository, *, defaults: Optional[Mapping[int, tuple]] = None):
        self._repo = catalog
        self._defaults = dict(DEFAULT_FORMS if defaults is None else defaults)
        self._catalog: Optional[FormCatalog] = None

    def seed_defaults(self) -> int:
        existing = {e.form for e in self._repo.list_all()}
        added = 0
        for form, (name, classes) in sorted(self._defaults.items()):
            if form in existing:
                continue
            self._repo.insert(FormEntry(form=form, name=name, classes=tuple(classes)))
            added += 1
        if added:
            logger.info("Seeded %d form(s) into the catalog", added)
        self._catalog = None
        return added

    def load(self) -> FormCatalog:
        catalog = FormCatalog(self._repo.list_all())
        missing = sorted(set(self._defaults) - {e.form for e in catalog.forms()})
        if missing:
            raise CatalogNotReadyError(f"Form catalog is missing forms {missing}; seed it before serving requests")
        self._catalog = catalog
        return catalog

    @property
    def catalog(self) -> FormCatalog:
        if self._catalog is None:
            return self.load()
        return self._catalog

    def list_forms(self) -> list[dict]:
        return [e.to_dict() for e in self.catalog.forms()]
