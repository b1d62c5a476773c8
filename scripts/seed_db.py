"""Seed the form/class catalog. Must run before the app serves scans."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from school_attendance.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        checkin_window=settings.CHECKIN_WINDOW,
        timezone=settings.SCHOOL_TIMEZONE,
    )

    added = container.catalog_service.seed_defaults()
    catalog = container.catalog_service.load()
    print(f"OK: Catalog seeded (added={added}, forms={len(catalog)})")


if __name__ == "__main__":
    main()
