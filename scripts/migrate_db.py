"""One-time migration for databases created by the old Node server.

1. Rename attendance.`date` to attendance_date and require time_in.
2. Mark old check-ins at or after the late threshold as late.
3. Remove duplicate attendance rows (keeps the first per student/day).
4. Add the (student_id, attendance_date) unique key.
5. Collapse duplicate forms rows and add a unique key on forms.form.
6. Rewrite comma-separated class lists as JSON arrays.

Run scripts/seed_db.py afterwards to add the sixth-form entries.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from school_attendance.common.datetime_utils import parse_clock_time
from school_attendance.database.bootstrap import (
    backfill_late_status,
    cleanup_duplicate_attendance,
    ensure_attendance_unique_key,
    ensure_forms_unique_form,
    normalize_catalog_classes,
    rename_legacy_attendance_date,
    require_attendance_time_in,
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    renamed = rename_legacy_attendance_date(db_config)
    untimed = require_attendance_time_in(db_config)
    late = backfill_late_status(db_config, parse_clock_time(settings.CHECKIN_WINDOW["late"]))
    deleted = cleanup_duplicate_attendance(db_config)
    added_key = ensure_attendance_unique_key(db_config)
    forms_key = ensure_forms_unique_form(db_config)
    normalized = normalize_catalog_classes(db_config)

    print(
        f"OK: date column renamed={renamed}, rows without time_in removed={untimed}, "
        f"backfilled late={late}, duplicates removed={deleted}, unique key added={added_key}, "
        f"forms key added={forms_key}, catalog rows normalized={normalized}"
    )


if __name__ == "__main__":
    main()
