from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_clock_time, parse_iso_datetime
from ..common.responses import api_view
from ..container import Container
from ..core.enums import ScanOutcomeKind


def register(app: Flask, container: Container) -> None:
    def _observed_at(data: dict) -> Optional[datetime]:
        """Kiosk-supplied scan time; the kiosk clock wins over the server clock."""

        observed_at = data.get("observedAt")
        if observed_at:
            return parse_iso_datetime(observed_at)

        client_time = data.get("clientTime")
        if client_time:
            return container.clock.at(parse_clock_time(str(client_time)))
        return None

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_scan")
    @api_view
    def api_scan():
        data = request.get_json(silent=True) or {}
        outcome = container.scan_service.resolve_scan(str(data.get("barcode") or ""), _observed_at(data))

        status_code = 404 if outcome.kind == ScanOutcomeKind.NOT_FOUND else 200
        return jsonify(outcome.to_dict()), status_code
