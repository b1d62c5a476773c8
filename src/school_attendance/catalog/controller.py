from __future__ import annotations

from flask import Flask, jsonify

from ..common.responses import api_view
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/forms", methods=["GET"], endpoint="api_forms")
    @api_view
    def api_forms():
        return jsonify(container.catalog_service.list_forms())
