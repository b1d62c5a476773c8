from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import NotFoundError, StorageError, ValidationError
from .validators import optional_int, optional_str

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def api_view(view):
    """Map domain and storage errors to JSON responses.

    ValidationError -> 400, NotFoundError -> 404, StorageError -> 503.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except StorageError:
            logger.exception("Storage failure in %s", request.path)
            return json_error("Database unavailable, please try again", 503)
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return json_error("Internal server error", 500)

    return wrapper


def roster_filters() -> dict:
    """Read ?form=&class= query parameters shared by every roster/report endpoint."""

    return {
        "form": optional_int(request.args.get("form"), "Form"),
        "class_name": optional_str(request.args.get("class")),
    }
