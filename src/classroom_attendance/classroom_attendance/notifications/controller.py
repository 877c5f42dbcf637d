from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.responses import error_response, internal_error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/<roll_number>/notifications", methods=["GET"], endpoint="api_notifications")
    def api_notifications(roll_number: str):
        try:
            feed = container.notification_service.get_notifications(roll_number)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching notifications for %s", roll_number)
            return internal_error_response("Error fetching notifications")
        return jsonify(feed.to_dict()), 200
