from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.responses import error_response, internal_error_response
from ..common.validators import require_coordinate, require_non_empty
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .service import AttendanceSubmission

logger = logging.getLogger(__name__)


def parse_submission(data: Optional[dict[str, Any]]) -> AttendanceSubmission:
    """Build a submission from the JSON body sent by the client app."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    proximity = data.get("beaconProximity") or {}
    if not isinstance(proximity, dict):
        raise ValidationError("beaconProximity must be an object")
    beacon_id = proximity.get("beaconId")

    return AttendanceSubmission(
        roll_number=require_non_empty(data.get("rollNumber"), "rollNumber"),
        class_name=require_non_empty(data.get("className"), "className"),
        class_code=require_non_empty(data.get("classCode"), "classCode", strip=False),
        latitude=require_coordinate(data.get("latitude"), "latitude", limit=90),
        longitude=require_coordinate(data.get("longitude"), "longitude", limit=180),
        beacon_id=str(beacon_id) if beacon_id is not None else None,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="api_submit_attendance")
    def api_submit_attendance():
        try:
            submission = parse_submission(request.get_json(silent=True))
            receipt = container.attendance_service.submit(submission)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error submitting attendance")
            return internal_error_response("Error submitting attendance")

        return jsonify({"message": "Attendance submitted successfully", "details": receipt.to_dict()}), 200

    @app.route("/api/students/<roll_number>/attendance", methods=["GET"], endpoint="api_attendance_history")
    def api_attendance_history(roll_number: str):
        try:
            rows = container.history_service.get_history(roll_number)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching attendance history for %s", roll_number)
            return internal_error_response("Error fetching attendance history")

        return jsonify({"success": True, "history": [r.to_dict() for r in rows]}), 200
