from __future__ import annotations

from flask import jsonify

from ..core.exceptions import DomainError


def error_response(e: DomainError):
    return jsonify(e.to_dict()), e.http_status


def internal_error_response(message: str):
    """Generic 500 body; details stay in the server log."""
    return jsonify({"message": message, "code": "internal"}), 500
