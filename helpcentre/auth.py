from __future__ import annotations

import hmac
from functools import wraps
from typing import Any, Callable

from flask import current_app, jsonify, request


def require_admin_token(view: Callable[..., Any]) -> Callable[..., Any]:
    """Reject requests without the shared admin bearer token."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any):
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return jsonify({"error": "No authorization token provided"}), 401
        token = header[len("Bearer "):].strip()
        expected = current_app.config["ADMIN_TOKEN"]
        if not expected or not hmac.compare_digest(token.encode(), expected.encode()):
            return jsonify({"error": "Invalid token"}), 401
        return view(*args, **kwargs)

    return wrapper
