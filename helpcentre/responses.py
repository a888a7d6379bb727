from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, request

from .store import ContentStore


def json_error(message: str, status: int = 400, **extra: Any):
    payload: dict[str, Any] = {"error": message}
    payload.update(extra)
    return jsonify(payload), status


def current_store() -> ContentStore:
    return current_app.extensions["helpcentre"]


def query_flag(name: str) -> bool:
    return request.args.get(name, "").strip().lower() in {"1", "true", "yes", "on"}
