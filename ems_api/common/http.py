# ems_api/common/http.py
from flask import jsonify


def _envelope(success: bool, key: str, body, status: int, meta=None):
    payload = {"success": success, key: body}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status


def ok(data=None, status=200, **meta):
    return _envelope(True, "data", data, status, meta)


def fail(message="Bad Request", status=400, code=None, detail=None, errors=None):
    """Error envelope; `code` is the machine-readable APIError code when there is one."""
    err = {"message": message}
    err.update({k: v for k, v in (("code", code), ("detail", detail), ("errors", errors)) if v})
    return _envelope(False, "error", err, status)
