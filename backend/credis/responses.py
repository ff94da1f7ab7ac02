# Overview: JSON envelopes and request-argument parsing shared by the blueprints.

from __future__ import annotations

from flask import jsonify, request

from .errors import ValidationError
from .money import to_decimal
from .validation import coerce_datetime, coerce_int


def success(data=None, status: int = 200, *, message: str | None = None, key: str = "data"):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body[key] = data
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    return data


def _arg(*names: str) -> str | None:
    for name in names:
        raw = request.args.get(name)
        if raw is not None and raw.strip():
            return raw
    return None


def int_arg(*names: str, default: int | None = None) -> int | None:
    raw = _arg(*names)
    if raw is None:
        return default
    return coerce_int(raw, names[0])


def datetime_arg(*names: str):
    raw = _arg(*names)
    if raw is None:
        return None
    return coerce_datetime(raw, names[0])


def decimal_arg(*names: str):
    raw = _arg(*names)
    if raw is None:
        return None
    return to_decimal(raw, field=names[0])


def str_arg(*names: str) -> str | None:
    raw = _arg(*names)
    return raw.strip() if raw is not None else None
