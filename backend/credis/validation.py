from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta

from credis.errors import ValidationError
from credis.models import TRANSACTION_TYPES, PAYMENT_RECEIVED
from credis.money import to_decimal
from credis.time_utils import parse_iso_datetime


MIN_AMOUNT = Decimal("0.01")
# Largest amount a NUMERIC(12, 2) column holds
MAX_AMOUNT = Decimal("999999999.99")

MIN_PASSWORD_BYTES = 6
# bcrypt ignores (and bcrypt>=5 rejects) anything past 72 bytes
MAX_PASSWORD_BYTES = 72

# ASCII digits only; str.isdigit() and \d also accept "²" and other Unicode digits
_PHONE_RE = re.compile(r"[0-9]{8}")
_INT_RE = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    - aliases: wire name -> column key (camelCase clients)
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore
    aliases: dict[str, str] | None = None


CREDIT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "customer_id",
        "store_id",
        "amount",
        "transaction_type",
        "items_description",
        "journal_number",
        "transaction_date",
    },
    required_on_create={"customer_id", "store_id", "amount", "transaction_type"},
)

CREDIT_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "amount",
        "transaction_type",
        "transaction_date",
        "items_description",
        "journal_number",
    },
)

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={
        "store_id",
        "name",
        "phone_number",
        "email",
        "address",
        "cid_number",
        "credit_limit",
        "is_active",
    },
    required_on_create={"store_id", "name", "phone_number"},
    aliases={
        "storeId": "store_id",
        "phoneNumber": "phone_number",
        "cidNumber": "cid_number",
        "creditLimit": "credit_limit",
        "isActive": "is_active",
    },
)

CUSTOMER_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields=CUSTOMER_POLICY.writable_fields - {"store_id"},
    aliases=CUSTOMER_POLICY.aliases,
)

STORE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone_number", "address"},
    required_on_create={"name", "phone_number", "address"},
    aliases={"phoneNumber": "phone_number"},
)

OWNER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone_number", "store_id"},
    required_on_create={"name", "phone_number"},
    aliases={"phoneNumber": "phone_number", "storeId": "store_id"},
)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def coerce_int(value: Any, field: str) -> int:
    # Integers - strict validation to reject floats and scientific notation
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not _INT_RE.fullmatch(stripped):
            raise ValidationError(f"{field} must be an integer")
        return int(stripped)
    raise ValidationError(f"{field} must be an integer")


def coerce_datetime(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            dt = parse_iso_datetime(value)
        except ValueError:
            raise ValidationError(f"{field} must be an ISO-8601 datetime")
        if dt is None:
            raise ValidationError(f"{field} must be an ISO-8601 datetime")
        return dt
    raise ValidationError(f"{field} must be a datetime")


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return coerce_int(value, col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{col.key} must be a boolean")

    # Money columns (accept numbers or numeric strings, never NaN/Infinity)
    if isinstance(coltype, Numeric):
        return to_decimal(value, field=col.key)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        return coerce_datetime(value, col.key)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    aliases = policy.aliases or {}
    normalized: dict = {}
    for k, v in payload.items():
        normalized[aliases.get(k, k)] = v

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if normalized.get(f) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in normalized.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in normalized.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def _check_phone(phone: str | None) -> None:
    if phone is not None and not _PHONE_RE.fullmatch(phone):
        raise ValidationError("Invalid Phone Number, Please enter the correct Phone Number")


def _check_name(name: str | None) -> None:
    if name is not None and len(name) < 2:
        raise ValidationError("Name must be at least 2 characters")


def enforce_rules_credit(patch: dict, *, creating: bool) -> None:
    """
    Credit rules beyond column metadata.

    On update only the patched fields are checked here; whether the row as a
    whole still carries a journal number is the service's call, since it
    depends on the stored values.
    """
    if "transaction_type" in patch and patch["transaction_type"] not in TRANSACTION_TYPES:
        raise ValidationError("transaction_type must be credit_given or payment_received")

    if "amount" in patch:
        amount = patch["amount"]
        if amount is None:
            raise ValidationError("amount cannot be null")
        if amount < MIN_AMOUNT:
            raise ValidationError("Amount must be greater than zero")
        if amount > MAX_AMOUNT:
            raise ValidationError(f"Amount cannot exceed {MAX_AMOUNT}")

    if creating and patch.get("transaction_type") == PAYMENT_RECEIVED:
        if not patch.get("journal_number"):
            raise ValidationError("Journal number is required for payment transactions")


def enforce_rules_customer(patch: dict) -> None:
    _check_name(patch.get("name"))
    _check_phone(patch.get("phone_number"))

    credit_limit = patch.get("credit_limit")
    if credit_limit is not None and credit_limit < 0:
        raise ValidationError("Credit limit cannot be negative")

    email = patch.get("email")
    if email and "@" not in email:
        raise ValidationError("Invalid email format")


def enforce_rules_store(patch: dict) -> None:
    _check_name(patch.get("name"))
    _check_phone(patch.get("phone_number"))

    address = patch.get("address")
    if address is not None and not (5 <= len(address) <= 200):
        raise ValidationError("Address must be between 5 and 200 characters")


def enforce_rules_owner(patch: dict, password: str | None) -> None:
    _check_name(patch.get("name"))
    if not patch.get("phone_number"):
        raise ValidationError("Phone number is required")

    if not isinstance(password, str):
        raise ValidationError("Password is required")
    size = len(password.encode("utf-8"))
    if size < MIN_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_BYTES} characters")
    if size > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
