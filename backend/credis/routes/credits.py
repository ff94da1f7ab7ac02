# Overview: Flask API routes for the credit ledger; parses input and returns JSON responses.

"""
Credit ledger routes.

Ledger payloads are snake_case (customer_id, transaction_type, ...);
amounts are returned as two-decimal strings.
"""

from flask import Blueprint, g

from ..container import get_services
from ..decorators import require_auth
from ..errors import ValidationError
from ..models import TRANSACTION_TYPES, Credit
from ..responses import datetime_arg, decimal_arg, int_arg, json_body, str_arg, success
from ..services.inputs import CreditCreate, CreditFilters, CreditUpdate
from ..validation import (
    CREDIT_CREATE_POLICY,
    CREDIT_UPDATE_POLICY,
    enforce_rules_credit,
    validate_payload,
)


credits_bp = Blueprint("credits", __name__, url_prefix="/api/credits")


@credits_bp.get("")
@require_auth
def list_credits():
    credits = get_services().credits.get_all_credits()
    return success([credit.to_dict(include="full") for credit in credits])


@credits_bp.post("")
@require_auth
def create_credit():
    patch = validate_payload(model=Credit, payload=json_body(), policy=CREDIT_CREATE_POLICY, partial=False)
    enforce_rules_credit(patch, creating=True)

    credit = get_services().credits.create_credit(
        CreditCreate(**patch, created_by_owner_id=g.current_owner.id)
    )
    return success(credit.to_dict(), 201, message="Credit transaction created successfully")


@credits_bp.get("/filter")
@require_auth
def filter_credits():
    transaction_type = str_arg("transaction_type")
    if transaction_type is not None and transaction_type not in TRANSACTION_TYPES:
        raise ValidationError("transaction_type must be credit_given or payment_received")

    filters = CreditFilters(
        customer_id=int_arg("customer_id"),
        store_id=int_arg("store_id"),
        transaction_type=transaction_type,
        start_date=datetime_arg("start_date"),
        end_date=datetime_arg("end_date"),
        min_amount=decimal_arg("min_amount"),
        max_amount=decimal_arg("max_amount"),
    )
    credits = get_services().credits.get_filtered_transactions(filters)
    return success([credit.to_dict(include="full") for credit in credits])


@credits_bp.get("/recent")
@require_auth
def recent_credits():
    limit = int_arg("limit", default=10)
    store_id = int_arg("store_id")

    credits = get_services().credits.get_recent_transactions(limit, store_id)
    return success([credit.to_dict(include="brief") for credit in credits])


@credits_bp.get("/date-range")
@require_auth
def credits_by_date_range():
    start_date = datetime_arg("start_date")
    end_date = datetime_arg("end_date")
    if start_date is None or end_date is None:
        raise ValidationError("start_date and end_date are required")

    credits = get_services().credits.get_transactions_by_date_range(
        start_date,
        end_date,
        int_arg("store_id"),
    )
    return success([credit.to_dict(include="full") for credit in credits])


@credits_bp.get("/<int:credit_id>")
@require_auth
def get_credit(credit_id: int):
    credit = get_services().credits.get_credit(credit_id)
    return success(credit.to_dict(include="full"))


@credits_bp.patch("/<int:credit_id>")
@require_auth
def update_credit(credit_id: int):
    patch = validate_payload(model=Credit, payload=json_body(), policy=CREDIT_UPDATE_POLICY, partial=True)
    enforce_rules_credit(patch, creating=False)

    credit = get_services().credits.update_credit(credit_id, CreditUpdate.from_patch(patch))
    return success(credit.to_dict(), message="Credit transaction updated successfully")


@credits_bp.delete("/<int:credit_id>")
@require_auth
def delete_credit(credit_id: int):
    get_services().credits.delete_credit(credit_id)
    return success(message="Credit transaction deleted successfully")


@credits_bp.get("/customer/<int:customer_id>")
@require_auth
def credits_by_customer(customer_id: int):
    credits = get_services().credits.get_credits_by_customer(customer_id)
    return success([credit.to_dict(include="full") for credit in credits])


@credits_bp.get("/customer/<int:customer_id>/summary")
@require_auth
def customer_summary(customer_id: int):
    summary = get_services().credits.get_customer_summary(customer_id, int_arg("store_id"))
    return success(summary.to_dict())


@credits_bp.get("/store/<int:store_id>")
@require_auth
def credits_by_store(store_id: int):
    credits = get_services().credits.get_credits_by_store(store_id)
    return success([credit.to_dict(include="full") for credit in credits])


@credits_bp.get("/store/<int:store_id>/summary")
@require_auth
def store_summary(store_id: int):
    summary = get_services().credits.get_store_summary(store_id)
    return success(summary.to_dict())


@credits_bp.get("/store/<int:store_id>/outstanding")
@require_auth
def store_outstanding(store_id: int):
    balances = get_services().credits.get_outstanding_balances(store_id, int_arg("limit"))
    return success([balance.to_dict() for balance in balances])
