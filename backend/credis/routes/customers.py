# Overview: Flask API routes for customers operations; parses input and returns JSON responses.

from flask import Blueprint

from ..container import get_services
from ..decorators import require_auth
from ..errors import ValidationError
from ..models import Customer
from ..responses import int_arg, json_body, success
from ..services.customer_service import DEFAULT_OVERDUE_DAYS
from ..services.inputs import CustomerCreate, CustomerUpdate
from ..validation import (
    CUSTOMER_POLICY,
    CUSTOMER_UPDATE_POLICY,
    enforce_rules_customer,
    validate_payload,
)


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers():
    store_id = int_arg("store_id", "storeId")
    customers = get_services().customers.list_customers(store_id)
    return success([customer.to_dict() for customer in customers])


@customers_bp.post("")
@require_auth
def create_customer():
    patch = validate_payload(model=Customer, payload=json_body(), policy=CUSTOMER_POLICY, partial=False)
    enforce_rules_customer(patch)
    patch.pop("is_active", None)

    customer = get_services().customers.create_customer(CustomerCreate(**patch))
    return success(customer.to_dict(), 201, message="Customer created successfully")


@customers_bp.get("/overdue")
@require_auth
def overdue_customers():
    """
    Customers of a store who owe money and have not paid within `days` days.

    Query params:
    - store_id (required)
    - days (optional, default 30)
    """
    store_id = int_arg("store_id", "storeId")
    if store_id is None:
        raise ValidationError("store_id is required")
    days = int_arg("days", default=DEFAULT_OVERDUE_DAYS)

    rows = get_services().customers.get_overdue_customers(store_id, days)
    return success([row.to_dict(include_customer=True) for row in rows])


@customers_bp.get("/<int:customer_id>")
@require_auth
def get_customer(customer_id: int):
    customer = get_services().customers.get_customer(customer_id)
    return success(customer.to_dict())


@customers_bp.patch("/<int:customer_id>")
@require_auth
def update_customer(customer_id: int):
    patch = validate_payload(model=Customer, payload=json_body(), policy=CUSTOMER_UPDATE_POLICY, partial=True)
    enforce_rules_customer(patch)

    customer = get_services().customers.update_customer(customer_id, CustomerUpdate.from_patch(patch))
    return success(customer.to_dict(), message="Customer updated successfully")
