# Overview: Flask API routes for stores operations; parses input and returns JSON responses.

from flask import Blueprint, g

from ..container import get_services
from ..decorators import require_auth
from ..models import Store
from ..responses import json_body, success
from ..services.inputs import StoreUpdate
from ..validation import STORE_POLICY, enforce_rules_store, validate_payload


stores_bp = Blueprint("stores", __name__, url_prefix="/api/stores")


@stores_bp.get("")
@require_auth
def list_stores():
    stores = get_services().stores.list_stores()
    return success([store.to_dict() for store in stores])


@stores_bp.post("")
@require_auth
def create_store():
    patch = validate_payload(model=Store, payload=json_body(), policy=STORE_POLICY, partial=False)
    enforce_rules_store(patch)

    store = get_services().stores.create_store(
        name=patch["name"],
        phone_number=patch["phone_number"],
        address=patch["address"],
        owner=g.current_owner,
    )
    return success(store.to_dict(), 201, message="Store created successfully")


@stores_bp.get("/<int:store_id>")
@require_auth
def get_store(store_id: int):
    store = get_services().stores.get_store(store_id)
    return success(store.to_dict())


@stores_bp.put("/<int:store_id>")
@require_auth
def update_store(store_id: int):
    patch = validate_payload(model=Store, payload=json_body(), policy=STORE_POLICY, partial=True)
    enforce_rules_store(patch)

    store = get_services().stores.update_store(store_id, StoreUpdate.from_patch(patch))
    return success(store.to_dict(), message="Store updated successfully")


@stores_bp.delete("/<int:store_id>")
@require_auth
def delete_store(store_id: int):
    get_services().stores.delete_store(store_id)
    return success(message="Store deleted successfully")


@stores_bp.get("/<int:store_id>/customers")
@require_auth
def get_store_with_customers(store_id: int):
    store = get_services().stores.get_store_with_customers(store_id)
    data = store.to_dict()
    data["customers"] = [customer.to_dict() for customer in store.customers]
    return success(data)


@stores_bp.get("/<int:store_id>/owners")
@require_auth
def get_store_with_owners(store_id: int):
    store = get_services().stores.get_store_with_owners(store_id)
    data = store.to_dict()
    data["store_owners"] = [owner.to_dict() for owner in store.store_owners]
    return success(data)
