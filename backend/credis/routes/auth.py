# Overview: Flask API routes for store-owner auth; parses input and returns JSON responses.

"""
Store-owner authentication routes.

Login and refresh answer with the user profile and set the token cookies;
the tokens are also returned in the body for clients that send a Bearer
header instead of cookies.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..container import get_services
from ..decorators import require_auth
from ..models import StoreOwner
from ..responses import json_body, success
from ..services.inputs import OwnerRegistration
from ..session_cookies import REFRESH_COOKIE, clear_auth_cookies, set_auth_cookies
from ..validation import OWNER_POLICY, enforce_rules_owner, validate_payload


auth_bp = Blueprint("store_owners", __name__, url_prefix="/api/store-owners")


@auth_bp.post("/register")
def register_route():
    data = dict(json_body())
    password = data.pop("password", None)

    patch = validate_payload(model=StoreOwner, payload=data, policy=OWNER_POLICY, partial=False)
    enforce_rules_owner(patch, password)

    owner = get_services().auth.register(
        OwnerRegistration(
            name=patch["name"],
            phone_number=patch["phone_number"],
            password=password,
            store_id=patch.get("store_id"),
        )
    )
    return success(owner.to_dict(), 201, message="Store owner registered successfully", key="user")


@auth_bp.post("/login")
def login_route():
    data = json_body()
    phone_number = data.get("phoneNumber") or data.get("phone_number")
    password = data.get("password")

    # Malformed credentials get the same answer as wrong ones
    result = get_services().auth.login(
        phone_number.strip() if isinstance(phone_number, str) else "",
        password if isinstance(password, str) else "",
    )

    response = jsonify({
        "success": True,
        "message": "Login successful",
        "user": result.owner.to_dict(),
        "accessToken": result.access_token,
        "refreshToken": result.refresh_token,
    })
    set_auth_cookies(
        response,
        request,
        access_token=result.access_token,
        access_expires=current_app.config["ACCESS_TOKEN_EXPIRES"],
        refresh_token=result.refresh_token,
        refresh_expires=current_app.config["REFRESH_TOKEN_EXPIRES"],
    )
    return response, 200


@auth_bp.post("/refresh")
def refresh_route():
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            token = data.get("refreshToken")

    result = get_services().auth.refresh(token if isinstance(token, str) else None)

    response = jsonify({
        "success": True,
        "user": result.owner.to_dict(),
        "accessToken": result.access_token,
    })
    set_auth_cookies(
        response,
        request,
        access_token=result.access_token,
        access_expires=current_app.config["ACCESS_TOKEN_EXPIRES"],
    )
    return response, 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    get_services().auth.logout(g.current_owner.id)
    response, status = success(message="Logged out successfully")
    clear_auth_cookies(response, request)
    return response, status


@auth_bp.get("/me")
@require_auth
def me_route():
    return success(g.current_owner.to_dict(), key="user")


@auth_bp.get("/<int:owner_id>")
@require_auth
def get_owner_route(owner_id: int):
    owner = get_services().auth.get_profile(owner_id)
    return success(owner.to_dict(), key="user")
