"""
Payload validation tests.

Covers the policy allowlist, column-driven coercion and the per-resource
business rules applied before anything reaches a service.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from credis.errors import ValidationError
from credis.models import Credit, Customer, Store, StoreOwner
from credis.validation import (
    CREDIT_CREATE_POLICY,
    CREDIT_UPDATE_POLICY,
    CUSTOMER_POLICY,
    OWNER_POLICY,
    STORE_POLICY,
    coerce_int,
    enforce_rules_credit,
    enforce_rules_customer,
    enforce_rules_owner,
    enforce_rules_store,
    validate_payload,
)


# =============================================================================
# validate_payload
# =============================================================================


class TestValidatePayload:
    def test_credit_create_coerces_types(self):
        patch = validate_payload(
            model=Credit,
            payload={
                "customer_id": "3",
                "store_id": 1,
                "amount": "12.5",
                "transaction_type": " credit_given ",
                "transaction_date": "2026-03-01T10:00:00+06:00",
            },
            policy=CREDIT_CREATE_POLICY,
            partial=False,
        )

        assert patch["customer_id"] == 3
        assert patch["amount"] == Decimal("12.5")
        assert patch["transaction_type"] == "credit_given"
        assert patch["transaction_date"] == datetime(2026, 3, 1, 4, 0)

    def test_missing_required_fields_listed(self):
        with pytest.raises(ValidationError, match="Missing required fields: amount, transaction_type"):
            validate_payload(
                model=Credit,
                payload={"customer_id": 1, "store_id": 1, "amount": None},
                policy=CREDIT_CREATE_POLICY,
                partial=False,
            )

    def test_non_writable_field_rejected(self):
        with pytest.raises(ValidationError, match="Field not allowed: created_by_owner_id"):
            validate_payload(
                model=Credit,
                payload={"created_by_owner_id": 1},
                policy=CREDIT_UPDATE_POLICY,
                partial=True,
            )

    def test_camel_case_aliases(self):
        patch = validate_payload(
            model=Customer,
            payload={"storeId": 2, "name": "Dawa", "phoneNumber": "17123456", "creditLimit": 100},
            policy=CUSTOMER_POLICY,
            partial=False,
        )
        assert patch == {
            "store_id": 2,
            "name": "Dawa",
            "phone_number": "17123456",
            "credit_limit": Decimal("100"),
        }

    @pytest.mark.parametrize("value", ["1.5", "1e3", "", "--5", "-", "²", "١٢", 2.0, True, [1]])
    def test_strict_integers(self, value):
        with pytest.raises(ValidationError):
            coerce_int(value, "store_id")

    def test_signed_integers(self):
        assert coerce_int(" -3 ", "days") == -3
        assert coerce_int("42", "limit") == 42

    @pytest.mark.parametrize("value", ["10.005", "0.001", 1.234])
    def test_sub_cent_amounts_rejected(self, value):
        with pytest.raises(ValidationError, match="more than 2 decimal places"):
            validate_payload(
                model=Credit,
                payload={"amount": value},
                policy=CREDIT_UPDATE_POLICY,
                partial=True,
            )

    def test_trailing_zeros_are_whole_cents(self):
        patch = validate_payload(
            model=Customer,
            payload={"credit_limit": "250.500"},
            policy=CUSTOMER_POLICY,
            partial=True,
        )
        assert patch["credit_limit"] == Decimal("250.5")

    def test_sub_cent_credit_limit_rejected(self):
        with pytest.raises(ValidationError, match="credit_limit cannot have more than 2 decimal places"):
            validate_payload(
                model=Customer,
                payload={"creditLimit": "99.999"},
                policy=CUSTOMER_POLICY,
                partial=True,
            )

    def test_blank_required_string(self):
        with pytest.raises(ValidationError, match="name cannot be blank"):
            validate_payload(
                model=Store,
                payload={"name": "   "},
                policy=STORE_POLICY,
                partial=True,
            )

    def test_non_nullable_null(self):
        with pytest.raises(ValidationError, match="amount cannot be null"):
            validate_payload(
                model=Credit,
                payload={"amount": None},
                policy=CREDIT_UPDATE_POLICY,
                partial=True,
            )

    def test_boolean_must_be_bool(self):
        with pytest.raises(ValidationError, match="is_active must be a boolean"):
            validate_payload(
                model=Customer,
                payload={"is_active": "false"},
                policy=CUSTOMER_POLICY,
                partial=True,
            )

    def test_owner_payload_ignores_password_column(self):
        with pytest.raises(ValidationError, match="Field not allowed: password_hash"):
            validate_payload(
                model=StoreOwner,
                payload={"name": "Pema", "phoneNumber": "17000009", "password_hash": "x"},
                policy=OWNER_POLICY,
                partial=False,
            )


# =============================================================================
# BUSINESS RULES
# =============================================================================


class TestCreditRules:
    def test_amount_bounds(self):
        enforce_rules_credit({"amount": Decimal("0.01")}, creating=False)
        enforce_rules_credit({"amount": Decimal("999999999.99")}, creating=False)

        with pytest.raises(ValidationError, match="greater than zero"):
            enforce_rules_credit({"amount": Decimal("0.001")}, creating=False)
        with pytest.raises(ValidationError, match="cannot exceed"):
            enforce_rules_credit({"amount": Decimal("1000000000")}, creating=False)

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="transaction_type"):
            enforce_rules_credit({"transaction_type": "refund"}, creating=True)

    def test_payment_journal_only_checked_on_create(self):
        with pytest.raises(ValidationError, match="Journal number is required"):
            enforce_rules_credit({"transaction_type": "payment_received"}, creating=True)

        enforce_rules_credit({"transaction_type": "payment_received"}, creating=False)


class TestResourceRules:
    @pytest.mark.parametrize("phone", ["1712345", "171234567", "17-12345", "abcdefgh", "١٧١٢٣٤٥٦"])
    def test_phone_format(self, phone):
        with pytest.raises(ValidationError, match="Invalid Phone Number"):
            enforce_rules_customer({"phone_number": phone})

    def test_customer_rules(self):
        enforce_rules_customer({"name": "Jo", "credit_limit": Decimal("0"), "email": None})

        with pytest.raises(ValidationError, match="at least 2"):
            enforce_rules_customer({"name": "J"})
        with pytest.raises(ValidationError, match="Credit limit cannot be negative"):
            enforce_rules_customer({"credit_limit": Decimal("-1")})
        with pytest.raises(ValidationError, match="Invalid email"):
            enforce_rules_customer({"email": "nobody"})

    def test_store_address_length(self):
        enforce_rules_store({"address": "Paro Town"})

        with pytest.raises(ValidationError, match="Address"):
            enforce_rules_store({"address": "Paro"})
        with pytest.raises(ValidationError, match="Address"):
            enforce_rules_store({"address": "x" * 201})

    @pytest.mark.parametrize(
        "password, message",
        [
            (None, "Password is required"),
            (123456, "Password is required"),
            ("12345", "at least 6"),
            ("é" * 37, "cannot exceed 72 bytes"),
        ],
    )
    def test_owner_password(self, password, message):
        with pytest.raises(ValidationError, match=message):
            enforce_rules_owner({"name": "Pema", "phone_number": "17000009"}, password)

    def test_owner_password_keeps_whitespace(self):
        enforce_rules_owner({"name": "Pema", "phone_number": "17000009"}, "  pin  ")
