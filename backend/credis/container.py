# Overview: Builds the repositories and services once per application.

"""
Service container.

create_app() builds one Services instance and stores it in
app.extensions; routes reach it through get_services(). The session handed
in is Flask-SQLAlchemy's scoped session, so the same objects serve every
request while each request still gets its own database session.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from credis.repositories import (
    CreditRepository,
    CustomerBalanceRepository,
    CustomerRepository,
    StoreOwnerRepository,
    StoreRepository,
)
from credis.services.auth_service import AuthService, TokenSettings
from credis.services.credit_service import CreditService
from credis.services.customer_service import CustomerService
from credis.services.store_service import StoreService

EXTENSION_KEY = "credis.services"


@dataclass
class Services:
    stores: StoreService
    customers: CustomerService
    credits: CreditService
    auth: AuthService


def build_services(session, config) -> Services:
    bcrypt_rounds = config["BCRYPT_ROUNDS"]

    store_repo = StoreRepository(session)
    customer_repo = CustomerRepository(session)
    credit_repo = CreditRepository(session)
    balance_repo = CustomerBalanceRepository(session)
    owner_repo = StoreOwnerRepository(session, bcrypt_rounds=bcrypt_rounds)

    return Services(
        stores=StoreService(session, stores=store_repo),
        customers=CustomerService(
            session,
            customers=customer_repo,
            stores=store_repo,
            balances=balance_repo,
        ),
        credits=CreditService(
            session,
            credits=credit_repo,
            customers=customer_repo,
            stores=store_repo,
            balances=balance_repo,
        ),
        auth=AuthService(
            session,
            owners=owner_repo,
            stores=store_repo,
            settings=TokenSettings.from_config(config),
            bcrypt_rounds=bcrypt_rounds,
        ),
    )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
