import os

# Pas de Redis en tests: le lifespan désactive proprement le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import copy
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from dintero_checkout.checkout import totals as totals_logic
from dintero_checkout.checkout.address_mapper import DinteroAddressMapper
from dintero_checkout.checkout.agreements import RequiredAgreementsValidator
from dintero_checkout.checkout.interfaces import PaymentProviderClient, QuoteStore
from dintero_checkout.checkout.models import Address, Quote, QuoteItem, QuotePayment, SessionReference
from dintero_checkout.checkout.service import SessionManagement
from dintero_checkout.checkout.session_validator import MerchantReferenceValidator

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)


class FakeDinteroClient(PaymentProviderClient):
    """Doublure en mémoire de l'API Dintero: enregistre chaque appel dans self.calls."""

    def __init__(self, sessions: Optional[Dict[str, Dict[str, Any]]] = None):
        self.sessions: Dict[str, Dict[str, Any]] = dict(sessions or {})
        self.calls: List[Tuple[str, Any]] = []
        self.embed_type: Optional[str] = None
        self._created = 0

    def set_type(self, embed_type: str) -> "FakeDinteroClient":
        self.embed_type = embed_type
        return self

    def get_session_info(self, session_id):
        self.calls.append(("get", session_id))
        if not session_id:
            return {}
        return copy.deepcopy(self.sessions.get(session_id, {}))

    def init_session_from_quote(self, quote):
        self._created += 1
        session_id = f"sess_new_{self._created}"
        self.sessions[session_id] = {"id": session_id, "order": {"merchant_reference": quote.reserved_order_id}}
        self.calls.append(("init", quote.reserved_order_id))
        return copy.deepcopy(self.sessions[session_id])

    def update_session(self, session_id, quote):
        self.calls.append(("update", session_id))
        self.sessions[session_id]["order"]["merchant_reference"] = quote.reserved_order_id
        return copy.deepcopy(self.sessions[session_id])

    def cancel_session(self, session_id):
        self.calls.append(("cancel", session_id))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeQuoteStore(QuoteStore):
    def __init__(self, coupons=None, shipping_rates=None, fail_totals: bool = False):
        self.coupons = coupons or {}
        self.shipping_rates = shipping_rates or {}
        self.fail_totals = fail_totals
        self.saved_payments: List[Optional[str]] = []
        self.saved_totals = 0
        self._next_order_id = 100000100

    def save_payment(self, quote):
        self.saved_payments.append(quote.payment.session_id)

    def reserve_order_id(self, quote):
        self._next_order_id += 1
        quote.reserved_order_id = str(self._next_order_id)
        return quote.reserved_order_id

    def collect_totals(self, quote):
        if self.fail_totals:
            raise RuntimeError("database unavailable")
        totals_logic.collect_totals(quote, self.coupons.get, self.shipping_rates.get)
        self.saved_totals += 1
        return quote


def make_quote(
    reserved_order_id: Optional[str] = "100000001",
    session_id: Optional[str] = None,
    is_virtual: bool = False,
    agreement_ids: Optional[List[str]] = None,
) -> Quote:
    payment = QuotePayment(
        session=SessionReference(id=session_id, data={"id": session_id}) if session_id else None,
        agreement_ids=agreement_ids or [],
    )
    return Quote(
        id="quote-1",
        reserved_order_id=reserved_order_id,
        is_virtual=is_virtual,
        currency="NOK",
        customer_email="kari@example.com",
        items=[QuoteItem(sku="SKU-1", name="T-shirt", qty=2, price=100.0, tax_percent=25.0)],
        billing_address=Address(address_type="billing", firstname="Kari", lastname="Nordmann"),
        shipping_address=Address(address_type="shipping"),
        payment=payment,
    )


def make_remote_session(session_id: str = "sess_1", merchant_reference: Optional[str] = "100000001", **order) -> Dict[str, Any]:
    express = order.pop("express", False)
    return {
        "id": session_id,
        "express": express,
        "order": {"merchant_reference": merchant_reference, **order},
    }


@pytest.fixture
def quote_factory():
    return make_quote

@pytest.fixture
def remote_session_factory():
    return make_remote_session

@pytest.fixture
def fake_client() -> FakeDinteroClient:
    return FakeDinteroClient()

@pytest.fixture
def fake_store() -> FakeQuoteStore:
    return FakeQuoteStore(
        coupons={"SAVE10": {"code": "SAVE10", "type": "percent", "value": 10, "active": True}},
        shipping_rates={"bring_pickup": {"code": "bring_pickup", "title": "Bring", "price": 49.0}},
    )

@pytest.fixture
def make_management(fake_client, fake_store):
    """Construit un SessionManagement avec doublures; agreements requises: ["terms"]."""
    def _make(quote: Quote, **overrides) -> SessionManagement:
        deps = dict(
            client=fake_client,
            quotes=fake_store,
            session_validator=MerchantReferenceValidator(),
            address_mapper=DinteroAddressMapper(),
            agreements_validator=RequiredAgreementsValidator(["terms"]),
            embed_type="embedded",
        )
        deps.update(overrides)
        return SessionManagement(quote, **deps)
    return _make

@pytest.fixture(scope="session")
def app():
    from dintero_checkout.app import app as fastapi_app
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
