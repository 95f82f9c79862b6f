from unittest.mock import MagicMock

import pytest

from dintero_checkout.checkout import service
from dintero_checkout.checkout import views as checkout_views
from dintero_checkout.checkout.dintero_client import DinteroClient
from dintero_checkout.checkout.exceptions import RemoteCallError, SessionValidationError
from dintero_checkout.checkout.models import SessionHandle
from dintero_checkout.checkout.result import Err, Ok


@pytest.fixture
def sessions(app, quote_factory):
    """SessionManagement mocké, injecté à la place de la composition par défaut."""
    mock = MagicMock()
    mock.quote = quote_factory()
    app.dependency_overrides[checkout_views.get_session_management] = lambda: mock
    yield mock
    app.dependency_overrides.pop(checkout_views.get_session_management, None)


def test_get_session_returns_handle(client, sessions):
    sessions.get_session.return_value = SessionHandle(id="sess_1")
    response = client.get("/api/v1/checkout/session")
    assert response.status_code == 200
    assert response.json() == {"id": "sess_1"}

def test_update_session_ok(client, sessions):
    sessions.update_session.return_value = Ok(SessionHandle(id="sess_1"))
    response = client.post("/api/v1/checkout/session/update")
    assert response.status_code == 200
    assert response.json() == {"id": "sess_1"}

def test_update_session_validation_error_is_400(client, sessions):
    sessions.update_session.return_value = Err(SessionValidationError(session_id="sess_1"))
    response = client.post("/api/v1/checkout/session/update")
    assert response.status_code == 400
    assert response.json()["detail"] == "Impossible de valider la session Dintero."

def test_validate_session(client, sessions):
    sessions.validate_session.return_value = False
    response = client.get("/api/v1/checkout/session/sess_1/validate")
    assert response.status_code == 200
    assert response.json() == {"valid": False}
    sessions.validate_session.assert_called_once_with("sess_1")

def test_update_totals_success_and_recoverable_failure(client, sessions):
    sessions.update_totals.return_value = Ok(True)
    ok = client.post("/api/v1/checkout/session/sess_1/totals")
    assert ok.status_code == 200
    assert ok.json()["success"] is True
    assert "grand_total" in ok.json()["totals"]

    sessions.update_totals.return_value = Ok(False)
    failed = client.post("/api/v1/checkout/session/sess_1/totals")
    assert failed.status_code == 200
    assert failed.json()["success"] is False

def test_update_totals_validation_error_is_400(client, sessions):
    sessions.update_totals.return_value = Err(SessionValidationError(session_id="sess_1"))
    response = client.post("/api/v1/checkout/session/sess_1/totals")
    assert response.status_code == 400

def test_remote_call_error_is_502(client, sessions):
    sessions.get_session.side_effect = RemoteCallError("Dintero a répondu 503", status_code=503)
    response = client.get("/api/v1/checkout/session")
    assert response.status_code == 502
    assert response.json() == {"detail": "Dintero a répondu 503"}

def test_missing_quote_is_404(app, client):
    repo = MagicMock()
    repo.get_quote.return_value = None
    app.dependency_overrides[checkout_views.get_quote_repository] = lambda: repo
    response = client.get("/api/v1/checkout/session")
    assert response.status_code == 404
    assert response.json()["detail"] == "Panier introuvable"
    repo.get_quote.assert_not_called()

def test_full_flow_with_fakes(app, client, fake_client, fake_store, quote_factory, monkeypatch):
    """Composition réelle (build_session_management) avec client Dintero et stockage en mémoire."""
    quote = quote_factory(session_id=None)
    app.dependency_overrides[checkout_views.get_current_quote] = lambda: quote
    monkeypatch.setattr(checkout_views, "build_session_management",
                        lambda q, client=None, quotes=None: service.build_session_management(q, client=fake_client, quotes=fake_store))

    first = client.get("/api/v1/checkout/session").json()
    second = client.get("/api/v1/checkout/session").json()

    assert first == second == {"id": "sess_new_1"}
    assert fake_client.names().count("init") == 1

def test_lifespan_provides_shared_dintero_client(app, client):
    shared = app.state.dintero_client
    assert isinstance(shared, DinteroClient)
    assert app.state.rate_limit_enabled is False
    client.get("/health")
    assert app.state.dintero_client is shared
