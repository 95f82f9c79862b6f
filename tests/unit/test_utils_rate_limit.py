# Import section
import time
from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient
from dintero_checkout.utils.rate_limit import optional_rate_limit


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limited", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited():
        return {"ok": True}

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    client = TestClient(_make_app(times=2, seconds=60))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 429


def test_rate_limit_is_per_path_and_session_cookie(monkeypatch):
    client = TestClient(_make_app(times=2, seconds=60))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    # Avec cookie de session, la clé inclut le hash + path
    client.cookies.set("session", "signed-session-cookie")

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429

    # path B: indépendant de A
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 200
    assert client.get("/limitedB").status_code == 429


def test_rate_limit_resets_after_window_sleep(monkeypatch):
    client = TestClient(_make_app(times=2, seconds=1))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 200
    assert client.get("/limited").status_code == 429

    # Attendre > 1s pour vider la fenêtre
    time.sleep(1.1)
    assert client.get("/limited").status_code == 200


def test_rate_limit_disabled_flag_bypasses_limit(monkeypatch):
    app = _make_app(times=2, seconds=60)
    client = TestClient(app)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app.state.rate_limit_enabled = False

    for _ in range(3):
        assert client.get("/limited").status_code == 200


def test_rate_limit_fallback_purges_expired_keys(monkeypatch):
    app = _make_app(times=2, seconds=1)
    client = TestClient(app)
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limitedA").status_code == 200
    assert any(k.endswith(":/limitedA") for k in app.state._rl_store)

    time.sleep(1.1)
    assert client.get("/limitedB").status_code == 200

    keys = list(app.state._rl_store)
    assert len(keys) == 1
    assert keys[0].endswith(":/limitedB")
