"""
Adaptateur Dintero: centralise les appels HTTP et l'authentification vers l'API Checkout.
- Token OAuth (client credentials) mis en cache jusqu'à expiration.
- Toute erreur transport/HTTP devient RemoteCallError (pas de retry).
"""
import logging
import threading
import time
from typing import Any, Dict, Optional

import httpx

from dintero_checkout import config
from .exceptions import RemoteCallError
from .interfaces import PaymentProviderClient
from .models import Quote
from .payload import EMBED_EMBEDDED, EMBED_TYPES, build_order, build_session_payload

logger = logging.getLogger(__name__)

# Marge avant expiration du token (secondes)
TOKEN_LEEWAY = 60

# module dintero_checkout.checkout.dintero_client
class DinteroClient(PaymentProviderClient):
    def __init__(
        self,
        *,
        account_id: str,
        client_id: str,
        client_secret: str,
        profile_id: str,
        environment: str = "test",
        api_url: str = "https://api.dintero.com/v1",
        checkout_url: str = "https://checkout.dintero.com/v1",
        return_url: str = "",
        callback_url: str = "",
        timeout_seconds: float = 20.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.account_id = account_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.profile_id = profile_id
        self.environment = environment
        self.api_url = api_url.rstrip("/")
        self.checkout_url = checkout_url.rstrip("/")
        self.return_url = return_url
        self.callback_url = callback_url
        self.http = http_client or httpx.Client(timeout=timeout_seconds)
        self.embed_type = EMBED_EMBEDDED
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        # Client partagé entre les threads du pool FastAPI
        self._token_lock = threading.Lock()

    @property
    def aid(self) -> str:
        prefix = "P" if self.environment == "production" else "T"
        return f"{prefix}-{self.account_id}"

    def set_type(self, embed_type: str) -> "DinteroClient":
        embed_type = (embed_type or EMBED_EMBEDDED).lower()
        if embed_type not in EMBED_TYPES:
            raise ValueError(f"Type d'intégration Dintero inconnu: {embed_type}")
        self.embed_type = embed_type
        return self

    # --- Auth ---
    def get_access_token(self) -> str:
        if self._token and time.time() < self._token_expires_at:
            return self._token
        with self._token_lock:
            if self._token and time.time() < self._token_expires_at:
                return self._token
            return self._fetch_token()

    def _fetch_token(self) -> str:
        audience = f"{self.api_url}/accounts/{self.aid}"
        data = self._send(
            "POST",
            f"{audience}/auth/token",
            json={"grant_type": "client_credentials", "audience": audience},
            auth=(self.client_id, self.client_secret),
        )
        token = data.get("access_token")
        if not token:
            raise RemoteCallError("Token Dintero absent de la réponse", payload=data)
        expires_in = int(data.get("expires_in") or 0)
        self._token = token
        self._token_expires_at = time.time() + max(expires_in - TOKEN_LEEWAY, 0)
        return token

    # --- Sessions ---
    def get_session_info(self, session_id: Optional[str]) -> Dict[str, Any]:
        if not session_id:
            return {}
        return self._request("GET", f"{self.checkout_url}/sessions/{session_id}")

    def init_session_from_quote(self, quote: Quote) -> Dict[str, Any]:
        payload = build_session_payload(
            quote,
            profile_id=self.profile_id,
            return_url=self.return_url,
            callback_url=self.callback_url,
            embed_type=self.embed_type,
        )
        response = self._request("POST", f"{self.checkout_url}/sessions-profile", json=payload)
        logger.info("dintero.session created id=%s merchant_reference=%s type=%s",
                    response.get("id"), quote.reserved_order_id, self.embed_type)
        return response

    def update_session(self, session_id: str, quote: Quote) -> Dict[str, Any]:
        response = self._request("PUT", f"{self.checkout_url}/sessions/{session_id}", json={"order": build_order(quote)})
        # Certaines réponses ne renvoient que l'order: l'id reste celui de la session
        response.setdefault("id", session_id)
        logger.info("dintero.session updated id=%s merchant_reference=%s", session_id, quote.reserved_order_id)
        return response

    def cancel_session(self, session_id: str) -> None:
        self._request("POST", f"{self.checkout_url}/sessions/{session_id}/cancel")
        logger.info("dintero.session cancelled id=%s", session_id)

    # --- HTTP ---
    def _request(self, method: str, url: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.get_access_token()}"}
        return self._send(method, url, json=json, headers=headers)

    def _send(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("dintero.request failed method=%s url=%s error=%s", method, url, e)
            raise RemoteCallError(f"Appel Dintero impossible: {e}") from e
        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {"body": response.text}
        if response.is_error:
            logger.error("dintero.request error method=%s url=%s status=%s", method, url, response.status_code)
            raise RemoteCallError(
                f"Dintero a répondu {response.status_code}",
                status_code=response.status_code,
                payload=data if isinstance(data, dict) else {"body": data},
            )
        return data if isinstance(data, dict) else {"data": data}

def make_dintero_client(http_client: Optional[httpx.Client] = None) -> DinteroClient:
    """Construit le client depuis la configuration (.env)."""
    return DinteroClient(
        account_id=config.DINTERO_ACCOUNT_ID,
        client_id=config.DINTERO_CLIENT_ID,
        client_secret=config.DINTERO_CLIENT_SECRET,
        profile_id=config.DINTERO_PROFILE_ID,
        environment=config.DINTERO_ENVIRONMENT,
        api_url=config.DINTERO_API_URL,
        checkout_url=config.DINTERO_CHECKOUT_URL,
        return_url=f"{config.BASE_URL}{config.CHECKOUT_RETURN_PATH}",
        callback_url=config.CHECKOUT_CALLBACK_URL,
        timeout_seconds=config.DINTERO_TIMEOUT_SECONDS,
        http_client=http_client,
    )
