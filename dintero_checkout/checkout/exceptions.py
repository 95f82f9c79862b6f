from typing import Any, Dict, Optional

class CheckoutError(Exception):
    """Erreur de base du module checkout."""

class SessionValidationError(CheckoutError):
    """Session Dintero absente ou ne correspondant pas au panier (merchant_reference)."""

    def __init__(self, message: str = "Impossible de valider la session Dintero.", session_id: Optional[str] = None):
        super().__init__(message)
        self.session_id = session_id

class RemoteCallError(CheckoutError):
    """Échec réseau ou réponse non-2xx de l'API Dintero. Jamais rattrapée dans SessionManagement."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}

class QuoteTotalsError(CheckoutError):
    """Échec du recalcul/sauvegarde des totaux du panier (récupérable par l'appelant)."""
