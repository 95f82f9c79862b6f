# module dintero_checkout.checkout.views
"""Endpoints du checkout Dintero (appelés par le front de paiement).
- GET  /session: session valide pour le panier courant (créée si besoin, rate-limité).
- POST /session/update: nouvelle réservation de commande + mise à jour de la session.
- GET  /session/{session_id}/validate: contrôle avant finalisation.
- POST /session/{session_id}/totals: rapatrie adresses/livraison/coupon depuis Dintero.
Le panier courant est résolu via la session cookie (clé 'quote_id').
Erreurs:
- SessionValidationError -> 400; RemoteCallError -> 502 (handler applicatif).
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from dintero_checkout.utils.rate_limit import optional_rate_limit
from .exceptions import SessionValidationError
from .models import Quote
from .repository import QuoteRepository
from .service import SessionManagement, build_session_management

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])

QUOTE_SESSION_KEY = "quote_id"

def get_quote_repository() -> QuoteRepository:
    return QuoteRepository()

def get_current_quote(request: Request, quotes: QuoteRepository = Depends(get_quote_repository)) -> Quote:
    quote_id = request.session.get(QUOTE_SESSION_KEY)
    quote = quotes.get_quote(quote_id) if quote_id else None
    if not quote:
        raise HTTPException(status_code=404, detail="Panier introuvable")
    return quote

def get_session_management(
    request: Request,
    quote: Quote = Depends(get_current_quote),
    quotes: QuoteRepository = Depends(get_quote_repository),
) -> SessionManagement:
    # Client Dintero partagé (lifespan), sinon construit depuis la configuration
    client = getattr(request.app.state, "dintero_client", None)
    return build_session_management(quote, client=client, quotes=quotes)

@router.get("/session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def get_checkout_session(sessions: SessionManagement = Depends(get_session_management)):
    """Retourne {"id": ...}: session en cache si elle correspond encore au panier, sinon nouvelle session."""
    handle = sessions.get_session()
    return handle.model_dump()

@router.post("/session/update")
def update_checkout_session(sessions: SessionManagement = Depends(get_session_management)):
    """Réserve un nouveau numéro de commande et met à jour la session Dintero.
    - 400 si la session en cache ne correspond pas au panier (pas d'auto-réparation ici).
    """
    result = sessions.update_session()
    try:
        handle = result.unwrap()
    except SessionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return handle.model_dump()

@router.get("/session/{session_id}/validate")
def validate_checkout_session(session_id: str, sessions: SessionManagement = Depends(get_session_management)):
    return {"valid": sessions.validate_session(session_id)}

@router.post("/session/{session_id}/totals")
def update_checkout_totals(session_id: str, sessions: SessionManagement = Depends(get_session_management)):
    """Met à jour le panier depuis la commande Dintero.
    - success=false: recalcul des totaux en échec (loggé), le front peut réessayer à l'étape suivante.
    """
    result = sessions.update_totals(session_id)
    if result.is_err():
        raise HTTPException(status_code=400, detail=str(result.error))
    return {"success": result.value, "totals": sessions.quote.totals.model_dump()}
