# module dintero_checkout.orders.views
"""Retour navigateur depuis Dintero (return_url).
- transaction_id présent: redirection vers la page de succès.
- sinon: annulation de la commande (si possible) puis redirection vers le panier avec message d'erreur.
"""
import logging
import urllib.parse
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from dintero_checkout.config import CHECKOUT_SUCCESS_PATH, CHECKOUT_CART_PATH
from dintero_checkout.orders import service as orders_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checkout/payment", tags=["Checkout"])

PAYMENT_FAILED_MESSAGE = "Paiement échoué"

@router.get("/success", include_in_schema=False)
def payment_return(transaction_id: Optional[str] = None, merchant_reference: Optional[str] = None):
    if transaction_id:
        return RedirectResponse(url=CHECKOUT_SUCCESS_PATH, status_code=HTTP_303_SEE_OTHER)

    try:
        orders_service.cancel_failed_payment(merchant_reference)
    except Exception:
        # L'utilisateur est renvoyé au panier même si l'annulation n'a pas pu être sauvegardée
        logger.exception("Erreur payment_return merchant_reference=%s", merchant_reference)
    msg = urllib.parse.quote_plus(PAYMENT_FAILED_MESSAGE)
    sep = "&" if "?" in CHECKOUT_CART_PATH else "?"
    return RedirectResponse(url=f"{CHECKOUT_CART_PATH}{sep}error={msg}", status_code=HTTP_303_SEE_OTHER)
