"""Couche service du retour de paiement Dintero.
- Paiement abouti (transaction_id présent): rien à faire côté commande.
- Paiement échoué/abandonné: annule la commande réservée si elle est encore annulable.
"""
from typing import Optional
import logging

from dintero_checkout.orders import repository
from dintero_checkout.orders.models import Order

logger = logging.getLogger(__name__)

PAYMENT_FAILED_COMMENT = "Payment Failed"

def cancel_failed_payment(merchant_reference: Optional[str]) -> bool:
    """Annule la commande liée à merchant_reference.
    - Retourne True si une annulation a été enregistrée, False sinon (introuvable ou non annulable).
    - Émet l'événement order_cancel_after (log) après sauvegarde.
    """
    row = repository.get_order_by_increment_id(merchant_reference or "")
    if not row:
        return False
    order = Order.model_validate(row)
    if not order.can_cancel():
        logger.info("orders.cancel skipped increment_id=%s state=%s", order.increment_id, order.state)
        return False
    order.cancel_payment().register_cancellation(PAYMENT_FAILED_COMMENT)
    repository.save_order(order.increment_id, order.model_dump(mode="json", exclude={"id", "increment_id"}))
    logger.info("orders.event order_cancel_after increment_id=%s", order.increment_id)
    return True
