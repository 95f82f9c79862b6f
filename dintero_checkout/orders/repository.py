from typing import Any, Dict, Optional
import logging

import dintero_checkout.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module dintero_checkout.orders.repository
def get_order_by_increment_id(increment_id: str) -> Optional[Dict[str, Any]]:
    """
    Commande par numéro (increment_id = merchant_reference Dintero).
    - Retourne None si absent ou en cas d'erreur.
    """
    if not increment_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("*")
            .eq("increment_id", str(increment_id))
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.get_order_by_increment_id failed increment_id=%s", increment_id)
        return None

def save_order(increment_id: str, data: Dict[str, Any]) -> None:
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update(data)
            .eq("increment_id", str(increment_id))
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.save_order failed increment_id=%s", increment_id)
        raise
