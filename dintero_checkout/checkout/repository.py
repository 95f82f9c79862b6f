"""
Accès aux données pour la feature 'checkout' (paniers, coupons, tarifs de livraison).
- Lectures: tolérantes (None en cas d'erreur, loggé).
- Écritures: loggées puis relancées, l'appelant décide (ex: update_totals -> échec récupérable).
"""
from typing import Any, Dict, Optional
import logging

import dintero_checkout.infra.supabase_client as supabase_client
from .exceptions import QuoteTotalsError
from .interfaces import QuoteStore
from .models import Quote
from . import totals as totals_logic

logger = logging.getLogger(__name__)

# module dintero_checkout.checkout.repository
def fetch_quote_row(quote_id: str) -> Optional[Dict[str, Any]]:
    if not quote_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("quotes")
            .select("*")
            .eq("id", str(quote_id))
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("checkout.repository.fetch_quote_row failed quote_id=%s", quote_id)
        return None

def fetch_coupon(code: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("coupons")
            .select("code, type, value, active")
            .eq("code", code)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("checkout.repository.fetch_coupon failed code=%s", code)
        return None

def fetch_shipping_rate(code: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("shipping_rates")
            .select("code, title, price")
            .eq("code", code)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("checkout.repository.fetch_shipping_rate failed code=%s", code)
        return None

def update_quote_row(quote_id: str, data: Dict[str, Any]) -> None:
    try:
        (
            supabase_client.get_service_supabase()
            .table("quotes")
            .update(data)
            .eq("id", str(quote_id))
            .execute()
        )
    except Exception:
        logger.exception("checkout.repository.update_quote_row failed quote_id=%s", quote_id)
        raise

def next_order_increment_id() -> str:
    res = supabase_client.get_service_supabase().rpc("reserve_order_increment_id", {}).execute()
    value = res.data
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = next(iter(value.values()), None)
    if not value:
        raise RuntimeError("reserve_order_increment_id n'a retourné aucun identifiant")
    return str(value)


class QuoteRepository(QuoteStore):
    """Implémentation Supabase du stockage des paniers."""

    def get_quote(self, quote_id: str) -> Optional[Quote]:
        row = fetch_quote_row(quote_id)
        if not row:
            return None
        return Quote.model_validate(row)

    def save(self, quote: Quote) -> None:
        row = quote.to_row()
        row.pop("id", None)
        update_quote_row(quote.id, row)

    def save_payment(self, quote: Quote) -> None:
        update_quote_row(quote.id, {"payment": quote.payment.model_dump(mode="json")})

    def reserve_order_id(self, quote: Quote) -> str:
        quote.reserved_order_id = next_order_increment_id()
        update_quote_row(quote.id, {"reserved_order_id": quote.reserved_order_id})
        logger.info("checkout.quote reserved_order_id=%s quote_id=%s", quote.reserved_order_id, quote.id)
        return quote.reserved_order_id

    def get_coupon(self, code: str) -> Optional[Dict[str, Any]]:
        return fetch_coupon(code)

    def get_shipping_rate(self, code: str) -> Optional[Dict[str, Any]]:
        return fetch_shipping_rate(code)

    def collect_totals(self, quote: Quote) -> Quote:
        totals_logic.collect_totals(quote, self.get_coupon, self.get_shipping_rate)
        try:
            self.save(quote)
        except Exception as e:
            raise QuoteTotalsError(f"Sauvegarde du panier impossible: {e}") from e
        return quote
