"""
Calcul des totaux du panier (logique pure, lookups injectés).
"""
from typing import Any, Callable, Dict, Optional
import logging

from .exceptions import QuoteTotalsError
from .models import Quote

logger = logging.getLogger(__name__)

CouponLookup = Callable[[str], Optional[Dict[str, Any]]]
ShippingRateLookup = Callable[[str], Optional[Dict[str, Any]]]

def discount_for(coupon: Dict[str, Any], subtotal: float) -> float:
    try:
        value = float(coupon.get("value") or 0)
    except (TypeError, ValueError):
        value = 0.0
    if coupon.get("type") == "percent":
        return round(subtotal * value / 100, 2)
    return round(min(value, subtotal), 2)

def collect_totals(quote: Quote, get_coupon: CouponLookup, get_shipping_rate: ShippingRateLookup) -> Quote:
    """
    Recalcule les totaux du panier en place et le retourne.
    - coupon inconnu/inactif: retiré du panier (log warning), pas d'échec
    - livraison: tarif relu si collect_shipping_rates ou montant inconnu;
      tarif absent -> QuoteTotalsError
    """
    subtotal = round(sum(item.row_total for item in quote.items), 2)
    tax = round(sum(item.tax_amount for item in quote.items), 2)

    discount = 0.0
    if quote.coupon_code:
        coupon = get_coupon(quote.coupon_code)
        if coupon and coupon.get("active", True):
            discount = discount_for(coupon, subtotal)
        else:
            logger.warning("checkout.totals coupon ignored code=%s quote_id=%s", quote.coupon_code, quote.id)
            quote.coupon_code = None

    shipping_address = quote.shipping_address
    shipping = 0.0
    if not quote.is_virtual and shipping_address.shipping_method:
        if shipping_address.collect_shipping_rates or quote.totals.shipping_amount is None:
            rate = get_shipping_rate(shipping_address.shipping_method)
            if not rate:
                raise QuoteTotalsError(f"Méthode de livraison indisponible: {shipping_address.shipping_method}")
            shipping = round(float(rate.get("price") or 0), 2)
            if not shipping_address.shipping_description:
                shipping_address.shipping_description = rate.get("title") or shipping_address.shipping_method
            shipping_address.collect_shipping_rates = False
        else:
            shipping = float(quote.totals.shipping_amount or 0)

    totals = quote.totals
    totals.subtotal = subtotal
    totals.tax_amount = tax
    totals.discount_amount = discount
    totals.shipping_amount = shipping
    totals.grand_total = max(round(subtotal - discount + shipping + tax, 2), 0.0)
    return quote
