"""
Logique pure de construction des payloads Dintero (pas de HTTP, pas de DB).
Montants en unités mineures (centimes/øre).
"""
from typing import Any, Dict, List, Optional

from .models import Address, Quote

EMBED_EMBEDDED = "embedded"
EMBED_EXPRESS = "express"
EMBED_TYPES = (EMBED_EMBEDDED, EMBED_EXPRESS)

# module dintero_checkout.checkout.payload
def to_minor_units(amount: Optional[float]) -> int:
    return int(round(float(amount or 0) * 100))

def map_address(address: Address) -> Dict[str, Any]:
    """Adresse locale -> format Dintero (clés vides omises)."""
    street = list(address.street or [])
    data = {
        "first_name": address.firstname,
        "last_name": address.lastname,
        "address_line": street[0] if street else None,
        "address_line_2": " ".join(street[1:]) if len(street) > 1 else None,
        "postal_code": address.postcode,
        "postal_place": address.city,
        "country": address.country_id,
        "phone_number": address.telephone,
        "email": address.email,
        "business_name": address.company,
    }
    return {k: v for k, v in data.items() if v}

def to_items(quote: Quote) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for line_id, item in enumerate(quote.items, start=1):
        if item.qty <= 0:
            continue
        items.append({
            "id": item.sku,
            "line_id": str(line_id),
            "description": item.name or item.sku,
            "quantity": item.qty,
            "amount": to_minor_units(item.row_total + item.tax_amount),
            "vat_amount": to_minor_units(item.tax_amount),
            "vat": item.tax_percent,
        })
    return items

def to_shipping_option(quote: Quote) -> Optional[Dict[str, Any]]:
    shipping = quote.shipping_address
    if quote.is_virtual or not shipping.shipping_method:
        return None
    return {
        "id": shipping.shipping_method,
        "line_id": "shipping",
        "amount": to_minor_units(quote.totals.shipping_amount),
        "operator": shipping.shipping_description or "",
        "title": shipping.shipping_description or shipping.shipping_method,
    }

def build_order(quote: Quote) -> Dict[str, Any]:
    """
    Construit l'objet order Dintero à partir du panier.
    - merchant_reference = reserved_order_id (clé de correspondance panier/session)
    - amount = somme des lignes émises (articles + livraison - remises),
      Dintero refuse une session dont le montant ne correspond pas aux lignes
    """
    totals = quote.totals
    items = to_items(quote)
    order: Dict[str, Any] = {
        "currency": quote.currency,
        "vat_amount": sum(item["vat_amount"] for item in items),
        "merchant_reference": quote.reserved_order_id or "",
        "items": items,
    }
    gross = sum(item["amount"] for item in items)
    shipping_option = to_shipping_option(quote)
    if shipping_option:
        order["shipping_option"] = shipping_option
        gross += shipping_option["amount"]
    discount = 0
    if quote.coupon_code:
        order["discount_codes"] = [quote.coupon_code]
        discount = min(to_minor_units(totals.discount_amount), gross)
        if discount:
            order["discount_lines"] = [{
                "amount": discount,
                "discount_id": quote.coupon_code,
                "description": quote.coupon_code,
                "line_id": 1,
            }]
    order["amount"] = gross - discount
    billing = map_address(quote.billing_address)
    if billing:
        order["billing_address"] = billing
    if not quote.is_virtual:
        shipping = map_address(quote.shipping_address)
        if shipping:
            order["shipping_address"] = shipping
    return order

def build_session_payload(
    quote: Quote,
    *,
    profile_id: str,
    return_url: str,
    callback_url: str,
    embed_type: str = EMBED_EMBEDDED,
) -> Dict[str, Any]:
    """
    Payload de POST /sessions-profile.
    - embed_type "express": ajoute le bloc express (mode de livraison, option courante).
    """
    customer = {
        "email": quote.customer_email or quote.billing_address.email,
        "phone_number": quote.billing_address.telephone,
    }
    url = {"return_url": return_url}
    if callback_url:
        url["callback_url"] = callback_url
    payload: Dict[str, Any] = {
        "url": url,
        "order": build_order(quote),
        "customer": {k: v for k, v in customer.items() if v},
        "profile_id": profile_id,
    }
    if embed_type == EMBED_EXPRESS:
        shipping_option = payload["order"].get("shipping_option")
        payload["express"] = {
            "shipping_mode": "shipping_not_required" if quote.is_virtual else "shipping_required",
            "shipping_options": [shipping_option] if shipping_option else [],
        }
    return payload
