"""
Modèles du checkout: panier local (Quote) et session distante Dintero.
- Quote/Address/QuoteItem/QuotePayment: état local persisté dans Supabase (table 'quotes').
- SessionReference: référence typée de la session Dintero stockée sur le paiement du panier.
- RemoteSession/RemoteOrder: lecture tolérante de la réponse Dintero (clés inconnues conservées dans raw).
- SessionHandle: ce qui est renvoyé aux appelants ({"id": ...}).
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

class Address(BaseModel):
    address_type: str = "billing"
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    street: List[str] = Field(default_factory=list)
    postcode: Optional[str] = None
    city: Optional[str] = None
    country_id: Optional[str] = None
    telephone: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    # Livraison uniquement
    shipping_method: Optional[str] = None
    shipping_description: Optional[str] = None
    collect_shipping_rates: bool = False

class QuoteItem(BaseModel):
    sku: str
    name: str = ""
    qty: int = 1
    price: float = 0.0
    tax_percent: float = 0.0

    @property
    def row_total(self) -> float:
        return round(self.price * self.qty, 2)

    @property
    def tax_amount(self) -> float:
        return round(self.row_total * self.tax_percent / 100, 2)

class SessionReference(BaseModel):
    id: str
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> Optional["SessionReference"]:
        session_id = str((response or {}).get("id") or "")
        if not session_id:
            return None
        return cls(id=session_id, data=dict(response))

class QuotePayment(BaseModel):
    method: str = "dintero"
    session: Optional[SessionReference] = None
    agreement_ids: List[str] = Field(default_factory=list)

    @property
    def session_id(self) -> Optional[str]:
        return self.session.id if self.session else None

    @field_validator("agreement_ids", mode="before")
    @classmethod
    def _normalize_agreements(cls, v):
        return [str(x) for x in (v or []) if str(x).strip()]

class Totals(BaseModel):
    subtotal: float = 0.0
    discount_amount: float = 0.0
    shipping_amount: Optional[float] = None
    tax_amount: float = 0.0
    grand_total: float = 0.0

class Quote(BaseModel):
    id: str
    reserved_order_id: Optional[str] = None
    is_virtual: bool = False
    currency: str = "NOK"
    customer_email: Optional[str] = None
    coupon_code: Optional[str] = None
    items: List[QuoteItem] = Field(default_factory=list)
    billing_address: Address = Field(default_factory=lambda: Address(address_type="billing"))
    shipping_address: Address = Field(default_factory=lambda: Address(address_type="shipping"))
    payment: QuotePayment = Field(default_factory=QuotePayment)
    totals: Totals = Field(default_factory=Totals)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_columns(cls, data):
        # Colonnes JSON nulles en base: valeurs par défaut du modèle
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("reserved_order_id", mode="before")
    @classmethod
    def _order_id_as_str(cls, v):
        return str(v) if v not in (None, "") else None

    def to_row(self) -> Dict[str, Any]:
        """Ligne Supabase 'quotes' (colonnes JSON pour les sous-objets)."""
        return self.model_dump(mode="json")

class SessionHandle(BaseModel):
    id: Optional[str] = None

class ShippingOption(BaseModel):
    id: Optional[str] = None
    operator: Optional[str] = None
    title: Optional[str] = None
    amount: Optional[int] = None

class RemoteOrder(BaseModel, extra="allow"):
    merchant_reference: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    discount_codes: List[str] = Field(default_factory=list)
    shipping_option: Optional[ShippingOption] = None
    billing_address: Optional[Dict[str, Any]] = None
    shipping_address: Optional[Dict[str, Any]] = None

    @field_validator("merchant_reference", mode="before")
    @classmethod
    def _reference_as_str(cls, v):
        return str(v) if v not in (None, "") else None

    @field_validator("discount_codes", mode="before")
    @classmethod
    def _codes_as_list(cls, v):
        return [str(x) for x in (v or []) if x]

class RemoteSession(BaseModel):
    """
    Session Dintero telle que renvoyée par GET /sessions/{id}.
    - express: vrai pour une session Express Checkout (pas de validation des CGV locales).
    - raw: réponse brute complète.
    """
    id: Optional[str] = None
    express: bool = False
    order: RemoteOrder = Field(default_factory=RemoteOrder)
    raw: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Optional[Dict[str, Any]]) -> "RemoteSession":
        data = dict(response or {})
        return cls(
            id=str(data.get("id") or "") or None,
            express=bool(data.get("express")),
            order=RemoteOrder.model_validate(data.get("order") or {}),
            raw=data,
        )

    @property
    def merchant_reference(self) -> Optional[str]:
        return self.order.merchant_reference
