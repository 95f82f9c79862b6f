"""
Cas d'usage 'checkout': cycle de vie de la session Dintero liée au panier courant.

- get_session: réutilise la session mise en cache sur le paiement du panier si elle correspond
  encore (merchant_reference == reserved_order_id), sinon annule l'ancienne et en crée une nouvelle.
- update_session: réserve un nouveau numéro de commande et met à jour la session existante.
- validate_session: contrôle avant finalisation (CGV pour les sessions non-express + correspondance).
- update_totals: rapatrie adresses, livraison et code promo depuis Dintero puis recalcule les totaux.

Aucun verrou: la cohérence repose sur la re-vérification de merchant_reference à chaque aller-retour.
"""
from typing import Optional
import logging

from dintero_checkout import config
from .address_mapper import DinteroAddressMapper
from .agreements import make_agreement_validator
from .dintero_client import make_dintero_client
from .exceptions import SessionValidationError
from .interfaces import (
    AddressMapper,
    AgreementValidator,
    PaymentProviderClient,
    QuoteStore,
    SessionValidator,
)
from .models import Quote, RemoteSession, SessionHandle, SessionReference
from .repository import QuoteRepository
from .result import Err, Ok, Result
from .session_validator import MerchantReferenceValidator

logger = logging.getLogger(__name__)

# module dintero_checkout.checkout.service
class SessionManagement:
    def __init__(
        self,
        quote: Quote,
        *,
        client: PaymentProviderClient,
        quotes: QuoteStore,
        session_validator: SessionValidator,
        address_mapper: AddressMapper,
        agreements_validator: AgreementValidator,
        embed_type: str = "embedded",
    ) -> None:
        self.quote = quote
        self.embed_type = embed_type
        self.client = client.set_type(embed_type)
        self.quotes = quotes
        self.session_validator = session_validator
        self.address_mapper = address_mapper
        self.agreements_validator = agreements_validator

    def _fetch(self, session_id: Optional[str]) -> RemoteSession:
        return RemoteSession.from_response(self.client.get_session_info(session_id))

    def _matches(self, session: RemoteSession) -> bool:
        return self.session_validator.validate(session, self.quote)

    def _check_session(self, session_id: Optional[str]) -> Optional[str]:
        """Retourne l'id de la session si elle correspond toujours au panier, sinon None."""
        if not session_id:
            return None
        session = self._fetch(session_id)
        if not self._matches(session):
            return None
        return session.id

    def _cancel_session(self, session_id: str) -> None:
        """
        Annulation best-effort: on relit la session et on n'annule que si elle appartient
        encore à ce panier (sinon elle a pu être consommée ailleurs).
        """
        session = self._fetch(session_id)
        if not session.id or session.merchant_reference != self.quote.reserved_order_id:
            logger.info("checkout.session cancel skipped id=%s quote_id=%s", session_id, self.quote.id)
            return
        self.client.cancel_session(session_id)

    def get_session(self) -> SessionHandle:
        cached_id = self.quote.payment.session_id
        session_id = self._check_session(cached_id)
        if session_id:
            return SessionHandle(id=session_id)

        if cached_id:
            logger.info("checkout.session stale id=%s quote_id=%s", cached_id, self.quote.id)
            self._cancel_session(cached_id)

        if not self.quote.reserved_order_id:
            self.quotes.reserve_order_id(self.quote)

        response = self.client.set_type(self.embed_type).init_session_from_quote(self.quote)
        self.quote.payment.session = SessionReference.from_response(response)
        self.quotes.save_payment(self.quote)
        return SessionHandle(id=(response or {}).get("id"))

    def update_session(self) -> Result:
        cached_id = self.quote.payment.session_id
        session = self._fetch(cached_id)
        if not self._matches(session):
            logger.warning("checkout.session update rejected id=%s quote_id=%s", cached_id, self.quote.id)
            return Err(SessionValidationError(session_id=cached_id))

        self.quotes.reserve_order_id(self.quote)
        response = self.client.update_session(session.id, self.quote)
        # Référence en cache alignée sur la session distante (nouveau merchant_reference)
        self.quote.payment.session = SessionReference.from_response(response) or self.quote.payment.session
        self.quotes.save_payment(self.quote)
        return Ok(SessionHandle(id=(response or {}).get("id")))

    def validate_session(self, session_id: str) -> bool:
        session = self._fetch(session_id)
        if session.raw and not session.express and not self.agreements_validator.validate(self.quote.payment):
            logger.info("checkout.session agreements not accepted id=%s quote_id=%s", session_id, self.quote.id)
            return False
        return self._matches(session)

    def update_totals(self, session_id: str) -> Result:
        session = self._fetch(session_id)
        if not self._matches(session):
            logger.warning("checkout.totals rejected id=%s quote_id=%s", session_id, self.quote.id)
            return Err(SessionValidationError(session_id=session_id))

        quote = self.quote
        order_data = session.raw.get("order") or {}
        self.address_mapper.map(quote.billing_address, order_data)

        shipping_option = session.order.shipping_option
        if not quote.is_virtual and shipping_option and shipping_option.id:
            shipping = quote.shipping_address
            self.address_mapper.map(shipping, order_data)
            shipping.shipping_method = shipping_option.id
            shipping.shipping_description = shipping_option.operator
            shipping.collect_shipping_rates = True

        if session.order.discount_codes:
            quote.coupon_code = session.order.discount_codes[0]

        try:
            self.quotes.collect_totals(quote)
        except Exception as e:
            logger.error("checkout.totals collect failed quote_id=%s error=%s", quote.id, e)
            return Ok(False)
        return Ok(True)


def build_session_management(
    quote: Quote,
    *,
    client: Optional[PaymentProviderClient] = None,
    quotes: Optional[QuoteStore] = None,
    agreements_validator: Optional[AgreementValidator] = None,
) -> SessionManagement:
    """
    Compose SessionManagement avec les collaborateurs par défaut (configuration .env):
    client Dintero, repository Supabase, validateur merchant_reference, mapper d'adresses,
    politique d'agreements (CHECKOUT_ENFORCE_AGREEMENTS / CHECKOUT_AGREEMENT_IDS).
    """
    return SessionManagement(
        quote,
        client=client or make_dintero_client(),
        quotes=quotes or QuoteRepository(),
        session_validator=MerchantReferenceValidator(),
        address_mapper=DinteroAddressMapper(),
        agreements_validator=agreements_validator or make_agreement_validator(
            config.CHECKOUT_ENFORCE_AGREEMENTS, config.CHECKOUT_AGREEMENT_IDS
        ),
        embed_type=config.DINTERO_EMBED_TYPE,
    )
