from .interfaces import SessionValidator
from .models import Quote, RemoteSession

# module dintero_checkout.checkout.session_validator
class MerchantReferenceValidator(SessionValidator):
    """
    Une session Dintero n'est valide pour un panier que si:
    - elle possède un id non vide;
    - son order.merchant_reference est égal au reserved_order_id du panier.
    Un panier sans reserved_order_id ne correspond à aucune session.
    """

    def validate(self, session: RemoteSession, quote: Quote) -> bool:
        if not session or not session.id:
            return False
        reserved = quote.reserved_order_id
        if not reserved:
            return False
        return str(session.merchant_reference or "") == str(reserved)
