"""
Validation des conditions générales (agreements) avant de finaliser une session non-express.
La politique est injectée dans SessionManagement selon la configuration.
"""
from typing import Iterable
import logging

from .interfaces import AgreementValidator
from .models import QuotePayment

logger = logging.getLogger(__name__)

class RequiredAgreementsValidator(AgreementValidator):
    """Toutes les agreements requises doivent figurer dans payment.agreement_ids."""

    def __init__(self, required_ids: Iterable[str] = ()):
        self.required_ids = {str(i).strip() for i in required_ids if str(i).strip()}

    def validate(self, payment: QuotePayment) -> bool:
        if not self.required_ids:
            return True
        accepted = set((payment.agreement_ids if payment else None) or [])
        missing = self.required_ids - accepted
        if missing:
            logger.info("checkout.agreements missing=%s", sorted(missing))
            return False
        return True

class NoAgreementsValidator(AgreementValidator):
    def validate(self, payment: QuotePayment) -> bool:
        return True

def make_agreement_validator(enforce: bool, required_ids: Iterable[str]) -> AgreementValidator:
    if not enforce:
        return NoAgreementsValidator()
    return RequiredAgreementsValidator(required_ids)
