from dintero_checkout.checkout.agreements import (
    NoAgreementsValidator,
    RequiredAgreementsValidator,
    make_agreement_validator,
)
from dintero_checkout.checkout.models import QuotePayment

def test_required_agreements_all_accepted():
    validator = RequiredAgreementsValidator(["terms", "privacy"])
    assert validator.validate(QuotePayment(agreement_ids=["privacy", "terms", "newsletter"])) is True

def test_required_agreements_missing_one():
    validator = RequiredAgreementsValidator(["terms", "privacy"])
    assert validator.validate(QuotePayment(agreement_ids=["terms"])) is False

def test_no_required_agreements_always_valid():
    assert RequiredAgreementsValidator([]).validate(QuotePayment()) is True

def test_agreement_ids_are_normalized_to_strings():
    payment = QuotePayment(agreement_ids=[1, " ", "2"])
    assert payment.agreement_ids == ["1", "2"]
    assert RequiredAgreementsValidator(["1", "2"]).validate(payment) is True

def test_make_agreement_validator_follows_configuration():
    assert isinstance(make_agreement_validator(False, ["terms"]), NoAgreementsValidator)
    enforced = make_agreement_validator(True, ["terms"])
    assert isinstance(enforced, RequiredAgreementsValidator)
    assert enforced.validate(QuotePayment()) is False
