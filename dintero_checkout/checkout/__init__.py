"""
Module 'checkout' (feature-first): point d'entrée public.
Réunit modèles du panier, client Dintero, validation de session, repository BD et SessionManagement.
"""

from .exceptions import CheckoutError, SessionValidationError, RemoteCallError, QuoteTotalsError
from .models import Quote, Address, QuoteItem, QuotePayment, SessionReference, SessionHandle, RemoteSession
from .result import Ok, Err, Result
from .dintero_client import DinteroClient, make_dintero_client
from .repository import QuoteRepository
from .service import SessionManagement, build_session_management

__all__ = [
    # errors
    "CheckoutError",
    "SessionValidationError",
    "RemoteCallError",
    "QuoteTotalsError",
    # models
    "Quote",
    "Address",
    "QuoteItem",
    "QuotePayment",
    "SessionReference",
    "SessionHandle",
    "RemoteSession",
    # result
    "Ok",
    "Err",
    "Result",
    # dintero
    "DinteroClient",
    "make_dintero_client",
    # repository
    "QuoteRepository",
    # services
    "SessionManagement",
    "build_session_management",
]
