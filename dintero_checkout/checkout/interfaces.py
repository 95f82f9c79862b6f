"""
Contrats des collaborateurs de SessionManagement.

Les implémentations par défaut (Dintero, Supabase) respectent ces interfaces;
les tests peuvent fournir des doublures sans toucher au réseau ni à la base.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .models import Address, Quote, QuotePayment, RemoteSession


class PaymentProviderClient(ABC):
    @abstractmethod
    def set_type(self, embed_type: str) -> "PaymentProviderClient":
        ...

    @abstractmethod
    def get_session_info(self, session_id: Optional[str]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def init_session_from_quote(self, quote: Quote) -> Dict[str, Any]:
        ...

    @abstractmethod
    def update_session(self, session_id: str, quote: Quote) -> Dict[str, Any]:
        ...

    @abstractmethod
    def cancel_session(self, session_id: str) -> None:
        ...


class QuoteStore(ABC):
    @abstractmethod
    def save_payment(self, quote: Quote) -> None:
        ...

    @abstractmethod
    def reserve_order_id(self, quote: Quote) -> str:
        ...

    @abstractmethod
    def collect_totals(self, quote: Quote) -> Quote:
        """Recalcule puis persiste les totaux; lève une exception en cas d'échec."""


class AddressMapper(ABC):
    @abstractmethod
    def map(self, address: Address, order_data: Dict[str, Any]) -> None:
        ...


class AgreementValidator(ABC):
    @abstractmethod
    def validate(self, payment: QuotePayment) -> bool:
        ...


class SessionValidator(ABC):
    @abstractmethod
    def validate(self, session: RemoteSession, quote: Quote) -> bool:
        ...
