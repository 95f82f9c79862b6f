from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

STATE_CANCELED = "canceled"
# États à partir desquels une commande ne peut plus être annulée
NON_CANCELABLE_STATES = {STATE_CANCELED, "complete", "closed"}

class Order(BaseModel):
    id: Optional[str] = None
    increment_id: str
    state: str = "new"
    status: str = "pending"
    payment: Dict[str, Any] = Field(default_factory=dict)
    status_history: List[Dict[str, Any]] = Field(default_factory=list)

    def can_cancel(self) -> bool:
        return self.state not in NON_CANCELABLE_STATES

    def cancel_payment(self) -> "Order":
        self.payment["transaction_id"] = None
        self.payment["state"] = STATE_CANCELED
        return self

    def register_cancellation(self, comment: str = "") -> "Order":
        if not self.can_cancel():
            raise ValueError(f"Commande {self.increment_id} non annulable (state={self.state})")
        self.state = STATE_CANCELED
        self.status = STATE_CANCELED
        if comment:
            self.status_history.append({"status": STATE_CANCELED, "comment": comment})
        return self
