from typing import Any, Dict, Optional

from .interfaces import AddressMapper
from .models import Address

# Champs Dintero -> champs de l'adresse locale
_FIELD_MAP = {
    "first_name": "firstname",
    "last_name": "lastname",
    "postal_code": "postcode",
    "postal_place": "city",
    "country": "country_id",
    "phone_number": "telephone",
    "email": "email",
    "business_name": "company",
}

# module dintero_checkout.checkout.address_mapper
class DinteroAddressMapper(AddressMapper):
    def map(self, address: Address, order_data: Dict[str, Any]) -> None:
        """
        Recopie l'adresse de la commande Dintero dans l'adresse du panier (mutation en place).
        - Lit order_data["<address_type>_address"], à défaut l'autre adresse de la commande.
        - Les clés absentes/vides ne modifient pas le champ local.
        """
        source = self._source_for(address, order_data or {})
        if not source:
            return
        for remote_key, local_key in _FIELD_MAP.items():
            value = source.get(remote_key)
            if value:
                setattr(address, local_key, str(value))
        street = [str(source[k]) for k in ("address_line", "address_line_2") if source.get(k)]
        if street:
            address.street = street

    @staticmethod
    def _source_for(address: Address, order_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        own = f"{address.address_type}_address"
        other = "shipping_address" if own == "billing_address" else "billing_address"
        return order_data.get(own) or order_data.get(other)
