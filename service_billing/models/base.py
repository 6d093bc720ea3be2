"""Base models shared across domains."""

from dataclasses import dataclass


@dataclass
class Address:
    """Brazilian postal address.

    - neighborhood: bairro
    - state: UF abbreviation (``"SP"``, ``"RJ"``)
    - postal_code: CEP, with or without the dash
    - country: ISO 3166-1 alpha-2 code (default: ``"BR"``)
    """

    street: str
    number: str
    neighborhood: str
    city: str
    state: str
    postal_code: str
    complement: str = ""
    country: str = "BR"
