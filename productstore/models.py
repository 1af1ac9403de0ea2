# productstore/models.py
from decimal import Decimal

from pydantic import BaseModel, field_serializer


class Product(BaseModel):
    id: int
    name: str
    price: Decimal
    category: str

    @field_serializer("price", when_used="json")
    def _price_as_number(self, price: Decimal) -> float:
        # HTTP clients expect a number, not a string. The backing file is
        # written from model_dump() and keeps the exact Decimal.
        return float(price)
