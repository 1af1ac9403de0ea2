# productstore/core.py
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from pydantic import BaseModel

from .errors import FieldError
from .models import Product

NAME_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 50
# Largest value a 96-bit decimal holds; bigger prices are rejected.
PRICE_MAX = Decimal("79228162514264337593543950335")

# Request bodies. Fields are untyped at the schema level so the service can
# report every missing, mistyped or invalid field together instead of the
# framework failing on the first type error.


class ProductIn(BaseModel):
    name: Any = None
    price: Any = None
    category: Any = None


class ProductUpdate(BaseModel):
    name: Any = None
    price: Any = None
    category: Any = None

    def is_empty(self) -> bool:
        return self.name is None and self.price is None and self.category is None


def parse_price(value: Any) -> Optional[Decimal]:
    """Convert a request price to Decimal, or None if it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


def _check_text(field: str, value: Any, max_length: int) -> List[FieldError]:
    if not isinstance(value, str):
        return [FieldError(field, f"{field} must be a string")]
    errors = []
    if not value.strip():
        errors.append(FieldError(field, f"{field} must not be blank"))
    if len(value) > max_length:
        errors.append(FieldError(field, f"{field} must not exceed {max_length} characters"))
    return errors


def _check_price(value: Any) -> List[FieldError]:
    price = parse_price(value)
    if price is None:
        return [FieldError("price", "price must be a number")]
    if not price.is_finite():
        return [FieldError("price", "price must be a finite number")]
    if price <= 0:
        return [FieldError("price", "price must be greater than zero")]
    if price > PRICE_MAX:
        return [FieldError("price", f"price must not exceed {PRICE_MAX}")]
    return []


def validate_new_product(payload: ProductIn) -> List[FieldError]:
    """Check every field of a create request and return all violations."""
    errors: List[FieldError] = []

    if payload.name is None:
        errors.append(FieldError("name", "name is required"))
    else:
        errors.extend(_check_text("name", payload.name, NAME_MAX_LENGTH))

    if payload.price is None:
        errors.append(FieldError("price", "price is required"))
    else:
        errors.extend(_check_price(payload.price))

    if payload.category is None:
        errors.append(FieldError("category", "category is required"))
    else:
        errors.extend(_check_text("category", payload.category, CATEGORY_MAX_LENGTH))

    return errors


def validate_product_update(payload: ProductUpdate) -> List[FieldError]:
    """Like validate_new_product, but absent fields are skipped."""
    errors: List[FieldError] = []
    if payload.name is not None:
        errors.extend(_check_text("name", payload.name, NAME_MAX_LENGTH))
    if payload.price is not None:
        errors.extend(_check_price(payload.price))
    if payload.category is not None:
        errors.extend(_check_text("category", payload.category, CATEGORY_MAX_LENGTH))
    return errors


# The helpers below expect payloads that already passed validation.

def _make_product(product_id: int, p: ProductIn) -> Product:
    return Product(id=product_id, name=p.name, price=parse_price(p.price), category=p.category)


def _apply_update(product: Product, p: ProductUpdate) -> None:
    if p.name is not None:
        product.name = p.name
    if p.price is not None:
        product.price = parse_price(p.price)
    if p.category is not None:
        product.category = p.category


def next_product_id(products: List[Product]) -> int:
    if not products:
        return 1
    return max(p.id for p in products) + 1
