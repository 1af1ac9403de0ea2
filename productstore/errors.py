# productstore/errors.py
from dataclasses import dataclass
from typing import List, Optional

# Problem type URIs, one per status family.
BAD_REQUEST_TYPE = "https://datatracker.ietf.org/html/rfc7231#section-6.5.1"
NOT_FOUND_TYPE = "https://datatracker.ietf.org/html/rfc7231#section-6.5.4"
SERVER_ERROR_TYPE = "https://datatracker.ietf.org/html/rfc7231#section-6.6.1"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ProductStoreError(Exception):
    """Base class for every failure the product store reports."""

    status_code = 500
    title = "Internal Server Error"
    type_uri = SERVER_ERROR_TYPE

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ProductStoreError):
    """Caller input broke one or more field rules. Lists all of them."""

    status_code = 400
    title = "Bad Request"
    type_uri = BAD_REQUEST_TYPE

    def __init__(self, errors: List[FieldError], detail: Optional[str] = None):
        self.errors = list(errors)
        if detail is None:
            detail = "Invalid product data: " + ", ".join(
                f"{e.field} ({e.message})" for e in self.errors
            )
        super().__init__(detail)

    @property
    def fields(self) -> List[str]:
        out: List[str] = []
        for e in self.errors:
            if e.field not in out:
                out.append(e.field)
        return out


class NotFoundError(ProductStoreError):
    status_code = 404
    title = "Not Found"
    type_uri = NOT_FOUND_TYPE

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class DecodeError(ProductStoreError):
    # A malformed store is reported as a client-side data problem.
    status_code = 400
    title = "Bad Request"
    type_uri = BAD_REQUEST_TYPE

    def __init__(self, message: str):
        super().__init__(f"Invalid JSON format: {message}")


class StorageIOError(ProductStoreError):
    def __init__(self, message: str):
        super().__init__(f"File access error: {message}")


def invalid_id(product_id: int) -> ValidationError:
    return ValidationError(
        [FieldError("id", "id must be positive")],
        detail=f"Product ID must be greater than zero, got {product_id}.",
    )
