# productstore/database.py
"""
Storage accessors for the product collection.

The collection is always read and written as a whole. ``JsonFileStorage``
keeps it in a single pretty-printed JSON file; ``InMemoryStorage`` is the
drop-in replacement used by tests.
"""

import asyncio
import logging
import os
import tempfile
import uuid
import weakref
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import simplejson
from pydantic import ValidationError as PydanticValidationError

from .errors import DecodeError, StorageIOError
from .models import Product

logger = logging.getLogger(__name__)

# Entries disappear once no operation holds the lock.
_LOCKS: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _get_lock(key: str) -> asyncio.Lock:
    lock = _LOCKS.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _LOCKS[key] = lock
    return lock


class ProductStorage(ABC):
    """Loads and stores the full product collection."""

    @property
    @abstractmethod
    def identity(self) -> str:
        """Key shared by every accessor that points at the same data."""

    @abstractmethod
    def load(self) -> List[Product]:
        ...

    @abstractmethod
    def store(self, products: List[Product]) -> None:
        ...

    def lock(self) -> asyncio.Lock:
        return _get_lock(self.identity)


def _decode_products(raw: str) -> List[Product]:
    try:
        data = simplejson.loads(raw, use_decimal=True)
    except simplejson.JSONDecodeError as e:
        raise DecodeError(str(e)) from e

    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON array, got {type(data).__name__}")

    products = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise DecodeError(f"item {index} is not a JSON object")
        # Field names match regardless of case.
        fields = {str(k).lower(): v for k, v in item.items()}
        try:
            products.append(Product.model_validate(fields))
        except PydanticValidationError as e:
            raise DecodeError(f"item {index}: {e.errors()[0]['msg']}") from e
    return products


def _encode_products(products: List[Product]) -> str:
    payload = []
    for p in products:
        if not p.price.is_finite():
            raise StorageIOError(f"product {p.id} has a non-finite price ({p.price})")
        payload.append(p.model_dump())
    # Decimals are written as exact JSON numbers.
    return simplejson.dumps(payload, indent=2, ensure_ascii=False, use_decimal=True, allow_nan=False)


class JsonFileStorage(ProductStorage):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def identity(self) -> str:
        return f"file:{self.path.resolve()}"

    def load(self) -> List[Product]:
        if not self.path.exists():
            logger.debug("%s does not exist yet, starting empty", self.path)
            return []
        try:
            # utf-8-sig drops a leading BOM left by some editors.
            raw = self.path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"file is not valid UTF-8 ({e.reason} at byte {e.start})") from e
        except OSError as e:
            raise StorageIOError(str(e)) from e

        if not raw.strip() or raw.strip() == "[]":
            return []
        products = _decode_products(raw)
        logger.debug("loaded %d products from %s", len(products), self.path)
        return products

    def store(self, products: List[Product]) -> None:
        directory = self.path.parent
        content = _encode_products(products)
        tmp_name: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageIOError(str(e)) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("could not remove temporary file %s", tmp_name)
        logger.debug("stored %d products to %s", len(products), self.path)


class InMemoryStorage(ProductStorage):
    def __init__(self, products: Optional[List[Product]] = None):
        self._products: List[Dict[str, Any]] = [p.model_dump() for p in products or []]
        self.store_calls = 0
        self._key = uuid.uuid4().hex

    @property
    def identity(self) -> str:
        return f"memory:{self._key}"

    def load(self) -> List[Product]:
        return [Product(**p) for p in self._products]

    def store(self, products: List[Product]) -> None:
        self.store_calls += 1
        self._products = [p.model_dump() for p in products]
