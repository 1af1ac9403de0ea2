# productstore/service.py
import asyncio
import logging
from typing import List, Optional, Tuple

from .core import (
    ProductIn, ProductUpdate, _apply_update, _make_product,
    next_product_id, validate_new_product, validate_product_update,
)
from .database import ProductStorage
from .errors import NotFoundError, ValidationError, invalid_id
from .models import Product

logger = logging.getLogger(__name__)

# This file contains the product operations used by the API endpoints.
# Each call loads the whole collection, works on it in memory and, for
# mutations, writes it back while holding the storage lock.


class ProductService:
    def __init__(self, storage: ProductStorage):
        self.storage = storage

    async def _load(self) -> List[Product]:
        return await asyncio.to_thread(self.storage.load)

    async def _store(self, products: List[Product]) -> None:
        await asyncio.to_thread(self.storage.store, products)

    @staticmethod
    def _find(products: List[Product], product_id: int) -> Tuple[Optional[Product], int]:
        for index, p in enumerate(products):
            if p.id == product_id:
                return p, index
        return None, -1

    async def list_all(self) -> List[Product]:
        return await self._load()

    async def get_by_id(self, product_id: int) -> Product:
        if product_id <= 0:
            raise invalid_id(product_id)
        product, _ = self._find(await self._load(), product_id)
        if product is None:
            raise NotFoundError(product_id)
        return product

    async def create(self, payload: ProductIn) -> Product:
        errors = validate_new_product(payload)
        if errors:
            raise ValidationError(errors)

        async with self.storage.lock():
            products = await self._load()
            product = _make_product(next_product_id(products), payload)
            products.append(product)
            await self._store(products)

        logger.info("created product %d (%s)", product.id, product.name)
        return product

    async def update(self, product_id: int, payload: ProductUpdate) -> Product:
        if product_id <= 0:
            raise invalid_id(product_id)

        async with self.storage.lock():
            products = await self._load()
            product, _ = self._find(products, product_id)
            if product is None:
                raise NotFoundError(product_id)

            errors = validate_product_update(payload)
            if errors:
                raise ValidationError(errors)

            if payload.is_empty():
                return product

            _apply_update(product, payload)
            await self._store(products)

        logger.info("updated product %d", product_id)
        return product

    async def delete(self, product_id: int) -> None:
        if product_id <= 0:
            raise invalid_id(product_id)

        async with self.storage.lock():
            products = await self._load()
            product, index = self._find(products, product_id)
            if product is None:
                raise NotFoundError(product_id)
            del products[index]
            await self._store(products)

        logger.info("deleted product %d", product_id)
