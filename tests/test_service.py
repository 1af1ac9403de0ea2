# tests/test_service.py
import asyncio
from decimal import Decimal

import pytest

from productstore.core import ProductIn, ProductUpdate
from productstore.database import InMemoryStorage, JsonFileStorage
from productstore.errors import NotFoundError, ValidationError
from productstore.models import Product
from productstore.service import ProductService


def run(coro):
    return asyncio.run(coro)


def make_service(*products):
    storage = InMemoryStorage(list(products))
    return ProductService(storage), storage


def product(pid, name="Thing", price="2.00", category="Misc"):
    return Product(id=pid, name=name, price=Decimal(price), category=category)


def test_create_on_empty_store_then_next_id():
    service, _ = make_service()
    pen = run(service.create(ProductIn(name="Pen", price=Decimal("1.50"), category="Office")))
    assert pen == Product(id=1, name="Pen", price=Decimal("1.50"), category="Office")

    mug = run(service.create(ProductIn(name="Mug", price=Decimal("5.00"), category="Office")))
    assert mug.id == 2
    assert run(service.list_all()) == [pen, mug]


def test_create_uses_max_id_plus_one():
    service, _ = make_service(product(4), product(9), product(2))
    created = run(service.create(ProductIn(name="New", price=Decimal("1"), category="X")))
    assert created.id == 10


def test_ids_below_max_are_not_reused_after_delete():
    service, _ = make_service()
    for name in ("a", "b", "c"):
        run(service.create(ProductIn(name=name, price=Decimal("1"), category="X")))
    run(service.delete(2))
    created = run(service.create(ProductIn(name="d", price=Decimal("1"), category="X")))
    assert created.id == 4


def test_created_product_can_be_fetched():
    service, _ = make_service()
    created = run(service.create(ProductIn(name="Lamp", price=Decimal("19.99"), category="Home")))
    assert run(service.get_by_id(created.id)) == created


def test_create_blank_name_names_the_field():
    service, storage = make_service()
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name="", price=Decimal("5"), category="X")))
    assert exc.value.fields == ["name"]
    assert storage.store_calls == 0


def test_create_reports_every_invalid_field():
    service, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name="   ", price=Decimal("0"), category="c" * 51)))
    assert exc.value.fields == ["name", "price", "category"]


def test_create_missing_fields_are_invalid():
    service, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn()))
    assert exc.value.fields == ["name", "price", "category"]


def test_create_length_limits():
    service, _ = make_service()
    ok = run(service.create(ProductIn(name="n" * 100, price=Decimal("0.01"), category="c" * 50)))
    assert ok.id == 1
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name="n" * 101, price=Decimal("1"), category="c")))
    assert exc.value.fields == ["name"]


@pytest.mark.parametrize("pid", [0, -5])
def test_get_invalid_id_is_validation_error(pid):
    service, _ = make_service(product(1))
    with pytest.raises(ValidationError) as exc:
        run(service.get_by_id(pid))
    assert exc.value.fields == ["id"]


def test_get_unknown_id_is_not_found():
    service, _ = make_service(product(1))
    with pytest.raises(NotFoundError):
        run(service.get_by_id(2))


def test_delete_then_delete_again():
    service, _ = make_service(product(3))
    run(service.delete(3))
    assert run(service.list_all()) == []
    with pytest.raises(NotFoundError):
        run(service.delete(3))


def test_delete_invalid_id():
    service, _ = make_service(product(1))
    with pytest.raises(ValidationError):
        run(service.delete(0))


def test_update_applies_only_present_fields():
    service, _ = make_service(product(7, name="Old", price="3.00", category="A"))
    updated = run(service.update(7, ProductUpdate(price=Decimal("4.50"))))
    assert updated == Product(id=7, name="Old", price=Decimal("4.50"), category="A")
    assert run(service.get_by_id(7)) == updated


def test_update_with_no_fields_does_not_write():
    original = product(7)
    service, storage = make_service(original)
    assert run(service.update(7, ProductUpdate())) == original
    assert storage.store_calls == 0


def test_update_negative_price_leaves_record_unchanged():
    original = product(7)
    service, storage = make_service(original)
    with pytest.raises(ValidationError) as exc:
        run(service.update(7, ProductUpdate(price=Decimal("-1"))))
    assert exc.value.fields == ["price"]
    assert run(service.get_by_id(7)) == original
    assert storage.store_calls == 0


def test_update_reports_every_invalid_present_field():
    service, _ = make_service(product(1))
    with pytest.raises(ValidationError) as exc:
        run(service.update(1, ProductUpdate(name=" ", category="")))
    assert exc.value.fields == ["name", "category"]


def test_update_invalid_id_checked_before_lookup():
    service, _ = make_service()
    with pytest.raises(ValidationError):
        run(service.update(-1, ProductUpdate(name="x")))


def test_update_unknown_id_is_not_found():
    service, _ = make_service(product(1))
    with pytest.raises(NotFoundError):
        run(service.update(2, ProductUpdate(name="x")))


def test_concurrent_creates_get_distinct_ids(tmp_path):
    service = ProductService(JsonFileStorage(tmp_path / "products.json"))

    async def many():
        return await asyncio.gather(*(
            service.create(ProductIn(name=f"p{i}", price=Decimal("1"), category="X"))
            for i in range(20)
        ))

    created = run(many())
    assert sorted(p.id for p in created) == list(range(1, 21))
    assert len(run(service.list_all())) == 20


def test_two_services_on_same_file_do_not_lose_updates(tmp_path):
    fp = tmp_path / "products.json"
    a = ProductService(JsonFileStorage(fp))
    b = ProductService(JsonFileStorage(fp))

    async def both():
        await asyncio.gather(*(
            (a if i % 2 else b).create(ProductIn(name=f"p{i}", price=Decimal("1"), category="X"))
            for i in range(10)
        ))

    run(both())
    assert [p.id for p in run(a.list_all())] == list(range(1, 11))


@pytest.mark.parametrize("price", [Decimal("1e400"), "1e400", float("inf"), "NaN"])
def test_create_rejects_unrepresentable_price(price):
    service, storage = make_service()
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name="A", price=price, category="B")))
    assert exc.value.fields == ["price"]
    assert storage.store_calls == 0


def test_create_reports_type_and_rule_errors_together():
    service, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name="", price="cheap", category="c" * 51)))
    assert exc.value.fields == ["name", "price", "category"]

    with pytest.raises(ValidationError) as exc:
        run(service.create(ProductIn(name=5, price=True, category=["x"])))
    assert [e.message for e in exc.value.errors] == [
        "name must be a string", "price must be a number", "category must be a string",
    ]


def test_create_accepts_decimal_text_price():
    service, _ = make_service()
    created = run(service.create(ProductIn(name="Bond", price=" 19.99999999999999999 ", category="F")))
    assert created.price == Decimal("19.99999999999999999")


def test_update_price_text_is_converted():
    service, _ = make_service(product(1))
    assert run(service.update(1, ProductUpdate(price="3.25"))).price == Decimal("3.25")


def test_lock_works_across_event_loops():
    service, _ = make_service()

    async def burst():
        await asyncio.gather(*(
            service.create(ProductIn(name="p", price=Decimal("1"), category="X")) for _ in range(5)
        ))

    run(burst())
    run(burst())
    assert [p.id for p in run(service.list_all())] == list(range(1, 11))
