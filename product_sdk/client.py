# product_sdk/client.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

import httpx
import requests
from rich import print

Number = Union[int, float, Decimal, str]


class ProductAPIError(Exception):
    """Non-2xx response from the product API. ``problem`` is the parsed body."""

    def __init__(self, status_code: int, problem: Dict[str, Any]):
        self.status_code = status_code
        self.problem = problem
        super().__init__(f"HTTP {status_code}: {problem.get('detail') or problem.get('title') or 'error'}")

    @property
    def fields(self) -> List[str]:
        return [e.get("field") for e in self.problem.get("errors", [])]


def _price(value: Number) -> str:
    # decimal text keeps every digit; the API parses it exactly
    return str(Decimal(str(value)))


def _check(r) -> Any:
    if r.status_code >= 400:
        try:
            body = r.json()
        except ValueError:
            body = {"detail": r.text}
        raise ProductAPIError(r.status_code, body)
    if r.status_code == 204 or not r.content:
        return None
    return r.json()


class ProductClient:
    def __init__(self, base_url: str = "http://localhost:8085", api_key: Optional[str] = None, timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def health(self):
        return _check(self.session.get(f"{self.base_url}/health", timeout=self.timeout))

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        return _check(r)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return _check(r)

    def create_product(self, name: str, price: Number, category: str) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/products", json={
            "name": name, "price": _price(price), "category": category
        }, timeout=self.timeout)
        return _check(r)

    def update_product(self, product_id: int, name: Optional[str] = None,
                       price: Optional[Number] = None, category: Optional[str] = None) -> Dict[str, Any]:
        # only send what the caller wants changed
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if price is not None:
            payload["price"] = _price(price)
        if category is not None:
            payload["category"] = category
        r = self.session.put(f"{self.base_url}/products/{product_id}", json=payload, timeout=self.timeout)
        return _check(r)

    def delete_product(self, product_id: int) -> None:
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        _check(r)

    async def create_product_async(self, name: str, price: Number, category: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/products", json={
                "name": name, "price": _price(price), "category": category
            })
            return _check(r)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Product API client")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List all products")

    gp = subparsers.add_parser("get", help="Get a product by its ID")
    gp.add_argument("--id", type=int, required=True, help="ID of the product")

    cp = subparsers.add_parser("create", help="Create a new product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=Decimal, required=True, help="Price, e.g. 1.50")
    cp.add_argument("--category", required=True, help="Product category")

    up = subparsers.add_parser("update", help="Update fields of a product")
    up.add_argument("--id", type=int, required=True)
    up.add_argument("--name")
    up.add_argument("--price", type=Decimal)
    up.add_argument("--category")

    dp = subparsers.add_parser("delete", help="Delete a product")
    dp.add_argument("--id", type=int, required=True)

    args = parser.parse_args()
    c = ProductClient(base_url=args.base_url)

    try:
        if args.command == "list":
            print(c.list_products())
        elif args.command == "get":
            print(c.get_product(args.id))
        elif args.command == "create":
            print(c.create_product(args.name, args.price, args.category))
        elif args.command == "update":
            print(c.update_product(args.id, args.name, args.price, args.category))
        elif args.command == "delete":
            c.delete_product(args.id)
            print(f"[green]Deleted product {args.id}[/green]")
    except ProductAPIError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
