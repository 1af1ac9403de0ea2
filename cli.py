# cli.py
import argparse
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

import requests

from product_sdk.client import ProductAPIError, ProductClient

console = Console()
c: ProductClient = ProductClient(base_url="http://127.0.0.1:8085")

status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
category_cache = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Name", style="bold", width=30)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Category", width=20)

    for p in products:
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name", "N/A"),
            f"${Decimal(str(p.get('price', 0))):.2f}",
            p.get("category", "N/A")
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def show_error(e: ProductAPIError):
    lines = [f"[red]{e.problem.get('title', 'Error')}[/red] ({e.status_code})", e.problem.get("detail", "")]
    for err in e.problem.get("errors", []):
        lines.append(f"  • [bold]{err.get('field')}[/bold]: {err.get('message')}")
    console.print(Panel.fit("\n".join(lines), title="❌ Request failed", border_style="red"))


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner. Returns the result, or None
    when the API or the connection failed (the error is printed).
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except ProductAPIError as e:
        status_message = f"Error: {e}"
        show_error(e)
        return None
    except requests.RequestException as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return True if result is None else result


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_cache():
    global product_cache
    products = try_api(c.list_products)
    product_cache = products if isinstance(products, list) else []
    for p in product_cache:
        category_cache.add(p.get("category", ""))


def get_id_completer():
    if not product_cache:
        refresh_cache()
    return WordCompleter([str(p.get("id")) for p in product_cache], ignore_case=True)


def get_category_completer():
    return WordCompleter([cat for cat in category_cache if cat], ignore_case=True)


# ---------------------------
# Layout and input
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Product Manager",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_price(message: str, default: Optional[str] = "1.00", allow_blank: bool = False) -> Optional[Decimal]:
    while True:
        raw = Prompt.ask(message, default=default or "")
        if allow_blank and not raw.strip():
            return None
        try:
            return Decimal(raw)
        except InvalidOperation:
            console.print("[red]Please enter a valid number.[/red]")


def ask_id() -> int:
    while True:
        raw = prompt_with_autocomplete("Enter product ID", completer=get_id_completer()).strip()
        try:
            return int(raw)
        except ValueError:
            console.print("[red]Please enter a whole number.[/red]")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "4", "✏️ Update product"),
            ("2", "ℹ️ Get product by ID", "5", "🗑️ Delete product"),
            ("3", "➕ Create product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(["1", "2", "3", "4", "5", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products if isinstance(products, list) else [])
                refresh_cache()

        elif choice == "2":
            pid = ask_id()
            resp = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
            if resp:
                show_products([resp])

        elif choice == "3":
            name = prompt_with_autocomplete("Enter product name")
            price = ask_price("💰 Price")
            category = prompt_with_autocomplete("🏷️ Category", completer=get_category_completer())
            resp = try_api(c.create_product, name, price, category,
                           success_msg=f"Product '{name}' created")
            if resp:
                show_products([resp])
                refresh_cache()

        elif choice == "4":
            pid = ask_id()
            console.print("[dim]Leave a field blank to keep its current value.[/dim]")
            name = prompt_with_autocomplete("New name").strip() or None
            price = ask_price("💰 New price", default=None, allow_blank=True)
            category = prompt_with_autocomplete("🏷️ New category", completer=get_category_completer()).strip() or None
            resp = try_api(c.update_product, pid, name, price, category,
                           success_msg=f"Product {pid} updated")
            if resp:
                show_products([resp])
                refresh_cache()

        elif choice == "5":
            pid = ask_id()
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                if try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted"):
                    refresh_cache()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Interactive product manager")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085")
    c = ProductClient(base_url=parser.parse_args().base_url)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
