# cli.py
import logging
import sys
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from dmhelper.cart import Cart
from dmhelper.client import CatalogClient
from dmhelper.config import Settings
from dmhelper.errors import DMHelperError
from dmhelper.lookup import LookupService
from dmhelper.models import CartSummary, ProductRecord

console = Console()

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


# ---------------------------
# Display helpers
# ---------------------------
def show_product(record: ProductRecord, exchange_rate: float, quantity: int = 1):
    body = (
        f"[bold]{record.name}[/bold]\n"
        f"EAN: [dim]{record.identifier}[/dim]\n"
        f"Price: [green]€{record.unit_price:.2f}[/green]"
        f"  ([green]{record.unit_price * exchange_rate * quantity:.2f} PLN[/green] for {quantity})"
    )
    if record.image_reference:
        body += f"\nImage: [link={record.image_reference}]{record.image_reference}[/link]"
    console.print(Panel.fit(body, title="🔍 Product found", border_style="cyan"))


def show_cart(summary: CartSummary):
    if not summary.lines:
        console.print("[italic yellow]Cart is empty[/italic yellow]")
        return

    table = Table(
        title="🛒 Cart",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("EAN", style="dim", width=14)
    table.add_column("Name", style="bold", width=30)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Line total", justify="right", width=12)

    for line in summary.lines:
        table.add_row(
            line.record.identifier,
            line.record.name,
            str(line.quantity),
            f"€{line.record.unit_price:.2f}",
            f"€{line.line_total:.2f}",
        )

    console.print(table)
    console.print(
        Panel.fit(
            f"Exchange rate: [bold]{summary.exchange_rate}[/bold]\n"
            f"Total: [green]€{summary.total:.2f}[/green], "
            f"[green]{summary.converted_total:.2f} PLN[/green] "
            f"({summary.item_count} items)",
            title="💰 Total",
            border_style="green"
        )
    )


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# Call wrapper with error reporting
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Lookup errors are reported on the console and None is returned.
    """
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as progress:
            progress.add_task(description="Looking up...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            console.print(show_status(success_msg, True))
        return result
    except DMHelperError as e:
        console.print(show_status(f"Error: {e.message}", False))
        return None


# ---------------------------
# Input helpers
# ---------------------------
def cart_completer(cart: Cart):
    return WordCompleter([line.identifier for line in cart], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            value = float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")
            continue
        if value <= 0:
            console.print("[red]Please enter a positive number.[/red]")
            continue
        return value


def ask_quantity(message: str, default: int = 1) -> int:
    while True:
        qty = IntPrompt.ask(message, default=default)
        if qty >= 0:
            return qty
        console.print("[red]Quantity cannot be negative.[/red]")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("right", width=30)
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row("🧴 [bold blue]DMHelper[/bold blue]", f"[dim]{now}[/dim]")
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def lookup_and_add(service: LookupService, cart: Cart, exchange_rate: float):
    ean = prompt_with_autocomplete("Enter EAN", completer=cart_completer(cart)).strip()
    if not ean:
        console.print("[yellow]No EAN entered[/yellow]")
        return
    record = try_api(service.lookup, ean)
    if record is None:
        return
    show_product(record, exchange_rate)
    qty = ask_quantity("Quantity to add (0 to skip)", default=1)
    if cart.add_or_merge(record, qty) is not None:
        console.print(show_status(f"Added {qty} x {record.name} to cart"))
        show_cart(cart.summary(exchange_rate))


def remove_from_cart(cart: Cart, exchange_rate: float):
    if not len(cart):
        console.print("[italic yellow]Cart is empty[/italic yellow]")
        return
    ean = prompt_with_autocomplete("EAN to remove", completer=cart_completer(cart)).strip()
    if Confirm.ask("Remove entire item from cart?"):
        found = cart.remove(ean)
    else:
        qty = IntPrompt.ask("Quantity to remove", default=1)
        if qty <= 0:
            console.print("[red]Quantity must be > 0[/red]")
            return
        found = cart.remove(ean, qty)
    if found:
        console.print(show_status(f"Updated cart for {ean}"))
        show_cart(cart.summary(exchange_rate))
    else:
        console.print(show_status(f"{ean} is not in the cart", False))


def menu(service: LookupService, cart: Cart, settings: Settings):
    exchange_rate = settings.exchange_rate

    console.clear()
    console.print(create_header())

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "🔍 Look up product", "4", f"💱 Exchange rate ({exchange_rate})"),
            ("2", "🛒 View cart", "5", "🔄 Clear cart"),
            ("3", "➖ Remove from cart", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 6)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            lookup_and_add(service, cart, exchange_rate)

        elif choice == "2":
            show_cart(cart.summary(exchange_rate))

        elif choice == "3":
            remove_from_cart(cart, exchange_rate)

        elif choice == "4":
            exchange_rate = ask_float("💱 EUR → PLN rate", default=exchange_rate)
            console.print(show_status(f"Exchange rate set to {exchange_rate}"))

        elif choice == "5":
            if Confirm.ask("[red]This will empty the cart. Continue?[/red]"):
                cart.clear()
                console.print(show_status("Cart cleared"))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                return

        console.print()
        console.rule(style="dim")


def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    with CatalogClient(timeout=settings.timeout) as client:
        service = LookupService(client, settings=settings)
        try:
            menu(service, Cart(), settings)
        except (KeyboardInterrupt, EOFError):
            console.print("\n[bold yellow]Interrupted[/bold yellow]")
            sys.exit(130)


if __name__ == "__main__":
    main()
