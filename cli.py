# cli.py
import io
import sys
import logging
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console, Group
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from farmstore.logger import setup_logger
from sdk.storefront import StoreClient, DEFAULT_BASE_URL

console = Console()
logger = logging.getLogger("farmstore.cli")

ORG_NAME = "Artificial Intelligence Alliance Agriculture NGO"
ORG_TAGLINE = "Supporting Local Farmers & Sustainable Agriculture"

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
category_cache: List[Dict[str, Any]] = []
last_order_id: Optional[str] = None

c: Optional[StoreClient] = None

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008800 #ffffff',
    'completion-menu.completion.current': 'bg:#00aa00 #000000',
    'scrollbar.background': 'bg:#88aa88',
    'scrollbar.button': 'bg:#222222',
})


def money(cents: int) -> str:
    return f"${(cents or 0) / 100:.2f}"


STOCK_BADGES = {
    "out_of_stock": "[red]Out of Stock[/red]",
    "low_stock": "[yellow]Low Stock[/yellow]",
    "in_stock": "[green]In Stock[/green]",
}


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found matching your criteria.[/italic yellow]")
        return

    table = Table(
        title="🌱 Fresh African Agriculture",
        box=box.ROUNDED,
        header_style="bold green",
        title_style="bold green",
        show_lines=True
    )
    table.add_column("#", justify="right", width=3)
    table.add_column("Name", style="bold", width=32)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=6)
    table.add_column("Status", width=14)

    for i, p in enumerate(products, 1):
        table.add_row(
            str(i),
            p.get("name", "N/A"),
            money(p.get("price_cents", 0)),
            str(p.get("stock_quantity", 0)),
            STOCK_BADGES.get(p.get("stock_status"), "")
        )
    console.print(table)


def show_categories(categories: List[Dict[str, Any]]):
    table = Table(title="Categories", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("#", justify="right", width=3)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=50)
    table.add_row("0", "All Products", "")
    for i, cat in enumerate(categories, 1):
        table.add_row(str(i), cat.get("name", ""), cat.get("description", ""))
    console.print(table)


def show_product_detail(p: Dict[str, Any]):
    body = Text()
    if p.get("category_name"):
        body.append(f"{p['category_name']}\n", style="cyan")
    body.append(f"{money(p.get('price_cents', 0))}\n", style="bold green")
    body.append(f"{p.get('description', '')}\n\n")
    stock = p.get("stock_quantity", 0)
    body.append("Availability: ", style="dim")
    body.append(f"{stock} units" if stock > 0 else "Out of stock")
    console.print(Panel(
        Group(body, Text.from_markup(STOCK_BADGES.get(p.get("stock_status"), ""))),
        title=f"[bold]{p.get('name', 'Product')}[/bold]",
        border_style="green"
    ))


def show_cart(cart: Dict[str, Any]):
    if not cart:
        console.print("[italic yellow]No cart data[/italic yellow]")
        return

    title = Text()
    title.append("🛒 Shopping Cart", style="bold")
    if cart.get("total_items"):
        title.append(f" ({cart['total_items']})", style="bold cyan")

    items = cart.get("items", [])
    if not items:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("#", justify="right", width=3)
    table.add_column("Product", style="bold", width=32)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Subtotal", justify="right", width=10)

    for i, it in enumerate(items, 1):
        if it.get("available"):
            table.add_row(
                str(i),
                it.get("name", "Unknown"),
                str(it.get("quantity", 0)),
                money(it.get("price_cents", 0)),
                money(it.get("line_total_cents", 0))
            )
        else:
            table.add_row(
                str(i),
                f"[red]Missing product: {it.get('product_id', 'Unknown')}[/red]",
                str(it.get("quantity", "-")),
                "-",
                "-"
            )

    footer = Text(f"Total: {money(cart.get('total_cents', 0))}", style="bold green", justify="right")
    console.print(Panel(Group(table, footer), title=title, border_style="blue"))


def render_receipt(receipt: Dict[str, Any]) -> Panel:
    order = receipt.get("order", {})

    header = Text(justify="center")
    header.append("Order Confirmed!\n", style="bold green")
    header.append("Thank you for your purchase\n\n", style="dim")
    header.append(f"{ORG_NAME}\n", style="bold")
    header.append(ORG_TAGLINE, style="dim")

    details = Table.grid(padding=(0, 2))
    details.add_column(style="dim")
    details.add_column()
    details.add_row("Order ID:", order.get("id", "N/A"))
    created = order.get("created_at", "")
    try:
        created = datetime.fromisoformat(created).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        pass
    details.add_row("Date:", created)
    details.add_row("Status:", order.get("status", "N/A"))
    details.add_row("Name:", order.get("customer_name", ""))
    details.add_row("Email:", order.get("customer_email", ""))
    details.add_row("Phone:", order.get("customer_phone", ""))
    details.add_row("Address:", order.get("delivery_address", ""))

    items = Table(title="Items Ordered", box=box.SIMPLE_HEAD, header_style="bold")
    items.add_column("Product", width=32)
    items.add_column("Price × Qty", justify="right", width=14)
    items.add_column("Total", justify="right", width=10)
    for it in receipt.get("items", []):
        items.add_row(
            it.get("name") or it.get("product_id", ""),
            f"{money(it.get('price_cents', 0))} × {it.get('quantity', 0)}",
            money(it.get("line_total_cents", 0))
        )

    totals = Table.grid(padding=(0, 2))
    totals.add_column(width=40)
    totals.add_column(justify="right", width=12)
    totals.add_row("Subtotal:", money(receipt.get("subtotal_cents", 0)))
    totals.add_row("Delivery:", receipt.get("delivery", "Free"))
    totals.add_row("[bold]Total Paid:[/bold]", f"[bold]{money(receipt.get('total_cents', 0))}[/bold]")

    footer = Text(
        "Thank you for supporting local agriculture!\n"
        "Your order will be processed and delivered within 2-3 business days.",
        style="dim", justify="center"
    )
    return Panel(Group(header, Text(), details, items, totals, Text(), footer),
                 title="🧾 Receipt", border_style="green")


def save_receipt(receipt: Dict[str, Any], path: str) -> str:
    recorder = Console(record=True, width=80, file=io.StringIO())
    recorder.print(render_receipt(receipt))
    recorder.save_text(path)
    return path


def show_orders(orders: List[Dict[str, Any]], email: str):
    if not orders:
        console.print("[italic yellow]No orders found[/italic yellow]")
        return

    table = Table(
        title=f"📋 Orders for {email}",
        box=box.ROUNDED,
        header_style="bold yellow",
        title_style="bold yellow",
        show_lines=True
    )
    table.add_column("Order ID", style="dim", width=34)
    table.add_column("Date", width=18)
    table.add_column("Status", width=10)
    table.add_column("Total", justify="right", width=10)

    for order in orders:
        table.add_row(
            order.get("id", "N/A"),
            order.get("created_at", "")[:16].replace("T", " "),
            order.get("status", "N/A"),
            money(order.get("total_cents", 0))
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    On failure the error is logged and shown as a status panel and None is
    returned, so callers leave their local state untouched.
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

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        logger.error("%s failed: %s", getattr(fn, "__name__", "call"), e)
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def get_product_completer():
    global product_cache
    if not product_cache:
        product_cache = try_api(c.list_products) or []
    return WordCompleter([p.get("name", "") for p in product_cache if p.get("name")], ignore_case=True)


def pick_product(listing: Optional[List[Dict[str, Any]]] = None) -> Optional[Dict[str, Any]]:
    """Resolve a product from a list number or a (partial) name."""
    listing = listing or product_cache
    raw = prompt_with_autocomplete("Product # or name", completer=get_product_completer()).strip()
    if not raw:
        return None
    if raw.isdigit() and 1 <= int(raw) <= len(listing):
        return listing[int(raw) - 1]
    term = raw.lower()
    matches = [p for p in (listing or product_cache) if term in p.get("name", "").lower()]
    if not matches:
        console.print(f"[red]No product matches '{raw}'[/red]")
        return None
    return matches[0]


def pick_cart_line(cart: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    items = cart.get("items", [])
    if not items:
        return None
    idx = IntPrompt.ask("Cart line #", default=1)
    if not 1 <= idx <= len(items):
        console.print("[red]No such cart line[/red]")
        return None
    return items[idx - 1]


def clamp_quantity(requested: int, stock: int) -> int:
    return max(1, min(requested, stock))


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    cart = try_api(c.view_cart) or {}
    header.add_row(
        "🌿 AI Alliance Agriculture",
        "[bold green]Fresh African Agriculture[/bold green]",
        f"🛒 Cart ({cart.get('total_items', 0)})"
    )
    return Panel(header, style="bold green")


# ---------------------------
# Pages
# ---------------------------
def browse_products():
    global product_cache, category_cache
    category_cache = try_api(c.list_categories) or []
    show_categories(category_cache)
    idx = IntPrompt.ask("Category #", default=0)
    category_id = category_cache[idx - 1]["id"] if 1 <= idx <= len(category_cache) else None
    term = Prompt.ask("Search products", default="").strip()
    products = try_api(c.list_products, category_id=category_id, q=term or None,
                       success_msg="Products loaded")
    if products is not None:
        product_cache = products
        show_products(products)


def product_detail_page():
    product = pick_product()
    if not product:
        return
    detail = try_api(c.get_product, product["id"])
    if not detail:
        return
    show_product_detail(detail)
    stock = detail.get("stock_quantity", 0)
    if stock <= 0:
        return
    if Confirm.ask("Add to cart?", default=True):
        qty = clamp_quantity(IntPrompt.ask("Quantity", default=1), stock)
        try_api(c.add_to_cart, detail["id"], qty,
                success_msg=f"Added to cart: {detail['name']} x{qty} ({money(detail['price_cents'] * qty)})")


def quick_add():
    product = pick_product()
    if not product:
        return
    if product.get("stock_quantity", 0) <= 0:
        console.print(show_status("Out of Stock", False))
        return
    try_api(c.add_to_cart, product["id"], success_msg="Item successfully added to your cart")


def cart_drawer():
    while True:
        cart = try_api(c.view_cart)
        if cart is None:
            return
        show_cart(cart)
        if not cart.get("items"):
            return
        action = Prompt.ask("[+] more  [-] less  [x] remove  [c] checkout  [b] back",
                            choices=["+", "-", "x", "c", "b"], default="b")
        if action == "b":
            return
        if action == "c":
            checkout_page()
            return
        line = pick_cart_line(cart)
        if not line:
            continue
        if action == "+":
            try_api(c.update_quantity, line["id"], line["quantity"] + 1)
        elif action == "-":
            # dropping to zero removes the line
            try_api(c.update_quantity, line["id"], line["quantity"] - 1)
        elif action == "x":
            try_api(c.remove_from_cart, line["id"], success_msg="Item removed from your cart")


def checkout_page():
    global last_order_id
    cart = try_api(c.view_cart)
    if cart is None:
        return
    if not cart.get("items"):
        console.print(Panel("Add some products to your cart before checkout", title="Your cart is empty"))
        return
    show_cart(cart)

    console.print("[bold]Customer Information[/bold]")
    name = Prompt.ask("Full Name *")
    email = Prompt.ask("Email Address *")
    phone = Prompt.ask("Phone Number *")
    address = Prompt.ask("Delivery Address *")

    if not Confirm.ask(f"Place Order - {money(cart.get('total_cents', 0))}?", default=True):
        return
    order = try_api(c.checkout, name, email, phone, address,
                    success_msg="Order placed successfully! You will receive a confirmation shortly")
    if order:
        last_order_id = order["id"]
        receipt_page(order["id"])


def receipt_page(order_id: Optional[str] = None):
    order_id = order_id or prompt_with_autocomplete("Order ID", default=last_order_id or "").strip()
    if not order_id:
        return
    receipt = try_api(c.get_receipt, order_id)
    if not receipt:
        console.print(Panel("Order Not Found", style="red"))
        return
    console.print(render_receipt(receipt))
    if Confirm.ask("Print receipt to file?", default=False):
        path = Prompt.ask("File", default=f"receipt-{order_id[:8]}.txt")
        save_receipt(receipt, path)
        console.print(show_status(f"Receipt saved to {path}"))


def orders_page():
    email = Prompt.ask("Email address")
    orders = try_api(c.list_orders, email, success_msg=f"Orders loaded for {email}")
    if orders is not None:
        show_orders(orders, email)


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, product_cache

    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    product_cache = try_api(c.list_products) or []

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 Browse products", "6", "🧾 View receipt"),
            ("2", "ℹ️ Product details", "7", "📋 My orders"),
            ("3", "➕ Quick add to cart", "8", "🌱 Seed demo catalog"),
            ("4", "🛒 Cart", "9", "🔄 Reset store"),
            ("5", "✅ Checkout", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 10)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            browse_products()
        elif choice == "2":
            product_detail_page()
        elif choice == "3":
            quick_add()
        elif choice == "4":
            cart_drawer()
        elif choice == "5":
            checkout_page()
        elif choice == "6":
            receipt_page()
        elif choice == "7":
            orders_page()
        elif choice == "8":
            resp = try_api(c.seed)
            if resp is not None:
                console.print(show_status("Demo catalog loaded" if resp.get("seeded") else resp.get("message", "")))
                product_cache = try_api(c.list_products) or []
        elif choice == "9":
            if Confirm.ask("[red]This will clear all data. Continue?[/red]"):
                try_api(c.reset, success_msg="Store reset successfully")
                product_cache = []
        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thank you for supporting local agriculture! 👋[/bold green]",
                                        title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def main(base_url: str = DEFAULT_BASE_URL):
    global c
    setup_logger()
    c = StoreClient(base_url=base_url)
    menu()


if __name__ == "__main__":
    try:
        main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_BASE_URL)
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
