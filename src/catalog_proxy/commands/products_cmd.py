"""CLI commands for product management through the proxy pipeline."""

from __future__ import annotations

from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console

from catalog_proxy.client import UpstreamClient
from catalog_proxy.config import get_config
from catalog_proxy.models.products import ProductFilters
from catalog_proxy.services.products import ProductService, build_service
from catalog_proxy.transform import ProductTransformer
from catalog_proxy.utils.errors import ProxyError, handle_error
from catalog_proxy.utils.output import PRODUCT_COLUMNS, OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="products", help="List, create, update and delete catalog products.")


def _build_client(verbose: bool = False) -> tuple[UpstreamClient, ProductService]:
    return build_service(get_config(), verbose=verbose)


def _product_body(
    name: str | None,
    description: str | None,
    price: float | None,
    stock: int | None,
    promotional_price: float | None,
    promotion_active: bool | None,
    images: list[str] | None,
    active: bool | None,
) -> dict[str, Any]:
    """Collect the options the user actually passed, under canonical keys."""
    fields = {
        "name": name,
        "description": description,
        "price": price,
        "stockQuantity": stock,
        "promotionalPrice": promotional_price,
        "isPromotionActive": promotion_active,
        "images": images,
        "isActive": active,
    }
    return {k: v for k, v in fields.items() if v is not None}


@app.command("list")
def list_products(
    page: Annotated[int | None, typer.Option("--page", "-p")] = None,
    limit: Annotated[int | None, typer.Option("--limit", "-l")] = None,
    search: Annotated[str | None, typer.Option("--search", "-s")] = None,
    sort_by: Annotated[str | None, typer.Option("--sort-by", help="name, price or stockQuantity")] = None,
    order: Annotated[str | None, typer.Option("--order", help="asc or desc")] = None,
    active: Annotated[bool | None, typer.Option("--active/--inactive", help="Filter by active flag")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """List products, one page at a time."""
    client, service = _build_client(verbose)
    try:
        filters = ProductFilters(
            page=page, limit=limit, search=search, sortBy=sort_by, order=order, isActive=active,
        )
        result = service.list(filters.to_params())
        if output == OutputFormat.JSON:
            print_output(result.body, output)
            return
        pagination = result.body["pagination"]
        title = f"Products (page {pagination['page']}/{pagination['totalPages']}, {pagination['total']} total)"
        print_output(result.body["data"], output, columns=PRODUCT_COLUMNS, title=title)
    except (ProxyError, ValidationError) as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("get")
def get_product(
    product_id: Annotated[str, typer.Argument(help="Product ID")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Show a single product."""
    client, service = _build_client(verbose)
    try:
        result = service.get(product_id)
        print_output(result.body, output, title=f"Product {product_id}")
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("create")
def create_product(
    name: Annotated[str, typer.Option("--name", help="Product name")] = ...,
    description: Annotated[str, typer.Option("--description", "-d")] = ...,
    price: Annotated[float, typer.Option("--price")] = ...,
    stock: Annotated[int, typer.Option("--stock", help="Stock quantity")] = ...,
    promotional_price: Annotated[float | None, typer.Option("--promo-price")] = None,
    promotion_active: Annotated[bool | None, typer.Option("--promotion/--no-promotion")] = None,
    images: Annotated[list[str] | None, typer.Option("--image", help="Image URL (repeatable)")] = None,
    inactive: Annotated[bool, typer.Option("--inactive", help="Create the product disabled")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be sent without executing")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Create a new product."""
    body = _product_body(
        name, description, price, stock, promotional_price, promotion_active,
        images or None, False if inactive else None,
    )
    if dry_run:
        try:
            payload = ProductTransformer().create_payload(body)
        except ProxyError as e:
            handle_error(e)
            raise typer.Exit(1)
        console.print("[yellow]DRY RUN:[/yellow] Would create product:")
        print_output(payload, output, title="Product [DRY RUN]")
        return

    client, service = _build_client(verbose)
    try:
        result = service.create(body)
        print_output(result.body, output, title="Product Created")
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("update")
def update_product(
    product_id: Annotated[str, typer.Argument(help="Product ID")],
    name: Annotated[str | None, typer.Option("--name")] = None,
    description: Annotated[str | None, typer.Option("--description", "-d")] = None,
    price: Annotated[float | None, typer.Option("--price")] = None,
    stock: Annotated[int | None, typer.Option("--stock")] = None,
    promotional_price: Annotated[float | None, typer.Option("--promo-price")] = None,
    promotion_active: Annotated[bool | None, typer.Option("--promotion/--no-promotion")] = None,
    images: Annotated[list[str] | None, typer.Option("--image", help="Replace images (repeatable)")] = None,
    active: Annotated[bool | None, typer.Option("--active/--inactive")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be sent without executing")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Update only the given fields of a product."""
    body = _product_body(
        name, description, price, stock, promotional_price, promotion_active, images or None, active,
    )
    if not body:
        console.print("[red]Nothing to update.[/red] Pass at least one field option.")
        raise typer.Exit(1)

    if dry_run:
        try:
            payload = ProductTransformer().update_payload(body)
        except ProxyError as e:
            handle_error(e)
            raise typer.Exit(1)
        console.print(f"[yellow]DRY RUN:[/yellow] Would update product {product_id}:")
        print_output(payload, output, title="Product Update [DRY RUN]")
        return

    client, service = _build_client(verbose)
    try:
        result = service.update(product_id, body)
        print_output(result.body, output, title="Product Updated")
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("delete")
def delete_product(
    product_id: Annotated[str, typer.Argument(help="Product ID")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Delete a product."""
    client, service = _build_client(verbose)
    try:
        result = service.delete(product_id)
        print_output(
            {"id": product_id, "status": result.status_code, "deleted": True},
            output,
            title="Product Deleted",
        )
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
