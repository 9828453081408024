# src/listings/cli.py
"""
Command-line interface for listings search.

This module provides CLI commands to:
- Search listings (live marketplace, falling back to sample data)
- Show one listing by id
- Report whether the marketplace API is configured / reachable
- Serve the HTTP API
"""

from dotenv import load_dotenv
load_dotenv(override=True)  # automatically looks for a .env file in the project root

import asyncio
import json
import logging
import os
from typing import Optional

import typer

from listings.config import ApiConfig
from listings.models import SearchParams
from listings.service import (
    PropertyNotFoundError,
    check_api_status,
    get_property_details,
    is_api_configured,
    is_guest_mode,
    search_properties,
)

# Typer app instance for CLI commands
app = typer.Typer(help="Property listings search")


@app.callback()
def main(
    log_level: str = typer.Option(
        os.getenv("LOG_LEVEL", "INFO"), "--log-level", help="DEBUG, INFO, WARNING, ..."
    ),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _format_row(p: dict) -> str:
    beds = f"{p['bedrooms']}br"
    return f"[{p['id']}] {p['title']} | {p['city']} | {p['property_type']} | {beds} | {p['price']:,} ({p['purpose']})"


@app.command()
def search(
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Free text matched against title, description, city"),
    city: Optional[str] = typer.Option(None, "--city"),
    property_type: Optional[str] = typer.Option(None, "--type", help="e.g. شقة, فيلا"),
    purpose: Optional[str] = typer.Option(None, "--purpose", help="sale or rent"),
    bedrooms: Optional[str] = typer.Option(None, "--bedrooms", help='Exact count, or "5+"'),
    min_price: Optional[str] = typer.Option(None, "--min-price"),
    max_price: Optional[str] = typer.Option(None, "--max-price"),
    as_json: bool = typer.Option(False, "--json", help="Print the records as JSON"),
):
    """
    Search listings with the given filters.
    """
    params: SearchParams = {}
    for key, value in (
        ("query", query),
        ("city", city),
        ("property_type", property_type),
        ("purpose", purpose),
        ("bedrooms", bedrooms),
        ("min_price", min_price),
        ("max_price", max_price),
    ):
        if value:
            params[key] = value

    config = ApiConfig.from_env()
    results = asyncio.run(search_properties(config, params))

    if as_json:
        typer.echo(json.dumps(results, ensure_ascii=False, indent=2))
        return

    typer.echo(f"{len(results)} listings")
    for p in results:
        typer.echo(_format_row(p))


@app.command()
def show(property_id: str):
    """
    Print one listing as JSON.
    """
    config = ApiConfig.from_env()
    try:
        prop = asyncio.run(get_property_details(config, property_id))
    except PropertyNotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(prop, ensure_ascii=False, indent=2))


@app.command()
def status():
    """
    Is the marketplace API configured, are we in guest mode, and is it reachable?
    """
    config = ApiConfig.from_env()
    report = asyncio.run(check_api_status(config))
    typer.echo(json.dumps({
        "configured": is_api_configured(config),
        "guest_mode": is_guest_mode(config),
        "base_url": config.base_url,
        **report,
    }, ensure_ascii=False, indent=2))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn
    from listings.api.app import create_app

    uvicorn.run(create_app(ApiConfig.from_env()), host=host, port=port)


if __name__ == "__main__":
    app()
