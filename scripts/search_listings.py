"""Run a listing search against the configured backend and print the results."""

import argparse
import asyncio

from listings.core.config import settings
from listings.core.http import get_client
from listings.core.logging import setup_logging
from listings.schemas.search import SearchFilters
from listings.services.display import category_label, format_price, public_location
from listings.services.featured import fetch_featured_properties
from listings.services.listing_controller import ListingController


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search property listings")
    parser.add_argument("--location", help="City or neighborhood")
    parser.add_argument("--min-price", type=float)
    parser.add_argument("--max-price", type=float)
    parser.add_argument("--bedrooms", type=int, help="Minimum bedrooms")
    parser.add_argument("--availability", choices=["sale", "rent", "temporada", "both"])
    parser.add_argument("--category")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=settings.PAGE_SIZE)
    parser.add_argument("--featured", action="store_true", help="Also fetch featured listings")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    filters = SearchFilters(
        location=args.location,
        min_price=args.min_price,
        max_price=args.max_price,
        bedrooms=args.bedrooms,
        availability=args.availability,
        category=args.category,
    )

    async with get_client() as client:
        controller = ListingController(client, page_size=args.page_size, auto_load=False)
        await controller.search(filters, page=args.page)

        if controller.error:
            print(f"Error: {controller.error}")
            return 1

        pagination = controller.pagination
        if pagination is not None:
            print(
                f"Page {pagination.current_page}/{pagination.total_pages} "
                f"({pagination.total_items} listings)"
            )
        for prop in controller.properties:
            print(
                f"{prop.route_key or '-':<14} {category_label(prop.category):<12} "
                f"{format_price(prop.price, prop.availability):>16}  {public_location(prop)}"
            )

        if args.featured:
            featured = await fetch_featured_properties(client)
            print(f"\nFeatured: {len(featured)}")
            for prop in featured:
                print(f"  {prop.route_key}  {prop.title}")

    return 0


if __name__ == "__main__":
    arguments = parse_args()
    setup_logging(arguments.log_level)
    raise SystemExit(asyncio.run(run(arguments)))
