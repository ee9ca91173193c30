#!/usr/bin/env python3
"""
Catalog Extraction

Extracts a store's full product catalog and exports it to an Excel
workbook (generic + business sheets) and/or a CSV file.

Secrets are read from the environment (or a .env file) unless passed
as flags.

Usage:
    python3 extract_catalog.py --platform shopify --store-url https://shop.example.com
    python3 extract_catalog.py --platform shopify-admin --store-name my-store
    python3 extract_catalog.py --platform prestashop --store-url https://shop.example.com --format csv
    python3 extract_catalog.py --platform vtex --account-name mystore --relay-url https://relay.example.com/api/proxy
"""

import argparse
import os
import sys

from dotenv import load_dotenv

from catalog_extractor.common import CatalogError, load_settings, setup_logging
from catalog_extractor.export import CatalogExporter, build_export_filename
from catalog_extractor.extraction import CatalogExtraction
from catalog_extractor.fetching import build_fetcher
from catalog_extractor.platforms import PLATFORM_ADAPTERS, StoreCredentials

# Credential field -> environment variable
CREDENTIAL_ENV_VARS = {
    'api_key': 'PRESTASHOP_API_KEY',
    'app_key': 'VTEX_APP_KEY',
    'app_token': 'VTEX_APP_TOKEN',
    'consumer_key': 'WOOCOMMERCE_CONSUMER_KEY',
    'consumer_secret': 'WOOCOMMERCE_CONSUMER_SECRET',
}

ACCESS_TOKEN_ENV_VARS = {
    'shopify-admin': 'SHOPIFY_ACCESS_TOKEN',
    'tiendanube': 'TIENDANUBE_TOKEN',
}


def build_credentials(args) -> StoreCredentials:
    """Combine flags with environment secrets."""
    def secret(field: str) -> str:
        value = getattr(args, field)
        if value:
            return value
        env_var = CREDENTIAL_ENV_VARS.get(field)
        if field == 'access_token':
            env_var = ACCESS_TOKEN_ENV_VARS.get(args.platform)
        return os.environ.get(env_var, '') if env_var else ''

    return StoreCredentials(
        store_url=args.store_url or '',
        store_name=args.store_name or '',
        access_token=secret('access_token'),
        api_key=secret('api_key'),
        user_id=args.user_id or '',
        account_name=args.account_name or '',
        app_key=secret('app_key'),
        app_token=secret('app_token'),
        consumer_key=secret('consumer_key'),
        consumer_secret=secret('consumer_secret'),
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Extract a store catalog and export it to XLSX/CSV"
    )
    parser.add_argument(
        "--platform",
        required=True,
        choices=sorted(PLATFORM_ADAPTERS),
        help="Store platform"
    )
    parser.add_argument("--store-url", help="Store URL (shopify, prestashop, woocommerce)")
    parser.add_argument("--store-name", help="Shopify store name (shopify-admin)")
    parser.add_argument("--user-id", help="Tiendanube store id")
    parser.add_argument("--account-name", help="VTEX account name")
    parser.add_argument("--access-token", help="Shopify Admin / Tiendanube token")
    parser.add_argument("--api-key", help="PrestaShop webservice key")
    parser.add_argument("--app-key", help="VTEX app key")
    parser.add_argument("--app-token", help="VTEX app token")
    parser.add_argument("--consumer-key", help="WooCommerce consumer key")
    parser.add_argument("--consumer-secret", help="WooCommerce consumer secret")
    parser.add_argument(
        "--relay-url",
        help="Backend relay endpoint (default: $CATALOG_RELAY_URL, else direct requests)"
    )
    parser.add_argument(
        "--format",
        choices=["xlsx", "csv", "both"],
        default="xlsx",
        help="Export format (default: xlsx)"
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Directory for exported files (default: output)"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", action="store_true", help="Warnings only")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    credentials = build_credentials(args)
    relay_url = args.relay_url or os.environ.get('CATALOG_RELAY_URL')

    with build_fetcher(settings, relay_url=relay_url) as fetcher:
        try:
            result = CatalogExtraction(args.platform, credentials, fetcher, settings).run()
        except CatalogError as e:
            print(f"\nError: {e}", file=sys.stderr)
            return 1

    exporter = CatalogExporter.from_settings(settings)
    formats = ["xlsx", "csv"] if args.format == "both" else [args.format]

    print(f"\nExtracted {len(result.products)} products ({result.variant_count} variants)")
    for extension in formats:
        filename = build_export_filename(result.platform, result.store_identifier, extension)
        output_path = os.path.join(args.output_dir, filename)
        if extension == "xlsx":
            exporter.export_workbook(result.products, output_path)
        else:
            exporter.export_csv(result.products, output_path)
        print(f"Saved: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
