"""

Command line utility to generate TypeScript declarations for the Torn API V1 and V2 schemas.

"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

from torntypes import _version
from torntypes.common import write_text_atomic
from torntypes.constants import (DEFAULT_OPENAPI_FILENAME, DEFAULT_OUTPUT_PATH, MAX_WORKERS, REQUEST_TIMEOUT,
                                 V1_BASE_URL, V2_OPENAPI_URL)
from torntypes.openapitots import convert_openapi_to_typescript
from torntypes.tornapi import TornApiClient, TornTypesError, fetch_v1_inputs
from torntypes.tornv1tots import convert_torn_v1_schema_to_typescript

logger = logging.getLogger(__name__)


def generate_v1_types(client: TornApiClient, max_workers: int = MAX_WORKERS) -> str:
    """Fetch the V1 schema and convert it to TypeScript declarations."""
    inputs = fetch_v1_inputs(client, max_workers)
    return convert_torn_v1_schema_to_typescript(inputs.sections, inputs.section_schemas, inputs.errors,
                                                source_url=client.v1_base_url)


def generate_v2_types(client: TornApiClient) -> Tuple[str, Dict[str, Any]]:
    """Fetch the V2 OpenAPI document and convert it, returning the text and the document."""
    openapi_doc = client.get_openapi_document()
    return convert_openapi_to_typescript(openapi_doc, source_url=client.v2_url), openapi_doc


def generate_types(client: TornApiClient, include_v2: bool = True,
                   max_workers: int = MAX_WORKERS) -> Tuple[str, Optional[Dict[str, Any]]]:
    """
    Generate the combined V1 and V2 declarations.

    Returns:
        The declaration text and the fetched OpenAPI document (None without V2).
    """
    parts = [generate_v1_types(client, max_workers)]
    openapi_doc = None
    if include_v2:
        v2_types, openapi_doc = generate_v2_types(client)
        parts.append(v2_types)
    return '\n'.join(parts), openapi_doc


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description='Generate TypeScript declarations for the Torn API V1 and V2 schemas.')
    parser.add_argument('--version', action='store_true', help='Print the version of torntypes.')
    parser.add_argument('--out', type=str, default=DEFAULT_OUTPUT_PATH, help='Path of the generated TypeScript file.')
    parser.add_argument('--v1-url', type=str, default=V1_BASE_URL, help='Base URL of the V1 schema endpoints.')
    parser.add_argument('--v2-url', type=str, default=V2_OPENAPI_URL, help='URL of the V2 OpenAPI document.')
    parser.add_argument('--no-v2', action='store_true', help='Only generate the V1 declarations.')
    parser.add_argument('--openapi-out', type=str, default=None,
                        help='Path to store the fetched OpenAPI document (default: next to the output).')
    parser.add_argument('--max-workers', type=int, default=MAX_WORKERS, help='Number of concurrent schema fetches.')
    parser.add_argument('--timeout', type=float, default=REQUEST_TIMEOUT, help='Request timeout in seconds.')
    parser.add_argument('--verbose', action='store_true', help='Log progress information.')
    return parser


def main(argv=None):
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f'torntypes {_version.version}')
        return

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    client = TornApiClient(args.v1_url, args.v2_url, args.timeout)
    try:
        types, openapi_doc = generate_types(client, include_v2=not args.no_v2, max_workers=args.max_workers)
        if openapi_doc is not None:
            openapi_out = args.openapi_out or os.path.join(os.path.dirname(args.out), DEFAULT_OPENAPI_FILENAME)
            write_text_atomic(openapi_out, json.dumps(openapi_doc, indent=2))
        write_text_atomic(args.out, types)
        logger.info('Wrote %s', args.out)
    except (TornTypesError, OSError) as e:
        print("Error: ", str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
