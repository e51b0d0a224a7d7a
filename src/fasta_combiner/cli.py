"""Command-line interface for fasta-combiner."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from fasta_combiner.core import FastaCombiner, parse_fields
from fasta_combiner.errors import CombineError
from fasta_combiner.fasta import write_fasta
from fasta_combiner.fetcher import DEFAULT_TIMEOUT
from fasta_combiner.models import DEFAULT_FIELDS, POLICIES, POLICY_LENIENT, CombineOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fasta-combiner",
        description="Join a sequences JSON export with a metadata JSON export and write FASTA.",
    )
    parser.add_argument("sequences_url", help="URL of the sequences JSON document")
    parser.add_argument("metadata_url", help="URL of the metadata JSON document")
    parser.add_argument(
        "--fields", type=str, default=",".join(DEFAULT_FIELDS),
        help="Comma-separated metadata fields for the header (default: %(default)s)",
    )
    parser.add_argument(
        "--policy", choices=POLICIES, default=POLICY_LENIENT,
        help="Record inclusion policy (default: %(default)s)",
    )
    parser.add_argument(
        "--filter-field", type=str, default=None,
        help="Drop records whose value for this field is not a valid YYYY-MM-DD date (lenient policy)",
    )
    parser.add_argument(
        "-o", "--output", type=str, default="combined.fasta",
        help="Output file path (default: combined.fasta)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help=f"Per-request timeout in seconds (env: FASTA_COMBINER_TIMEOUT, default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    timeout = args.timeout
    if timeout is None:
        timeout = float(os.environ.get("FASTA_COMBINER_TIMEOUT", DEFAULT_TIMEOUT))

    try:
        options = CombineOptions(
            fields=parse_fields(args.fields),
            filter_field=args.filter_field,
            policy=args.policy,
        )
        result = FastaCombiner(timeout=timeout).combine(
            args.sequences_url, args.metadata_url, options
        )
    except CombineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    write_fasta(result.text, args.output)

    print(f"Done. {result.included} of {result.total} sequences written, {result.skipped} skipped.")
    print(f"Output: {args.output}")


if __name__ == "__main__":
    main()
