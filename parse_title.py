#!/usr/bin/env python3
"""
Command line wrapper for the release title parser.

Parses a single title and prints the result as pretty-printed JSON, or parses
a file of titles (one per line) printing one JSON object per line and
optionally writing an Excel report.

Usage:
    parse_title.py "The.Movie.2023.1080p.BluRay.x264-GROUP"
    parse_title.py --fields resolution,year "Movie.2019.720p"
    parse_title.py --input titles.txt --output-excel results.xlsx --workers 4
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from rtparse import BatchProcessor, RtParseError, version, write_results_workbook
from title_parser import TitleParser


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Extract metadata from release titles')
    parser.add_argument('title', nargs='?', help='Release title to parse')
    parser.add_argument('-i', '--input', help='File containing titles (one per line)')
    parser.add_argument('-o', '--output-excel', help='Write batch results to this Excel file')
    parser.add_argument('-w', '--workers', type=int, default=1,
                        help='Parse batches on this many threads (batch mode only)')
    parser.add_argument('-f', '--fields', help='Comma separated fields to resolve (partial parser)')
    parser.add_argument('-r', '--rules', help='Rule table to use instead of the bundled one')
    parser.add_argument('--raw', action='store_true', help='Skip value normalization')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {version()}')
    return parser


def read_titles(path: str) -> List[str]:
    """Read non-empty lines from a text file."""
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return [line.strip() for line in f if line.strip()]


def make_parser(args) -> TitleParser:
    title_parser = TitleParser(rules_path=args.rules, normalize=not args.raw)
    if args.fields:
        fields = [name.strip() for name in args.fields.split(',') if name.strip()]
        title_parser = title_parser.partial(fields)
    return title_parser


def run_single(title_parser: TitleParser, title: str) -> int:
    result = title_parser.parse(title)
    if result.error is not None:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    print(result.to_json(indent=2))
    return 0


def run_batch(title_parser: TitleParser, args) -> int:
    titles = read_titles(args.input)
    processor = BatchProcessor(title_parser, max_workers=max(args.workers, 1))

    if args.workers > 1:
        batch = processor.parse_many_parallel(titles)
    else:
        batch = processor.parse_many(titles)

    for result in batch.results:
        print(json.dumps(result.to_dict(), ensure_ascii=False))

    if args.output_excel:
        output = write_results_workbook(args.output_excel, titles, batch.results)
        print(f"Results written to {output}", file=sys.stderr)

    print(
        f"Parsed {batch.total_titles} titles ({batch.failed_titles} failed) "
        f"in {batch.processing_time:.2f}s",
        file=sys.stderr,
    )
    return 1 if batch.failed_titles else 0


def main(argv: Optional[List[str]] = None) -> int:
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if not args.title and not args.input:
        arg_parser.error('either a title or --input is required')

    try:
        title_parser = make_parser(args)
    except RtParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.input:
        return run_batch(title_parser, args)
    return run_single(title_parser, args.title)


if __name__ == '__main__':
    sys.exit(main())
