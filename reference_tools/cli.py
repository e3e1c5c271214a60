#!/usr/bin/env python3
"""
Command line interface for the reference library.

Examples:
    reference-tools extract paper.pdf
    reference-tools ingest *.pdf
    reference-tools lookup-doi 10.1038/s42256-025-01072-0
    reference-tools rank "Nature Communications"
    reference-tools export --format bibtex
    reference-tools search "graph neural networks" --year 5years --add 1 3
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .ai.summarizer import InvalidCredentialError, SummarizerError
from .config.factory import (
    build_crossref, build_library, build_openalex, build_pipeline, build_scholar_search,
    build_summarizer,
)
from .config.manager import ConfigManager
from .library.citation_formatter import export_apa, export_bibtex
from .metadata.journal_ranking import JournalRankingResolver
from .metadata.pdf_metadata import read_pdf_text


def _print_record(data: dict):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_extract(args, config: ConfigManager) -> int:
    record = build_pipeline(config).extract_pdf_metadata(Path(args.pdf))
    _print_record(record.to_dict())
    return 0


def cmd_ingest(args, config: ConfigManager) -> int:
    library = build_library(config)
    created = library.ingest_pdfs([Path(p) for p in args.pdfs])
    for ref in created:
        tags = f" [{', '.join(ref.tags)}]" if ref.tags else ''
        print(f"✅ {ref.title[:70]} ({ref.year}, {ref.source}){tags}")
    skipped = len(args.pdfs) - len(created)
    if skipped:
        print(f"⚠️  {skipped} file(s) could not be added")
    return 0 if created or not args.pdfs else 1


def cmd_lookup_doi(args, config: ConfigManager) -> int:
    record = build_crossref(config).get_metadata(args.doi)
    if record is None:
        print(f"❌ DOI not found: {args.doi}")
        return 1
    _print_record(record.to_dict())
    return 0


def cmd_rank(args, config: ConfigManager) -> int:
    resolver = JournalRankingResolver(build_openalex(config), config.get_journal_rankings_file())
    tag = resolver.get_journal_ranking_tag(args.journal)
    print(tag or "No ranking found")
    return 0 if tag else 1


def cmd_list(args, config: ConfigManager) -> int:
    library = build_library(config)
    refs = library.filter_references(query=args.query, favorites_only=args.favorites,
                                     recent_days=args.recent)
    for ref in refs:
        star = '★ ' if ref.favorite else ''
        authors = '; '.join(ref.authors[:3])
        print(f"{star}{ref.id}  {ref.year}  {ref.title[:70]}  {authors}")
    print(f"\n{len(refs)} reference(s)")
    return 0


def cmd_export(args, config: ConfigManager) -> int:
    library = build_library(config)
    refs = library.filter_references(query=args.query)
    print(export_bibtex(refs) if args.format == 'bibtex' else export_apa(refs))
    return 0


def cmd_summarize(args, config: ConfigManager) -> int:
    summarizer = build_summarizer(config, api_key=args.api_key)
    try:
        text = read_pdf_text(Path(args.pdf), max_pages=args.pages).full_text
    except Exception as e:
        print(f"❌ Could not read PDF {args.pdf}: {e}")
        return 1

    try:
        review = summarizer.summarize(text)
    except InvalidCredentialError as e:
        print(f"❌ {e}")
        return 2
    except SummarizerError as e:
        print(f"❌ {e}")
        return 1
    _print_record(review)
    return 0


def cmd_search(args, config: ConfigManager) -> int:
    search = build_scholar_search(config, api_key=args.api_key)
    page = search.search(args.query, offset=args.offset, year=args.year, enhance=args.enhance)
    if page is None:
        print("❌ Search failed")
        return 1

    if page.query != args.query:
        print(f"🔎 Searched for: {page.query}")
    for number, record in enumerate(page.records, start=page.offset + 1):
        ranking = f" [{record.journal_ranking}]" if record.journal_ranking else ''
        venue = f" {record.journal}" if record.journal else ''
        print(f"{number:>3}. {record.title[:70]} ({record.year or 'n.d.'}){venue}{ranking}")
    print(f"\n{len(page.records)} of {page.total} result(s)")
    if page.has_more:
        print(f"More results: --offset {page.next_offset}")

    if args.add:
        library = build_library(config)
        for number in args.add:
            index = number - page.offset - 1
            if not 0 <= index < len(page.records):
                print(f"❌ No result number {number} on this page")
                continue
            ref = library.add_record(page.records[index])
            print(f"✅ Added {ref.title[:70]}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='reference-tools',
                                     description="Personal research-reference manager")
    parser.add_argument("--config", help="Path to a config file (default: config.conf + config.personal.conf)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('extract', help="Extract metadata from a PDF")
    p.add_argument('pdf')
    p.set_defaults(func=cmd_extract)

    p = subparsers.add_parser('ingest', help="Add PDFs to the library")
    p.add_argument('pdfs', nargs='+')
    p.set_defaults(func=cmd_ingest)

    p = subparsers.add_parser('lookup-doi', help="Look up a DOI on CrossRef")
    p.add_argument('doi')
    p.set_defaults(func=cmd_lookup_doi)

    p = subparsers.add_parser('rank', help="Journal quartile ranking")
    p.add_argument('journal')
    p.set_defaults(func=cmd_rank)

    p = subparsers.add_parser('list', help="List library references")
    p.add_argument('--query', help="Filter by title, author, tag or abstract")
    p.add_argument('--favorites', action='store_true', help="Only favorites")
    p.add_argument('--recent', type=int, metavar='DAYS', help="Only references added in the last DAYS days")
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser('export', help="Export citations")
    p.add_argument('--format', choices=['bibtex', 'apa'], default='bibtex')
    p.add_argument('--query', help="Only references matching this query")
    p.set_defaults(func=cmd_export)

    p = subparsers.add_parser('summarize', help="AI review summary of a PDF")
    p.add_argument('pdf')
    p.add_argument('--api-key', help="Chat-completion API key (default: [AI] api_key in config)")
    p.add_argument('--pages', type=int, default=50, help="Number of pages to send")
    p.set_defaults(func=cmd_summarize)

    p = subparsers.add_parser('search', help="Search papers on Semantic Scholar")
    p.add_argument('query')
    p.add_argument('--offset', type=int, default=0, help="Index of the first result")
    p.add_argument('--year', default='all',
                   help="all, recent (last 2 years), 5years, a year or a range like 2015-2020")
    p.add_argument('--enhance', action='store_true', help="Expand the query with the AI model first")
    p.add_argument('--api-key', help="Chat-completion API key for --enhance")
    p.add_argument('--add', type=int, nargs='+', metavar='N', help="Add result number N to the library")
    p.set_defaults(func=cmd_search)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    config = ConfigManager(args.config)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
