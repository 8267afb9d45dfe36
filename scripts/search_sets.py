#!/usr/bin/env python3
"""
scripts/search_sets.py — find chord sets whose head chord can be transposed
to a target chord.

Usage (from project root):
    python scripts/search_sets.py                          # browse all sets
    python scripts/search_sets.py --root G --quality major
    python scripts/search_sets.py --root Bb --quality minor --tension 7
    python scripts/search_sets.py --root D --quality minor --genre Jazz --tones
"""
import argparse
import os
import sys

# Ensure chordfinder is importable
_HERE = os.path.dirname(os.path.abspath(__file__))
_ROOT = os.path.dirname(_HERE)
sys.path.insert(0, _ROOT)

from chordfinder.catalog import (
    CatalogError,
    DEFAULT_CATALOG_PATH,
    audit_coverage,
    available_tensions,
    build_index,
    genre_list,
    load_catalog,
    print_coverage_report,
)
from chordfinder.constants import ALL_GENRES
from chordfinder.session import (
    initial_state,
    result_card,
    search,
    select_genre,
    summary,
    visible_results,
)


def _print_card(card, show_tones=False):
    print(f"\n── Set {card.number}  [{card.genre}] " + "─" * 40)
    for line in card.lines:
        print(f"  {line}")
    keys = [k for k in card.keyboard.white_keys + card.keyboard.black_keys if not k.is_empty]
    print("  Keys: " + "  ".join(f"{k.note}={k.chord}" for k in keys))
    if show_tones:
        for k in keys:
            print(f"    {k.note:<3} {k.chord:<10} {k.popup}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Search the chord-set catalog by transposable head chord.")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG_PATH,
                        help="Catalog JSON file (default: data/sample_catalog.json).")
    parser.add_argument("--root", default=None, help="Target root note, e.g. G, F#, Bb.")
    parser.add_argument("--quality", default="major", help="'major' or 'minor'.")
    parser.add_argument("--tension", default="", help="Optional tension token, e.g. 7, M7, sus4.")
    parser.add_argument("--genre", default=ALL_GENRES, help="Only show this genre (default: ALL).")
    parser.add_argument("--tones", action="store_true", help="Print chord tones for every key.")
    args = parser.parse_args()

    try:
        catalog = load_catalog(args.catalog)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    indexed = build_index(catalog)
    print_coverage_report(audit_coverage(indexed))
    print("Genres   : " + ", ".join(genre_list(indexed)))
    print("Tensions : " + ", ".join(t.value for t in available_tensions(indexed)))

    state = initial_state(indexed)
    if args.root is not None:
        state = search(state, indexed, args.root, args.quality, args.tension)
        if state.status:
            print(f"Error: {state.status}", file=sys.stderr)
            return 1
    state = select_genre(state, args.genre)

    print(f"\n{summary(state)}")
    results = visible_results(state)
    if not results:
        print("No sets to show.")
    for result in results:
        _print_card(result_card(result, state.mode), show_tones=args.tones)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
