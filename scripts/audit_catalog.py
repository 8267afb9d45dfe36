#!/usr/bin/env python3
"""
scripts/audit_catalog.py — classification and chord-tone audit for a catalog.

  1. COVERAGE   Head chords that fail to parse (null root) or fall outside
                major/minor classification are listed by set number.
  2. TONES      Each head chord's pitch classes (from build_intervals) are
                compared with music21's own ChordSymbol realisation.
                Disagreements go to reports/tone_mismatches.csv.
                --all-chords extends the comparison to every chord in each set.

Usage (from project root):
    python scripts/audit_catalog.py
    python scripts/audit_catalog.py --catalog path/to/catalog.json
    python scripts/audit_catalog.py --all-chords
"""
import argparse
import csv
import os
import sys
from collections import Counter

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

import warnings
warnings.filterwarnings("ignore")

import music21.harmony

from chordfinder.catalog import (
    CatalogError,
    DEFAULT_CATALOG_PATH,
    audit_coverage,
    build_index,
    load_catalog,
    print_coverage_report,
)
from chordfinder.chord_tones import build_intervals
from chordfinder.notes import format_pitch_class
from chordfinder.parser import parse_chord_symbol

REPORTS_DIR = os.path.join(ROOT, "reports")

_MISMATCH_FIELDS = ["set", "chord", "suffix", "ours", "music21", "missing", "extra"]


def engine_pitch_classes(symbol):
    """Pitch classes (set) our interval grammar gives a chord, bass included. None if unparseable."""
    parsed = parse_chord_symbol(symbol)
    root_pc = parsed.root_pc
    if root_pc is None:
        return None
    pcs = {(root_pc + i) % 12 for i in build_intervals(parsed.suffix)}
    if parsed.bass_pc is not None:
        pcs.add(parsed.bass_pc)
    return pcs


def music21_pitch_classes(symbol):
    """Pitch classes music21 assigns to a chord symbol; None if it cannot read it."""
    try:
        cs = music21.harmony.ChordSymbol(symbol)
    except Exception:
        return None
    pcs = {p.pitchClass for p in cs.pitches}
    return pcs or None


def _spell(pcs) -> str:
    return " ".join(format_pitch_class(pc) for pc in sorted(pcs))


def compare_chord(set_number, symbol):
    """Return a mismatch row dict, or None when both agree (or either cannot read it)."""
    ours = engine_pitch_classes(symbol)
    theirs = music21_pitch_classes(symbol)
    if ours is None or theirs is None or ours == theirs:
        return None
    return {
        "set":     set_number,
        "chord":   symbol,
        "suffix":  parse_chord_symbol(symbol).suffix,
        "ours":    _spell(ours),
        "music21": _spell(theirs),
        "missing": _spell(theirs - ours),
        "extra":   _spell(ours - theirs),
    }


def chords_to_check(indexed_set, all_chords=False):
    """The head chord alone, or every chord in the set."""
    return indexed_set.chords if all_chords else indexed_set.chords[:1]


def main() -> int:
    parser = argparse.ArgumentParser(description="Audit chord classification and tone construction.")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG_PATH,
                        help="Catalog JSON file (default: data/sample_catalog.json).")
    parser.add_argument("--all-chords", action="store_true",
                        help="Compare every chord, not just each set's head chord.")
    args = parser.parse_args()

    try:
        catalog = load_catalog(args.catalog)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    indexed = build_index(catalog)
    print(f"{'─'*60}")
    report = audit_coverage(indexed)
    print_coverage_report(report)

    rows: list[dict] = []
    checked = 0
    suffix_counter: Counter = Counter()
    for s in indexed:
        for symbol in chords_to_check(s, args.all_chords):
            checked += 1
            row = compare_chord(s.number, symbol)
            if row:
                rows.append(row)
                suffix_counter[row["suffix"]] += 1

    os.makedirs(REPORTS_DIR, exist_ok=True)
    out_path = os.path.join(REPORTS_DIR, "tone_mismatches.csv")
    with open(out_path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=_MISMATCH_FIELDS)
        w.writeheader()
        w.writerows(rows)

    print(f"\n{'═'*60}")
    print("AUDIT SUMMARY")
    print(f"{'═'*60}")
    print(f"  Sets               : {report.total}")
    print(f"  Unclassified sets  : {len(report.uncovered_ids)}")
    print(f"  Chords compared    : {checked}")
    print(f"  Tone mismatches    : {len(rows)}  ({len(rows)/max(checked, 1):.1%})")
    if suffix_counter:
        print("  Top mismatching suffixes:")
        for suffix, n in suffix_counter.most_common(10):
            print(f"    {suffix or '(major)':<16} {n:>5}x")
    print(f"\n  Report written to:\n    {out_path}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
