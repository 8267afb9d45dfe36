"""
Load the chord-set catalog and build the query-ready index.

Catalog JSON (produced upstream by the sync script):

    {
      "keys": ["C", "C#", "D", ...],          # shared key labels (optional)
      "sets": [
        {"number": 1, "genre": "Pop",
         "chords": ["Cmaj7", "Dm7", ...],
         "keys": [...],                        # overrides the shared list
         "voicings": [["C4", "E4", ...], ...],
         "analysis": {"bestKey": "C major", "diatonicToneRatio": 0.92, ...}},
        ...
      ]
    }

A bare list of sets is accepted as well. Voicings and analysis are passed
through untouched; nothing here computes them.
"""
import json
import os
from dataclasses import dataclass, field

from .parser import (
    Tension,
    TonalQuality,
    classify_quality,
    extract_tensions,
    parse_chord_symbol,
    sort_tensions,
)

# Project root (parent of chordfinder/)
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CATALOG_PATH = os.path.join(_ROOT, "data", "sample_catalog.json")


class CatalogError(ValueError):
    """The catalog file is missing or does not have the expected shape."""


@dataclass(frozen=True)
class KeyAnalysis:
    best_key: str | None = None
    white_inferred_key: str | None = None
    white_inferred_key_score: float | None = None
    diatonic_tone_ratio: float | None = None
    tags: tuple[str, ...] = ()
    top_keys: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d):
        return cls(
            best_key=d.get("bestKey"),
            white_inferred_key=d.get("whiteInferredKey"),
            white_inferred_key_score=d.get("whiteInferredKeyScore"),
            diatonic_tone_ratio=d.get("diatonicToneRatio"),
            tags=tuple(d.get("tags") or ()),
            top_keys=tuple(k["key"] for k in d.get("topKeys") or () if k.get("key")),
        )


@dataclass(frozen=True)
class ChordSet:
    number: int
    genre: str
    chords: tuple[str, ...]
    keys: tuple[str, ...] = ()
    voicings: tuple[tuple[str, ...], ...] | None = None
    analysis: KeyAnalysis | None = None


@dataclass(frozen=True)
class IndexedChordSet:
    """A ChordSet plus the head-chord analysis used for matching."""

    chord_set: ChordSet
    head_chord: str
    head_root: str | None
    head_suffix: str
    base_type: TonalQuality
    tensions: tuple[Tension, ...] = field(default_factory=tuple)

    @property
    def number(self):
        return self.chord_set.number

    @property
    def genre(self):
        return self.chord_set.genre

    @property
    def chords(self):
        return self.chord_set.chords


@dataclass(frozen=True)
class CoverageReport:
    total: int
    covered: int
    uncovered_ids: tuple[int, ...]


# ── Loading ───────────────────────────────────────────────────────────────────

def chord_set_from_dict(row, default_keys=None) -> ChordSet:
    """Build a ChordSet from one catalog row; set-level keys win over default_keys."""
    if not isinstance(row, dict):
        raise CatalogError(f"chord set must be an object, got {type(row).__name__}")
    if "number" not in row:
        raise CatalogError("chord set is missing 'number'")
    voicings = row.get("voicings")
    analysis = row.get("analysis")
    return ChordSet(
        number=row["number"],
        genre=row.get("genre") or "",
        chords=tuple(row.get("chords") or ()),
        keys=tuple(row.get("keys") or default_keys or ()),
        voicings=tuple(tuple(v) for v in voicings) if voicings is not None else None,
        analysis=KeyAnalysis.from_dict(analysis) if analysis else None,
    )


def load_catalog(path=None) -> list[ChordSet]:
    """
    Read a catalog JSON file (DEFAULT_CATALOG_PATH when path is None).

    Raises CatalogError if the file is missing, is not valid JSON, or does
    not contain a list of chord sets.
    """
    path = path or DEFAULT_CATALOG_PATH
    if not os.path.isfile(path):
        raise CatalogError(f"catalog not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise CatalogError(f"cannot read catalog {path}: {e}") from e

    if isinstance(data, list):
        rows, default_keys = data, None
    elif isinstance(data, dict) and isinstance(data.get("sets"), list):
        rows, default_keys = data["sets"], data.get("keys")
    else:
        raise CatalogError(f"{path}: expected a list of sets or an object with 'sets'")
    return [chord_set_from_dict(row, default_keys) for row in rows]


# ── Indexing ──────────────────────────────────────────────────────────────────

def index_chord_set(chord_set: ChordSet) -> IndexedChordSet:
    head_chord = chord_set.chords[0] if chord_set.chords else ""
    parsed = parse_chord_symbol(head_chord)
    return IndexedChordSet(
        chord_set=chord_set,
        head_chord=head_chord,
        head_root=parsed.root,
        head_suffix=parsed.suffix,
        base_type=classify_quality(parsed.suffix),
        tensions=tuple(extract_tensions(parsed.suffix)),
    )


def build_index(raw_sets) -> list[IndexedChordSet]:
    """Analyse every set's head chord once. Order-preserving; never raises on bad chords."""
    return [index_chord_set(s) for s in raw_sets]


def audit_coverage(indexed_sets) -> CoverageReport:
    """Count sets whose head chord got a root and a major/minor classification."""
    uncovered = tuple(
        s.number for s in indexed_sets
        if not s.head_root or s.base_type not in (TonalQuality.MAJOR, TonalQuality.MINOR)
    )
    total = len(indexed_sets)
    return CoverageReport(total=total, covered=total - len(uncovered), uncovered_ids=uncovered)


def print_coverage_report(report: CoverageReport) -> None:
    if report.covered == report.total:
        print(f"Coverage: {report.covered}/{report.total} sets classified as major/minor.")
    else:
        ids = ", ".join(str(n) for n in report.uncovered_ids)
        print(f"Coverage: {report.covered}/{report.total} sets. Unclassified sets: {ids}")


def available_tensions(indexed_sets) -> list[Tension]:
    """Every tension present on some head chord, in priority order (the query menu)."""
    found = {t for s in indexed_sets for t in s.tensions}
    return sort_tensions(found)


def genre_list(indexed_sets) -> list[str]:
    return sorted({s.genre for s in indexed_sets if s.genre})


def chord_map(chord_set) -> dict[str, str]:
    """Key label → chord symbol, skipping positions without a key label."""
    if isinstance(chord_set, IndexedChordSet):
        chord_set = chord_set.chord_set
    return {key: chord for key, chord in zip(chord_set.keys, chord_set.chords) if key}


def voicing_map(chord_set) -> dict[str, tuple[str, ...]]:
    """Key label → precomputed voicing, for sets that ship voicings."""
    if isinstance(chord_set, IndexedChordSet):
        chord_set = chord_set.chord_set
    if chord_set.voicings is None:
        return {}
    return {key: voicing for key, voicing in zip(chord_set.keys, chord_set.voicings) if key}
