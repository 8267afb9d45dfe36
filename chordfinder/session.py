"""
Search session state and view-models for a rendering surface.

Every user intent is a plain function taking the current SearchState and
returning a new one; nothing is mutated in place. The renderer reads
visible_results(), summary() and result_card() and never touches the
indexing or matching code directly.
"""
import math
from dataclasses import dataclass, field, replace

from .catalog import IndexedChordSet, chord_map, voicing_map
from .chord_tones import chord_to_chroma, chord_to_tone_names
from .constants import ALL_GENRES, BLACK_KEY_LAYOUT, MODE_ALL, MODE_SEARCH, WHITE_KEY_NOTES
from .matcher import (
    NO_CATALOG_MESSAGE,
    SearchError,
    SetResult,
    TargetSpec,
    build_target,
    find_matches,
    format_signed,
)
from .parser import TonalQuality


@dataclass(frozen=True)
class SearchState:
    mode: str = MODE_ALL
    selected_genre: str = ALL_GENRES
    last_target: TargetSpec | None = None
    results: tuple[SetResult, ...] = ()
    status: str = ""


# ── Intents ───────────────────────────────────────────────────────────────────

def initial_state(indexed_sets) -> SearchState:
    """Browse-all state for a freshly indexed catalog (None = catalog missing)."""
    return show_all(SearchState(), indexed_sets)


def show_all(state: SearchState, indexed_sets) -> SearchState:
    if indexed_sets is None:
        return replace(state, status=NO_CATALOG_MESSAGE)
    return replace(
        state,
        mode=MODE_ALL,
        last_target=None,
        results=tuple(SetResult(s) for s in indexed_sets),
        status="",
    )


def search(state: SearchState, indexed_sets, root, base_type, tension=None) -> SearchState:
    """
    Run a query. On invalid input the previous results are kept and the
    error message goes to state.status instead of being raised.
    """
    try:
        if indexed_sets is None:
            raise SearchError(NO_CATALOG_MESSAGE)
        target = build_target(root, base_type, tension)
    except SearchError as e:
        return replace(state, status=str(e))
    return replace(
        state,
        mode=MODE_SEARCH,
        last_target=target,
        results=tuple(find_matches(target, indexed_sets)),
        status="",
    )


def select_genre(state: SearchState, genre) -> SearchState:
    return replace(state, selected_genre=genre or ALL_GENRES)


# ── Derived views ─────────────────────────────────────────────────────────────

def apply_genre_filter(results, genre) -> list:
    if genre == ALL_GENRES:
        return list(results)
    return [r for r in results if r.indexed_set.genre == genre]


def visible_results(state: SearchState) -> list[SetResult]:
    by_genre = apply_genre_filter(state.results, state.selected_genre)
    if state.mode == MODE_SEARCH:
        return [r for r in by_genre if r.is_match]
    return by_genre


def summary(state: SearchState) -> str:
    filtered = apply_genre_filter(state.results, state.selected_genre)
    if state.selected_genre == ALL_GENRES:
        genre_label = "All genres"
    else:
        genre_label = f"Genre: {state.selected_genre}"

    if state.mode == MODE_ALL:
        return f"{genre_label} | showing all {len(visible_results(state))} sets"

    label = state.last_target.target_chord_label if state.last_target else "(no search yet)"
    matched = sum(1 for r in filtered if r.is_match)
    return f"{genre_label} | matches for {label}: {matched} / {len(filtered)} sets"


def format_percent(value) -> str:
    """0.857 → '86%'. Halves round up; None → '-'."""
    if value is None:
        return "-"
    return f"{math.floor(value * 100 + 0.5)}%"


# ── Keyboard / result cards ───────────────────────────────────────────────────

@dataclass(frozen=True)
class KeyView:
    note: str
    chord: str | None
    tones: tuple[str, ...] = ()
    voicing: tuple[str, ...] | None = None
    left: float | None = None   # black keys only: percent offset from the left edge
    chroma: object = field(default=None, compare=False)   # 12-dim float32 pitch classes to light up

    @property
    def is_empty(self):
        return self.chord is None

    @property
    def popup(self) -> str:
        if self.is_empty:
            return "No chord on this key."
        if not self.tones:
            return "Could not work out the chord tones."
        return "Tones: " + " / ".join(self.tones)


@dataclass(frozen=True)
class KeyboardView:
    white_keys: tuple[KeyView, ...]
    black_keys: tuple[KeyView, ...]


@dataclass(frozen=True)
class ResultCard:
    number: int
    genre: str
    lines: tuple[str, ...]
    keyboard: KeyboardView


def _key_view(note, chords, voicings, left=None) -> KeyView:
    chord = chords.get(note)
    if not chord:
        return KeyView(note=note, chord=None, left=left)
    return KeyView(
        note=note,
        chord=chord,
        tones=tuple(chord_to_tone_names(chord)),
        voicing=voicings.get(note),
        left=left,
        chroma=chord_to_chroma(chord),
    )


def keyboard_view(indexed_set: IndexedChordSet) -> KeyboardView:
    """One octave of keys, each labelled with the set's chord for that key."""
    chords = chord_map(indexed_set)
    voicings = voicing_map(indexed_set)
    white = tuple(_key_view(note, chords, voicings) for note in WHITE_KEY_NOTES)
    black = tuple(
        _key_view(note, chords, voicings, left=anchor / len(WHITE_KEY_NOTES) * 100)
        for note, anchor in BLACK_KEY_LAYOUT
    )
    return KeyboardView(white_keys=white, black_keys=black)


def analysis_lines(analysis) -> list[str]:
    if analysis is None:
        return []
    lines = []
    if analysis.best_key:
        lines.append(f"Key: {analysis.best_key}")
    if analysis.white_inferred_key:
        score = format_percent(analysis.white_inferred_key_score)
        lines.append(f"White-key key: {analysis.white_inferred_key} ({score})")
    if analysis.diatonic_tone_ratio is not None:
        lines.append(f"Diatonic tones: {format_percent(analysis.diatonic_tone_ratio)}")
    if analysis.top_keys:
        lines.append("Candidate keys: " + ", ".join(analysis.top_keys))
    if analysis.tags:
        lines.append("Tags: " + ", ".join(analysis.tags))
    return lines


def result_card(result: SetResult, mode) -> ResultCard:
    s = result.indexed_set
    if result.matches:
        lines = [
            f"Transpose {m.from_chord} -> {m.to_chord}: {format_signed(m.delta)}"
            for m in result.matches
        ]
    elif mode == MODE_SEARCH:
        lines = ["This set does not match the query."]
    else:
        base = "minor" if s.base_type == TonalQuality.MINOR else "major"
        lines = [f"Head chord: {s.head_chord} | base type: {base}"]
    lines.extend(analysis_lines(s.chord_set.analysis))
    return ResultCard(
        number=s.number,
        genre=s.genre,
        lines=tuple(lines),
        keyboard=keyboard_view(s),
    )
