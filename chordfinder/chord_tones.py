import re

import numpy as np

from .constants import DEFAULT_BASE_OCTAVE
from .notes import format_pitch_class, note_semitone
from .parser import TonalQuality, classify_quality, numeric_part, parse_chord_symbol


def _has(pattern, flags=re.I):
    rx = re.compile(pattern, flags)
    return lambda raw: rx.search(raw) is not None


def _bare(n):
    rx = re.compile(rf"(?<!\d){n}(?!\d)")
    return lambda raw: rx.search(numeric_part(raw)) is not None


def _is_power_chord(raw):
    return raw.lower().startswith("5") or _has(r"5c4")(raw)


def _is_minor(raw):
    return classify_quality(raw) is TonalQuality.MINOR


# Base triad: first matching rule wins.
_BASE_TRIADS = [
    (_is_power_chord,      [0, 7]),
    (_has(r"4c4"),         [0, 5, 7]),
    (_has(r"sus2"),        [0, 2, 7]),
    (_has(r"sus(?!2)"),    [0, 5, 7]),
    (_has(r"dim"),         [0, 3, 6]),
    (_has(r"aug|#5"),      [0, 4, 8]),
    (_is_minor,            [0, 3, 7]),
]
_DEFAULT_TRIAD = [0, 4, 7]

# Extensions: each group adds at most one interval, first match in the group wins.
_EXTENSION_GROUPS = [
    [(_has(r"dim7"), 9), (_has(r"(?i:maj7)|M7", 0), 11), (_bare("7"), 10)],
    [(_bare("6"), 9)],
    [(_has(r"b9"), 13), (_has(r"add9"), 14), (_bare("9"), 14)],
    [(_has(r"#11"), 18), (_has(r"add11"), 17), (_bare("11"), 17)],
    [(_has(r"b13"), 20), (_bare("13"), 21)],
]


def _add_or_replace(intervals, old, new):
    """Rewrite `old` to `new` in place if present, else append `new`."""
    if old in intervals:
        intervals[intervals.index(old)] = new
    else:
        intervals.append(new)


def build_intervals(suffix) -> list[int]:
    """
    Semitone offsets from the root for a chord suffix, ascending and unique.

    Upper-structure tones keep their octave: a 9th is 14, not 2.

        "maj7" → [0, 4, 7, 11]      "m7b5" → [0, 3, 6, 10]
        "dim7" → [0, 3, 6, 9]       "7b5"  → [0, 4, 6, 10]

    The b5/#5 overrides are sequential rewrites of the fifth, not set
    operations: whichever runs second sees the result of the first.
    """
    raw = suffix or ""
    intervals = list(_DEFAULT_TRIAD)
    for test, triad in _BASE_TRIADS:
        if test(raw):
            intervals = list(triad)
            break

    if re.search(r"no3", raw, re.I):
        intervals = [v for v in intervals if v not in (3, 4)]
    if re.search(r"b5", raw, re.I):
        _add_or_replace(intervals, 7, 6)
    if "#5" in raw:
        _add_or_replace(intervals, 7, 8)

    for group in _EXTENSION_GROUPS:
        for test, interval in group:
            if test(raw):
                intervals.append(interval)
                break

    return sorted(set(intervals))


def render_tones(root_semitone, intervals, base_octave=DEFAULT_BASE_OCTAVE, bass=None) -> list[str]:
    """
    Name each interval as pitch class + octave, e.g. root 0, [0, 4, 14] → C5 E5 D6.

    If `bass` (a note spelling) resolves, it is prepended one octave below
    base_octave. Duplicates are dropped, first occurrence kept.
    """
    tones = []
    bass_pc = note_semitone(bass)
    if bass_pc is not None:
        tones.append(f"{format_pitch_class(bass_pc)}{base_octave - 1}")
    for interval in intervals:
        total = root_semitone + interval
        tones.append(f"{format_pitch_class(total)}{base_octave + total // 12}")
    return list(dict.fromkeys(tones))


def chord_to_tone_names(symbol, base_octave=DEFAULT_BASE_OCTAVE) -> list[str]:
    """Tones of a chord symbol for the keyboard view; [] if it cannot be parsed."""
    parsed = parse_chord_symbol(symbol)
    root_pc = parsed.root_pc
    if root_pc is None:
        return []
    intervals = build_intervals(parsed.suffix)
    return render_tones(root_pc, intervals, base_octave, parsed.bass)


def chord_to_chroma(symbol):
    """
    12-element multi-hot pitch-class vector (float32) for a chord symbol,
    bass note included. Unparseable symbols give a zero vector.
    """
    v = np.zeros(12, dtype=np.float32)
    parsed = parse_chord_symbol(symbol)
    root_pc = parsed.root_pc
    if root_pc is None:
        return v
    for interval in build_intervals(parsed.suffix):
        v[(root_pc + interval) % 12] = 1.0
    bass_pc = parsed.bass_pc
    if bass_pc is not None:
        v[bass_pc] = 1.0
    return v
