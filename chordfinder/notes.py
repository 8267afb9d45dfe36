import re

from .constants import _NOTE_TO_PC, _PC_TO_NOTE

_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)")


def normalize_note(text):
    """
    Canonicalise a free-text note spelling: 'db' → 'Db', ' f ♯' → 'F#'.

    Whitespace is removed and Unicode ♯/♭ become ASCII '#'/'b'. Only the
    leading letter and one optional accidental are kept; anything after is
    ignored. Returns None if the text does not start with A-G.
    """
    if not text:
        return None
    cleaned = re.sub(r"\s+", "", text).replace("♯", "#").replace("♭", "b")
    m = _NOTE_RE.match(cleaned)
    if not m:
        return None
    return m.group(1).upper() + m.group(2)


def note_semitone(spelling):
    """Map a normalised spelling (e.g. 'C#', 'Db') to its pitch class, or None."""
    return _NOTE_TO_PC.get(spelling)


def format_pitch_class(value: int) -> str:
    """Sharp spelling for any integer semitone (wraps negatives and octaves)."""
    return _PC_TO_NOTE[value % 12]


def canonical_note(text):
    """Normalise, resolve and re-spell with sharps: 'Db' → 'C#'. None if unknown."""
    pc = note_semitone(normalize_note(text))
    if pc is None:
        return None
    return format_pitch_class(pc)
