import re
from dataclasses import dataclass
from enum import Enum

from .notes import normalize_note, note_semitone


class TonalQuality(str, Enum):
    """Base triad family of a chord. There is no 'unknown': ambiguity → major."""

    MAJOR = "major"
    MINOR = "minor"


class Tension(str, Enum):
    """Closed tension vocabulary. Declaration order is the display/sort priority."""

    SIXTH = "6"
    SEVENTH = "7"
    MAJOR_SEVENTH = "M7"
    NINTH = "9"
    ADD_NINE = "add9"
    ELEVENTH = "11"
    ADD_ELEVEN = "add11"
    THIRTEENTH = "13"
    SUS2 = "sus2"
    SUS4 = "sus4"
    DIM = "dim"
    AUG = "aug"
    ALT = "alt"
    FLAT_FIVE = "b5"
    FLAT_NINE = "b9"
    SHARP_ELEVEN = "#11"
    FLAT_THIRTEEN = "b13"
    HALF_DIMINISHED = "m7b5"


TENSION_PRIORITY: list[Tension] = list(Tension)


@dataclass(frozen=True)
class ParsedChordSymbol:
    root: str | None
    suffix: str
    bass: str | None

    @property
    def root_pc(self):
        return note_semitone(self.root)

    @property
    def bass_pc(self):
        return note_semitone(self.bass)


_UNPARSED = ParsedChordSymbol(root=None, suffix="", bass=None)

_SYMBOL_RE = re.compile(r"^([A-Ga-g])([#b]?)(.*)$", re.DOTALL)


def parse_chord_symbol(symbol) -> ParsedChordSymbol:
    """
    Split a chord symbol into root / quality suffix / optional bass.

        "Bbm7b5/Ab" → ParsedChordSymbol(root="Bb", suffix="m7b5", bass="Ab")
        "G 7"       → ParsedChordSymbol(root="G",  suffix="7",    bass=None)

    Text not starting with A-G is a parse failure, signalled by root=None
    (never an exception) so one bad catalog entry cannot break indexing.
    """
    m = _SYMBOL_RE.match(symbol or "")
    if not m:
        return _UNPARSED
    root = normalize_note(m.group(1) + m.group(2))
    rest = re.sub(r"\s+", "", m.group(3))
    suffix, slash, bass_text = rest.partition("/")
    bass = normalize_note(bass_text) if slash else None
    return ParsedChordSymbol(root=root, suffix=suffix, bass=bass)


# ── Quality ───────────────────────────────────────────────────────────────────

def classify_quality(suffix) -> TonalQuality:
    """
    Derive major/minor from a chord suffix.

    Rules (first match wins, order matters):
      1. Starts with capital 'M'          M7, M13     → major
      2. Starts with 'm', not 'maj'       m, m7, min  → minor
      3. Case-insensitive maj/major       → major;  min/minor → minor
      4. Anything else (incl. "")         → major
    Rules 1-2 are case-sensitive and must run before rule 3, otherwise
    "M7" and "m7" collapse to the same thing.
    """
    raw = suffix or ""
    lower = raw.lower()
    if raw.startswith("M"):
        return TonalQuality.MAJOR
    if raw.startswith("m") and not lower.startswith("maj"):
        return TonalQuality.MINOR
    if lower.startswith(("major", "maj")):
        return TonalQuality.MAJOR
    if lower.startswith(("minor", "min")):
        return TonalQuality.MINOR
    return TonalQuality.MAJOR


# ── Tensions ──────────────────────────────────────────────────────────────────

def _numeric(n: str) -> re.Pattern:
    # A bare number: not part of a longer digit run ("13" must not fire "3")
    return re.compile(rf"(?<!\d){n}(?!\d)")


# (token, pattern, test against the add-stripped numeric text)
_TENSION_RULES: list[tuple[Tension, re.Pattern, bool]] = [
    (Tension.HALF_DIMINISHED, re.compile(r"m7b5", re.I),     False),
    (Tension.ADD_NINE,        re.compile(r"add9", re.I),     False),
    (Tension.ADD_ELEVEN,      re.compile(r"add11", re.I),    False),
    (Tension.MAJOR_SEVENTH,   re.compile(r"(?i:maj7)|M7"),   False),
    (Tension.THIRTEENTH,      _numeric("13"),                True),
    (Tension.ELEVENTH,        _numeric("11"),                True),
    (Tension.NINTH,           _numeric("9"),                 True),
    (Tension.SEVENTH,         _numeric("7"),                 True),
    (Tension.SIXTH,           _numeric("6"),                 True),
    (Tension.SUS2,            re.compile(r"sus2", re.I),     False),
    (Tension.SUS4,            re.compile(r"sus(?!2)", re.I), False),
    (Tension.DIM,             re.compile(r"dim", re.I),      False),
    (Tension.AUG,             re.compile(r"aug", re.I),      False),
    (Tension.ALT,             re.compile(r"alt", re.I),      False),
    (Tension.FLAT_FIVE,       re.compile(r"b5", re.I),       False),
    (Tension.FLAT_NINE,       re.compile(r"b9", re.I),       False),
    (Tension.SHARP_ELEVEN,    re.compile(r"#11"),            False),
    (Tension.FLAT_THIRTEEN,   re.compile(r"b13", re.I),      False),
]


def numeric_part(suffix) -> str:
    """Lower-cased suffix with 'add9'/'add11' cut out, for bare-number tests."""
    return (suffix or "").lower().replace("add9", "").replace("add11", "")


def _tension_sort_key(token):
    try:
        return (0, TENSION_PRIORITY.index(Tension(token)), "")
    except ValueError:
        return (1, 0, str(token))


def sort_tensions(tokens) -> list:
    """Order tokens by TENSION_PRIORITY; unknown tokens go last, alphabetically."""
    return sorted(tokens, key=_tension_sort_key)


def extract_tensions(suffix) -> list[Tension]:
    """
    Extract the set of tension tokens in a suffix, in priority order.

        "13sus4" → [13, sus4]
        "maj7"   → [M7]          (plain 7 is suppressed by M7)
        "7add9"  → [7, add9]     (the 9 inside add9 is not a bare 9)
    """
    raw = suffix or ""
    numeric = numeric_part(raw)
    found: list[Tension] = []
    for token, pattern, on_numeric in _TENSION_RULES:
        if token is Tension.SEVENTH and Tension.MAJOR_SEVENTH in found:
            continue
        if pattern.search(numeric if on_numeric else raw) and token not in found:
            found.append(token)
    return sort_tensions(found)
