# ── Pitch-class lookup tables ─────────────────────────────────────────────────

# Enharmonic table: 7 naturals + 10 accidental spellings.
# E#, Fb, B# and Cb are not supported.
_NOTE_TO_PC: dict[str, int] = {
    "C": 0,  "C#": 1,  "Db": 1,  "D": 2,  "D#": 3,  "Eb": 3,
    "E": 4,  "F": 5,   "F#": 6,  "Gb": 6, "G": 7,   "G#": 8,
    "Ab": 8, "A": 9,   "A#": 10, "Bb": 10, "B": 11,
}
# Sharp-only spelling used for every displayed note, whatever the input spelling.
_PC_TO_NOTE: list[str] = [
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
]

# ── Keyboard layout ───────────────────────────────────────────────────────────

WHITE_KEY_NOTES: list[str] = ["C", "D", "E", "F", "G", "A", "B"]
# Black key → index of the white key it sits on the left edge of (out of 7)
BLACK_KEY_LAYOUT: list[tuple[str, int]] = [
    ("C#", 1),
    ("D#", 2),
    ("F#", 4),
    ("G#", 5),
    ("A#", 6),
]

# Octave used for chord tones on the keyboard view; the bass sits one below.
DEFAULT_BASE_OCTAVE = 5

# ── Search ────────────────────────────────────────────────────────────────────

ALL_GENRES = "ALL"
MODE_ALL = "all"
MODE_SEARCH = "search"
