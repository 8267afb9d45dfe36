from dataclasses import dataclass

from .catalog import IndexedChordSet
from .notes import canonical_note, note_semitone
from .parser import Tension, TonalQuality


class SearchError(ValueError):
    """A query that cannot be run; the message is meant for the user."""


INVALID_ROOT_MESSAGE = "Enter a valid root note (C, C#, Db, ...)."
INVALID_QUALITY_MESSAGE = "Choose major or minor as the base type."
NO_CATALOG_MESSAGE = "Chord-set catalog is not loaded. Run the catalog sync first."


@dataclass(frozen=True)
class TargetSpec:
    root: str
    base_type: TonalQuality
    tension: Tension | None
    target_chord_label: str


@dataclass(frozen=True)
class MatchResult:
    from_chord: str
    to_chord: str
    delta: int


@dataclass(frozen=True)
class SetResult:
    """An indexed set annotated with its 0 or 1 matches for the current query."""

    indexed_set: IndexedChordSet
    matches: tuple[MatchResult, ...] = ()

    @property
    def is_match(self):
        return bool(self.matches)


def compose_target_chord(root, base_type, tension=None) -> str:
    """'G' + minor + '7' → 'Gm7'."""
    base = "m" if base_type == TonalQuality.MINOR else ""
    if isinstance(tension, Tension):
        tension = tension.value
    return f"{root}{base}{tension or ''}"


def build_target(root_text, base_type, tension=None) -> TargetSpec:
    """
    Validate raw query input and build a TargetSpec.

    The root is re-spelled with sharps (Db → C#) so every label shown for
    the target uses the canonical spelling.

    Raises SearchError if the root does not resolve to a pitch class (Cb and
    E# do not) or the base type is not 'major'/'minor'. An empty tension
    means "any".
    """
    root = canonical_note(root_text)
    if not root:
        raise SearchError(INVALID_ROOT_MESSAGE)
    try:
        quality = TonalQuality(base_type)
    except ValueError:
        raise SearchError(INVALID_QUALITY_MESSAGE) from None
    if tension:
        try:
            tension = Tension(tension)
        except ValueError:
            raise SearchError(f"Unknown tension: {tension}") from None
    else:
        tension = None
    return TargetSpec(
        root=root,
        base_type=quality,
        tension=tension,
        target_chord_label=compose_target_chord(root, quality, tension),
    )


def to_signed_semitone(unsigned_delta: int) -> int:
    """
    Map 0..11 to the canonical range: 0..6 stay, 7..11 become -5..-1.

    A tritone is always +6; -6 is never produced.
    """
    return unsigned_delta if unsigned_delta <= 6 else unsigned_delta - 12


def transposition_delta(from_note, to_note):
    """Signed semitones to move from_note to to_note, or None if either is unknown."""
    from_pc = note_semitone(from_note)
    to_pc = note_semitone(to_note)
    if from_pc is None or to_pc is None:
        return None
    return to_signed_semitone((to_pc - from_pc + 12) % 12)


def is_eligible(target: TargetSpec, indexed_set) -> bool:
    """Same base type, and the target tension (if any) is on the head chord."""
    if indexed_set.base_type != target.base_type:
        return False
    return target.tension is None or target.tension in indexed_set.tensions


def match_set(target: TargetSpec, indexed_set) -> SetResult:
    # Only the head chord is a match anchor, so a set yields at most one match.
    if not is_eligible(target, indexed_set):
        return SetResult(indexed_set)
    delta = transposition_delta(indexed_set.head_root, target.root)
    if delta is None:
        return SetResult(indexed_set)
    match = MatchResult(
        from_chord=indexed_set.head_chord,
        to_chord=target.target_chord_label,
        delta=delta,
    )
    return SetResult(indexed_set, (match,))


def find_matches(target: TargetSpec, indexed_sets) -> list[SetResult]:
    return [match_set(target, s) for s in indexed_sets]


def format_signed(value: int) -> str:
    return f"+{value}" if value > 0 else f"{value}"
