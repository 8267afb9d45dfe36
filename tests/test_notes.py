import unittest
from chordfinder.notes import normalize_note, note_semitone, format_pitch_class, canonical_note


class TestNotes(unittest.TestCase):
    def test_normalize_note(self):
        self.assertEqual(normalize_note("C"), "C")
        self.assertEqual(normalize_note("db"), "Db")
        self.assertEqual(normalize_note(" f # "), "F#")
        self.assertEqual(normalize_note("C♯"), "C#")
        self.assertEqual(normalize_note("B♭"), "Bb")
        # Trailing suffix text is ignored
        self.assertEqual(normalize_note("Ebm7"), "Eb")
        self.assertEqual(normalize_note("Gmaj7"), "G")

    def test_normalize_note_invalid(self):
        self.assertIsNone(normalize_note(""))
        self.assertIsNone(normalize_note(None))
        self.assertIsNone(normalize_note("H"))
        self.assertIsNone(normalize_note("#C"))
        self.assertIsNone(normalize_note("N.C."))

    def test_enharmonic_equivalence(self):
        self.assertEqual(note_semitone(normalize_note("Db")), 1)
        self.assertEqual(note_semitone(normalize_note("C#")), 1)
        self.assertEqual(note_semitone(normalize_note("C♯")), 1)
        self.assertEqual(note_semitone(normalize_note("D♭")), 1)
        for flat, sharp in [("Eb", "D#"), ("Gb", "F#"), ("Ab", "G#"), ("Bb", "A#")]:
            self.assertEqual(note_semitone(flat), note_semitone(sharp))

    def test_note_semitone_table(self):
        self.assertEqual(note_semitone("C"), 0)
        self.assertEqual(note_semitone("B"), 11)
        self.assertEqual(note_semitone("A#"), 10)
        # Unsupported spellings
        for spelling in ("E#", "Fb", "B#", "Cb"):
            self.assertIsNone(note_semitone(spelling))
        self.assertIsNone(note_semitone(None))

    def test_format_pitch_class(self):
        self.assertEqual(format_pitch_class(0), "C")
        self.assertEqual(format_pitch_class(10), "A#")
        self.assertEqual(format_pitch_class(14), "D")
        self.assertEqual(format_pitch_class(-1), "B")

    def test_canonical_note_uses_sharps(self):
        self.assertEqual(canonical_note("Db"), "C#")
        self.assertEqual(canonical_note("bb"), "A#")
        self.assertEqual(canonical_note("E"), "E")
        self.assertIsNone(canonical_note("Cb"))
        self.assertIsNone(canonical_note("x"))


if __name__ == "__main__":
    unittest.main()
