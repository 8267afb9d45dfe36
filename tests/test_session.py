import unittest

import numpy as np

from chordfinder.catalog import ChordSet, KeyAnalysis, build_index
from chordfinder.constants import ALL_GENRES, MODE_ALL, MODE_SEARCH
from chordfinder.matcher import INVALID_QUALITY_MESSAGE, INVALID_ROOT_MESSAGE, NO_CATALOG_MESSAGE
from chordfinder.session import (
    SearchState,
    apply_genre_filter,
    format_percent,
    initial_state,
    keyboard_view,
    result_card,
    search,
    select_genre,
    show_all,
    summary,
    visible_results,
)

KEYS = ("C", "D", "E", "F", "G", "A", "B", "C#")


class TestSearchSession(unittest.TestCase):
    def setUp(self):
        self.indexed = build_index([
            ChordSet(number=1, genre="Pop", chords=("Cmaj7", "Dm7", "Em7"), keys=KEYS),
            ChordSet(number=2, genre="Jazz", chords=("Dm7", "G7", "Cmaj7"), keys=KEYS),
            ChordSet(number=3, genre="Jazz", chords=("F", "G", "C"), keys=KEYS),
            ChordSet(number=4, genre="Rock", chords=("Am", "F", "G"), keys=KEYS),
        ])

    def test_initial_state_browses_all(self):
        state = initial_state(self.indexed)
        self.assertEqual(state.mode, MODE_ALL)
        self.assertEqual(state.selected_genre, ALL_GENRES)
        self.assertEqual(len(state.results), 4)
        self.assertTrue(all(not r.matches for r in state.results))
        self.assertEqual(summary(state), "All genres | showing all 4 sets")

    def test_missing_catalog(self):
        state = initial_state(None)
        self.assertEqual(state.status, NO_CATALOG_MESSAGE)
        self.assertEqual(state.results, ())
        state = search(state, None, "C", "major")
        self.assertEqual(state.status, NO_CATALOG_MESSAGE)

    def test_search_filters_to_matches(self):
        state = search(initial_state(self.indexed), self.indexed, "G", "major")
        self.assertEqual(state.mode, MODE_SEARCH)
        self.assertEqual(state.last_target.target_chord_label, "G")
        visible = visible_results(state)
        self.assertEqual([r.indexed_set.number for r in visible], [1, 3])
        self.assertEqual(summary(state), "All genres | matches for G: 2 / 4 sets")

    def test_flat_root_shown_with_sharps(self):
        state = search(initial_state(self.indexed), self.indexed, "Db", "major")
        self.assertEqual(state.last_target.target_chord_label, "C#")
        self.assertEqual(summary(state), "All genres | matches for C#: 2 / 4 sets")
        card = result_card(visible_results(state)[0], state.mode)
        self.assertEqual(card.lines[0], "Transpose Cmaj7 -> C#: +1")

    def test_search_does_not_mutate_previous_state(self):
        before = initial_state(self.indexed)
        after = search(before, self.indexed, "D", "minor")
        self.assertEqual(before.mode, MODE_ALL)
        self.assertIsNone(before.last_target)
        self.assertIsNot(before, after)

    def test_invalid_input_keeps_results(self):
        first = search(initial_state(self.indexed), self.indexed, "G", "major")
        bad_root = search(first, self.indexed, "xyz", "major")
        self.assertEqual(bad_root.status, INVALID_ROOT_MESSAGE)
        self.assertEqual(bad_root.results, first.results)
        bad_quality = search(first, self.indexed, "C", "dominant")
        self.assertEqual(bad_quality.status, INVALID_QUALITY_MESSAGE)
        # A later valid search clears the message
        self.assertEqual(search(bad_quality, self.indexed, "C", "major").status, "")

    def test_genre_filter(self):
        state = search(initial_state(self.indexed), self.indexed, "E", "minor")
        state = select_genre(state, "Jazz")
        self.assertEqual([r.indexed_set.number for r in visible_results(state)], [2])
        self.assertEqual(summary(state), "Genre: Jazz | matches for Em: 1 / 2 sets")
        state = select_genre(state, None)
        self.assertEqual(state.selected_genre, ALL_GENRES)

    def test_show_all_resets_search(self):
        state = search(initial_state(self.indexed), self.indexed, "G", "major")
        state = show_all(select_genre(state, "Rock"), self.indexed)
        self.assertEqual(state.mode, MODE_ALL)
        self.assertIsNone(state.last_target)
        self.assertEqual([r.indexed_set.number for r in visible_results(state)], [4])
        self.assertEqual(summary(state), "Genre: Rock | showing all 1 sets")

    def test_apply_genre_filter_all_sentinel(self):
        results = initial_state(self.indexed).results
        self.assertEqual(len(apply_genre_filter(results, ALL_GENRES)), 4)
        self.assertEqual(apply_genre_filter(results, "Metal"), [])

    def test_summary_before_any_search(self):
        state = SearchState(mode=MODE_SEARCH)
        self.assertEqual(summary(state), "All genres | matches for (no search yet): 0 / 0 sets")


class TestViews(unittest.TestCase):
    def test_format_percent(self):
        self.assertEqual(format_percent(0.857), "86%")
        self.assertEqual(format_percent(1.0), "100%")
        self.assertEqual(format_percent(0), "0%")
        self.assertEqual(format_percent(0.125), "13%")
        self.assertEqual(format_percent(None), "-")

    def test_keyboard_view(self):
        indexed = build_index([ChordSet(
            number=1, genre="Pop",
            chords=("C", "Dm", "", "F/A", "G7"),
            keys=("C", "D", "E", "F", "C#"),
            voicings=(("C4", "E4", "G4"), ("D4", "F4", "A4")),
        )])[0]
        view = keyboard_view(indexed)
        self.assertEqual([k.note for k in view.white_keys], ["C", "D", "E", "F", "G", "A", "B"])
        self.assertEqual([k.note for k in view.black_keys], ["C#", "D#", "F#", "G#", "A#"])

        c_key = view.white_keys[0]
        self.assertEqual(c_key.chord, "C")
        self.assertEqual(c_key.tones, ("C5", "E5", "G5"))
        self.assertEqual(c_key.voicing, ("C4", "E4", "G4"))
        self.assertEqual(c_key.popup, "Tones: C5 / E5 / G5")
        self.assertEqual(c_key.chroma.dtype, np.float32)
        np.testing.assert_array_equal(np.flatnonzero(c_key.chroma), [0, 4, 7])
        # Slash bass is part of the lit keys
        np.testing.assert_array_equal(np.flatnonzero(view.white_keys[3].chroma), [0, 5, 9])

        self.assertTrue(view.white_keys[2].is_empty)   # E has an empty chord
        self.assertTrue(view.white_keys[4].is_empty)   # G has no key label
        self.assertEqual(view.white_keys[4].popup, "No chord on this key.")
        self.assertIsNone(view.white_keys[2].chroma)
        self.assertIsNone(view.white_keys[4].chroma)
        self.assertEqual(view.white_keys[3].tones, ("A4", "F5", "A5", "C6"))
        self.assertIsNone(view.white_keys[3].voicing)

        c_sharp = view.black_keys[0]
        self.assertEqual(c_sharp.chord, "G7")
        self.assertAlmostEqual(c_sharp.left, 100 / 7)
        self.assertIsNone(c_key.left)

    def test_unparseable_chord_popup(self):
        indexed = build_index([ChordSet(number=1, genre="", chords=("N.C.",), keys=("C",))])[0]
        key = keyboard_view(indexed).white_keys[0]
        self.assertFalse(key.is_empty)
        self.assertEqual(key.popup, "Could not work out the chord tones.")

    def test_result_cards(self):
        analysis = KeyAnalysis(best_key="C major", diatonic_tone_ratio=0.9, tags=("diatonic",))
        indexed = build_index([
            ChordSet(number=1, genre="Pop", chords=("Cmaj7",), keys=("C",), analysis=analysis),
            ChordSet(number=2, genre="Pop", chords=("Am7",), keys=("A",)),
        ])
        state = initial_state(indexed)
        card = result_card(state.results[0], state.mode)
        self.assertEqual(card.number, 1)
        self.assertEqual(card.lines, (
            "Head chord: Cmaj7 | base type: major",
            "Key: C major",
            "Diatonic tones: 90%",
            "Tags: diatonic",
        ))

        state = search(state, indexed, "F#", "major")
        self.assertEqual(result_card(state.results[0], state.mode).lines[0],
                         "Transpose Cmaj7 -> F#: +6")
        self.assertEqual(result_card(state.results[1], state.mode).lines,
                         ("This set does not match the query.",))


if __name__ == "__main__":
    unittest.main()
