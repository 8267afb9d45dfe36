import random
import time
import timeit

from chordfinder.catalog import ChordSet, build_index
from chordfinder.matcher import build_target, find_matches

_ROOTS = ["C", "C#", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]
_SUFFIXES = ["", "m", "7", "m7", "maj7", "M9", "m7b5", "dim7", "sus4", "7b9", "13sus4", "add9"]


def make_catalog(n_sets, seed=42):
    rng = random.Random(seed)
    return [
        ChordSet(
            number=i,
            genre=rng.choice(["Pop", "Jazz", "Rock"]),
            chords=tuple(rng.choice(_ROOTS) + rng.choice(_SUFFIXES) for _ in range(7)),
        )
        for i in range(n_sets)
    ]


def run_benchmark():
    catalog = make_catalog(10000)

    start_time = time.perf_counter()
    indexed = build_index(catalog)
    duration = time.perf_counter() - start_time
    print(f"Indexed {len(indexed)} sets in {duration:.4f} seconds")

    target = build_target("G", "major", "7")
    times = timeit.repeat(lambda: find_matches(target, indexed), number=10, repeat=5)
    print(f"find_matches (min of 5 runs, 10 loops each): {min(times):.5f} seconds")


if __name__ == '__main__':
    run_benchmark()
