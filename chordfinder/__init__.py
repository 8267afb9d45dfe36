"""Chord-set search: chord-symbol analysis and transposition matching."""
