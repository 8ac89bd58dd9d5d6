from __future__ import annotations

import math
from dataclasses import dataclass

NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


@dataclass(frozen=True)
class PitchInfo:
    note: str
    cents: int
    rounded_midi: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def note_name(midi: int) -> str:
    octave = midi // 12 - 1
    return f"{NOTES[midi % 12]}{octave}"


def pitch_info(midi: float) -> PitchInfo:
    if not math.isfinite(midi):
        raise ValueError(f"Nota MIDI invalida: {midi}")
    rounded = _round_half_up(midi)
    cents = _round_half_up((midi - rounded) * 100.0)
    return PitchInfo(note=note_name(rounded), cents=cents, rounded_midi=rounded)
