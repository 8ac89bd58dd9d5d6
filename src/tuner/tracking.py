from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import TunerConfig
from .dsp import freq_to_midi, midi_to_freq
from .music import pitch_info
from .pitch import PitchDetector


@dataclass(frozen=True)
class TunerReading:
    frequency: float
    midi: float
    note: str
    cents: int
    in_tune: bool
    target_frequency: float


class Tuner:
    def __init__(self, detector: PitchDetector, config: Optional[TunerConfig] = None):
        self.detector = detector
        self.config = config or TunerConfig()
        self.last: Optional[TunerReading] = None

    def process(self, frame: np.ndarray, sample_rate: float) -> Optional[TunerReading]:
        freq = self.detector.detect(frame, sample_rate)
        if freq is None:
            self.last = None
            return None

        midi = freq_to_midi(freq)
        if self.last is not None and pitch_info(midi).note == self.last.note:
            alpha = self.config.smoothing
            midi = alpha * self.last.midi + (1.0 - alpha) * midi

        info = pitch_info(midi)
        reading = TunerReading(
            frequency=freq,
            midi=midi,
            note=info.note,
            cents=info.cents,
            in_tune=abs(info.cents) <= self.config.in_tune_cents,
            target_frequency=midi_to_freq(info.rounded_midi),
        )
        self.last = reading
        return reading

    def reset(self) -> None:
        self.last = None
