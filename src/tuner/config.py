from dataclasses import dataclass


@dataclass
class AudioConfig:
    sample_rate: int = 44100
    block_size: int = 512
    frame_size: int = 2048
    channels: int = 1


@dataclass(frozen=True)
class DetectorConfig:
    min_freq: float = 50.0
    max_freq: float = 1000.0
    rms_threshold: float = 0.01
    peak_threshold: float = 0.25

    def __post_init__(self) -> None:
        if not 0.0 < self.min_freq < self.max_freq:
            raise ValueError(
                f"min_freq/max_freq invalidos: precisa 0 < {self.min_freq} < {self.max_freq}"
            )
        if self.rms_threshold < 0.0 or self.peak_threshold < 0.0:
            raise ValueError("rms_threshold e peak_threshold nao podem ser negativos")


@dataclass
class TunerConfig:
    in_tune_cents: float = 5.0
    smoothing: float = 0.3
