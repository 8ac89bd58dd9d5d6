from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import AudioConfig

logger = logging.getLogger(__name__)


@dataclass
class AudioSnapshot:
    samples: np.ndarray
    sample_rate: int


class Microphone:
    """Keeps the most recent frame_size input samples from a sounddevice stream."""

    def __init__(self, config: AudioConfig, device=None):
        self.config = config
        self.device = device
        self.stream = None
        self._buffer = np.zeros(config.frame_size, dtype=np.float32)
        self._lock = threading.Lock()

    def start(self) -> None:
        if self.stream is not None:
            return
        import sounddevice as sd

        try:
            self.stream = sd.InputStream(
                channels=self.config.channels,
                samplerate=self.config.sample_rate,
                blocksize=self.config.block_size,
                device=self.device,
                dtype="float32",
                callback=self._callback,
            )
            self.stream.start()
        except Exception:
            logger.error("Erro ao abrir o microfone (device=%s)", self.device)
            self.stream = None
            raise
        logger.info(
            "microfone aberto: %d Hz, bloco %d, janela %d",
            self.config.sample_rate,
            self.config.block_size,
            self.config.frame_size,
        )

    def stop(self) -> None:
        if self.stream is None:
            return
        self.stream.stop()
        self.stream.close()
        self.stream = None
        logger.info("microfone fechado")

    def snapshot(self) -> Optional[AudioSnapshot]:
        if self.stream is None:
            return None
        with self._lock:
            samples = self._buffer.copy()
        return AudioSnapshot(samples=samples, sample_rate=self.config.sample_rate)

    def _callback(self, indata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            logger.warning("status do stream de entrada: %s", status)
        mono = np.asarray(indata, dtype=np.float32)
        if mono.ndim > 1:
            mono = mono[:, 0]
        self._push(mono)

    def _push(self, samples: np.ndarray) -> None:
        size = self._buffer.size
        if samples.size == 0:
            return
        with self._lock:
            if samples.size >= size:
                self._buffer[:] = samples[-size:]
            else:
                self._buffer[:-samples.size] = self._buffer[samples.size :]
                self._buffer[-samples.size :] = samples

    def __enter__(self) -> "Microphone":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
