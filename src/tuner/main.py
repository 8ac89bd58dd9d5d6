from __future__ import annotations

import argparse
import logging
import time
from typing import Optional

from .capture import Microphone
from .config import AudioConfig, DetectorConfig, TunerConfig
from .pitch import PitchDetector
from .tracking import Tuner, TunerReading

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 1.0 / 30.0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Afinador para estudo de musica")
    parser.add_argument("--fullscreen", action="store_true", help="Tela cheia")
    parser.add_argument("--headless", action="store_true", help="Sem UI, so imprime as leituras")
    parser.add_argument("--device", help="Dispositivo de entrada de audio (indice ou nome)")
    parser.add_argument("--samplerate", type=int, default=44100, help="Sample rate")
    parser.add_argument("--blocksize", type=int, default=512, help="Tamanho do bloco de audio")
    parser.add_argument("--frame-size", type=int, default=2048, help="Amostras por analise de pitch")
    parser.add_argument("--min-freq", type=float, default=50.0, help="Menor frequencia detectada (Hz)")
    parser.add_argument("--max-freq", type=float, default=1000.0, help="Maior frequencia detectada (Hz)")
    parser.add_argument("--tolerance", type=float, default=5.0, help="Tolerancia em cents para 'afinado'")
    parser.add_argument("--log-level", default="INFO", help="Nivel de log (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(levelname)s %(message)s",
    )

    audio_cfg = AudioConfig(
        sample_rate=args.samplerate,
        block_size=args.blocksize,
        frame_size=args.frame_size,
    )
    try:
        detector_cfg = DetectorConfig(min_freq=args.min_freq, max_freq=args.max_freq)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    tuner = Tuner(PitchDetector(detector_cfg), TunerConfig(in_tune_cents=args.tolerance))
    device = _parse_device(args.device)
    mic = Microphone(audio_cfg, device=device)

    ui = None
    if not args.headless:
        from .ui import PygameUI

        ui = PygameUI(fullscreen=args.fullscreen, tolerance_cents=args.tolerance)

    try:
        mic.start()
    except Exception as exc:
        logger.error("Nao foi possivel abrir o microfone: %s", exc)
        if ui:
            ui.close()
        return 1

    try:
        run_loop(mic, tuner, ui)
    except KeyboardInterrupt:
        pass
    finally:
        mic.stop()
        if ui:
            ui.close()
    return 0


def run_loop(mic: Microphone, tuner: Tuner, ui=None, max_ticks: Optional[int] = None) -> None:
    last_note: Optional[str] = None
    ticks = 0
    running = True
    while running:
        snapshot = mic.snapshot()
        reading = None
        if snapshot is None:
            tuner.reset()
        else:
            reading = tuner.process(snapshot.samples, snapshot.sample_rate)

        if ui:
            running = ui.update(_build_ui_state(reading))
        else:
            note = reading.note if reading else None
            if note != last_note:
                logger.info("%s", format_reading(reading))
                last_note = note
            time.sleep(POLL_INTERVAL_S)

        ticks += 1
        if max_ticks is not None and ticks >= max_ticks:
            running = False


def format_reading(reading: Optional[TunerReading]) -> str:
    if reading is None:
        return "--"
    mark = "ok" if reading.in_tune else ""
    return (
        f"{reading.note:<4} {reading.cents:+3d} cents  {reading.frequency:7.2f} Hz"
        f" (alvo {reading.target_frequency:.2f}) {mark}"
    ).rstrip()


def _build_ui_state(reading: Optional[TunerReading]):
    from .ui import UIState

    if reading is None:
        return UIState(note=None, cents=0, frequency=None, in_tune=False, target_frequency=None)
    return UIState(
        note=reading.note,
        cents=reading.cents,
        frequency=reading.frequency,
        in_tune=reading.in_tune,
        target_frequency=reading.target_frequency,
    )


def _parse_device(value: Optional[str]):
    if value is None:
        return None
    return int(value) if value.isdigit() else value


if __name__ == "__main__":
    raise SystemExit(main())
