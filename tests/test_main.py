import logging
import sys
import types

import numpy as np
import pytest

from tuner import main as cli
from tuner.capture import AudioSnapshot
from tuner.pitch import PitchDetector
from tuner.tracking import Tuner, TunerReading


class FakeMic:
    def __init__(self, frames, sample_rate=44100):
        self.frames = list(frames)
        self.sample_rate = sample_rate

    def snapshot(self):
        if not self.frames:
            return None
        return AudioSnapshot(samples=self.frames.pop(0), sample_rate=self.sample_rate)


class TestFormatReading:
    def test_none(self):
        assert cli.format_reading(None) == "--"

    def test_in_tune(self):
        text = cli.format_reading(TunerReading(440.0, 69.0, "A4", 0, True, 440.0))
        assert text.startswith("A4")
        assert "+0 cents" in text
        assert "440.00 Hz" in text
        assert "alvo 440.00" in text
        assert text.endswith("ok")

    def test_out_of_tune_has_no_mark(self):
        text = cli.format_reading(TunerReading(452.0, 69.47, "A4", 47, False, 440.0))
        assert "+47 cents" in text
        assert not text.endswith("ok")


class TestRunLoop:
    def test_headless_logs_note_changes(self, monkeypatch, caplog, sine):
        monkeypatch.setattr(cli.time, "sleep", lambda s: None)
        frames = [
            sine(440.0, 44100, 2048),
            sine(440.0, 44100, 2048),
            np.zeros(2048, dtype=np.float32),
        ]
        mic = FakeMic(frames)
        with caplog.at_level(logging.INFO, logger="tuner.main"):
            cli.run_loop(mic, Tuner(PitchDetector()), ui=None, max_ticks=3)
        messages = [r.getMessage() for r in caplog.records if r.name == "tuner.main"]
        assert len(messages) == 2
        assert messages[0].startswith("A4")
        assert messages[1] == "--"

    def test_ui_can_stop_loop(self, sine):
        class StopUI:
            def __init__(self):
                self.states = []

            def update(self, state):
                self.states.append(state)
                return False

        pytest.importorskip("pygame")
        ui = StopUI()
        cli.run_loop(FakeMic([sine(440.0, 44100, 2048)]), Tuner(PitchDetector()), ui=ui)
        assert len(ui.states) == 1
        assert ui.states[0].note == "A4"
        assert ui.states[0].target_frequency == 440.0

    def test_missing_snapshot_clears_tuner_history(self, monkeypatch, sine):
        monkeypatch.setattr(cli.time, "sleep", lambda s: None)
        tuner = Tuner(PitchDetector())
        mic = FakeMic([sine(440.0, 44100, 2048)])
        cli.run_loop(mic, tuner, ui=None, max_ticks=1)
        assert tuner.last is not None
        cli.run_loop(mic, tuner, ui=None, max_ticks=1)
        assert tuner.last is None


class TestMain:
    @pytest.fixture
    def fake_sd(self, monkeypatch):
        streams = []

        class Stream:
            def __init__(self, **kwargs):
                self.kwargs = kwargs
                self.closed = False
                streams.append(self)

            def start(self):
                pass

            def stop(self):
                pass

            def close(self):
                self.closed = True

        monkeypatch.setitem(sys.modules, "sounddevice", types.SimpleNamespace(InputStream=Stream))
        return streams

    def test_parse_args_defaults(self):
        args = cli.parse_args([])
        assert args.samplerate == 44100
        assert args.frame_size == 2048
        assert args.min_freq == 50.0
        assert args.max_freq == 1000.0
        assert not args.headless

    def test_headless_interrupt_exits_cleanly(self, monkeypatch, fake_sd):
        def interrupted(mic, tuner, ui=None, max_ticks=None):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "run_loop", interrupted)
        assert cli.main(["--headless", "--device", "2", "--frame-size", "1024"]) == 0
        assert fake_sd[0].kwargs["device"] == 2
        assert fake_sd[0].closed

    def test_invalid_range(self):
        assert cli.main(["--headless", "--min-freq", "900", "--max-freq", "100"]) == 2

    def test_microphone_failure(self, monkeypatch):
        def broken(**kwargs):
            raise RuntimeError("no device")

        monkeypatch.setitem(sys.modules, "sounddevice", types.SimpleNamespace(InputStream=broken))
        assert cli.main(["--headless"]) == 1
