"""
Tests for Game Session and Presentation Adapter
===============================================
"""

import asyncio
from types import SimpleNamespace

import logging

import numpy as np
import pytest

from jazzhands.game.presentation import PresentationAdapter
from jazzhands.game.round_controller import RoundConfig, RoundPhase
from jazzhands.game.session import GameSession, SessionState, StartupError
from jazzhands.game.snapshot import HandSnapshot

from conftest import FakeAudio, FakeClassifier, make_hand, predictions, run


class FakeCamera:
    def __init__(self, log, ok=True, max_frames=None):
        self.log = log
        self.ok = ok
        self.max_frames = max_frames
        self.is_running = False
        self.latest_frame = None

    def start(self):
        self.log.append("camera")
        self.is_running = self.ok
        return self.ok

    def stop(self):
        self.is_running = False

    async def frames(self):
        n = 0
        while self.is_running:
            if self.max_frames is not None and n >= self.max_frames:
                return
            n += 1
            yield SimpleNamespace(rgb=np.zeros((4, 4, 3), dtype=np.uint8), timestamp_ms=n * 33)
            await asyncio.sleep(0)


class FakeDetector:
    def __init__(self, log, ok=True, hands=()):
        self.log = log
        self.ok = ok
        self.hands = tuple(hands)
        self.is_running = False
        self.stopped = False

    def start(self):
        self.log.append("detector")
        self.is_running = self.ok
        return self.ok

    def stop(self):
        self.stopped = True
        self.is_running = False

    def detect(self, image, timestamp_ms):
        return self.hands


class FakeVisualizer:
    def __init__(self):
        self.redraws = []

    def redraw(self, hands):
        self.redraws.append(tuple(hands))


class RecordingClassifier(FakeClassifier):
    def __init__(self, log, **kwargs):
        super().__init__(**kwargs)
        self.log = log
        self.load_gate = None  # asyncio.Event holding load() open

    async def load(self):
        self.log.append("classifier")
        if self.load_gate is not None:
            await self.load_gate.wait()
        return await super().load()


class RecordingAudio(FakeAudio):
    def __init__(self, log):
        super().__init__()
        self.log = log

    def play_begin(self):
        self.log.append("begin")
        return super().play_begin()


def make_session(catalog, log, classifier_ok=True, detector_ok=True, camera_ok=True,
                 hands=(), delay=60.0):
    return GameSession(
        catalog,
        camera=FakeCamera(log, ok=camera_ok),
        detector=FakeDetector(log, ok=detector_ok, hands=hands),
        classifier=RecordingClassifier(log, predictions=predictions(("fist", 0.9)),
                                       load_ok=classifier_ok, ready=False),
        audio=RecordingAudio(log),
        visualizer=FakeVisualizer(),
        round_config=RoundConfig(round_delay_s=delay),
    )


class TestGameSessionStart:
    """Test suite for the Start control sequence."""

    def test_start_sequence_order(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log)

        async def scenario():
            await session.start()
            state = session.state
            await session.close()
            return state

        state = run(scenario())

        assert state is SessionState.RUNNING
        assert log == ["classifier", "detector", "camera", "begin"]

    def test_first_round_armed_after_start(self, fist_catalog):
        shown = []
        session = make_session(fist_catalog, [])
        session._on_gesture = shown.append

        async def scenario():
            await session.start()
            phase = session.controller.phase
            await session.close()
            return phase

        assert run(scenario()) is RoundPhase.ARMED
        assert [g.label for g in shown] == ["fist"]
        assert session.target is None  # cleared on stop

    def test_classifier_failure_disables_start(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log, classifier_ok=False)

        with pytest.raises(StartupError) as exc_info:
            run(session.start())

        assert exc_info.value.component == "classifier"
        assert session.state is SessionState.FAILED
        assert not session.can_start
        assert "classifier" in session.status
        assert log == ["classifier"]

        # Start control stays disabled
        run(session.start())
        assert log == ["classifier"]

    def test_detector_failure(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log, detector_ok=False)

        with pytest.raises(StartupError) as exc_info:
            run(session.start())

        assert exc_info.value.component == "detector"
        assert "camera" not in log

    def test_camera_failure(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log, camera_ok=False)

        with pytest.raises(StartupError) as exc_info:
            run(session.start())

        assert exc_info.value.component == "camera"
        assert "begin" not in log
        assert session.state is SessionState.FAILED


class TestGameSessionStop:
    """Test suite for stop and restart."""

    def test_stop_then_restart(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log)

        async def scenario():
            await session.start()
            await session.stop()
            stopped = (session.state, session.controller.phase, session.can_start)
            await session.start()
            restarted = session.state
            await session.close()
            return stopped, restarted

        stopped, restarted = run(scenario())

        assert stopped == (SessionState.STOPPED, RoundPhase.STOPPED, True)
        assert restarted is SessionState.RUNNING
        # Classifier, detector and camera are only started once
        assert log == ["classifier", "detector", "camera", "begin", "begin"]

    def test_close_releases_collaborators(self, fist_catalog):
        session = make_session(fist_catalog, [])

        async def scenario():
            await session.start()
            await session.close()

        run(scenario())

        assert not session.camera.is_running
        assert session.detector.stopped
        assert session.audio.closed

    def test_stop_while_starting_is_applied_after_startup(self, fist_catalog):
        log = []
        session = make_session(fist_catalog, log)
        session.classifier.load_gate = asyncio.Event()

        async def scenario():
            starting = asyncio.ensure_future(session.start())
            await asyncio.sleep(0)
            assert session.state is SessionState.STARTING

            await session.stop()
            session.classifier.load_gate.set()
            await starting
            result = (session.state, session.controller.phase, session.can_start)
            await session.close()
            return result

        state, phase, can_start = run(asyncio.wait_for(scenario(), timeout=5))

        assert state is SessionState.STOPPED
        assert phase is RoundPhase.IDLE
        assert can_start
        assert "begin" not in log

    def test_warns_about_gestures_the_classifier_cannot_name(self, default_catalog, caplog):
        session = make_session(default_catalog, [])

        async def scenario():
            await session.start()
            await session.close()

        with caplog.at_level(logging.WARNING, logger="jazzhands.game.session"):
            run(scenario())

        warned = [r.getMessage() for r in caplog.records if "can never match" in r.getMessage()]
        assert len(warned) == len(default_catalog) - 1
        assert not any("'fist'" in message for message in warned)

    def test_rounds_are_tallied(self, fist_catalog):
        session = make_session(fist_catalog, [], hands=(make_hand(),), delay=0)

        async def scenario():
            await session.start()
            while session.round_logger.tally.get("match", 0) < 2:
                await asyncio.sleep(0)
            await session.close()

        run(asyncio.wait_for(scenario(), timeout=5))

        assert session.round_logger.tally["match"] >= 2
        assert session.outcome_text == "Nice!"


class TestPresentationAdapter:
    """Test suite for the frame → snapshot pipeline."""

    def test_results_replace_snapshot_and_redraw(self):
        snapshot = HandSnapshot()
        visualizer = FakeVisualizer()
        adapter = PresentationAdapter(None, None, snapshot, visualizer)
        hand = make_hand()

        adapter.on_results((hand,))
        adapter.on_results(())

        assert snapshot.latest() == ()
        assert visualizer.redraws == [(hand,), ()]
        assert adapter.frames_processed == 2

    def test_run_processes_camera_frames(self):
        log = []
        camera = FakeCamera(log, max_frames=3)
        camera.is_running = True
        hand = make_hand()
        snapshot = HandSnapshot()
        adapter = PresentationAdapter(camera, FakeDetector(log, hands=(hand,)), snapshot,
                                      FakeVisualizer())

        run(adapter.run())

        assert adapter.frames_processed == 3
        assert snapshot.latest() == (hand,)
