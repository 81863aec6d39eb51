"""
Tests for the alert state machine
"""
import dataclasses
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from lpgmonitor.core.alert_engine import AlertEngine
from lpgmonitor.core.classifier import classify
from lpgmonitor.models.alert import AlertConfig, Channel, DispatchReport, RiskTier


class TestAlertStateMachine:
    """Test cases for tier transitions and snoozing"""

    @pytest.fixture
    def config(self):
        return AlertConfig(warning_threshold=1000, danger_threshold=2500, snooze_time_minutes=5)

    @pytest.fixture
    def engine(self, config, clock):
        return AlertEngine(config=config, clock=clock)

    def test_reading_sequence_within_snooze(self, engine, config, clock):
        """[300, 1200, 2600, 400] fires once, the escalation is snoozed"""
        tiers, fired = [], []
        for level in [300, 1200, 2600, 400]:
            tier = classify(level, config)
            tiers.append(tier)
            fired.append(engine.evaluate("lpg-001", tier, now=clock.now) is not None)
            if level == 2600:
                assert engine.state("lpg-001").snoozed_until is not None
            clock.advance(seconds=2)

        assert tiers == [RiskTier.SAFE, RiskTier.WARNING, RiskTier.DANGER, RiskTier.SAFE]
        assert fired == [False, True, False, False]
        assert engine.state("lpg-001").snoozed_until is None

    def test_reading_sequence_outside_snooze(self, engine, config, clock):
        """With readings far apart both escalations fire"""
        fired = []
        for level in [300, 1200, 2600, 400]:
            fired.append(engine.evaluate("lpg-001", classify(level, config), now=clock.now) is not None)
            clock.advance(minutes=6)

        assert fired == [False, True, True, False]

    def test_snooze_suppresses_repeat_danger(self, engine, clock):
        """Danger at t=0 fires, re-entry at t=3 is suppressed, t=6 fires"""
        start = clock.now
        assert engine.evaluate("lpg-001", RiskTier.DANGER, now=start) is not None
        engine.evaluate("lpg-001", RiskTier.WARNING, now=start + timedelta(minutes=1))
        assert engine.evaluate("lpg-001", RiskTier.DANGER, now=start + timedelta(minutes=3)) is None
        engine.evaluate("lpg-001", RiskTier.WARNING, now=start + timedelta(minutes=4))
        assert engine.evaluate("lpg-001", RiskTier.DANGER, now=start + timedelta(minutes=6)) is not None

    def test_escalation_during_snooze_is_not_resent(self, engine, clock):
        """warning -> danger inside the snooze window stays quiet"""
        engine.evaluate("lpg-001", RiskTier.WARNING, now=clock.now)
        result = engine.evaluate("lpg-001", RiskTier.DANGER, now=clock.now + timedelta(minutes=2))

        assert result is None
        assert engine.state("lpg-001").current_tier is RiskTier.DANGER

    def test_steady_tier_does_not_refire_after_snooze(self, engine, clock):
        """Only transitions fire, staying in danger does not"""
        engine.evaluate("lpg-001", RiskTier.DANGER, now=clock.now)
        assert engine.evaluate("lpg-001", RiskTier.DANGER, now=clock.now + timedelta(minutes=10)) is None

    def test_safe_rearms_alerts(self, engine, clock):
        """Returning to safe clears the snooze immediately"""
        engine.evaluate("lpg-001", RiskTier.DANGER, now=clock.now)
        engine.evaluate("lpg-001", RiskTier.SAFE, now=clock.now + timedelta(seconds=2))

        assert engine.state("lpg-001").snoozed_until is None
        assert engine.evaluate("lpg-001", RiskTier.WARNING, now=clock.now + timedelta(seconds=4)) is not None

    def test_snooze_is_per_device(self, engine, clock):
        engine.evaluate("lpg-001", RiskTier.DANGER, now=clock.now)
        assert engine.evaluate("lpg-002", RiskTier.DANGER, now=clock.now) is not None

    def test_snooze_length_follows_config(self, engine, clock):
        engine.evaluate("lpg-001", RiskTier.WARNING, now=clock.now)
        assert engine.state("lpg-001").snoozed_until == clock.now + timedelta(minutes=5)

    def test_state_created_lazily_and_forgotten(self, engine):
        assert engine.state("lpg-001") is None
        engine.evaluate("lpg-001", RiskTier.SAFE)
        assert engine.state("lpg-001").current_tier is RiskTier.SAFE

        engine.forget("lpg-001")
        assert engine.state("lpg-001") is None
        assert engine.states() == []


class TestNotificationGating:
    """Test cases for channels and evacuation advisories"""

    @pytest.fixture
    def engine(self, clock):
        return AlertEngine(clock=clock)

    def test_notification_uses_enabled_channels(self, engine):
        config = AlertConfig(enable_vibration=False, enable_email_notifications=True,
                             email_address="me@example.com")
        notification = engine.evaluate("lpg-001", RiskTier.WARNING, config)

        assert notification.channels == {Channel.AUDIO, Channel.EMAIL}
        assert notification.email_address == "me@example.com"
        assert notification.is_evacuation_advisory is False

    def test_danger_with_auto_evacuation_is_advisory(self, engine):
        notification = engine.evaluate("lpg-001", RiskTier.DANGER)
        assert notification.is_evacuation_advisory is True

    def test_danger_without_auto_evacuation(self, engine):
        config = AlertConfig(auto_evacuation_alert=False)
        assert engine.evaluate("lpg-001", RiskTier.DANGER, config).is_evacuation_advisory is False

    def test_evaluation_uses_config_snapshot(self, engine, clock):
        """A config passed in is used even if the engine's is replaced"""
        passed = AlertConfig(snooze_time_minutes=1)
        engine.replace_config(AlertConfig(snooze_time_minutes=30))

        engine.evaluate("lpg-001", RiskTier.WARNING, passed, now=clock.now)
        assert engine.state("lpg-001").snoozed_until == clock.now + timedelta(minutes=1)


class TestDispatch:
    """Test cases for fire-and-forget delivery"""

    @pytest.fixture
    def dispatcher(self):
        dispatcher = MagicMock()

        async def dispatch(notification):
            return DispatchReport(notification, results={c: True for c in notification.channels})

        dispatcher.dispatch = AsyncMock(side_effect=dispatch)
        return dispatcher

    @pytest.mark.asyncio
    async def test_fired_alert_is_dispatched(self, dispatcher, clock):
        engine = AlertEngine(dispatcher=dispatcher, clock=clock)
        reports = []
        engine.add_report_callback(reports.append)

        notification = engine.evaluate("lpg-001", RiskTier.DANGER)
        await engine.drain()

        dispatcher.dispatch.assert_awaited_once_with(notification)
        assert reports[0].succeeded

    @pytest.mark.asyncio
    async def test_suppressed_alert_is_not_dispatched(self, dispatcher, clock):
        engine = AlertEngine(dispatcher=dispatcher, clock=clock)
        engine.evaluate("lpg-001", RiskTier.WARNING)
        engine.evaluate("lpg-001", RiskTier.DANGER)
        await engine.drain()

        assert dispatcher.dispatch.await_count == 1

    @pytest.mark.asyncio
    async def test_dispatch_failure_leaves_state_alone(self, clock):
        """Delivery errors never change tier or snooze"""
        dispatcher = MagicMock()
        dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("smtp down"))
        engine = AlertEngine(dispatcher=dispatcher, clock=clock)

        engine.evaluate("lpg-001", RiskTier.DANGER)
        before = engine.state("lpg-001")
        await engine.drain()

        assert engine.state("lpg-001") == before
        assert before.current_tier is RiskTier.DANGER
        assert before.snoozed_until == clock.now + timedelta(minutes=5)

    @pytest.mark.asyncio
    async def test_failed_channels_are_reported(self, clock):
        dispatcher = MagicMock()

        async def dispatch(notification):
            return DispatchReport(notification, results={Channel.AUDIO: True, Channel.VIBRATION: False},
                                  errors={Channel.VIBRATION: "motor jammed"})

        dispatcher.dispatch = AsyncMock(side_effect=dispatch)
        engine = AlertEngine(dispatcher=dispatcher, clock=clock)
        reports = []
        engine.add_report_callback(reports.append)

        engine.evaluate("lpg-001", RiskTier.WARNING)
        await engine.drain()

        assert reports[0].failed_channels == {Channel.VIBRATION}

    @pytest.mark.asyncio
    async def test_no_channels_means_no_dispatch(self, dispatcher, clock):
        config = dataclasses.replace(AlertConfig(), enable_audio_alerts=False, enable_vibration=False)
        engine = AlertEngine(dispatcher=dispatcher, config=config, clock=clock)

        notification = engine.evaluate("lpg-001", RiskTier.DANGER)
        await engine.drain()

        assert notification.channels == frozenset()
        dispatcher.dispatch.assert_not_awaited()

    def test_evaluate_without_event_loop_does_not_raise(self, dispatcher, clock):
        engine = AlertEngine(dispatcher=dispatcher, clock=clock)
        assert engine.evaluate("lpg-001", RiskTier.DANGER) is not None
