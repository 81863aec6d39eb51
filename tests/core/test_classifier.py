"""
Tests for threshold classification
"""
import dataclasses

import pytest

from lpgmonitor.core.classifier import ThresholdClassifier, classify
from lpgmonitor.models.alert import AlertConfig, RiskTier


class TestThresholdClassifier:
    """Test cases for ThresholdClassifier"""

    @pytest.fixture
    def config(self):
        return AlertConfig(warning_threshold=1000, danger_threshold=2500)

    @pytest.mark.parametrize("level,expected", [
        (0, RiskTier.SAFE),
        (999, RiskTier.SAFE),
        (1000, RiskTier.WARNING),
        (2499, RiskTier.WARNING),
        (2500, RiskTier.DANGER),
        (9000, RiskTier.DANGER),
    ])
    def test_threshold_boundaries(self, config, level, expected):
        """Thresholds are inclusive lower bounds"""
        assert classify(level, config) is expected

    def test_raising_danger_threshold_never_raises_tier(self, config):
        """Classification is monotonic in the danger threshold"""
        raised = dataclasses.replace(config, danger_threshold=3500)

        for level in range(0, 5000, 50):
            before = ThresholdClassifier.classify(level, config)
            after = ThresholdClassifier.classify(level, raised)
            assert after.severity <= before.severity

    def test_tier_changes_with_thresholds_alone(self, config):
        """The same level can change tier when thresholds are edited"""
        lowered = dataclasses.replace(config, warning_threshold=200, danger_threshold=400)
        assert classify(500, config) is RiskTier.SAFE
        assert classify(500, lowered) is RiskTier.DANGER

    @pytest.mark.parametrize("level,percentage", [(0, 0.0), (2500, 50.0), (6000, 100.0)])
    def test_gas_level_percentage(self, level, percentage):
        """Gauge percentage is clamped at 100"""
        assert ThresholdClassifier.gas_level_percentage(level) == percentage
