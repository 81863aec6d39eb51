"""
Gas level risk classification
"""
from ..models.alert import AlertConfig, RiskTier

# Level shown as a full gauge
MAX_DISPLAY_PPM = 5000


class ThresholdClassifier:
    """Maps a gas level to a risk tier using the configured thresholds"""

    @staticmethod
    def classify(level: int, config: AlertConfig) -> RiskTier:
        if level >= config.danger_threshold:
            return RiskTier.DANGER
        if level >= config.warning_threshold:
            return RiskTier.WARNING
        return RiskTier.SAFE

    @staticmethod
    def gas_level_percentage(level: int, max_display: int = MAX_DISPLAY_PPM) -> float:
        """Gas level as a 0-100 gauge value"""
        if max_display <= 0:
            return 100.0
        return max(0.0, min(level / max_display * 100.0, 100.0))


classify = ThresholdClassifier.classify
