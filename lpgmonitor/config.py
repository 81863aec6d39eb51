"""Runtime settings for the LPG monitor, read from the environment"""

import logging
import os

from dotenv import load_dotenv

# Load overrides from a local .env file if present
load_dotenv()

# Polling / liveness
POLL_INTERVAL_SECONDS = float(os.getenv("LPG_POLL_INTERVAL_SECONDS", "2.0"))
SWEEP_INTERVAL_SECONDS = float(os.getenv("LPG_SWEEP_INTERVAL_SECONDS", "10.0"))
HEARTBEAT_TIMEOUT_SECONDS = float(os.getenv("LPG_HEARTBEAT_TIMEOUT_SECONDS", "60.0"))

# Logging
LOG_LEVEL = os.getenv("LPG_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Reading history and device export
READING_LOG_PATH = os.getenv("LPG_READING_LOG_PATH", "/tmp/lpg_readings.json")
DEVICE_STORE_PATH = os.getenv("LPG_DEVICE_STORE_PATH", "/tmp/lpg_devices.json")

# Email/SMS gateway (unset disables those channels)
NOTIFY_GATEWAY_URL = os.getenv("LPG_NOTIFY_GATEWAY_URL")
NOTIFY_GATEWAY_TOKEN = os.getenv("LPG_NOTIFY_GATEWAY_TOKEN")


def setup_logging(level: str = None):
    """Configure root logging for command line use"""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
