#!/usr/bin/env python3
"""
LPG monitor demo using the simulated reading source
"""

import asyncio
import json
import logging
import os
from typing import List

from lpgmonitor import (
    Channel,
    ConsoleExporter,
    ConsoleNotifier,
    Device,
    GasMonitor,
    HttpNotifier,
    JsonFileExporter,
    NotificationDispatcher,
    SimulatedReadingSource,
)
from lpgmonitor import config

config.setup_logging()
logger = logging.getLogger(__name__)

DEFAULT_DEVICES = [
    ("Kitchen Sensor", "Kitchen Area", "192.168.1.101"),
    ("Garage Sensor", "Garage", "192.168.1.102"),
    ("Basement Sensor", "Basement", "192.168.1.103"),
]


def build_dispatcher() -> NotificationDispatcher:
    dispatcher = NotificationDispatcher({
        Channel.AUDIO: ConsoleNotifier(Channel.AUDIO),
        Channel.VIBRATION: ConsoleNotifier(Channel.VIBRATION),
    })

    if config.NOTIFY_GATEWAY_URL:
        for channel in (Channel.EMAIL, Channel.SMS):
            notifier = HttpNotifier(config.NOTIFY_GATEWAY_URL, channel=channel)
            if config.NOTIFY_GATEWAY_TOKEN:
                notifier.set_authentication("Bearer", config.NOTIFY_GATEWAY_TOKEN)
            dispatcher.register(channel, notifier)
    return dispatcher


def load_devices(path: str) -> List[Device]:
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as file:
            return [Device.from_dict(record) for record in json.load(file)]
    except (json.JSONDecodeError, IOError, TypeError, ValueError, KeyError) as e:
        logger.warning(f"Could not read device store {path}: {e}")
        return []


def save_devices(path: str, devices: List[Device]):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as file:
        json.dump([device.to_dict() for device in devices], file, indent=2, ensure_ascii=False)
    logger.info(f"Saved {len(devices)} devices to {path}")


async def main():
    logger.info("Starting LPG monitor demo")

    json_exporter = JsonFileExporter(config.READING_LOG_PATH, append_mode=True, max_records=10000)
    monitor = GasMonitor(
        SimulatedReadingSource(),
        dispatcher=build_dispatcher(),
        exporters=[json_exporter],
    )
    monitor.loop.exporters.append(ConsoleExporter(config_provider=lambda: monitor.config))

    # Devices first, so history is only rebuilt for devices that still exist
    monitor.restore(load_devices(config.DEVICE_STORE_PATH), json_exporter.load())
    if not monitor.list_devices():
        for name, location, ip_address in DEFAULT_DEVICES:
            monitor.add_device(name, location, ip_address)

    monitor.start()
    print("\nMonitoring... (Ctrl+C to stop)")
    print("=" * 60)

    try:
        while True:
            await asyncio.sleep(30)
            for device in monitor.list_devices():
                state = monitor.alert_state(device.id)
                tier = state.current_tier.value if state else "n/a"
                print(f"{device} tier={tier}")
    finally:
        await monitor.stop()
        save_devices(config.DEVICE_STORE_PATH, monitor.list_devices())
        logger.info("Monitor stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting")
