"""
Zibu - Sensor Module
Device sensors feeding the simulation.
"""

from .accelerometer import MockAccelerometer
from .base import Sensor, StreamingSensor

__all__ = [
    "Sensor",
    "StreamingSensor",
    "MockAccelerometer",
]
