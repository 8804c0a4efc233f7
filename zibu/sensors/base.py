"""
Zibu - Sensor Interfaces
What the simulation expects from a device sensor it polls while playing.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class Sensor(ABC):
    """A device sensor that may be missing on the current host."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Open the sensor if the host has one.

        Returns:
            False when the host has no such sensor. The caller then carries
            on without it; this is not an error.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        pass

    @abstractmethod
    def is_ready(self) -> bool:
        pass

    @abstractmethod
    async def read(self) -> Any:
        """Take a single sample."""


class StreamingSensor(Sensor):
    """
    Sensor polled on a fixed interval.

    The simulation only streams while the play tool is armed and the app is
    in the foreground, so start/stop may be called many times per session.
    Both are idempotent.
    """

    @abstractmethod
    async def start_streaming(
        self,
        callback: Callable[[Any], None],
        interval_ms: float = 100,
    ) -> None:
        pass

    @abstractmethod
    async def stop_streaming(self) -> None:
        pass

    @abstractmethod
    def is_streaming(self) -> bool:
        pass
