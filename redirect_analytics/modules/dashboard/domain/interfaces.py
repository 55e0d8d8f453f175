"""
Domain interfaces for the dashboard module.
"""
from abc import ABC, abstractmethod
from typing import Any


class AnalyticsSource(ABC):
    """Source of raw event and aggregate payloads."""

    @abstractmethod
    async def fetch_events(self) -> Any:
        """
        Fetch the tracking event list.

        Returns:
            Parsed JSON: a list of event objects or the API envelope

        Raises:
            AnalyticsSourceError: If the payload cannot be delivered
        """
        pass

    @abstractmethod
    async def fetch_aggregates(self) -> Any:
        """
        Fetch per-source aggregate statistics.

        Returns:
            Parsed JSON: a list of aggregate objects or the API envelope

        Raises:
            AnalyticsSourceError: If the payload cannot be delivered
        """
        pass
