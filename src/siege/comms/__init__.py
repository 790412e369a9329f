"""Battle event messaging."""
from .event_bus import EventBus

__all__ = ["EventBus"]
