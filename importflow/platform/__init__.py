"""Access to the hosted import platform: API client and event routing."""
from importflow.platform.client import PlatformClient
from importflow.platform.events import Event, Listener

__all__ = ["Event", "Listener", "PlatformClient"]
