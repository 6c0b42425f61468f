"""Event objects and the listener that routes them to handlers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from importflow.core.errors import MissingSecretError

logger = logging.getLogger(__name__)

SecretResolver = Callable[[str], Optional[str]]
Handler = Callable[["Event"], Any]


def _no_secrets(name: str) -> Optional[str]:
    return None


@dataclass
class Event:
    """A platform event plus the capabilities scoped to it.

    ``context`` carries the platform identifiers (``spaceId``,
    ``environmentId``, ``workbookId``, ``sheetId``, ``jobId``, ``job``).
    Secrets are looked up through ``secret_resolver`` each time they are
    requested and never stored on the event.
    """

    topic: str
    context: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)
    secret_resolver: SecretResolver = field(default=_no_secrets, repr=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], secret_resolver: SecretResolver | None = None) -> "Event":
        return cls(
            topic=raw["topic"],
            context=dict(raw.get("context") or {}),
            payload=dict(raw.get("payload") or {}),
            secret_resolver=secret_resolver or _no_secrets,
        )

    def secrets(self, name: str) -> Optional[str]:
        return self.secret_resolver(name)

    def require_secret(self, name: str) -> str:
        """Return a secret's value or raise ``MissingSecretError`` when unset."""

        value = self.secrets(name)
        if not value:
            raise MissingSecretError(name)
        return value

    def matches(self, topic: str, filters: Dict[str, Any]) -> bool:
        if topic not in {"*", self.topic}:
            return False
        return all(self.context.get(key) == value for key, value in filters.items())


class Plugin(Protocol):
    def __call__(self, listener: "Listener") -> None: ...


@dataclass
class _Subscription:
    topic: str
    filters: Dict[str, Any]
    handler: Handler


class Listener:
    """Registry of handlers keyed by event topic and context filters."""

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []

    def on(self, topic: str, handler: Handler, filters: Dict[str, Any] | None = None) -> None:
        """Subscribe ``handler`` to ``topic`` events whose context matches ``filters``."""

        self._subscriptions.append(_Subscription(topic, dict(filters or {}), handler))

    def use(self, plugin: Plugin) -> None:
        """Let a plugin register its own subscriptions."""

        plugin(self)

    def handlers_for(self, event: Event) -> List[Handler]:
        return [sub.handler for sub in self._subscriptions if event.matches(sub.topic, sub.filters)]

    def dispatch(self, event: Event) -> int:
        """Run every matching handler in registration order.

        Returns the number of handlers invoked. A failing handler is logged
        and its exception re-raised, so the host reports the event as failed.
        """

        handlers = self.handlers_for(event)
        if not handlers:
            logger.info("No handlers registered for %s", event.topic)
            return 0

        for handler in handlers:
            name = getattr(handler, "__name__", repr(handler))
            logger.info("Running %s for %s", name, event.topic)
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %s failed for %s", name, event.topic)
                raise
        return len(handlers)
