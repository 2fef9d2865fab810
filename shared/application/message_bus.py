"""
Message Bus

Routes commands to the single use case that owns them and fans domain
events out to every interested app. Views talk to the bus instead of
importing services from another app, and apps subscribe to each other's
events from ``AppConfig.ready()``.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Commands have exactly one handler and return its result.
    Events may have any number of handlers and return nothing.
    """

    def __init__(self):
        self._commands: Dict[Type, Callable[[Any], Any]] = {}
        self._subscribers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        if command_type in self._commands:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._commands[command_type] = handler
        logger.debug(f"Command {command_type.__name__} -> {type(handler).__name__}")

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._commands

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler`` to ``event_type``; subscribing twice is a no-op."""
        subscribers = self._subscribers[event_type]
        if handler not in subscribers:
            subscribers.append(handler)
            logger.debug(f"{event_type.__name__} -> {handler.__name__}")

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler registered for ``type(command)``.

        Business refusals (exceptions with ``is_expected = True``, such
        as a full room) are logged at INFO; anything else at ERROR. The
        exception is re-raised either way so the API layer can map it.

        Raises:
            ValueError: nothing is registered for the command type
        """
        name = type(command).__name__
        handler = self._commands.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for command {name}")

        logger.info(f"Handling {name}")
        try:
            return handler(command)
        except Exception as e:
            if getattr(e, "is_expected", False):
                logger.info(f"{name} refused: {e}")
            else:
                logger.error(f"{name} failed: {e}", exc_info=True)
            raise

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Deliver each event to its subscribers.

        A failing subscriber is logged and skipped; the remaining
        subscribers still receive the event.
        """
        for event in events:
            name = type(event).__name__
            subscribers = self._subscribers.get(type(event), [])
            if not subscribers:
                logger.debug(f"{name} has no subscribers")
                continue

            logger.info(f"Publishing {event.to_dict()}")
            for handler in subscribers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"{handler.__name__} failed on {name} {event.event_id}: {e}",
                        exc_info=True,
                    )


message_bus = MessageBus()
