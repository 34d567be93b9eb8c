# tagbot/infrastructure/event_bus.py

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class EventBus:
    """
    Bot-wide publish/subscribe surface.
    
    Handlers are plain callables invoked synchronously, in registration
    order, on the event loop thread. A failing handler is logged and does
    not prevent the remaining handlers from running.
    """
    
    ERROR_EVENT = "error"
    
    def __init__(self):
        # Maps event name to its handlers
        self._handlers: Dict[str, List[Handler]] = {}
    
    def register(self, event: str, handler: Handler) -> Handler:
        """Register a handler for an event; returns the handler so it can be used as a decorator"""
        self._handlers.setdefault(event, []).append(handler)
        return handler
    
    def on(self, event: str) -> Callable[[Handler], Handler]:
        """Decorator form of register()"""
        def decorator(handler: Handler) -> Handler:
            return self.register(event, handler)
        return decorator
    
    def unregister(self, event: str, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored"""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._handlers.pop(event, None)
    
    def publish(self, event: str, *payload: Any) -> None:
        """
        Publish an event to every registered handler
        
        An error event with no subscribers is logged instead, so the
        failure stays observable.
        """
        handlers = list(self._handlers.get(event, []))
        
        if not handlers:
            if event == self.ERROR_EVENT:
                error = payload[0] if payload else None
                logger.error(f"Unhandled bot error: {error!r}")
            return
        
        for handler in handlers:
            try:
                handler(*payload)
            except Exception:
                logger.exception(f"Error in handler for '{event}' event")
