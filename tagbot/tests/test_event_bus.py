# tagbot/tests/test_event_bus.py

import logging
import pytest
from unittest.mock import MagicMock

from tagbot.infrastructure.event_bus import EventBus


@pytest.mark.unit
class TestEventBus:
    """Test cases for the bot-wide publish/subscribe surface"""
    
    def test_publish_reaches_handlers_in_order(self):
        bus = EventBus()
        calls = []
        bus.register("session", lambda s: calls.append(("first", s)))
        bus.register("session", lambda s: calls.append(("second", s)))
        
        bus.publish("session", "abc")
        
        assert calls == [("first", "abc"), ("second", "abc")]
    
    def test_multiple_payload_values(self):
        bus = EventBus()
        handler = MagicMock()
        bus.register("game-update", handler)
        
        bus.publish("game-update", "time", 42)
        
        handler.assert_called_once_with("time", 42)
    
    def test_decorator_registration(self):
        bus = EventBus()
        received = []
        
        @bus.on("group-connected")
        def handle(socket):
            received.append(socket)
        
        bus.publish("group-connected", "sock")
        
        assert received == ["sock"]
    
    def test_unregister(self):
        bus = EventBus()
        handler = MagicMock()
        bus.register("error", handler)
        
        bus.unregister("error", handler)
        bus.unregister("error", handler)
        bus.publish("error", RuntimeError("after unregister"))
        
        handler.assert_not_called()
    
    def test_publish_without_handlers_is_silent(self):
        bus = EventBus()
        
        bus.publish("joiner-connected", object())
    
    def test_unhandled_error_is_logged(self, caplog):
        """Test that an error event with no subscriber ends up in the logs"""
        bus = EventBus()
        
        with caplog.at_level(logging.ERROR, logger="tagbot.infrastructure.event_bus"):
            bus.publish("error", RuntimeError("lost"))
        
        assert "lost" in caplog.text
    
    def test_failing_handler_does_not_stop_others(self, caplog):
        bus = EventBus()
        after = MagicMock()
        bus.register("session", MagicMock(side_effect=ValueError("bad handler")))
        bus.register("session", after)
        
        with caplog.at_level(logging.ERROR):
            bus.publish("session", "abc")
        
        after.assert_called_once_with("abc")
        assert "Error in handler for 'session' event" in caplog.text
