# tagbot/tests/test_bot.py

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from tagbot.bot import Bot
from tagbot.config.settings import Settings
from tagbot.infrastructure.transport import Transport


@pytest.mark.asyncio
class TestBotConstruction:
    
    async def test_options_override_settings(self, transport, host_client):
        settings = Settings(_env_file=None, HOSTNAME="env-host", ROOM="env-room", LOCATION="game")
        
        bot = Bot(hostname="h", room="r1", settings=settings, transport=transport, host_client=host_client)
        
        assert bot.hostname == "h"
        assert bot.group.room == "r1"
        assert bot.group.location == "game"
        assert bot.session is None
    
    async def test_settings_fallback(self, transport, host_client):
        settings = Settings(_env_file=None, HOSTNAME="env-host", SESSION="tok", ROOM="env-room")
        
        bot = Bot(settings=settings, transport=transport, host_client=host_client)
        
        assert bot.hostname == "env-host"
        assert bot.session == "tok"
        assert bot.group.default_address() == "env-host:81/groups/env-room"
        assert bot.joiner.default_address() == "env-host:81/games/find"
    
    async def test_session_replaced_wholesale(self, bot, host_client):
        bot.session = "manual"
        
        result = await bot.joiner.connect()
        
        assert result.ok
        assert bot.session == "manual"
        host_client.get_session.assert_not_called()


@pytest.mark.asyncio
class TestGroupEndToEnd:
    """Group connect from a fresh bot through handshake and identity"""
    
    async def test_group_connect_flow(self, bot, fake_socket, host_client):
        events = []
        bot.on("session", lambda session: events.append(("session", session)))
        bot.on("group-connected", lambda socket: events.append(("group-connected", socket)))
        
        result = await bot.group.connect()
        
        assert result.ok
        assert events == [("session", "s3cr3t"), ("group-connected", fake_socket)]
        assert bot.group.self_id is None
        assert fake_socket.touches() == []
        
        await fake_socket.trigger("connect")
        
        assert bot.group.self_id is None
        assert fake_socket.touches() == ["page"]
        
        await fake_socket.trigger("you", "m-9")
        
        assert bot.group.self_id == "m-9"
        assert fake_socket.touches() == ["page"]
    
    async def test_close_stops_everything(self, bot, fake_socket):
        await bot.group.connect()
        await fake_socket.trigger("connect")
        
        await bot.close()
        
        assert fake_socket.disconnect_calls == 1
        assert not bot.group.heartbeat.active
        assert not bot.group.connected


@pytest.mark.asyncio
class TestSpawn:
    
    async def test_spawned_task_tracked_until_done(self, bot):
        release = asyncio.Event()
        task = bot.spawn(release.wait(), name="waiter")
        
        assert task in bot._tasks
        release.set()
        await task
        await asyncio.sleep(0)
        
        assert task not in bot._tasks


@pytest.mark.asyncio
class TestHandshakeEvents:
    """Events the server emits from its connect handler reach the channel"""
    
    async def test_you_and_member_during_open_are_applied(self, test_settings, host_client):
        """Test that you/member pushed with the handshake are applied after group-connected"""
        client = MagicMock()
        client.connected = True
        client.namespaces = {"/groups/r1": "sid-1"}
        client.emit = AsyncMock()
        client.disconnect = AsyncMock()
        registered = {}
        client.on = MagicMock(side_effect=lambda event, handler, namespace="/": registered.__setitem__((event, namespace), handler))
        
        async def connect_and_push(url, **kwargs):
            catch_all = registered[("*", "/groups/r1")]
            await catch_all("you", "m-1")
            await catch_all("member", {"id": "m-1", "name": "Some Ball"})
        
        client.connect = AsyncMock(side_effect=connect_and_push)
        
        bot = Bot(
            hostname="h",
            room="r1",
            settings=test_settings,
            transport=Transport(test_settings),
            host_client=host_client
        )
        state_at_connected = []
        bot.on("group-connected", lambda socket: state_at_connected.append((bot.group.self_id, dict(bot.group.members))))
        
        try:
            with patch("tagbot.infrastructure.transport.socketio.AsyncClient", return_value=client):
                result = await bot.group.connect()
            
            assert result.ok
            assert state_at_connected == [(None, {})]
            assert bot.group.self_id == "m-1"
            assert bot.group.members == {"m-1": {"id": "m-1", "name": "Some Ball"}}
        finally:
            await bot.close()
