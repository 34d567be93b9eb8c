"""
Pytest configuration and fixtures for testing
"""
import pytest
from unittest.mock import AsyncMock

from tagbot.bot import Bot
from tagbot.config.settings import Settings
from tagbot.tests.test_helpers import FakeSocket


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file"""
    return Settings(_env_file=None, HEARTBEAT_INTERVAL_SECONDS=30.0)


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()


@pytest.fixture
def transport(fake_socket: FakeSocket) -> AsyncMock:
    """Transport whose open() is a spy returning fake_socket"""
    transport = AsyncMock()
    transport.open = AsyncMock(return_value=fake_socket)
    return transport


@pytest.fixture
def host_client() -> AsyncMock:
    """Host client that hands out the session "s3cr3t" and accepts leave notifications"""
    client = AsyncMock()
    client.get_session = AsyncMock(return_value="s3cr3t")
    client.leave_group = AsyncMock(return_value=None)
    return client


@pytest.fixture
async def bot(test_settings: Settings, transport: AsyncMock, host_client: AsyncMock):
    """Bot for host "h", room "r1", wired to the fakes"""
    bot = Bot(
        hostname="h",
        room="r1",
        settings=test_settings,
        transport=transport,
        host_client=host_client
    )
    
    yield bot
    
    # Stop heartbeats and drain background tasks
    await bot.close()
