# tagbot/infrastructure/host_client.py

"""
HTTP client for the game host.

Covers the two plain HTTP interactions the bot has with the host:
- acquiring a session cookie before any socket can be opened
- notifying the host that the bot left its group
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from tagbot.config.settings import Settings, settings as default_settings
from tagbot.exceptions.bot_exceptions import SessionError

logger = logging.getLogger(__name__)


class HostClient:
    """Session provider and leave notifier backed by aiohttp"""
    
    LEAVE_PATH = "/groups/leave/"
    
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
    
    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.settings.HTTP_TIMEOUT_SECONDS,
            connect=self.settings.HTTP_CONNECT_TIMEOUT_SECONDS,
        )
    
    @staticmethod
    def base_url(hostname: str) -> str:
        if hostname.startswith(("http://", "https://")):
            return hostname.rstrip("/")
        return f"http://{hostname}".rstrip("/")
    
    async def get_session(self, hostname: str) -> str:
        """
        Obtain a session token scoped to the game host
        
        Args:
            hostname: Game host to request the session from
            
        Returns:
            The session cookie value
            
        Raises:
            SessionError: Host unreachable, non-2xx answer or no session cookie
        """
        if not hostname:
            raise SessionError("Cannot acquire a session without a hostname", hostname=hostname)
        
        url = f"{self.base_url(hostname)}/"
        cookie_name = self.settings.SESSION_COOKIE_NAME
        
        try:
            async with aiohttp.ClientSession(timeout=self._timeout()) as http:
                async with http.get(url) as resp:
                    if resp.status < 200 or resp.status >= 300:
                        raise SessionError(
                            f"Session request failed with HTTP {resp.status}",
                            hostname=hostname,
                            details={"status": resp.status}
                        )
                    
                    morsel = resp.cookies.get(cookie_name)
                    if morsel is None:
                        # Cookie may have been set on a redirect hop
                        for cookie in http.cookie_jar:
                            if cookie.key == cookie_name:
                                morsel = cookie
                                break
                    
                    if morsel is None or not morsel.value:
                        raise SessionError(
                            f"Host did not set a '{cookie_name}' session cookie",
                            hostname=hostname
                        )
                    
                    logger.info(f"Acquired session from {hostname}")
                    return morsel.value
        except asyncio.TimeoutError as e:
            raise SessionError(f"Session request timed out: {url}", hostname=hostname) from e
        except aiohttp.ClientError as e:
            raise SessionError(f"Session request failed: {url}: {e}", hostname=hostname) from e
    
    async def leave_group(self, hostname: str, session: Optional[str]) -> None:
        """
        Tell the host the bot is leaving its group
        
        The response body and status are ignored.
        """
        url = f"{self.base_url(hostname)}{self.LEAVE_PATH}"
        cookies = {self.settings.SESSION_COOKIE_NAME: session} if session else None
        
        async with aiohttp.ClientSession(timeout=self._timeout(), cookies=cookies) as http:
            async with http.get(url) as resp:
                logger.debug(f"Leave notification to {url} answered HTTP {resp.status}")
