# tagbot/infrastructure/transport.py

"""
Socket.IO transport for the bot's channels.

Channel addresses look like "<host>:<port>/<path>". The host and port
become the Socket.IO server URL and the path becomes the namespace, so
"tagpro-a.example:81/groups/r1" connects to http://tagpro-a.example:81
on namespace /groups/r1.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from tagbot.config.settings import Settings, settings as default_settings
from tagbot.exceptions.bot_exceptions import SocketError

logger = logging.getLogger(__name__)


def split_address(address: str) -> Tuple[str, str]:
    """
    Split a channel address into a Socket.IO URL and namespace
    
    Args:
        address: "<host>[:<port>][/<path>]", scheme optional
        
    Returns:
        (url, namespace) tuple
    """
    if "://" not in address:
        address = f"http://{address}"
    
    parts = urlsplit(address)
    url = f"{parts.scheme}://{parts.netloc}"
    namespace = parts.path.rstrip("/") or "/"
    return url, namespace


class TransportSocket:
    """
    A Socket.IO client bound to a single namespace.
    
    The socket is built before the client connects. Named events that the
    server pushes before flush() is called (including those sent from its
    connect handler, which arrive with the handshake) are queued and
    replayed, in order, once the channel's handlers are in place.
    """
    
    # Lifecycle events the client reports itself; they bypass the queue
    LIFECYCLE_EVENTS = ("connect", "disconnect", "connect_error")
    
    def __init__(self, client: socketio.AsyncClient, address: str, namespace: str):
        self.client = client
        self.address = address
        self.namespace = namespace
        self.handlers: Dict[str, List[Callable[..., Any]]] = {}
        self.pending: List[Tuple[str, tuple]] = []
        self.flushed = False
        
        # Catch-all for every named event on this namespace
        self.client.on("*", self._dispatch, namespace=self.namespace)
    
    @property
    def connected(self) -> bool:
        return self.client.connected and self.namespace in self.client.namespaces
    
    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe a handler to a named inbound event on this namespace"""
        if event in self.LIFECYCLE_EVENTS:
            self.client.on(event, handler, namespace=self.namespace)
            return
        self.handlers.setdefault(event, []).append(handler)
    
    async def flush(self) -> None:
        """Replay queued events to the registered handlers and stop queueing"""
        while self.pending:
            event, args = self.pending.pop(0)
            await self._deliver(event, args)
        self.flushed = True
    
    async def _dispatch(self, event: str, *args: Any) -> None:
        if not self.flushed:
            self.pending.append((event, args))
            return
        await self._deliver(event, args)
    
    async def _deliver(self, event: str, args: tuple) -> None:
        handlers = self.handlers.get(event)
        if not handlers:
            logger.debug(f"No handler for '{event}' on {self.namespace}")
            return
        
        for handler in handlers:
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Error in '{event}' handler on {self.namespace}")
    
    async def emit(self, event: str, data: Any = None) -> None:
        await self.client.emit(event, data, namespace=self.namespace)
    
    async def disconnect(self) -> None:
        """Close the connection; closing an already closed socket is a no-op"""
        await self.client.disconnect()
    
    def __repr__(self) -> str:
        return f"<TransportSocket {self.address} connected={self.connected}>"


class Transport:
    """Opens Socket.IO connections authenticated with the bot session"""
    
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
    
    def _create_client(self) -> socketio.AsyncClient:
        return socketio.AsyncClient(
            reconnection=self.settings.SOCKET_RECONNECTION,
            logger=self.settings.SOCKETIO_LOGGER,
            engineio_logger=self.settings.SOCKETIO_LOGGER
        )
    
    async def open(self, address: str, session: Optional[str]) -> TransportSocket:
        """
        Open a connection to a channel address
        
        Args:
            address: Channel address
            session: Session token sent as a cookie
            
        Returns:
            TransportSocket for the address namespace
            
        Raises:
            SocketError: Connection could not be established
        """
        url, namespace = split_address(address)
        headers = {}
        if session:
            headers["Cookie"] = f"{self.settings.SESSION_COOKIE_NAME}={session}"
        
        client = self._create_client()
        # Wrap before connecting so events sent with the handshake are queued
        socket = TransportSocket(client, address, namespace)
        try:
            await client.connect(
                url,
                headers=headers,
                namespaces=[namespace],
                wait_timeout=self.settings.SOCKET_WAIT_TIMEOUT_SECONDS
            )
        except SocketIOConnectionError as e:
            logger.warning(f"Failed to connect to {address}: {e}")
            raise SocketError(f"Failed to connect to {address}: {e}", address=address) from e
        
        logger.info(f"Connected to {url} on namespace {namespace}")
        return socket
