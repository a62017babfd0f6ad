"""
Navigator Module

Records the client-side route transitions a session asks for and forwards each one
to whoever is listening (the session's WebSocket, when the client holds one open).
Clients polling over REST read the latest route from the session snapshot instead.

Author: @kcaparas1630
"""

from typing import Awaitable, Callable, List, Optional
from loguru import logger

NavigationListener = Callable[[str], Awaitable[None]]


class Navigator:
    def __init__(self):
        self.history: List[str] = []
        self._listeners: List[NavigationListener] = []

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def subscribe(self, listener: NavigationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: NavigationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def push(self, route: str) -> None:
        self.history.append(route)
        logger.info(f"Navigating to {route}")
        for listener in list(self._listeners):
            try:
                await listener(route)
            except Exception as e:
                # A dead listener must not stop the session from finishing
                logger.warning(f"Navigation listener failed for {route}: {e}")
