import inspect
import threading
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .models import Interaction

SyncInteractionHandler = Callable[[Interaction], Any]
AsyncInteractionHandler = Callable[[Interaction], Awaitable[Any]]
_RegisteredHandler = Union[SyncInteractionHandler, AsyncInteractionHandler]


def is_async_handler(handler: _RegisteredHandler) -> bool:
    return inspect.iscoroutinefunction(handler)


class InteractionHandlerRegistry:
    """Maps application command names to handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, _RegisteredHandler] = {}
        self._default_handler: Optional[_RegisteredHandler] = None
        self._lock = threading.RLock()

    def register(self, command_name: str, handler: _RegisteredHandler) -> None:
        if not command_name:
            raise ValueError("command_name must not be empty")
        with self._lock:
            self._handlers[command_name] = handler

    def register_default(self, handler: _RegisteredHandler) -> None:
        with self._lock:
            self._default_handler = handler

    def unregister(self, command_name: str) -> None:
        with self._lock:
            self._handlers.pop(command_name, None)

    def command(self, command_name: str) -> Callable[[_RegisteredHandler], _RegisteredHandler]:
        def _decorator(handler: _RegisteredHandler) -> _RegisteredHandler:
            self.register(command_name, handler)
            return handler

        return _decorator

    def default(self) -> Callable[[_RegisteredHandler], _RegisteredHandler]:
        def _decorator(handler: _RegisteredHandler) -> _RegisteredHandler:
            self.register_default(handler)
            return handler

        return _decorator

    def get_handler(self, command_name: str) -> Optional[_RegisteredHandler]:
        with self._lock:
            handler = self._handlers.get(command_name)
            if handler is not None:
                return handler
            return self._default_handler

    def has_handler(self, command_name: str) -> bool:
        return self.get_handler(command_name) is not None

    def dispatch(self, interaction: Interaction) -> Any:
        command_name = interaction.command_name or ""
        handler = self.get_handler(command_name)
        if handler is None:
            raise KeyError(f"interaction handler not found: {command_name}")
        if is_async_handler(handler):
            raise RuntimeError("async handler is not supported by dispatch(), use adispatch()")
        return handler(interaction)

    async def adispatch(self, interaction: Interaction) -> Any:
        command_name = interaction.command_name or ""
        handler = self.get_handler(command_name)
        if handler is None:
            raise KeyError(f"interaction handler not found: {command_name}")
        result = handler(interaction)
        if inspect.isawaitable(result):
            return await result
        return result
