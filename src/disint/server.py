import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .config import InteractionConfig
from .exceptions import ConfigurationError, InteractionParseError
from .interactions import Interaction, InteractionHandlerRegistry, decode_interaction
from .security import (
    DEFAULT_TOLERANCE_SECONDS,
    Application,
    InteractionAuthError,
    InteractionAuthMiddleware,
    InteractionReceiver,
)
from .security.middleware import Receive, Scope, Send, read_body, send_json

logger = logging.getLogger(__name__)

InteractionHandler = Union[Callable[[Interaction], Any], Callable[[Interaction], Awaitable[Any]]]


@dataclass(frozen=True)
class InteractionServerStatus:
    started_at: float
    total_interactions: int
    rejected_requests: int
    last_interaction_at: Optional[float]
    last_command: Optional[str]
    command_counts: Dict[str, int] = field(default_factory=dict)
    last_error: Optional[str] = None


class InteractionServer:
    """ASGI application serving signed interactions on a single path.

    Every POST to ``path`` passes through ``InteractionAuthMiddleware``
    before the body is decoded and dispatched to the handler registry.
    """

    def __init__(
        self,
        application: Union[Application, str],
        *,
        registry: Optional[InteractionHandlerRegistry] = None,
        path: str = "/interactions",
        timestamp_tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if isinstance(application, str):
            application = Application.from_public_key(application)
        self._registry = registry or InteractionHandlerRegistry()
        self._path = _normalize_path(path)
        self._receiver = InteractionReceiver(self._registry, verify_signatures=False)
        self._authenticated = InteractionAuthMiddleware(
            self._endpoint,
            application,
            timestamp_tolerance_seconds=timestamp_tolerance_seconds,
            clock=clock,
            on_reject=self._record_rejection,
        )

        self._started_at = time.time()
        self._total_interactions = 0
        self._rejected_requests = 0
        self._last_interaction_at: Optional[float] = None
        self._last_command: Optional[str] = None
        self._command_counts: Dict[str, int] = {}
        self._last_error: Optional[str] = None

    @classmethod
    def from_config(
        cls,
        config: InteractionConfig,
        *,
        registry: Optional[InteractionHandlerRegistry] = None,
        path: str = "/interactions",
        clock: Optional[Callable[[], int]] = None,
    ) -> "InteractionServer":
        if not config.public_key:
            raise ConfigurationError("public_key is required to serve interactions")
        return cls(
            config.public_key,
            registry=registry,
            path=path,
            timestamp_tolerance_seconds=config.timestamp_tolerance_seconds,
            clock=clock,
        )

    @property
    def registry(self) -> InteractionHandlerRegistry:
        return self._registry

    @property
    def path(self) -> str:
        return self._path

    def on_command(self, command_name: str, handler: InteractionHandler) -> "InteractionServer":
        self._registry.register(command_name, handler)
        return self

    def on_default(self, handler: InteractionHandler) -> "InteractionServer":
        self._registry.register_default(handler)
        return self

    def command(self, command_name: str) -> Callable[[InteractionHandler], InteractionHandler]:
        return self._registry.command(command_name)

    def status(self) -> InteractionServerStatus:
        return InteractionServerStatus(
            started_at=self._started_at,
            total_interactions=self._total_interactions,
            rejected_requests=self._rejected_requests,
            last_interaction_at=self._last_interaction_at,
            last_command=self._last_command,
            command_counts=dict(self._command_counts),
            last_error=self._last_error,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        scope_type = scope.get("type")
        if scope_type == "lifespan":
            await _run_lifespan(receive, send)
            return
        if scope_type != "http":
            await send({"type": "websocket.close", "code": 1000})
            return
        if _normalize_path(str(scope.get("path") or "/")) != self._path:
            await send_json(send, 404, {"error": "not found"})
            return
        if str(scope.get("method", "")).upper() != "POST":
            await send_json(send, 405, {"error": "method not allowed"})
            return
        await self._authenticated(scope, receive, send)

    async def _endpoint(self, scope: Scope, receive: Receive, send: Send) -> None:
        raw_body = await read_body(receive)
        if raw_body is None:
            return
        try:
            interaction = decode_interaction(raw_body)
        except InteractionParseError as exc:
            self._last_error = f"{type(exc).__name__}: {exc}"
            await send_json(send, 400, {"error": "invalid interaction payload"})
            return

        command_name = interaction.command_name if interaction.is_application_command else "ping"
        self._record_interaction(command_name or "")
        if interaction.is_application_command and not self._registry.has_handler(command_name or ""):
            await send_json(send, 404, {"error": "unknown command"})
            return
        try:
            payload = await self._receiver.adispatch(interaction)
        except Exception as exc:
            self._last_error = f"{type(exc).__name__}: {exc}"
            logger.exception(
                "interaction_handler_failed",
                extra={"command": command_name, "interaction_id": interaction.id},
            )
            await send_json(send, 500, {"error": "interaction handler failed"})
            return
        await send_json(send, 200, payload)

    def _record_interaction(self, command_name: str) -> None:
        self._last_interaction_at = time.time()
        self._last_command = command_name
        self._total_interactions += 1
        self._command_counts[command_name] = self._command_counts.get(command_name, 0) + 1

    def _record_rejection(self, exc: InteractionAuthError) -> None:
        self._rejected_requests += 1
        self._last_error = f"{type(exc).__name__}: {exc}"


async def _run_lifespan(receive: Receive, send: Send) -> None:
    while True:
        message = await receive()
        message_type = message.get("type")
        if message_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return


def _normalize_path(path: str) -> str:
    normalized = path if path.startswith("/") else f"/{path}"
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized
