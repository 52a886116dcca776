import json
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, MutableMapping, Optional, Union

from ..exceptions import ConfigurationError
from .application import Application
from .errors import InteractionAuthError
from .freshness import DEFAULT_TOLERANCE_SECONDS, current_timestamp, verify_timestamp
from .request import extract_signature_headers

if TYPE_CHECKING:
    from ..config import InteractionConfig

logger = logging.getLogger(__name__)

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]
RejectCallback = Callable[[InteractionAuthError], None]


class InteractionAuthMiddleware:
    """ASGI middleware that authenticates signed interaction requests.

    Requests without a fresh, valid Ed25519 signature over
    ``timestamp ++ body`` are answered with an error response and never
    reach the wrapped application. Verified requests are forwarded with a
    ``receive`` callable that replays the exact buffered body.
    """

    def __init__(
        self,
        app: ASGIApp,
        application: Union[Application, str],
        *,
        timestamp_tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        clock: Optional[Callable[[], int]] = None,
        on_reject: Optional[RejectCallback] = None,
    ) -> None:
        if isinstance(application, str):
            application = Application.from_public_key(application)
        self._app = app
        self._application = application
        self._tolerance_seconds = timestamp_tolerance_seconds
        self._clock = clock or current_timestamp
        self._on_reject = on_reject

    @classmethod
    def from_config(
        cls,
        app: ASGIApp,
        config: "InteractionConfig",
        *,
        clock: Optional[Callable[[], int]] = None,
        on_reject: Optional[RejectCallback] = None,
    ) -> "InteractionAuthMiddleware":
        if not config.public_key:
            raise ConfigurationError("public_key is required to authenticate interactions")
        return cls(
            app,
            config.public_key,
            timestamp_tolerance_seconds=config.timestamp_tolerance_seconds,
            clock=clock,
            on_reject=on_reject,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self._app(scope, receive, send)
            return

        headers = _decode_headers(scope)
        try:
            timestamp, signature = extract_signature_headers(headers)
            verify_timestamp(
                timestamp,
                tolerance_seconds=self._tolerance_seconds,
                now=self._clock(),
            )
        except InteractionAuthError as exc:
            await self._reject(send, exc)
            return

        logger.debug("interaction_signature_verifying", extra={"signature_timestamp": timestamp})
        body = await read_body(receive)
        if body is None:
            logger.debug("interaction_client_disconnected")
            return

        try:
            self._application.verify(body, timestamp, signature)
        except InteractionAuthError as exc:
            await self._reject(send, exc)
            return

        await self._app(scope, _replay_receive(body, receive), send)

    async def _reject(self, send: Send, exc: InteractionAuthError) -> None:
        logger.warning(
            "interaction_rejected",
            extra={"error": type(exc).__name__, "status_code": exc.http_status},
        )
        if self._on_reject is not None:
            self._on_reject(exc)
        await send_json(send, exc.http_status, {"error": str(exc)})


async def send_json(send: Send, status_code: int, payload: Any) -> None:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    await send(
        {
            "type": "http.response.start",
            "status": status_code,
            "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode("ascii")),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body, "more_body": False})


def _decode_headers(scope: Scope) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for name, value in scope.get("headers") or []:
        key = name.decode("latin-1").lower()
        if key not in headers:
            headers[key] = value.decode("latin-1")
    return headers


async def read_body(receive: Receive) -> Optional[bytes]:
    chunks = bytearray()
    while True:
        message = await receive()
        message_type = message.get("type")
        if message_type == "http.disconnect":
            return None
        if message_type != "http.request":
            continue
        chunks.extend(message.get("body", b""))
        if not message.get("more_body", False):
            return bytes(chunks)


def _replay_receive(body: bytes, receive: Receive) -> Receive:
    replayed = False

    async def _receive() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return _receive
