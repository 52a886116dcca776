from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError, InteractionHandlerError
from ..interactions import Interaction, InteractionHandlerRegistry, decode_interaction
from ..responses import (
    ChannelMessageBuilder,
    DeferredBuilder,
    InteractionResponse,
    InteractionResponseBuilder,
    PongBuilder,
)
from .application import Application
from .freshness import DEFAULT_TOLERANCE_SECONDS
from .request import verify_request

_FinishableBuilder = (PongBuilder, DeferredBuilder, ChannelMessageBuilder)


class InteractionReceiver:
    """Authenticates, decodes and dispatches raw interaction requests.

    ``handle`` is framework-agnostic: it takes the request headers and the
    raw body bytes exactly as received and returns the JSON-ready reply.
    Authentication failures propagate as ``InteractionAuthError`` subclasses
    carrying their HTTP status.
    """

    def __init__(
        self,
        handler_registry: InteractionHandlerRegistry,
        application: Union[Application, str, None] = None,
        *,
        verify_signatures: bool = True,
        timestamp_tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    ) -> None:
        if isinstance(application, str):
            application = Application.from_public_key(application)
        if verify_signatures and application is None:
            raise ConfigurationError("a public key is required when signature verification is enabled")
        self._handlers = handler_registry
        self._application = application
        self._verify_signatures = verify_signatures
        self._timestamp_tolerance_seconds = timestamp_tolerance_seconds

    def handle(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        *,
        now: Optional[int] = None,
    ) -> Dict[str, Any]:
        self._validate_signature(headers, raw_body, now)
        interaction = decode_interaction(raw_body)
        if interaction.is_ping:
            return _pong()
        return normalize_handler_result(self._handlers.dispatch(interaction))

    async def ahandle(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        *,
        now: Optional[int] = None,
    ) -> Dict[str, Any]:
        self._validate_signature(headers, raw_body, now)
        interaction = decode_interaction(raw_body)
        return await self.adispatch(interaction)

    async def adispatch(self, interaction: Interaction) -> Dict[str, Any]:
        if interaction.is_ping:
            return _pong()
        return normalize_handler_result(await self._handlers.adispatch(interaction))

    def _validate_signature(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        now: Optional[int],
    ) -> None:
        if not self._verify_signatures or self._application is None:
            return
        verify_request(
            self._application,
            headers,
            raw_body,
            tolerance_seconds=self._timestamp_tolerance_seconds,
            now=now,
        )


def normalize_handler_result(result: Any) -> Dict[str, Any]:
    if result is None:
        return InteractionResponseBuilder.deferred().finish().to_dict()
    if isinstance(result, InteractionResponse):
        return result.to_dict()
    if isinstance(result, _FinishableBuilder):
        return result.finish().to_dict()
    if isinstance(result, str):
        return InteractionResponseBuilder.channel_message().content(result).finish().to_dict()
    if isinstance(result, Mapping):
        return {str(k): v for k, v in result.items()}
    raise InteractionHandlerError(
        f"handler result must be an InteractionResponse, builder, str, mapping or None, got {type(result).__name__}"
    )


def _pong() -> Dict[str, Any]:
    return {"type": int(InteractionResponseBuilder.pong().finish().type)}
