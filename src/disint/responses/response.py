from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Optional

from .embed import Embed
from .mentions import AllowedMentions


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5


@dataclass(frozen=True)
class ApplicationCommandCallbackData:
    content: Optional[str] = None
    tts: Optional[bool] = None
    embeds: Optional[tuple[Embed, ...]] = None
    allowed_mentions: Optional[AllowedMentions] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.tts is not None:
            payload["tts"] = self.tts
        if self.content is not None:
            payload["content"] = self.content
        if self.embeds is not None:
            payload["embeds"] = [embed.to_dict() for embed in self.embeds]
        if self.allowed_mentions is not None:
            payload["allowed_mentions"] = self.allowed_mentions.to_dict()
        return payload


@dataclass(frozen=True)
class InteractionResponse:
    type: InteractionResponseType
    data: Optional[ApplicationCommandCallbackData] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": int(self.type),
            "data": self.data.to_dict() if self.data is not None else None,
        }


class PongBuilder:
    def finish(self) -> InteractionResponse:
        return InteractionResponse(InteractionResponseType.PONG)


class DeferredBuilder:
    def finish(self) -> InteractionResponse:
        return InteractionResponse(InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE)


@dataclass
class _MessageParts:
    content: Optional[str] = None
    tts: Optional[bool] = None
    embeds: Optional[list[Embed]] = None
    allowed_mentions: Optional[AllowedMentions] = None


class ChannelMessageNoContentBuilder:
    """Channel message that has neither content nor an embed yet.

    It cannot be finished; supplying ``content`` or an ``embed`` moves it
    to a ``ChannelMessageBuilder``.
    """

    def __init__(self) -> None:
        self._parts = _MessageParts()

    def content(self, content: str) -> "ChannelMessageBuilder":
        return ChannelMessageBuilder(self._copy_parts()).content(content)

    def embed(self, embed: Embed) -> "ChannelMessageBuilder":
        return ChannelMessageBuilder(self._copy_parts()).embed(embed)

    def tts(self, tts: bool) -> "ChannelMessageNoContentBuilder":
        self._parts.tts = tts
        return self

    def allowed_mentions(self, allowed_mentions: AllowedMentions) -> "ChannelMessageNoContentBuilder":
        self._parts.allowed_mentions = allowed_mentions
        return self

    def _copy_parts(self) -> _MessageParts:
        embeds = list(self._parts.embeds) if self._parts.embeds is not None else None
        return replace(self._parts, embeds=embeds)


class ChannelMessageBuilder:
    def __init__(self, parts: _MessageParts) -> None:
        self._parts = parts

    def content(self, content: str) -> "ChannelMessageBuilder":
        self._parts.content = str(content)
        return self

    def embed(self, embed: Embed) -> "ChannelMessageBuilder":
        self._parts.embeds = [*(self._parts.embeds or []), embed]
        return self

    def tts(self, tts: bool) -> "ChannelMessageBuilder":
        self._parts.tts = tts
        return self

    def allowed_mentions(self, allowed_mentions: AllowedMentions) -> "ChannelMessageBuilder":
        self._parts.allowed_mentions = allowed_mentions
        return self

    def finish(self) -> InteractionResponse:
        parts = self._parts
        data = ApplicationCommandCallbackData(
            content=parts.content,
            tts=parts.tts,
            embeds=tuple(parts.embeds) if parts.embeds is not None else None,
            allowed_mentions=parts.allowed_mentions,
        )
        return InteractionResponse(InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, data)


class InteractionResponseBuilder:
    @staticmethod
    def pong() -> PongBuilder:
        return PongBuilder()

    @staticmethod
    def deferred() -> DeferredBuilder:
        return DeferredBuilder()

    @staticmethod
    def channel_message() -> ChannelMessageNoContentBuilder:
        return ChannelMessageNoContentBuilder()
