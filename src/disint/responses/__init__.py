from .embed import Author, Embed, Field, Footer, Image, Provider, Video
from .mentions import AllowedMentions, AllowedMentionsKind
from .response import (
    ApplicationCommandCallbackData,
    ChannelMessageBuilder,
    ChannelMessageNoContentBuilder,
    DeferredBuilder,
    InteractionResponse,
    InteractionResponseBuilder,
    InteractionResponseType,
    PongBuilder,
)

__all__ = [
    "AllowedMentions",
    "AllowedMentionsKind",
    "ApplicationCommandCallbackData",
    "Author",
    "ChannelMessageBuilder",
    "ChannelMessageNoContentBuilder",
    "DeferredBuilder",
    "Embed",
    "Field",
    "Footer",
    "Image",
    "InteractionResponse",
    "InteractionResponseBuilder",
    "InteractionResponseType",
    "PongBuilder",
    "Provider",
    "Video",
]
