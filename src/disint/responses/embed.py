from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class Footer:
    text: str
    icon_url: Optional[str] = None
    proxy_icon_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {"text": self.text, "icon_url": self.icon_url, "proxy_icon_url": self.proxy_icon_url}
        )


@dataclass(frozen=True)
class Image:
    url: Optional[str] = None
    proxy_url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "url": self.url,
                "proxy_url": self.proxy_url,
                "height": self.height,
                "width": self.width,
            }
        )


@dataclass(frozen=True)
class Video:
    url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"url": self.url, "height": self.height, "width": self.width})


@dataclass(frozen=True)
class Provider:
    name: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"name": self.name, "url": self.url})


@dataclass(frozen=True)
class Author:
    name: Optional[str] = None
    url: Optional[str] = None
    icon_url: Optional[str] = None
    proxy_icon_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "name": self.name,
                "url": self.url,
                "icon_url": self.icon_url,
                "proxy_icon_url": self.proxy_icon_url,
            }
        )


@dataclass(frozen=True)
class Field:
    name: str
    value: str
    inline: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"name": self.name, "value": self.value, "inline": self.inline})


@dataclass(frozen=True)
class Embed:
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    timestamp: Optional[datetime] = None
    color: Optional[int] = None
    footer: Optional[Footer] = None
    image: Optional[Image] = None
    video: Optional[Video] = None
    provider: Optional[Provider] = None
    author: Optional[Author] = None
    fields: Optional[Sequence[Field]] = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "title": self.title,
                "description": self.description,
                "url": self.url,
                "timestamp": self.timestamp.isoformat() if self.timestamp is not None else None,
                "color": self.color,
                "footer": self.footer.to_dict() if self.footer is not None else None,
                "image": self.image.to_dict() if self.image is not None else None,
                "video": self.video.to_dict() if self.video is not None else None,
                "provider": self.provider.to_dict() if self.provider is not None else None,
                "author": self.author.to_dict() if self.author is not None else None,
                "fields": [item.to_dict() for item in self.fields] if self.fields is not None else None,
            }
        )
