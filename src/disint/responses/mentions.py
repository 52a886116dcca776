from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Union


class AllowedMentionsKind(Enum):
    ALL = "all"
    NONE = "none"


MentionTargets = Union[AllowedMentionsKind, Sequence[str]]


@dataclass(frozen=True)
class AllowedMentions:
    """Which mentions in a message are allowed to ping.

    ``roles`` and ``users`` are either ``AllowedMentionsKind.ALL``,
    ``AllowedMentionsKind.NONE`` or an explicit list of snowflake ids.
    """

    roles: MentionTargets = AllowedMentionsKind.ALL
    users: MentionTargets = AllowedMentionsKind.ALL
    deny_mention_everyone: bool = False

    def to_dict(self) -> dict[str, Any]:
        parse: list[str] = []
        payload: dict[str, Any] = {"parse": parse}
        if not self.deny_mention_everyone:
            parse.append("everyone")
        _apply_targets(payload, "roles", self.roles)
        _apply_targets(payload, "users", self.users)
        return payload


def _apply_targets(payload: dict[str, Any], key: str, targets: MentionTargets) -> None:
    if targets is AllowedMentionsKind.ALL:
        payload["parse"].append(key)
        return
    if targets is AllowedMentionsKind.NONE:
        return
    payload[key] = [str(item) for item in targets]
