import json
from datetime import datetime, timezone
from typing import Any

import pytest

from disint.exceptions import InteractionParseError
from disint.interactions import (
    InteractionType,
    SubcommandOption,
    ValueOption,
    decode_interaction,
    parse_interaction,
)


def _command_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": 1,
        "id": "786008729715212338",
        "token": "A_UNIQUE_TOKEN",
        "type": 2,
        "guild_id": "290926798626357999",
        "channel_id": "645027906669510667",
        "member": {
            "user": {
                "id": "53908232506183680",
                "username": "Mason",
                "avatar": "a_d5efa99b3eeaa7dd43acca82f5692432",
                "discriminator": "1337",
                "public_flags": 131141,
            },
            "roles": ["539082325061836999"],
            "premium_since": None,
            "permissions": "2147483647",
            "pending": False,
            "nick": None,
            "mute": False,
            "joined_at": "2017-03-13T19:19:14.040000+00:00",
            "is_pending": False,
            "deaf": False,
        },
        "data": {
            "id": "771825006014889984",
            "name": "cardsearch",
            "options": [{"name": "cardname", "value": "The Gitrog Monster"}],
        },
    }
    payload.update(overrides)
    return payload


def test_parse_ping():
    interaction = decode_interaction(b'{"version":1,"id":"1","token":"tok","type":1}')
    assert interaction.type is InteractionType.PING
    assert interaction.is_ping is True
    assert interaction.member is None
    assert interaction.data is None
    assert interaction.command_name is None


def test_parse_application_command():
    interaction = parse_interaction(_command_payload())

    assert interaction.is_application_command is True
    assert interaction.interaction_id == 786008729715212338
    assert interaction.command_name == "cardsearch"
    assert interaction.guild_id == "290926798626357999"

    member = interaction.member
    assert member is not None
    assert member.role_ids == [539082325061836999]
    assert member.nick_or_username == "Mason"
    assert member.is_boosting is False
    assert member.joined_at == datetime(2017, 3, 13, 19, 19, 14, 40000, tzinfo=timezone.utc)
    assert member.user.username_and_discriminator == "Mason#1337"
    assert member.user.cdn_avatar_path == (
        "/avatars/53908232506183680/a_d5efa99b3eeaa7dd43acca82f5692432.gif"
    )
    assert member.user.is_bot is False

    option = interaction.data.get_option("cardname") if interaction.data else None
    assert isinstance(option, ValueOption)
    assert option.value == "The Gitrog Monster"
    assert interaction.raw["token"] == "A_UNIQUE_TOKEN"


def test_default_avatar_path_uses_discriminator():
    payload = _command_payload()
    payload["member"]["user"]["avatar"] = None
    payload["member"]["nick"] = "Gitrog"
    payload["member"]["premium_since"] = "2021-01-01T00:00:00Z"
    member = parse_interaction(payload).member

    assert member is not None
    assert member.user.cdn_avatar_path == "/embed/avatars/2.png"
    assert member.nick_or_username == "Gitrog"
    assert member.is_boosting is True


def test_parse_nested_subcommand_options():
    payload = _command_payload(
        data={
            "id": "1",
            "name": "config",
            "options": [
                {
                    "name": "set",
                    "options": [
                        {"name": "key", "value": "volume"},
                        {"name": "level", "value": 7},
                    ],
                }
            ],
        }
    )
    data = parse_interaction(payload).data
    assert data is not None
    subcommand = data.get_option("set")
    assert isinstance(subcommand, SubcommandOption)
    level = subcommand.get_option("level")
    assert isinstance(level, ValueOption)
    assert level.value.as_int() == 7
    assert subcommand.get_option("missing") is None


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"\xff\xfe",
        b"[]",
        b'{"version":1,"id":"1","token":"t","type":9}',
        b'{"version":1,"id":"1","token":"t","type":"1"}',
        b'{"id":"1","token":"t","type":1}',
    ],
)
def test_rejects_malformed_bodies(body: bytes):
    with pytest.raises(InteractionParseError):
        decode_interaction(body)


def test_application_command_requires_member_and_data():
    payload = _command_payload()
    del payload["member"]
    with pytest.raises(InteractionParseError):
        parse_interaction(payload)

    payload = _command_payload()
    payload["data"]["options"] = [{"name": "flag", "value": True}]
    with pytest.raises(InteractionParseError):
        decode_interaction(json.dumps(payload).encode("utf-8"))


@pytest.mark.parametrize(
    ("key", "value"),
    [("deaf", "false"), ("mute", 0), ("deaf", None)],
)
def test_member_voice_flags_must_be_booleans(key: str, value: Any):
    payload = _command_payload()
    payload["member"][key] = value
    with pytest.raises(InteractionParseError):
        parse_interaction(payload)

    del payload["member"][key]
    with pytest.raises(InteractionParseError):
        parse_interaction(payload)
