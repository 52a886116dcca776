import asyncio
import json
from typing import Any

import pytest
from Crypto.Signature import eddsa

from disint.exceptions import ConfigurationError, InteractionHandlerError
from disint.interactions import Interaction, InteractionHandlerRegistry
from disint.responses import InteractionResponseBuilder
from disint.security import (
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    InteractionReceiver,
    NoSignatureError,
    VerificationError,
)

_SECRET_KEY = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
_PUBLIC_KEY_HEX = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"


def _signed_headers(timestamp: str, body: bytes) -> dict[str, str]:
    signer = eddsa.new(eddsa.import_private_key(_SECRET_KEY), "rfc8032")
    return {
        HEADER_TIMESTAMP: timestamp,
        HEADER_SIGNATURE: signer.sign(timestamp.encode("utf-8") + body).hex(),
    }


def _command_body(name: str) -> bytes:
    return json.dumps(
        {
            "version": 1,
            "id": "1",
            "token": "tok",
            "type": 2,
            "guild_id": "10",
            "channel_id": "20",
            "member": {
                "user": {"id": "30", "username": "Mason", "discriminator": "1337"},
                "roles": [],
                "joined_at": "2017-03-13T19:19:14.040000+00:00",
                "deaf": False,
                "mute": False,
            },
            "data": {"id": "40", "name": name, "options": [{"name": "who", "value": "world"}]},
        }
    ).encode("utf-8")


def test_receiver_answers_ping_with_pong():
    receiver = InteractionReceiver(InteractionHandlerRegistry(), _PUBLIC_KEY_HEX)
    body = b'{"version":1,"id":"1","token":"tok","type":1}'

    response = receiver.handle(_signed_headers("1700000000", body), body, now=1700000000)

    assert response == {"type": 1}


def test_receiver_dispatches_command_to_handler():
    registry = InteractionHandlerRegistry()
    received: list[str] = []

    @registry.command("hello")
    def _hello(interaction: Interaction) -> Any:
        received.append(interaction.command_name or "")
        option = interaction.data.get_option("who") if interaction.data else None
        return InteractionResponseBuilder.channel_message().content(f"hello {option.value}")  # type: ignore[union-attr]

    receiver = InteractionReceiver(registry, _PUBLIC_KEY_HEX)
    body = _command_body("hello")

    response = receiver.handle(_signed_headers("1700000000", body), body, now=1700000001)

    assert received == ["hello"]
    assert response == {"type": 4, "data": {"content": "hello world"}}


def test_receiver_rejects_before_dispatch():
    registry = InteractionHandlerRegistry()
    calls: list[Interaction] = []
    registry.register_default(calls.append)
    receiver = InteractionReceiver(registry, _PUBLIC_KEY_HEX)
    body = _command_body("hello")

    with pytest.raises(NoSignatureError):
        receiver.handle({}, body, now=1700000000)
    with pytest.raises(VerificationError):
        receiver.handle(_signed_headers("1700000000", body), body + b"\n", now=1700000000)
    assert calls == []


def test_receiver_without_verification_requires_explicit_opt_out():
    with pytest.raises(ConfigurationError):
        InteractionReceiver(InteractionHandlerRegistry())

    registry = InteractionHandlerRegistry()
    registry.register_default(lambda interaction: None)
    receiver = InteractionReceiver(registry, verify_signatures=False)

    assert receiver.handle({}, _command_body("anything")) == {"type": 5, "data": None}


@pytest.mark.parametrize(
    ("result", "expected"),
    [
        ("plain text", {"type": 4, "data": {"content": "plain text"}}),
        ({"type": 4, "data": {"content": "raw"}}, {"type": 4, "data": {"content": "raw"}}),
        (InteractionResponseBuilder.deferred(), {"type": 5, "data": None}),
        (InteractionResponseBuilder.pong().finish(), {"type": 1, "data": None}),
    ],
)
def test_receiver_normalizes_handler_results(result: Any, expected: dict[str, Any]):
    registry = InteractionHandlerRegistry()
    registry.register("hello", lambda interaction: result)
    receiver = InteractionReceiver(registry, verify_signatures=False)

    assert receiver.handle({}, _command_body("hello")) == expected


def test_receiver_rejects_unsupported_handler_result():
    registry = InteractionHandlerRegistry()
    registry.register("hello", lambda interaction: 42)
    receiver = InteractionReceiver(registry, verify_signatures=False)

    with pytest.raises(InteractionHandlerError):
        receiver.handle({}, _command_body("hello"))


def test_receiver_async_handle_supports_coroutine_handlers():
    registry = InteractionHandlerRegistry()

    async def _hello(interaction: Interaction) -> str:
        await asyncio.sleep(0)
        return "async hello"

    registry.register("hello", _hello)
    receiver = InteractionReceiver(registry, _PUBLIC_KEY_HEX)
    body = _command_body("hello")

    with pytest.raises(RuntimeError):
        receiver.handle(_signed_headers("1700000000", body), body, now=1700000000)

    response = asyncio.run(receiver.ahandle(_signed_headers("1700000000", body), body, now=1700000000))
    assert response == {"type": 4, "data": {"content": "async hello"}}


def test_unknown_command_raises_key_error():
    receiver = InteractionReceiver(InteractionHandlerRegistry(), verify_signatures=False)
    with pytest.raises(KeyError):
        receiver.handle({}, _command_body("missing"))
