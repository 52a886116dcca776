import argparse
import io
import json
from typing import Any

from Crypto.Signature import eddsa

from disint import cli
from disint.config import InteractionConfig

_SECRET_KEY = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
_PUBLIC_KEY_HEX = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"


def _sign(timestamp: str, body: bytes) -> str:
    signer = eddsa.new(eddsa.import_private_key(_SECRET_KEY), "rfc8032")
    return signer.sign(timestamp.encode("utf-8") + body).hex()


def _base_args(**overrides: Any) -> argparse.Namespace:
    data: dict[str, Any] = {
        "public_key": None,
        "application_id": None,
        "bot_token": None,
        "base_url": None,
        "timeout": None,
    }
    data.update(overrides)
    return argparse.Namespace(**data)


def test_build_config_prefers_explicit_args(monkeypatch: Any) -> None:
    monkeypatch.setenv("DISCORD_APPLICATION_ID", "env_app")
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "env_token")

    config = cli._build_config(_base_args(application_id="arg_app"))

    assert isinstance(config, InteractionConfig)
    assert config.application_id == "arg_app"
    assert config.bot_token == "env_token"
    assert config.base_url == "https://discord.com/api/v8"


def test_build_config_requires_bot_token(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)
    monkeypatch.setenv("DISCORD_APPLICATION_ID", "env_app")

    code = cli.main(["commands", "list", "--format", "json"])

    assert code == 2
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False
    assert "bot token" in payload["error"]


def test_check_key_json_output(capsys: Any) -> None:
    code = cli.main(["security", "check-key", "--public-key", _PUBLIC_KEY_HEX.upper(), "--format", "json"])
    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True, "public_key": _PUBLIC_KEY_HEX}


def test_check_key_reports_auth_error_exit_code(capsys: Any) -> None:
    code = cli.main(["security", "check-key", "--public-key", "abcd", "--format", "json"])
    assert code == 3
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"] == "invalid public key format (http_status=400)"


def test_verify_accepts_signed_body(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", _PUBLIC_KEY_HEX)
    body = '{"type":1}'
    signature = _sign("1700000000", body.encode("utf-8"))

    code = cli.main(
        [
            "security",
            "verify",
            "--timestamp",
            "1700000000",
            "--signature",
            signature,
            "--body-json",
            body,
            "--now",
            "1700000001",
            "--format",
            "json",
        ]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True}


def test_verify_reads_body_from_stdin_and_rejects_tampering(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", _PUBLIC_KEY_HEX)
    signature = _sign("1700000000", b'{"type":1}')
    monkeypatch.setattr("sys.stdin", io.StringIO('{"type":2}'))

    code = cli.main(
        [
            "security",
            "verify",
            "--timestamp",
            "1700000000",
            "--signature",
            signature,
            "--body-stdin",
            "--now",
            "1700000000",
        ]
    )

    assert code == 3
    assert "signature verification failed" in capsys.readouterr().err


def test_verify_requires_exactly_one_body_source(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", _PUBLIC_KEY_HEX)
    code = cli.main(["security", "verify", "--timestamp", "1", "--signature", "00", "--now", "1"])
    assert code == 2
    assert "exactly one" in capsys.readouterr().err


def test_fresh_reports_window(capsys: Any) -> None:
    code = cli.main(["security", "fresh", "--timestamp", "1000", "--now", "1005", "--format", "json"])
    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "fresh": False,
        "now": 1005,
        "timestamp": 1000,
        "tolerance_seconds": 5,
    }


def test_interaction_parse_from_file(tmp_path: Any, capsys: Any) -> None:
    body_path = tmp_path / "interaction.json"
    body_path.write_text(
        json.dumps({"version": 1, "id": "42", "token": "tok", "type": 1}),
        encoding="utf-8",
    )

    code = cli.main(["interaction", "parse", "--body-file", str(body_path), "--format", "json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["id"] == "42"
    assert payload["type"] == "ping"
    assert payload["command"] is None


def test_interaction_parse_invalid_body(capsys: Any) -> None:
    code = cli.main(["interaction", "parse", "--body-json", "{", "--format", "json"])
    assert code == 2
    assert json.loads(capsys.readouterr().out)["error"] == "interaction body is not valid json"


def test_commands_create_uses_service(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.setenv("DISCORD_APPLICATION_ID", "app_1")
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    captured: dict[str, Any] = {}

    def _fake_request_json(
        _self: Any,
        method: str,
        path: str,
        *,
        payload: Any = None,
        params: Any = None,
    ) -> dict[str, Any]:
        captured["method"] = method
        captured["path"] = path
        captured["payload"] = payload
        return {"id": "99", **(payload or {})}

    monkeypatch.setattr("disint.client.DiscordClient.request_json", _fake_request_json)

    code = cli.main(
        [
            "commands",
            "create",
            "--guild-id",
            "g_1",
            "--command-json",
            '{"name":"roll","description":"Roll dice"}',
            "--format",
            "json",
        ]
    )

    assert code == 0
    assert captured == {
        "method": "POST",
        "path": "/applications/app_1/guilds/g_1/commands",
        "payload": {"name": "roll", "description": "Roll dice"},
    }
    assert json.loads(capsys.readouterr().out) == {"name": "roll", "description": "Roll dice", "id": "99"}


def test_commands_delete_human_output(monkeypatch: Any, capsys: Any) -> None:
    monkeypatch.setenv("DISCORD_APPLICATION_ID", "app_1")
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    monkeypatch.setattr("disint.client.DiscordClient.request_json", lambda *_args, **_kwargs: None)

    code = cli.main(["commands", "delete", "--command-id", "99"])

    assert code == 0
    output = capsys.readouterr().out
    assert "deleted : 99" in output
    assert "ok      : True" in output


def test_http_errors_exit_with_code_4(monkeypatch: Any, capsys: Any) -> None:
    from disint.exceptions import HTTPRequestError

    monkeypatch.setenv("DISCORD_APPLICATION_ID", "app_1")
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")

    def _raise(*_args: Any, **_kwargs: Any) -> Any:
        raise HTTPRequestError("http request failed: 403", status_code=403, response_text="Missing Access")

    monkeypatch.setattr("disint.client.DiscordClient.request_json", _raise)

    code = cli.main(["commands", "list", "--format", "json"])

    assert code == 4
    assert "status_code=403" in json.loads(capsys.readouterr().out)["error"]


def test_serve_builds_server_from_config(monkeypatch: Any, capsys: Any) -> None:
    from disint.server import InteractionServer

    monkeypatch.setenv("DISCORD_PUBLIC_KEY", _PUBLIC_KEY_HEX)
    captured: dict[str, Any] = {}

    def _fake_run(app: Any, **kwargs: Any) -> None:
        captured["app"] = app
        captured.update(kwargs)

    monkeypatch.setattr("uvicorn.run", _fake_run)

    code = cli.main(["serve", "--port", "9000", "--path", "hooks", "--tolerance-seconds", "60", "--format", "json"])

    assert code == 0
    assert isinstance(captured["app"], InteractionServer)
    assert captured["app"].path == "/hooks"
    assert captured["port"] == 9000
    first_line = capsys.readouterr().out.splitlines()[0]
    assert json.loads(first_line) == {"status": "listening", "host": "127.0.0.1", "port": 9000, "path": "/hooks"}


def test_serve_rejects_key_that_is_not_a_curve_point(capsys: Any) -> None:
    code = cli.main(["serve", "--public-key", "ff" * 32, "--format", "json"])

    assert code == 3
    assert json.loads(capsys.readouterr().out)["error"] == "invalid public key format (http_status=400)"
