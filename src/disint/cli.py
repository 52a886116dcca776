from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

from .client import DiscordClient
from .commands import ApplicationCommand, CommandService
from .config import InteractionConfig
from .exceptions import ConfigurationError, HTTPRequestError, InteractionParseError
from .interactions import decode_interaction
from .security import (
    Application,
    InteractionAuthError,
    is_fresh,
    parse_timestamp,
    verify_request,
)
from .security.freshness import current_timestamp
from .security.request import HEADER_SIGNATURE, HEADER_TIMESTAMP
from .server import InteractionServer

_DEFAULT_BASE_URL = "https://discord.com/api/v8"
_DEFAULT_TIMEOUT_SECONDS = 30.0
_DEFAULT_TOLERANCE_SECONDS = 5


def build_parser() -> argparse.ArgumentParser:
    shared = argparse.ArgumentParser(add_help=False)
    _add_global_args(shared)

    parser = argparse.ArgumentParser(
        prog="disint",
        description="Discord interaction toolkit powered by disint",
        parents=[shared],
    )
    subparsers = parser.add_subparsers(dest="group")
    subparsers.required = True

    _build_security_commands(subparsers, shared)
    _build_interaction_commands(subparsers, shared)
    _build_command_commands(subparsers, shared)
    _build_serve_command(subparsers, shared)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    output_format = "human"
    try:
        args = parser.parse_args(argv)
        output_format = str(args.output_format)
        handler = getattr(args, "handler", None)
        if handler is None:
            raise ValueError("missing command handler")
        result = handler(args)
        _print_result(result, output_format=output_format)
        return 0
    except SystemExit as exc:
        return _system_exit_code(exc)
    except ConfigurationError as exc:
        return _print_error(str(exc), exit_code=2, output_format=output_format)
    except InteractionParseError as exc:
        return _print_error(str(exc), exit_code=2, output_format=output_format)
    except ValueError as exc:
        return _print_error(str(exc), exit_code=2, output_format=output_format)
    except InteractionAuthError as exc:
        message = f"{exc} (http_status={exc.http_status})"
        return _print_error(message, exit_code=3, output_format=output_format)
    except HTTPRequestError as exc:
        return _print_error(_format_http_error(exc), exit_code=4, output_format=output_format)
    except Exception as exc:
        return _print_error(f"{type(exc).__name__}: {exc}", exit_code=1, output_format=output_format)


def _add_global_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("human", "json"),
        default="human",
        help="Output format. Default: human",
    )
    parser.add_argument("--public-key", help="Hex encoded Ed25519 public key of the application")
    parser.add_argument("--application-id", help="Discord application id")
    parser.add_argument("--bot-token", help="Bot token for REST API calls")
    parser.add_argument("--base-url", help=f"Discord API base url. Default: {_DEFAULT_BASE_URL}")
    parser.add_argument("--timeout", type=float, help=f"HTTP timeout seconds. Default: {_DEFAULT_TIMEOUT_SECONDS}")


def _build_security_commands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    shared: argparse.ArgumentParser,
) -> None:
    security_parser = subparsers.add_parser("security", help="Signature verification utilities")
    security_sub = security_parser.add_subparsers(dest="security_command")
    security_sub.required = True

    check_key = security_sub.add_parser("check-key", help="Validate a hex encoded public key", parents=[shared])
    check_key.set_defaults(handler=_cmd_security_check_key)

    verify = security_sub.add_parser("verify", help="Verify a signed interaction request", parents=[shared])
    verify.add_argument("--timestamp", required=True, help=f"{HEADER_TIMESTAMP} header value")
    verify.add_argument("--signature", required=True, help=f"{HEADER_SIGNATURE} header value")
    _add_body_args(verify)
    verify.add_argument("--now", type=int, help="Override current unix time (seconds)")
    verify.add_argument(
        "--tolerance-seconds",
        type=int,
        default=_DEFAULT_TOLERANCE_SECONDS,
        help=f"Timestamp tolerance seconds (default: {_DEFAULT_TOLERANCE_SECONDS})",
    )
    verify.set_defaults(handler=_cmd_security_verify)

    fresh = security_sub.add_parser("fresh", help="Check a timestamp against the freshness window", parents=[shared])
    fresh.add_argument("--timestamp", required=True, help="Claimed unix time (seconds)")
    fresh.add_argument("--now", type=int, help="Override current unix time (seconds)")
    fresh.add_argument(
        "--tolerance-seconds",
        type=int,
        default=_DEFAULT_TOLERANCE_SECONDS,
        help=f"Timestamp tolerance seconds (default: {_DEFAULT_TOLERANCE_SECONDS})",
    )
    fresh.set_defaults(handler=_cmd_security_fresh)


def _build_interaction_commands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    shared: argparse.ArgumentParser,
) -> None:
    interaction_parser = subparsers.add_parser("interaction", help="Interaction payload utilities")
    interaction_sub = interaction_parser.add_subparsers(dest="interaction_command")
    interaction_sub.required = True

    parse = interaction_sub.add_parser("parse", help="Parse an interaction body", parents=[shared])
    _add_body_args(parse)
    parse.add_argument("--include-payload", action="store_true", help="Include decoded payload in output")
    parse.set_defaults(handler=_cmd_interaction_parse)


def _build_command_commands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    shared: argparse.ArgumentParser,
) -> None:
    commands_parser = subparsers.add_parser("commands", help="Application command registration")
    commands_sub = commands_parser.add_subparsers(dest="commands_command")
    commands_sub.required = True

    list_commands = commands_sub.add_parser("list", help="List registered commands", parents=[shared])
    list_commands.add_argument("--guild-id", help="Guild id for guild commands")
    list_commands.set_defaults(handler=_cmd_commands_list)

    create = commands_sub.add_parser("create", help="Create a command from JSON", parents=[shared])
    create.add_argument("--guild-id", help="Guild id for guild commands")
    create.add_argument("--command-json", help="Command definition JSON string")
    create.add_argument("--command-file", help="Command definition JSON file path")
    create.set_defaults(handler=_cmd_commands_create)

    delete = commands_sub.add_parser("delete", help="Delete a command", parents=[shared])
    delete.add_argument("--guild-id", help="Guild id for guild commands")
    delete.add_argument("--command-id", required=True, help="Command id")
    delete.set_defaults(handler=_cmd_commands_delete)


def _build_serve_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    shared: argparse.ArgumentParser,
) -> None:
    serve = subparsers.add_parser("serve", help="Run a local interactions endpoint", parents=[shared])
    serve.add_argument("--host", default="127.0.0.1", help="Listen host (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Listen port (default: 8000)")
    serve.add_argument("--path", default="/interactions", help="Endpoint path (default: /interactions)")
    serve.add_argument(
        "--tolerance-seconds",
        type=int,
        default=_DEFAULT_TOLERANCE_SECONDS,
        help=f"Timestamp tolerance seconds (default: {_DEFAULT_TOLERANCE_SECONDS})",
    )
    serve.add_argument("--log-level", default="info", help="uvicorn log level (default: info)")
    serve.set_defaults(handler=_cmd_serve)


def _add_body_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--body-json", help="Raw request body string")
    parser.add_argument("--body-file", help="Raw request body file path")
    parser.add_argument("--body-stdin", action="store_true", help="Read raw request body from stdin")


def _cmd_security_check_key(args: argparse.Namespace) -> Mapping[str, Any]:
    application = Application.from_public_key(_resolve_public_key(args))
    return {"ok": True, "public_key": application.public_key_hex}


def _cmd_security_verify(args: argparse.Namespace) -> Mapping[str, bool]:
    application = Application.from_public_key(_resolve_public_key(args))
    raw_body = _resolve_raw_body(args)
    headers = {HEADER_TIMESTAMP: str(args.timestamp), HEADER_SIGNATURE: str(args.signature)}
    verify_request(
        application,
        headers,
        raw_body,
        tolerance_seconds=int(args.tolerance_seconds),
        now=getattr(args, "now", None),
    )
    return {"ok": True}


def _cmd_security_fresh(args: argparse.Namespace) -> Mapping[str, Any]:
    claimed = parse_timestamp(str(args.timestamp))
    now = getattr(args, "now", None)
    now_value = int(now) if now is not None else current_timestamp()
    tolerance = int(args.tolerance_seconds)
    return {
        "fresh": is_fresh(now_value, claimed, tolerance),
        "now": now_value,
        "timestamp": claimed,
        "tolerance_seconds": tolerance,
    }


def _cmd_interaction_parse(args: argparse.Namespace) -> Mapping[str, Any]:
    interaction = decode_interaction(_resolve_raw_body(args))
    result: dict[str, Any] = {
        "id": interaction.id,
        "type": interaction.type.name.lower(),
        "version": interaction.version,
        "command": interaction.command_name,
        "guild_id": interaction.guild_id,
        "channel_id": interaction.channel_id,
    }
    if interaction.member is not None:
        result["member"] = interaction.member.nick_or_username
    if getattr(args, "include_payload", False):
        result["payload"] = dict(interaction.raw)
    return result


def _cmd_commands_list(args: argparse.Namespace) -> list[Mapping[str, Any]]:
    service = _build_command_service(args)
    return [command.to_dict() for command in service.list_commands(guild_id=getattr(args, "guild_id", None))]


def _cmd_commands_create(args: argparse.Namespace) -> Mapping[str, Any]:
    payload = _parse_json_object(
        json_text=getattr(args, "command_json", None),
        file_path=getattr(args, "command_file", None),
        name="command",
    )
    service = _build_command_service(args)
    command = ApplicationCommand.from_mapping(payload)
    return service.create_command(command, guild_id=getattr(args, "guild_id", None)).to_dict()


def _cmd_commands_delete(args: argparse.Namespace) -> Mapping[str, Any]:
    service = _build_command_service(args)
    service.delete_command(str(args.command_id), guild_id=getattr(args, "guild_id", None))
    return {"ok": True, "deleted": str(args.command_id)}


def _cmd_serve(args: argparse.Namespace) -> Mapping[str, Any]:
    import uvicorn

    output_format = str(args.output_format)
    config = InteractionConfig(
        public_key=_resolve_public_key(args),
        application_id=getattr(args, "application_id", None) or os.getenv("DISCORD_APPLICATION_ID"),
        timestamp_tolerance_seconds=int(args.tolerance_seconds),
    )
    server = InteractionServer.from_config(config, path=str(args.path))

    def _on_interaction(interaction: Any) -> None:
        _print_stream_event(
            {"command": interaction.command_name, "id": interaction.id},
            output_format=output_format,
        )
        return None

    server.on_default(_on_interaction)
    _print_runtime_status(
        {"status": "listening", "host": args.host, "port": args.port, "path": server.path},
        output_format=output_format,
    )
    uvicorn.run(server, host=str(args.host), port=int(args.port), log_level=str(args.log_level))
    status = server.status()
    return {
        "status": "stopped",
        "interactions": status.total_interactions,
        "rejected": status.rejected_requests,
    }


def _build_command_service(args: argparse.Namespace) -> CommandService:
    return CommandService(DiscordClient(_build_config(args)))


def _build_config(args: argparse.Namespace) -> InteractionConfig:
    application_id = getattr(args, "application_id", None) or os.getenv("DISCORD_APPLICATION_ID")
    bot_token = getattr(args, "bot_token", None) or os.getenv("DISCORD_BOT_TOKEN")
    base_url = getattr(args, "base_url", None) or os.getenv("DISCORD_API_BASE_URL") or _DEFAULT_BASE_URL
    public_key = getattr(args, "public_key", None) or os.getenv("DISCORD_PUBLIC_KEY")
    if not application_id:
        raise ConfigurationError("missing application id: set DISCORD_APPLICATION_ID or pass --application-id")
    if not bot_token:
        raise ConfigurationError("missing bot token: set DISCORD_BOT_TOKEN or pass --bot-token")
    return InteractionConfig(
        public_key=public_key,
        application_id=application_id,
        bot_token=bot_token,
        base_url=base_url,
        timeout_seconds=_resolve_timeout_seconds(args),
    )


def _resolve_public_key(args: argparse.Namespace) -> str:
    public_key = getattr(args, "public_key", None) or os.getenv("DISCORD_PUBLIC_KEY")
    if not public_key:
        raise ConfigurationError("missing public key: set DISCORD_PUBLIC_KEY or pass --public-key")
    return str(public_key).strip()


def _resolve_timeout_seconds(args: argparse.Namespace) -> float:
    timeout = getattr(args, "timeout", None)
    if timeout is None:
        return _DEFAULT_TIMEOUT_SECONDS
    value = float(timeout)
    if value <= 0:
        raise ValueError("timeout must be positive")
    return value


def _resolve_raw_body(args: argparse.Namespace) -> bytes:
    body_json = getattr(args, "body_json", None)
    body_file = getattr(args, "body_file", None)
    stdin_enabled = bool(getattr(args, "body_stdin", False))
    provided = [item for item in (body_json is not None, body_file is not None, stdin_enabled) if item]
    if len(provided) != 1:
        raise ValueError("provide exactly one of --body-json, --body-file or --body-stdin")
    if body_json is not None:
        return str(body_json).encode("utf-8")
    if body_file is not None:
        return Path(str(body_file)).read_bytes()
    return _read_stdin_bytes()


def _parse_json_object(*, json_text: str | None, file_path: str | None, name: str) -> Mapping[str, Any]:
    if json_text is not None and file_path is not None:
        raise ValueError(f"provide only one of --{name}-json or --{name}-file")
    if json_text is None and file_path is None:
        raise ValueError(f"missing {name}: provide --{name}-json or --{name}-file")
    text = json_text if json_text is not None else Path(str(file_path)).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{name} is not valid json: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValueError(f"{name} must be a json object")
    return data


def _read_stdin_bytes() -> bytes:
    stream = getattr(sys.stdin, "buffer", None)
    if stream is None:
        return sys.stdin.read().encode("utf-8")
    data = stream.read()
    if isinstance(data, bytes):
        return data
    return bytes(data)


def _print_result(result: Any, *, output_format: str) -> None:
    normalized = _to_jsonable(result)
    if output_format == "json":
        print(json.dumps(normalized, ensure_ascii=False, indent=2))
        return
    _print_human(normalized)


def _print_human(result: Any) -> None:
    if result is None:
        print("OK")
        return
    if isinstance(result, Mapping):
        mapping = {str(key): value for key, value in result.items()}
        if not mapping:
            print("OK")
            return
        if _is_flat_mapping(mapping):
            width = max(len(key) for key in mapping)
            for key in sorted(mapping):
                print(f"{key:<{width}} : {mapping[key]}")
            return
        print(json.dumps(mapping, ensure_ascii=False, indent=2))
        return
    if isinstance(result, list):
        if not result:
            print("[]")
            return
        for index, item in enumerate(result, start=1):
            print(f"{index}. {item}")
        return
    print(result)


def _print_stream_event(event: Mapping[str, Any], *, output_format: str) -> None:
    if output_format == "json":
        print(json.dumps(_to_jsonable(event), ensure_ascii=False))
        return
    print(f"[interaction] command={event.get('command')} id={event.get('id')}")


def _print_runtime_status(payload: Mapping[str, Any], *, output_format: str) -> None:
    if output_format == "json":
        print(json.dumps(_to_jsonable(payload), ensure_ascii=False))
        return
    print(f"Listening on http://{payload.get('host')}:{payload.get('port')}{payload.get('path')}")


def _print_error(message: str, *, exit_code: int, output_format: str) -> int:
    if output_format == "json":
        print(
            json.dumps(
                {
                    "ok": False,
                    "error": message,
                    "exit_code": exit_code,
                },
                ensure_ascii=False,
            )
        )
    else:
        print(f"Error: {message}", file=sys.stderr)
    return exit_code


def _format_http_error(exc: HTTPRequestError) -> str:
    parts = [str(exc)]
    if exc.status_code is not None:
        parts.append(f"status_code={exc.status_code}")
    if exc.response_text:
        parts.append(f"response={exc.response_text[:500]}")
    return "; ".join(parts)


def _is_flat_mapping(mapping: Mapping[str, Any]) -> bool:
    for value in mapping.values():
        if isinstance(value, (dict, list, tuple, set)):
            return False
    return True


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _to_jsonable(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _system_exit_code(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1
