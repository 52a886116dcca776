import json
from http.server import BaseHTTPRequestHandler, HTTPServer

from disint import InteractionAuthError, InteractionHandlerRegistry, InteractionReceiver

from _settings import load_settings


settings = load_settings()
registry = InteractionHandlerRegistry()


@registry.command("hello")
def _on_hello(interaction):
    return f"hello {interaction.member.nick_or_username}"


@registry.default()
def _on_other(interaction):
    print("[interaction]", interaction.command_name, interaction.id)
    return None


receiver = InteractionReceiver(registry, settings.public_key)


class _Handler(BaseHTTPRequestHandler):
    def do_POST(self) -> None:  # noqa: N802
        content_length = int(self.headers.get("Content-Length", "0"))
        body = self.rfile.read(content_length)
        headers = {str(k): str(v) for k, v in self.headers.items()}

        if self.path != "/interactions":
            self._write_json(404, {"error": "not found"})
            return
        try:
            payload = receiver.handle(headers, body)
        except InteractionAuthError as exc:
            self._write_json(exc.http_status, {"error": str(exc)})
            return
        except Exception as exc:
            self._write_json(500, {"error": str(exc)})
            return
        self._write_json(200, payload)

    def _write_json(self, status: int, payload: object) -> None:
        response_body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(response_body)))
        self.end_headers()
        self.wfile.write(response_body)


def main() -> None:
    server = HTTPServer(("127.0.0.1", 7777), _Handler)
    print("interaction endpoint: POST http://127.0.0.1:7777/interactions")
    server.serve_forever()


if __name__ == "__main__":
    main()
