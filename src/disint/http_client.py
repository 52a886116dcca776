from typing import Any, Mapping, Optional

import httpx

from .exceptions import HTTPRequestError


def _build_request_kwargs(
    method_upper: str,
    *,
    headers: Optional[Mapping[str, str]],
    params: Optional[Mapping[str, object]],
    payload: Optional[Any],
    timeout_seconds: float,
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "headers": dict(headers or {}),
        "params": dict(params or {}),
        "timeout": timeout_seconds,
    }
    if method_upper not in {"GET", "DELETE"} and payload is not None:
        kwargs["json"] = payload
    return kwargs


def _decode_response(response: httpx.Response) -> Any:
    if response.status_code >= 400:
        raise HTTPRequestError(
            f"http request failed: {response.status_code}",
            status_code=response.status_code,
            response_text=response.text,
            response_headers=dict(response.headers),
        )
    if response.status_code == 204 or not response.content:
        return None
    try:
        data = response.json()
    except ValueError as exc:
        raise HTTPRequestError("response body is not valid json") from exc
    if not isinstance(data, (dict, list)):
        raise HTTPRequestError("response body is not a json object or array")
    return data


class JsonHttpClient:
    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        session: Optional[httpx.Client] = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._session = session or httpx.Client()

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, object]] = None,
        payload: Optional[Any] = None,
        timeout_seconds: Optional[float] = None,
    ) -> Any:
        method_upper = method.upper()
        response = self._session.request(
            method_upper,
            url,
            **_build_request_kwargs(
                method_upper,
                headers=headers,
                params=params,
                payload=payload,
                timeout_seconds=timeout_seconds or self._timeout_seconds,
            ),
        )
        return _decode_response(response)

    def close(self) -> None:
        self._session.close()


class AsyncJsonHttpClient:
    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = client or httpx.AsyncClient()

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, object]] = None,
        payload: Optional[Any] = None,
        timeout_seconds: Optional[float] = None,
    ) -> Any:
        method_upper = method.upper()
        response = await self._client.request(
            method_upper,
            url,
            **_build_request_kwargs(
                method_upper,
                headers=headers,
                params=params,
                payload=payload,
                timeout_seconds=timeout_seconds or self._timeout_seconds,
            ),
        )
        return _decode_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()
