"""HTTP plumbing shared by the API resources: requests, errors and event streams."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

import httpx

COM_BASE_URL = "https://api.coze.com"
LOG_ID_HEADER = "X-Tt-Logid"

T = TypeVar("T")

LineParser = Callable[[Iterable[str]], Iterator[T]]


class CozeError(Exception):
    """An error reported by the API, either through a status code or a non-zero ``code``."""

    def __init__(
        self,
        code: int,
        message: str,
        log_id: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, log_id)
        self.code = code
        self.message = message
        self.log_id = log_id
        self.status_code = status_code

    def __str__(self) -> str:
        return f"code={self.code}, message={self.message}, logid={self.log_id}"


def _log_id(response: httpx.Response) -> str:
    return response.headers.get(LOG_ID_HEADER, "")


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _raise_for_payload(response: httpx.Response, payload: Any) -> None:
    """Raise CozeError if the response is an HTTP error or carries a non-zero code."""
    log_id = _log_id(response)
    if not isinstance(payload, dict):
        if response.is_error:
            raise CozeError(response.status_code, response.text or response.reason_phrase, log_id, response.status_code)
        raise CozeError(response.status_code, f"unexpected response body: {response.text!r}", log_id, response.status_code)
    code = payload.get("code") or 0
    message = payload.get("msg") or ""
    if response.is_error:
        raise CozeError(code or response.status_code, message or response.reason_phrase, log_id, response.status_code)
    if code != 0:
        raise CozeError(code, message, log_id, response.status_code)


class EventStream(Generic[T]):
    """Iterates over the events of a streamed response until the stream is done."""

    def __init__(self, response: httpx.Response, parser: LineParser[T]) -> None:
        self.response = response
        self.log_id = _log_id(response)
        self._events = parser(response.iter_lines())
        self._closed = False

    def __iter__(self) -> EventStream[T]:
        return self

    def __next__(self) -> T:
        if self._closed:
            raise StopIteration
        try:
            return next(self._events)
        except StopIteration:
            self.close()
            raise
        except BaseException:
            self.close()
            raise

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.response.close()

    def __enter__(self) -> EventStream[T]:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class HTTPCore:
    """Sends authorised requests to the API and checks their envelopes."""

    def __init__(
        self,
        token: str,
        base_url: str = COM_BASE_URL,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.Client(timeout=60.0)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> tuple[dict[str, Any], str]:
        """Send a request and return the decoded JSON envelope with the response's log id."""
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        response = self.http_client.request(
            method,
            self._url(path),
            json=body,
            params=query or None,
            headers=self._headers(),
        )
        payload = _decode_json(response)
        _raise_for_payload(response, payload)
        return payload, _log_id(response)

    def stream(
        self,
        method: str,
        path: str,
        body: Any,
        parser: LineParser[T],
    ) -> EventStream[T]:
        """Send a request whose answer is an event stream and return an iterator over it."""
        request = self.http_client.build_request(
            method, self._url(path), json=body, headers=self._headers()
        )
        response = self.http_client.send(request, stream=True)
        content_type = response.headers.get("Content-Type", "")
        if response.is_error or "application/json" in content_type:
            try:
                response.read()
            finally:
                if response.is_error:
                    response.close()
            payload = _decode_json(response)
            try:
                _raise_for_payload(response, payload)
            except CozeError:
                response.close()
                raise
        return EventStream(response, parser)

    def close(self) -> None:
        if self._owns_client:
            self.http_client.close()