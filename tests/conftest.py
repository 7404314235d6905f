import json
from typing import Any, Dict, List, Optional, Tuple

import pytest


class FakeResponse:
    """Just enough of `requests.Response` for the clients under test."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        *,
        content: Optional[bytes] = None,
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        if content is None:
            content = b"" if body is None else json.dumps(body).encode("utf-8")
        self.content = content
        self.text = content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))


class FakeSession:
    """
    Minimal `requests.Session` stub. Responses are queued with `reply` and
    handed out in order; every call is recorded in `calls`.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._replies: List[FakeResponse] = []

    def reply(self, *args: Any, **kwargs: Any) -> "FakeSession":
        self._replies.append(FakeResponse(*args, **kwargs))
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method.upper(), url, kwargs))
        if not self._replies:
            raise AssertionError(f"unexpected request {method} {url}")
        return self._replies.pop(0)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    @property
    def last(self) -> Tuple[str, str, Dict[str, Any]]:
        return self.calls[-1]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()

