from typing import Dict, Callable
import requests
from verstamp.util import log
from dataclasses import dataclass, field
from typing import Mapping, Any, Optional
import json

_supported_methods = {"get", "post", "put", "patch", "delete", "head"}
_session = None


@dataclass(frozen=True, slots=True)
class HttpEnvelope:
    """Immutable container for an HTTP response with lazy/optional JSON parsing."""
    status_code: int
    headers: Mapping[str, str]
    text: str
    url: str
    method: str
    links: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def has_body(self) -> bool:
        return len(self.text) > 0

    def json(self) -> Optional[Any]:
        """
        Returns parsed JSON, or None if:
        - body is empty
        - parsing fails (ValueError)
        """
        if not self.has_body():
            return None
        if len(self.text.strip()) == 0:
            return None

        try:
            return json.loads(self.text)
        except ValueError:
            return None

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        # case-insensitive lookup
        for k, v in self.headers.items():
            if k.lower() == name.lower():
                return v
        return default

    def next_page_url(self) -> Optional[str]:
        """URL of the next page from the 'Link' header, None on the last page."""
        return self.links.get("next", {}).get("url")

    @staticmethod
    def from_requests(resp: requests.Response) -> "HttpEnvelope":
        return HttpEnvelope(
            status_code=getattr(resp, "status_code", 0),
            headers=dict(getattr(resp, "headers", {})),
            text=getattr(resp, "text", ""),
            url=getattr(resp, "url", ""),
            method=getattr(resp.request, "method", ""),
            links=getattr(resp, "links", {}),
        )


def initialize_session(session=None):
    global _session
    _session = session or requests.Session()
    return _session


def execute(request_data: dict[str, object]) -> HttpEnvelope:
    method, payload = prepare_request_data(request_data)
    log.debug(f"{method.upper()} {log.text(payload.get('url'))}")
    r = do_request(method, **payload)
    envelope = HttpEnvelope.from_requests(r)
    log.debug(f"status: {envelope.status_code}")
    return envelope


def prepare_request_data(request_data: dict[str, object]) -> tuple[str, dict]:
    remap = {"query": "params", "body": "json"}
    request_data = {remap.get(k, k): v for k, v in request_data.items() if v is not None}
    method = request_data.pop("method", "").lower()
    return method, request_data


def do_request(method, **payload: Dict[str, Any]) -> requests.Response:
    assert method, "missing method"
    assert method in _supported_methods, f"unsupported method: {method}"

    request_function: Callable = getattr(_session, method)
    assert callable(request_function), f"Session function {method} is not callable"
    return request_function(**payload)


initialize_session()
