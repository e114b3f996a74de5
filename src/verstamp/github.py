"""GitHub REST client and the contents API backed file store."""
import base64
from typing import Optional
from urllib.parse import quote, urljoin

import requests

from verstamp.errors import RemoteIOError
from verstamp.remote_store import RemoteFileStore
from verstamp.util import http_util, log
from verstamp.util.http_util import HttpEnvelope

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"

_STATUS_HINTS = {
    301: "The repository was moved permanently; use its new owner or name.",
    401: "The token is missing or invalid.",
    403: "The token does not have permission to access the repository contents.",
    404: "Please make sure the owner, repository, branch and file exist.",
    409: "The file was changed on the branch while updating it; please try again.",
    422: "GitHub rejected the request as invalid.",
}


class GitHubClient:
    def __init__(self, token: Optional[str] = None, base_url: str = DEFAULT_API_URL, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def has_token(self) -> bool:
        return "Authorization" in self.headers

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

    def request(self, method: str, path: str, query=None, body=None) -> HttpEnvelope:
        request_data = {
            "method": method,
            "url": self.url_for(path),
            "query": query,
            "body": body,
            "headers": self.headers,
            "timeout": self.timeout,
        }
        try:
            return http_util.execute(request_data)
        except requests.RequestException as e:
            raise RemoteIOError(
                f"Request to GitHub failed: {method.upper()} {request_data['url']}: {e}",
                "Please check the network connection and the GitHub API URL.",
            ) from e

    def get(self, path: str, query=None) -> HttpEnvelope:
        return self.request("get", path, query=query)

    def put(self, path: str, body) -> HttpEnvelope:
        return self.request("put", path, body=body)


def raise_for_status(response: HttpEnvelope, action: str):
    if response.ok:
        return
    status = response.status_code
    details = response.json() or {}
    message = details.get("message") if isinstance(details, dict) else None
    text = f"GitHub returned {status} when trying to {action}."
    if message:
        text += f" ({message})"
    hint = _STATUS_HINTS.get(status)
    if hint is None and status >= 500:
        hint = "GitHub is having problems; please try again later."
    raise RemoteIOError(text, hint, status_code=status)


class GitHubFileStore(RemoteFileStore):
    """Reads and commits repository files through the GitHub contents API."""

    def __init__(self, client: GitHubClient, owner: str, repo: str):
        self.client = client
        self.owner = owner
        self.repo = repo
        # blob sha of each fetched file, keyed by (branch, path)
        self._fetched_shas = {}

    def _contents_path(self, path: str) -> str:
        return "repos/%s/%s/contents/%s" % (quote(self.owner, safe=""), quote(self.repo, safe=""), quote(path, safe="/"))

    def _get_file(self, branch: str, path: str) -> HttpEnvelope:
        return self.client.get(self._contents_path(path), query={"ref": branch})

    def _get_file_model(self, branch: str, path: str) -> dict:
        response = self._get_file(branch, path)
        if response.status_code == 404:
            raise RemoteIOError(
                f"The file '{path}' could not be fetched from the branch '{branch}'.",
                "The file may have been removed after it was checked; please try again.",
                status_code=404,
            )
        raise_for_status(response, f"fetch '{path}' from '{branch}'")
        model = response.json()
        if not isinstance(model, dict) or model.get("type", "file") != "file":
            raise RemoteIOError(f"The path '{path}' on the branch '{branch}' is not a file.")
        return model

    def file_exists(self, branch: str, path: str) -> bool:
        response = self._get_file(branch, path)
        if response.status_code == 404:
            return False
        raise_for_status(response, f"check if '{path}' exists on '{branch}'")
        model = response.json()
        return isinstance(model, dict) and model.get("type", "file") == "file"

    def get_file_content(self, branch: str, path: str) -> str:
        model = self._get_file_model(branch, path)
        content = decode_content(model)
        self._fetched_shas[(branch, path)] = model.get("sha")
        return content

    def update_file(self, branch: str, path: str, new_content: str, commit_message: str) -> None:
        # the sha of the fetched blob, so a change committed since the fetch fails with a 409
        sha = self._fetched_shas.get((branch, path))
        if sha is None:
            sha = self._get_file_model(branch, path).get("sha")
        body = {
            "message": commit_message,
            "content": base64.b64encode(new_content.encode("utf-8")).decode("ascii"),
            "branch": branch,
            "sha": sha,
        }
        response = self.client.put(self._contents_path(path), body)
        raise_for_status(response, f"update '{path}' on '{branch}'")
        self._fetched_shas.pop((branch, path), None)
        log.debug(f"Committed '{log.text(path)}' to '{log.text(branch)}': {log.text(commit_message)}")


def decode_content(model: dict) -> str:
    encoding = model.get("encoding", "base64")
    content = model.get("content") or ""
    if encoding != "base64":
        raise RemoteIOError(f"Unsupported file content encoding '{encoding}' for '{model.get('path')}'.")
    try:
        return base64.b64decode(content).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        raise RemoteIOError(f"The content of '{model.get('path')}' could not be decoded: {e}") from e
