"""
Updates the version markers of a project file on a remote branch.

The update is a single linear pass:

    START -> VALIDATED -> EXISTS_CHECKED -> FETCHED -> MARKERS_PRESENT
          -> NOT_NO_OP -> REWRITTEN -> COMMITTED

Any failing guard raises a VersionUpdateError and ends the update. The file is
only ever written once, after every check has passed.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from verstamp import events, markers
from verstamp.errors import VersionUpdateError, InvalidRequest, FileNotFound, AlreadyAtVersion
from verstamp.remote_store import RemoteFileStore
from verstamp.util import log
from verstamp.version import normalize_version

STATUS_OK = "OK"
STATUS_FAILED = "FAILED"
COMMIT_MESSAGE = "release: updated version to v{version}"


class UpdateState(Enum):
    START = "start"
    VALIDATED = "validated"
    EXISTS_CHECKED = "exists_checked"
    FETCHED = "fetched"
    MARKERS_PRESENT = "markers_present"
    NOT_NO_OP = "not_no_op"
    REWRITTEN = "rewritten"
    COMMITTED = "committed"


def normalize_path(path: str) -> str:
    return path.strip().replace("\\", "/").lstrip("/")


@dataclass(frozen=True)
class UpdateRequest:
    owner: str
    repo: str
    branch: str
    file_path: str
    version: str
    token: Optional[str] = None

    def __post_init__(self):
        for name in ("owner", "repo", "branch", "file_path", "version"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise InvalidRequest(name)

    @staticmethod
    def create(owner, repo, branch, file_path, version, token=None) -> "UpdateRequest":
        """Builds a request from raw input, trimming values and normalizing the file path."""
        def clean(value):
            return value.strip() if isinstance(value, str) else value

        file_path = normalize_path(file_path) if isinstance(file_path, str) else file_path
        return UpdateRequest(
            owner=clean(owner),
            repo=clean(repo),
            branch=clean(branch),
            file_path=file_path,
            version=clean(version),
            token=clean(token) or None,
        )


@dataclass(frozen=True)
class UpdateResult:
    version: str
    commit_message: str
    content: str


class _Progress:
    def __init__(self):
        self.state = UpdateState.START

    def enter(self, state: UpdateState):
        self.state = state
        events.emit(events.STATE_ENTERED, state=state.value)


def update_version(store: RemoteFileStore, request: UpdateRequest, progress: _Progress = None) -> UpdateResult:
    progress = progress or _Progress()
    branch, path = request.branch, request.file_path

    version = normalize_version(request.version)
    progress.enter(UpdateState.VALIDATED)

    with events.phase_span("exists", branch=branch, path=path):
        exists = store.file_exists(branch, path)
    if not exists:
        raise FileNotFound(branch, path)
    progress.enter(UpdateState.EXISTS_CHECKED)

    with events.phase_span("fetch", branch=branch, path=path):
        blob = store.get_file_content(branch, path)
    progress.enter(UpdateState.FETCHED)

    current = markers.locate_markers(blob, path)
    progress.enter(UpdateState.MARKERS_PRESENT)

    for kind in markers.MarkerKind:
        if markers.is_noop(current[kind], version):
            raise AlreadyAtVersion(kind, version, path)
    progress.enter(UpdateState.NOT_NO_OP)

    updated = markers.rewrite_all(blob, version, path)
    progress.enter(UpdateState.REWRITTEN)

    commit_message = COMMIT_MESSAGE.format(version=version)
    with events.phase_span("commit", branch=branch, path=path):
        store.update_file(branch, path, updated, commit_message)
    progress.enter(UpdateState.COMMITTED)

    return UpdateResult(version=version, commit_message=commit_message, content=updated)


def run_update(store: RemoteFileStore, request: UpdateRequest):
    """
    Runs an update and returns (STATUS_OK, UpdateResult) or (STATUS_FAILED, error).
    Only VersionUpdateError is turned into a failed status, anything else propagates.
    """
    progress = _Progress()
    with events.with_context(owner=request.owner, repo=request.repo, branch=request.branch, path=request.file_path):
        events.emit(events.UPDATE_STARTED, version=request.version)
        try:
            result = update_version(store, request, progress)
        except VersionUpdateError as e:
            events.emit(events.UPDATE_FAILED, state=progress.state.value, error=e.message, error_type=type(e).__name__)
            return STATUS_FAILED, e

        log.info(
            f"Updated '{log.text(request.file_path)}' on '{log.text(request.branch)}' to version {log.text(result.version)}"
        )
        events.emit(events.UPDATE_FINISHED, version=result.version)
        return STATUS_OK, result
