"""Errors raised by the version update workflow.

Every failure carries a human readable ``message`` and a ``hint`` describing
how to fix it. The CLI is the only place that turns these into an exit code.
"""


class VersionUpdateError(Exception):
    hint = ""

    def __init__(self, message, hint=None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint

    def describe(self):
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class InvalidRequest(VersionUpdateError):
    def __init__(self, field):
        super().__init__(
            f"The required value '{field}' is missing or empty.",
            f"Please provide a non-empty value for '{field}'.",
        )
        self.field = field


class InvalidVersionFormat(VersionUpdateError):
    hint = "Required Syntax: MAJOR.MINOR.PATCH or MAJOR.MINOR.PATCH-preview.N (an optional leading 'v' is allowed)"

    def __init__(self, version):
        super().__init__(f"The version '{version}' is not a valid preview or production version.")
        self.version = version


class FileNotFound(VersionUpdateError):
    def __init__(self, branch, path):
        super().__init__(
            f"The version file '{path}' does not exist on the branch '{branch}' or the branch does not exist.",
            "Please make sure the branch and version file exist and try again.",
        )
        self.branch = branch
        self.path = path


class MarkerMissing(VersionUpdateError):
    def __init__(self, kind, path=None):
        location = f"The file '{path}'" if path else "The file"
        super().__init__(
            f"{location} does not contain a <{kind.tag}/> tag.",
            f"Please add a {kind.label} with the following syntax: {kind.open_tag}1.0.0{kind.close_tag}",
        )
        self.kind = kind
        self.path = path


class DuplicateMarker(VersionUpdateError):
    def __init__(self, kind, count, path=None):
        location = f"The file '{path}'" if path else "The file"
        super().__init__(
            f"{location} contains {count} <{kind.tag}/> tags.",
            f"Please make sure the file contains exactly one {kind.label}.",
        )
        self.kind = kind
        self.count = count
        self.path = path


class AlreadyAtVersion(VersionUpdateError):
    def __init__(self, kind, version, path=None):
        location = f" in the file '{path}'" if path else ""
        super().__init__(
            f"The version '{version}' is already set for the {kind.label}{location}.",
            "Please use a different version.",
        )
        self.kind = kind
        self.version = version
        self.path = path


class RemoteIOError(VersionUpdateError):
    def __init__(self, message, hint=None, status_code=None):
        super().__init__(message, hint)
        self.status_code = status_code


class VariableMissing(VersionUpdateError):
    def __init__(self, names):
        names = list(names)
        listing = "\n".join(f"The required org/repo variable '{name}' is missing." for name in names)
        super().__init__(listing, "Please create the missing variables in the organization or repository settings.")
        self.names = names
