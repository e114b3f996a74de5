import re

from verstamp.errors import InvalidVersionFormat

# shared with the marker matchers so both accept exactly the same values
VERSION_GRAMMAR = r"[0-9]+\.[0-9]+\.[0-9]+(?:-preview\.[0-9]+)?"
_VERSION_RE = re.compile(VERSION_GRAMMAR)


def normalize_version(raw: str) -> str:
    """
    Trims, lower-cases and strips a single leading 'v' from a version,
    then checks it against MAJOR.MINOR.PATCH[-preview.N].
    Raises InvalidVersionFormat if what's left doesn't match.
    """
    if raw is None:
        raise InvalidVersionFormat(raw)

    version = raw.strip().lower()
    if version.startswith("v"):
        version = version[1:]

    if not _VERSION_RE.fullmatch(version):
        raise InvalidVersionFormat(raw)

    return version


def is_valid_version(raw: str) -> bool:
    try:
        normalize_version(raw)
        return True
    except InvalidVersionFormat:
        return False


def is_preview(version: str) -> bool:
    return "-preview." in normalize_version(version)
