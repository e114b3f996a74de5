"""Version markers embedded in a project file"""
import re
from enum import Enum
from functools import cache

from verstamp.errors import MarkerMissing, DuplicateMarker
from verstamp.version import VERSION_GRAMMAR, normalize_version
from verstamp.util import log


class MarkerKind(Enum):
    PRIMARY = ("Version", "version tag")
    FILE = ("FileVersion", "file version tag")

    def __init__(self, tag, label):
        self.tag = tag
        self.label = label

    @property
    def open_tag(self) -> str:
        return f"<{self.tag}>"

    @property
    def close_tag(self) -> str:
        return f"</{self.tag}>"


@cache
def marker_pattern(kind: MarkerKind) -> re.Pattern:
    # the value is captured on its own so a rewrite never touches the delimiters
    return re.compile(
        "(%s)(%s)(%s)" % (re.escape(kind.open_tag), VERSION_GRAMMAR, re.escape(kind.close_tag))
    )


def find_marker(blob: str, kind: MarkerKind, path: str = None) -> str:
    """Returns the full tag text of the single marker of the given kind."""
    matches = [m.group(0) for m in marker_pattern(kind).finditer(blob)]
    match matches:
        case [tag_text]:
            return tag_text
        case []:
            raise MarkerMissing(kind, path)
        case _:
            raise DuplicateMarker(kind, len(matches), path)


def extract_value(tag_text: str, kind: MarkerKind) -> str:
    return tag_text.removeprefix(kind.open_tag).removesuffix(kind.close_tag)


def is_noop(current: str, target: str) -> bool:
    return current.strip().lower() == normalize_version(target)


def locate_markers(blob: str, path: str = None) -> dict[MarkerKind, str]:
    """
    Finds every marker kind in the blob and returns the current value of each.
    Every kind is checked before returning so nothing gets rewritten when one is missing.
    """
    values = {}
    for kind in MarkerKind:
        tag_text = find_marker(blob, kind, path)
        values[kind] = extract_value(tag_text, kind)
        log.debug(f"Found {kind.label}: {tag_text}")
    return values


def rewrite(blob: str, kind: MarkerKind, target: str, path: str = None) -> str:
    version = normalize_version(target)
    # raises unless there is exactly one occurrence
    find_marker(blob, kind, path)
    return marker_pattern(kind).sub(lambda m: m.group(1) + version + m.group(3), blob, count=1)


def rewrite_all(blob: str, target: str, path: str = None) -> str:
    locate_markers(blob, path)
    for kind in MarkerKind:
        blob = rewrite(blob, kind, target, path)
    return blob
