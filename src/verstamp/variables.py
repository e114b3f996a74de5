"""
Organization and repository GitHub Actions variables.

Release preparation keeps the head branch and the project file location in
variables, so a release can be cut from a version number alone.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote

from verstamp.errors import VariableMissing
from verstamp.github import GitHubClient, raise_for_status
from verstamp.util import log

PREV_PREP_RELEASE_HEAD_BRANCH = "PREV_PREP_RELEASE_HEAD_BRANCH"
PROD_PREP_RELEASE_HEAD_BRANCH = "PROD_PREP_RELEASE_HEAD_BRANCH"
PREP_PROJ_RELATIVE_FILE_PATH = "PREP_PROJ_RELATIVE_FILE_PATH"
PAGE_SIZE = 30

# required up front for either release type
RELEASE_VARIABLES = [PREP_PROJ_RELATIVE_FILE_PATH, PREV_PREP_RELEASE_HEAD_BRANCH, PROD_PREP_RELEASE_HEAD_BRANCH]


class ReleaseType(Enum):
    PREVIEW = "preview"
    PRODUCTION = "production"

    @property
    def branch_variable(self) -> str:
        if self is ReleaseType.PREVIEW:
            return PREV_PREP_RELEASE_HEAD_BRANCH
        return PROD_PREP_RELEASE_HEAD_BRANCH


@dataclass(frozen=True)
class GitHubVariable:
    name: str
    value: str
    visibility: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @staticmethod
    def from_json(d: dict) -> "GitHubVariable":
        return GitHubVariable(
            name=d["name"],
            value=d.get("value", ""),
            visibility=d.get("visibility"),
            created_at=d.get("created_at"),
            updated_at=d.get("updated_at"),
        )


def list_variables(client: GitHubClient, path: str, missing_ok: bool = False) -> list[GitHubVariable]:
    """Returns every variable of a listing, following the 'next' links until the last page."""
    result = []
    url = path
    query = {"per_page": PAGE_SIZE}
    while url:
        response = client.get(url, query=query)
        if response.status_code == 404 and missing_ok:
            log.debug(f"No variables found at {log.text(path)}")
            return []
        raise_for_status(response, f"list the variables at '{path}'")
        page = response.json() or {}
        result.extend(GitHubVariable.from_json(v) for v in page.get("variables", []))
        url = response.next_page_url()
        # the next link already carries the query
        query = None
    return result


class VariableService:
    def __init__(self, client: GitHubClient, owner: str, repo: str):
        self.client = client
        self.owner = owner
        self.repo = repo
        self._cache: Optional[dict[str, GitHubVariable]] = None

    def _load(self) -> dict[str, GitHubVariable]:
        if self._cache is None:
            owner, repo = quote(self.owner, safe=""), quote(self.repo, safe="")
            # org variables are not available for user accounts
            org_vars = list_variables(self.client, f"orgs/{owner}/actions/variables", missing_ok=True)
            repo_vars = list_variables(self.client, f"repos/{owner}/{repo}/actions/variables")
            variables = {v.name: v for v in org_vars}
            variables.update({v.name: v for v in repo_vars})
            self._cache = variables
        return self._cache

    def get_value(self, name: str, required: bool = True) -> str:
        variable = self._load().get(name)
        if variable is None:
            if required:
                raise VariableMissing([name])
            return ""
        return variable.value.strip()

    def missing(self, names) -> list[str]:
        variables = self._load()
        return [name for name in names if name not in variables]

    def resolve_release_target(self, release_type: ReleaseType) -> tuple[str, str]:
        """Returns the (branch, file path) to update for the given release type."""
        missing = self.missing(RELEASE_VARIABLES)
        if missing:
            raise VariableMissing(missing)
        branch = self.get_value(release_type.branch_variable)
        file_path = self.get_value(PREP_PROJ_RELATIVE_FILE_PATH)
        log.debug(f"{release_type.value} release target: {log.text(branch)}:{log.text(file_path)}")
        return branch, file_path
