import pytest

from verstamp.errors import VariableMissing, RemoteIOError
from verstamp.github import GitHubClient
from verstamp.variables import (
    PREP_PROJ_RELATIVE_FILE_PATH,
    PREV_PREP_RELEASE_HEAD_BRANCH,
    PROD_PREP_RELEASE_HEAD_BRANCH,
    ReleaseType,
    VariableService,
    list_variables,
)

ORG_VARS = "/orgs/Org/actions/variables"
REPO_VARS = "/repos/Org/Repo/actions/variables"


def variable(name, value):
    return {
        "name": name,
        "value": value,
        "visibility": "all",
        "created_at": "2024-01-10T21:19:12Z",
        "updated_at": "2024-01-10T21:19:12Z",
    }


def listing(*variables):
    return {"total_count": len(variables), "variables": list(variables)}


@pytest.fixture
def client(httpserver):
    return GitHubClient(token="secret", base_url=httpserver.url_for("/"))


def test_list_variables_follows_next_links(httpserver, client):
    page_2 = httpserver.url_for(REPO_VARS) + "?per_page=30&page=2"
    httpserver.expect_request(REPO_VARS, query_string={"per_page": "30"}).respond_with_json(
        listing(variable("A", "1")),
        headers={"Link": f'<{page_2}>; rel="next", <{page_2}>; rel="last"'},
    )
    httpserver.expect_request(REPO_VARS, query_string={"per_page": "30", "page": "2"}).respond_with_json(
        listing(variable("B", "2")),
    )

    result = list_variables(client, "repos/Org/Repo/actions/variables")

    assert [(v.name, v.value) for v in result] == [("A", "1"), ("B", "2")]
    assert result[0].visibility == "all"


def test_repo_variables_override_org_variables(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json(
        listing(variable("SHARED", "org"), variable("ORG_ONLY", "o"))
    )
    httpserver.expect_request(REPO_VARS).respond_with_json(listing(variable("SHARED", " repo ")))

    service = VariableService(client, "Org", "Repo")

    assert service.get_value("SHARED") == "repo"
    assert service.get_value("ORG_ONLY") == "o"
    assert service.get_value("NOPE", required=False) == ""
    with pytest.raises(VariableMissing):
        service.get_value("NOPE")


def test_variables_are_fetched_once(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json(listing())
    httpserver.expect_request(REPO_VARS).respond_with_json(listing(variable("A", "1")))

    service = VariableService(client, "Org", "Repo")
    service.get_value("A")
    service.get_value("A")

    assert len(httpserver.log) == 2


def test_user_accounts_have_no_org_variables(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json({"message": "Not Found"}, status=404)
    httpserver.expect_request(REPO_VARS).respond_with_json(listing(variable("A", "1")))

    assert VariableService(client, "Org", "Repo").get_value("A") == "1"


def test_missing_repo_is_a_remote_error(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json(listing())
    httpserver.expect_request(REPO_VARS).respond_with_json({"message": "Not Found"}, status=404)

    with pytest.raises(RemoteIOError):
        VariableService(client, "Org", "Repo").get_value("A")


@pytest.mark.parametrize(
    ("release_type", "branch"),
    [(ReleaseType.PREVIEW, "preview/v2"), (ReleaseType.PRODUCTION, "release/v2")],
)
def test_resolve_release_target(httpserver, client, release_type, branch):
    httpserver.expect_request(ORG_VARS).respond_with_json(listing(variable(PREP_PROJ_RELATIVE_FILE_PATH, "proj/app.proj")))
    httpserver.expect_request(REPO_VARS).respond_with_json(
        listing(
            variable(PREV_PREP_RELEASE_HEAD_BRANCH, "preview/v2"),
            variable(PROD_PREP_RELEASE_HEAD_BRANCH, "release/v2"),
        )
    )

    service = VariableService(client, "Org", "Repo")

    assert service.resolve_release_target(release_type) == (branch, "proj/app.proj")


def test_resolve_release_target_reports_every_missing_variable(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json(listing())
    httpserver.expect_request(REPO_VARS).respond_with_json(listing())

    with pytest.raises(VariableMissing) as e:
        VariableService(client, "Org", "Repo").resolve_release_target(ReleaseType.PREVIEW)

    assert e.value.names == [PREP_PROJ_RELATIVE_FILE_PATH, PREV_PREP_RELEASE_HEAD_BRANCH, PROD_PREP_RELEASE_HEAD_BRANCH]
    assert PREV_PREP_RELEASE_HEAD_BRANCH in e.value.message


def test_resolve_release_target_requires_both_branch_variables(httpserver, client):
    httpserver.expect_request(ORG_VARS).respond_with_json(listing(variable(PREP_PROJ_RELATIVE_FILE_PATH, "proj/app.proj")))
    httpserver.expect_request(REPO_VARS).respond_with_json(listing(variable(PROD_PREP_RELEASE_HEAD_BRANCH, "release/v2")))

    with pytest.raises(VariableMissing) as e:
        VariableService(client, "Org", "Repo").resolve_release_target(ReleaseType.PRODUCTION)

    assert e.value.names == [PREV_PREP_RELEASE_HEAD_BRANCH]
