"""verstamp

Updates the <Version> and <FileVersion> tags of a project file on a GitHub branch.

Usage:
    verstamp update <owner> <repo> <branch> <file_path> <version> [options]
    verstamp release <owner> <repo> <version> (--preview | --production) [options]
    verstamp -h | --help
    verstamp -v | --version

    verstamp update MyOrg MyRepo release/v2 src/App/App.csproj v2.0.0-preview.1

Options:
    -h --help               show this screen.
    -v --version            show version.
    --token=<token>         GitHub token (defaults to $GITHUB_TOKEN).
    --api-url=<url>         GitHub REST API URL (defaults to $GITHUB_API_URL or https://api.github.com).
    --timeout=<seconds>     timeout for each request to GitHub.
    --log-level=<level>     logging level (defaults to $VERSTAMP_LOG_LEVEL or INFO).
    --preview               take the branch and project file from the preview release variables.
    --production            take the branch and project file from the production release variables.
"""
import os
import sys

from docopt import docopt

from verstamp import __version__
from verstamp.config import Settings, conf_get, conf_flag, conf_float, create_config, from_arguments, from_environment
from verstamp.errors import VersionUpdateError
from verstamp.github import GitHubClient, GitHubFileStore
from verstamp.sinks import LogSink
from verstamp.update import STATUS_OK, UpdateRequest, run_update
from verstamp.util import log
from verstamp.variables import ReleaseType, VariableService
from verstamp.version import is_preview

version = __version__


def configure_logging(conf):
    if conf_flag(conf, Settings.GITHUB_ACTIONS):
        log.use_plain_output()
    log.set_default_level(conf_get(conf, Settings.LOG_LEVEL))


def report_failure(error: VersionUpdateError):
    log.report_failure(error.describe(), title=type(error).__name__)


def create_client(conf) -> GitHubClient:
    return GitHubClient(
        token=conf_get(conf, Settings.TOKEN),
        base_url=conf_get(conf, Settings.API_URL),
        timeout=conf_float(conf, Settings.TIMEOUT),
    )


def release_type_from(arguments) -> ReleaseType:
    return ReleaseType.PREVIEW if arguments.get("--preview") else ReleaseType.PRODUCTION


def create_request(arguments, conf, client: GitHubClient) -> UpdateRequest:
    owner, repo, version_arg = conf.get("owner"), conf.get("repo"), conf.get("version")
    if arguments.get("release"):
        release_type = release_type_from(arguments)
        # validates the version before any variables are fetched
        if is_preview(version_arg) != (release_type is ReleaseType.PREVIEW):
            log.warning(f"Version {log.text(version_arg)} does not look like a {release_type.value} release.")
        variables = VariableService(client, owner, repo)
        branch, file_path = variables.resolve_release_target(release_type)
    else:
        branch, file_path = conf.get("branch"), conf.get("file_path")

    return UpdateRequest.create(owner, repo, branch, file_path, version_arg, conf_get(conf, Settings.TOKEN))


def run(argv=None, environ=None):
    arguments = docopt(__doc__, argv=argv, version=f"verstamp {version}")
    environ = os.environ if environ is None else environ
    conf = create_config(from_arguments(arguments), from_environment(environ))

    sink = LogSink().install()
    try:
        configure_logging(conf)
        log.debug(f"verstamp {version}")
        client = create_client(conf)
        if not client.has_token():
            log.warning("No GitHub token provided, requests will not be authenticated.")
        request = create_request(arguments, conf, client)
        store = GitHubFileStore(client, request.owner, request.repo)
        status, outcome = run_update(store, request)
    except VersionUpdateError as e:
        report_failure(e)
        return False
    except ValueError as e:
        log.report_failure(str(e))
        return False
    finally:
        sink.close()

    if status != STATUS_OK:
        report_failure(outcome)
        return False
    return True


def run_verstamp():
    result = run()
    if not result:
        sys.exit(1)
    else:
        sys.exit(0)


if __name__ == "__main__":
    run_verstamp()
