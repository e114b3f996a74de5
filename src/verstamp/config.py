from typing import NamedTuple, Dict, Any, ChainMap, Mapping, Optional


class Option(NamedTuple):
    key: str
    default: Any
    help: str = ""
    env: Optional[str] = None


class Settings:
    TOKEN = Option("token", None, "GitHub token used for authentication", "GITHUB_TOKEN")
    API_URL = Option("api_url", "https://api.github.com", "Base URL of the GitHub REST API", "GITHUB_API_URL")
    TIMEOUT = Option("timeout", None, "Timeout in seconds for each request to GitHub", "VERSTAMP_TIMEOUT")
    LOG_LEVEL = Option("log_level", "INFO", "Logging level", "VERSTAMP_LOG_LEVEL")
    GITHUB_ACTIONS = Option("github_actions", False, "Report errors as GitHub workflow annotations", "GITHUB_ACTIONS")

# maps docopt argument names to option keys
_ARGUMENTS = {
    "<owner>": "owner",
    "<repo>": "repo",
    "<branch>": "branch",
    "<file_path>": "file_path",
    "<version>": "version",
    "--token": Settings.TOKEN.key,
    "--api-url": Settings.API_URL.key,
    "--timeout": Settings.TIMEOUT.key,
    "--log-level": Settings.LOG_LEVEL.key,
}

def get_all_settings() -> list[Option]:
    return [option for _name, option in vars(Settings).items() if isinstance(option, Option)]

def from_environment(environ: Mapping[str, str]) -> Dict[str, str]:
    return {
        option.key: environ[option.env]
        for option in get_all_settings()
        if option.env and environ.get(option.env)
    }

def from_arguments(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: arguments[name] for name, key in _ARGUMENTS.items() if arguments.get(name) is not None}

def create_config(*dicts: Dict[str, object]) -> Mapping[str, object]:
    """Creates a dict-like configuration from multiple dictionaries
    Priority order:
    1. command-line arguments
    2. environment variables
    3. default values
    """
    defaults = {option.key: option.default for option in get_all_settings() if option.default is not None}
    priority = [*dicts, defaults]
    return ChainMap({}, *priority)

def conf_get(d, option: Option):
    return d.get(option.key, option.default)

def conf_flag(d, option: Option) -> bool:
    value = conf_get(d, option)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)

def conf_float(d, option: Option) -> Optional[float]:
    value = conf_get(d, option)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for '{option.key}': {value!r} ({option.help})")
