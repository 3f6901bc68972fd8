"""
Digest configuration.
Loads the repository list and blacklists from a JSON file and the access token from the environment (.env supported).
"""
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from dotenv import load_dotenv, find_dotenv

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_LABELS = ("bug",)


class ConfigError(ValueError):
    """Raised when the configuration file is missing or malformed."""


@dataclass(frozen=True)
class DigestConfig:
    repositories: Tuple[str, ...]
    user_blacklist: Tuple[str, ...] = ()
    commit_count_blacklist: Optional[Tuple[str, ...]] = None
    important_users: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = DEFAULT_LABELS
    access_token: Optional[str] = None

    @property
    def effective_commit_blacklist(self) -> Tuple[str, ...]:
        """Commit counting uses its own blacklist when configured, else the user blacklist."""
        if self.commit_count_blacklist is None:
            return self.user_blacklist
        return self.commit_count_blacklist


def _string_list(data: Dict[str, Any], key: str, default=()) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return tuple(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(value)


def config_from_dict(data: Dict[str, Any], access_token: Optional[str] = None) -> DigestConfig:
    """Validate a parsed configuration mapping and build a DigestConfig."""
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object")
    repositories = _string_list(data, "repositories")
    if not repositories:
        raise ConfigError("'repositories' must list at least one repository")
    for repo in repositories:
        owner, _, name = repo.partition("/")
        if not owner or not name or "/" in name:
            raise ConfigError(f"repository '{repo}' is not of the form owner/name")
    commit_blacklist = _string_list(data, "commitCountBlacklist") if "commitCountBlacklist" in data else None
    return DigestConfig(
        repositories=repositories,
        user_blacklist=_string_list(data, "userBlacklist"),
        commit_count_blacklist=commit_blacklist,
        important_users=_string_list(data, "importantUsers"),
        labels=_string_list(data, "labels", DEFAULT_LABELS),
        access_token=access_token,
    )


def resolve_token() -> Optional[str]:
    """Read the API token from ACCESS_TOKEN (or GITHUB_TOKEN), after loading a .env file from the working directory."""
    load_dotenv(find_dotenv(usecwd=True))
    return os.getenv("ACCESS_TOKEN") or os.getenv("GITHUB_TOKEN") or None


def load_config(path: Optional[str] = None) -> DigestConfig:
    """Load the configuration file. Path precedence: argument, DIGEST_CONFIG env, ./config.json."""
    path = path or os.getenv("DIGEST_CONFIG") or DEFAULT_CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"configuration file {path} is not valid JSON: {e}") from e
    return config_from_dict(data, access_token=resolve_token())
