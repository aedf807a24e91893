"""Identity model and its source enum"""
from enum import Enum
from dataclasses import dataclass


class IdentitySource(Enum):
    """Where a username handle came from."""
    MANUAL_OVERRIDE = "manual_config"
    HOSTED_CLI_LOGIN = "github_cli"
    LOCAL_CONFIG_NAME = "git_config"


@dataclass(frozen=True)
class Identity:
    """The acting user's canonical handle."""
    handle: str
    source: IdentitySource

    def __str__(self) -> str:
        return f"{self.handle} ({self.source.value})"
