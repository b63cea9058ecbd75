"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    CONFIG_ERROR = 3
    MALFORMED_RESPONSE = 4
    NO_CANDIDATES = 5


class EndpointKind(Enum):
    """Listing endpoints exposed by the forge API.

    The value doubles as the last path segment of the listing URL.
    """

    RELEASES = "releases"
    TAGS = "tags"

    @property
    def name_field(self) -> str:
        """JSON field carrying the release/tag name for this endpoint."""
        return "tag_name" if self is EndpointKind.RELEASES else "name"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "FORGEFETCH_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Forge API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_ACCEPT = "application/vnd.github+json"
    USER_AGENT = "forgefetch/0.1"
    ENV_GITHUB_TOKENS = ("GITHUB_PAT", "GITHUB_TOKEN")
    REPO_API_PER_PAGE = 100
    MAX_LISTING_PAGES = 10
    MAX_RESPONSE_BYTES = 10 * 1024 * 1024
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3

    DEFAULT_VERSION_PATTERN = r"^v?(.*)$"

    CONFIG_FILE_NAMES = (
        "forgefetch.yml",
        "forgefetch.yaml",
        os.path.join("~", ".config", "forgefetch", "forgefetch.yml"),
    )
    OUTPUT_FORMATS = ["json", "csv"]
