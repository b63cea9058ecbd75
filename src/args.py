"""Argument parsing functionality for forgefetch."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Boolean source options default to None so that an unset flag does not
    override a value coming from the config file.
    """
    parser = argparse.ArgumentParser(
        prog="forgefetch",
        description=(
            "forgefetch - list downloadable release candidates of a GitHub repository"
        ),
        add_help=True,
    )

    parser.add_argument("REPOSITORY",
                        help="Repository as OWNER/REPO (may come from --config instead)",
                        nargs="?",
                        type=str)
    parser.add_argument("--owner",
                        dest="OWNER",
                        help="Repository owner (user or organization)",
                        action="store", type=str)
    parser.add_argument("--repo",
                        dest="REPO",
                        help="Repository name",
                        action="store", type=str)

    parser.add_argument("--tags",
                        dest="TAGS_ONLY",
                        help="List tags instead of releases.",
                        action=argparse.BooleanOptionalAction,
                        default=None)
    parser.add_argument("--include-assets",
                        dest="INCLUDE_ASSETS",
                        help=("Also list release assets; optionally only those whose "
                              "name matches PATTERN"),
                        nargs="?",
                        const=True,
                        metavar="PATTERN",
                        type=str)
    parser.add_argument("--version-pattern",
                        dest="VERSION_PATTERN",
                        help=("Regex with one capture group extracting the version from a "
                              f"tag name (default: {Constants.DEFAULT_VERSION_PATTERN})"),
                        action="store", type=str)
    parser.add_argument("--prefer",
                        dest="PREFER",
                        help="Sort candidates by version, newest first.",
                        action=argparse.BooleanOptionalAction,
                        default=None)
    parser.add_argument("--select",
                        dest="SELECT",
                        help="Only output the preferred candidate.",
                        action="store_true")

    parser.add_argument("--api-base",
                        dest="API_BASE",
                        help=f"Forge API root URL (default: {Constants.GITHUB_API_BASE})",
                        action="store", type=str)
    parser.add_argument("--token",
                        dest="TOKEN",
                        help="API token (default: $GITHUB_PAT or $GITHUB_TOKEN)",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML (or .json) configuration file",
                        action="store", type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help=("Output format (json or csv). If not specified, inferred from "
                              "--output extension; defaults to json."),
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
