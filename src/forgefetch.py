"""forgefetch - list downloadable release candidates of a GitHub repository.

Queries the releases (or tags) listing of a repository, normalizes it into
download candidates and prints them as JSON or CSV.
"""
import csv
import io
import json
import logging
import sys

from args import parse_args
from cli_config import build_source_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from repository.adapter import ReleasePipeline
from repository.errors import ConfigurationError, MalformedResponse, TransportError

logger = logging.getLogger(__name__)

CSV_FIELDS = ["filename", "url", "version", "asset_url"]


def render_json(candidates):
    """Render candidates as a JSON array, omitting absent optional fields."""
    return json.dumps([c.to_dict() for c in candidates], indent=2)


def render_csv(candidates):
    """Render candidates as CSV; absent optional fields are empty cells."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for candidate in candidates:
        writer.writerow(candidate.to_dict())
    return buf.getvalue()


def resolve_format(output_format, output_path):
    """Explicit format wins, then the output file extension, then json."""
    if output_format:
        return output_format
    if output_path and output_path.lower().endswith(".csv"):
        return "csv"
    return "json"


def _setup_logging(args):
    """Configure logging from --loglevel and --logfile."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def write_output(text, args):
    """Write rendered output to --output and/or stdout."""
    if args.OUTPUT:
        try:
            with open(args.OUTPUT, "w", encoding="utf-8", newline="") as fh:
                fh.write(text)
        except OSError as e:
            logger.error("Cannot write output file %s: %s", args.OUTPUT, e)
            sys.exit(ExitCodes.FILE_ERROR.value)
        logger.info("Wrote output to %s", args.OUTPUT)
    elif not args.QUIET:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = build_source_config(args)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)

    pipeline = ReleasePipeline(config)
    try:
        if args.SELECT:
            chosen = pipeline.select()
            candidates = [chosen] if chosen is not None else []
        else:
            candidates = pipeline.candidates()
    except MalformedResponse as e:
        logger.error("Malformed response: %s", e)
        sys.exit(ExitCodes.MALFORMED_RESPONSE.value)
    except TransportError as e:
        logger.error("Fetch failed: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)

    if args.SELECT and not candidates:
        logger.error("No candidates available for %s", config.ref.slug)
        sys.exit(ExitCodes.NO_CANDIDATES.value)

    fmt = resolve_format(args.OUTPUT_FORMAT, args.OUTPUT)
    text = render_csv(candidates) if fmt == "csv" else render_json(candidates)
    write_output(text, args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="main",
                outcome="success",
                count=len(candidates)
            )
        )
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
