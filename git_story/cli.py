from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import PROVIDERS, load_config
from .errors import ConfigurationError, ErrorKind, StoryError, classify_error
from .report import write_report
from .story import generate_story

_ERROR_HINTS = {
    ErrorKind.NOT_FOUND: "user not found",
    ErrorKind.AUTH: "authentication failed, check your token",
    ErrorKind.RATE_LIMIT: "rate limited, retry later or pass --authenticated",
    ErrorKind.GENERIC: "story generation failed",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-story",
        description="Build a year-in-review story for a GitHub or GitLab user.",
    )
    parser.add_argument("username", help="Provider username, or 'demo' for the built-in fixture")
    parser.add_argument("--provider", choices=PROVIDERS, default="github", help="Git hosting provider")
    parser.add_argument("--config", type=Path, help="Path to settings YAML file", default=None)
    parser.add_argument("--token", help="Bearer token for the provider API", default=None)
    parser.add_argument(
        "--authenticated",
        action="store_true",
        help="Require a token, read from the provider's token_env when --token is absent",
    )
    parser.add_argument("--year", type=int, help="Calendar year to summarise", default=None)
    parser.add_argument("--output-dir", dest="output_dir", type=Path, help="Directory for the generated report")
    parser.add_argument("--format", choices=("markdown", "json"), help="Report format", default=None)
    return parser


def app(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as exc:
        parser.error(str(exc))
        return
    if args.year is not None:
        config.story.year = args.year
    if args.output_dir:
        config.output.directory = args.output_dir
    if args.format:
        config.output.format = args.format

    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        story = asyncio.run(
            generate_story(
                args.username,
                provider=args.provider,
                token=args.token,
                authenticated=args.authenticated,
                config=config,
            )
        )
    except ConfigurationError as exc:
        parser.error(f"configuration error: {exc}")
        return
    except StoryError as exc:
        kind = classify_error(exc)
        parser.error(f"{_ERROR_HINTS[kind]}: {exc}")
        return

    report_path = write_report(story, config)
    print(f"Report generated: {report_path}")


if __name__ == "__main__":  # pragma: no cover
    app(sys.argv[1:])
