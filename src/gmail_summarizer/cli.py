"""Command-line interface for Gmail Summarizer.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from gmail_summarizer import __version__
from gmail_summarizer.config import get_settings
from gmail_summarizer.exceptions import GmailSummarizerError
from gmail_summarizer.log import configure_logging

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gmail-summarizer", description="Gmail Summarizer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the web application")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")

    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Summarize the newest emails once using a local token file",
    )
    summarize_parser.add_argument(
        "--token-file",
        type=Path,
        default=Path("token.json"),
        help="Authorized user token JSON (token, refresh_token, scopes, expiry)",
    )
    summarize_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summaries as JSON instead of plain text",
    )

    return parser


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from gmail_summarizer.api import create_app

    uvicorn.run(create_app(get_settings()), host=args.host, port=args.port)
    return 0


async def _cmd_summarize(args: argparse.Namespace) -> int:
    from gmail_summarizer.agent.summarizer import SummarizerWorkflow
    from gmail_summarizer.gmail.client import GmailClient
    from gmail_summarizer.gmail.oauth import bundle_to_credentials
    from gmail_summarizer.llm.client import SummarizationClient

    settings = get_settings()
    token_path: Path = args.token_file
    if not token_path.exists():
        print(f"Token file not found: {token_path}", file=sys.stderr)
        return 1

    try:
        tokens = json.loads(token_path.read_text(encoding="utf-8"))
        if not isinstance(tokens, dict):
            raise ValueError("token file must contain a JSON object")
        credentials = bundle_to_credentials(tokens, settings)
        workflow = SummarizerWorkflow(
            gmail_client=GmailClient(credentials, settings),
            summarization_client=SummarizationClient(settings),
            settings=settings,
        )
        summaries = await workflow.run()
    except (GmailSummarizerError, ValueError) as exc:
        logger.error("summarize_command_failed", error_type=type(exc).__name__, error=str(exc))
        print(f"Failed to summarize emails: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([s.model_dump(by_alias=True) for s in summaries], indent=2))
        return 0

    if not summaries:
        print("No emails found.")
    for s in summaries:
        print(f"{s.date}\t{s.sender}\t{s.subject}")
        print(f"  {s.summary}")

    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Gmail Summarizer CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()
    configure_logging(settings)

    logger.info("gmail_summarizer_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    if parsed.command == "serve":
        return _cmd_serve(parsed)
    if parsed.command == "summarize":
        return asyncio.run(_cmd_summarize(parsed))

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
