# src/main.py — v1
"""CLI entry point — analyze, serve commands.

Usage:
    imganalyzer analyze <image> -p "what is this" [options]
    imganalyzer serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from imganalyzer.core.models import StylePreset
from imganalyzer.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="imganalyzer",
        description=f"imganalyzer v{__version__} — ask a vision model about an image",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Ask a question about a local image",
    )
    p_analyze.add_argument("image", type=Path, help="Path to image file")
    p_analyze.add_argument(
        "-p", "--prompt", required=True,
        help="Question to ask about the image",
    )
    p_analyze.add_argument(
        "-s", "--style", default=StylePreset.DEFAULT.value,
        choices=[s.value for s in StylePreset],
        help="Presentation style (default: default)",
    )
    p_analyze.add_argument(
        "--system-prompt", default=None,
        help="System prompt for the default style",
    )
    p_analyze.add_argument(
        "--need-style", action="store_true",
        help="Add a visual style analysis section",
    )
    p_analyze.add_argument(
        "--need-emotion", action="store_true",
        help="Add an emotion analysis section",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- serve ---
    p_serve = subparsers.add_parser(
        "serve", help="Run the HTTP API",
    )
    p_serve.add_argument(
        "--host", default=None,
        help="Bind address (default: SERVER_HOST)",
    )
    p_serve.add_argument(
        "--port", type=int, default=None,
        help="Bind port (default: SERVER_PORT)",
    )
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def _cmd_analyze(args: argparse.Namespace) -> int:
    """Run the pipeline once and print the answer."""
    from imganalyzer.api.facade import analyze
    from imganalyzer.api.models import AnalysisInput
    from imganalyzer.config.settings import Settings

    image_path: Path = args.image
    if not image_path.is_file():
        logger.error("File not found: %s", image_path)
        return 1

    submission = AnalysisInput(
        image=image_path.read_bytes(),
        prompt=args.prompt,
        system_prompt=args.system_prompt,
        style=args.style,
        need_style=args.need_style,
        need_emotion=args.need_emotion,
    )

    logger.info("Analyzing %s (style=%s)", image_path.name, args.style)
    result = asyncio.run(analyze(submission, Settings()))
    if not result.ok:
        print(f"Error ({result.error.value}): {result.outcome.detail}", file=sys.stderr)
        return 1

    print(_format_answer(result.answer or "", result.json_mode))
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    """Serve the FastAPI app with uvicorn."""
    import uvicorn

    from imganalyzer.api.server import create_app
    from imganalyzer.config.settings import Settings
    from imganalyzer.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.server_host,
        port=args.port or settings.server_port,
    )
    return 0


def _format_answer(answer: str, json_mode: bool) -> str:
    """Pretty-print JSON-mode answers; other answers are printed as-is."""
    if not json_mode:
        return answer
    try:
        return json.dumps(json.loads(answer), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return answer


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
