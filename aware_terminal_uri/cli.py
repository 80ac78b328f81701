"""Command-line helpers for building and inspecting terminal URIs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from dotenv import load_dotenv

from . import __version__
from .codec import TerminalUriCodec
from .config import load_config
from .errors import TerminalUriError
from .models import COSMETIC_FIELDS, SENSITIVE_FIELDS, PaneLocation, TerminalInfo

logger = logging.getLogger(__name__)


def _load_local_env() -> None:
    """Load ``.env`` from the working directory when present."""
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)


def parse_env_options(options: Optional[Iterable[str]]) -> Dict[str, str]:
    """Turn repeated ``--env NAME=VALUE`` options into the terminal environment.

    The value keeps everything after the first ``=``; a later option for the
    same name replaces an earlier one.
    """
    environment: Dict[str, str] = {}
    for option in options or ():
        name, separator, value = option.partition("=")
        name = name.strip()
        if not separator:
            raise ValueError(f"--env {option!r}: expected NAME=VALUE.")
        if not name:
            raise ValueError(f"--env {option!r}: variable name is empty.")
        environment[name] = value
    return environment


def main(argv: Optional[Sequence[str]] = None) -> int:
    _load_local_env()
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        codec = TerminalUriCodec(config=load_config(args.config))
        if args.command == "encode":
            return _handle_encode(parser, codec, args)
        if args.command == "decode":
            return _handle_decode(codec, args)
        if args.command == "info":
            return _handle_info(codec)
    except TerminalUriError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="YAML file with codec settings.")
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    parser = argparse.ArgumentParser(
        prog="aware-terminal-uri",
        description="Build and inspect terminal launch URIs.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode = subparsers.add_parser("encode", help="Encode a terminal descriptor into a URI.", parents=[common])
    encode.add_argument("--title")
    encode.add_argument("--key")
    encode.add_argument("--cwd")
    encode.add_argument("--icon")
    encode.add_argument("--default-location", choices=[location.value for location in PaneLocation])
    encode.add_argument("--remain-on-clean-exit", action="store_true")
    encode.add_argument("--command-json", help="Command object as JSON, e.g. '{\"file\": \"bash\", \"args\": []}'.")
    encode.add_argument("--env", action="append", help="Environment KEY=VALUE (repeatable).")
    encode.add_argument("--preserved-command", action="append", help="Command to keep on clean exit (repeatable).")
    encode.add_argument("--initial-input")

    decode = subparsers.add_parser("decode", help="Decode a terminal URI into a descriptor.", parents=[common])
    decode.add_argument("uri")
    decode.add_argument(
        "--trusted",
        action="store_true",
        help="Treat the URI as internally generated and skip the trust token check.",
    )

    subparsers.add_parser("info", help="Show codec namespace and field classification.", parents=[common])
    return parser


def _parse_command_json(parser: argparse.ArgumentParser, raw: Optional[str]) -> Optional[dict]:
    if raw is None:
        return None
    try:
        command = json.loads(raw)
    except json.JSONDecodeError as exc:
        parser.error(f"--command-json is not valid JSON: {exc.msg}")
    if not isinstance(command, dict):
        parser.error("--command-json must be a JSON object")
    return command


def _handle_encode(parser: argparse.ArgumentParser, codec: TerminalUriCodec, args: argparse.Namespace) -> int:
    try:
        env = parse_env_options(args.env) if args.env else None
    except ValueError as exc:
        parser.error(str(exc))

    preserved: Optional[List[str]] = args.preserved_command
    info = TerminalInfo(
        title=args.title,
        key=args.key,
        cwd=args.cwd,
        icon=args.icon,
        default_location=args.default_location,
        remain_on_clean_exit=args.remain_on_clean_exit,
        command=_parse_command_json(parser, args.command_json),
        environment_variables=env,
        preserved_commands=preserved,
        initial_input=args.initial_input,
    )
    print(codec.encode(info))
    return 0


def _handle_decode(codec: TerminalUriCodec, args: argparse.Namespace) -> int:
    if not codec.is_terminal_uri(args.uri):
        logger.warning("URI is outside the %s namespace", codec.prefix)
    payload = codec.decode(args.uri, trusted=args.trusted).as_dict()
    payload["trustToken"] = "<redacted>"
    print(json.dumps(payload, indent=2))
    return 0


def _handle_info(codec: TerminalUriCodec) -> int:
    payload = {
        "version": __version__,
        "prefix": codec.prefix,
        "sensitive_fields": sorted(SENSITIVE_FIELDS),
        "cosmetic_fields": sorted(COSMETIC_FIELDS),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
