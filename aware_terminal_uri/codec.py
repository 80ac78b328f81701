"""Encode terminal descriptors into URIs and decode them back across a trust boundary.

Terminal URIs are accepted from links, saved workspace state and other
processes, yet some of their fields decide which command is spawned. Every URI
produced here carries the process trust token; on decode, the sensitive fields
are honored only when that token matches (or the caller vouches for the URI).
Otherwise the whole sensitive group is replaced by safe defaults, so a crafted
URI can still set a title or icon but never a command.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic.alias_generators import to_camel

from .config import DEFAULT_CONFIG, TerminalUriConfig
from .errors import TerminalUriParseError
from .models import (
    InstantiatedTerminalInfo,
    PaneLocation,
    TerminalInfo,
    default_sensitive_fields,
    default_terminal_info,
)
from .trust import PROCESS_TRUST_TOKEN, TrustToken

logger = logging.getLogger(__name__)

TerminalInfoLike = Union[TerminalInfo, InstantiatedTerminalInfo, Mapping[str, Any]]


def _new_key() -> str:
    return str(uuid.uuid4())


def _load_json(field: str, value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise TerminalUriParseError(field, f"malformed JSON ({exc.msg})", value=value) from exc


def _parse_command(value: str) -> Optional[Dict[str, Any]]:
    if not value:
        return None
    command = _load_json("command", value)
    if command is None:
        return None
    if not isinstance(command, dict):
        raise TerminalUriParseError("command", "expected a JSON object", value=value)
    return command


def _parse_environment(value: str) -> Dict[str, str]:
    if not value:
        return {}
    pairs = _load_json("environmentVariables", value)
    if pairs is None:
        return {}
    if not isinstance(pairs, list):
        raise TerminalUriParseError("environmentVariables", "expected a JSON array of pairs", value=value)
    env: Dict[str, str] = {}
    for pair in pairs:
        if (
            not isinstance(pair, list)
            or len(pair) != 2
            or not all(isinstance(item, str) for item in pair)
        ):
            raise TerminalUriParseError(
                "environmentVariables", f"expected [name, value] string pair, got {pair!r}", value=value
            )
        env[pair[0]] = pair[1]
    return env


def _parse_preserved_commands(value: str) -> List[str]:
    commands = _load_json("preservedCommands", value or "[]")
    if commands is None:
        return []
    if not isinstance(commands, list) or not all(isinstance(item, str) for item in commands):
        raise TerminalUriParseError("preservedCommands", "expected a JSON array of strings", value=value)
    return commands


class TerminalUriCodec:
    """Terminal URI encoder/decoder bound to one trust token and config."""

    def __init__(
        self,
        token: TrustToken = PROCESS_TRUST_TOKEN,
        config: TerminalUriConfig = DEFAULT_CONFIG,
    ) -> None:
        self.token = token
        self.config = config

    @property
    def prefix(self) -> str:
        return self.config.prefix

    def is_terminal_uri(self, uri: str) -> bool:
        """Return True when ``uri`` belongs to this codec's scheme and host."""
        try:
            parts = urlsplit(uri)
        except ValueError:
            return False
        return parts.scheme == self.config.scheme and parts.netloc == self.config.host

    def encode(self, info: TerminalInfoLike) -> str:
        """Serialise ``info`` into a terminal URI stamped with the trust token."""
        if not isinstance(info, (TerminalInfo, InstantiatedTerminalInfo)):
            info = TerminalInfo.model_validate(dict(info))

        location = info.default_location
        env = info.environment_variables
        query = [
            ("cwd", info.cwd or ""),
            ("command", "" if info.command is None else json.dumps(info.command)),
            ("title", info.title or ""),
            ("key", info.key or _new_key()),
            ("remainOnCleanExit", "true" if info.remain_on_clean_exit else "false"),
            ("defaultLocation", "" if location is None else PaneLocation(location).value),
            ("icon", info.icon or ""),
            ("environmentVariables", "" if env is None else json.dumps([[name, val] for name, val in env.items()])),
            ("preservedCommands", json.dumps(list(info.preserved_commands or []))),
            ("initialInput", info.initial_input or ""),
            ("trustToken", self.token.value),
        ]
        uri = urlunsplit((self.config.scheme, self.config.host, "", urlencode(query), ""))
        assert uri.startswith(self.prefix), f"terminal URI lost its prefix: {self.prefix}"
        return uri

    def decode(self, uri: str, trusted: bool = False) -> InstantiatedTerminalInfo:
        """Rebuild a descriptor from ``uri``.

        Cosmetic fields are always taken from the URI. Sensitive fields are
        taken from the URI only when ``trusted`` is set or the embedded trust
        token matches; otherwise all of them fall back to defaults together.

        Raises ``TerminalUriParseError`` when a JSON-valued field is malformed
        and ``TypeError`` when ``uri`` is not text.
        """
        if not isinstance(uri, str):
            raise TypeError(f"Terminal URI must be str, got {type(uri).__name__}")
        try:
            query = urlsplit(uri).query
        except ValueError as exc:
            logger.debug("Unparseable terminal URI, using defaults: %s", exc)
            query = ""

        params = dict(parse_qsl(query, keep_blank_values=True))
        if not params:
            logger.debug("Terminal URI has no query, using defaults")
            return default_terminal_info(
                key=_new_key(),
                trust_token=self.token.value,
                default_location=self.config.default_location,
                icon=self.config.default_icon,
            )

        cosmetic: Dict[str, Any] = {
            "title": params.get("title") or "",
            "key": params.get("key") or _new_key(),
            "remain_on_clean_exit": params.get("remainOnCleanExit") == "true",
            "default_location": self._parse_location(params.get("defaultLocation")),
            "icon": params.get("icon") or self.config.default_icon,
        }
        sensitive: Dict[str, Any] = {
            "cwd": params.get("cwd") or "",
            "command": _parse_command(params.get("command", "")),
            "environment_variables": _parse_environment(params.get("environmentVariables", "")),
            "preserved_commands": _parse_preserved_commands(params.get("preservedCommands", "")),
            "initial_input": params.get("initialInput") or "",
        }

        is_trusted = trusted or self.token.matches(params.get("trustToken"))
        if not is_trusted:
            defaults = default_sensitive_fields()
            discarded = sorted(to_camel(name) for name, value in sensitive.items() if value != defaults[name])
            if discarded:
                logger.info(
                    "Ignoring sensitive fields from untrusted terminal URI (key=%s): %s",
                    cosmetic["key"],
                    ", ".join(discarded),
                )
            sensitive = defaults

        return InstantiatedTerminalInfo(**cosmetic, **sensitive, trust_token=self.token.value)

    def _parse_location(self, value: Optional[str]) -> PaneLocation:
        if not value:
            return self.config.default_location
        try:
            return PaneLocation(value)
        except ValueError:
            logger.debug("Unknown terminal location '%s', using %s", value, self.config.default_location.value)
            return self.config.default_location


_process_codec = TerminalUriCodec()


def uri_from_info(info: TerminalInfoLike) -> str:
    """Encode ``info`` with the process-wide codec."""
    return _process_codec.encode(info)


def info_from_uri(uri: str, uri_from_trusted_source: bool = False) -> InstantiatedTerminalInfo:
    """Decode ``uri`` with the process-wide codec."""
    return _process_codec.decode(uri, trusted=uri_from_trusted_source)


def is_terminal_uri(uri: str) -> bool:
    return _process_codec.is_terminal_uri(uri)


__all__ = [
    "TerminalInfoLike",
    "TerminalUriCodec",
    "info_from_uri",
    "is_terminal_uri",
    "uri_from_info",
]
