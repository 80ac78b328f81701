from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import pytest

from aware_terminal_uri.codec import TerminalUriCodec
from aware_terminal_uri.trust import TrustToken


@pytest.fixture()
def token() -> TrustToken:
    return TrustToken("0123456789abcdef" * 4)


@pytest.fixture()
def codec(token: TrustToken) -> TerminalUriCodec:
    return TerminalUriCodec(token=token)


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SCHEME", "HOST", "DEFAULT_LOCATION", "DEFAULT_ICON"):
        monkeypatch.delenv(f"AWARE_TERMINAL_URI_{name}", raising=False)


def query_params(uri: str) -> dict[str, str]:
    return dict(parse_qsl(urlsplit(uri).query, keep_blank_values=True))


def with_query(uri: str, **changes: str) -> str:
    parts = urlsplit(uri)
    params = query_params(uri)
    params.update(changes)
    return urlunsplit(parts._replace(query=urlencode(params)))
