"""Terminal URI codec with a per-process trust boundary."""

from .codec import TerminalUriCodec, info_from_uri, is_terminal_uri, uri_from_info
from .config import URI_HOST, URI_PREFIX, URI_SCHEME, TerminalUriConfig, load_config
from .errors import TerminalUriConfigError, TerminalUriError, TerminalUriParseError
from .models import (
    COSMETIC_FIELDS,
    SENSITIVE_FIELDS,
    TERMINAL_DEFAULT_ICON,
    TERMINAL_DEFAULT_LOCATION,
    InstantiatedTerminalInfo,
    PaneLocation,
    TerminalInfo,
)
from .trust import PROCESS_TRUST_TOKEN, TrustToken, generate_trust_token

__version__ = "0.1.0"

__all__ = [
    "COSMETIC_FIELDS",
    "InstantiatedTerminalInfo",
    "PROCESS_TRUST_TOKEN",
    "PaneLocation",
    "SENSITIVE_FIELDS",
    "TERMINAL_DEFAULT_ICON",
    "TERMINAL_DEFAULT_LOCATION",
    "TerminalInfo",
    "TerminalUriCodec",
    "TerminalUriConfig",
    "TerminalUriConfigError",
    "TerminalUriError",
    "TerminalUriParseError",
    "TrustToken",
    "URI_HOST",
    "URI_PREFIX",
    "URI_SCHEME",
    "__version__",
    "generate_trust_token",
    "info_from_uri",
    "is_terminal_uri",
    "load_config",
    "uri_from_info",
]
