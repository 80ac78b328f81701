"""Typed models for terminal launch descriptors carried in terminal URIs."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TERMINAL_DEFAULT_ICON = "terminal"


class PaneLocation(str, Enum):
    PANE = "pane"
    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"
    BOTTOM = "bottom"


TERMINAL_DEFAULT_LOCATION = PaneLocation.PANE

# Fields that can change what the spawned process executes. Honored only for
# URIs generated by this process or explicitly trusted by the caller.
SENSITIVE_FIELDS: FrozenSet[str] = frozenset(
    {"cwd", "command", "environmentVariables", "preservedCommands", "initialInput"}
)

# Presentation only; accepted from any source.
COSMETIC_FIELDS: FrozenSet[str] = frozenset(
    {"title", "remainOnCleanExit", "defaultLocation", "icon", "key"}
)


class TerminalModel(BaseModel):
    """Base model using camelCase wire names and snake_case attributes."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TerminalInfo(TerminalModel):
    """Partial descriptor as supplied by callers; every field is optional."""

    title: Optional[str] = None
    key: Optional[str] = None
    remain_on_clean_exit: Optional[bool] = None
    default_location: Optional[PaneLocation] = None
    icon: Optional[str] = None
    command: Optional[Dict[str, Any]] = None
    cwd: Optional[str] = None
    environment_variables: Optional[Dict[str, str]] = None
    preserved_commands: Optional[List[str]] = None
    initial_input: Optional[str] = None


class InstantiatedTerminalInfo(TerminalModel):
    """Descriptor with every field resolved, ready for the process spawner."""

    title: str = ""
    key: str
    remain_on_clean_exit: bool = False
    default_location: PaneLocation = TERMINAL_DEFAULT_LOCATION
    icon: str = TERMINAL_DEFAULT_ICON
    trust_token: str
    command: Optional[Dict[str, Any]] = None
    cwd: str = ""
    environment_variables: Dict[str, str] = Field(default_factory=dict)
    preserved_commands: List[str] = Field(default_factory=list)
    initial_input: str = ""

    def sensitive_fields(self) -> Dict[str, Any]:
        return {name: value for name, value in self.as_dict().items() if name in SENSITIVE_FIELDS}

    def cosmetic_fields(self) -> Dict[str, Any]:
        return {name: value for name, value in self.as_dict().items() if name in COSMETIC_FIELDS}


def default_sensitive_fields() -> Dict[str, Any]:
    """Return fresh safe defaults for the sensitive group, keyed by attribute name."""
    return {
        "cwd": "",
        "command": None,
        "environment_variables": {},
        "preserved_commands": [],
        "initial_input": "",
    }


def default_terminal_info(
    *,
    key: str,
    trust_token: str,
    default_location: PaneLocation = TERMINAL_DEFAULT_LOCATION,
    icon: str = TERMINAL_DEFAULT_ICON,
) -> InstantiatedTerminalInfo:
    """Build the all-default descriptor for a key and token."""
    return InstantiatedTerminalInfo(
        title="",
        key=key,
        remain_on_clean_exit=False,
        default_location=default_location,
        icon=icon,
        trust_token=trust_token,
        **default_sensitive_fields(),
    )


__all__ = [
    "COSMETIC_FIELDS",
    "InstantiatedTerminalInfo",
    "PaneLocation",
    "SENSITIVE_FIELDS",
    "TERMINAL_DEFAULT_ICON",
    "TERMINAL_DEFAULT_LOCATION",
    "TerminalInfo",
    "TerminalModel",
    "default_sensitive_fields",
    "default_terminal_info",
]
