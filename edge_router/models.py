"""
Data models for routing configuration, sticky cookies and routes.
"""
import re
from enum import Enum
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# MAJOR.MINOR.PATCH-BUILDNUM, e.g. 0.1.0-27
BUILD_ID_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+-[0-9]+")


def is_build_id(value: Optional[str]) -> bool:
    """Return True if value is a syntactically valid build identifier."""
    return isinstance(value, str) and BUILD_ID_PATTERN.fullmatch(value) is not None


class Tier(str, Enum):
    """Product editions."""
    LITE = "lite"
    ENTERPRISE = "enterprise"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Tier"]:
        """Return the matching tier, or None for anything unrecognized."""
        for tier in cls:
            if tier.value == value:
                return tier
        return None


RouteSource = Literal["cookie", "pin", "override", "default", "fallback"]


class OverrideRule(BaseModel):
    """Maps a caller version range to a specific target build."""

    range: str = Field(
        ...,
        validation_alias=AliasChoices("range", "desktopRange"),
        serialization_alias="desktopRange",
    )
    target_build_id: str = Field(
        ...,
        validation_alias=AliasChoices("target_build_id", "targetBuildId", "webBuildId"),
        serialization_alias="webBuildId",
    )

    model_config = ConfigDict(populate_by_name=True)


class RoutingConfig(BaseModel):
    """
    Routing policy read from the config store.

    Reading is lenient: values are checked by the routing engine, not here.
    Use validate_for_write() before persisting a config.
    """

    default: str = ""
    previous_default: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("previous_default", "previousDefault"),
        serialization_alias="previousDefault",
    )
    overrides: Optional[List[OverrideRule]] = None
    active_versions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("active_versions", "activeVersions"),
        serialization_alias="activeVersions",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def empty(cls) -> "RoutingConfig":
        return cls(default="", overrides=[], active_versions=[])

    def to_wire(self) -> dict:
        """Serialize using the stored (camelCase) field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RoutingConfigUpdate(RoutingConfig):
    """Config submitted for writing: default and activeVersions must be given."""

    default: str
    active_versions: List[str] = Field(
        ...,
        validation_alias=AliasChoices("active_versions", "activeVersions"),
        serialization_alias="activeVersions",
    )


def validate_for_write(config: RoutingConfig) -> List[str]:
    """
    Strict validation applied before a config is persisted.

    Returns:
        List of problems; empty if the config may be written.
    """
    problems: List[str] = []
    if config.default and not is_build_id(config.default):
        problems.append(f"default is not a build id: {config.default!r}")
    if config.previous_default is not None and not is_build_id(config.previous_default):
        problems.append(f"previousDefault is not a build id: {config.previous_default!r}")
    for version in config.active_versions:
        if not is_build_id(version):
            problems.append(f"activeVersions entry is not a build id: {version!r}")
    for rule in config.overrides or []:
        if not rule.range.strip():
            problems.append("override range is empty")
        if not is_build_id(rule.target_build_id):
            problems.append(f"override target is not a build id: {rule.target_build_id!r}")
    return problems


class StickyCookie(BaseModel):
    """Parsed app-version cookie. Both parts are always valid."""
    build_id: str
    tier: Tier


class Route(BaseModel):
    """Routing decision and the precedence rule that produced it."""
    build_id: Optional[str] = None  # None only for source="fallback"
    tier: Tier
    source: RouteSource


class ErrorBody(BaseModel):
    """Uniform error envelope."""
    error: str
