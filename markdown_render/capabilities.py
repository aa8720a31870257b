"""
Platform capability providers for the rendering router.

The router only ever asks one question: "is this capability available?".
A CapabilityProvider answers it, either from an explicit set or from a
platform name and OS version. capabilities_from_env() is the factory used
by the CLI; it reads MARKDOWN_RENDER_* environment variables.
"""

import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

from .exceptions import CapabilityConfigError
from .logger import get_module_logger

logger = get_module_logger("capabilities")


class Capability(str, Enum):
    """Platform features that select a rendering strategy."""
    GRID_LAYOUT = "grid_layout"              # Native grid for tables
    FLOW_LAYOUT = "flow_layout"              # Inline flow of images and text
    NATIVE_ATTRIBUTES = "native_attributes"  # Rich text attribute container


class Platform(str, Enum):
    IOS = "ios"
    MACOS = "macos"
    TVOS = "tvos"
    WATCHOS = "watchos"


# Minimum OS version per platform for each capability
CAPABILITY_THRESHOLDS = {
    Capability.GRID_LAYOUT: {
        Platform.IOS: (16, 0), Platform.MACOS: (13, 0),
        Platform.TVOS: (16, 0), Platform.WATCHOS: (9, 0),
    },
    Capability.FLOW_LAYOUT: {
        Platform.IOS: (16, 0), Platform.MACOS: (13, 0),
        Platform.TVOS: (16, 0), Platform.WATCHOS: (9, 0),
    },
    Capability.NATIVE_ATTRIBUTES: {
        Platform.IOS: (15, 0), Platform.MACOS: (12, 0),
        Platform.TVOS: (15, 0), Platform.WATCHOS: (8, 0),
    },
}


class CapabilityProvider(ABC):
    """Abstract capability predicate injected into the router."""

    @abstractmethod
    def supports(self, capability: Capability) -> bool:
        """Return True if the host platform offers the capability."""
        pass


class StaticCapabilities(CapabilityProvider):
    """Fixed set of capabilities. An empty set means the compatible path everywhere."""

    def __init__(self, capabilities: Iterable[Capability] = ()):
        self.capabilities = frozenset(Capability(c) for c in capabilities)

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def __repr__(self) -> str:
        names = sorted(c.value for c in self.capabilities)
        return f"StaticCapabilities({names})"


class PlatformCapabilities(CapabilityProvider):
    """Capabilities derived from a platform and its OS version."""

    def __init__(self, platform: str, version: str):
        try:
            self.platform = Platform(platform.strip().lower())
        except ValueError as e:
            raise CapabilityConfigError(
                f"Unknown platform: {platform}",
                platform=platform,
            ) from e
        self.version = self.parse_version(version, platform)

    @staticmethod
    def parse_version(version: str, platform: Optional[str] = None) -> tuple[int, ...]:
        """Parse a dotted version such as '16.4.1' into (16, 4, 1)."""
        parts = version.strip().split(".")
        try:
            parsed = tuple(int(part) for part in parts)
        except ValueError as e:
            raise CapabilityConfigError(
                f"Invalid platform version: {version!r}",
                platform=platform,
                details={"version": version},
            ) from e
        if any(part < 0 for part in parsed):
            raise CapabilityConfigError(
                f"Invalid platform version: {version!r}",
                platform=platform,
                details={"version": version},
            )
        # '13' must compare equal to the (13, 0) threshold
        return parsed + (0,) * (2 - len(parsed))

    def supports(self, capability: Capability) -> bool:
        threshold = CAPABILITY_THRESHOLDS[Capability(capability)][self.platform]
        return self.version >= threshold

    def __repr__(self) -> str:
        version = ".".join(str(part) for part in self.version)
        return f"PlatformCapabilities({self.platform.value} {version})"


def capabilities_from_env(
    platform: Optional[str] = None,
    version: Optional[str] = None
) -> CapabilityProvider:
    """
    Build a provider from arguments or environment variables.

    Precedence:
      1. MARKDOWN_RENDER_CAPABILITIES, a comma-separated capability list
      2. platform/version arguments, then MARKDOWN_RENDER_PLATFORM and
         MARKDOWN_RENDER_PLATFORM_VERSION

    Invalid configuration never raises: a warning is logged and a provider
    without enhanced capabilities is returned.
    """
    explicit = os.getenv("MARKDOWN_RENDER_CAPABILITIES")
    if explicit:
        capabilities = []
        for name in explicit.split(","):
            name = name.strip().lower()
            if not name:
                continue
            try:
                capabilities.append(Capability(name))
            except ValueError:
                logger.warning(f"Ignoring unknown capability: {name}")
        return StaticCapabilities(capabilities)

    platform = platform or os.getenv("MARKDOWN_RENDER_PLATFORM", Platform.IOS.value)
    version = version or os.getenv("MARKDOWN_RENDER_PLATFORM_VERSION")
    if not version:
        logger.info("No platform version configured, using compatible rendering")
        return StaticCapabilities()

    try:
        return PlatformCapabilities(platform, version)
    except CapabilityConfigError as e:
        logger.warning(f"{e.message}; falling back to compatible rendering")
        return StaticCapabilities()
