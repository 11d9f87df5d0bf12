from __future__ import annotations

import logging
from typing import Protocol

from adaptive_images.domain.entities.client_signal import ClientSignal, ResolutionDecision
from adaptive_images.domain.entities.config import AdaptiveImageConfig
from adaptive_images.domain.services.breakpoint_selector import BreakpointSelector

logger = logging.getLogger(__name__)

DESKTOP_OS_TOKENS = ("macintosh", "x11", "windows nt")


class DeviceClassifier(Protocol):
    def is_desktop(self, signature: str | None) -> bool: ...


class UserAgentDeviceClassifier:
    """Flags a client as desktop when its User-Agent names a desktop OS."""

    def __init__(self, tokens: tuple[str, ...] = DESKTOP_OS_TOKENS) -> None:
        self.tokens = tuple(t.lower() for t in tokens)

    def is_desktop(self, signature: str | None) -> bool:
        if not signature:
            return False
        ua = signature.lower()
        return any(token in ua for token in self.tokens)


def parse_preference(value: str | None) -> tuple[int | None, bool]:
    """Parse a stored width preference.

    Returns ``(width, clear)``. ``clear`` is True when a value was present but
    is not a positive integer, so the caller should expire it.
    """
    if value is None:
        return None, False
    text = value.strip()
    if not (text.isascii() and text.isdigit()) or int(text) <= 0:
        return None, True
    return int(text), False


class ClientSignalResolver:
    """Decides which breakpoint resolution a request should receive."""

    def __init__(
        self,
        config: AdaptiveImageConfig,
        classifier: DeviceClassifier | None = None,
    ) -> None:
        self.config = config
        self.selector = BreakpointSelector(config.breakpoints)
        self.classifier = classifier or UserAgentDeviceClassifier()

    def signal(self, preference: str | None, signature: str | None) -> ClientSignal:
        width, clear = parse_preference(preference)
        if clear:
            logger.debug("Discarding mangled %s preference %r", self.config.cookie_name, preference)
        return ClientSignal(
            width=width,
            is_desktop=self.classifier.is_desktop(signature),
            clear_preference=clear,
        )

    def resolve(self, preference: str | None, signature: str | None) -> ResolutionDecision:
        return self.decide(self.signal(preference, signature))

    def decide(self, signal: ClientSignal) -> ResolutionDecision:
        breakpoints = self.config.breakpoints

        if signal.width is not None:
            resolution = self.selector.resolve(signal.width, self.config.default_raw)
        elif self.config.mobile_first and not signal.is_desktop:
            resolution = breakpoints.minimum
        else:
            resolution = breakpoints.maximum

        return ResolutionDecision(resolution=resolution, signal=signal)
