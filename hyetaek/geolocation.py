"""One-shot device location lookup with classified failures."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .models import Location

if TYPE_CHECKING:
    from .config import LocationConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class LocationErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


_MESSAGE_PREFIX = "위치 정보를 가져올 수 없습니다. "

_MESSAGES: dict[LocationErrorKind, str] = {
    LocationErrorKind.PERMISSION_DENIED: "위치 정보 접근 권한이 거부되었습니다.",
    LocationErrorKind.POSITION_UNAVAILABLE: "현재 위치를 확인할 수 없습니다.",
    LocationErrorKind.TIMEOUT: "위치 정보 요청 시간이 초과되었습니다.",
    LocationErrorKind.UNKNOWN: "알 수 없는 오류가 발생했습니다.",
}


class LocationError(Exception):
    """Raised by providers when no coordinate can be produced."""

    kind = LocationErrorKind.UNKNOWN


class PermissionDenied(LocationError):
    kind = LocationErrorKind.PERMISSION_DENIED


class PositionUnavailable(LocationError):
    kind = LocationErrorKind.POSITION_UNAVAILABLE


def failure_message(kind: LocationErrorKind, detail: str = "") -> str:
    """User-facing message for a failure class."""
    if kind is LocationErrorKind.UNKNOWN and detail:
        return _MESSAGE_PREFIX + detail
    return _MESSAGE_PREFIX + _MESSAGES[kind]


@dataclass(frozen=True)
class LocationResult:
    location: Location | None = None
    error: LocationErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.location is not None


class LocationProvider(ABC):
    """Abstract source of the device's current coordinate."""

    @abstractmethod
    async def current_position(self, high_accuracy: bool = True) -> Location:
        """Return the current coordinate.

        *high_accuracy* is a hint: providers that cannot trade speed for
        precision may ignore it.

        Raises:
            LocationError: (or a subclass) when the position is not available.
        """
        ...


class StaticLocationProvider(LocationProvider):
    """Returns a fixed, configured coordinate."""

    def __init__(self, location: Location | None = None) -> None:
        self._location = location

    async def current_position(self, high_accuracy: bool = True) -> Location:
        logger.debug("Static position requested (high_accuracy=%s)", high_accuracy)
        if self._location is None:
            raise PositionUnavailable("no configured coordinate")
        return self._location


class DeniedLocationProvider(LocationProvider):
    """Stands in for a device where location access is switched off."""

    async def current_position(self, high_accuracy: bool = True) -> Location:
        raise PermissionDenied("location access disabled")


class GeoLocator:
    """Requests the current position once per activation."""

    def __init__(
        self,
        provider: LocationProvider,
        timeout: float = DEFAULT_TIMEOUT,
        high_accuracy: bool = True,
    ) -> None:
        self._provider = provider
        self._timeout = timeout
        self._high_accuracy = high_accuracy

    async def locate(self) -> LocationResult:
        """Ask the provider for a coordinate, classifying any failure."""
        try:
            location = await asyncio.wait_for(
                self._provider.current_position(self._high_accuracy),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            kind, detail = LocationErrorKind.TIMEOUT, ""
        except LocationError as e:
            kind, detail = e.kind, str(e)
        except Exception as e:
            logger.exception("Unexpected geolocation failure")
            kind, detail = LocationErrorKind.UNKNOWN, str(e)
        else:
            return LocationResult(location=location)

        logger.info("Geolocation failed: %s (%s)", kind.value, detail)
        return LocationResult(error=kind, message=failure_message(kind, detail))


def create_locator(config: LocationConfig) -> GeoLocator:
    """Build a locator from the [location] config section."""
    if not config.enabled:
        provider: LocationProvider = DeniedLocationProvider()
    elif config.latitude is not None and config.longitude is not None:
        provider = StaticLocationProvider(
            Location(float(config.latitude), float(config.longitude))
        )
    else:
        provider = StaticLocationProvider()
    return GeoLocator(
        provider, timeout=config.timeout, high_accuracy=config.high_accuracy
    )
