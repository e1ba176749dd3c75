"""Select an eye tracker from discovered candidates by one identifying field.

Discovery itself belongs to the acquisition layer (e.g.
``tobii_research.find_all_eyetrackers()``); this module only resolves which of
the returned devices a session should use.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional


class DeviceNotFoundError(LookupError):
    """Raised when no candidate eye tracker matches a selector."""


class EyeTrackerIdentification(Enum):
    """Field used to pick an eye tracker; values are the SDK attribute names."""

    DEVICE_NAME = "device_name"
    SERIAL_NUMBER = "serial_number"
    MODEL = "model"
    FIRMWARE_VERSION = "firmware_version"
    RUNTIME_VERSION = "runtime_version"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class DeviceSelector:
    """Identification type plus the string the device must match exactly.

    ``identification=None`` selects the first discovered device.
    """

    identification: Optional[EyeTrackerIdentification] = None
    value: Optional[str] = None

    def matches(self, device: Any) -> bool:
        if self.identification is None:
            return True
        return getattr(device, self.identification.value, None) == self.value


def select_eye_tracker(candidates: Iterable[Any], selector: Optional[DeviceSelector] = None) -> Any:
    """Return the first candidate matching ``selector``."""
    selector = selector or DeviceSelector()
    devices = list(candidates)
    if not devices:
        raise DeviceNotFoundError("Eye tracker(s) not found.")

    for device in devices:
        if selector.matches(device):
            return device

    raise DeviceNotFoundError(
        f"Eye tracker not found at the {selector.identification.label}: {selector.value}"
    )
