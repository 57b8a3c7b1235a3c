"""
Capability Probe

Decides whether live recognition can run here: the audio backend must be
importable, an input device must exist, and the WebSocket client library
must be installed. File upload is always available.
"""

import importlib.util
import logging
from dataclasses import dataclass

from .errors import UnsupportedCapability
from .modes import CaptureMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveCapability:
    """Result of probing the environment for live recognition."""

    available: bool
    reason: str = ""
    device_name: str | None = None

    def __bool__(self) -> bool:
        return self.available


def _default_input_device() -> tuple[str | None, str]:
    """Return (device_name, reason) for the default microphone."""
    try:
        import pyaudio
    except ImportError:
        return None, "pyaudio not installed"

    p = None
    try:
        p = pyaudio.PyAudio()
        info = p.get_default_input_device_info()
        if int(info.get("maxInputChannels", 0)) <= 0:
            return None, f"Default device has no input channels: {info.get('name')}"
        return info["name"], ""
    except (IOError, OSError) as e:
        return None, f"No input device: {e}"
    finally:
        if p is not None:
            p.terminate()


def probe_live_capability() -> LiveCapability:
    """
    Probe the environment for live recognition. Never raises.

    Returns:
        LiveCapability with the default microphone name when available
    """
    if importlib.util.find_spec("websockets") is None:
        capability = LiveCapability(False, "websockets not installed")
    else:
        try:
            device_name, reason = _default_input_device()
        except Exception as e:
            device_name, reason = None, f"Audio backend error: {e}"
        capability = LiveCapability(device_name is not None, reason, device_name)

    if capability.available:
        logger.info(f"Live recognition available: {capability.device_name}")
    else:
        logger.info(f"Live recognition unavailable: {capability.reason}")
    return capability


def require_live_capability(capability: LiveCapability) -> None:
    """Raise UnsupportedCapability unless live recognition is available."""
    if not capability.available:
        raise UnsupportedCapability(
            f"Live recognition is not supported: {capability.reason or 'unknown reason'}"
        )


def available_modes(capability: LiveCapability) -> list[CaptureMode]:
    """Capture modes the host may offer."""
    modes = [CaptureMode.FILE_UPLOAD]
    if capability.available:
        modes.insert(0, CaptureMode.LIVE)
    return modes
