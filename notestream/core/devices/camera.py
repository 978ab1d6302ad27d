"""
Camera capture flow: open, flip, capture a still frame, retake, close.
"""

from notestream.core.devices.base import CameraHandle, MediaDevice
from notestream.models.media import CapturedFrame
from notestream.utils.exceptions import DeviceError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

FRONT = "user"
BACK = "environment"


class CameraSession:
    """
    Owns at most one camera handle at a time.

    Every transition that replaces or ends the stream (capture, flip, retake,
    close, error) stops the previous handle first. Use as an async context
    manager to guarantee release.
    """

    def __init__(self, camera: MediaDevice):
        self.camera = camera
        self.facing_mode = FRONT
        self.captured: CapturedFrame | None = None
        self._handle: CameraHandle | None = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None and self._handle.active

    async def open(self) -> None:
        """
        Open the front camera.

        Raises:
            DevicePermissionError: If camera access is denied
        """
        if self.is_open:
            return
        self.facing_mode = FRONT
        self._handle = await self.camera.open(facing_mode=FRONT)
        logger.bind(facing_mode=FRONT).debug("Camera opened")

    async def flip(self) -> None:
        """
        Switch between front and back camera.

        On failure the previous facing mode is reopened; if that also fails
        the session is closed.

        Raises:
            DeviceError: If the switch failed (the camera may have been restored)
        """
        previous = self.facing_mode
        target = BACK if previous == FRONT else FRONT
        self._release()

        try:
            self._handle = await self.camera.open(facing_mode=target)
            self.facing_mode = target
            return
        except DeviceError as e:
            logger.bind(facing_mode=target).warning("Camera flip failed: {}", e)
            flip_error = e

        try:
            self._handle = await self.camera.open(facing_mode=previous)
        except DeviceError as e:
            logger.bind(facing_mode=previous).error("Failed to restore camera stream: {}", e)
            self.close()
            raise DeviceError("Camera switch failed", context={"restored": False}) from e
        raise DeviceError("Camera switch failed", context={"restored": True}) from flip_error

    async def capture(self) -> CapturedFrame:
        """
        Take a still frame and release the camera.

        Raises:
            DeviceError: If the camera is not open
        """
        if not self.is_open:
            raise DeviceError("Camera is not open")
        try:
            self.captured = await self._handle.grab_frame()
        finally:
            self._release()
        return self.captured

    async def retake(self) -> None:
        """Discard the captured frame and reopen the camera."""
        self.captured = None
        await self.open()

    def close(self) -> None:
        """Release the camera and reset the session."""
        self._release()
        self.captured = None
        self.facing_mode = FRONT

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.stop()
            self._handle = None

    async def __aenter__(self) -> "CameraSession":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
