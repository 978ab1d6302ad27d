"""
Capture device abstractions.

Devices (camera, microphone) are platform collaborators. A handle is owned by
the flow that opened it and must be stopped on every exit path: a leaked
handle keeps the device busy and blocks the next acquisition.
"""

from abc import ABC, abstractmethod

from notestream.models.media import AudioRecording, CapturedFrame


class DeviceHandle(ABC):
    """An open device stream. `stop()` releases all of its tracks."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether the handle still holds the device."""

    @abstractmethod
    def stop(self) -> None:
        """
        Stop all tracks and release the device.
        Must be idempotent.
        """


class CameraHandle(DeviceHandle):
    """Open camera stream."""

    @abstractmethod
    async def grab_frame(self) -> CapturedFrame:
        """Take a single still frame from the live stream."""


class MicrophoneHandle(DeviceHandle):
    """Open microphone stream."""

    @abstractmethod
    def start_recording(self, mime_type: str) -> None:
        """Begin buffering audio."""

    @abstractmethod
    async def finish_recording(self) -> AudioRecording:
        """Stop buffering and return everything recorded since start."""


class MediaDevice(ABC):
    """A device that can be opened with constraints."""

    @abstractmethod
    async def open(self, **constraints) -> DeviceHandle:
        """
        Acquire the device.

        Raises:
            DevicePermissionError: If access is denied
            DeviceError: If the device cannot be opened
        """
