"""Camera and microphone collaborators released on every exit path."""

from notestream.core.devices.base import (
    CameraHandle,
    DeviceHandle,
    MediaDevice,
    MicrophoneHandle,
)
from notestream.core.devices.camera import CameraSession
from notestream.core.devices.recorder import VoiceRecorder

__all__ = [
    "DeviceHandle",
    "CameraHandle",
    "MicrophoneHandle",
    "MediaDevice",
    "CameraSession",
    "VoiceRecorder",
]
