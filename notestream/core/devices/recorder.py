"""
Voice note recorder.
"""

from notestream.core.devices.base import MediaDevice, MicrophoneHandle
from notestream.models.media import AudioRecording
from notestream.utils.exceptions import DeviceError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)


class VoiceRecorder:
    """
    Records one voice note from a microphone.

    The recording is only available after an explicit `stop()`. The
    microphone is released on stop, on error and on context exit.
    """

    def __init__(self, microphone: MediaDevice, mime_type: str = "audio/webm"):
        self.microphone = microphone
        self.mime_type = mime_type
        self._handle: MicrophoneHandle | None = None

    @property
    def is_recording(self) -> bool:
        return self._handle is not None

    async def start(self) -> None:
        """
        Acquire the microphone and start buffering.

        Raises:
            DevicePermissionError: If microphone access is denied
        """
        if self._handle is not None:
            return
        handle = await self.microphone.open(audio=True)
        try:
            handle.start_recording(self.mime_type)
        except Exception:
            handle.stop()
            raise
        self._handle = handle
        logger.bind(mime_type=self.mime_type).debug("Recording started")

    async def stop(self) -> AudioRecording:
        """
        Stop recording and release the microphone.

        Raises:
            DeviceError: If nothing is being recorded
        """
        if self._handle is None:
            raise DeviceError("Recorder is not running")
        handle, self._handle = self._handle, None
        try:
            recording = await handle.finish_recording()
        finally:
            handle.stop()
        logger.bind(bytes=len(recording.data)).debug("Recording stopped")
        return recording

    def cancel(self) -> None:
        """Drop the recording in progress and release the microphone."""
        if self._handle is not None:
            self._handle.stop()
            self._handle = None

    async def __aenter__(self) -> "VoiceRecorder":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()
