"""
Tests for camera and microphone flows.

Every test checks that no device handle is left open, whatever path the
flow took.
"""

import pytest

from notestream.core.devices import (
    CameraHandle,
    CameraSession,
    MediaDevice,
    MicrophoneHandle,
    VoiceRecorder,
)
from notestream.core.devices.camera import BACK, FRONT
from notestream.models.media import AudioRecording, CapturedFrame
from notestream.utils.exceptions import DeviceError, DevicePermissionError


class FakeCameraHandle(CameraHandle):
    """Camera stream that returns a fixed frame."""

    def __init__(self, facing_mode, frame_error=None):
        self.facing_mode = facing_mode
        self.frame_error = frame_error
        self.stop_calls = 0

    @property
    def active(self):
        return self.stop_calls == 0

    def stop(self):
        self.stop_calls += 1

    async def grab_frame(self):
        if self.frame_error is not None:
            raise self.frame_error
        return CapturedFrame(data=f"frame-{self.facing_mode}".encode(), width=640, height=480)


class FakeCamera(MediaDevice):
    """Camera device; facing modes in `fail_modes` cannot be opened."""

    def __init__(self, fail_modes=(), denied=False, frame_error=None):
        self.fail_modes = set(fail_modes)
        self.denied = denied
        self.frame_error = frame_error
        self.handles = []

    async def open(self, **constraints):
        if self.denied:
            raise DevicePermissionError("Permission denied")
        mode = constraints["facing_mode"]
        if mode in self.fail_modes:
            raise DeviceError(f"No {mode} camera")
        handle = FakeCameraHandle(mode, self.frame_error)
        self.handles.append(handle)
        return handle

    def all_released(self):
        return all(not h.active for h in self.handles)


class FakeMicrophoneHandle(MicrophoneHandle):
    """Microphone stream recording fixed bytes."""

    def __init__(self, data=b"voice", start_error=None, finish_error=None):
        self.data = data
        self.start_error = start_error
        self.finish_error = finish_error
        self.mime_type = None
        self.stopped = False

    @property
    def active(self):
        return not self.stopped

    def stop(self):
        self.stopped = True

    def start_recording(self, mime_type):
        if self.start_error is not None:
            raise self.start_error
        self.mime_type = mime_type

    async def finish_recording(self):
        if self.finish_error is not None:
            raise self.finish_error
        return AudioRecording(data=self.data, mime_type=self.mime_type)


class FakeMicrophone(MediaDevice):
    def __init__(self, handle=None, denied=False):
        self.handle = handle or FakeMicrophoneHandle()
        self.denied = denied
        self.constraints = None

    async def open(self, **constraints):
        if self.denied:
            raise DevicePermissionError("Permission denied")
        self.constraints = constraints
        return self.handle


@pytest.mark.unit
@pytest.mark.asyncio
class TestCameraSession:
    """Test the camera capture flow."""

    async def test_open_uses_front_camera(self):
        session = CameraSession(FakeCamera())

        await session.open()

        assert session.is_open
        assert session.facing_mode == FRONT

    async def test_open_denied(self):
        session = CameraSession(FakeCamera(denied=True))

        with pytest.raises(DevicePermissionError):
            await session.open()

        assert not session.is_open

    async def test_capture_releases_camera(self):
        camera = FakeCamera()
        session = CameraSession(camera)
        await session.open()

        frame = await session.capture()

        assert frame.data == b"frame-user"
        assert session.captured == frame
        assert not session.is_open
        assert camera.all_released()

    async def test_capture_error_releases_camera(self):
        camera = FakeCamera(frame_error=DeviceError("stream ended"))
        session = CameraSession(camera)
        await session.open()

        with pytest.raises(DeviceError):
            await session.capture()

        assert camera.all_released()

    async def test_capture_requires_open_camera(self):
        with pytest.raises(DeviceError):
            await CameraSession(FakeCamera()).capture()

    async def test_flip_switches_facing_mode(self):
        camera = FakeCamera()
        session = CameraSession(camera)
        await session.open()

        await session.flip()

        assert session.facing_mode == BACK
        assert session.is_open
        assert not camera.handles[0].active
        assert camera.handles[0].stop_calls == 1

    async def test_flip_failure_restores_previous_camera(self):
        camera = FakeCamera(fail_modes={BACK})
        session = CameraSession(camera)
        await session.open()

        with pytest.raises(DeviceError) as exc_info:
            await session.flip()

        assert exc_info.value.context == {"restored": True}
        assert session.facing_mode == FRONT
        assert session.is_open
        assert [h.active for h in camera.handles] == [False, True]

    async def test_flip_failure_without_fallback_closes(self):
        camera = FakeCamera()
        session = CameraSession(camera)
        await session.open()
        camera.fail_modes = {FRONT, BACK}

        with pytest.raises(DeviceError) as exc_info:
            await session.flip()

        assert exc_info.value.context == {"restored": False}
        assert not session.is_open
        assert camera.all_released()

    async def test_retake_discards_frame_and_reopens(self):
        camera = FakeCamera()
        session = CameraSession(camera)
        await session.open()
        await session.capture()

        await session.retake()

        assert session.captured is None
        assert session.is_open
        assert len(camera.handles) == 2

    async def test_context_manager_releases(self):
        camera = FakeCamera()

        async with CameraSession(camera) as session:
            await session.flip()

        assert camera.all_released()
        assert session.facing_mode == FRONT

    async def test_context_manager_releases_on_error(self):
        camera = FakeCamera()

        with pytest.raises(RuntimeError):
            async with CameraSession(camera) as session:
                await session.flip()
                raise RuntimeError("boom")

        assert camera.all_released()
        assert not session.is_open


@pytest.mark.unit
@pytest.mark.asyncio
class TestVoiceRecorder:
    """Test the voice note recorder."""

    async def test_start_and_stop(self):
        microphone = FakeMicrophone()
        recorder = VoiceRecorder(microphone)

        await recorder.start()
        assert recorder.is_recording
        recording = await recorder.stop()

        assert microphone.constraints == {"audio": True}
        assert recording.data == b"voice"
        assert recording.mime_type == "audio/webm"
        assert microphone.handle.stopped
        assert not recorder.is_recording

    async def test_start_denied(self):
        recorder = VoiceRecorder(FakeMicrophone(denied=True))

        with pytest.raises(DevicePermissionError):
            await recorder.start()

        assert not recorder.is_recording

    async def test_start_recording_failure_releases(self):
        handle = FakeMicrophoneHandle(start_error=DeviceError("unsupported format"))
        recorder = VoiceRecorder(FakeMicrophone(handle))

        with pytest.raises(DeviceError):
            await recorder.start()

        assert handle.stopped
        assert not recorder.is_recording

    async def test_stop_without_start(self):
        with pytest.raises(DeviceError):
            await VoiceRecorder(FakeMicrophone()).stop()

    async def test_finish_failure_releases(self):
        handle = FakeMicrophoneHandle(finish_error=DeviceError("encoder crashed"))
        recorder = VoiceRecorder(FakeMicrophone(handle))
        await recorder.start()

        with pytest.raises(DeviceError):
            await recorder.stop()

        assert handle.stopped

    async def test_cancel_releases(self):
        microphone = FakeMicrophone()
        recorder = VoiceRecorder(microphone)
        await recorder.start()

        recorder.cancel()

        assert microphone.handle.stopped
        assert not recorder.is_recording

    async def test_context_manager_releases(self):
        microphone = FakeMicrophone()

        async with VoiceRecorder(microphone, mime_type="audio/wav") as recorder:
            assert microphone.handle.mime_type == "audio/wav"
            assert recorder.is_recording

        assert microphone.handle.stopped

    async def test_context_manager_releases_on_error(self):
        microphone = FakeMicrophone()

        with pytest.raises(RuntimeError):
            async with VoiceRecorder(microphone) as recorder:
                raise RuntimeError("boom")

        assert microphone.handle.stopped
        assert not recorder.is_recording
