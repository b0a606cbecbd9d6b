"""Client-side upload session state machine."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from src.application.dtos.uploads import (
    CreateUploadResponse,
    DeleteUploadResponse,
    UploadStatusResponse,
)
from src.client.http import ProgressCallback, SelectedFile, UploadApiError
from src.commons.telemetry import get_logger
from src.domain.exceptions import FileTooLargeError, InvalidFileTypeError
from src.domain.models.upload import UploadStatus

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Where an upload session is in its lifecycle."""

    IDLE = "idle"
    SELECTED = "selected"
    REQUESTING_SLOT = "requesting_slot"
    TRANSFERRING = "transferring"
    PROCESSING = "processing"
    READY = "ready"
    ERRORED = "errored"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {SessionState.READY, SessionState.ERRORED, SessionState.CANCELLED}
)
# The host form may only be submitted from these
SUBMITTABLE_STATES = frozenset({SessionState.IDLE, *TERMINAL_STATES})


class ErrorKind(str, Enum):
    """Category of a session failure."""

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_PROTOCOL = "provider_protocol"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    ERRORED = "errored"


_ERROR_CODE_KINDS: dict[str, ErrorKind] = {
    "TOO_LARGE": ErrorKind.VALIDATION,
    "INVALID_TYPE": ErrorKind.VALIDATION,
    "INVALID_ID": ErrorKind.VALIDATION,
    "MISSING_PARAM": ErrorKind.VALIDATION,
    "VALIDATION_ERROR": ErrorKind.VALIDATION,
    "BAD_TOKEN": ErrorKind.AUTHORIZATION,
    "FEATURE_DISABLED": ErrorKind.AUTHORIZATION,
    "GUESTS_NOT_ALLOWED": ErrorKind.AUTHORIZATION,
    "FORBIDDEN": ErrorKind.AUTHORIZATION,
    "NO_CREDENTIALS": ErrorKind.PROVIDER_UNAVAILABLE,
    "PROVIDER_ERROR": ErrorKind.PROVIDER_UNAVAILABLE,
    "BAD_RESPONSE": ErrorKind.PROVIDER_PROTOCOL,
    "RATE_LIMITED": ErrorKind.RATE_LIMITED,
}


@dataclass(frozen=True)
class SessionError:
    """Why a session ended in ``errored``."""

    kind: ErrorKind
    message: str


class InvalidTransitionError(Exception):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, operation: str, state: SessionState) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while {state.value}")


class UploadApi(Protocol):
    """What the session needs from the network."""

    async def create_upload(self, file_name: str, file_size: int) -> CreateUploadResponse: ...

    async def transfer(
        self,
        upload_url: str,
        file: SelectedFile,
        on_progress: ProgressCallback | None = None,
    ) -> None: ...

    async def get_status(self, upload_id: str) -> UploadStatusResponse: ...

    async def discard(
        self,
        asset_id: str | None = None,
        upload_id: str | None = None,
    ) -> DeleteUploadResponse: ...


StateListener = Callable[["UploadSession"], None]


class UploadSession:
    """One attempt to attach one video to one pending submission.

    Lives only in the client. Drives slot request, direct transfer and
    status polling, and tells the host form whether it may submit.

    Example:
        session = UploadSession(api, max_size_bytes=50 * 1024 * 1024)
        session.select(SelectedFile("clip.mp4", size, "video/mp4", path=p))
        await session.start()
        if session.state is SessionState.READY:
            form.update(session.submission_fields())
    """

    def __init__(
        self,
        api: UploadApi,
        max_size_bytes: int,
        poll_interval: float = 3.0,
        max_attempts: int = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize an idle session.

        Args:
            api: Network operations.
            max_size_bytes: Local size ceiling.
            poll_interval: Seconds between status polls.
            max_attempts: Poll ceiling before giving up with a timeout.
            sleep: Awaitable sleep, replaceable to simulate time.
        """
        self._api = api
        self._max_size_bytes = max_size_bytes
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._listeners: list[StateListener] = []
        self._task: asyncio.Task[None] | None = None
        self._cancel_requested = False
        self._clear()
        self.state = SessionState.IDLE

    def _clear(self) -> None:
        self.file: SelectedFile | None = None
        self.upload_id: str | None = None
        self.asset_id: str | None = None
        self.playback_id: str | None = None
        self.attempts = 0
        self.progress = 0
        self.error: SessionError | None = None

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def on_change(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called after every state change.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _transition(self, state: SessionState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    @property
    def can_submit(self) -> bool:
        """Whether the host form may be submitted right now."""
        return self.state in SUBMITTABLE_STATES

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def submission_fields(self) -> dict[str, str]:
        """Video fields to post with the host form.

        Empty unless the session is ready, so a half-finished upload can
        never be bound.
        """
        if self.state is not SessionState.READY or not self.playback_id:
            return {}
        return {
            "playback_id": self.playback_id,
            "asset_id": self.asset_id or "",
        }

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select(self, file: SelectedFile) -> None:
        """Accept a file after local checks. No network call.

        Raises:
            InvalidTransitionError: If an upload is already under way.
            InvalidFileTypeError: If the MIME type is not video/*.
            FileTooLargeError: If the file is over the size ceiling.
        """
        if self.state not in (SessionState.IDLE, SessionState.SELECTED):
            raise InvalidTransitionError("select a file", self.state)

        try:
            if not file.mime_type.startswith("video/"):
                raise InvalidFileTypeError(file.name, "Please select a video file.")
            if file.size > self._max_size_bytes:
                raise FileTooLargeError(file.size, self._max_size_bytes // (1024 * 1024))
        except (InvalidFileTypeError, FileTooLargeError) as e:
            self._clear()
            self.error = SessionError(ErrorKind.VALIDATION, str(e))
            self._transition(SessionState.IDLE)
            raise

        self._clear()
        self.file = file
        self._transition(SessionState.SELECTED)

    async def start(self) -> SessionState:
        """Run slot request, transfer and polling to a terminal state.

        Returns:
            The state the session settled in.

        Raises:
            InvalidTransitionError: If no file is selected or the session has
                already started.
        """
        if self.state is not SessionState.SELECTED or self._task is not None:
            raise InvalidTransitionError("start", self.state)

        self._cancel_requested = False
        self._transition(SessionState.REQUESTING_SLOT)
        self._task = asyncio.create_task(self._run())
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
        finally:
            self._task = None
        return self.state

    async def cancel(self) -> None:
        """Abort whatever is in flight, clean up remotely, return to idle.

        Remote cleanup is best effort; its failure is logged only.
        """
        if self.state is SessionState.IDLE:
            return
        if self.is_terminal:
            raise InvalidTransitionError("cancel", self.state)

        task = self._task
        if task is not None and not task.done():
            self._cancel_requested = True
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._transition(SessionState.CANCELLED)

        # A slot cancelled before its ID came back is never known here; it
        # expires on the provider side unused.
        if self.upload_id or self.asset_id:
            try:
                await self._api.discard(asset_id=self.asset_id, upload_id=self.upload_id)
            except (UploadApiError, httpx.HTTPError) as e:
                logger.warning(
                    "Remote cleanup after cancel failed",
                    extra={"upload_id": self.upload_id, "error": str(e)},
                )

        self._clear()
        self._transition(SessionState.IDLE)

    def reset(self) -> None:
        """Return a finished session to idle for a fresh selection."""
        if not self.is_terminal:
            raise InvalidTransitionError("reset", self.state)
        self._clear()
        self._transition(SessionState.IDLE)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _fail(self, kind: ErrorKind, message: str) -> None:
        self.error = SessionError(kind, message)
        self._transition(SessionState.ERRORED)

    def _report_progress(self, percent: int) -> None:
        # Monotone non-decreasing, clamped to 0..100
        percent = max(0, min(100, percent))
        if percent > self.progress:
            self.progress = percent

    async def _run(self) -> None:
        file = self.file
        assert file is not None

        try:
            slot = await self._api.create_upload(file.name, file.size)
        except UploadApiError as e:
            self._fail(_ERROR_CODE_KINDS.get(e.code, ErrorKind.ERRORED), e.message)
            return
        except httpx.HTTPError:
            self._fail(
                ErrorKind.PROVIDER_UNAVAILABLE,
                "Could not reach the upload service. Please try again.",
            )
            return
        except Exception:
            logger.warning("Unusable upload slot response", exc_info=True)
            self._fail(
                ErrorKind.PROVIDER_PROTOCOL,
                "Could not parse the upload service response.",
            )
            return
        self.upload_id = slot.upload_id

        self.progress = 0
        self._transition(SessionState.TRANSFERRING)
        try:
            await self._api.transfer(slot.upload_url, file, self._report_progress)
        except UploadApiError:
            self._fail(ErrorKind.ERRORED, "Upload failed.")
            return
        except httpx.HTTPError:
            self._fail(
                ErrorKind.PROVIDER_UNAVAILABLE,
                "Could not reach the upload target. Please try again.",
            )
            return
        except OSError:
            logger.warning(
                "Selected file could not be read",
                exc_info=True,
                extra={"upload_id": self.upload_id},
            )
            self._fail(ErrorKind.ERRORED, "Could not read the selected file.")
            return
        except Exception:
            logger.warning(
                "Transfer failed",
                exc_info=True,
                extra={"upload_id": self.upload_id},
            )
            self._fail(ErrorKind.ERRORED, "Upload failed.")
            return
        self._report_progress(100)

        self._transition(SessionState.PROCESSING)
        await self._poll(slot.upload_id)

    async def _poll(self, upload_id: str) -> None:
        for attempt in range(1, self._max_attempts + 1):
            await self._sleep(self._poll_interval)
            self.attempts = attempt

            try:
                status = await self._api.get_status(upload_id)
            except UploadApiError as e:
                if e.is_provider_error:
                    self._fail(ErrorKind.PROVIDER_UNAVAILABLE, e.message)
                    return
                logger.debug(
                    "Status poll failed, retrying",
                    extra={"upload_id": upload_id, "attempt": attempt},
                )
                continue
            except httpx.HTTPError:
                continue
            except Exception:
                logger.warning(
                    "Unusable status response, retrying",
                    exc_info=True,
                    extra={"upload_id": upload_id, "attempt": attempt},
                )
                continue

            if status.asset_id:
                self.asset_id = status.asset_id

            if status.status == UploadStatus.READY and status.playback_id:
                self.playback_id = status.playback_id
                self._transition(SessionState.READY)
                return
            if status.status == UploadStatus.ERRORED:
                self._fail(ErrorKind.ERRORED, "Video processing failed.")
                return

        self._fail(ErrorKind.TIMEOUT, "Timed out waiting for video to process.")
