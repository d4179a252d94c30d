"""Root of the CMS search error hierarchy.

A ``CMSSearchError`` knows where it was raised, what low-level failure
caused it and which identifiers (record id, content type, locale) were in
play. ``to_dict`` produces the envelope returned by the API, which always
carries ``error`` and ``details``.
"""

import sys
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePath
from types import FrameType
from typing import Any


@dataclass
class ExceptionContext:
    """Where an error was raised."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "ExceptionContext":
        if frame is None:
            return cls("<unknown>", "<unknown>", "<unknown>", 0)
        owner = frame.f_locals.get("self")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=PurePath(frame.f_code.co_filename.replace("\\", "/")).name,
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


class CMSSearchError(Exception):
    """Base class for every error the service raises on purpose.

    Subclasses override ``error_code``. Wrap provider errors instead of
    letting them escape:

        try:
            await client.upsert(...)
        except UnexpectedResponse as e:
            raise VectorStoreWriteError(
                "Failed to upsert record", cause=e, context={"record_id": record_id}
            ) from e
    """

    error_code: str = "CMS_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context or {})
        self.location = self._capture_location()
        self.stack_trace = (
            "".join(traceback.format_exception(cause)) if cause is not None else None
        )

    @staticmethod
    def _capture_location() -> ExceptionContext:
        frame = sys._getframe(1)
        # Walk past the __init__ chain of the error being built
        while frame.f_back is not None and frame.f_code.co_name == "__init__" and isinstance(
            frame.f_locals.get("self"), CMSSearchError
        ):
            frame = frame.f_back
        return ExceptionContext.from_frame(frame)

    @property
    def details(self) -> str:
        """The underlying failure when there is one, otherwise the message."""
        if self.cause is None:
            return self.message
        return str(self.cause) or type(self.cause).__name__

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Serialize for API responses and JSON logs.

        Args:
            include_trace: Attach the cause's formatted traceback lines.
        """
        payload: dict[str, Any] = {
            "error": self.message,
            "details": self.details,
            "code": self.error_code,
            "type": type(self).__name__,
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            payload["context"] = self.extra_context
        if self.cause is not None:
            payload["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        if include_trace and self.stack_trace:
            payload["stack_trace"] = [line for line in self.stack_trace.splitlines() if line.strip()]
        return payload
