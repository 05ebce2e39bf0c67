# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Error taxonomy for the face generator.

Every component raises a subclass of FaceGeneratorError carrying an explicit
ErrorKind, so the tool boundary can report a structured failure without
inspecting exception messages.
"""

import errno
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Reportable error kinds surfaced on the tool failure path.

    Attributes:
        INVALID_PARAMS: Request parameters or source image bytes are invalid.
        NETWORK_UNREACHABLE: The face source could not be reached (DNS/connection).
        UPSTREAM_FAILURE: The face source responded with an error or an unusable body.
        NO_SPACE: The filesystem ran out of space while writing.
        FILE_CONFLICT: The destination exists as an incompatible entry.
        PATH_NOT_FOUND: The destination path is invalid or unreachable.
        PERMISSION_DENIED: The process may not write to the destination.
        INTERNAL_ERROR: Any other uncategorized failure.
    """
    INVALID_PARAMS = 'InvalidParams'
    NETWORK_UNREACHABLE = 'NetworkUnreachable'
    UPSTREAM_FAILURE = 'UpstreamFailure'
    NO_SPACE = 'NoSpace'
    FILE_CONFLICT = 'FileConflict'
    PATH_NOT_FOUND = 'PathNotFound'
    PERMISSION_DENIED = 'PermissionDenied'
    INTERNAL_ERROR = 'InternalError'


class FaceGeneratorError(Exception):
    """Base exception for face generation failures.

    Attributes:
        message: Human-readable error message.
        error_kind: Structured kind reported to the caller.
        reason: Optional low-level reason kept for diagnostics.
    """
    def __init__(
        self,
        message: str,
        error_kind: ErrorKind = ErrorKind.INTERNAL_ERROR,
        reason: Optional[str] = None,
    ):
        """Initialize FaceGeneratorError.

        Args:
            message: Human-readable error message.
            error_kind: Structured kind reported to the caller.
            reason: Optional low-level reason kept for diagnostics.
        """
        self.message = message
        self.error_kind = error_kind
        self.reason = reason
        super().__init__(message)

    def __str__(self) -> str:
        """Render as `<kind>: <message>`."""
        return f'{self.error_kind.value}: {self.message}'


class InvalidParamsError(FaceGeneratorError):
    """Raised when a generation request fails validation."""
    def __init__(self, message: str):
        """Initialize InvalidParamsError."""
        super().__init__(message, error_kind=ErrorKind.INVALID_PARAMS)


class FetchError(FaceGeneratorError):
    """Raised when the face source cannot deliver an image.

    A reason of 'not-found' means the host could not be reached at all and is
    reported as NETWORK_UNREACHABLE; every other reason is an UPSTREAM_FAILURE.
    """
    NOT_FOUND = 'not-found'
    OTHER = 'other'

    def __init__(self, message: str, reason: str = OTHER):
        """Initialize FetchError.

        Args:
            message: Human-readable error message.
            reason: Either FetchError.NOT_FOUND or FetchError.OTHER.
        """
        error_kind = (
            ErrorKind.NETWORK_UNREACHABLE if reason == self.NOT_FOUND else ErrorKind.UPSTREAM_FAILURE
        )
        super().__init__(message, error_kind=error_kind, reason=reason)


class ImageProcessingError(FaceGeneratorError):
    """Raised when source bytes cannot be decoded, resized, masked or encoded."""
    def __init__(self, message: str):
        """Initialize ImageProcessingError."""
        super().__init__(message, error_kind=ErrorKind.INVALID_PARAMS)


_ERRNO_KINDS = {
    errno.ENOSPC: ErrorKind.NO_SPACE,
    errno.EEXIST: ErrorKind.FILE_CONFLICT,
    errno.ENOTDIR: ErrorKind.FILE_CONFLICT,
    errno.EISDIR: ErrorKind.FILE_CONFLICT,
    errno.ENOENT: ErrorKind.PATH_NOT_FOUND,
    errno.EACCES: ErrorKind.PERMISSION_DENIED,
    errno.EPERM: ErrorKind.PERMISSION_DENIED,
    errno.EROFS: ErrorKind.PERMISSION_DENIED,
}
if hasattr(errno, 'EDQUOT'):
    _ERRNO_KINDS[errno.EDQUOT] = ErrorKind.NO_SPACE


class OutputWriteError(FaceGeneratorError):
    """Raised when the output directory or file cannot be written."""
    def __init__(self, message: str, error_kind: ErrorKind, reason: Optional[str] = None):
        """Initialize OutputWriteError."""
        super().__init__(message, error_kind=error_kind, reason=reason)

    @classmethod
    def from_os_error(cls, action: str, path: str, error: OSError) -> 'OutputWriteError':
        """Classify an OSError by errno, preserving the system reason.

        Args:
            action: Short description of what failed (e.g. 'write image').
            path: Filesystem path involved in the failure.
            error: The underlying OSError.

        Returns:
            OutputWriteError with the matching ErrorKind.
        """
        error_kind = _ERRNO_KINDS.get(error.errno, ErrorKind.INTERNAL_ERROR)
        reason = error.strerror or str(error)
        return cls(f'Failed to {action} {path}: {reason}', error_kind=error_kind, reason=reason)
