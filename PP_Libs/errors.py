"""
Error types raised by Pixel Pipeline.

Each error also derives from the built-in exception a caller would expect
for that failure (OSError for file problems, ValueError for bad data), so
code that only knows the built-ins keeps working.

Classes:
    PipelineError: Base class for every pipeline failure
    PipelineIOError: A file could not be read or written
    DecodeError: An image or font file could not be decoded
    InvalidParameterError: An operation or configuration value is invalid
    EncodeError: The output codec could not encode the buffer
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for pipeline failures.

    Attributes:
        operation_index: Position of the failing operation in the pipeline,
            or None when the failure happened outside operation execution
    """

    def __init__(self, message: str, operation_index: Optional[int] = None):
        super().__init__(message)
        self.operation_index = operation_index


class PipelineIOError(PipelineError, OSError):
    """Source, overlay, font or destination could not be accessed."""


class DecodeError(PipelineError, ValueError):
    """Unsupported or corrupt image or font encoding."""


class InvalidParameterError(PipelineError, ValueError):
    """Operation parameter or configuration value is invalid."""


class EncodeError(PipelineError, ValueError):
    """Output codec cannot represent the buffer."""
