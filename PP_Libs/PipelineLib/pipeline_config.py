"""
Pipeline configuration model.

A pipeline configuration names the source image, the output destination and
encoding, and the ordered list of operations to apply.

JSON layout:
    {
        "version": "1.0",
        "input": {"source": "photo.jpg"},
        "output": {"destination": "out.jpg", "quality": 85, "format": "jpeg"},
        "operations": [{"type": "filter", "name": "sepia"}]
    }

Classes:
    InputConfig: Source image settings
    OutputConfig: Destination and encoding settings
    PipelineConfig: Complete pipeline description

Functions:
    load_pipeline_config: Read a configuration from a JSON file
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from PP_Libs.constants import (
    DEFAULT_CONFIG_VERSION,
    FIELD_DESTINATION,
    FIELD_FORMAT,
    FIELD_INPUT,
    FIELD_OPERATIONS,
    FIELD_OUTPUT,
    FIELD_QUALITY,
    FIELD_SOURCE,
    FIELD_VERSION,
    QUALITY_MAX,
    QUALITY_MIN,
)
from PP_Libs.errors import InvalidParameterError, PipelineIOError
from PP_Libs.PipelineLib.operations import Operation, operation_from_dict, operation_to_dict


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise InvalidParameterError(f"Configuration section '{key}' must be an object")
    return value


def _path_field(data: Dict[str, Any], key: str, section: str) -> Path:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidParameterError(f"'{section}.{key}' must be a non-empty path string")
    return Path(value)


@dataclass(frozen=True)
class InputConfig:
    """Source image settings.

    Attributes:
        source: Path of the base image
    """
    source: Path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputConfig":
        return cls(source=_path_field(data, FIELD_SOURCE, FIELD_INPUT))

    def to_dict(self) -> Dict[str, Any]:
        return {FIELD_SOURCE: str(self.source)}


@dataclass(frozen=True)
class OutputConfig:
    """Destination and encoding settings.

    Attributes:
        destination: Path the encoded image is written to
        quality: Optional encoder quality 0-100 (JPEG and WEBP)
        format: Optional format name; inferred from destination when absent
    """
    destination: Path
    quality: Optional[int] = None
    format: Optional[str] = None

    def __post_init__(self):
        if self.quality is not None:
            if isinstance(self.quality, bool) or not isinstance(self.quality, int):
                raise InvalidParameterError(f"quality must be an integer, got {self.quality!r}")
            if not (QUALITY_MIN <= self.quality <= QUALITY_MAX):
                raise InvalidParameterError(
                    f"quality must be {QUALITY_MIN}-{QUALITY_MAX}, got {self.quality}"
                )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OutputConfig":
        fmt = data.get(FIELD_FORMAT)
        if fmt is not None and not isinstance(fmt, str):
            raise InvalidParameterError(f"'output.format' must be a string, got {fmt!r}")
        return cls(
            destination=_path_field(data, FIELD_DESTINATION, FIELD_OUTPUT),
            quality=data.get(FIELD_QUALITY),
            format=fmt,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {FIELD_DESTINATION: str(self.destination)}
        if self.quality is not None:
            data[FIELD_QUALITY] = self.quality
        if self.format is not None:
            data[FIELD_FORMAT] = self.format
        return data


@dataclass(frozen=True)
class PipelineConfig:
    """Complete pipeline description.

    Attributes:
        input: Source image settings
        output: Destination and encoding settings
        operations: Operations, applied in order
        version: Informational format version (not validated)
    """
    input: InputConfig
    output: OutputConfig
    operations: Tuple[Operation, ...] = field(default_factory=tuple)
    version: str = DEFAULT_CONFIG_VERSION

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """
        Create from the serialized dictionary form.

        Raises:
            InvalidParameterError: If a section, field or operation is invalid
        """
        if not isinstance(data, dict):
            raise InvalidParameterError("Pipeline configuration must be an object")

        raw_operations = data.get(FIELD_OPERATIONS, [])
        if not isinstance(raw_operations, list):
            raise InvalidParameterError(f"'{FIELD_OPERATIONS}' must be a list")

        operations = []
        for index, raw in enumerate(raw_operations):
            try:
                operations.append(operation_from_dict(raw))
            except InvalidParameterError as e:
                raise InvalidParameterError(f"Invalid operation {index}: {e}", index) from e

        return cls(
            input=InputConfig.from_dict(_section(data, FIELD_INPUT)),
            output=OutputConfig.from_dict(_section(data, FIELD_OUTPUT)),
            operations=tuple(operations),
            version=str(data.get(FIELD_VERSION, DEFAULT_CONFIG_VERSION)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_VERSION: self.version,
            FIELD_INPUT: self.input.to_dict(),
            FIELD_OUTPUT: self.output.to_dict(),
            FIELD_OPERATIONS: [operation_to_dict(op) for op in self.operations],
        }


def load_pipeline_config(config_path: Union[str, Path]) -> PipelineConfig:
    """
    Load a pipeline configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed PipelineConfig

    Raises:
        PipelineIOError: If the file cannot be read
        InvalidParameterError: If the JSON is malformed or the configuration invalid
    """
    path = Path(config_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PipelineIOError(f"Failed to read configuration {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidParameterError(f"Invalid JSON in configuration {path}: {e}") from e

    return PipelineConfig.from_dict(data)
