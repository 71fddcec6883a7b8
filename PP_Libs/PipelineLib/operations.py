"""
Operation model for Pixel Pipeline.

Each configured transform is an immutable dataclass. The set of operation
classes is closed: the executor dispatches on the class, and a new operation
is added by defining its dataclass here and its handler in the executor.

Serialized form (JSON objects):
    {"type": "resize", "width": 800, "height": 600, "filter": "lanczos3"}
    {"type": "overlay", "image": "logo.png", "x": 10, "y": 10, "opacity": 0.5}
    {"type": "filter", "name": "sepia"}
    {"type": "filter", "name": "blur", "radius": 2.0}
    {"type": "text", "content": "Hi", "font": "font.ttf", "size": 32,
     "color": "#ffffff", "x": 0, "y": 0,
     "stroke": {"color": "#000000", "width": 2},
     "shadow": {"color": "#00000080", "blur": 3, "offset_x": 2, "offset_y": 2}}

Functions:
    operation_from_dict: Build an operation from its serialized form
    operation_to_dict: Serialize an operation
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Type, Union

from PP_Libs.constants import (
    DEFAULT_RESIZE_FILTER,
    FIELD_NAME,
    FIELD_TYPE,
    FILTER_BLUR,
    FILTER_BRIGHTNESS,
    FILTER_CONTRAST,
    FILTER_DOUBLE_VISION,
    FILTER_GRAIN,
    FILTER_HUE_ROTATE,
    FILTER_SATURATION,
    FILTER_SEPIA,
    FILTER_VIGNETTE,
    OPERATION_FILTER,
    OPERATION_OVERLAY,
    OPERATION_RESIZE,
    OPERATION_TEXT,
)
from PP_Libs.errors import InvalidParameterError
from PP_Libs.ImageEditingLib.text_render import TextShadow, TextStroke


# ============================================================================
# Field readers
# ============================================================================

def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if key not in data or data[key] is None:
        raise InvalidParameterError(f"{context} is missing required field '{key}'")
    return data[key]


def _as_int(value: Any, key: str, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{context} field '{key}' must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidParameterError(f"{context} field '{key}' must be an integer, got {value!r}")
    return int(value)


def _as_float(value: Any, key: str, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{context} field '{key}' must be a number, got {value!r}")
    return float(value)


def _as_str(value: Any, key: str, context: str) -> str:
    if not isinstance(value, str):
        raise InvalidParameterError(f"{context} field '{key}' must be a string, got {value!r}")
    return value


def _int_field(data: Dict[str, Any], key: str, context: str) -> int:
    return _as_int(_require(data, key, context), key, context)


def _float_field(data: Dict[str, Any], key: str, context: str) -> float:
    return _as_float(_require(data, key, context), key, context)


def _str_field(data: Dict[str, Any], key: str, context: str) -> str:
    return _as_str(_require(data, key, context), key, context)


def _optional(data: Dict[str, Any], key: str, context: str, reader) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return reader(value, key, context)


# ============================================================================
# Operations
# ============================================================================

@dataclass(frozen=True)
class ResizeOperation:
    """Resize to exactly width x height.

    Attributes:
        width: Target width in pixels
        height: Target height in pixels
        filter: Resampling kernel ('nearest', 'triangle', 'catmull_rom',
                'gaussian', 'lanczos3'); unknown names fall back to lanczos3
    """
    TYPE: ClassVar[str] = OPERATION_RESIZE

    width: int
    height: int
    filter: str = DEFAULT_RESIZE_FILTER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResizeOperation":
        context = "resize operation"
        return cls(
            width=_int_field(data, "width", context),
            height=_int_field(data, "height", context),
            filter=_optional(data, "filter", context, _as_str) or DEFAULT_RESIZE_FILTER,
        )


@dataclass(frozen=True)
class OverlayOperation:
    """Composite another image at (x, y).

    Attributes:
        image: Path to the overlay image
        x: Left edge on the base canvas
        y: Top edge on the base canvas
        opacity: Optional opacity 0.0-1.0; None means straight overlay
        blend_mode: Reserved; only 'normal' is defined
    """
    TYPE: ClassVar[str] = OPERATION_OVERLAY

    image: Path
    x: int
    y: int
    opacity: Optional[float] = None
    blend_mode: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverlayOperation":
        context = "overlay operation"
        return cls(
            image=Path(_str_field(data, "image", context)),
            x=_int_field(data, "x", context),
            y=_int_field(data, "y", context),
            opacity=_optional(data, "opacity", context, _as_float),
            blend_mode=_optional(data, "blend_mode", context, _as_str),
        )


@dataclass(frozen=True)
class TextOperation:
    """Draw text with optional stroke and shadow.

    Attributes:
        content: Text to draw
        font: Path to a TrueType/OpenType font file
        size: Font size in pixels
        color: Fill colour as a hex string
        x: Left edge of the text origin
        y: Ascender line of the text origin
        stroke: Optional outline
        shadow: Optional drop shadow
    """
    TYPE: ClassVar[str] = OPERATION_TEXT

    content: str
    font: Path
    size: float
    color: str
    x: int
    y: int
    stroke: Optional[TextStroke] = None
    shadow: Optional[TextShadow] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextOperation":
        context = "text operation"

        stroke = None
        stroke_data = data.get("stroke")
        if stroke_data is not None:
            if not isinstance(stroke_data, dict):
                raise InvalidParameterError(f"{context} field 'stroke' must be an object")
            stroke = TextStroke(
                color=_str_field(stroke_data, "color", "text stroke"),
                width=_float_field(stroke_data, "width", "text stroke"),
            )

        shadow = None
        shadow_data = data.get("shadow")
        if shadow_data is not None:
            if not isinstance(shadow_data, dict):
                raise InvalidParameterError(f"{context} field 'shadow' must be an object")
            shadow = TextShadow(
                color=_str_field(shadow_data, "color", "text shadow"),
                blur=_float_field(shadow_data, "blur", "text shadow"),
                offset_x=_int_field(shadow_data, "offset_x", "text shadow"),
                offset_y=_int_field(shadow_data, "offset_y", "text shadow"),
            )

        return cls(
            content=_str_field(data, "content", context),
            font=Path(_str_field(data, "font", context)),
            size=_float_field(data, "size", context),
            color=_str_field(data, "color", context),
            x=_int_field(data, "x", context),
            y=_int_field(data, "y", context),
            stroke=stroke,
            shadow=shadow,
        )


# ============================================================================
# Filters
# ============================================================================

@dataclass(frozen=True)
class GrainFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_GRAIN

    intensity: float


@dataclass(frozen=True)
class BlurFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_BLUR

    radius: float


@dataclass(frozen=True)
class DoubleVisionFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_DOUBLE_VISION

    offset_x: int
    offset_y: int
    opacity: float


@dataclass(frozen=True)
class VignetteFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_VIGNETTE

    intensity: float


@dataclass(frozen=True)
class SepiaFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_SEPIA


@dataclass(frozen=True)
class BrightnessFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_BRIGHTNESS

    value: float


@dataclass(frozen=True)
class ContrastFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_CONTRAST

    value: float


@dataclass(frozen=True)
class SaturationFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_SATURATION

    value: float


@dataclass(frozen=True)
class HueRotateFilter:
    TYPE: ClassVar[str] = OPERATION_FILTER
    NAME: ClassVar[str] = FILTER_HUE_ROTATE

    degrees: float


FilterOperation = Union[
    GrainFilter,
    BlurFilter,
    DoubleVisionFilter,
    VignetteFilter,
    SepiaFilter,
    BrightnessFilter,
    ContrastFilter,
    SaturationFilter,
    HueRotateFilter,
]

Operation = Union[ResizeOperation, OverlayOperation, FilterOperation, TextOperation]

FILTER_CLASSES: Dict[str, Type[Any]] = {
    cls.NAME: cls
    for cls in (
        GrainFilter,
        BlurFilter,
        DoubleVisionFilter,
        VignetteFilter,
        SepiaFilter,
        BrightnessFilter,
        ContrastFilter,
        SaturationFilter,
        HueRotateFilter,
    )
}

OPERATION_CLASSES: Dict[str, Type[Any]] = {
    OPERATION_RESIZE: ResizeOperation,
    OPERATION_OVERLAY: OverlayOperation,
    OPERATION_TEXT: TextOperation,
}

# Integer-valued filter fields; every other filter field is a float
_INT_FILTER_FIELDS = {"offset_x", "offset_y"}


def _filter_from_dict(data: Dict[str, Any]) -> FilterOperation:
    name = data.get(FIELD_NAME)
    filter_cls = FILTER_CLASSES.get(name) if isinstance(name, str) else None
    if filter_cls is None:
        raise InvalidParameterError(
            f"Unknown filter name: {name!r}. "
            f"Valid names: {', '.join(sorted(FILTER_CLASSES))}"
        )

    context = f"{name} filter"
    kwargs = {}
    for field_info in fields(filter_cls):
        if field_info.name in _INT_FILTER_FIELDS:
            kwargs[field_info.name] = _int_field(data, field_info.name, context)
        else:
            kwargs[field_info.name] = _float_field(data, field_info.name, context)
    return filter_cls(**kwargs)


def operation_from_dict(data: Dict[str, Any]) -> Operation:
    """
    Build an operation from its serialized form.

    Args:
        data: Mapping tagged with 'type' (and 'name' for filters)

    Returns:
        Operation dataclass instance

    Raises:
        InvalidParameterError: If the tag is unknown or a field is missing or mistyped
    """
    if not isinstance(data, dict):
        raise InvalidParameterError(f"Operation must be an object, got {type(data).__name__}")

    op_type = data.get(FIELD_TYPE)
    if op_type == OPERATION_FILTER:
        return _filter_from_dict(data)

    op_cls = OPERATION_CLASSES.get(op_type) if isinstance(op_type, str) else None
    if op_cls is None:
        valid = sorted(list(OPERATION_CLASSES) + [OPERATION_FILTER])
        raise InvalidParameterError(
            f"Unknown operation type: {op_type!r}. Valid types: {', '.join(valid)}"
        )
    return op_cls.from_dict(data)


def operation_to_dict(operation: Operation) -> Dict[str, Any]:
    """Serialize an operation to its tagged dictionary form."""
    data: Dict[str, Any] = {FIELD_TYPE: operation.TYPE}
    if operation.TYPE == OPERATION_FILTER:
        data[FIELD_NAME] = operation.NAME

    for field_info in fields(operation):
        value = getattr(operation, field_info.name)
        if value is None:
            continue
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, (TextStroke, TextShadow)):
            value = {f.name: getattr(value, f.name) for f in fields(value)}
        data[field_info.name] = value
    return data
