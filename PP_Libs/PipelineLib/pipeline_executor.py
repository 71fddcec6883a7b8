"""
Pipeline Executor for Pixel Pipeline.

Applies an ordered list of operations to a pixel buffer. Each operation
receives the buffer produced by the previous one; the first failure aborts
the run and no later operation executes.

Dispatch goes through a fixed table mapping each operation class to its
handler. Adding an operation means adding its dataclass in operations.py and
its handler here.

Functions:
    apply_operation: Apply a single operation
    run_pipeline: Apply operations in order
    process_config: Load the configured source and run its operations
    run_config: Process a configuration and write the result
    describe_operation: One-line description of an operation
    get_pipeline_summary: Human-readable listing of a pipeline
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np

from PP_Libs.constants import FIELD_NAME, FIELD_TYPE
from PP_Libs.errors import InvalidParameterError, PipelineError
from PP_Libs.ImageEditingLib.blur_filter import apply_gaussian_blur
from PP_Libs.ImageEditingLib.color_filters import (
    apply_brightness,
    apply_contrast,
    apply_hue_rotate,
    apply_saturation,
    apply_sepia,
)
from PP_Libs.ImageEditingLib.effect_filters import (
    apply_double_vision,
    apply_grain,
    apply_vignette,
)
from PP_Libs.ImageEditingLib.image_io import load_image
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.ImageEditingLib.overlay_ops import apply_overlay
from PP_Libs.ImageEditingLib.resize_ops import resize_buffer
from PP_Libs.ImageEditingLib.text_render import render_text
from PP_Libs.PipelineLib.operations import (
    BlurFilter,
    BrightnessFilter,
    ContrastFilter,
    DoubleVisionFilter,
    GrainFilter,
    HueRotateFilter,
    Operation,
    OverlayOperation,
    ResizeOperation,
    SaturationFilter,
    SepiaFilter,
    TextOperation,
    VignetteFilter,
    operation_to_dict,
)
from PP_Libs.PipelineLib.output_writer import persist
from PP_Libs.PipelineLib.pipeline_config import PipelineConfig

logger = logging.getLogger(__name__)

# (buffer, operation, rng) -> new buffer
OperationHandler = Callable[[PixelBuffer, Any, np.random.Generator], PixelBuffer]


def _apply_resize(buffer: PixelBuffer, op: ResizeOperation, rng: np.random.Generator) -> PixelBuffer:
    return resize_buffer(buffer, op.width, op.height, op.filter)


def _apply_overlay(buffer: PixelBuffer, op: OverlayOperation, rng: np.random.Generator) -> PixelBuffer:
    return apply_overlay(buffer, op.image, op.x, op.y, op.opacity, op.blend_mode)


def _apply_text(buffer: PixelBuffer, op: TextOperation, rng: np.random.Generator) -> PixelBuffer:
    return render_text(
        buffer, op.content, op.font, op.size, op.color, op.x, op.y, op.stroke, op.shadow
    )


_OPERATION_HANDLERS: Dict[type, OperationHandler] = {
    ResizeOperation: _apply_resize,
    OverlayOperation: _apply_overlay,
    TextOperation: _apply_text,
    GrainFilter: lambda buffer, op, rng: apply_grain(buffer, op.intensity, rng),
    BlurFilter: lambda buffer, op, rng: apply_gaussian_blur(buffer, op.radius),
    DoubleVisionFilter: lambda buffer, op, rng: apply_double_vision(
        buffer, op.offset_x, op.offset_y, op.opacity
    ),
    VignetteFilter: lambda buffer, op, rng: apply_vignette(buffer, op.intensity),
    SepiaFilter: lambda buffer, op, rng: apply_sepia(buffer),
    BrightnessFilter: lambda buffer, op, rng: apply_brightness(buffer, op.value),
    ContrastFilter: lambda buffer, op, rng: apply_contrast(buffer, op.value),
    SaturationFilter: lambda buffer, op, rng: apply_saturation(buffer, op.value),
    HueRotateFilter: lambda buffer, op, rng: apply_hue_rotate(buffer, op.degrees),
}


def describe_operation(operation: Operation) -> str:
    """
    Describe an operation in one line.

    Example:
        >>> describe_operation(ResizeOperation(2, 2, "nearest"))
        "resize(width=2, height=2, filter='nearest')"
    """
    data = operation_to_dict(operation)
    label = data.pop(FIELD_NAME, None) or data.pop(FIELD_TYPE)
    data.pop(FIELD_TYPE, None)
    params = ", ".join(f"{key}={value!r}" for key, value in data.items())
    return f"{label}({params})"


def apply_operation(
    buffer: PixelBuffer,
    operation: Operation,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Apply a single operation.

    Args:
        buffer: Current buffer (not modified)
        operation: Operation dataclass instance
        rng: Random generator used by Grain (default: fresh default_rng())

    Returns:
        The buffer produced by the operation

    Raises:
        InvalidParameterError: If the object is not a known operation
        PipelineError: Any failure raised by the operation
    """
    handler = _OPERATION_HANDLERS.get(type(operation))
    if handler is None:
        raise InvalidParameterError(f"Unsupported operation: {type(operation).__name__}")

    if rng is None:
        rng = np.random.default_rng()

    return handler(buffer, operation, rng)


def run_pipeline(
    buffer: PixelBuffer,
    operations: Sequence[Operation],
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Apply operations in list order.

    Args:
        buffer: Initial buffer
        operations: Ordered operations
        rng: Random generator shared by every Grain operation in the run.
             Pass a seeded numpy Generator for reproducible output.

    Returns:
        The final buffer

    Raises:
        PipelineError: From the first failing operation, with operation_index
                       set. Unexpected exceptions are wrapped in PipelineError.
    """
    if rng is None:
        rng = np.random.default_rng()

    current = buffer
    for index, operation in enumerate(operations):
        logger.debug(f"Applying operation {index}: {describe_operation(operation)}")
        try:
            current = apply_operation(current, operation, rng)
        except PipelineError as e:
            if e.operation_index is None:
                e.operation_index = index
            logger.debug(f"Operation {index} failed: {e}")
            raise
        except Exception as e:
            raise PipelineError(
                f"Error executing operation {index} ({type(operation).__name__}): {str(e)}",
                index,
            ) from e

    return current


def process_config(
    config: PipelineConfig,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Load the configured source image and run the configured operations.

    Raises:
        PipelineIOError: If the source cannot be read
        DecodeError: If the source is not a valid image
        PipelineError: From the first failing operation
    """
    buffer = load_image(config.input.source)
    logger.info(
        f"Loaded {config.input.source} ({buffer.width}x{buffer.height}), "
        f"{len(config.operations)} operation(s)"
    )
    return run_pipeline(buffer, config.operations, rng)


def run_config(
    config: PipelineConfig,
    rng: Optional[np.random.Generator] = None,
    create_directories: bool = False,
) -> Path:
    """
    Process a configuration and write the result to its destination.

    Nothing is written unless every operation and the encoding succeed.

    Returns:
        Path the output image was written to
    """
    result = process_config(config, rng)
    return persist(result, config.output, create_directories=create_directories)


def get_pipeline_summary(operations: Sequence[Operation]) -> str:
    """
    Generate human-readable summary of a pipeline.

    Example:
        >>> print(get_pipeline_summary([SepiaFilter(), BlurFilter(radius=2.0)]))
        Pipeline Summary:
          Total Operations: 2
        <BLANKLINE>
          0. sepia()
          1. blur(radius=2.0)
    """
    lines = [
        "Pipeline Summary:",
        f"  Total Operations: {len(operations)}",
        "",
    ]

    for index, operation in enumerate(operations):
        lines.append(f"  {index}. {describe_operation(operation)}")

    return "\n".join(lines)
