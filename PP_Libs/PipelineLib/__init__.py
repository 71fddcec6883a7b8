"""
PipelineLib - Pipeline model, execution and output

This module handles the operation model, pipeline configuration,
sequential execution of operations, and encoding of the final image.
"""

from PP_Libs.PipelineLib.operations import (
    ResizeOperation,
    OverlayOperation,
    TextOperation,
    GrainFilter,
    BlurFilter,
    DoubleVisionFilter,
    VignetteFilter,
    SepiaFilter,
    BrightnessFilter,
    ContrastFilter,
    SaturationFilter,
    HueRotateFilter,
    Operation,
    FilterOperation,
    operation_from_dict,
    operation_to_dict,
)
from PP_Libs.PipelineLib.pipeline_config import (
    InputConfig,
    OutputConfig,
    PipelineConfig,
    load_pipeline_config,
)
from PP_Libs.PipelineLib.output_writer import (
    ImageCodec,
    OutputWriter,
    resolve_format,
    encode_buffer,
    persist,
)
from PP_Libs.PipelineLib.pipeline_executor import (
    apply_operation,
    run_pipeline,
    process_config,
    run_config,
    describe_operation,
    get_pipeline_summary,
)

__all__ = [
    "ResizeOperation",
    "OverlayOperation",
    "TextOperation",
    "GrainFilter",
    "BlurFilter",
    "DoubleVisionFilter",
    "VignetteFilter",
    "SepiaFilter",
    "BrightnessFilter",
    "ContrastFilter",
    "SaturationFilter",
    "HueRotateFilter",
    "Operation",
    "FilterOperation",
    "operation_from_dict",
    "operation_to_dict",
    "InputConfig",
    "OutputConfig",
    "PipelineConfig",
    "load_pipeline_config",
    "ImageCodec",
    "OutputWriter",
    "resolve_format",
    "encode_buffer",
    "persist",
    "apply_operation",
    "run_pipeline",
    "process_config",
    "run_config",
    "describe_operation",
    "get_pipeline_summary",
]
