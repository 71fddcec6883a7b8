"""
PP_Libs - Pixel Pipeline Library Modules

This package applies a declarative, ordered list of image operations to a
raster image and writes the result, organized into sub-packages:

- ImageEditingLib: Pixel buffer model and the per-operation algorithms
- PipelineLib: Operation model, configuration, execution and output encoding
"""

__version__ = "0.1.0"
