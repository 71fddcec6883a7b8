"""
Constants and configuration values for Pixel Pipeline.

This module centralizes the lookup tables, defaults and limits used
throughout the package.
"""

# Pixel format
BUFFER_MODE = "RGBA"
CHANNEL_MIN = 0
CHANNEL_MAX = 255

# Resize filters
RESIZE_FILTER_NEAREST = "nearest"
RESIZE_FILTER_TRIANGLE = "triangle"
RESIZE_FILTER_CATMULL_ROM = "catmull_rom"
RESIZE_FILTER_GAUSSIAN = "gaussian"
RESIZE_FILTER_LANCZOS3 = "lanczos3"
DEFAULT_RESIZE_FILTER = RESIZE_FILTER_LANCZOS3

# Accepted spellings -> canonical filter name
RESIZE_FILTER_ALIASES = {
    "nearest": RESIZE_FILTER_NEAREST,
    "triangle": RESIZE_FILTER_TRIANGLE,
    "catmull_rom": RESIZE_FILTER_CATMULL_ROM,
    "catmull": RESIZE_FILTER_CATMULL_ROM,
    "gaussian": RESIZE_FILTER_GAUSSIAN,
    "lanczos3": RESIZE_FILTER_LANCZOS3,
}

# Gaussian resampling kernel
GAUSSIAN_RESAMPLE_SIGMA = 0.5
GAUSSIAN_RESAMPLE_SUPPORT = 3.0

# Overlay blend modes; every mode composites with straight alpha blending
BLEND_MODE_NORMAL = "normal"
SUPPORTED_BLEND_MODES = {BLEND_MODE_NORMAL}

# Colour maths
LUMA_WEIGHTS = (0.299, 0.587, 0.114)
CONTRAST_PIVOT = 128.0
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

# Text rendering
MAX_STROKE_WIDTH = 256
TEXT_ANCHOR = "la"

# Output formats: alias (lower case) -> Pillow format name
FORMAT_ALIASES = {
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "bmp": "BMP",
    "ico": "ICO",
    "tiff": "TIFF",
    "tif": "TIFF",
    "webp": "WEBP",
}
DEFAULT_OUTPUT_FORMAT = "PNG"
QUALITY_FORMATS = {"JPEG", "WEBP"}
QUALITY_MIN = 0
QUALITY_MAX = 100
TEMP_FILE_PREFIX = ".pp-"

# Operation tags in serialized configurations
FIELD_TYPE = "type"
FIELD_NAME = "name"
OPERATION_RESIZE = "resize"
OPERATION_OVERLAY = "overlay"
OPERATION_FILTER = "filter"
OPERATION_TEXT = "text"

FILTER_GRAIN = "grain"
FILTER_BLUR = "blur"
FILTER_DOUBLE_VISION = "double_vision"
FILTER_VIGNETTE = "vignette"
FILTER_SEPIA = "sepia"
FILTER_BRIGHTNESS = "brightness"
FILTER_CONTRAST = "contrast"
FILTER_SATURATION = "saturation"
FILTER_HUE_ROTATE = "hue_rotate"

# Pipeline configuration field names
FIELD_VERSION = "version"
FIELD_INPUT = "input"
FIELD_OUTPUT = "output"
FIELD_OPERATIONS = "operations"
FIELD_SOURCE = "source"
FIELD_DESTINATION = "destination"
FIELD_QUALITY = "quality"
FIELD_FORMAT = "format"
DEFAULT_CONFIG_VERSION = "1.0"
