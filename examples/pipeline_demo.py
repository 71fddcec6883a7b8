"""
Pixel Pipeline Examples

Builds a small pipeline from a JSON-style dictionary, runs it on a generated
image, and shows how a failing operation is reported.
"""

import sys
import tempfile
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
from PIL import Image

from PP_Libs.errors import PipelineError
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.PipelineLib.pipeline_config import PipelineConfig
from PP_Libs.PipelineLib.pipeline_executor import get_pipeline_summary, run_config, run_pipeline
from PP_Libs.PipelineLib.operations import ResizeOperation, SepiaFilter


def example_config_pipeline(work_dir):
    """Example: Run a configuration dictionary end to end."""
    print("=" * 60)
    print("Example 1: Configuration Pipeline")
    print("=" * 60)

    source = work_dir / "gradient.png"
    ramp = np.tile(np.linspace(0, 255, 256, dtype=np.uint8), (128, 1))
    Image.fromarray(ramp).convert("RGBA").save(source)

    config = PipelineConfig.from_dict({
        "input": {"source": str(source)},
        "output": {"destination": str(work_dir / "result.jpg"), "quality": 85},
        "operations": [
            {"type": "resize", "width": 128, "height": 64, "filter": "catmull"},
            {"type": "filter", "name": "sepia"},
            {"type": "filter", "name": "vignette", "intensity": 0.6},
            {"type": "filter", "name": "grain", "intensity": 0.1},
        ],
    })

    print(get_pipeline_summary(config.operations))

    output = run_config(config, rng=np.random.default_rng(7))
    with Image.open(output) as img:
        print(f"\n✓ Wrote {output.name}: {img.format} {img.size[0]}x{img.size[1]}")


def example_fail_fast():
    """Example: The first failing operation stops the run."""
    print("\n" + "=" * 60)
    print("Example 2: Fail-Fast Errors")
    print("=" * 60)

    buffer = PixelBuffer.new(32, 32, (255, 0, 0, 255))
    operations = [SepiaFilter(), ResizeOperation(0, 16), SepiaFilter()]

    try:
        run_pipeline(buffer, operations)
        print("❌ FAILED: Invalid resize was accepted!")
    except PipelineError as e:
        print(f"✓ Pipeline stopped at operation {e.operation_index}")
        print(f"  Error: {e}")


def main():
    """Run all examples."""
    print("\n" + "=" * 60)
    print("PIXEL PIPELINE EXAMPLES")
    print("=" * 60 + "\n")

    with tempfile.TemporaryDirectory() as temp:
        work_dir = Path(temp)
        example_config_pipeline(work_dir)
        example_fail_fast()

    print("\n" + "=" * 60)
    print("All examples completed")
    print("=" * 60)


if __name__ == "__main__":
    main()
