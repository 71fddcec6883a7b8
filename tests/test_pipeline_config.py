"""
Tests for the pipeline configuration model and JSON loading.
"""

import json
import tempfile
import unittest
from pathlib import Path

from PP_Libs.errors import InvalidParameterError, PipelineIOError
from PP_Libs.PipelineLib.operations import ResizeOperation, SepiaFilter
from PP_Libs.PipelineLib.pipeline_config import (
    InputConfig,
    OutputConfig,
    PipelineConfig,
    load_pipeline_config,
)


def _config_dict(**overrides):
    data = {
        "version": "1.0",
        "input": {"source": "photo.jpg"},
        "output": {"destination": "out.jpg", "quality": 85, "format": "jpeg"},
        "operations": [
            {"type": "resize", "width": 10, "height": 10},
            {"type": "filter", "name": "sepia"},
        ],
    }
    data.update(overrides)
    return data


class TestOutputConfig(unittest.TestCase):
    """Test output settings validation."""

    def test_defaults(self):
        output = OutputConfig(Path("out.png"))

        self.assertIsNone(output.quality)
        self.assertIsNone(output.format)

    def test_quality_bounds(self):
        OutputConfig(Path("a.jpg"), quality=0)
        OutputConfig(Path("a.jpg"), quality=100)

        for quality in (-1, 101):
            with self.subTest(quality=quality):
                with self.assertRaises(InvalidParameterError):
                    OutputConfig(Path("a.jpg"), quality=quality)

    def test_quality_must_be_integer(self):
        for quality in (85.5, "85", True):
            with self.subTest(quality=quality):
                with self.assertRaises(InvalidParameterError):
                    OutputConfig(Path("a.jpg"), quality=quality)

    def test_format_must_be_string(self):
        with self.assertRaises(InvalidParameterError):
            OutputConfig.from_dict({"destination": "a.png", "format": 5})

    def test_to_dict_skips_unset(self):
        self.assertEqual(OutputConfig(Path("a.png")).to_dict(), {"destination": "a.png"})


class TestPipelineConfigFromDict(unittest.TestCase):
    """Test parsing complete configurations."""

    def test_full(self):
        config = PipelineConfig.from_dict(_config_dict())

        self.assertEqual(config.input, InputConfig(Path("photo.jpg")))
        self.assertEqual(config.output, OutputConfig(Path("out.jpg"), 85, "jpeg"))
        self.assertEqual(config.operations, (ResizeOperation(10, 10), SepiaFilter()))
        self.assertEqual(config.version, "1.0")

    def test_operations_default_empty(self):
        data = _config_dict()
        del data["operations"]
        del data["version"]

        config = PipelineConfig.from_dict(data)

        self.assertEqual(config.operations, ())
        self.assertEqual(config.version, "1.0")

    def test_missing_input_section(self):
        data = _config_dict()
        del data["input"]

        with self.assertRaises(InvalidParameterError):
            PipelineConfig.from_dict(data)

    def test_empty_source(self):
        with self.assertRaises(InvalidParameterError):
            PipelineConfig.from_dict(_config_dict(input={"source": ""}))

    def test_missing_destination(self):
        with self.assertRaises(InvalidParameterError):
            PipelineConfig.from_dict(_config_dict(output={"quality": 50}))

    def test_operations_must_be_list(self):
        with self.assertRaises(InvalidParameterError):
            PipelineConfig.from_dict(_config_dict(operations={"type": "resize"}))

    def test_invalid_operation_reports_index(self):
        data = _config_dict(
            operations=[
                {"type": "filter", "name": "sepia"},
                {"type": "filter", "name": "sparkle"},
            ]
        )

        with self.assertRaises(InvalidParameterError) as ctx:
            PipelineConfig.from_dict(data)

        self.assertEqual(ctx.exception.operation_index, 1)
        self.assertIn("sparkle", str(ctx.exception))

    def test_not_a_mapping(self):
        with self.assertRaises(InvalidParameterError):
            PipelineConfig.from_dict([])

    def test_to_dict_round_trip(self):
        data = _config_dict()
        config = PipelineConfig.from_dict(data)

        self.assertEqual(PipelineConfig.from_dict(config.to_dict()), config)
        self.assertEqual(config.to_dict()["operations"][1], {"type": "filter", "name": "sepia"})


class TestLoadPipelineConfig(unittest.TestCase):
    """Test reading configurations from disk."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_load(self):
        path = self.dir / "pipeline.json"
        path.write_text(json.dumps(_config_dict()), encoding="utf-8")

        config = load_pipeline_config(path)

        self.assertEqual(len(config.operations), 2)

    def test_missing_file(self):
        with self.assertRaises(PipelineIOError):
            load_pipeline_config(self.dir / "missing.json")

    def test_malformed_json(self):
        path = self.dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with self.assertRaises(InvalidParameterError):
            load_pipeline_config(path)
