"""Test cross-cutting utilities: fs, logging_config, profiler, geometry.

Run:
    pytest tests/test_utils.py -v
"""

import contextlib
import io
import json
import logging
import math

import numpy as np
import pytest
import yaml
from PIL import Image

from zen_garden.utils import fs, geometry, logging_config, profiler


# ============================================================================
# FS TESTS
# ============================================================================

def test_ensure_dir_creates_nested(tmp_path):
    new_dir = tmp_path / "a" / "b" / "c"
    assert fs.ensure_dir(new_dir) == new_dir
    assert new_dir.is_dir()
    fs.ensure_dir(new_dir)


def test_atomic_yaml_roundtrip(tmp_path):
    data = {'style': 'wide', 'path': [[0.0, 1.0], [2.0, 3.0]], 'nested': {'k': 1}}
    fs.atomic_yaml_dump(data, tmp_path / 'meta.yaml')

    assert fs.load_yaml(tmp_path / 'meta.yaml') == data
    assert not (tmp_path / 'meta.yaml.tmp').exists()
    assert 'nested:' in (tmp_path / 'meta.yaml').read_text()


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / 'missing.yaml')


def test_load_yaml_invalid(tmp_path):
    bad = tmp_path / 'bad.yaml'
    bad.write_text("a: [1, 2\n")
    with pytest.raises(yaml.YAMLError, match="bad.yaml"):
        fs.load_yaml(bad)


def test_atomic_save_image_float_array(tmp_path):
    img = np.zeros((6, 8), dtype=np.float32)
    img[2, 3] = 1.0
    fs.atomic_save_image(img, tmp_path / 'grid.png')

    loaded = Image.open(tmp_path / 'grid.png')
    assert loaded.size == (8, 6)
    assert loaded.getpixel((3, 2)) == 255
    assert loaded.getpixel((0, 0)) == 0


def test_atomic_save_image_overwrites(tmp_path):
    path = tmp_path / 'out.png'
    fs.atomic_save_image(Image.new("RGB", (4, 4), (255, 0, 0)), path)
    fs.atomic_save_image(Image.new("RGB", (4, 4), (0, 0, 255)), path)
    assert Image.open(path).getpixel((0, 0)) == (0, 0, 255)


def test_atomic_write_text(tmp_path):
    fs.atomic_write_text(tmp_path / 'sub' / 'note.txt', "raked")
    assert (tmp_path / 'sub' / 'note.txt').read_text() == "raked"


# ============================================================================
# LOGGING TESTS
# ============================================================================

def test_logging_idempotency(tmp_path):
    """Repeated setup writes each record once, JSON carries context."""
    log_path = tmp_path / "garden.log"

    errbuf = io.StringIO()
    try:
        with contextlib.redirect_stderr(errbuf):
            logging_config.setup_logging(
                log_level="INFO",
                log_file=str(log_path),
                json=True,
                to_stderr=False,
                context={"app": "test"}
            )
            logger = logging_config.get_logger("zen_garden_test")
            logger.info("raked")

            logging_config.setup_logging(
                log_level="INFO",
                log_file=str(log_path),
                json=True,
                to_stderr=False,
                context={"app": "test"}
            )
            logger.info("settled")

        lines = log_path.read_text().strip().splitlines()
        assert len(lines) == 2

        rec = json.loads(lines[0])
        assert rec["msg"] == "raked"
        assert rec["app"] == "test"
        assert rec["lvl"] == "INFO"
    finally:
        logging_config.pop_context()
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()


def test_human_format_includes_context():
    formatter = logging_config.ContextFormatter("human", use_color=False)
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "grid cleared", None, None)

    logging_config.push_context(area="sand-1")
    try:
        line = formatter.format(record)
    finally:
        logging_config.pop_context(keys=["area"])

    assert "WARNING" in line
    assert "area=sand-1 |" in line
    assert line.endswith("grid cleared")


def test_pop_context_keys():
    logging_config.push_context(a=1, b=2)
    logging_config.pop_context(keys=["a"])
    formatter = logging_config.ContextFormatter("json")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", None, None)
    rec = json.loads(formatter.format(record))
    logging_config.pop_context()

    assert rec.get("b") == 2
    assert "a" not in rec


def test_unknown_format_rejected():
    with pytest.raises(ValueError, match="Unknown log format"):
        logging_config.ContextFormatter("xml")


def test_bad_rotation_mode(tmp_path):
    with pytest.raises(ValueError, match="rotation mode"):
        logging_config._create_file_handler(str(tmp_path / "x.log"), {"mode": "weekly"}, False, "UTC")


# ============================================================================
# PROFILER TESTS
# ============================================================================

def test_timer_sink():
    times = []
    with profiler.timer('decay', sink=lambda n, t: times.append((n, t))):
        sum(range(1000))
    assert len(times) == 1
    assert times[0][0] == 'decay' and times[0][1] >= 0.0


def test_timer_accumulator():
    acc = profiler.TimerAccumulator("stroke")
    assert acc.mean() == 0.0
    for _ in range(3):
        with acc.measure():
            pass
    assert acc.count == 3
    assert acc.mean() >= 0.0
    acc.reset()
    assert acc.count == 0 and acc.total_time == 0.0


# ============================================================================
# GEOMETRY TESTS
# ============================================================================

def test_distance():
    assert geometry.distance((0.0, 0.0), (3.0, 4.0)) == 5.0


def test_unit_perpendicular():
    px, py = geometry.unit_perpendicular(3.0, 4.0)
    assert (px, py) == pytest.approx((-0.8, 0.6))
    assert math.hypot(px, py) == pytest.approx(1.0)


def test_unit_perpendicular_zero_vector():
    with pytest.raises(ValueError, match="zero-length"):
        geometry.unit_perpendicular(0.0, 0.0)


def test_rect_contains_inclusive():
    assert geometry.rect_contains(0, 0, 0, 0, 10, 5)
    assert geometry.rect_contains(10, 5, 0, 0, 10, 5)
    assert not geometry.rect_contains(10.01, 5, 0, 0, 10, 5)
    assert not geometry.rect_contains(0, 0, 0, 0, 0, 5)


def test_floor_div_cell():
    assert geometry.floor_div_cell(7.9, 0.0, 4.0) == 1
    assert geometry.floor_div_cell(-0.1, 0.0, 4.0) == -1
    assert geometry.floor_div_cell(104.0, 100.0, 4.0) == 1
