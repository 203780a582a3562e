import os
import sys

from loguru import logger
import pytest

from evospecies.utils import setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_console_only():
    assert setup_logger(level="DEBUG") is None


def test_file_logging(tmp_path):
    log_dir = tmp_path / "logs"
    log_file = setup_logger(str(log_dir), level="DEBUG", enable_colors=False)

    assert log_file is not None
    assert os.path.dirname(log_file) == str(log_dir)
    assert os.path.basename(log_file).startswith("speciation_")

    logger.debug("species 3 founded")
    logger.remove()
    with open(log_file, encoding="utf-8") as f:
        content = f.read()
    assert "Logger initialized" in content
    assert "species 3 founded" in content


def test_level_filters_file_records(tmp_path):
    log_file = setup_logger(str(tmp_path), level="WARNING")
    logger.info("hidden")
    logger.warning("shown")
    logger.remove()
    with open(log_file, encoding="utf-8") as f:
        content = f.read()
    assert "hidden" not in content
    assert "shown" in content
