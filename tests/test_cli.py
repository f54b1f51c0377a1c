import logging

import pytest

from isoforest.__main__ import main
from isoforest.logging_utils import setup_logger


@pytest.fixture(autouse=True)
def reset_isoforest_logger():
    yield
    for name in ("isoforest", "isoforest.test_logger", "isoforest.test_env_logger"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_cli_prints_top_outliers(capsys):
    assert main(["--dataset", "simple", "--trees", "50", "--seed", "1", "--top", "3"]) == 0

    out = capsys.readouterr().out
    assert "Using 20 points..." in out
    assert "subsample_size=20" in out

    ranking = out.strip().splitlines()[-3:]
    assert ranking[0].startswith(" 17 - (-100.000, 3.000, 0.000)")


def test_cli_generated_dataset(capsys):
    assert main(["--dataset", "generated", "--size", "300", "--trees", "10", "--seed", "2", "--top", "5"]) == 0
    assert "Using 303 points..." in capsys.readouterr().out


def test_cli_rejects_oversized_subsample(capsys):
    assert main(["--dataset", "hbk", "--subsample-size", "100"]) == 2
    assert "exceeds" in capsys.readouterr().err


def test_setup_logger_does_not_stack_handlers():
    logger = setup_logger("isoforest.test_logger", logging.DEBUG)
    setup_logger("isoforest.test_logger", logging.DEBUG)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_log_level_environment_override(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert setup_logger("isoforest.test_env_logger").level == logging.ERROR
