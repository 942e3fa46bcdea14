import json
import logging
from collections.abc import Callable, Generator

import pytest

from fitproof.processor.models import UploadedArchive
from tests.takeout_fixtures import (
    ACTIVITIES_PATH,
    DAILY_METRICS_PATH,
    DISTANCE_PATH,
    HEART_RATE_PATH,
    SESSIONS_PATH,
    SLEEP_PATH,
    STEPS_PATH,
    TAKEOUT_DIRECTORIES,
    WEIGHT_PATH,
    build_zip,
    data_point,
)


@pytest.fixture(autouse=True)
def _reset_log_handlers() -> Generator[None, None, None]:
    yield
    logger = logging.getLogger("fitproof")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture()
def make_upload() -> Callable[..., UploadedArchive]:
    def _make(files: dict[str, str | bytes], filename: str = "takeout.zip") -> UploadedArchive:
        return UploadedArchive.from_bytes(filename, build_zip(files, TAKEOUT_DIRECTORIES))

    return _make


@pytest.fixture()
def heart_rate_json() -> str:
    return json.dumps(
        [
            data_point("1700000120000000000", [{"fpVal": 75.0}]),
            data_point("1700000000000000000", [72]),
            data_point("1700000060000000000", [{"intVal": 74}]),
        ]
    )


@pytest.fixture()
def steps_json() -> str:
    return json.dumps(
        [
            data_point("1700000300000000000", [{"intVal": 120}], "com.google.step_count.delta"),
            data_point("1700000200000000000", [{"intVal": 80}], "com.google.step_count.delta"),
        ]
    )


@pytest.fixture()
def distance_json() -> str:
    return json.dumps(
        [data_point("1700000200000000000", [{"fpVal": 63.5}], "com.google.distance.delta")]
    )


@pytest.fixture()
def sleep_json() -> str:
    return json.dumps(
        [
            data_point("1700003600000000000", [{"intVal": 4}], "com.google.sleep.segment"),
            data_point("1700000000000000000", [{"stringVal": "light"}], "com.google.sleep.segment"),
        ]
    )


@pytest.fixture()
def takeout_files(
    heart_rate_json: str,
    steps_json: str,
    distance_json: str,
    sleep_json: str,
) -> dict[str, str | bytes]:
    """A realistic Fit export: four signals plus entries the filter must drop."""
    return {
        "Takeout/archive_browser.html": "<html></html>",
        HEART_RATE_PATH: heart_rate_json,
        STEPS_PATH: steps_json,
        DISTANCE_PATH: distance_json,
        SLEEP_PATH: sleep_json,
        WEIGHT_PATH: json.dumps([data_point("1700000000000000000", [{"fpVal": 70.2}])]),
        DAILY_METRICS_PATH: json.dumps([data_point("1700000000000000000", [1])]),
        SESSIONS_PATH: json.dumps({"activity": "walking"}),
        ACTIVITIES_PATH: json.dumps([]),
        "Takeout/Fit/All data/readme.txt": "not json",
    }
