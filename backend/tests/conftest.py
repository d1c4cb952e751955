import pytest

from capture_api.admission import AdmissionQueue
from capture_api.cache import LatestCaptureStore
from capture_api.screenshot_service import CaptureService
from fakes import FakeLauncher, FakePrimaryEngine


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def primary():
    return FakePrimaryEngine()


@pytest.fixture
def cache():
    return LatestCaptureStore()


@pytest.fixture
def service(launcher, primary, cache):
    return CaptureService(
        queue=AdmissionQueue(3),
        cache=cache,
        launcher=launcher,
        primary_engine=primary,
    )
