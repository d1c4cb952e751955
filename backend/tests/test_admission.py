import asyncio

import pytest

from capture_api.admission import AdmissionQueue
from capture_api.cache import LatestCaptureStore
from capture_api.screenshot_service import CaptureService
from fakes import FakeLauncher, FakePrimaryEngine, make_options, settle


def test_rejects_zero_concurrency():
    with pytest.raises(ValueError):
        AdmissionQueue(0)


def test_extra_operation_waits_for_a_free_slot():
    async def scenario():
        queue = AdmissionQueue(2)
        started = []
        gates = [asyncio.Event() for _ in range(3)]

        async def job(i):
            started.append(i)
            await gates[i].wait()
            return i

        tasks = [asyncio.create_task(queue.submit(job, i)) for i in range(3)]
        await settle()
        assert started == [0, 1]
        assert queue.stats() == {"concurrency": 2, "active": 2, "waiting": 1}

        gates[1].set()
        await settle()
        assert started == [0, 1, 2]

        gates[0].set()
        gates[2].set()
        assert await asyncio.gather(*tasks) == [0, 1, 2]
        assert queue.stats() == {"concurrency": 2, "active": 0, "waiting": 0}

    asyncio.run(scenario())


def test_slot_released_when_operation_fails():
    async def scenario():
        queue = AdmissionQueue(1)

        async def boom():
            raise RuntimeError("boom")

        async def fine():
            return "ok"

        with pytest.raises(RuntimeError):
            await queue.submit(boom)
        assert await queue.submit(fine) == "ok"
        assert queue.active == 0

    asyncio.run(scenario())


def test_browser_launch_waits_for_admission():
    """With N slots the (N+1)th capture launches no browser until one finishes."""

    async def scenario():
        launcher = FakeLauncher()
        launcher.screenshot_gate = asyncio.Event()
        service = CaptureService(
            queue=AdmissionQueue(2),
            cache=LatestCaptureStore(),
            launcher=launcher,
            primary_engine=FakePrimaryEngine(),
        )
        options = make_options(plainPuppeteer="true")

        tasks = [asyncio.create_task(service.capture(options)) for _ in range(3)]
        await asyncio.sleep(0.05)
        assert len(launcher.browsers) == 2

        launcher.screenshot_gate.set()
        results = await asyncio.gather(*tasks)

        assert len(launcher.browsers) == 3
        assert all(result.status_code == 200 for result in results)
        assert all(browser.closed for browser in launcher.browsers)

    asyncio.run(scenario())
