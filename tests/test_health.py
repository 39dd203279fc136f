import aiohttp
import pytest

from indicator_printers.core import PrinterRecord, PrinterState
from indicator_printers.health import HealthReporter, HealthServer


@pytest.mark.asyncio
async def test_health_reporter_snapshot():
    reporter = HealthReporter()

    await reporter.update("menu", True)
    await reporter.update("subscription", False, "no subscription")

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    components = {item["name"]: item for item in snapshot["components"]}
    assert components["menu"]["healthy"] is True
    assert components["subscription"]["healthy"] is False
    assert components["subscription"]["detail"] == "no subscription"


@pytest.mark.asyncio
async def test_health_reporter_service_state_affects_status():
    reporter = HealthReporter()

    await reporter.update("menu", True)
    await reporter.set_service_state("degraded", healthy=False)

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    service = snapshot.get("serviceState")
    assert service is not None
    assert service["state"] == "degraded"
    assert service["healthy"] is False


@pytest.mark.asyncio
async def test_health_reporter_summarizes_printer_records():
    reporter = HealthReporter()

    await reporter.set_printers(
        [
            PrinterRecord("kitchen", PrinterState.PROCESSING, 2, frozenset({"toner-low"})),
            PrinterRecord("office", PrinterState.STOPPED, 1),
            PrinterRecord("garage", PrinterState.IDLE, 0),
        ]
    )

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "ok"
    assert snapshot["printers"]["kitchen"] == {
        "state": "processing",
        "jobs": 2,
        "reasons": ["toner-low"],
        "visible": True,
    }
    assert snapshot["printers"]["garage"]["visible"] is False
    assert snapshot["menu"] == {"printers": 3, "visiblePrinters": 2, "queuedJobs": 3}


@pytest.mark.asyncio
async def test_health_server_serves_snapshot(unused_tcp_port):
    reporter = HealthReporter()
    await reporter.update("menu", True)

    host = "127.0.0.1"
    port = unused_tcp_port
    server = HealthServer(reporter, host, port)
    await server.start()

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(f"http://{host}:{port}/healthz") as response:
                payload = await response.json()
                assert response.status == 200
                assert payload["status"] == "ok"

            await reporter.update("notifier", False, "bus unavailable")
            async with session.get(f"http://{host}:{port}/healthz") as response:
                assert response.status == 503
    finally:
        await server.stop()
