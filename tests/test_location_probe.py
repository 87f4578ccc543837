import pytest
import requests

from resale_radar.config import Settings
from resale_radar.data_ingestion import location_probe
from resale_radar.schemas import Coordinates


class FakeResponse:
    def __init__(self, payload=None, status_error=None, json_error=None):
        self.payload = payload
        self.status_error = status_error
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_error is not None:
            raise self.status_error

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_configured_coordinates_skip_the_lookup():
    session = FakeSession()
    coords = location_probe.acquire(Settings(latitude=-8.8, longitude=13.2), session=session)

    assert coords == Coordinates(-8.8, 13.2)
    assert session.calls == []


def test_successful_lookup_uses_five_second_bound():
    session = FakeSession(FakeResponse({"status": "success", "lat": -8.83, "lon": 13.24}))
    coords = location_probe.acquire(Settings(), session=session)

    assert coords == Coordinates(-8.83, 13.24)
    assert session.calls == [("http://ip-api.com/json/", (5.0, 5.0))]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.Timeout("slow")),
        FakeSession(error=requests.ConnectionError("offline")),
        FakeSession(FakeResponse(status_error=requests.HTTPError("403"))),
        FakeSession(FakeResponse(json_error=ValueError("not json"))),
        FakeSession(FakeResponse({"status": "fail", "message": "reserved range"})),
        FakeSession(FakeResponse({"status": "success"})),
        FakeSession(FakeResponse(["unexpected"])),
    ],
)
def test_failures_mean_no_location(session):
    assert location_probe.acquire(Settings(), session=session) is None
    assert len(session.calls) == 1
