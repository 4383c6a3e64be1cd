import pytest

from counter_devices import CounterClient

from .utilities import ADDRESS, FakeDevice, http_client_for


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def http(device):
    return http_client_for(device)


@pytest.fixture
def client(http):
    return CounterClient(ADDRESS, http=http)
