import pytest

from production_rate_adjuster.errors import ConcurrencyConflict, DeviceNotFound
from production_rate_adjuster.twin import DeviceTwin, TwinAdjuster, TwinRegistry


class InMemoryTwinRegistry(TwinRegistry):
    """Fake registry; etags are bumped on every write like IoT Hub does."""

    def __init__(self):
        self.twins = {}
        self.updates = []
        self.failures = {}

    def add(self, device_id, desired=None, etag='AAAAAAAAAAE='):
        self.twins[device_id] = DeviceTwin(device_id=device_id, desired=dict(desired or {}), etag=etag)

    def get_twin(self, device_id):
        if device_id in self.failures:
            raise self.failures[device_id]
        if device_id not in self.twins:
            raise DeviceNotFound(device_id, f'Device {device_id} not found')
        twin = self.twins[device_id]
        return DeviceTwin(device_id=device_id, desired=dict(twin.desired), etag=twin.etag)

    def update_twin(self, device_id, desired_patch, etag):
        twin = self.twins[device_id]
        if etag != twin.etag:
            raise ConcurrencyConflict(device_id, 'Precondition failed')
        self.updates.append((device_id, dict(desired_patch), etag))
        twin.desired.update(desired_patch)
        twin.etag = f'{twin.etag}+'


@pytest.fixture
def registry():
    return InMemoryTwinRegistry()


@pytest.fixture
def adjuster(registry):
    return TwinAdjuster(registry)
