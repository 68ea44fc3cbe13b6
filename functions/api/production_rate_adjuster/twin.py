import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from azure.core.exceptions import AzureError, ServiceRequestError, ServiceResponseError
from azure.iot.hub import IoTHubRegistryManager
from azure.iot.hub.models import Twin, TwinProperties
from msrest.exceptions import (
    ClientException,
    ClientRequestError,
    DeserializationError,
    HttpOperationError,
    SerializationError,
)

from production_rate_adjuster.config import Config
from production_rate_adjuster.errors import (
    ConcurrencyConflict,
    DeviceNotFound,
    RegistryError,
    TransientRegistryError,
)
from production_rate_adjuster.results import Outcome, RecordResult

logger = logging.getLogger(__name__)

PRODUCTION_RATE = 'ProductionRate'
RATE_STEP = 10
MIN_RATE = 10

# everything the service SDK raises for a failed call
SDK_ERRORS = (ClientException, AzureError, SerializationError, DeserializationError)
TRANSIENT_ERRORS = (ClientRequestError, ServiceRequestError, ServiceResponseError)


@dataclass
class DeviceTwin:
    device_id: str
    desired: Dict[str, Any] = field(default_factory=dict)
    etag: Optional[str] = None


class TwinRegistry(ABC):
    """Minimal view of the device registry used by the adjuster."""

    @abstractmethod
    def get_twin(self, device_id: str) -> DeviceTwin:
        raise NotImplementedError

    @abstractmethod
    def update_twin(self, device_id: str, desired_patch: Dict[str, Any], etag: Optional[str]) -> None:
        raise NotImplementedError


class IoTHubTwinRegistry(TwinRegistry):
    def __init__(self, registry_manager: IoTHubRegistryManager):
        self.registry_manager = registry_manager

    @classmethod
    def from_config(cls, config: Config) -> 'IoTHubTwinRegistry':
        return cls(IoTHubRegistryManager(config.get_connection_string()))

    def get_twin(self, device_id: str) -> DeviceTwin:
        try:
            twin = self.registry_manager.get_twin(device_id)
        except SDK_ERRORS as e:
            raise self.__translate(device_id, e) from e

        desired = twin.properties.desired if twin.properties is not None else None
        return DeviceTwin(device_id=device_id, desired=dict(desired or {}), etag=twin.etag)

    def update_twin(self, device_id: str, desired_patch: Dict[str, Any], etag: Optional[str]) -> None:
        patch = Twin(properties=TwinProperties(desired=desired_patch))
        try:
            self.registry_manager.update_twin(device_id, patch, etag)
        except SDK_ERRORS as e:
            raise self.__translate(device_id, e) from e

    @staticmethod
    def __translate(device_id: str, error: Exception) -> RegistryError:
        if isinstance(error, TRANSIENT_ERRORS):
            return TransientRegistryError(device_id, str(error))

        if not isinstance(error, HttpOperationError):
            return RegistryError(device_id, str(error))

        response = getattr(error, 'response', None)
        status_code = getattr(response, 'status_code', None)
        if status_code == 404:
            return DeviceNotFound(device_id, str(error))
        if status_code == 412:
            return ConcurrencyConflict(device_id, str(error))
        return RegistryError(device_id, str(error))


def next_rate(current_rate: int) -> int:
    return max(current_rate - RATE_STEP, MIN_RATE)


class TwinAdjuster:
    def __init__(self, registry: TwinRegistry):
        self.registry = registry

    def adjust(self, device_id: str, line_number: int = 0) -> RecordResult:
        """Lower the desired ProductionRate of one device by a single step.

        The write is conditional on the etag returned by the fetch, so a twin
        modified in between is reported as a conflict and left untouched.
        Registry failures never escape; they are returned as the outcome.
        """
        result = RecordResult(line_number=line_number, outcome=Outcome.ERROR, device_id=device_id)

        try:
            twin = self.registry.get_twin(device_id)

            if PRODUCTION_RATE not in twin.desired:
                logger.warning(f'No desired ProductionRate set for {device_id}')
                result.outcome = Outcome.PROPERTY_MISSING
                return result

            try:
                current_rate = int(twin.desired[PRODUCTION_RATE])
            except (TypeError, ValueError):
                result.message = f'ProductionRate is not a number: {twin.desired[PRODUCTION_RATE]!r}'
                logger.error(f'Error updating twin for {device_id}: {result.message}')
                return result

            new_rate = next_rate(current_rate)
            self.registry.update_twin(device_id, {PRODUCTION_RATE: new_rate}, twin.etag)
        except DeviceNotFound as e:
            logger.warning(f'Device {device_id} not found in registry: {e.message}')
            result.outcome = Outcome.DEVICE_NOT_FOUND
            result.message = e.message
            return result
        except ConcurrencyConflict as e:
            logger.error(f'Twin for {device_id} changed concurrently, not updated: {e.message}')
            result.outcome = Outcome.CONFLICT
            result.message = e.message
            return result
        except RegistryError as e:
            logger.error(f'Error updating twin for {device_id}: {e.message}')
            result.message = e.message
            return result

        logger.info(f'Updated ProductionRate for {device_id} from {current_rate}% to {new_rate}%')
        result.outcome = Outcome.UPDATED
        result.previous_rate = current_rate
        result.new_rate = new_rate
        return result
