class ConfigurationError(Exception):
    """Raised when the IoT Hub connection cannot be configured."""


class MalformedRecord(ValueError):
    pass


class RegistryError(Exception):
    def __init__(self, device_id: str, message: str):
        super().__init__(message)
        self.device_id = device_id
        self.message = message

    def __str__(self) -> str:
        return f'{self.device_id}: {self.message}'


class DeviceNotFound(RegistryError):
    pass


class ConcurrencyConflict(RegistryError):
    """The twin changed since it was fetched (etag mismatch)."""


class TransientRegistryError(RegistryError):
    """The registry could not be reached."""
