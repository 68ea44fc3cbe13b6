import os
from configparser import ConfigParser
from typing import Mapping, Optional

from production_rate_adjuster.errors import ConfigurationError

CONNECTION_ENV = 'IOTHUB_CONNECTION'


class Config:
    def __init__(self, path: str = 'config.ini', environ: Optional[Mapping[str, str]] = None):
        self.path = path
        self.environ = os.environ if environ is None else environ
        # connection strings may legitimately contain '%'
        self.config = ConfigParser(interpolation=None)
        self.__load_config()

    def __load_config(self):
        self.config.read(self.path)

        if not self.config.has_section('iothub'):
            self.config.add_section('iothub')

        connection_string = self.environ.get(CONNECTION_ENV)
        if connection_string:
            self.config.set('iothub', 'connection_string', connection_string)

    def get_connection_string(self) -> str:
        connection_string = self.config.get('iothub', 'connection_string', fallback='').strip()
        if not connection_string:
            raise ConfigurationError(
                f'IoT Hub connection string missing: set {CONNECTION_ENV} '
                f'or [iothub] connection_string in {self.path}'
            )
        return connection_string
