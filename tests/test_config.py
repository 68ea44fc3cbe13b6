import pytest

from production_rate_adjuster.config import Config
from production_rate_adjuster.errors import ConfigurationError


def test_connection_string_from_environment(tmp_path):
    config = Config(path=str(tmp_path / 'config.ini'), environ={'IOTHUB_CONNECTION': 'HostName=hub;SharedAccessKey=abc='})

    assert config.get_connection_string() == 'HostName=hub;SharedAccessKey=abc='


def test_connection_string_from_file(tmp_path):
    path = tmp_path / 'config.ini'
    path.write_text('[iothub]\nconnection_string = HostName=hub;SharedAccessKey=a%b\n')

    config = Config(path=str(path), environ={})

    assert config.get_connection_string() == 'HostName=hub;SharedAccessKey=a%b'


def test_environment_overrides_file(tmp_path):
    path = tmp_path / 'config.ini'
    path.write_text('[iothub]\nconnection_string = HostName=file\n')

    config = Config(path=str(path), environ={'IOTHUB_CONNECTION': 'HostName=env'})

    assert config.get_connection_string() == 'HostName=env'


def test_missing_connection_string(tmp_path):
    config = Config(path=str(tmp_path / 'config.ini'), environ={'IOTHUB_CONNECTION': ''})

    with pytest.raises(ConfigurationError, match='IOTHUB_CONNECTION'):
        config.get_connection_string()


def test_file_is_not_written(tmp_path):
    path = tmp_path / 'config.ini'

    Config(path=str(path), environ={'IOTHUB_CONNECTION': 'HostName=env'})

    assert not path.exists()
