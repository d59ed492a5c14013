import configparser

import pytest

from film_cli.exceptions import ConfigurationError
from film_cli.models.config import DEFAULT_CHUNK_SIZE
from film_cli.storage.config_manager import ConfigManager


def test_missing_config_file_yields_defaults(tmp_path):
    config = ConfigManager(tmp_path / "config.ini").load_config()

    assert config.catalog_url == ""
    assert config.catalog_file == ""
    assert config.chunk_size == DEFAULT_CHUNK_SIZE
    assert config.config_path == str(tmp_path)


def test_saved_config_loads_back(tmp_path):
    manager = ConfigManager(tmp_path / "sub" / "config.ini")
    manager.save_new_config({"catalog_url": "https://films.example/api/films"})

    config = ConfigManager(tmp_path / "sub" / "config.ini").load_config()
    assert config.catalog_url == "https://films.example/api/films"
    assert config.database_name == "films.sqlite"


def test_cli_options_override_file_values(tmp_path):
    manager = ConfigManager(tmp_path / "config.ini")
    manager.save_new_config({})
    config = manager.load_config({"chunk_size": 8192})
    assert config.chunk_size == 8192


def test_missing_keys_are_migrated_into_the_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[DEFAULT]\ncatalog_file = films.json\n", encoding="utf-8")

    config = ConfigManager(path).load_config()
    assert config.catalog_file == "films.json"

    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")
    assert parser["DEFAULT"]["chunk_size"] == str(DEFAULT_CHUNK_SIZE)
    assert "database_name" in parser["DEFAULT"]


@pytest.mark.parametrize(
    "contents",
    [
        "[DEFAULT]\nchunk_size = 10\n",
        "[DEFAULT]\nchunk_size = lots\n",
        "[DEFAULT]\ncatalog_url = ftp://films\n",
        "[DEFAULT]\ncatalog_url = https://a/b.json\ncatalog_file = c.json\n",
        "[DEFAULT]\nconnect_timeout = 0\n",
        "not an ini file",
    ],
)
def test_invalid_configuration_raises(tmp_path, contents):
    path = tmp_path / "config.ini"
    path.write_text(contents, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        ConfigManager(path).load_config()


def test_save_rejects_invalid_settings(tmp_path):
    path = tmp_path / "config.ini"
    with pytest.raises(ConfigurationError):
        ConfigManager(path).save_new_config({"catalog_url": "nope"})
    assert not path.exists()
