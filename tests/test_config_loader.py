import pytest

from regression_to_mean.simulator import InvalidConfiguration
from regression_to_mean.utils import DEFAULT_CONFIG_PATH, load_config, save_config


def test_default_config_is_packaged(config):
    assert DEFAULT_CONFIG_PATH.exists()
    assert config["population"]["size"] == 1000
    assert config["seeds"]["propensity"] == 1234
    assert config["seeds"]["luck"][1] == 456
    assert config["trial"]["effect"]["params"] == {"mean": 0.4, "std": 0.2}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_saved_config_loads_back(config, tmp_path):
    path = tmp_path / "nested" / "simulation.yml"
    save_config(config, path)

    assert load_config(path) == config


def test_missing_section_is_rejected(config, tmp_path):
    del config["trial"]
    path = tmp_path / "simulation.yml"
    save_config(config, path)

    with pytest.raises(InvalidConfiguration, match="trial"):
        load_config(path)


def test_missing_luck_seed_is_rejected(config, tmp_path):
    del config["seeds"]["luck"][2]
    path = tmp_path / "simulation.yml"
    save_config(config, path)

    with pytest.raises(InvalidConfiguration, match="period 2"):
        load_config(path)
