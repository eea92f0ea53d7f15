"""Tests covering the EvoPool configuration loader behaviour."""

from pathlib import Path

import pytest

from evopool.evolution import EvolutionConfig
from evopool.exceptions import EvoPoolConfigError
from evopool.utils import ConfigLoader


def test_config_loader_starts_from_packaged_defaults() -> None:
    config = ConfigLoader().load().to_dict()
    assert config["pool"]["population_size"] == 10
    assert config["pool"]["elite_count"] == 2
    assert config["mutation"]["rate"] == pytest.approx(0.2)
    assert config["network"]["layers"] == 3
    assert config["evaluation"]["pairing"] == "round_robin"


def test_config_loader_merges_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "run.yaml"
    path.write_text("pool:\n  population_size: 20\nengine:\n  generations: 4\n", encoding="utf-8")

    config = ConfigLoader().load(path).to_dict()

    assert config["pool"]["population_size"] == 20
    assert config["engine"]["generations"] == 4
    assert config["pool"]["elite_count"] == 2


def test_config_loader_merges_json_file(tmp_path: Path) -> None:
    path = tmp_path / "run.json"
    path.write_text('{"mutation": {"strength": 0.5}}', encoding="utf-8")

    config = ConfigLoader().load(path).to_dict()

    assert config["mutation"]["strength"] == pytest.approx(0.5)


def test_config_loader_accepts_dict_overrides() -> None:
    loader = ConfigLoader({"engine": {"generations": 2}})
    config = loader.load(overrides={"pool": {"population_size": 5}}).to_dict()
    assert config["engine"]["generations"] == 2
    assert config["pool"]["population_size"] == 5


def test_config_loader_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader().load(Path("does-not-exist.yaml"))


def test_config_loader_unknown_section_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"unknown_section": {"foo": 1}})
    assert "unknown_section" in str(err.value)


def test_config_loader_unknown_key_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"engine": {"invalid_key": 1}})
    assert "engine.invalid_key" in str(err.value)


def test_evolution_config_reads_sectioned_mapping() -> None:
    config = ConfigLoader().load(
        overrides={
            "pool": {"population_size": 12, "elite_count": 3, "seed": 42},
            "mutation": {"rate": 0.1, "elite_mutation": True},
            "network": {"hidden_size": 4},
            "reporting": {"top_k": 2},
        }
    ).to_dict()

    evolution = EvolutionConfig.from_mapping(config)

    assert evolution.population_size == 12
    assert evolution.elite_count == 3
    assert evolution.seed == 42
    assert evolution.mutation_rate == pytest.approx(0.1)
    assert evolution.elite_mutation is True
    assert evolution.hidden_size == 4
    assert evolution.report_top == 2
    assert evolution.generations == 50


def test_evolution_config_rejects_elite_covering_population() -> None:
    config = ConfigLoader().load(overrides={"pool": {"population_size": 3, "elite_count": 3}}).to_dict()
    with pytest.raises(EvoPoolConfigError):
        EvolutionConfig.from_mapping(config)


def test_null_optional_keys_override_defaults() -> None:
    config = ConfigLoader().load(
        overrides={"engine": {"max_workers": None, "time_budget": None}, "pool": {"seed": None}}
    ).to_dict()

    evolution = EvolutionConfig.from_mapping(config)

    assert evolution.max_workers is None
    assert evolution.time_budget is None
    assert evolution.seed is None


def test_null_required_keys_keep_their_defaults() -> None:
    config = ConfigLoader().load(overrides={"pool": {"population_size": None}}).to_dict()
    assert EvolutionConfig.from_mapping(config).population_size == 10
