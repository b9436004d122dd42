import pytest

from evalbench.config import EvalbenchConfig, SuiteConfig, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.yaml")
    assert config == EvalbenchConfig()


def test_load_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "log_level: debug\n"
        "budget: 50\n"
        "repeats: 2\n"
        "suites:\n"
        "  - family: integer\n"
        "    problems: [OneMax, 2]\n"
        "    instances: [1, 3]\n"
        "    dimensions: [8]\n",
        encoding="utf-8",
    )
    config = load_config(path)

    assert config.log_level == "DEBUG"
    assert config.budget == 50
    assert config.repeats == 2
    assert config.seed == 42
    assert config.suites == [SuiteConfig("integer", ["OneMax", 2], [1, 3], [8])]

    problems = list(config.suites[0].build())
    assert [p.meta_data.name for p in problems] == ["OneMax", "OneMax", "LeadingOnes", "LeadingOnes"]


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == EvalbenchConfig()


def test_invalid_budget():
    with pytest.raises(ValueError):
        EvalbenchConfig(budget=0)


def test_shipped_config_loads():
    config = load_config()
    assert {suite.family for suite in config.suites} == {"real", "integer"}


def test_config_module_has_no_global_cache():
    from evalbench import config

    assert not hasattr(config, "get_config")
