"""Tests for configuration models and YAML loading."""

import pytest
from pydantic import ValidationError

from promiseutil import Queue
from promiseutil.core.config import (
    Config,
    LoggingConfig,
    QueueOptions,
    SeriesOptions,
    load_config,
    substitute_env,
)


class TestModels:
    """Test option defaults and validation."""

    def test_queue_defaults(self) -> None:
        options = QueueOptions()

        assert options.parallel == 1
        assert options.infinite is False
        assert options.collect is False

    def test_series_defaults(self) -> None:
        options = SeriesOptions()

        assert options.parallel == 1
        assert options.collect is True

    @pytest.mark.parametrize("parallel", [0, -1])
    def test_parallel_must_be_positive(self, parallel: int) -> None:
        with pytest.raises(ValidationError):
            QueueOptions(parallel=parallel)
        with pytest.raises(ValidationError):
            SeriesOptions(parallel=parallel)

    def test_logging_defaults(self) -> None:
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.directory is None

    def test_unknown_queue_uses_defaults(self) -> None:
        config = Config(queues={"downloads": QueueOptions(parallel=4)})

        assert config.queue("downloads").parallel == 4
        assert config.queue("missing") == QueueOptions()

    def test_rejects_unknown_top_level_keys(self) -> None:
        with pytest.raises(ValidationError):
            Config(workers=3)


class TestEnvSubstitution:
    """Test ${VAR} substitution."""

    def test_substitutes_set_variables(self, monkeypatch) -> None:
        monkeypatch.setenv("QUEUE_PARALLEL", "4")

        assert substitute_env("${QUEUE_PARALLEL}") == "4"

    def test_recurses_into_containers(self, monkeypatch) -> None:
        monkeypatch.setenv("LEVEL", "DEBUG")

        data = {"logging": {"level": "${LEVEL}"}, "items": ["x-${LEVEL}", 3]}

        assert substitute_env(data) == {"logging": {"level": "DEBUG"}, "items": ["x-DEBUG", 3]}

    def test_reports_every_unset_variable(self, monkeypatch) -> None:
        monkeypatch.delenv("PROMISEUTIL_A", raising=False)
        monkeypatch.delenv("PROMISEUTIL_B", raising=False)

        with pytest.raises(ValueError, match="PROMISEUTIL_A, PROMISEUTIL_B"):
            substitute_env(["${PROMISEUTIL_B}", {"x": "${PROMISEUTIL_A}"}], source="test.yaml")


class TestLoadConfig:
    """Test loading YAML configuration files."""

    def test_loads_queues_and_logging(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("DOWNLOAD_PARALLEL", "3")
        path = tmp_path / "promiseutil.yaml"
        path.write_text(
            "logging:\n"
            "  level: DEBUG\n"
            "queues:\n"
            "  downloads:\n"
            "    parallel: ${DOWNLOAD_PARALLEL}\n"
            "    collect: true\n"
        )

        config = load_config(path)

        assert config.logging.level == "DEBUG"
        assert config.queue("downloads") == QueueOptions(parallel=3, collect=True)

        queue = Queue.from_config(lambda x: x, config.queue("downloads"))
        assert queue.parallel == 3
        assert queue.collect is True

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_unresolved_variable(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("PROMISEUTIL_UNSET", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: ${PROMISEUTIL_UNSET}\n")

        with pytest.raises(ValueError, match="PROMISEUTIL_UNSET"):
            load_config(path)
