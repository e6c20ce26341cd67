"""Tests for engine configuration and logging setup."""

from loguru import logger

from symbolos.config import EngineConfig
from symbolos.log import configure_logging


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.verbose is False
        assert config.output_root == "sandbox/worlds"
        assert config.archive_dir_name == "archives"
        assert config.compress is True
        assert config.store_frames is False
        assert config.store_archive is False
        assert config.namespace == "symbolos"

    def test_from_env(self):
        config = EngineConfig.from_env({
            "SYMBOLOS_VERBOSE": "true",
            "SYMBOLOS_COMPRESS": "0",
            "SYMBOLOS_OUTPUT_ROOT": "/tmp/worlds",
            "REDIS_URL": "redis://cache:6379/1",
            "UNRELATED": "x",
        })
        assert config.verbose is True
        assert config.compress is False
        assert config.output_root == "/tmp/worlds"
        assert config.redis_url == "redis://cache:6379/1"

    def test_prefixed_redis_url_wins(self):
        config = EngineConfig.from_env({
            "SYMBOLOS_REDIS_URL": "redis://a:6379",
            "REDIS_URL": "redis://b:6379",
        })
        assert config.redis_url == "redis://a:6379"


class TestLogging:
    def test_console_sink(self):
        lines = []
        configure_logging("WARNING", sink=lines.append)
        logger.info("hidden")
        logger.warning("shown")
        assert len(lines) == 1
        assert "WARNING | shown" in lines[0]

    def test_file_sink(self, tmp_path):
        configure_logging("INFO", sink=lambda msg: None, log_dir=tmp_path / "logs")
        logger.info("to file")
        logger.complete()
        assert (tmp_path / "logs").is_dir()
