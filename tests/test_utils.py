"""Tests for config loading and logging setup."""

import json
import logging
import logging.handlers
import os

import pytest

from utils import load_config, resolve_source, setup_logging


@pytest.fixture
def root_logger():
    """Restores the root logger after a test reconfigures it."""
    logger = logging.getLogger()
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestLoadConfig:
    """Tests for reading config.json."""

    def test_loads_object(self, tmp_path) -> None:
        """Test a JSON object is returned as a dict."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"pixelizer": {"src": "logo.png"}}))
        assert load_config(str(path)) == {"pixelizer": {"src": "logo.png"}}

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path) -> None:
        """Test malformed JSON raises JSONDecodeError."""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))

    def test_non_object(self, tmp_path) -> None:
        """Test a top-level list is rejected."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            load_config(str(path))

    def test_shipped_config(self) -> None:
        """Test the repository config.json loads and carries valid options."""
        from pathlib import Path

        from options import PixelizerOptions

        config_path = str(Path(__file__).resolve().parents[1] / "config.json")
        config = load_config(config_path)
        options = PixelizerOptions.from_dict(config["pixelizer"]["options"])
        assert options.amount == 150
        assert os.path.isfile(resolve_source(config_path, config["pixelizer"]["src"]))

    def test_shipped_image_yields_particles(self) -> None:
        """Test the configured image decodes and produces particles."""
        from pathlib import Path

        from loader import PygameImageLoader
        from pixelizer import EngineState, Pixelizer
        from scheduler import ManualFrameScheduler
        from visualization import PygameSurface

        config_path = str(Path(__file__).resolve().parents[1] / "config.json")
        config = load_config(config_path)
        scheduler = ManualFrameScheduler()
        errors = []
        engine = Pixelizer(
            PygameSurface(), resolve_source(config_path, config["pixelizer"]["src"]),
            config["pixelizer"]["options"],
            scheduler=scheduler, loader=PygameImageLoader(scheduler),
            viewport=lambda: (320, 240), on_error=errors.append,
        )
        scheduler.run_pending()

        assert errors == []
        assert engine.state is EngineState.RUNNING
        assert len(engine.particles) > 0


class TestResolveSource:
    """Tests for resolving image paths from the config file."""

    def test_relative_to_config_dir(self, tmp_path) -> None:
        """Test a relative source is joined to the config directory."""
        config_path = str(tmp_path / "config.json")
        assert resolve_source(config_path, "assets/logo.png") == os.path.join(str(tmp_path), "assets/logo.png")

    def test_absolute_and_missing_unchanged(self, tmp_path) -> None:
        """Test absolute sources and None pass through."""
        absolute = str(tmp_path / "logo.png")
        assert resolve_source("config.json", absolute) == absolute
        assert resolve_source("config.json", None) is None


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_console_and_file(self, tmp_path, root_logger) -> None:
        """Test a console handler and a rotating file handler are installed."""
        log_file = tmp_path / "logs" / "pixelizer.log"
        setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

        assert root_logger.level == logging.DEBUG
        kinds = {type(h) for h in root_logger.handlers}
        assert logging.handlers.RotatingFileHandler in kinds
        assert log_file.exists()

    def test_file_disabled(self, root_logger) -> None:
        """Test a null log_file keeps logging on the console only."""
        setup_logging({"logging": {"level": "WARNING", "log_file": None}})

        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0], logging.handlers.RotatingFileHandler)
