"""Tests for PixelizerOptions validation."""

import dataclasses

import numpy as np
import pytest

from options import PixelizerOptions, normalize_threshold


class TestThreshold:
    """Tests for threshold normalization."""

    @pytest.mark.parametrize("value", [1, 100, 150, 254, 200.5, np.int64(200), np.uint8(42), np.float32(12.0)])
    def test_in_range_is_kept(self, value) -> None:
        """Test values strictly between 0 and 255 pass through."""
        assert normalize_threshold(value) == value

    @pytest.mark.parametrize("value", [0, 255, -1, 256, 1000, None, "100", True, np.int64(0), np.int64(255)])
    def test_out_of_range_falls_back(self, value) -> None:
        """Test boundaries and invalid values normalize to 150."""
        assert normalize_threshold(value) == 150

    def test_options_normalize_threshold(self) -> None:
        """Test threshold coercion happens on construction without raising."""
        assert PixelizerOptions(threshold=0).threshold == 150
        assert PixelizerOptions(threshold=255).threshold == 150
        assert PixelizerOptions(threshold=42).threshold == 42


class TestPixelizerOptions:
    """Tests for option defaults, aliases and validation."""

    def test_defaults(self) -> None:
        """Test the documented defaults."""
        options = PixelizerOptions()
        assert options.pixel_radius == 0
        assert options.amount == 150
        assert options.threshold == 150
        assert options.colors == ("#FFFFFF",)
        assert options.vertical_distribution == 5
        assert options.horizontal_distribution == 5
        assert options.friction is False
        assert options.friction_value == 1
        assert options.autoinit is True
        assert options.autostop == 100
        assert options.speed == 10
        assert options.seed is None

    def test_immutable(self) -> None:
        """Test options cannot be modified after construction."""
        options = PixelizerOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.speed = 20

    def test_from_dict_accepts_original_keys(self) -> None:
        """Test camelCase keys, including the historic threshhold spelling."""
        options = PixelizerOptions.from_dict({
            "pixelRadius": 3,
            "threshhold": 200,
            "verticalDistribution": 7,
            "horizontalDistribution": 9,
            "frictionValue": 4,
            "friction": True,
            "colors": ["#FF0000", "#00FF00"],
        })
        assert options.pixel_radius == 3
        assert options.threshold == 200
        assert options.vertical_distribution == 7
        assert options.horizontal_distribution == 9
        assert options.friction_value == 4
        assert options.friction is True
        assert options.colors == ("#FF0000", "#00FF00")

    def test_from_dict_accepts_field_names(self) -> None:
        """Test snake_case field names work as keys."""
        options = PixelizerOptions.from_dict({"pixel_radius": 2, "autostop": 5, "seed": 7})
        assert options.pixel_radius == 2
        assert options.autostop == 5
        assert options.seed == 7

    def test_from_dict_ignores_unknown_keys(self, caplog) -> None:
        """Test unknown keys are logged and dropped."""
        options = PixelizerOptions.from_dict({"sparkle": True})
        assert options == PixelizerOptions()
        assert "sparkle" in caplog.text

    def test_from_dict_none(self) -> None:
        """Test a missing mapping gives the defaults."""
        assert PixelizerOptions.from_dict(None) == PixelizerOptions()

    def test_empty_colors_fall_back(self) -> None:
        """Test an empty palette falls back to white."""
        assert PixelizerOptions(colors=[]).colors == ("#FFFFFF",)

    @pytest.mark.parametrize("kwargs", [
        {"amount": 0},
        {"amount": -3},
        {"amount": 1.5},
        {"autostop": 0},
        {"speed": 0},
        {"pixel_radius": -1},
    ])
    def test_invalid_values_raise(self, kwargs) -> None:
        """Test out-of-domain numeric options are rejected."""
        with pytest.raises(ValueError, match="Configuration error"):
            PixelizerOptions(**kwargs)

    def test_numpy_integers_accepted(self) -> None:
        """Test NumPy integer amount and autostop pass validation unchanged."""
        options = PixelizerOptions(amount=np.int64(150), autostop=np.int32(100), threshold=np.int64(200))
        assert options.amount == 150
        assert options.autostop == 100
        assert options.threshold == 200

    @pytest.mark.parametrize("kwargs", [{"amount": True}, {"autostop": False}, {"amount": np.int64(0)}])
    def test_bools_and_non_positive_numpy_rejected(self, kwargs) -> None:
        """Test bools and non-positive NumPy integers are still rejected."""
        with pytest.raises(ValueError, match="Configuration error"):
            PixelizerOptions(**kwargs)
