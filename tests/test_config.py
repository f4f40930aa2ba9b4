import pytest

from common import config
from page_detection import DetectionOptions
from page_rectification import RectifyOptions


class TestConfig:
    def test_defaults(self, monkeypatch):
        for name in ("SCANNER_MIN_AREA_RATIO", "SCANNER_MAX_AREA_RATIO", "SCANNER_MIN_SCORE"):
            monkeypatch.delenv(name, raising=False)

        assert config.min_area_ratio() == pytest.approx(0.15)
        assert config.max_area_ratio() == pytest.approx(0.98)
        assert config.min_score() == pytest.approx(0.5)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SCANNER_MIN_AREA_RATIO", "0.3")
        monkeypatch.setenv("SCANNER_CANNY_LOW", "20")
        monkeypatch.setenv("SCANNER_CANNY_HIGH", "120")

        options = DetectionOptions()
        assert options.min_area_ratio == pytest.approx(0.3)
        assert (options.canny_low, options.canny_high) == (20, 120)

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv("SCANNER_MIN_AREA_RATIO", "0.3")
        assert DetectionOptions(min_area_ratio=0.2).min_area_ratio == pytest.approx(0.2)

    def test_invalid_value_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("SCANNER_MIN_SCORE", "high")
        assert config.min_score() == pytest.approx(config.MIN_SCORE)

    def test_zero_disables_output_cap(self, monkeypatch):
        monkeypatch.setenv("SCANNER_MAX_OUTPUT_DIMENSION", "0")
        assert config.max_output_dimension() is None
        assert RectifyOptions().max_output_dimension is None

    def test_output_cap_from_env(self, monkeypatch):
        monkeypatch.setenv("SCANNER_MAX_OUTPUT_DIMENSION", "1024")
        assert RectifyOptions.from_env().max_output_dimension == 1024

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("SCANNER_LOG_LEVEL", "debug")
        assert config.log_level() == "DEBUG"


class TestDetectionOptions:
    def test_rejects_inverted_area_ratios(self):
        with pytest.raises(ValueError):
            DetectionOptions(min_area_ratio=0.9, max_area_ratio=0.5)

    def test_rejects_inverted_canny_thresholds(self):
        with pytest.raises(ValueError):
            DetectionOptions(canny_low=200, canny_high=50)

    def test_copy_changes_only_given_fields(self):
        options = DetectionOptions(min_area_ratio=0.25, lenient=True)
        copied = options.copy(use_default_fallback=False)

        assert copied.min_area_ratio == pytest.approx(0.25)
        assert copied.lenient
        assert not copied.use_default_fallback
        assert options.use_default_fallback
