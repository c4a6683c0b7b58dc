"""Unit tests for Settings — defaults, environment overrides, validators."""
import pytest
from pydantic import ValidationError

from ocean_engine.config import Settings, get_settings


class TestDefaults:

    def test_scale_and_score_bounds(self):
        settings = Settings()
        assert (settings.SCALE_MIN, settings.SCALE_MAX) == (1.0, 5.0)
        assert (settings.SCORE_MIN, settings.SCORE_MAX) == (0.0, 100.0)

    def test_organizational_gates(self):
        settings = Settings()
        assert settings.MIN_ORG_SAMPLE_SIZE == 3
        assert settings.MIN_FACET_COVERAGE == 50.0
        assert settings.MIN_TEAM_SAMPLE_SIZE == 2

    def test_dark_side_defaults(self):
        thresholds = Settings().DARK_SIDE_THRESHOLDS
        assert thresholds["volatility_neuroticism_min"] == 80.0
        assert thresholds["perfectionism_conscientiousness_min"] == 90.0

    def test_weight_normalization_off_by_default(self):
        assert Settings().REQUIRE_NORMALIZED_MAPPING_WEIGHTS is False

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_is_production(self):
        assert Settings(ENVIRONMENT="production").is_production is True
        assert Settings().is_production is False


class TestEnvironmentOverrides:

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("BATCH_CONCURRENCY", "3")
        monkeypatch.setenv("SCALE_MAX", "7")
        settings = Settings()
        assert settings.BATCH_CONCURRENCY == 3
        assert settings.SCALE_MAX == 7.0


class TestValidators:

    def test_inverted_scale_rejected(self):
        with pytest.raises(ValidationError):
            Settings(SCALE_MIN=5, SCALE_MAX=1)

    def test_inverted_facet_scale_rejected(self):
        with pytest.raises(ValidationError):
            Settings(FACET_SCALE_MIN=100, FACET_SCALE_MAX=0)

    @pytest.mark.parametrize("field", ["DIVERSITY_BINS", "MIN_ORG_SAMPLE_SIZE", "BATCH_CONCURRENCY"])
    def test_non_positive_sizes_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_coverage_must_be_percentage(self):
        with pytest.raises(ValidationError):
            Settings(MIN_FACET_COVERAGE=150)
