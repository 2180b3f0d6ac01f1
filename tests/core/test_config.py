"""Tests for engine settings."""

from symcalc.core.config import Settings, get_settings


class TestSettings:
    """Test defaults, environment overrides and validation."""

    def test_defaults(self, monkeypatch):
        """Test the built-in defaults."""
        for name in ("DEFAULT_PRECISION", "POPULATION_SIZE", "MAX_GENERATIONS", "LOG_LEVEL"):
            monkeypatch.delenv(f"SYMCALC_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_PRECISION == 1024
        assert settings.POPULATION_SIZE == 1000
        assert settings.MAX_MUTATIONS == 3
        assert settings.MAX_GENERATIONS == 10000
        assert settings.RANDOM_SEED is None
        assert settings.LOG_LEVEL == "WARNING"

    def test_environment_override(self, monkeypatch):
        """Test that prefixed environment variables win."""
        monkeypatch.setenv("SYMCALC_DEFAULT_PRECISION", "128")
        monkeypatch.setenv("SYMCALC_RANDOM_SEED", "42")
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_PRECISION == 128
        assert settings.RANDOM_SEED == 42

    def test_unprefixed_ignored(self, monkeypatch):
        """Test that variables without the prefix are ignored."""
        monkeypatch.delenv("SYMCALC_DEFAULT_PRECISION", raising=False)
        monkeypatch.setenv("DEFAULT_PRECISION", "64")
        assert Settings(_env_file=None).DEFAULT_PRECISION == 1024

    def test_invalid_precision(self, assert_validation_error):
        """Test that precision must be positive."""
        assert_validation_error(Settings, {"DEFAULT_PRECISION": 0}, "DEFAULT_PRECISION")

    def test_invalid_mutation_rate(self, assert_validation_error):
        """Test that the mutation rate is a probability."""
        assert_validation_error(Settings, {"MUTATION_RATE": 1.5}, "MUTATION_RATE")

    def test_cached(self):
        """Test that settings are loaded once."""
        assert get_settings() is get_settings()
