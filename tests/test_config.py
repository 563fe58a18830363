import pytest
import structlog

from reconciler.config import Settings
from reconciler.finalize import FinalizePolicy
from reconciler.log import configure_logging


class TestSettings:
    def test_defaults_match_policy_defaults(self, settings: Settings) -> None:
        assert settings.finalize_policy() == FinalizePolicy()
        assert settings.poll_policy().budget_seconds == 30.0

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RECONCILER_MAX_ATTEMPTS", "6")
        monkeypatch.setenv("RECONCILER_BACKOFF_STEP_SECONDS", "0.5")
        monkeypatch.setenv("RECONCILER_PUBLISHABLE_KEY", "pk_live")

        settings = Settings(_env_file=None)

        policy = settings.finalize_policy()
        assert policy.max_attempts == 6
        assert policy.backoff_for(2) == 1.0
        assert settings.publishable_key == "pk_live"

    def test_invalid_budget_is_rejected(self) -> None:
        settings = Settings(_env_file=None, max_attempts=0)

        with pytest.raises(ValueError):
            settings.finalize_policy()

    @pytest.mark.parametrize(
        ("locale", "expected"),
        [("en", "en"), ("pl", "pl"), ("de", "pl"), (None, "pl"), ("", "pl")],
    )
    def test_resolve_locale(self, settings: Settings, locale: str | None, expected: str) -> None:
        assert settings.resolve_locale(locale) == expected


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        try:
            configure_logging("INFO", json=True)
            structlog.get_logger("test").info("order_placed", order_id="o1")
        finally:
            structlog.reset_defaults()

        out = capsys.readouterr().out
        assert '"event": "order_placed"' in out
        assert '"order_id": "o1"' in out
        assert '"level": "info"' in out

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        try:
            configure_logging("WARNING", json=True)
            structlog.get_logger("test").info("hidden")
            structlog.get_logger("test").warning("shown")
        finally:
            structlog.reset_defaults()

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out
