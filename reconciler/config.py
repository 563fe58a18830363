"""
Service configuration.

Loaded from ``RECONCILER_*`` environment variables (or a ``.env`` file):

    RECONCILER_BACKEND_URL=https://api.shop.example
    RECONCILER_PUBLISHABLE_KEY=pk_...
    RECONCILER_MAX_ATTEMPTS=4
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from reconciler.finalize._policy import FinalizePolicy
from reconciler.poller._policy import PollPolicy


class Settings(BaseSettings):
    """
    Reconciler settings.

    Timing fields are projected onto immutable policies, so components never
    read the environment directly.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECONCILER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Commerce backend
    backend_url: str = "http://localhost:9000"
    publishable_key: str = ""
    request_timeout_seconds: float = 10.0

    # Storefront
    default_locale: str = "pl"
    supported_locales: tuple[str, ...] = ("pl", "en")
    cart_reference_key: str = "payu_cart_id"
    redundant_cart_keys: tuple[str, ...] = ("_medusa_cart_id", "medusa_cart_id")
    cookie_max_age_seconds: int = 7 * 24 * 3600
    cookie_secure: bool = False

    # Finalization
    max_attempts: int = 4
    backoff_step_seconds: float = 2.0
    reauthorize_every: int = 2
    authorization_settle_seconds: float = 1.0
    initial_settle_seconds: float = 5.0
    preparing_settle_seconds: float = 2.0
    failure_redirect_delay_seconds: float = 3.0

    # Payment status poller
    poll_interval_seconds: float = 3.0
    poll_max_checks: int = 10

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = True

    def finalize_policy(self) -> FinalizePolicy:
        return (
            FinalizePolicy()
            .with_max_attempts(self.max_attempts)
            .with_backoff(step_seconds=self.backoff_step_seconds)
            .with_reauthorize_every(self.reauthorize_every)
            .with_settle(
                authorization=self.authorization_settle_seconds,
                initial=self.initial_settle_seconds,
                preparing=self.preparing_settle_seconds,
            )
        )

    def poll_policy(self) -> PollPolicy:
        return (
            PollPolicy()
            .with_interval(seconds=self.poll_interval_seconds)
            .with_max_checks(self.poll_max_checks)
        )

    def resolve_locale(self, locale: str | None) -> str:
        if locale and locale in self.supported_locales:
            return locale
        return self.default_locale


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ("Settings", "get_settings")
