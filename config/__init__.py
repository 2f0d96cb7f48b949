import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def scoring_overrides() -> dict:
    """Policy overrides read from the environment (unset keys keep defaults)."""
    keys = (
        "MONTHLY_EXCUSE_CAP",
        "YEARLY_EXCUSE_ALLOWANCE",
        "TOP_PERFORMER_THRESHOLD",
        "NEEDS_ATTENTION_THRESHOLD",
        "RANKING_LIMIT",
        "REMINDER_HOUR",
    )
    return {k: os.environ[k] for k in keys if os.getenv(k)}
