"""
Settings read from env (and a local .env in dev).

Why: the remote server location, the local DB and the account type tag all
change between machines; keeping them here means nothing else calls os.getenv.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# dev convenience; in prod the platform injects env vars
load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_env: str = "local"
    database_url: str = "sqlite:///./codebreaker.db"

    # Remote score server (form-encoded POST, JSON back)
    remote_base_url: str = "http://localhost:8080/codebreaker/"
    remote_verify_path: str = "verify_credentials.php"
    remote_submit_path: str = "submit_score.php"
    remote_scores_path: str = "get_high_scores.php"
    remote_splash_path: str = "splash.php"
    remote_timeout_sec: float = 5.0

    # Tag for the one local account this app looks at
    account_type: str = "com.android.codebreaker"

    # Ask random.org for the secret (falls back to local randomness anyway)
    random_org_enabled: bool = True

    log_level: str = "INFO"


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@lru_cache()
def get_settings() -> Settings:
    defaults = Settings()
    return Settings(
        app_env=os.getenv("APP_ENV", defaults.app_env),
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        remote_base_url=os.getenv("REMOTE_BASE_URL", defaults.remote_base_url),
        remote_verify_path=os.getenv("REMOTE_VERIFY_PATH", defaults.remote_verify_path),
        remote_submit_path=os.getenv("REMOTE_SUBMIT_PATH", defaults.remote_submit_path),
        remote_scores_path=os.getenv("REMOTE_SCORES_PATH", defaults.remote_scores_path),
        remote_splash_path=os.getenv("REMOTE_SPLASH_PATH", defaults.remote_splash_path),
        remote_timeout_sec=float(os.getenv("REMOTE_TIMEOUT_SEC", str(defaults.remote_timeout_sec))),
        account_type=os.getenv("ACCOUNT_TYPE", defaults.account_type),
        random_org_enabled=_flag(os.getenv("RANDOM_ORG_ENABLED", "1")),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )
