"""Configuration for feedicons"""

from pathlib import Path

from dynaconf import Dynaconf, Validator

# Validators for feedicons settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator(
        "logging.third_party_level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ),
    Validator("favicons.max_workers", is_type_of=int, gte=1, must_exist=True),
    # Every request is bounded; a batch latency is a multiple of this value.
    Validator("favicons.request_timeout_sec", is_type_of=float, gt=0, lte=60.0),
    Validator("favicons.max_icon_bytes", is_type_of=int, gt=0, must_exist=True),
    Validator("favicons.max_page_bytes", is_type_of=int, gt=0, must_exist=True),
    Validator("favicons.user_agent", is_type_of=str, must_exist=True),
    Validator("favicons.retry_failed_domains", is_type_of=bool),
    Validator("feed_discovery.request_timeout_sec", is_type_of=float, gt=0, lte=60.0),
    Validator("feed_discovery.user_agent", is_type_of=str, must_exist=True),
    Validator("feed_discovery.max_page_bytes", is_type_of=int, gt=0, must_exist=True),
]

# `root_path` = The directory holding the settings files, DO NOT CHANGE.
# `envvar_prefix` = Export envvars with `export FEEDICONS_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `env_switcher` = Switch environments by `export FEEDICONS_ENV=production`.
# Default: `development`.
# `merge_enabled` = Environment tables extend the `default` tables instead of replacing them.
# `validators` = Define validators for feedicons settings.

settings = Dynaconf(
    root_path=str(Path(__file__).parent),
    envvar_prefix="FEEDICONS",
    settings_files=[
        "default.toml",
        "development.toml",
        "production.toml",
        "testing.toml",
    ],
    environments=True,
    env_switcher="FEEDICONS_ENV",
    merge_enabled=True,
    validators=_validators,
)
