"""
Configuration module for proofspec.

Centralizes validator strictness and logging options with environment
variable support. Values are validated by a pydantic model and cached.
"""

import os
from functools import lru_cache
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, field_validator

# ============================================================
# Environment Variables
# ============================================================

ENV_STRICT_RANGES = "PROOFSPEC_STRICT_RANGES"
ENV_SCOPE_NYM_ALIAS = "PROOFSPEC_SCOPE_NYM_ALIAS"
ENV_REJECT_UNKNOWN_FIELDS = "PROOFSPEC_REJECT_UNKNOWN_FIELDS"
ENV_LOG_LEVEL = "PROOFSPEC_LOG_LEVEL"
ENV_LOG_JSON = "PROOFSPEC_LOG_JSON"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidatorSettings(BaseModel):
    """
    Validator options.

    strict_ranges: reject Interval clauses whose min exceeds max
    scope_nym_alias: "reject" flags `crypto_cal` in scope_nym clauses,
        "accept" normalizes it to `crypto_val`
    reject_unknown_fields: flag clauseData keys a clause type does not define
    """
    model_config = ConfigDict(frozen=True)

    strict_ranges: bool = True
    scope_nym_alias: Literal["reject", "accept"] = "reject"
    reject_unknown_fields: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("scope_nym_alias", mode="before")
    @classmethod
    def _lower_alias(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(_LOG_LEVELS)}")
        return v


def settings_from_env(environ: Dict[str, str] = None) -> ValidatorSettings:
    """Build settings from environment variables, ignoring unset ones."""
    environ = os.environ if environ is None else environ
    mapping = {
        "strict_ranges": ENV_STRICT_RANGES,
        "scope_nym_alias": ENV_SCOPE_NYM_ALIAS,
        "reject_unknown_fields": ENV_REJECT_UNKNOWN_FIELDS,
        "log_level": ENV_LOG_LEVEL,
        "log_json": ENV_LOG_JSON,
    }
    values = {name: environ[var] for name, var in mapping.items() if environ.get(var, "") != ""}
    return ValidatorSettings(**values)


@lru_cache(maxsize=1)
def load_settings() -> ValidatorSettings:
    """Load settings from the process environment (cached)."""
    return settings_from_env()


def reload_settings() -> ValidatorSettings:
    """Drop the cached settings and read the environment again."""
    load_settings.cache_clear()
    return load_settings()
