# config.py
import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

from ossdist.exceptions import InvalidConfig, InvalidFormat, MissingCredentials
from ossdist.utils.date_format import format_date, is_date_pattern, is_numeric_format

CREDENTIAL_KEYS = ("access_key_id", "access_key_secret", "bucket", "region")

# camelCase option names accepted for compatibility with the webpack plugin
OPTION_ALIASES = {
    "accessKeyId": "access_key_id",
    "accessKeySecret": "access_key_secret",
    "deleteAll": "delete_all",
}

DEFAULT_OPTIONS: Dict[str, Any] = {
    "prefix": "",
    "exclude": None,
    "format": None,
    "delete_all": False,
    "output": "./dist",
    "local": False,
    "limit": 5,
    "endpoint": None,
}


class Settings(BaseSettings):
    """Credentials and logging options read from OSS_* variables or .env"""
    model_config = SettingsConfigDict(
        env_prefix="OSS_",
        env_file=".env",
        extra="ignore",
    )

    ACCESS_KEY_ID: str = ""
    ACCESS_KEY_SECRET: str = ""
    BUCKET: str = ""
    REGION: str = ""
    ENDPOINT: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    def as_options(self) -> Dict[str, Any]:
        """Credential part of an options record; empty values are left out."""
        options = {
            "access_key_id": self.ACCESS_KEY_ID,
            "access_key_secret": self.ACCESS_KEY_SECRET,
            "bucket": self.BUCKET,
            "region": self.REGION,
            "endpoint": self.ENDPOINT,
        }
        return {key: value for key, value in options.items() if value}


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class PluginConfig:
    """Validated, immutable plugin configuration"""
    access_key_id: str
    access_key_secret: str
    bucket: str
    region: str
    prefix: str = ""
    exclude: Optional[Tuple[re.Pattern, ...]] = None
    format: Optional[str] = None
    delete_all: bool = False
    output: Optional[str] = "./dist"
    local: bool = False
    limit: int = 5
    endpoint: Optional[str] = None

    @property
    def effective_limit(self) -> int:
        """Number of existing versions kept next to the one being uploaded."""
        return self.limit - 1 if self.limit > 3 else 2

    @property
    def endpoint_url(self) -> str:
        if self.endpoint:
            return self.endpoint
        region = self.region if self.region.startswith("oss-") else f"oss-{self.region}"
        return f"https://{region}.aliyuncs.com"

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id and self.access_key_secret)


def _normalize_keys(options: Mapping[str, Any]) -> Dict[str, Any]:
    return {OPTION_ALIASES.get(key, key): value for key, value in options.items()}


def _compile_exclude(exclude: Any) -> Optional[Tuple[re.Pattern, ...]]:
    if exclude is None:
        return None

    def compile_one(item: Any) -> re.Pattern:
        if isinstance(item, re.Pattern):
            # File names are str; a bytes pattern would raise TypeError on every match
            if isinstance(item.pattern, bytes):
                raise InvalidConfig(f"exclude pattern {item.pattern!r} must be a str pattern, not bytes")
            return item
        if isinstance(item, str):
            try:
                return re.compile(item)
            except re.error as e:
                raise InvalidConfig(f"exclude pattern {item!r} is not a valid regex: {e}")
        raise InvalidConfig(f"exclude must be a regex or a list of regexes, got {type(item).__name__}")

    if isinstance(exclude, (list, tuple, set, frozenset)):
        return tuple(compile_one(item) for item in exclude)
    return (compile_one(exclude),)


def _resolve_format(value: Any, now: Optional[datetime]) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidFormat("format must be digits or a pattern of YYYY, YY, MM, DD, HH, hh, mm, SS, ss")
    if isinstance(value, int):
        if value < 0:
            raise InvalidFormat("format must be a non-negative integer")
        return str(value)
    if not isinstance(value, str):
        raise InvalidFormat("format must be a string")

    if is_numeric_format(value):
        return value
    if is_date_pattern(value):
        return format_date(now or datetime.now(), value)
    raise InvalidFormat("format must be digits or a pattern of YYYY, YY, MM, DD, HH, hh, mm, SS, ss")


def build_config(options: Any, now: Optional[datetime] = None) -> PluginConfig:
    """
    Validate a raw options record and return the immutable configuration.

    A date pattern in `format` is resolved here, once, against `now`
    (defaults to the current time). Later builds reuse the same string.

    Raises:
        InvalidConfig: options is not a mapping, or a value has the wrong type
        MissingCredentials: a credential is missing or empty
        InvalidFormat: format is neither digits nor a date pattern
    """
    if not isinstance(options, Mapping):
        raise InvalidConfig("options must be a mapping of option names to values")

    raw = _normalize_keys(options)
    merged = {**DEFAULT_OPTIONS, **raw}

    missing = [key for key in CREDENTIAL_KEYS if not merged.get(key)]
    if missing:
        raise MissingCredentials(f"missing required options: {', '.join(missing)}")

    limit = merged["limit"]
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidConfig(f"limit must be an integer >= 1, got {limit!r}")

    prefix = merged["prefix"] or ""
    if not isinstance(prefix, str):
        raise InvalidConfig("prefix must be a string")

    exclude = _compile_exclude(merged["exclude"])

    return PluginConfig(
        access_key_id=merged["access_key_id"],
        access_key_secret=merged["access_key_secret"],
        bucket=merged["bucket"],
        region=merged["region"],
        prefix=prefix,
        exclude=exclude,
        format=_resolve_format(merged["format"], now),
        delete_all=bool(merged["delete_all"]),
        output=merged["output"] or None,
        local=bool(merged["local"]),
        limit=limit,
        endpoint=merged["endpoint"],
    )
