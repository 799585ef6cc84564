from __future__ import annotations

import os
import re
from datetime import timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator

_FIXED_OFFSET = re.compile(r"^([+-])(\d{2}):(\d{2})$")


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y", "on"}


def _zone(name: str) -> tzinfo:
    """Resolve "UTC", a fixed offset such as "+03:00", or an IANA zone name."""
    if name.upper() == "UTC":
        return timezone.utc
    match = _FIXED_OFFSET.match(name)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes))
        return timezone(-offset if sign == "-" else offset)
    return ZoneInfo(name)


class Settings(BaseModel):
    # Zone applied to naive timestamps coming from the store or the caller.
    FSP_ASSUME_TIMEZONE: str = os.getenv("FSP_ASSUME_TIMEZONE", "UTC")
    # Write the row again when a transition targets the status it already has.
    FSP_REWRITE_SAME_STATUS: bool = _env_flag("FSP_REWRITE_SAME_STATUS")

    @field_validator("FSP_ASSUME_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        v = v.strip()
        try:
            _zone(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v!r}") from e
        return v

    @property
    def assumed_tz(self) -> tzinfo:
        return _zone(self.FSP_ASSUME_TIMEZONE)


settings = Settings()
