"""Import settings with environment overrides.

Environment variables (all optional):

- ``STATEMENT_REPORT_HAS_HEADERS``: ``1/true/yes`` or ``0/false/no``.
- ``STATEMENT_REPORT_ENCODING``: text encoding used to read statement files.
- ``STATEMENT_REPORT_LOG_LEVEL``: level name or number for the package logger.

Delimiters, date and amount formats are fixed in :mod:`statement_report.tokenizer`
and :mod:`statement_report.fields`; they are not configurable.
"""

from __future__ import annotations

import codecs
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from .logging_setup import LOG_LEVEL_ENV, level_number

HAS_HEADERS_ENV = "STATEMENT_REPORT_HAS_HEADERS"
ENCODING_ENV = "STATEMENT_REPORT_ENCODING"

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be one of 1/true/yes or 0/false/no, got {raw!r}")


class ImportSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    has_headers: bool = False
    encoding: str = "utf-8"
    log_level: str | None = None

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {v!r}") from exc
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str | None) -> str | None:
        if v is not None and level_number(v) is None:
            raise ValueError(f"unknown log level: {v!r}")
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ImportSettings:
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        raw_headers = env.get(HAS_HEADERS_ENV)
        if raw_headers is not None and raw_headers.strip():
            values["has_headers"] = _parse_bool(HAS_HEADERS_ENV, raw_headers)
        raw_encoding = env.get(ENCODING_ENV)
        if raw_encoding is not None and raw_encoding.strip():
            try:
                codecs.lookup(raw_encoding.strip())
            except LookupError as exc:
                raise ValueError(f"{ENCODING_ENV}: unknown encoding {raw_encoding!r}") from exc
            values["encoding"] = raw_encoding
        raw_level = env.get(LOG_LEVEL_ENV)
        if raw_level is not None and raw_level.strip():
            if level_number(raw_level) is None:
                raise ValueError(f"{LOG_LEVEL_ENV}: unknown log level {raw_level!r}")
            values["log_level"] = raw_level
        return cls(**values)

    def with_overrides(self, **changes: object) -> ImportSettings:
        """Return a copy with every non-``None`` value in ``changes`` applied."""

        applied = {k: v for k, v in changes.items() if v is not None}
        if not applied:
            return self
        return self.model_validate({**self.model_dump(), **applied})


__all__ = ["ENCODING_ENV", "HAS_HEADERS_ENV", "ImportSettings"]
