"""Parsing of database URLs and their redacted display form."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse

from ..dialects.base import Flavor
from ..errors import ConfigurationError
from .redaction import REDACTED_VALUE, redact_query_params


@dataclass(frozen=True)
class DSNConfig:
    driver: str
    username: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = ""
    query: dict[str, str] = field(default_factory=dict)

    @property
    def database(self) -> Optional[str]:
        return self.path.lstrip("/") or None

    @property
    def flavor(self) -> Flavor:
        return Flavor.from_url(self.driver)

    def render(self, *, redact: bool = True) -> str:
        """
        Rebuild the URL, masking the password and sensitive query values.

        The ``scheme://`` prefix is kept even without a host (``sqlite:///path``).
        """

        userinfo = ""
        if self.username:
            userinfo = self.username
            if self.password:
                userinfo += ":" + (REDACTED_VALUE if redact else self.password)
            userinfo += "@"
        hostport = self.host or ""
        if self.port:
            hostport += f":{self.port}"
        query = redact_query_params(self.query) if redact else self.query
        url = f"{self.driver}://{userinfo}{hostport}{self.path}"
        return f"{url}?{urlencode(query)}" if query else url

    def redacted(self) -> str:
        return self.render(redact=True)


def parse_dsn(dsn: str) -> DSNConfig:
    parsed = urlparse(dsn)
    if not parsed.scheme:
        raise ConfigurationError(f"DSN is missing a scheme: {dsn.split('@')[-1]!r}")
    return DSNConfig(
        driver=parsed.scheme,
        username=parsed.username,
        password=parsed.password,
        host=parsed.hostname,
        port=parsed.port,
        path=parsed.path or "",
        query=dict(parse_qsl(parsed.query)),
    )


def dsn_from_env(env_var: str) -> DSNConfig:
    value = os.getenv(env_var)
    if not value:
        raise ConfigurationError(f"Environment variable {env_var} is not set")
    return parse_dsn(value)
