#!/usr/bin/env python
from __future__ import annotations
import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


@dataclass
class ChalkSettings:
    """Remote generation service connection settings."""
    host_address: str = field(default="http://localhost:9600")
    api_key: Optional[str] = field(default=None)
    verify_ssl: bool = field(default=True)
    timeout: float = field(default=120.0)

    @property
    def base_url(self) -> str:
        return self.host_address.rstrip("/")

    @property
    def ws_url(self) -> str:
        """Base WebSocket URL derived from the HTTP address."""
        if self.base_url.startswith("https://"):
            return "wss://" + self.base_url[len("https://"):]
        if self.base_url.startswith("http://"):
            return "ws://" + self.base_url[len("http://"):]
        return self.base_url

    @classmethod
    def from_env(cls) -> "ChalkSettings":
        """Load from environment variables."""
        return cls(
            host_address=os.getenv("CHALKBOARD_HOST_ADDRESS", "http://localhost:9600"),
            api_key=os.getenv("CHALKBOARD_API_KEY"),
            verify_ssl=_get_bool("CHALKBOARD_VERIFY_SSL", True),
            timeout=float(os.getenv("CHALKBOARD_TIMEOUT", "120")),
        )


@dataclass
class BoardSettings:
    """Board session behaviour settings."""
    primary_title: str = field(default="PRIMARY")
    verbose: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "BoardSettings":
        """Load from environment variables."""
        return cls(
            primary_title=os.getenv("CHALKBOARD_PRIMARY_TITLE", "PRIMARY"),
            verbose=_get_bool("CHALKBOARD_VERBOSE", False),
        )


@dataclass
class ServerSettings:
    """HTTP server settings."""
    host: str = field(default="localhost")
    port: int = field(default=8810)

    @classmethod
    def from_env(cls) -> "ServerSettings":
        return cls(
            host=os.getenv("CHALKBOARD_HOST", "localhost"),
            port=int(os.getenv("CHALKBOARD_PORT", "8810")),
        )
