from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .client import ShotgridClient
from .errors import ShotgridConfigError


@dataclass(frozen=True)
class ShotgridConfig:
    server: str
    script_name: Optional[str] = None
    script_key: Optional[str] = None
    ca_bundle: Optional[str] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(name, "").strip() or None


def load_env_config(*, use_dotenv: bool = True) -> ShotgridConfig:
    """Load ShotGrid server and script credentials from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return ShotgridConfig(
        server=(_env("SG_SERVER") or ""),
        script_name=_env("SG_SCRIPT_NAME"),
        script_key=_env("SG_SCRIPT_KEY"),
        ca_bundle=_env("CA_BUNDLE"),
    )


def create_client_from_env(**kwargs) -> ShotgridClient:
    """Create a ShotgridClient from environment variables."""
    config = load_env_config()
    if not config.server:
        raise ShotgridConfigError("Missing SG_SERVER in environment.")
    kwargs.setdefault("script_name", config.script_name)
    kwargs.setdefault("script_key", config.script_key)
    kwargs.setdefault("ca_bundle", config.ca_bundle)
    return ShotgridClient(base_url=config.server, **kwargs)


__all__ = ["ShotgridConfig", "load_env_config", "create_client_from_env"]
