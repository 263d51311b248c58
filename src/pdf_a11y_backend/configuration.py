from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from .models import Settings

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "defaults.yaml"

# Optional YAML file merged over the packaged defaults
CONFIG_ENV_VAR = "PDF_A11Y_CONFIG"


@lru_cache(maxsize=1)
def _load_default_config() -> DictConfig:
    if not DEFAULT_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Default config not found at {DEFAULT_CONFIG_PATH}")
    return OmegaConf.load(DEFAULT_CONFIG_PATH)  # type: ignore[return-value]


def make_runtime_config(overrides: Optional[Dict[str, Any]] = None, config_path: Optional[Path] = None) -> DictConfig:
    """
    Merge the packaged defaults with an optional YAML file and explicit overrides.

    Struct mode is enabled on the defaults, so a misspelled key in either the
    override file or the overrides dict raises instead of being ignored.
    """
    base_container = OmegaConf.to_container(_load_default_config(), resolve=False)
    base = OmegaConf.create(base_container)
    OmegaConf.set_struct(base, True)

    layers = [base]
    if config_path is None and os.environ.get(CONFIG_ENV_VAR):
        config_path = Path(os.environ[CONFIG_ENV_VAR])
    if config_path is not None:
        layers.append(OmegaConf.load(config_path))
    if overrides:
        layers.append(OmegaConf.create(overrides))

    return DictConfig(OmegaConf.merge(*layers))


def load_settings(overrides: Optional[Dict[str, Any]] = None, config_path: Optional[Path] = None) -> Settings:
    """
    Build the process settings once at startup.

    Credentials are resolved from ADOBE_CLIENT_ID and ADOBE_CLIENT_SECRET
    (a local .env file is honoured). Missing credentials are not rejected
    here; they surface as an authentication failure from the remote service.
    """
    load_dotenv()
    runtime_config = make_runtime_config(overrides, config_path)
    container = OmegaConf.to_container(runtime_config, resolve=True)
    return Settings.model_validate(container)
