"""
Configuration Loader
Reads the signing credential and RPC endpoint from .env / environment
"""

import math
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from .exceptions import ConfigurationError

REQUIRED_VARS = ('PRIVATE_KEY', 'RPC_URL')

DEFAULT_SOLC_VERSION = '0.8.20'
DEFAULT_CONFIRMATION_TIMEOUT = 120.0
DEFAULT_FALLBACK_GAS_LIMIT = 3_000_000


@dataclass(frozen=True)
class NetworkConfig:
    """Credential, endpoint and tuning knobs for one run"""

    private_key: str = field(repr=False)
    rpc_url: str
    solc_version: str = DEFAULT_SOLC_VERSION
    evm_version: Optional[str] = None
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    fallback_gas_limit: int = DEFAULT_FALLBACK_GAS_LIMIT


@dataclass(frozen=True)
class RunConfiguration:
    """Everything the orchestrator needs, fixed at startup"""

    network: NetworkConfig
    deployment_count: int

    @property
    def credential(self) -> str:
        return self.network.private_key

    @property
    def endpoint(self) -> str:
        return self.network.rpc_url


def load_network_config(env: Optional[Mapping[str, str]] = None) -> NetworkConfig:
    """
    Load network configuration

    Args:
        env: Mapping to read from. When omitted, .env is loaded and
            os.environ is used.

    Returns:
        NetworkConfig

    Raises:
        ConfigurationError: if PRIVATE_KEY or RPC_URL is missing, or an
            optional value cannot be parsed
    """
    if env is None:
        load_dotenv()
        env = os.environ

    missing = [var for var in REQUIRED_VARS if not (env.get(var) or '').strip()]
    if missing:
        raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

    config = NetworkConfig(
        private_key=env['PRIVATE_KEY'].strip(),
        rpc_url=env['RPC_URL'].strip(),
        solc_version=(env.get('SOLC_VERSION') or DEFAULT_SOLC_VERSION).strip(),
        evm_version=(env.get('SOLC_EVM_VERSION') or '').strip() or None,
        confirmation_timeout=_positive_number(
            env, 'CONFIRMATION_TIMEOUT', DEFAULT_CONFIRMATION_TIMEOUT, float
        ),
        fallback_gas_limit=_positive_number(
            env, 'FALLBACK_GAS_LIMIT', DEFAULT_FALLBACK_GAS_LIMIT, int
        ),
    )

    logger.debug(f"Loaded configuration for endpoint {config.rpc_url}")
    return config


def _positive_number(env: Mapping[str, str], name: str, default, cast):
    raw = (env.get(name) or '').strip()
    if not raw:
        return default

    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None

    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw!r}")

    return value
