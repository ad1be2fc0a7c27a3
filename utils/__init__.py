"""
Utilities Package
Configuration, console I/O and shared exceptions
"""

from .config import NetworkConfig, RunConfiguration, load_network_config
from .console import (
    print_banner,
    print_completion_banner,
    read_deployment_count,
    report_attempt,
)
from .exceptions import (
    CompilationError,
    ConfigurationError,
    DeployerError,
    DeploymentError,
    InputValidationError,
)

__all__ = [
    'NetworkConfig',
    'RunConfiguration',
    'load_network_config',
    'print_banner',
    'print_completion_banner',
    'read_deployment_count',
    'report_attempt',
    'CompilationError',
    'ConfigurationError',
    'DeployerError',
    'DeploymentError',
    'InputValidationError'
]
