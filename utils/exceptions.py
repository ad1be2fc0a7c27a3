"""
Deployer Exceptions
Error kinds raised across configuration, compilation and deployment
"""


class DeployerError(Exception):
    """Base class for every error raised by the deployer"""


class ConfigurationError(DeployerError):
    """Missing or malformed environment configuration (fatal)"""


class InputValidationError(DeployerError):
    """Invalid deployment count entered by the user (fatal)"""


class CompilationError(DeployerError):
    """Contract could not be compiled (fatal)"""


class DeploymentError(DeployerError):
    """A single deployment attempt failed (recorded, not fatal)"""
