"""
Deployer Core Package
Handles the deploy loop, its records, and the signing wallet
"""

from .models import (
    AttemptStatus,
    DeploymentAttempt,
    DeploymentReceipt,
    DeploymentRequest,
    DeploymentSummary,
)
from .orchestrator import DeploymentOrchestrator
from .wallet_manager import WalletManager

__all__ = [
    'AttemptStatus',
    'DeploymentAttempt',
    'DeploymentReceipt',
    'DeploymentRequest',
    'DeploymentSummary',
    'DeploymentOrchestrator',
    'WalletManager'
]
