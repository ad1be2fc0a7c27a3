"""
Blockchain Interaction Package
Handles contract compilation, deployment transactions, and nonce management
"""

from .compiler import ContractCompiler, COUNTER_CONTRACT_SOURCE
from .chain_client import ChainClient
from .nonce_manager import NonceManager

__all__ = ['ContractCompiler', 'COUNTER_CONTRACT_SOURCE', 'ChainClient', 'NonceManager']
