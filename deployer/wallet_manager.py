"""
Wallet Manager
Holds the single signing account used for every deployment
"""

from typing import Dict
from decimal import Decimal
from web3 import Web3
from eth_account import Account
from loguru import logger

from utils.exceptions import ConfigurationError


class WalletManager:
    """
    Wraps the deployer account derived from PRIVATE_KEY
    """

    def __init__(self, private_key: str):
        """
        Initialize wallet manager

        Args:
            private_key: Hex private key of the deployer account

        Raises:
            ConfigurationError: if the key is empty or malformed
        """
        if not private_key:
            raise ConfigurationError("PRIVATE_KEY must be set in .env")

        try:
            self.account = Account.from_key(private_key)
        except Exception as e:
            raise ConfigurationError(f"Invalid PRIVATE_KEY: {e}") from e

        self.address = self.account.address

        logger.info(f"Deployer wallet: {self.address}")

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer account

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def get_balance(self, w3: Web3) -> Decimal:
        """Native balance of the deployer wallet in ether"""
        balance_wei = w3.eth.get_balance(self.address)
        return Decimal(str(w3.from_wei(balance_wei, 'ether')))
