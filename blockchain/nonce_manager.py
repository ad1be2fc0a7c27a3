"""
Nonce Manager
Hands out strictly increasing nonces for the deployer account
"""

import asyncio
from typing import Optional
from web3 import Web3
from loguru import logger


class NonceManager:
    """
    Manages transaction nonces for the deployer wallet
    Syncs lazily from the chain so that construction performs no RPC calls
    """

    def __init__(self, w3: Web3, address: str):
        """
        Initialize Nonce Manager

        Args:
            w3: Web3 instance
            address: Deployer wallet address
        """
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

        self.current_nonce: Optional[int] = None
        self.pending_nonces = set()
        self.lock = asyncio.Lock()

    def _sync_nonce(self):
        """Sync nonce with blockchain (confirmed + pending)"""
        try:
            nonce = self.w3.eth.get_transaction_count(self.address, 'pending')
        except Exception as e:
            logger.error(f"Error syncing nonce: {e}")
            raise

        self.current_nonce = nonce
        logger.debug(f"Nonce synced: {nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        async with self.lock:
            if self.current_nonce is None:
                self._sync_nonce()

            nonce = self.current_nonce
            self.current_nonce += 1
            self.pending_nonces.add(nonce)

            logger.debug(f"Allocated nonce: {nonce}")
            return nonce

    async def confirm_nonce(self, nonce: int):
        """Mark a nonce as confirmed"""
        async with self.lock:
            if nonce in self.pending_nonces:
                self.pending_nonces.discard(nonce)
                logger.debug(f"Confirmed nonce: {nonce}")

    async def reset_nonce(self):
        """Reset nonce from blockchain (used after a failed attempt)"""
        async with self.lock:
            self.pending_nonces.clear()
            self.current_nonce = None
            self._sync_nonce()
            logger.warning(f"Nonce reset to: {self.current_nonce}")

    def get_pending_count(self) -> int:
        """Get count of unconfirmed nonces"""
        return len(self.pending_nonces)

    def get_current_nonce(self) -> int:
        """Get current nonce (without incrementing)"""
        if self.current_nonce is None:
            self._sync_nonce()
        return self.current_nonce
