"""
Chain Client
Builds, signs and broadcasts contract-creation transactions
"""

import asyncio
from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import TimeExhausted, TransactionNotFound
from loguru import logger

from deployer.models import DeploymentReceipt, DeploymentRequest
from deployer.wallet_manager import WalletManager
from utils.exceptions import DeploymentError
from .nonce_manager import NonceManager

GAS_BUFFER = 1.2  # 20% over the estimate
RECEIPT_POLL_INTERVAL = 0.5  # seconds


class ChainClient:
    """
    Deploys compiled contracts from a single wallet, one at a time
    """

    def __init__(
        self,
        w3: Web3,
        wallet_manager: WalletManager,
        nonce_manager: Optional[NonceManager] = None,
        confirmation_timeout: float = 120,
        fallback_gas_limit: int = 3_000_000,
        poll_interval: float = RECEIPT_POLL_INTERVAL
    ):
        """
        Initialize Chain Client

        Args:
            w3: Web3 instance
            wallet_manager: Signing wallet
            nonce_manager: Nonce allocator; one is created for the wallet if omitted
            confirmation_timeout: Seconds to wait for a receipt
            fallback_gas_limit: Gas limit used when estimation fails
            poll_interval: Seconds between receipt lookups
        """
        self.w3 = w3
        self.wallet_manager = wallet_manager
        self.nonce_manager = nonce_manager or NonceManager(w3, wallet_manager.address)
        self.confirmation_timeout = confirmation_timeout
        self.fallback_gas_limit = fallback_gas_limit
        self.poll_interval = poll_interval

        self._chain_id: Optional[int] = None

    @classmethod
    def from_config(cls, network) -> 'ChainClient':
        """
        Build a client from NetworkConfig. No RPC calls are made here

        Raises:
            ConfigurationError: if the private key is invalid
        """
        w3 = Web3(Web3.HTTPProvider(network.rpc_url))
        wallet_manager = WalletManager(network.private_key)

        return cls(
            w3,
            wallet_manager,
            confirmation_timeout=network.confirmation_timeout,
            fallback_gas_limit=network.fallback_gas_limit
        )

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self.w3.eth.chain_id
        return self._chain_id

    async def deploy(self, request: DeploymentRequest) -> DeploymentReceipt:
        """
        Submit one contract-creation transaction and wait for confirmation

        Args:
            request: Compiled contract

        Returns:
            DeploymentReceipt of the mined transaction

        Raises:
            DeploymentError: if the transaction reverted
            Exception: anything raised by web3 while building, sending or waiting
        """
        nonce = await self.nonce_manager.get_nonce()

        try:
            receipt = await self._deploy_with_nonce(request, nonce)
        except Exception:
            # Resync so the next attempt does not reuse or skip a nonce
            try:
                await self.nonce_manager.reset_nonce()
            except Exception as sync_error:
                logger.warning(f"Nonce resync failed: {sync_error}")
            raise

        await self.nonce_manager.confirm_nonce(nonce)
        return receipt

    async def _deploy_with_nonce(self, request: DeploymentRequest, nonce: int) -> DeploymentReceipt:
        transaction = self.build_deploy_tx(request, nonce)

        signed_tx = self.wallet_manager.sign_transaction(transaction)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = self.w3.to_hex(tx_hash)

        logger.info(f"Transaction sent: {tx_hash_hex} (nonce {nonce})")
        logger.info("⏳ Waiting for transaction confirmation...")

        receipt = await self.wait_for_receipt(tx_hash)

        if receipt['status'] != 1:
            raise DeploymentError(f"Deployment transaction {tx_hash_hex} reverted")

        return DeploymentReceipt(
            contract_address=receipt['contractAddress'],
            transaction_hash=tx_hash_hex,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed')
        )

    async def wait_for_receipt(self, tx_hash):
        """
        Poll for the receipt without blocking the event loop

        Args:
            tx_hash: Hash returned by send_raw_transaction

        Returns:
            Transaction receipt

        Raises:
            TimeExhausted: if not mined within confirmation_timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.confirmation_timeout

        while True:
            try:
                return self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                pass

            if loop.time() >= deadline:
                raise TimeExhausted(
                    f"Transaction {self.w3.to_hex(tx_hash)} is not in the chain "
                    f"after {self.confirmation_timeout} seconds"
                )

            await asyncio.sleep(self.poll_interval)

    def build_deploy_tx(self, request: DeploymentRequest, nonce: int) -> Dict:
        """
        Build the unsigned contract-creation transaction

        Args:
            request: Compiled contract
            nonce: Nonce to use

        Returns:
            Transaction dict with gas and fee fields filled in
        """
        contract = self.w3.eth.contract(abi=request.abi, bytecode=request.bytecode)
        constructor = contract.constructor()

        try:
            gas_estimate = constructor.estimate_gas({'from': self.wallet_manager.address})
            gas_limit = int(gas_estimate * GAS_BUFFER)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = self.fallback_gas_limit

        logger.debug(f"Gas limit: {gas_limit}")

        return constructor.build_transaction({
            'from': self.wallet_manager.address,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': self.chain_id
        })
