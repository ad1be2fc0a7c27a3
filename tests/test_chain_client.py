"""
Unit Tests for the Chain Client and Wallet Manager
"""

import asyncio
import time
import pytest
from decimal import Decimal
from unittest.mock import MagicMock
from web3.exceptions import TimeExhausted, TransactionNotFound

from blockchain.chain_client import ChainClient
from blockchain.nonce_manager import NonceManager
from deployer.models import DeploymentRequest
from deployer.wallet_manager import WalletManager
from utils.config import NetworkConfig
from utils.exceptions import ConfigurationError, DeploymentError


PRIVATE_KEY = '0x' + '00' * 31 + '01'
DEPLOYER_ADDRESS = '0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf'
TX_HASH = '0x' + 'ab' * 32
CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'


@pytest.fixture
def request_artifact():
    return DeploymentRequest(contract_name='Counter', abi=[], bytecode='0x6080')


@pytest.fixture
def w3():
    """Mock Web3 instance wired for a successful deployment"""
    w3 = MagicMock()
    w3.eth.chain_id = 31337
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.send_raw_transaction.return_value = bytes.fromhex('ab' * 32)
    w3.to_hex.return_value = TX_HASH
    w3.eth.get_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': CONTRACT_ADDRESS,
        'blockNumber': 12,
        'gasUsed': 150000
    }

    constructor = w3.eth.contract.return_value.constructor.return_value
    constructor.estimate_gas.return_value = 100000
    constructor.build_transaction.side_effect = lambda params: dict(params, data='0x6080')
    return w3


@pytest.fixture
def wallet_manager():
    return WalletManager(PRIVATE_KEY)


@pytest.fixture
def signing_wallet():
    """Wallet whose signatures are mocked"""
    wallet = MagicMock()
    wallet.address = DEPLOYER_ADDRESS
    wallet.sign_transaction.return_value.raw_transaction = b'\x02signed'
    return wallet


@pytest.fixture
def client(w3, signing_wallet):
    return ChainClient(w3, signing_wallet, confirmation_timeout=30, fallback_gas_limit=2_000_000, poll_interval=0.01)


def constructor_of(w3):
    return w3.eth.contract.return_value.constructor.return_value


class TestChainClientDeploy:
    """Test ChainClient.deploy"""

    @pytest.mark.asyncio
    async def test_successful_deploy(self, client, w3, signing_wallet, request_artifact):
        receipt = await client.deploy(request_artifact)

        assert receipt.contract_address == CONTRACT_ADDRESS
        assert receipt.transaction_hash == TX_HASH
        assert receipt.block_number == 12
        assert receipt.gas_used == 150000

        w3.eth.contract.assert_called_with(abi=[], bytecode='0x6080')
        constructor_of(w3).build_transaction.assert_called_once_with({
            'from': DEPLOYER_ADDRESS,
            'nonce': 7,
            'gas': 120000,
            'chainId': 31337
        })
        signing_wallet.sign_transaction.assert_called_once()
        w3.eth.send_raw_transaction.assert_called_once_with(b'\x02signed')
        w3.eth.get_transaction_receipt.assert_called_once_with(w3.eth.send_raw_transaction.return_value)
        assert client.nonce_manager.get_pending_count() == 0

    @pytest.mark.asyncio
    async def test_nonces_increase_across_deploys(self, client, w3, request_artifact):
        await client.deploy(request_artifact)
        await client.deploy(request_artifact)

        nonces = [c.args[0]['nonce'] for c in constructor_of(w3).build_transaction.call_args_list]
        assert nonces == [7, 8]
        w3.eth.get_transaction_count.assert_called_once()

    @pytest.mark.asyncio
    async def test_gas_estimation_fallback(self, client, w3, request_artifact):
        constructor_of(w3).estimate_gas.side_effect = ValueError("execution reverted")

        await client.deploy(request_artifact)

        params = constructor_of(w3).build_transaction.call_args.args[0]
        assert params['gas'] == 2_000_000

    @pytest.mark.asyncio
    async def test_reverted_receipt(self, client, w3, request_artifact):
        w3.eth.get_transaction_receipt.return_value = {
            'status': 0, 'contractAddress': None, 'blockNumber': 12, 'gasUsed': 150000
        }

        with pytest.raises(DeploymentError, match="reverted"):
            await client.deploy(request_artifact)

    @pytest.mark.asyncio
    async def test_send_failure_resyncs_nonce(self, client, w3, request_artifact):
        w3.eth.send_raw_transaction.side_effect = [ValueError("replacement underpriced"), w3.eth.send_raw_transaction.return_value]

        with pytest.raises(ValueError):
            await client.deploy(request_artifact)

        # Nonce 7 was never used, so the chain still reports 7
        await client.deploy(request_artifact)

        nonces = [c.args[0]['nonce'] for c in constructor_of(w3).build_transaction.call_args_list]
        assert nonces == [7, 7]
        assert w3.eth.get_transaction_count.call_count == 2

    @pytest.mark.asyncio
    async def test_polls_until_mined(self, client, w3, request_artifact):
        mined = w3.eth.get_transaction_receipt.return_value
        w3.eth.get_transaction_receipt.side_effect = [
            TransactionNotFound("pending"),
            TransactionNotFound("pending"),
            mined
        ]

        receipt = await client.deploy(request_artifact)

        assert receipt.contract_address == CONTRACT_ADDRESS
        assert w3.eth.get_transaction_receipt.call_count == 3

    @pytest.mark.asyncio
    async def test_confirmation_timeout(self, w3, signing_wallet, request_artifact):
        w3.eth.get_transaction_receipt.side_effect = TransactionNotFound("pending")
        client = ChainClient(w3, signing_wallet, confirmation_timeout=0.05, poll_interval=0.01)

        with pytest.raises(TimeExhausted):
            await client.deploy(request_artifact)

        assert w3.eth.get_transaction_receipt.call_count > 1

    @pytest.mark.asyncio
    async def test_confirmation_wait_is_cancellable(self, w3, signing_wallet, request_artifact):
        w3.eth.get_transaction_receipt.side_effect = TransactionNotFound("pending")
        client = ChainClient(w3, signing_wallet, confirmation_timeout=60, poll_interval=0.01)

        task = asyncio.create_task(client.deploy(request_artifact))
        await asyncio.sleep(0.05)
        task.cancel()

        started = time.monotonic()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert time.monotonic() - started < 1

    @pytest.mark.asyncio
    async def test_resync_failure_keeps_original_error(self, client, w3, request_artifact):
        w3.eth.get_transaction_count.side_effect = [7, ConnectionError("sync failed"), 7]
        w3.eth.send_raw_transaction.side_effect = [
            ValueError("insufficient funds for gas"),
            w3.eth.send_raw_transaction.return_value
        ]

        with pytest.raises(ValueError, match="insufficient funds"):
            await client.deploy(request_artifact)

        # Next attempt resyncs lazily
        receipt = await client.deploy(request_artifact)

        assert receipt.transaction_hash == TX_HASH
        nonces = [c.args[0]['nonce'] for c in constructor_of(w3).build_transaction.call_args_list]
        assert nonces == [7, 7]
        assert w3.eth.get_transaction_count.call_count == 3
    def test_chain_id_cached(self, client, w3):
        assert client.chain_id == 31337
        w3.eth.chain_id = 1
        assert client.chain_id == 31337

    def test_default_nonce_manager(self, client):
        assert isinstance(client.nonce_manager, NonceManager)
        assert client.nonce_manager.address == DEPLOYER_ADDRESS


class TestChainClientFromConfig:
    """Test ChainClient.from_config"""

    def test_builds_client_without_rpc(self):
        network = NetworkConfig(
            private_key=PRIVATE_KEY,
            rpc_url='http://127.0.0.1:1',
            confirmation_timeout=45,
            fallback_gas_limit=1_000_000
        )

        client = ChainClient.from_config(network)

        assert client.wallet_manager.address == DEPLOYER_ADDRESS
        assert client.confirmation_timeout == 45
        assert client.fallback_gas_limit == 1_000_000

    def test_invalid_key(self):
        network = NetworkConfig(private_key='not-a-key', rpc_url='http://127.0.0.1:1')

        with pytest.raises(ConfigurationError):
            ChainClient.from_config(network)


class TestWalletManager:
    """Test WalletManager"""

    def test_address_from_key(self, wallet_manager):
        assert wallet_manager.address == DEPLOYER_ADDRESS

    def test_empty_key(self):
        with pytest.raises(ConfigurationError):
            WalletManager('')

    def test_sign_transaction(self, wallet_manager):
        signed = wallet_manager.sign_transaction({
            'to': CONTRACT_ADDRESS,
            'value': 0,
            'gas': 21000,
            'gasPrice': 1_000_000_000,
            'nonce': 0,
            'chainId': 31337
        })

        assert len(signed.raw_transaction) > 0

    def test_get_balance(self, wallet_manager):
        w3 = MagicMock()
        w3.eth.get_balance.return_value = 1_500_000_000_000_000_000
        w3.from_wei.return_value = Decimal('1.5')

        assert wallet_manager.get_balance(w3) == Decimal('1.5')
        w3.eth.get_balance.assert_called_once_with(DEPLOYER_ADDRESS)
