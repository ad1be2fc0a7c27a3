"""
System Check Script
Verifies configuration, RPC connectivity, wallet balance and solc before a run

Usage: python -m scripts.check_system
"""

import sys
from decimal import Decimal
from typing import Mapping, Optional
from web3 import Web3
from loguru import logger

from blockchain import ContractCompiler, COUNTER_CONTRACT_SOURCE
from deployer import WalletManager
from utils import DeployerError, load_network_config

MIN_BALANCE = Decimal('0.001')


def check_environment_variables(env: Optional[Mapping[str, str]] = None):
    """
    Check that PRIVATE_KEY and RPC_URL are set and valid

    Returns:
        (NetworkConfig or None, WalletManager or None)
    """
    logger.info("Checking environment variables...")

    try:
        network = load_network_config(env)
        wallet_manager = WalletManager(network.private_key)
    except DeployerError as e:
        logger.error(f"  ✗ {e}")
        return None, None

    logger.success("✓ All environment variables set")
    return network, wallet_manager


def check_rpc_connection(w3: Web3) -> bool:
    """Check RPC endpoint connection"""
    logger.info("Checking RPC connection...")

    try:
        if not w3.is_connected():
            logger.error("  ✗ Connection failed")
            return False

        block = w3.eth.block_number
        chain_id = w3.eth.chain_id
    except Exception as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ Connected (Chain ID: {chain_id}, Block: {block})")
    return True


def check_wallet_balance(w3: Web3, wallet_manager: WalletManager, min_balance: Decimal = MIN_BALANCE) -> bool:
    """Check the deployer wallet can pay for at least one deployment"""
    logger.info("Checking wallet balance...")

    try:
        balance = wallet_manager.get_balance(w3)
    except Exception as e:
        logger.error(f"  Error checking balance: {e}")
        return False

    logger.info(f"  Deployer: {balance:.6f} ETH")

    if balance < min_balance:
        logger.warning(f"  ⚠ Balance low (need at least {min_balance})")
        return False

    logger.success("  ✓ Balance sufficient")
    return True


def check_compiler(compiler: ContractCompiler) -> bool:
    """Check solc is available and the contract compiles"""
    logger.info(f"Checking solc {compiler.solc_version}...")

    try:
        compiler.compile(COUNTER_CONTRACT_SOURCE)
    except DeployerError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success("  ✓ Compiler ready")
    return True


def main(env: Optional[Mapping[str, str]] = None) -> int:
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("Multi-Deployer System Check")
    logger.info("=" * 70)

    network, wallet_manager = check_environment_variables(env)
    results = [("Environment Variables", network is not None)]

    if network is not None:
        w3 = Web3(Web3.HTTPProvider(network.rpc_url))
        connected = check_rpc_connection(w3)
        results.append(("RPC Connection", connected))
        if connected:
            results.append(("Wallet Balance", check_wallet_balance(w3, wallet_manager)))
        results.append((
            "Compiler",
            check_compiler(ContractCompiler(network.solc_version, network.evm_version))
        ))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if network is not None and passed == total:
        logger.success("✅ System ready to deploy!")
        logger.info("Start: python main.py")
        return 0

    logger.error("❌ System not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
