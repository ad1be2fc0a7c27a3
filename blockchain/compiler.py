"""
Contract Compiler
Compiles the fixed Counter contract with solc via py-solc-x
"""

from typing import Optional

import solcx
from loguru import logger

from deployer.models import DeploymentRequest
from utils.exceptions import CompilationError

SOURCE_FILE_NAME = "Counter.sol"

COUNTER_CONTRACT_SOURCE = """
pragma solidity ^0.8.0;

contract Counter {
    uint256 private count;

    event CountIncremented(uint256 newCount);

    function increment() public {
        count += 1;
        emit CountIncremented(count);
    }

    function getCount() public view returns (uint256) {
        return count;
    }
}
"""


class ContractCompiler:
    """
    Thin adapter around solc standard-JSON compilation
    """

    def __init__(self, solc_version: str = "0.8.20", evm_version: Optional[str] = None):
        """
        Initialize compiler

        Args:
            solc_version: solc release to compile with (installed on demand)
            evm_version: Target EVM version, e.g. 'paris'. None keeps solc's default
        """
        self.solc_version = solc_version
        self.evm_version = evm_version

    def compile(self, source_text: str, contract_name: Optional[str] = None) -> DeploymentRequest:
        """
        Compile a single-file Solidity source

        Args:
            source_text: Solidity source
            contract_name: Contract to pick from the output. Defaults to the
                only contract in the file

        Returns:
            DeploymentRequest with ABI and bytecode

        Raises:
            CompilationError: on any compiler failure
        """
        logger.info("Compiling contract...")

        try:
            self._ensure_solc()
            output = solcx.compile_standard(
                self._build_input(source_text),
                solc_version=self.solc_version
            )
        except CompilationError:
            raise
        except Exception as e:
            logger.error("Contract compilation failed!")
            raise CompilationError(f"solc {self.solc_version} failed: {e}") from e

        request = self._extract(output, contract_name)

        logger.success(f"Contract {request.contract_name} compiled successfully!")
        logger.debug(f"Bytecode size: {(len(request.bytecode) - 2) // 2} bytes")
        return request

    def _ensure_solc(self):
        """Install the requested solc release if it is missing"""
        installed = {str(v) for v in solcx.get_installed_solc_versions()}
        if self.solc_version in installed:
            return

        logger.info(f"Installing solc {self.solc_version}...")
        solcx.install_solc(self.solc_version)

    def _build_input(self, source_text: str) -> dict:
        settings = {
            "outputSelection": {"*": {"*": ["abi", "evm.bytecode"]}}
        }
        if self.evm_version:
            settings["evmVersion"] = self.evm_version

        return {
            "language": "Solidity",
            "sources": {SOURCE_FILE_NAME: {"content": source_text}},
            "settings": settings
        }

    def _extract(self, output: dict, contract_name: Optional[str]) -> DeploymentRequest:
        """Pick ABI and bytecode out of solc's standard-JSON output"""
        contracts = output.get("contracts", {}).get(SOURCE_FILE_NAME, {})

        if not contracts:
            raise CompilationError("Compiler produced no contracts")

        if contract_name is None:
            if len(contracts) != 1:
                raise CompilationError(
                    f"Expected one contract, found: {', '.join(sorted(contracts))}"
                )
            contract_name = next(iter(contracts))

        if contract_name not in contracts:
            raise CompilationError(f"Contract {contract_name} not found in compiler output")

        contract = contracts[contract_name]
        bytecode = contract.get("evm", {}).get("bytecode", {}).get("object", "")

        if not bytecode:
            raise CompilationError(f"Contract {contract_name} has no bytecode")

        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        return DeploymentRequest(
            contract_name=contract_name,
            abi=contract.get("abi", []),
            bytecode=bytecode
        )
