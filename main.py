"""
Multi-Deployer - Main Entry Point
Compiles the Counter contract and deploys it as many times as requested
"""

import asyncio
import os
import sys
from typing import Callable, Mapping, Optional
from dotenv import load_dotenv
from loguru import logger

from blockchain import ChainClient, ContractCompiler, COUNTER_CONTRACT_SOURCE
from deployer import DeploymentOrchestrator
from utils import (
    CompilationError,
    ConfigurationError,
    InputValidationError,
    RunConfiguration,
    load_network_config,
    print_banner,
    print_completion_banner,
    read_deployment_count,
)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Route loguru to stdout, and optionally to a rotating file"""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level
    )
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


class DeploymentRunner:
    """Wires configuration, compiler, chain client and orchestrator together"""

    def __init__(
        self,
        input_source: Callable[[str], str] = input,
        env: Optional[Mapping[str, str]] = None,
        compiler_factory: Optional[Callable] = None,
        chain_client_factory: Optional[Callable] = None
    ):
        """
        Initialize runner

        Args:
            input_source: Supplies the deployment count line
            env: Configuration mapping; .env + os.environ when omitted
            compiler_factory: NetworkConfig -> compiler
            chain_client_factory: NetworkConfig -> chain client
        """
        self.input_source = input_source
        self.env = env
        self.compiler_factory = compiler_factory or (
            lambda network: ContractCompiler(network.solc_version, network.evm_version)
        )
        self.chain_client_factory = chain_client_factory or ChainClient.from_config

    async def run(self) -> int:
        """
        Run one deployment session

        Returns:
            Process exit code
        """
        try:
            network = load_network_config(self.env)
            chain_client = self.chain_client_factory(network)
        except ConfigurationError as e:
            logger.error(f"❌ {e}")
            return EXIT_FATAL

        print_banner()

        try:
            count = read_deployment_count(self.input_source)
        except InputValidationError as e:
            logger.error(f"❌ {e}")
            return EXIT_FATAL

        config = RunConfiguration(network=network, deployment_count=count)
        orchestrator = DeploymentOrchestrator(
            self.compiler_factory(network),
            chain_client,
            COUNTER_CONTRACT_SOURCE
        )

        try:
            summary = await orchestrator.run(config)
        except (CompilationError, InputValidationError) as e:
            logger.error(f"❌ {e}")
            return EXIT_FATAL

        print_completion_banner(summary)
        return EXIT_OK


async def main() -> int:
    """Main entry point"""
    runner = DeploymentRunner()
    return await runner.run()


def cli():
    """Console-script entry point"""
    load_dotenv()
    configure_logging(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None
    )

    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = EXIT_INTERRUPTED

    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
