"""
Deployment Orchestrator
Compiles the contract once and deploys it N times, one after another
"""

from loguru import logger

from utils.config import RunConfiguration
from utils.console import report_attempt
from utils.exceptions import InputValidationError
from .models import DeploymentAttempt, DeploymentSummary


class DeploymentOrchestrator:
    """
    Runs the deploy loop

    Attempts are strictly sequential: every deployment is signed by the
    same wallet, so attempt i+1 is only submitted once attempt i has been
    confirmed or has failed. A failed attempt is recorded and the loop
    moves on; nothing is retried.
    """

    def __init__(self, compiler, chain_client, source_text: str):
        """
        Initialize orchestrator

        Args:
            compiler: Object with compile(source_text) -> DeploymentRequest
            chain_client: Object with async deploy(request) -> DeploymentReceipt
            source_text: Contract source to compile
        """
        self.compiler = compiler
        self.chain_client = chain_client
        self.source_text = source_text

    async def run(self, config: RunConfiguration) -> DeploymentSummary:
        """
        Compile and deploy config.deployment_count times

        Args:
            config: Run configuration

        Returns:
            DeploymentSummary with one attempt per deployment

        Raises:
            InputValidationError: if the deployment count is not positive
            CompilationError: if the contract does not compile
        """
        count = config.deployment_count
        if count <= 0:
            raise InputValidationError(
                f"Invalid number {count}! Please enter a positive number."
            )

        logger.info(f"🚀 Deploying {count} contracts...")

        request = self.compiler.compile(self.source_text)

        summary = DeploymentSummary()
        for index in range(count):
            attempt = await self._attempt(index, count, request)
            summary.attempts.append(attempt)

        logger.info(
            f"Deployments finished: {len(summary.succeeded)} succeeded, "
            f"{len(summary.failed)} failed, {summary.total} total"
        )
        return summary

    async def _attempt(self, index: int, total: int, request) -> DeploymentAttempt:
        attempt = DeploymentAttempt(index=index)
        logger.info(f"Deploying contract {attempt.number}/{total}...")

        try:
            receipt = await self.chain_client.deploy(request)
        except Exception as e:
            attempt.mark_failed(e)
            logger.opt(exception=e).debug(f"Deployment {attempt.number} traceback")
        else:
            attempt.mark_succeeded(receipt)

        report_attempt(attempt, total)
        return attempt
