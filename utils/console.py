"""
Console
Banners, the deployment-count prompt and per-attempt reporting
"""

import re
from typing import Callable

from loguru import logger

from .exceptions import InputValidationError

PROMPT = "Enter number of deployments: "
BANNER_WIDTH = 70
COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


def print_banner():
    """Print start-up banner"""
    logger.info("=" * BANNER_WIDTH)
    logger.info("🚀 Multi-Deployer :: Counter contract")
    logger.info("=" * BANNER_WIDTH)


def read_deployment_count(input_source: Callable[[str], str] = input) -> int:
    """
    Ask the user how many contracts to deploy

    Args:
        input_source: Callable taking the prompt and returning one line

    Returns:
        Positive deployment count

    Raises:
        InputValidationError: on EOF, non-numeric or non-positive input
    """
    try:
        raw = input_source(PROMPT)
    except EOFError:
        raise InputValidationError("No deployment count entered") from None

    raw = (raw or '').strip()

    # ASCII digits only: int() alone also accepts "1_000" and non-ASCII digits
    if not COUNT_PATTERN.fullmatch(raw):
        raise InputValidationError(
            f"Invalid number {raw!r}! Please enter a positive number."
        )

    count = int(raw)

    if count <= 0:
        raise InputValidationError(
            f"Invalid number {count}! Please enter a positive number."
        )

    return count


def report_attempt(attempt, total: int):
    """Log the outcome of a single deployment attempt"""
    if attempt.succeeded:
        logger.success(f"Contract {attempt.number}/{total} deployed successfully!")
        logger.info(f"📌 Contract Address {attempt.number}: {attempt.contract_address}")
        logger.info(f"📜 Transaction Hash {attempt.number}: {attempt.transaction_hash}")
    else:
        logger.error(f"❌ Deployment {attempt.number}/{total} failed: {attempt.error}")


def print_completion_banner(summary):
    """Print final tally"""
    logger.info("=" * BANNER_WIDTH)
    logger.info("📊 Deployment Summary:")
    logger.info(f"  Attempted: {summary.total}")
    logger.info(f"  Succeeded: {len(summary.succeeded)}")
    logger.info(f"  Failed: {len(summary.failed)}")
    logger.success("✅ All deployments complete! 🎉")
    logger.info("=" * BANNER_WIDTH)
