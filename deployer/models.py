"""
Deployment Models
Compiled artifact, per-attempt records and the run summary
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AttemptStatus(str, Enum):
    """Status of a deployment attempt"""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class DeploymentRequest:
    """Compiled contract, produced once and reused for every attempt"""

    contract_name: str
    abi: list
    bytecode: str


@dataclass(frozen=True)
class DeploymentReceipt:
    """Confirmed contract creation"""

    contract_address: str
    transaction_hash: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None


@dataclass
class DeploymentAttempt:
    """One submit-and-confirm cycle"""

    index: int
    status: AttemptStatus = AttemptStatus.PENDING
    contract_address: Optional[str] = None
    transaction_hash: Optional[str] = None
    error: Optional[str] = None

    @property
    def number(self) -> int:
        """1-based index for display"""
        return self.index + 1

    @property
    def succeeded(self) -> bool:
        return self.status == AttemptStatus.SUCCEEDED

    def mark_succeeded(self, receipt: DeploymentReceipt):
        self.status = AttemptStatus.SUCCEEDED
        self.contract_address = receipt.contract_address
        self.transaction_hash = receipt.transaction_hash

    def mark_failed(self, error: Exception):
        self.status = AttemptStatus.FAILED
        self.error = str(error) or error.__class__.__name__


@dataclass
class DeploymentSummary:
    """Outcome of a whole run"""

    attempts: List[DeploymentAttempt] = field(default_factory=list)

    @property
    def succeeded(self) -> List[DeploymentAttempt]:
        return [a for a in self.attempts if a.status == AttemptStatus.SUCCEEDED]

    @property
    def failed(self) -> List[DeploymentAttempt]:
        return [a for a in self.attempts if a.status == AttemptStatus.FAILED]

    @property
    def total(self) -> int:
        return len(self.attempts)
