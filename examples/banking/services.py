"""In-memory domain services used by the banking workflows.

These stand in for the real account, KYC and loan backends; they keep their
state in memory for the lifetime of the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import auto
from typing import Any

from guided_workflows.core.types import StrEnum

__all__ = [
    "KYC_LEVEL_ORDER",
    "KYC_REQUIREMENTS",
    "AccountService",
    "KycLevel",
    "KycService",
    "KycStatus",
    "LoanService",
]

logger = logging.getLogger(__name__)


class KycLevel(StrEnum):
    """Identity verification levels, weakest first."""

    NONE = auto()
    BASIC = auto()
    STANDARD = auto()
    ENHANCED = auto()


class KycStatus(StrEnum):
    """Outcome of a verification submission."""

    NONE = auto()
    PENDING = auto()
    APPROVED = auto()
    REJECTED = auto()


KYC_LEVEL_ORDER: tuple[KycLevel, ...] = (KycLevel.NONE, KycLevel.BASIC, KycLevel.STANDARD, KycLevel.ENHANCED)

KYC_REQUIREMENTS: dict[KycLevel, tuple[str, ...]] = {
    KycLevel.BASIC: ("full_name", "date_of_birth"),
    KycLevel.STANDARD: ("address",),
    KycLevel.ENHANCED: ("document_number",),
}


@dataclass
class KycService:
    """Tracks the verified KYC level of the current user.

    Attributes:
        level: Highest level verified so far.
        status: Status of the latest submission.
        personal: Personal information collected across all levels.
        rejected_documents: Document numbers that are always rejected.
    """

    level: KycLevel = KycLevel.NONE
    status: KycStatus = KycStatus.NONE
    personal: dict[str, Any] = field(default_factory=dict)
    rejected_documents: set[str] = field(default_factory=set)

    def has_level(self, required: KycLevel) -> bool:
        return KYC_LEVEL_ORDER.index(self.level) >= KYC_LEVEL_ORDER.index(required)

    def levels_between(self, target: KycLevel) -> list[KycLevel]:
        """Return the levels still to verify to reach ``target``, in order."""
        start = KYC_LEVEL_ORDER.index(self.level) + 1
        stop = KYC_LEVEL_ORDER.index(target) + 1
        return list(KYC_LEVEL_ORDER[start:stop])

    def missing_fields(self, level: KycLevel, values: dict[str, Any]) -> list[str]:
        return [name for name in KYC_REQUIREMENTS.get(level, ()) if not values.get(name)]

    def record_level(self, level: KycLevel, values: dict[str, Any]) -> KycStatus:
        """Submit the information for one level.

        Args:
            level: The level being verified. Must directly follow the current level.
            values: Personal information collected so far.

        Returns:
            The verification status of the submission.

        Raises:
            ValueError: If ``level`` would skip a level.
        """
        expected = KYC_LEVEL_ORDER[KYC_LEVEL_ORDER.index(self.level) + 1]
        if level is not expected:
            msg = f"Cannot verify {level} before {expected}"
            raise ValueError(msg)

        self.personal.update(values)
        if values.get("document_number") in self.rejected_documents:
            self.status = KycStatus.REJECTED
        else:
            self.level = level
            self.status = KycStatus.APPROVED

        logger.info("KYC level %s submitted: %s", level, self.status)
        return self.status


@dataclass
class LoanService:
    """Accepts signed loan applications."""

    applications: dict[str, dict[str, Any]] = field(default_factory=dict)

    def submit(self, amount: int, term_months: int, signature: str) -> str:
        loan_id = f"L{len(self.applications) + 1}"
        self.applications[loan_id] = {"amount": amount, "term_months": term_months, "signature": signature}
        logger.info("Loan application %s submitted for %s over %d months", loan_id, amount, term_months)
        return loan_id


@dataclass
class AccountService:
    """Opens accounts for products."""

    accounts: dict[str, str] = field(default_factory=dict)

    def open(self, product: str) -> str:
        account_id = f"A{len(self.accounts) + 1}"
        self.accounts[account_id] = product
        logger.info("Opened %s account %s", product, account_id)
        return account_id
