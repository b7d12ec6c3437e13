"""Banking workflows.

Every workflow here is a client of the engine: it renders through its host,
reacts to the shell's primary action, and delegates to nested workflows where
the procedure requires another one (a loan needs a signature, an account may
need identity verification first).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import auto
from functools import partial
from typing import TYPE_CHECKING, Any

from guided_workflows import BaseWorkflow, WorkflowDefinition
from guided_workflows.core.types import StrEnum

from examples.banking.services import AccountService, KycLevel, KycService, KycStatus, LoanService

if TYPE_CHECKING:
    from guided_workflows import WorkflowResult
    from guided_workflows.core.types import Params

__all__ = [
    "AccountResult",
    "CreateAccountWorkflow",
    "FormWorkflow",
    "KycResult",
    "KycWorkflow",
    "LoanResult",
    "LoanStep",
    "LoanWorkflow",
    "SigningResult",
    "SigningWorkflow",
    "build_definitions",
]

PRODUCT_KYC_LEVELS: dict[str, KycLevel] = {
    "savings": KycLevel.BASIC,
    "checking": KycLevel.STANDARD,
    "investment": KycLevel.ENHANCED,
}


@dataclass(frozen=True)
class SigningResult:
    signature: str


@dataclass(frozen=True)
class LoanResult:
    loan_id: str


@dataclass(frozen=True)
class KycResult:
    level: KycLevel
    verification_status: KycStatus


@dataclass(frozen=True)
class AccountResult:
    account_id: str


class FormWorkflow(BaseWorkflow):
    """Workflow whose current screen is a form filled in through the shell."""

    def __init__(self) -> None:
        self.form: dict[str, Any] = {}

    def provide(self, **values: Any) -> None:
        """Store form input and re-validate the current screen."""
        self.form.update(values)
        self.validate()

    def missing_fields(self) -> list[str]:
        return []

    def validate(self) -> bool:
        missing = self.missing_fields()
        self.notify_validation(not missing, f"Missing: {', '.join(missing)}" if missing else None)
        return not missing


class SigningWorkflow(FormWorkflow):
    """Collects a signature for a document."""

    async def initialize(self, params: Params) -> None:
        self.document = params.get("document", "document")
        self.update_title(f"Sign {self.document}")
        self.update_footer(True, "Sign")
        self.validate()

    def missing_fields(self) -> list[str]:
        return [] if self.form.get("signature") else ["signature"]

    async def handle_primary_action(self) -> None:
        if not self.validate():
            return
        await self.complete(True, SigningResult(signature=self.form["signature"]))


class LoanStep(StrEnum):
    DETAILS = auto()
    REVIEW = auto()
    SIGNING = auto()


class LoanWorkflow(FormWorkflow):
    """Loan application: details, review, then a nested signature before submission.

    Attributes:
        loans: Service receiving the signed application.
        step: Current screen.
        signing_result: Result of the last nested signing, as delivered to ``resume``.
    """

    def __init__(self, loans: LoanService) -> None:
        super().__init__()
        self.loans = loans
        self.step = LoanStep.DETAILS
        self.signing_result: WorkflowResult | None = None

    async def initialize(self, params: Params) -> None:
        self.form.update(params)
        self.set_modal_width("800px")
        self._show_step()

    def missing_fields(self) -> list[str]:
        if self.step is LoanStep.DETAILS:
            return [name for name in ("amount", "term_months") if not self.form.get(name)]
        return []

    def _show_step(self) -> None:
        if self.step is LoanStep.DETAILS:
            self.update_title("Loan application")
            self.update_footer(True, "Continue")
        else:
            self.update_title(f"Review loan of {self.form['amount']} over {self.form['term_months']} months")
            self.update_footer(True, "Sign and submit")
        self.validate()

    async def handle_primary_action(self) -> None:
        if not self.validate():
            return

        if self.step is LoanStep.DETAILS:
            self.step = LoanStep.REVIEW
            self._show_step()
            return

        self.step = LoanStep.SIGNING
        result = await self.run_nested("signing", {"document": "loan agreement"}, expect=SigningResult)
        if not result.success:
            return

        loan_id = self.loans.submit(int(self.form["amount"]), int(self.form["term_months"]), result.data.signature)
        await self.complete(True, LoanResult(loan_id=loan_id))

    async def resume(self, result: WorkflowResult) -> None:
        self.signing_result = result
        if result.success:
            self.update_title("Submitting loan application")
            self.update_footer(False)
            return

        self.step = LoanStep.REVIEW
        self._show_step()
        self.notify_validation(True, result.message)


class KycWorkflow(FormWorkflow):
    """Identity verification up to a target level.

    The levels to verify are computed once in ``initialize`` and walked in
    order within this single workflow, so a level is never skipped even if the
    verified level changes elsewhere while the workflow runs.

    Attributes:
        kyc: Service recording verified levels.
        levels: Levels this run verifies, weakest first.
        position: Index of the level on screen.
    """

    def __init__(self, kyc: KycService) -> None:
        super().__init__()
        self.kyc = kyc
        self.levels: list[KycLevel] = []
        self.position = 0

    @property
    def current_level(self) -> KycLevel | None:
        if self.position < len(self.levels):
            return self.levels[self.position]
        return None

    async def initialize(self, params: Params) -> None:
        target = KycLevel(params.get("level", KycLevel.STANDARD))
        self.form.update(params.get("personal") or {})
        self.levels = self.kyc.levels_between(target)

        if not self.levels:
            await self.complete(True, KycResult(self.kyc.level, self.kyc.status), "Already verified")
            return

        self._show_level()

    def missing_fields(self) -> list[str]:
        level = self.current_level
        return self.kyc.missing_fields(level, self.form) if level else []

    def _show_level(self) -> None:
        last = self.position == len(self.levels) - 1
        self.update_title(f"Verify identity: {self.current_level} ({self.position + 1}/{len(self.levels)})")
        self.update_footer(True, "Submit" if last else "Continue")
        self.validate()

    async def handle_primary_action(self) -> None:
        level = self.current_level
        if level is None or not self.validate():
            return

        status = self.kyc.record_level(level, self.form)
        if status is KycStatus.REJECTED:
            await self.complete(False, KycResult(level, status), f"{level} verification was rejected")
            return

        self.position += 1
        if self.current_level is None:
            await self.complete(True, KycResult(level, status))
            return

        self._show_level()


class CreateAccountWorkflow(FormWorkflow):
    """Opens an account, verifying identity first when the product requires it."""

    def __init__(self, kyc: KycService, accounts: AccountService) -> None:
        super().__init__()
        self.kyc = kyc
        self.accounts = accounts

    async def initialize(self, params: Params) -> None:
        self.form.update(params)
        self.update_title("Open a new account")
        self.update_footer(True, "Open account")
        self.validate()

    def missing_fields(self) -> list[str]:
        return [] if self.form.get("product") in PRODUCT_KYC_LEVELS else ["product"]

    async def handle_primary_action(self) -> None:
        if not self.validate():
            return

        product = self.form["product"]
        required = PRODUCT_KYC_LEVELS[product]
        if not self.kyc.has_level(required):
            personal = {key: value for key, value in self.form.items() if key != "product"}
            result = await self.run_nested("kyc", {"level": required, "personal": personal}, expect=KycResult)
            if not result.success:
                self.notify_validation(True, result.message or "Identity verification is required")
                return

        account_id = self.accounts.open(product)
        await self.complete(True, AccountResult(account_id=account_id), f"{product} account opened")


def build_definitions(kyc: KycService, loans: LoanService, accounts: AccountService) -> list[WorkflowDefinition]:
    """Build the banking catalog around a set of services.

    Args:
        kyc: KYC service shared by the KYC and account workflows.
        loans: Loan service.
        accounts: Account service.

    Returns:
        Definitions for signing, loan, kyc and create-account.
    """
    return [
        WorkflowDefinition(
            id="signing",
            name="Sign Document",
            description="Sign documents or transactions",
            load="examples.banking.workflows:SigningWorkflow",
            icon="pen",
            result_type=SigningResult,
        ),
        WorkflowDefinition(
            id="loan",
            name="Apply for a Loan",
            description="Apply for a personal loan",
            load=lambda: partial(LoanWorkflow, loans),
            icon="bank",
            searchable=True,
            popular=True,
            keywords=("loan", "credit", "borrow"),
            result_type=LoanResult,
        ),
        WorkflowDefinition(
            id="kyc",
            name="Verify Identity",
            description="Complete identity verification",
            load=lambda: partial(KycWorkflow, kyc),
            icon="id-card",
            searchable=True,
            keywords=("kyc", "identity", "verification"),
            search_disabled_condition=lambda: kyc.level is KycLevel.ENHANCED,
            result_type=KycResult,
        ),
        WorkflowDefinition(
            id="create-account",
            name="Open Account",
            description="Open a new savings, checking or investment account",
            load=lambda: partial(CreateAccountWorkflow, kyc, accounts),
            icon="wallet",
            searchable=True,
            popular=True,
            keywords=("account", "open", "savings", "checking"),
            result_type=AccountResult,
        ),
    ]
