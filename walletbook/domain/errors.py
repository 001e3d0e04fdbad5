"""
Finance error taxonomy.

Validation errors are raised before any write. Step failures are raised by
multi-step flows after some writes may already have been applied; nothing is
rolled back.
"""


class FinanceError(Exception):
    """Base class for all walletbook errors"""
    pass


class FinanceValidationError(FinanceError, ValueError):
    """Invalid user input; no write was attempted"""
    pass


class WalletValidationError(FinanceValidationError):
    pass


class CategoryValidationError(FinanceValidationError):
    pass


class TransactionValidationError(FinanceValidationError):
    pass


class TransferValidationError(FinanceValidationError):
    pass


class NotFoundError(FinanceError, LookupError):
    """Requested row does not exist"""
    pass


class WalletConflictError(FinanceError):
    """
    Wallet was changed by someone else between read and write.

    Raised by compare-and-swap balance updates when the stored version no
    longer matches the version that was read.
    """

    def __init__(self, wallet_id: int, expected_version: int):
        super().__init__(
            f"Wallet #{wallet_id} was modified concurrently (expected version {expected_version})"
        )
        self.wallet_id = wallet_id
        self.expected_version = expected_version


class StepFailedError(FinanceError):
    """
    A required step of a multi-step flow failed.

    The remaining steps were skipped. Steps listed in `completed_steps` stay
    applied.
    """

    def __init__(self, flow: str, step: str, completed_steps: list[str], message: str):
        super().__init__(message)
        self.flow = flow
        self.step = step
        self.completed_steps = list(completed_steps)


class TransactionStepError(StepFailedError):
    pass


class TransferStepError(StepFailedError):
    pass
