# partnerhub/modules/wallet/exceptions.py
# Domain-specific exceptions for the Wallet module

class WalletError(Exception):
    """Base exception for wallet module errors."""
    pass

class PayableNotFoundError(WalletError):
    def __init__(self, payable_id: str):
        super().__init__("Payable record not found.")
        self.payable_id = payable_id

class ReceivableNotFoundError(WalletError):
    def __init__(self, receivable_id: str):
        super().__init__("Receivable record not found.")
        self.receivable_id = receivable_id

class WalletSummaryNotFoundError(WalletError):
    def __init__(self):
        super().__init__("Wallet summary not found.")

class InsufficientWalletBalanceError(WalletError):
    def __init__(self, balance: float, amount: float):
        super().__init__(f"Insufficient wallet balance. Balance: {balance}, Required: {amount}.")
        self.balance = balance
        self.amount = amount

class ReceivableNotPendingError(WalletError):
    def __init__(self, receivable_id: str):
        super().__init__("This payment is not pending.")
        self.receivable_id = receivable_id

class CollectionExceedsPendingError(WalletError):
    def __init__(self, amount: float, pending: float):
        super().__init__(f"Collected amount cannot be greater than the pending amount ({pending}).")
        self.amount = amount
        self.pending = pending

class LedgerEntrySettledError(WalletError):
    """A Paid payable or Received receivable cannot go back to Pending."""
    def __init__(self, entry_type: str, entry_id: str, status: str):
        super().__init__(f"This {entry_type} is already {status} and cannot be reset to Pending.")
        self.entry_type = entry_type
        self.entry_id = entry_id
        self.status = status
