"""
Errors raised by the economy services.

Every error raised inside a ledger unit of work aborts and rolls back that
unit. Views translate ``LedgerError`` subclasses into responses using
``status_code`` and ``code``.
"""


class LedgerError(Exception):
    status_code = 400
    code = "ledger_error"
    default_message = "Ledger operation failed."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    def as_dict(self):
        return {"error": str(self), "code": self.code}


class LedgerEntryImmutable(LedgerError):
    code = "ledger_entry_immutable"
    default_message = "Ledger entries are append-only."


class InvalidAmount(LedgerError):
    code = "invalid_amount"

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}.")


class InvalidPaidAmount(InvalidAmount):
    code = "invalid_paid_amount"

    def __init__(self, amount):
        self.amount = amount
        LedgerError.__init__(
            self, f"Paid amount must be a non-negative decimal, got {amount!r}."
        )


class NotFound(LedgerError):
    status_code = 404
    code = "not_found"


class UserNotFound(NotFound):
    code = "user_not_found"

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found.")


class WalletNotFound(NotFound):
    code = "wallet_not_found"

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"Wallet for user {user_id} not found.")


class SenderNotFound(NotFound):
    code = "sender_not_found"

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"Sender {user_id} not found or inactive.")


class RecipientNotFound(NotFound):
    code = "recipient_not_found"

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"Recipient {user_id} not found or inactive.")


class ContentNotFound(NotFound):
    code = "content_not_found"

    def __init__(self, content_id):
        self.content_id = content_id
        super().__init__(f"Content {content_id} not found or inactive.")


class RequestNotFound(NotFound):
    code = "request_not_found"

    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__(f"Purchase request {request_id} not found.")


class InsufficientFunds(LedgerError):
    status_code = 402
    code = "insufficient_funds"

    def __init__(self, current, required):
        self.current = current
        self.required = required
        super().__init__(
            f"Insufficient balance: have {current} coins, need {required} coins."
        )

    def as_dict(self):
        data = super().as_dict()
        data.update({"balance": self.current, "required": self.required})
        return data


class SelfTransferDenied(LedgerError):
    code = "self_transfer_denied"
    default_message = "Cannot send a gift to yourself."


class InvalidGift(LedgerError):
    code = "invalid_gift"


class ContentNotPremium(LedgerError):
    code = "content_not_premium"

    def __init__(self, content_id):
        self.content_id = content_id
        super().__init__(f"Content {content_id} is free and does not need unlocking.")


class AlreadyUnlocked(LedgerError):
    """Signals a no-op unlock. Callers show "already owned", not a failure."""

    status_code = 200
    code = "already_unlocked"

    def __init__(self, content_id, balance):
        self.content_id = content_id
        self.balance = balance
        super().__init__(f"Content {content_id} is already unlocked.")


class AlreadyProcessed(LedgerError):
    status_code = 409
    code = "already_processed"

    def __init__(self, request_id, status):
        self.request_id = request_id
        self.status = status
        super().__init__(f"Purchase request {request_id} is already {status}.")


class TransientError(LedgerError):
    """Timeout or lock contention. Nothing was applied; safe to retry."""

    status_code = 503
    code = "transient"
    default_message = "The ledger is busy, please retry."


class InvalidPackage(LedgerError):
    code = "invalid_package"


class TransferNotFound(NotFound):
    code = "transfer_not_found"

    def __init__(self, transfer_id):
        self.transfer_id = transfer_id
        super().__init__(f"Gift transfer {transfer_id} not found.")
