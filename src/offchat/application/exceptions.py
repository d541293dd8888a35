from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class WalletError(AppError):
    """Base for user-facing wallet failures."""


class WrongPasswordError(WalletError):
    def __init__(self, detail: str = "Wrong password.") -> None:
        super().__init__(detail)


class InvalidMnemonicError(WalletError):
    def __init__(self, detail: str = "Invalid 12 words. Please enter the correct words.") -> None:
        super().__init__(detail)


class WalletUnavailableError(WalletError):
    def __init__(
        self,
        detail: str = "Unable to access wallet. Please refresh the page and try again.",
    ) -> None:
        super().__init__(detail)


class WalletStorageError(WalletError):
    pass


class UnsupportedNetworkError(WalletError):
    pass


class InsufficientBalanceError(WalletError):
    pass


class TransactionFailedError(WalletError):
    pass
