"""Exception hierarchy for the ledger engine and its RPC collaborators."""


class LedgerError(Exception):
    """Base class for all splledger errors."""


class DataFormatError(LedgerError):
    """A raw token amount could not be parsed as an integer."""

    def __init__(self, value: object, field: str = "amount") -> None:
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field} value: {value!r}")


class ExternalServiceError(LedgerError):
    """An upstream service (Solana RPC) answered with an error payload."""


class TransferFetchError(LedgerError):
    """Loading a wallet's transfers failed; message is safe to show to users."""
