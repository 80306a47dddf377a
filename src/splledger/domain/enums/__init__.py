from splledger.domain.enums.direction import TransferDirection

__all__ = [
    "TransferDirection",
]
