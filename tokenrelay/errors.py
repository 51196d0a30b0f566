"""Error codes raised by the token transfer library."""

from __future__ import annotations

from enum import Enum

ERROR_CODE_OFFSET = 6000
"""Numeric code of the first library error; later codes follow in order."""


class ErrorCode(Enum):
    """Every failure the library can report, valued by its message."""

    UNAUTHORIZED_OPERATION = "The operation requires authority permissions"
    INSUFFICIENT_FUNDS = "Insufficient token balance for transfer"
    DELEGATE_NOT_SET = "The destination account has no delegate set"
    INVALID_DELEGATE = "The delegate does not match the expected delegate"
    INSUFFICIENT_DELEGATED_AMOUNT = "Insufficient delegated token amount for transfer"
    UNAUTHORIZED_MINT = "The mint is not authorized for transfers"
    UNAUTHORIZED_RECIPIENT = "The recipient is not authorized to receive tokens"
    UNAUTHORIZED_SOURCE = "The source account is not authorized to send tokens"
    TRANSFER_AMOUNT_EXCEEDS_LIMIT = "The transfer amount exceeds the maximum allowed"
    INVALID_AMOUNT = "Transfer amount must be greater than zero"
    INVALID_PROCESSOR_PROGRAM = "The processor program does not match the expected program"
    LIBRARY_INACTIVE = "The library is currently inactive"
    MINT_MISMATCH = "The mint of source and destination accounts must match"
    ARITHMETIC_OVERFLOW = "Arithmetic operation overflowed"
    FEE_COLLECTOR_REQUIRED = "A fee collector account is required for fees"
    FEE_EXCEEDS_LIMIT = "The fee exceeds the maximum allowed"
    SLIPPAGE_EXCEEDS_LIMIT = "The slippage exceeds the maximum allowed"
    ACCOUNT_MISMATCH = "Account mismatch"
    OWNER_MISMATCH = "The token account owner does not match the expected owner"
    BATCH_SIZE_EXCEEDED = "The batch transfer contains too many transfers"
    BATCH_TRANSFERS_DISABLED = "Batch transfers are disabled for this library"
    EMPTY_INSTRUCTION_DATA = "The instruction data cannot be empty"
    EMPTY_ALLOWLIST = "The allowlist is empty"
    INVALID_BATCH_SIZE = "Invalid batch size"
    NO_WRITE_PERMISSION = "The account has no write permission"
    CANNOT_CLOSE_ACCOUNT = "The account cannot be closed"
    INVALID_ACCOUNT_DATA = "Invalid account data"
    INVALID_ACCOUNT_OWNER = "The account is not owned by the expected program"
    UNINITIALIZED_ACCOUNT = "The account is not initialized"
    INVALID_INSTRUCTION = "Invalid instruction"
    ACCOUNT_ALREADY_INITIALIZED = "Account already initialized"
    CANNOT_INITIALIZE_ACCOUNT = "Account cannot be initialized"
    ACCOUNT_NOT_INITIALIZED = "Account not initialized"
    OPERATION_NOT_ALLOWED = "Operation not allowed"
    INSUFFICIENT_SOL_BALANCE = "Insufficient SOL balance for transfer"
    INSUFFICIENT_RENT = "Insufficient rent for account"
    RENT_EXEMPT_REQUIRED = "Rent exempt account required"
    INVALID_PROGRAM_ID = "Invalid program ID"
    PROGRAM_ERROR = "Program error"
    SIGNATURE_VERIFICATION_FAILED = "Signature verification failed"
    INVALID_SEED = "Invalid seed"
    INVALID_NONCE = "Invalid nonce"
    EXPIRED_NONCE = "Expired nonce"
    UNAUTHORIZED_SIGNER = "Unauthorized signer"

    @property
    def message(self) -> str:
        return self.value

    @property
    def number(self) -> int:
        """The numeric error code, counted from ``ERROR_CODE_OFFSET``."""
        return _NUMBERS[self]


_NUMBERS = {code: ERROR_CODE_OFFSET + index for index, code in enumerate(ErrorCode)}


class TokenTransferError(Exception):
    """Raised when a library operation is rejected."""

    def __init__(self, code: ErrorCode) -> None:
        if not isinstance(code, ErrorCode):
            raise TypeError(f"expected an ErrorCode, got {type(code).__name__}")
        super().__init__(code.message)
        self.code = code

    @property
    def message(self) -> str:
        return self.code.message

    @property
    def number(self) -> int:
        return self.code.number