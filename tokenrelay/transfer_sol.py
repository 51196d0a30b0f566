"""Native balance transfers between accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ErrorCode, TokenTransferError
from .state import U64_MAX, AccountInfo, LibraryConfig, Pubkey
from .transfer_token import (
    _check_fee,
    _check_funds,
    _in_u64,
    _library_checks,
    _log_memo,
    _record_stats,
    _require,
    _within_limit,
)

logger = logging.getLogger(__name__)

MAX_FEE_DIVISOR = 10
"""A native transfer's fee may be at most a tenth of its amount."""


@dataclass
class TransferSolParams:
    """Amount, optional fee and memo of a native transfer."""

    amount: int
    fee_amount: Optional[int] = None
    memo: Optional[str] = None


@dataclass
class TransferSolAccounts:
    """Accounts taking part in a native transfer."""

    library_config: LibraryConfig
    processor_program: Pubkey
    source: AccountInfo
    recipient: AccountInfo
    fee_collector: Optional[AccountInfo] = None


def validate_accounts(accounts: TransferSolAccounts) -> None:
    """Check the accounts against the library configuration."""
    config = accounts.library_config
    _require([
        (accounts.source.is_signer, ErrorCode.UNAUTHORIZED_SIGNER),
        *_library_checks(config, accounts.processor_program),
        (config.is_recipient_allowed(accounts.recipient.key), ErrorCode.UNAUTHORIZED_RECIPIENT),
    ])


def _move_lamports(source: AccountInfo, destination: AccountInfo, amount: int) -> None:
    if source.lamports < amount:
        raise TokenTransferError(ErrorCode.INSUFFICIENT_FUNDS)
    if source is destination:
        return
    if destination.lamports + amount > U64_MAX:
        raise TokenTransferError(ErrorCode.ARITHMETIC_OVERFLOW)
    source.lamports -= amount
    destination.lamports += amount


def transfer_sol(accounts: TransferSolAccounts, params: TransferSolParams) -> None:
    """Send ``params.amount`` lamports to the recipient, plus an optional fee."""
    validate_accounts(accounts)
    config = accounts.library_config
    amount = params.amount
    fee_amount = params.fee_amount or 0
    fee_collector = accounts.fee_collector

    _require([
        (_in_u64(amount) and _in_u64(fee_amount), ErrorCode.INVALID_AMOUNT),
        (_within_limit(config, amount), ErrorCode.TRANSFER_AMOUNT_EXCEEDS_LIMIT),
        (fee_collector is None or fee_collector.key != accounts.recipient.key,
         ErrorCode.ACCOUNT_MISMATCH),
    ])
    _check_fee(fee_amount, amount, MAX_FEE_DIVISOR, fee_collector)
    _check_funds(amount + fee_amount, accounts.source.lamports)

    _move_lamports(accounts.source, accounts.recipient, amount)
    if fee_amount > 0 and fee_collector is not None:
        _move_lamports(accounts.source, fee_collector, fee_amount)

    _record_stats(config, [amount], fee_amount)
    logger.info(
        "Transferred %d SOL from %s to %s", amount, accounts.source.key, accounts.recipient.key
    )
    _log_memo(logger, params.memo)