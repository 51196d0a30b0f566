"""Token transfers from one source account to several destinations at once."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .errors import ErrorCode
from .state import U64_MAX, LibraryConfig, Pubkey, TokenAccount
from .token_helpers import transfer_tokens
from .transfer_token import (
    MAX_FEE_DIVISOR,
    _all_or_nothing,
    _check_fee,
    _check_funds,
    _collect_fee,
    _in_u64,
    _library_checks,
    _log_memo,
    _record_stats,
    _require,
    _within_limit,
)

logger = logging.getLogger(__name__)


@dataclass
class TransferDestination:
    """One leg of a batch: where tokens go, how many, and an optional memo."""

    destination: Pubkey
    amount: int
    memo: Optional[str] = None


@dataclass
class BatchTransferParams:
    """The legs of a batch transfer and an optional fee for the whole batch."""

    destinations: List[TransferDestination] = field(default_factory=list)
    fee_amount: Optional[int] = None


@dataclass
class BatchTransferAccounts:
    """Accounts shared by every leg of a batch transfer."""

    library_config: LibraryConfig
    processor_program: Pubkey
    source_account: TokenAccount
    authority: Pubkey
    fee_collector: Optional[TokenAccount] = None


def validate_accounts(accounts: BatchTransferAccounts) -> None:
    """Check the shared accounts against the library configuration."""
    config = accounts.library_config
    source = accounts.source_account
    _require([
        *_library_checks(config, accounts.processor_program),
        (config.max_batch_size != 0, ErrorCode.BATCH_TRANSFERS_DISABLED),
        (source.owner == accounts.authority, ErrorCode.OWNER_MISMATCH),
        (config.is_source_allowed(source.key), ErrorCode.UNAUTHORIZED_SOURCE),
    ])


def _total_amount(config: LibraryConfig, destinations: Sequence[TransferDestination]) -> int:
    total = 0
    for dest in destinations:
        _require([
            (0 < dest.amount <= U64_MAX, ErrorCode.INVALID_AMOUNT),
            (_within_limit(config, dest.amount), ErrorCode.TRANSFER_AMOUNT_EXCEEDS_LIMIT),
        ])
        total += dest.amount
        _require([(total <= U64_MAX, ErrorCode.ARITHMETIC_OVERFLOW)])
    return total


def batch_transfer(
    accounts: BatchTransferAccounts,
    params: BatchTransferParams,
    destination_accounts: Sequence[TokenAccount],
) -> None:
    """Send each destination its amount from the source, plus an optional fee.

    ``destination_accounts`` are given in the same order as
    ``params.destinations``. Either the whole batch happens or, on error,
    no balance or statistic changes.
    """
    validate_accounts(accounts)
    config = accounts.library_config
    source = accounts.source_account
    fee_collector = accounts.fee_collector
    destinations = params.destinations
    fee_amount = params.fee_amount or 0

    _require([
        (_in_u64(fee_amount), ErrorCode.INVALID_AMOUNT),
        (len(destinations) <= config.max_batch_size, ErrorCode.BATCH_SIZE_EXCEEDED),
        (len(destinations) == len(destination_accounts), ErrorCode.ACCOUNT_MISMATCH),
    ])

    total_amount = _total_amount(config, destinations)
    _check_fee(fee_amount, total_amount, MAX_FEE_DIVISOR, fee_collector)
    _check_funds(total_amount + fee_amount, source.amount)

    with _all_or_nothing(source, fee_collector, *destination_accounts):
        for dest, account in zip(destinations, destination_accounts):
            _require([
                (account.key == dest.destination, ErrorCode.ACCOUNT_MISMATCH),
                (account.mint == source.mint, ErrorCode.MINT_MISMATCH),
                (config.is_recipient_allowed(account.key), ErrorCode.UNAUTHORIZED_RECIPIENT),
            ])
            transfer_tokens(source, account, accounts.authority, dest.amount)
            logger.info("Transferred %d tokens to %s", dest.amount, dest.destination)
            _log_memo(logger, dest.memo)
        _collect_fee(source, fee_collector, accounts.authority, fee_amount, source.mint)

    _record_stats(config, [dest.amount for dest in destinations], fee_amount)
    if fee_amount > 0:
        logger.info("Fee of %d tokens collected", fee_amount)
    logger.info("Batch transfer completed with %d destinations", len(destinations))