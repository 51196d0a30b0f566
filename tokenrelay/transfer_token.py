"""Token transfers authorised by the source account's owner."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import ErrorCode, TokenTransferError
from .state import U64_MAX, LibraryConfig, Pubkey, TokenAccount
from .token_helpers import transfer_tokens

logger = logging.getLogger(__name__)

MAX_FEE_DIVISOR = 20
"""A token transfer's fee may be at most a twentieth (5%) of its amount."""

Check = Tuple[bool, ErrorCode]


@dataclass
class TransferTokenParams:
    """Amount, optional fee, slippage tolerance and memo of a token transfer."""

    amount: int
    fee_amount: Optional[int] = None
    slippage_bps: Optional[int] = None
    memo: Optional[str] = None


@dataclass
class TransferTokenAccounts:
    """Accounts taking part in an owner-signed token transfer."""

    library_config: LibraryConfig
    processor_program: Pubkey
    source_account: TokenAccount
    destination_account: TokenAccount
    mint: Pubkey
    authority: Pubkey
    fee_collector: Optional[TokenAccount] = None


def _require(checks: Iterable[Check]) -> None:
    """Raise the error of the first check that does not hold."""
    for ok, code in checks:
        if not ok:
            raise TokenTransferError(code)


def _in_u64(value: int) -> bool:
    return 0 <= value <= U64_MAX


def _within_limit(config: LibraryConfig, amount: int) -> bool:
    return config.max_transfer_amount == 0 or amount <= config.max_transfer_amount


def _library_checks(config: LibraryConfig, processor_program: Pubkey) -> List[Check]:
    return [
        (config.is_active, ErrorCode.LIBRARY_INACTIVE),
        (config.processor_program_id == processor_program, ErrorCode.INVALID_PROCESSOR_PROGRAM),
    ]


def _check_fee(fee_amount: int, base: int, divisor: int, fee_collector: object) -> None:
    if fee_amount > 0:
        _require([
            (fee_collector is not None, ErrorCode.FEE_COLLECTOR_REQUIRED),
            (fee_amount <= base // divisor, ErrorCode.FEE_EXCEEDS_LIMIT),
        ])


def _check_funds(total: int, available: int) -> None:
    _require([
        (total <= U64_MAX, ErrorCode.ARITHMETIC_OVERFLOW),
        (available >= total, ErrorCode.INSUFFICIENT_FUNDS),
    ])


def _record_stats(config: LibraryConfig, amounts: Iterable[int], fee_amount: int) -> None:
    for amount in amounts:
        config.increment_transfer_count()
        config.add_volume(amount)
    if fee_amount > 0:
        config.add_fees_collected(fee_amount)
    config.last_updated = config.clock()


def _log_memo(log: logging.Logger, memo: Optional[str]) -> None:
    if memo is not None:
        log.info("Memo: %s", memo)


@contextmanager
def _all_or_nothing(*accounts: Optional[TokenAccount]) -> Iterator[None]:
    """Restore the balances of ``accounts`` if the block raises."""
    saved = [
        (account, account.amount, account.delegate, account.delegated_amount)
        for account in accounts
        if account is not None
    ]
    try:
        yield
    except BaseException:
        for account, amount, delegate, delegated_amount in reversed(saved):
            account.amount = amount
            account.delegate = delegate
            account.delegated_amount = delegated_amount
        raise


def _check_amounts(config: LibraryConfig, amount: int, fee_amount: int,
                   fee_collector: Optional[TokenAccount], source: TokenAccount) -> None:
    _require([
        (amount > 0 and _in_u64(amount) and _in_u64(fee_amount), ErrorCode.INVALID_AMOUNT),
        (_within_limit(config, amount), ErrorCode.TRANSFER_AMOUNT_EXCEEDS_LIMIT),
    ])
    _check_fee(fee_amount, amount, MAX_FEE_DIVISOR, fee_collector)
    _check_funds(amount + fee_amount, source.amount)


def _collect_fee(source: TokenAccount, fee_collector: Optional[TokenAccount],
                 authority: Pubkey, fee_amount: int, mint: Pubkey) -> None:
    if fee_amount > 0 and fee_collector is not None:
        _require([(fee_collector.mint == mint, ErrorCode.MINT_MISMATCH)])
        transfer_tokens(source, fee_collector, authority, fee_amount)


def _execute(accounts: TransferTokenAccounts, params: TransferTokenParams, message: str) -> None:
    """Run a validated single transfer and its fee, then record it."""
    config = accounts.library_config
    source = accounts.source_account
    destination = accounts.destination_account
    fee_collector = accounts.fee_collector
    amount = params.amount
    fee_amount = params.fee_amount or 0

    _check_amounts(config, amount, fee_amount, fee_collector, source)

    with _all_or_nothing(source, destination, fee_collector):
        transfer_tokens(source, destination, accounts.authority, amount)
        _collect_fee(source, fee_collector, accounts.authority, fee_amount, accounts.mint)

    _record_stats(config, [amount], fee_amount)
    logger.info(message, amount, source.key, destination.key)
    _log_memo(logger, params.memo)


def validate_accounts(accounts: TransferTokenAccounts) -> None:
    """Check the accounts against the library configuration."""
    config = accounts.library_config
    source = accounts.source_account
    _require([
        *_library_checks(config, accounts.processor_program),
        (source.owner == accounts.authority, ErrorCode.OWNER_MISMATCH),
        (source.mint == accounts.mint, ErrorCode.MINT_MISMATCH),
        (accounts.destination_account.mint == accounts.mint, ErrorCode.MINT_MISMATCH),
        (config.is_source_allowed(source.key), ErrorCode.UNAUTHORIZED_SOURCE),
        (config.is_recipient_allowed(accounts.destination_account.key),
         ErrorCode.UNAUTHORIZED_RECIPIENT),
        (config.is_mint_allowed(accounts.mint), ErrorCode.UNAUTHORIZED_MINT),
    ])


def transfer_token(accounts: TransferTokenAccounts, params: TransferTokenParams) -> None:
    """Move ``params.amount`` tokens to the destination, plus an optional fee.

    Either every balance change happens or, on error, none does.
    """
    validate_accounts(accounts)
    _execute(accounts, params, "Transferred %d tokens from %s to %s")