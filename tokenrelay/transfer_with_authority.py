"""Token transfers authorised by the owner or a delegate of the source account."""

from __future__ import annotations

from .errors import ErrorCode
from .transfer_token import (
    TransferTokenAccounts,
    TransferTokenParams,
    _execute,
    _library_checks,
    _require,
)


class TransferWithAuthorityParams(TransferTokenParams):
    """Amount, optional fee, slippage tolerance and memo of a delegated transfer."""


class TransferWithAuthorityAccounts(TransferTokenAccounts):
    """Accounts taking part in a delegated token transfer."""


def validate_accounts(accounts: TransferWithAuthorityAccounts) -> None:
    """Check the accounts against the library configuration."""
    config = accounts.library_config
    source = accounts.source_account
    destination = accounts.destination_account
    _require([
        *_library_checks(config, accounts.processor_program),
        (config.is_source_allowed(source.key), ErrorCode.UNAUTHORIZED_SOURCE),
        (destination.mint == source.mint, ErrorCode.MINT_MISMATCH),
        (config.is_recipient_allowed(destination.key), ErrorCode.UNAUTHORIZED_RECIPIENT),
        (accounts.mint == source.mint, ErrorCode.MINT_MISMATCH),
        (config.is_mint_allowed(accounts.mint), ErrorCode.UNAUTHORIZED_MINT),
    ])


def transfer_with_authority(
    accounts: TransferWithAuthorityAccounts, params: TransferWithAuthorityParams
) -> None:
    """Move ``params.amount`` tokens on the authority's say, plus an optional fee.

    A delegate authority spends from its allowance. Either every balance
    change happens or, on error, none does.
    """
    validate_accounts(accounts)
    _execute(accounts, params, "Delegated transfer of %d tokens from %s to %s")