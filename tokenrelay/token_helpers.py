"""Token program helpers: program ids, balance transfers and account checks."""

from __future__ import annotations

from typing import Union

from .errors import ErrorCode, TokenTransferError
from .state import U64_MAX, AccountInfo, Pubkey, TokenAccount

TOKEN_2022_PROGRAM_ID = Pubkey.from_base58("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
MEMO_PROGRAM_ID = Pubkey.from_base58("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")
MEMO_V1_PROGRAM_ID = Pubkey.from_base58("Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo")


def get_token_program_id() -> Pubkey:
    """Return the Token-2022 program id."""
    return TOKEN_2022_PROGRAM_ID


def transfer_tokens(
    source: TokenAccount, destination: TokenAccount, authority: Pubkey, amount: int
) -> None:
    """Move ``amount`` tokens from ``source`` to ``destination``.

    ``authority`` must be the source's owner or its delegate; a delegate
    spends from its allowance.
    """
    if amount < 0 or amount > U64_MAX:
        raise TokenTransferError(ErrorCode.INVALID_AMOUNT)
    if source.mint != destination.mint:
        raise TokenTransferError(ErrorCode.MINT_MISMATCH)

    as_delegate = authority != source.owner
    if as_delegate:
        if source.delegate is None or source.delegate != authority:
            raise TokenTransferError(ErrorCode.OWNER_MISMATCH)
        if source.delegated_amount < amount:
            raise TokenTransferError(ErrorCode.INSUFFICIENT_DELEGATED_AMOUNT)

    if source.amount < amount:
        raise TokenTransferError(ErrorCode.INSUFFICIENT_FUNDS)
    if source is not destination and destination.amount + amount > U64_MAX:
        raise TokenTransferError(ErrorCode.ARITHMETIC_OVERFLOW)

    if as_delegate:
        source.delegated_amount -= amount
        if source.delegated_amount == 0:
            source.delegate = None

    source.amount -= amount
    destination.amount += amount


def token_account_exists(account: AccountInfo) -> bool:
    """An account exists when it holds both data and lamports."""
    return account.data_len > 0 and account.lamports > 0


def convert_pubkey(pubkey: Union[Pubkey, bytes, bytearray]) -> Pubkey:
    """Build a Pubkey from another key representation of the same 32 bytes."""
    raw = pubkey.to_bytes() if isinstance(pubkey, Pubkey) else bytes(pubkey)
    return Pubkey(raw)


def is_memo_program(program_id: Pubkey) -> bool:
    """Whether ``program_id`` is either version of the memo program."""
    return program_id in (MEMO_PROGRAM_ID, MEMO_V1_PROGRAM_ID)