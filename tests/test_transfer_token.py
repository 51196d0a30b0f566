import logging

import pytest

from tokenrelay.errors import ErrorCode, TokenTransferError
from tokenrelay.state import U64_MAX, LibraryConfig, Pubkey, TokenAccount
from tokenrelay.transfer_token import (
    TransferTokenAccounts,
    TransferTokenParams,
    transfer_token,
    validate_accounts,
)

NOW = 1_700_000_000
START = 1_000_000


def _setup(fee=False, **config_overrides):
    processor = Pubkey.new_unique()
    mint = Pubkey.new_unique()
    owner = Pubkey.new_unique()
    config = LibraryConfig(
        is_active=True, processor_program_id=processor, clock=lambda: NOW, **config_overrides
    )

    def account(key_owner, amount=0):
        return TokenAccount(key=Pubkey.new_unique(), mint=mint, owner=key_owner, amount=amount)

    return TransferTokenAccounts(
        library_config=config,
        processor_program=processor,
        source_account=account(owner, START),
        destination_account=account(Pubkey.new_unique()),
        mint=mint,
        authority=owner,
        fee_collector=account(Pubkey.new_unique()) if fee else None,
    )


def _expect(code, accounts, params):
    with pytest.raises(TokenTransferError) as info:
        transfer_token(accounts, params)
    assert info.value.code is code
    assert accounts.source_account.amount == START
    assert accounts.destination_account.amount == 0
    assert accounts.library_config.transfer_count == 0


def _keep(accounts):
    return None


def test_successful_transfer_moves_balance_and_updates_stats():
    accounts = _setup()
    transfer_token(accounts, TransferTokenParams(amount=5000))
    assert accounts.destination_account.amount == 5000
    assert accounts.source_account.amount + accounts.destination_account.amount == START
    config = accounts.library_config
    assert config.transfer_count == 1
    assert config.total_volume == 5000
    assert config.total_fees_collected == 0
    assert config.last_updated == NOW


def test_transfer_with_fee_pays_collector():
    accounts = _setup(fee=True)
    transfer_token(accounts, TransferTokenParams(amount=2000, fee_amount=100))
    assert accounts.fee_collector.amount == 100
    assert accounts.destination_account.amount == 2000
    total = (
        accounts.source_account.amount
        + accounts.destination_account.amount
        + accounts.fee_collector.amount
    )
    assert total == START
    assert accounts.library_config.total_fees_collected == 100


@pytest.mark.parametrize(
    "setup_kwargs, mutate, amount, fee_amount, code",
    [
        ({"fee": True}, _keep, 2000, 101, ErrorCode.FEE_EXCEEDS_LIMIT),
        ({}, _keep, 0, None, ErrorCode.INVALID_AMOUNT),
        ({"max_transfer_amount": 500}, _keep, 501, None, ErrorCode.TRANSFER_AMOUNT_EXCEEDS_LIMIT),
        ({}, _keep, 2000, 1, ErrorCode.FEE_COLLECTOR_REQUIRED),
        ({}, _keep, START + 1, None, ErrorCode.INSUFFICIENT_FUNDS),
        ({}, lambda a: setattr(a.library_config, "is_active", False), 10, None,
         ErrorCode.LIBRARY_INACTIVE),
        ({}, lambda a: setattr(a, "authority", Pubkey.new_unique()), 10, None,
         ErrorCode.OWNER_MISMATCH),
        ({}, lambda a: setattr(a.destination_account, "mint", Pubkey.new_unique()), 10, None,
         ErrorCode.MINT_MISMATCH),
        ({}, lambda a: setattr(a, "mint", Pubkey.new_unique()), 10, None,
         ErrorCode.MINT_MISMATCH),
        ({"enforce_source_allowlist": True}, _keep, 10, None, ErrorCode.UNAUTHORIZED_SOURCE),
        ({"enforce_recipient_allowlist": True}, _keep, 10, None,
         ErrorCode.UNAUTHORIZED_RECIPIENT),
        ({"enforce_mint_allowlist": True}, _keep, 10, None, ErrorCode.UNAUTHORIZED_MINT),
        ({"fee": True}, lambda a: setattr(a.fee_collector, "mint", Pubkey.new_unique()), 2000, 50,
         ErrorCode.MINT_MISMATCH),
    ],
)
def test_rejected_transfers_change_nothing(setup_kwargs, mutate, amount, fee_amount, code):
    accounts = _setup(**setup_kwargs)
    mutate(accounts)
    _expect(code, accounts, TransferTokenParams(amount=amount, fee_amount=fee_amount))


def test_amount_at_limit_is_accepted():
    accounts = _setup(max_transfer_amount=500)
    transfer_token(accounts, TransferTokenParams(amount=500))
    assert accounts.destination_account.amount == 500


def test_allowed_mint_is_accepted():
    accounts = _setup(enforce_mint_allowlist=True)
    accounts.library_config.allowed_mints.append(accounts.mint)
    transfer_token(accounts, TransferTokenParams(amount=10))
    assert accounts.destination_account.amount == 10


def test_total_overflow_is_rejected():
    accounts = _setup(fee=True)
    accounts.source_account.amount = U64_MAX
    params = TransferTokenParams(amount=U64_MAX, fee_amount=U64_MAX // 20)
    with pytest.raises(TokenTransferError) as info:
        transfer_token(accounts, params)
    assert info.value.code is ErrorCode.ARITHMETIC_OVERFLOW
    assert accounts.source_account.amount == U64_MAX


@pytest.mark.parametrize("processor", [None, "other"])
def test_wrong_processor_is_rejected(processor):
    accounts = _setup()
    accounts.library_config.processor_program_id = (
        None if processor is None else Pubkey.new_unique()
    )
    with pytest.raises(TokenTransferError) as info:
        validate_accounts(accounts)
    assert info.value.code is ErrorCode.INVALID_PROCESSOR_PROGRAM


def test_memo_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="tokenrelay.transfer_token")
    accounts = _setup()
    transfer_token(accounts, TransferTokenParams(amount=10, memo="hello"))
    assert "Memo: hello" in caplog.text