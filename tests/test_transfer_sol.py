import pytest

from tokenrelay.errors import ErrorCode, TokenTransferError
from tokenrelay.state import AccountInfo, LibraryConfig, Pubkey
from tokenrelay.transfer_sol import (
    TransferSolAccounts,
    TransferSolParams,
    transfer_sol,
    validate_accounts,
)

NOW = 1_700_000_000


def make_accounts(source_lamports=10_000, with_fee=True, **config_overrides):
    processor = Pubkey.new_unique()
    config_values = dict(
        authority=Pubkey.new_unique(),
        is_active=True,
        processor_program_id=processor,
        clock=lambda: NOW,
    )
    config_values.update(config_overrides)
    config = LibraryConfig(**config_values)
    return TransferSolAccounts(
        library_config=config,
        processor_program=processor,
        source=AccountInfo(key=Pubkey.new_unique(), lamports=source_lamports, is_signer=True),
        recipient=AccountInfo(key=Pubkey.new_unique(), lamports=0),
        fee_collector=AccountInfo(key=Pubkey.new_unique(), lamports=0) if with_fee else None,
    )


def expect_error(code, accounts, params):
    with pytest.raises(TokenTransferError) as info:
        transfer_sol(accounts, params)
    assert info.value.code is code


def test_transfer_moves_lamports_and_updates_stats():
    accounts = make_accounts()
    transfer_sol(accounts, TransferSolParams(amount=1000, fee_amount=100, memo="hello"))
    assert accounts.source.lamports == 10_000 - 1000 - 100
    assert accounts.recipient.lamports == 1000
    assert accounts.fee_collector.lamports == 100
    config = accounts.library_config
    assert config.transfer_count == 1
    assert config.total_volume == 1000
    assert config.total_fees_collected == 100
    assert config.last_updated == NOW


def test_total_lamports_are_conserved():
    accounts = make_accounts()
    before = accounts.source.lamports + accounts.recipient.lamports + accounts.fee_collector.lamports
    transfer_sol(accounts, TransferSolParams(amount=500, fee_amount=50))
    after = accounts.source.lamports + accounts.recipient.lamports + accounts.fee_collector.lamports
    assert before == after


def test_transfer_without_fee_leaves_collector_untouched():
    accounts = make_accounts()
    transfer_sol(accounts, TransferSolParams(amount=300))
    assert accounts.fee_collector.lamports == 0
    assert accounts.library_config.total_fees_collected == 0
    assert accounts.recipient.lamports == 300


def test_inactive_library_rejected():
    accounts = make_accounts(is_active=False)
    with pytest.raises(TokenTransferError) as info:
        validate_accounts(accounts)
    assert info.value.code is ErrorCode.LIBRARY_INACTIVE


def test_wrong_processor_rejected():
    accounts = make_accounts()
    accounts.processor_program = Pubkey.new_unique()
    expect_error(ErrorCode.INVALID_PROCESSOR_PROGRAM, accounts, TransferSolParams(amount=10))


def test_unset_processor_rejected():
    accounts = make_accounts(processor_program_id=None)
    expect_error(ErrorCode.INVALID_PROCESSOR_PROGRAM, accounts, TransferSolParams(amount=10))


def test_recipient_not_in_allowlist_rejected():
    accounts = make_accounts(enforce_recipient_allowlist=True)
    expect_error(ErrorCode.UNAUTHORIZED_RECIPIENT, accounts, TransferSolParams(amount=10))
    accounts.library_config.allowed_recipients.append(accounts.recipient.key)
    transfer_sol(accounts, TransferSolParams(amount=10))
    assert accounts.recipient.lamports == 10


def test_unsigned_source_rejected():
    accounts = make_accounts()
    accounts.source.is_signer = False
    expect_error(ErrorCode.UNAUTHORIZED_SIGNER, accounts, TransferSolParams(amount=10))


def test_amount_over_limit_rejected():
    accounts = make_accounts(max_transfer_amount=100)
    expect_error(ErrorCode.TRANSFER_AMOUNT_EXCEEDS_LIMIT, accounts, TransferSolParams(amount=101))
    transfer_sol(accounts, TransferSolParams(amount=100))
    assert accounts.recipient.lamports == 100


def test_fee_collector_equal_to_recipient_rejected():
    accounts = make_accounts()
    accounts.fee_collector = AccountInfo(key=accounts.recipient.key)
    expect_error(ErrorCode.ACCOUNT_MISMATCH, accounts, TransferSolParams(amount=10))


def test_fee_without_collector_rejected():
    accounts = make_accounts(with_fee=False)
    expect_error(
        ErrorCode.FEE_COLLECTOR_REQUIRED, accounts, TransferSolParams(amount=1000, fee_amount=1)
    )


def test_fee_limited_to_a_tenth():
    accounts = make_accounts()
    expect_error(
        ErrorCode.FEE_EXCEEDS_LIMIT, accounts, TransferSolParams(amount=1000, fee_amount=101)
    )
    transfer_sol(accounts, TransferSolParams(amount=1000, fee_amount=100))
    assert accounts.fee_collector.lamports == 100


def test_insufficient_balance_rejected_without_changes():
    accounts = make_accounts(source_lamports=1050)
    expect_error(
        ErrorCode.INSUFFICIENT_FUNDS, accounts, TransferSolParams(amount=1000, fee_amount=100)
    )
    assert accounts.source.lamports == 1050
    assert accounts.recipient.lamports == 0
    assert accounts.library_config.transfer_count == 0


def test_negative_amount_rejected():
    accounts = make_accounts()
    expect_error(ErrorCode.INVALID_AMOUNT, accounts, TransferSolParams(amount=-1))