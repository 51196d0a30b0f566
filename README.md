# tokenrelay

`tokenrelay` is an in-memory model of a transfer library. The library moves
tokens and native coin between accounts. One `LibraryConfig` decides who may
take part and how much may move. Every transfer is checked against that
configuration before any balance changes.

A failed check raises `tokenrelay.errors.TokenTransferError`. The exception
has these attributes:

- `code`: an `ErrorCode` member naming the rule that failed.
- `message`: the human-readable text.
- `number`: a numeric code. Codes are counted from
  `tokenrelay.errors.ERROR_CODE_OFFSET` (6000), in the order `ErrorCode`
  declares them.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building blocks (`tokenrelay.state`)

- `Pubkey` is a 32-byte account address. You can get one from:
  - `Pubkey.new_unique()`, which returns a different key on each call in the process;
  - `Pubkey.default()`, which is all zeros;
  - `Pubkey.from_base58(text)`.

  `str(key)` gives the key as base58 text, and `to_bytes()` gives the raw bytes.
- `AccountInfo` is a plain account. Its fields are `key`, `lamports`, `data`,
  `owner`, `is_signer`, `is_writable` and `executable`. The `data_len`
  property gives the length of `data`.
- `TokenAccount` is a token account. Its fields are `key`, `mint`, `owner`,
  `amount`, and an optional `delegate` with its `delegated_amount`.
- `LibraryConfig` holds the library's settings:
  - `is_active`;
  - `processor_program_id`;
  - `max_transfer_amount` (0 means no limit);
  - `max_batch_size` (0 disables batches);
  - a recipient allowlist, a source allowlist and a mint allowlist, each of
    which can be switched on or off;
  - `fee_collector`.

  It also keeps running totals: `transfer_count`, `total_volume`,
  `total_fees_collected` and `last_updated`. These totals saturate at the
  64-bit unsigned maximum. The `clock` field gives the unix time used for
  `last_updated`.

  `LibraryConfig.size(recipients, sources, mints)` gives the number of bytes
  of account space that a configuration with allowlists of those lengths
  needs.

## Operations

| Module | Entry point | What it does |
| --- | --- | --- |
| `tokenrelay.initialize` | `initialize(params, clock=None)` | Validates `InitializeParams` and returns a new, active `LibraryConfig`. |
| `tokenrelay.initialize` | `required_space(params)` | Gives the bytes of account space the configuration needs. |
| `tokenrelay.transfer_sol` | `transfer_sol(accounts, params)` | Moves lamports between `AccountInfo`s. An optional fee may be at most 10% of the amount. |
| `tokenrelay.transfer_token` | `transfer_token(accounts, params)` | Moves tokens when the owner of the source signs. An optional fee may be at most 5% of the amount. |
| `tokenrelay.transfer_with_authority` | `transfer_with_authority(accounts, params)` | Moves tokens when the owner or a delegate signs. A delegate spends from its allowance. An optional fee may be at most 5% of the amount. |
| `tokenrelay.batch_transfer` | `batch_transfer(accounts, params, destination_accounts)` | Moves tokens from one source to several destinations. An optional fee may be at most 5% of the total. |

`initialize` rejects the following:

- a `max_batch_size` above 100, with `INVALID_BATCH_SIZE`;
- an allowlist that is switched on but has no list, with `EMPTY_ALLOWLIST`.

Each transfer module also has `validate_accounts(accounts)`, which runs the
account checks that come before the amount checks. All of them check that the
library is active and that the processor program matches the configured one.
On top of that:

- `transfer_sol`:
  - the source must be a signer;
  - the recipient must be allowed.
- `transfer_token`:
  - the authority must own the source;
  - the source and destination mints must equal `mint`;
  - the source, recipient and mint must be allowed.
- `transfer_with_authority`:
  - the source, recipient and mint must be allowed;
  - the destination and `mint` must match the source's mint.
- `batch_transfer`:
  - batches must be enabled;
  - the authority must own the source;
  - the source must be allowed.

  Each destination account is checked during the transfer. Its key must match,
  its mint must match, and it must be an allowed recipient.

The token operations are all or nothing. If any step raises, no balance is
changed and no statistic is recorded. The operations log through the standard
`logging` module. Each logger is named after its module.

## Helpers (`tokenrelay.token_helpers`)

- `get_token_program_id()` returns the Token-2022 program id.
- `transfer_tokens(source, destination, authority, amount)` moves a token
  balance. It checks the mints, the owner or delegate, and the funds.
- `token_account_exists(account)` returns true when the account holds both
  data and lamports.
- `convert_pubkey(pubkey)` builds a `Pubkey` from a `Pubkey` or from 32 raw
  bytes.
- `is_memo_program(program_id)` tells whether the id is either memo program.

## Example

```python
from tokenrelay.errors import ErrorCode, TokenTransferError
from tokenrelay.initialize import InitializeParams, initialize
from tokenrelay.state import Pubkey, TokenAccount
from tokenrelay.transfer_token import TransferTokenAccounts, TransferTokenParams, transfer_token

processor = Pubkey.new_unique()
owner = Pubkey.new_unique()
mint = Pubkey.new_unique()

config = initialize(
    InitializeParams(authority=owner, processor_program_id=processor, max_transfer_amount=1_000)
)
source = TokenAccount(key=Pubkey.new_unique(), mint=mint, owner=owner, amount=500)
destination = TokenAccount(key=Pubkey.new_unique(), mint=mint, owner=Pubkey.new_unique())
accounts = TransferTokenAccounts(config, processor, source, destination, mint, owner)

transfer_token(accounts, TransferTokenParams(amount=200))
print(source.amount, destination.amount)            # 300 200
print(config.transfer_count, config.total_volume)   # 1 200

try:
    transfer_token(accounts, TransferTokenParams(amount=100, fee_amount=5))
except TokenTransferError as error:
    assert error.code is ErrorCode.FEE_COLLECTOR_REQUIRED
```

## What it does not do

All state lives in Python objects that you create and pass in. The package
does not do any of the following:

- send transactions to a network;
- store accounts between runs;
- turn a `LibraryConfig` into bytes (`size` only counts them);
- provide a command-line tool.