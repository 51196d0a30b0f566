"""Account and configuration state for the token transfer library."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, ClassVar, List, Optional

PUBKEY_BYTES = 32
U64_MAX = 2**64 - 1

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_INDEX = {char: index for index, char in enumerate(_ALPHABET)}
_unique_counter = itertools.count(1)


def _b58encode(raw: bytes) -> str:
    number = int.from_bytes(raw, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_ALPHABET[remainder])
    leading = len(raw) - len(raw.lstrip(b"\0"))
    return "1" * leading + "".join(reversed(digits))


def _b58decode(text: str) -> bytes:
    number = 0
    for char in text:
        try:
            number = number * 58 + _ALPHABET_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    leading = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\0" * leading + body


@dataclass(frozen=True)
class Pubkey:
    """A 32-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) != PUBKEY_BYTES:
            raise ValueError(f"a public key is {PUBKEY_BYTES} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_base58(cls, text: str) -> "Pubkey":
        return cls(_b58decode(text))

    @classmethod
    def new_unique(cls) -> "Pubkey":
        """Return a key not returned by any earlier call in this process."""
        counter = next(_unique_counter)
        return cls(counter.to_bytes(8, "big") + bytes(PUBKEY_BYTES - 8))

    @classmethod
    def default(cls) -> "Pubkey":
        return cls(bytes(PUBKEY_BYTES))

    def to_bytes(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return _b58encode(self.raw)

    def __repr__(self) -> str:
        return f"Pubkey({str(self)!r})"


@dataclass
class AccountInfo:
    """A raw account: its balance, data and owning program."""

    key: Pubkey
    lamports: int = 0
    data: bytes = b""
    owner: Pubkey = field(default_factory=Pubkey.default)
    is_signer: bool = False
    is_writable: bool = False
    executable: bool = False

    @property
    def data_len(self) -> int:
        return len(self.data)


@dataclass
class TokenAccount:
    """A token account holding a balance of one mint."""

    key: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int = 0
    delegate: Optional[Pubkey] = None
    delegated_amount: int = 0


def _unix_now() -> int:
    return int(time.time())


@dataclass
class LibraryConfig:
    """Configuration and running statistics of the transfer library."""

    BASE_SIZE: ClassVar[int] = (
        8  # discriminator
        + 32  # authority
        + 1  # is_active
        + 1 + 32  # processor_program_id
        + 8  # max_transfer_amount
        + 1  # max_batch_size
        + 1  # enforce_recipient_allowlist
        + 4  # allowed_recipients length
        + 1  # enforce_source_allowlist
        + 4  # allowed_sources length
        + 1  # enforce_mint_allowlist
        + 4  # allowed_mints length
        + 1  # validate_account_ownership
        + 1  # enable_slippage_protection
        + 2  # default_slippage_bps
        + 2  # fee_bps
        + 1 + 32  # fee_collector
        + 8  # transfer_count
        + 8  # total_volume
        + 8  # total_fees_collected
        + 8  # last_updated
        + 64  # reserved
    )

    authority: Pubkey = field(default_factory=Pubkey.default)
    is_active: bool = False
    processor_program_id: Optional[Pubkey] = None
    max_transfer_amount: int = 0
    max_batch_size: int = 0
    enforce_recipient_allowlist: bool = False
    allowed_recipients: List[Pubkey] = field(default_factory=list)
    enforce_source_allowlist: bool = False
    allowed_sources: List[Pubkey] = field(default_factory=list)
    enforce_mint_allowlist: bool = False
    allowed_mints: List[Pubkey] = field(default_factory=list)
    validate_account_ownership: bool = False
    enable_slippage_protection: bool = False
    default_slippage_bps: int = 0
    fee_bps: int = 0
    fee_collector: Optional[Pubkey] = None
    transfer_count: int = 0
    total_volume: int = 0
    total_fees_collected: int = 0
    last_updated: int = 0
    reserved: bytes = bytes(64)
    clock: Callable[[], int] = field(default=_unix_now, repr=False, compare=False)

    @staticmethod
    def size(allowed_recipients_len: int, allowed_sources_len: int, allowed_mints_len: int) -> int:
        """Bytes of account space needed for allowlists of the given lengths."""
        return LibraryConfig.BASE_SIZE + PUBKEY_BYTES * (
            allowed_recipients_len + allowed_sources_len + allowed_mints_len
        )

    def _touch(self) -> None:
        self.last_updated = self.clock()

    def increment_transfer_count(self) -> None:
        self.transfer_count = min(self.transfer_count + 1, U64_MAX)
        self._touch()

    def add_volume(self, amount: int) -> None:
        self.total_volume = min(self.total_volume + amount, U64_MAX)
        self._touch()

    def add_fees_collected(self, amount: int) -> None:
        self.total_fees_collected = min(self.total_fees_collected + amount, U64_MAX)
        self._touch()

    def is_recipient_allowed(self, recipient: Pubkey) -> bool:
        return not self.enforce_recipient_allowlist or recipient in self.allowed_recipients

    def is_source_allowed(self, source: Pubkey) -> bool:
        return not self.enforce_source_allowlist or source in self.allowed_sources

    def is_mint_allowed(self, mint: Pubkey) -> bool:
        return not self.enforce_mint_allowlist or mint in self.allowed_mints