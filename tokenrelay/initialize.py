"""Creation of the library configuration account."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .errors import ErrorCode, TokenTransferError
from .state import LibraryConfig, Pubkey

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE_LIMIT = 100
"""Largest batch size a library may be configured with."""


@dataclass
class InitializeParams:
    """Settings a new library configuration starts from."""

    authority: Pubkey
    processor_program_id: Pubkey
    max_transfer_amount: int = 0
    max_batch_size: int = 0
    fee_collector: Optional[Pubkey] = None
    enforce_recipient_allowlist: bool = False
    allowed_recipients: Optional[List[Pubkey]] = None
    enforce_source_allowlist: bool = False
    allowed_sources: Optional[List[Pubkey]] = None
    enforce_mint_allowlist: bool = False
    allowed_mints: Optional[List[Pubkey]] = None


def _length(items: Optional[List[Pubkey]]) -> int:
    return len(items) if items is not None else 0


def required_space(params: InitializeParams) -> int:
    """Bytes of account space the configuration described by ``params`` needs."""
    return LibraryConfig.size(
        _length(params.allowed_recipients),
        _length(params.allowed_sources),
        _length(params.allowed_mints),
    )


def _validate(params: InitializeParams) -> None:
    if params.max_batch_size > MAX_BATCH_SIZE_LIMIT:
        raise TokenTransferError(ErrorCode.INVALID_BATCH_SIZE)
    allowlists = (
        (params.enforce_recipient_allowlist, params.allowed_recipients),
        (params.enforce_source_allowlist, params.allowed_sources),
        (params.enforce_mint_allowlist, params.allowed_mints),
    )
    if any(enforced and items is None for enforced, items in allowlists):
        raise TokenTransferError(ErrorCode.EMPTY_ALLOWLIST)


def _log_summary(config: LibraryConfig) -> None:
    logger.info("Token Transfer Library initialized")
    logger.info("Authority: %s", config.authority)
    if config.fee_collector is not None:
        logger.info("Fee collector: %s", config.fee_collector)
    if config.max_transfer_amount > 0:
        logger.info("Max transfer amount: %d", config.max_transfer_amount)
    else:
        logger.info("No max transfer amount set")
    if config.max_batch_size > 0:
        logger.info("Max batch size: %d", config.max_batch_size)
    else:
        logger.info("Batch transfers disabled")
    if config.enforce_recipient_allowlist:
        logger.info(
            "Recipient allowlist enforced with %d recipients", len(config.allowed_recipients)
        )
    if config.enforce_source_allowlist:
        logger.info("Source allowlist enforced with %d sources", len(config.allowed_sources))
    if config.enforce_mint_allowlist:
        logger.info("Mint allowlist enforced with %d mints", len(config.allowed_mints))


def initialize(
    params: InitializeParams, clock: Optional[Callable[[], int]] = None
) -> LibraryConfig:
    """Validate ``params`` and return a fresh, active library configuration.

    ``clock`` returns the current unix time; the configuration keeps it for
    later timestamp updates.
    """
    _validate(params)
    if clock is None:
        clock = lambda: int(time.time())  # noqa: E731
    config = LibraryConfig(
        authority=params.authority,
        is_active=True,
        processor_program_id=params.processor_program_id,
        max_transfer_amount=params.max_transfer_amount,
        max_batch_size=params.max_batch_size,
        enforce_recipient_allowlist=params.enforce_recipient_allowlist,
        allowed_recipients=list(params.allowed_recipients or []),
        enforce_source_allowlist=params.enforce_source_allowlist,
        allowed_sources=list(params.allowed_sources or []),
        enforce_mint_allowlist=params.enforce_mint_allowlist,
        allowed_mints=list(params.allowed_mints or []),
        fee_collector=params.fee_collector,
        transfer_count=0,
        total_volume=0,
        total_fees_collected=0,
        clock=clock,
    )
    config.last_updated = clock()
    _log_summary(config)
    return config