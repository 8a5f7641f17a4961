import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from solders.pubkey import Pubkey
from aggregator import TransferAggregator
from config import Settings
from exceptions import InvalidIdentifierError
from parse_transfers import classify_transaction
from rpc_client import TransactionSource
from signature_walker import walk_signatures
from time_utils import utc_now, window_cutoff
from tx_fetcher import TransactionFetcher

logger = logging.getLogger(__name__)


@dataclass
class BackfillStats:
    pages: int = 0
    signatures: int = 0
    fetched: int = 0
    skipped: int = 0
    events: int = 0


@dataclass
class BackfillResult:
    aggregator: TransferAggregator
    stats: BackfillStats
    cutoff: int


def validate_pubkey(kind: str, value: str) -> str:
    """Raise InvalidIdentifierError unless `value` is a base58 public key"""
    try:
        Pubkey.from_string(value)
    except ValueError as e:
        raise InvalidIdentifierError(kind, value) from e
    return value


async def run_backfill(
    client: TransactionSource,
    settings: Settings,
    now: Optional[datetime] = None
) -> BackfillResult:
    """
    Walk the target account's history back to the window cutoff and collect
    every qualifying transfer of the target mint.

    Invalid identifiers and signature listing failures raise; transactions
    that cannot be fetched or decoded are skipped.
    """
    account = validate_pubkey("account", settings.target_account)
    mint = settings.target_asset

    cutoff = window_cutoff(now or utc_now(), settings.window_seconds)
    fetcher = TransactionFetcher(client)
    aggregator = TransferAggregator()
    stats = BackfillStats()

    logger.info(f"Backfilling {settings.asset_symbol} transfers for {account} since {cutoff}")

    async for page in walk_signatures(client, account, cutoff, settings.page_size):
        stats.pages += 1
        for record in page:
            stats.signatures += 1
            tx = await fetcher.fetch(record)
            if tx is None:
                continue
            stats.fetched += 1

            events = classify_transaction(
                tx.instructions,
                record,
                account=account,
                mint=mint,
                decimals=settings.asset_decimals,
                token_program=settings.token_program
            )
            aggregator.extend(events)
            stats.events += len(events)

    stats.skipped = len(fetcher.skipped)
    logger.info(
        f"Backfill complete | pages: {stats.pages} | signatures: {stats.signatures} | "
        f"skipped: {stats.skipped} | transfers: {stats.events}"
    )
    return BackfillResult(aggregator=aggregator, stats=stats, cutoff=cutoff)
