import logging
from typing import AsyncIterator, List, Optional
from pydantic import ValidationError
from exceptions import RpcError
from models import SignatureRecord
from rpc_client import TransactionSource

logger = logging.getLogger(__name__)


def split_at_cutoff(page: List[SignatureRecord], cutoff: int) -> tuple[List[SignatureRecord], bool]:
    """
    Keep the records of a newest-first page up to the first one older than
    `cutoff`. Returns the kept records and whether the cutoff was crossed.

    A record without a block time counts as epoch 0, so it always crosses.
    """
    for index, record in enumerate(page):
        if (record.block_time or 0) < cutoff:
            return page[:index], True
    return page, False


async def walk_signatures(
    client: TransactionSource,
    account: str,
    cutoff: int,
    page_size: int = 1000
) -> AsyncIterator[List[SignatureRecord]]:
    """
    Page backwards through the signature history of `account`.

    Yields non-empty pages of records with block_time >= cutoff, newest first.
    The walk stops on an empty page or inside the first page that reaches a
    record older than the cutoff. Listing errors propagate to the caller.
    """
    before: Optional[str] = None
    page_number = 0

    while True:
        page_number += 1
        raw_page = await client.get_signatures(account, before=before, limit=page_size)
        if not raw_page:
            logger.debug(f"Page {page_number}: empty, walk finished")
            return

        try:
            page = [SignatureRecord.model_validate(item) for item in raw_page]
        except ValidationError as e:
            raise RpcError("getSignaturesForAddress", f"malformed signature record: {e}") from e
        kept, crossed = split_at_cutoff(page, cutoff)
        logger.debug(f"Page {page_number}: {len(page)} signatures, {len(kept)} inside window")

        if kept:
            yield kept
        if crossed:
            logger.debug(f"Page {page_number}: reached cutoff {cutoff}, walk finished")
            return

        before = page[-1].signature
