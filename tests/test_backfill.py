"""
End-to-end backfill tests against the in-memory RPC fake.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from backfill import run_backfill
from exceptions import InvalidIdentifierError, RpcError
from fakes import CUTOFF, NOW, OTHER, OTHER_MINT, WALLET, FakeRpcClient, sig_entry, transfer_ix, tx_payload
from models import Direction


@pytest.mark.asyncio
async def test_backfill_collects_and_orders_transfers(settings):
    newest = sig_entry(CUTOFF + 500)
    middle = sig_entry(CUTOFF + 300)
    at_cutoff = sig_entry(CUTOFF)
    too_old = sig_entry(CUTOFF - 1)
    client = FakeRpcClient(
        pages=[[newest, middle, at_cutoff], [too_old]],
        transactions={
            newest["signature"]: tx_payload([transfer_ix(source=WALLET, destination=OTHER, amount="2500000")]),
            middle["signature"]: tx_payload([
                transfer_ix(kind="burn"),
                transfer_ix(mint=OTHER_MINT),
                transfer_ix(source=OTHER, destination=WALLET, amount="1000000", mint=None),
            ]),
            at_cutoff["signature"]: tx_payload([transfer_ix(kind="transferChecked", source=OTHER, destination=WALLET, amount="750000")]),
            too_old["signature"]: tx_payload([transfer_ix()]),
        },
    )

    result = await run_backfill(client, settings, now=NOW)
    events = result.aggregator.events()

    assert result.cutoff == CUTOFF
    assert [e.signature for e in events] == [at_cutoff["signature"], middle["signature"], newest["signature"]]
    assert [e.direction for e in events] == [Direction.RECEIVED, Direction.RECEIVED, Direction.SENT]
    assert [e.amount for e in events] == [Decimal("0.75"), Decimal("1"), Decimal("2.5")]
    assert too_old["signature"] not in client.fetched
    assert client.before_calls == [None, at_cutoff["signature"]]
    assert result.stats.pages == 1
    assert result.stats.signatures == 3
    assert result.stats.events == 3


@pytest.mark.asyncio
async def test_backfill_renders_report_lines(settings):
    entry = sig_entry(CUTOFF + 3600)
    client = FakeRpcClient(
        pages=[[entry]],
        transactions={entry["signature"]: tx_payload([transfer_ix(amount="2500000")])},
    )

    result = await run_backfill(client, settings, now=NOW)

    assert result.aggregator.render_lines() == ["2024-05-01T13:00:00+00:00 | -2.500000 USDC | sent"]


@pytest.mark.asyncio
async def test_backfill_skips_failed_and_unparsed_transactions(settings):
    failing = sig_entry(CUTOFF + 30)
    blob = sig_entry(CUTOFF + 20)
    missing = sig_entry(CUTOFF + 15)
    good = sig_entry(CUTOFF + 10)
    client = FakeRpcClient(
        pages=[[failing, blob, missing, good]],
        transactions={
            blob["signature"]: {"slot": 1, "transaction": ["AQID", "base64"]},
            good["signature"]: tx_payload([transfer_ix(source=OTHER, destination=WALLET)]),
        },
        failing={failing["signature"]},
    )

    result = await run_backfill(client, settings, now=NOW)

    assert [e.signature for e in result.aggregator.events()] == [good["signature"]]
    assert result.stats.fetched == 1
    assert result.stats.skipped == 3
    assert len(client.fetched) == 4


@pytest.mark.asyncio
async def test_backfill_with_no_history_is_empty(settings):
    result = await run_backfill(FakeRpcClient(), settings, now=NOW)
    assert result.aggregator.events() == []
    assert result.stats.pages == 0


@pytest.mark.asyncio
async def test_backfill_listing_failure_is_fatal(settings):
    client = FakeRpcClient(listing_error=RpcError("getSignaturesForAddress", "connection reset"))
    with pytest.raises(RpcError):
        await run_backfill(client, settings, now=NOW)


@pytest.mark.asyncio
async def test_backfill_malformed_signature_is_fatal(settings):
    client = FakeRpcClient(pages=[[sig_entry(CUTOFF + 10, signature="definitely-not-base58!")]])
    with pytest.raises(InvalidIdentifierError):
        await run_backfill(client, settings, now=NOW)


@pytest.mark.asyncio
async def test_backfill_invalid_account_is_fatal(settings):
    bad = settings.model_copy(update={"target_account": "not-a-pubkey"})
    client = FakeRpcClient()
    with pytest.raises(InvalidIdentifierError, match="Invalid account"):
        await run_backfill(client, bad, now=NOW)
    assert client.before_calls == []


@pytest.mark.asyncio
async def test_backfill_uses_configured_page_size(settings):
    small = settings.model_copy(update={"page_size": 2})
    client = FakeRpcClient(pages=[[sig_entry(CUTOFF + 2), sig_entry(CUTOFF + 1)]])
    client.transactions = {}
    await run_backfill(client, small, now=NOW)
    assert client.limits == [2, 2]
