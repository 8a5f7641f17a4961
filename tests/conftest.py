"""
Pytest fixtures for backfill tests. Settings point at throwaway identifiers and
a temporary log file; no test talks to a real Solana node.
"""

from __future__ import annotations

import pytest

from fakes import MINT, WALLET


@pytest.fixture
def settings(tmp_path):
    from config import Settings

    return Settings(
        target_account=WALLET,
        target_asset=MINT,
        asset_symbol="USDC",
        asset_decimals=6,
        window_hours=24,
        page_size=1000,
        log_file=str(tmp_path / "backfill.log"),
    )
