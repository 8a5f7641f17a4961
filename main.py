import argparse
import asyncio
import logging
import sys
from config import Settings, settings
from connection_pool import HTTPSessionManager
from rpc_client import SolanaRpcClient
from backfill import run_backfill
from aggregator import format_header
from http_server import TransferServer
from logger import configure_logging

logger = logging.getLogger(__name__)


def build_client(settings: Settings) -> SolanaRpcClient:
    session_manager = HTTPSessionManager(pool_size=settings.http_pool_size, timeout=settings.rpc_timeout)
    return SolanaRpcClient(settings.solana_cluster_url, session_manager, settings.rpc_retry_attempts)


async def report(settings: Settings, out=sys.stdout) -> None:
    """One-shot backfill printed to `out`"""
    async with build_client(settings) as client:
        result = await run_backfill(client, settings)

    print(format_header(settings.target_account, settings.window_hours, settings.asset_symbol), file=out)
    for line in result.aggregator.render_lines(settings.asset_symbol):
        print(line, file=out)


async def serve(settings: Settings) -> None:
    """Serve GET /transfers until cancelled"""
    async with build_client(settings) as client:
        server = TransferServer(client, settings)
        try:
            await server.start()
            logger.info("Application startup complete")
            while True:
                await asyncio.sleep(3600)
        except asyncio.CancelledError:
            logger.info("Received shutdown signal")
        finally:
            await server.stop()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Report recent SPL token transfers of one wallet")
    parser.add_argument("--serve", action="store_true", help="run the HTTP endpoint instead of printing once")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(settings.log_file, settings.log_level)

    try:
        asyncio.run(serve(settings) if args.serve else report(settings))
    except KeyboardInterrupt:
        logger.info("Application terminated by user")
    except Exception as e:
        logger.critical(f"Fatal error: {str(e)}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
