from aiohttp import web
from aiohttp.web import AppKey
from backfill import run_backfill
from config import Settings
from rpc_client import TransactionSource
import logging
import asyncio

logger = logging.getLogger(__name__)

RPC_CLIENT_KEY = AppKey("rpc_client", object)
SETTINGS_KEY = AppKey("settings", Settings)


class TransferServer:
    def __init__(self, rpc_client: TransactionSource, settings: Settings):
        self.app = web.Application()
        self.app[RPC_CLIENT_KEY] = rpc_client
        self.app[SETTINGS_KEY] = settings
        self.settings = settings
        self.runner = None
        self.site = None
        self._setup_routes()

        self.app.on_shutdown.append(self._on_shutdown)

    async def _on_shutdown(self, app):
        """Handle shutdown"""
        logger.debug("Transfer server shutting down")

    def _setup_routes(self):
        """Set up the single report route"""
        self.app.router.add_get("/transfers", self.handle_transfers)

    async def handle_transfers(self, request):
        """Run one full backfill for this request and return the ordered transfers"""
        settings = request.app[SETTINGS_KEY]
        try:
            result = await run_backfill(request.app[RPC_CLIENT_KEY], settings)
        except Exception as e:
            logger.error(f"Backfill failed: {str(e)}", exc_info=True)
            return web.Response(status=500, text=str(e))

        return web.json_response({
            'account': settings.target_account,
            'mint': settings.target_asset,
            'window_hours': settings.window_hours,
            'transfers': result.aggregator.to_payload()
        })

    async def start(self):
        """Start the HTTP server"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.settings.http_host, self.settings.http_port)
        await self.site.start()
        logger.info(f"Transfer server started on port {self.settings.http_port}")

    async def stop(self):
        """Stop the HTTP server gracefully"""
        stop_tasks = []
        if self.site:
            stop_tasks.append(self.site.stop())
        if self.runner:
            stop_tasks.append(self.runner.cleanup())

        if stop_tasks:
            await asyncio.gather(*stop_tasks, return_exceptions=True)

        logger.info("Transfer server stopped")
