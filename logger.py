import logging
import sys

def configure_logging(log_file: str = "backfill.log", level: str = "INFO"):
    # stdout is reserved for the transfer report
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stderr)
        ]
    )
    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("aiohttp_retry").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
