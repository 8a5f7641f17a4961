"""
Backfill exceptions.

Fatal errors (bad identifiers, failed signature listing) abort the whole run;
per-transaction RPC failures are caught by the fetcher and skipped.
"""


class BackfillError(Exception):
    """Base exception for backfill failures."""
    pass


class InvalidIdentifierError(BackfillError):
    """Raised when an account, mint or signature string fails to parse."""

    def __init__(self, kind: str, value: str):
        super().__init__(f"Invalid {kind}: {value!r}")
        self.kind = kind
        self.value = value


class RpcError(BackfillError):
    """Raised when the RPC node returns an error or cannot be reached."""

    def __init__(self, method: str, message: str, code=None):
        super().__init__(f"{method} failed: {message}")
        self.method = method
        self.code = code
