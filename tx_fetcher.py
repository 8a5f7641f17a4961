import logging
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from solders.signature import Signature
from exceptions import InvalidIdentifierError, RpcError
from models import Instruction, ParsedInstruction, ParsedTransaction, RawInstruction, SignatureRecord
from rpc_client import TransactionSource

logger = logging.getLogger(__name__)


def validate_signature(signature: str) -> str:
    """Raise InvalidIdentifierError unless `signature` is a base58 transaction signature"""
    try:
        Signature.from_string(signature)
    except ValueError as e:
        raise InvalidIdentifierError("signature", signature) from e
    return signature


def parse_instruction(raw: Any) -> Instruction:
    if isinstance(raw, dict) and "parsed" in raw and "program" in raw:
        try:
            return ParsedInstruction.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Treating malformed parsed instruction as raw: {e.error_count()} errors")

    program_id = raw.get("programId") if isinstance(raw, dict) else None
    return RawInstruction(program_id=program_id if isinstance(program_id, str) else None)


def parse_transaction(signature: str, payload: Dict[str, Any]) -> Optional[ParsedTransaction]:
    """
    Build a ParsedTransaction from a getTransaction result.

    Returns None unless the payload is in jsonParsed form: a transaction object
    (not an encoded blob) whose account keys are objects and whose instructions
    are a list.
    """
    transaction = payload.get("transaction")
    if not isinstance(transaction, dict):
        return None

    message = transaction.get("message")
    if not isinstance(message, dict):
        return None

    account_keys = message.get("accountKeys") or []
    if any(not isinstance(key, dict) for key in account_keys):
        return None

    instructions = message.get("instructions")
    if not isinstance(instructions, list):
        return None

    block_time = payload.get("blockTime")
    slot = payload.get("slot")
    return ParsedTransaction(
        signature=signature,
        slot=slot if isinstance(slot, int) else None,
        block_time=block_time if isinstance(block_time, int) else None,
        instructions=[parse_instruction(ix) for ix in instructions]
    )


class TransactionFetcher:
    def __init__(self, client: TransactionSource):
        self.client = client
        self.skipped: List[str] = []

    async def fetch(self, record: SignatureRecord) -> Optional[ParsedTransaction]:
        """
        Fetch and decode one transaction.

        A malformed signature is fatal; anything else that goes wrong only
        skips this record.
        """
        signature = validate_signature(record.signature)

        try:
            payload = await self.client.get_transaction(signature)
        except RpcError as e:
            logger.warning(f"[Tx {signature[:10]}...] Fetch failed, skipping: {e}")
            self.skipped.append(signature)
            return None

        if not payload:
            logger.debug(f"[Tx {signature[:10]}...] Not found on node, skipping")
            self.skipped.append(signature)
            return None

        tx = parse_transaction(signature, payload)
        if tx is None:
            logger.warning(f"[Tx {signature[:10]}...] Response not jsonParsed, skipping")
            self.skipped.append(signature)
        return tx
