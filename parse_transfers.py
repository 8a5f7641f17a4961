from decimal import Decimal
from typing import Any, List, Optional
from models import (
    Direction,
    Instruction,
    ParsedInstruction,
    SignatureRecord,
    TokenTransfer,
    TransferEvent,
    TransferKind,
)
from time_utils import from_block_time

U64_MAX = 2 ** 64 - 1


def _str_field(info: dict, key: str) -> Optional[str]:
    value = info.get(key)
    return value if isinstance(value, str) else None


def parse_raw_amount(info: dict) -> int:
    """
    Raw token amount of a transfer payload.

    Reads the string `amount` field, falling back to `tokenAmount.amount`
    (transferChecked). Anything missing, non-numeric, negative or wider than
    u64 reads as 0.
    """
    amount = _str_field(info, "amount")
    if amount is None:
        token_amount = info.get("tokenAmount")
        if isinstance(token_amount, dict):
            amount = _str_field(token_amount, "amount") or "0"
        else:
            amount = "0"

    if not (amount.isascii() and amount.isdigit()):
        return 0
    value = int(amount)
    return value if value <= U64_MAX else 0


def as_token_transfer(instruction: Instruction, token_program: str = "spl-token") -> Optional[TokenTransfer]:
    """
    Narrow an instruction to a token transfer payload.

    Returns None for anything that is not a node-decoded `transfer` or
    `transferChecked` instruction of `token_program`.
    """
    if not isinstance(instruction, ParsedInstruction):
        return None
    if instruction.program != token_program:
        return None

    parsed: Any = instruction.parsed
    if not isinstance(parsed, dict):
        return None

    try:
        kind = TransferKind(parsed.get("type"))
    except ValueError:
        return None

    info = parsed.get("info")
    if not isinstance(info, dict):
        return None

    return TokenTransfer(
        kind=kind,
        mint=_str_field(info, "mint"),
        source=_str_field(info, "source"),
        destination=_str_field(info, "destination"),
        raw_amount=parse_raw_amount(info)
    )


def transfer_direction(transfer: TokenTransfer, account: str) -> Optional[Direction]:
    # Without a source the direction is unknown
    if transfer.source is None:
        return None
    if transfer.source == account:
        return Direction.SENT
    if transfer.destination == account:
        return Direction.RECEIVED
    return None


def classify_instruction(
    instruction: Instruction,
    record: SignatureRecord,
    account: str,
    mint: str,
    decimals: int = 6,
    token_program: str = "spl-token"
) -> Optional[TransferEvent]:
    """
    Turn one instruction into a TransferEvent for `account`, or None.

    An instruction without a mint is accepted; one with a different mint is
    not. Zero amounts and transfers not touching `account` are dropped. Never
    raises on malformed payloads.
    """
    transfer = as_token_transfer(instruction, token_program)
    if transfer is None:
        return None

    if transfer.mint is not None and transfer.mint != mint:
        return None

    if transfer.raw_amount == 0:
        return None

    direction = transfer_direction(transfer, account)
    if direction is None:
        return None

    return TransferEvent(
        timestamp=from_block_time(record.block_time),
        amount=Decimal(transfer.raw_amount).scaleb(-decimals),
        direction=direction,
        signature=record.signature
    )


def classify_transaction(
    instructions: List[Instruction],
    record: SignatureRecord,
    account: str,
    mint: str,
    decimals: int = 6,
    token_program: str = "spl-token"
) -> List[TransferEvent]:
    """All qualifying transfer events of a transaction, in instruction order"""
    events = []
    for instruction in instructions:
        event = classify_instruction(instruction, record, account, mint, decimals, token_program)
        if event is not None:
            events.append(event)
    return events
