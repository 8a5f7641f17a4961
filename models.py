from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Union

class Direction(str, Enum):
    SENT = "sent"
    RECEIVED = "received"

class TransferKind(str, Enum):
    TRANSFER = "transfer"
    TRANSFER_CHECKED = "transferChecked"

class SignatureRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signature: str
    block_time: Optional[int] = Field(default=None, alias="blockTime")

class ParsedInstruction(BaseModel):
    """Instruction the node decoded for us (jsonParsed encoding)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    program: str
    program_id: str = Field(alias="programId")
    parsed: Any = None

class RawInstruction(BaseModel):
    """Any instruction the node left undecoded."""
    model_config = ConfigDict(frozen=True)

    program_id: Optional[str] = None

Instruction = Union[ParsedInstruction, RawInstruction]

class ParsedTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    slot: Optional[int] = None
    block_time: Optional[int] = None
    instructions: List[Instruction] = []

class TokenTransfer(BaseModel):
    """Typed payload of an spl-token transfer/transferChecked instruction."""
    model_config = ConfigDict(frozen=True)

    kind: TransferKind
    mint: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    raw_amount: int = 0

class TransferEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    amount: Decimal
    direction: Direction
    signature: str

    @property
    def sign(self) -> str:
        return "-" if self.direction is Direction.SENT else "+"
