"""
Trace forest data model.

A trace forest is produced by an EVM interpreter: one tree per top-level
frame, children nested by call depth. Each node wraps exactly one
``TraceData`` variant. Everything here is immutable; the renderer only reads
it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


# ============================================================================
# Frame contexts
# ============================================================================

@dataclass(frozen=True)
class CallContext:
    """A message call into existing code."""
    code_hash: int
    abi: Optional[int]  # method selector word, None when calldata is shorter than 4 bytes
    calldata: bytes
    target: Optional[int] = None
    depth: int = 0


@dataclass(frozen=True)
class CreationContext:
    """Execution of init code for a new contract."""
    code_hash: int
    address: Optional[int] = None
    depth: int = 0


FrameContext = Union[CallContext, CreationContext]


# ============================================================================
# Queries
# ============================================================================

@dataclass(frozen=True)
class PleaseFetchContract:
    address: int


@dataclass(frozen=True)
class PleaseFetchSlot:
    address: int
    slot: int


Query = Union[PleaseFetchContract, PleaseFetchSlot]


# ============================================================================
# Errors
# ============================================================================

class ErrorKind(Enum):
    BALANCE_TOO_LOW = "BalanceTooLow"
    UNRECOGNIZED_OPCODE = "UnrecognizedOpcode"
    SELF_DESTRUCTION = "SelfDestruction"
    STACK_UNDERRUN = "StackUnderrun"
    BAD_JUMP_DESTINATION = "BadJumpDestination"
    OUT_OF_GAS = "OutOfGas"
    BAD_CHEAT_CODE = "BadCheatCode"
    STACK_LIMIT_EXCEEDED = "StackLimitExceeded"
    ILLEGAL_OVERFLOW = "IllegalOverflow"
    QUERY = "Query"
    STATE_CHANGE_WHILE_STATIC = "StateChangeWhileStatic"
    INVALID_MEMORY_ACCESS = "InvalidMemoryAccess"
    CALL_DEPTH_LIMIT_REACHED = "CallDepthLimitReached"
    MAX_CODE_SIZE_EXCEEDED = "MaxCodeSizeExceeded"
    PRECOMPILE_FAILURE = "PrecompileFailure"


@dataclass(frozen=True)
class Revert:
    """Execution reverted with an ABI-encoded payload."""
    output: bytes


@dataclass(frozen=True)
class EvmError:
    """Any halting condition other than a revert."""
    kind: ErrorKind
    details: Tuple[int, ...] = ()

    def __str__(self) -> str:
        return " ".join([self.kind.value] + [str(d) for d in self.details])


VMError = Union[Revert, EvmError]


# ============================================================================
# Trace data variants
# ============================================================================

@dataclass(frozen=True)
class EntryTrace:
    label: str


@dataclass(frozen=True)
class FrameTrace:
    context: FrameContext


@dataclass(frozen=True)
class EventTrace:
    data: bytes
    topics: Tuple[int, ...] = ()
    address: Optional[int] = None


@dataclass(frozen=True)
class QueryTrace:
    query: Query


@dataclass(frozen=True)
class ReturnTrace:
    output: bytes
    context: FrameContext


@dataclass(frozen=True)
class ErrorTrace:
    error: VMError


TraceData = Union[EntryTrace, FrameTrace, EventTrace, QueryTrace, ReturnTrace, ErrorTrace]


@dataclass(frozen=True)
class Trace:
    """
    One trace node.

    ``op_index`` is the instruction index at which the node was recorded and
    ``code_hash`` the hash of the code being executed; together they locate
    the node in the contract's source map.
    """
    data: TraceData
    op_index: int = 0
    code_hash: Optional[int] = None
    is_creation: bool = False


@dataclass(frozen=True)
class TraceTree:
    trace: Trace
    children: Tuple['TraceTree', ...] = ()
