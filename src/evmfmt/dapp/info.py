"""
Contract metadata view.

``DappInfo`` answers the lookups the trace renderer needs: contracts by code
hash, methods by selector, events by topic, and source locations of trace
nodes. It is read-only once built; ``from_combined_json`` builds it from solc
``--combined-json abi,bin,bin-runtime,srcmap,srcmap-runtime`` output.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector, keccak

from evmfmt.abi.types import AbiType, parse_type_name
from evmfmt.utils.exceptions import MetadataError, TypeParseError
from evmfmt.utils.logging import get_logger

from .source_map import SourceFile, SourceMapEntry, code_position, parse_source_map

logger = get_logger('dapp')

NO_SOURCE_MAP = "<no source map>"
SOURCE_NOT_FOUND = "<source not found>"


@dataclass(frozen=True)
class Method:
    signature: str
    output: Optional[Tuple[str, AbiType]] = None  # (name, type) of the first output


@dataclass(frozen=True)
class Event:
    name: str
    anonymous: bool
    fields: Tuple[Tuple[AbiType, bool], ...]  # (type, indexed)


@dataclass
class SolcContract:
    name: str  # "path:Name"
    abi_map: Dict[int, Method] = field(default_factory=dict)
    runtime_srcmap: List[SourceMapEntry] = field(default_factory=list)
    creation_srcmap: List[SourceMapEntry] = field(default_factory=list)


@dataclass(frozen=True)
class TraceLocation:
    label: str
    resolved: bool


def contract_name_part(name: str) -> str:
    """``"src/Token.sol:Token"`` -> ``"Token"``."""
    parts = name.split(":")
    return parts[1] if len(parts) > 1 else parts[0]


def contract_path_part(name: str) -> str:
    """``"src/Token.sol:Token"`` -> ``"src/Token.sol"``."""
    return name.split(":")[0]


def format_abi_type(abi_input: Dict[str, Any]) -> str:
    """Format an ABI JSON parameter as a canonical type name, expanding tuples."""
    type_name = abi_input['type']
    if type_name.startswith('tuple'):
        components = abi_input.get('components', [])
        inner = ','.join(format_abi_type(c) for c in components)
        return f"({inner}){type_name[len('tuple'):]}"
    return type_name


def _code_hash(bytecode_hex: str) -> Optional[int]:
    text = bytecode_hex[2:] if bytecode_hex.startswith('0x') else bytecode_hex
    if not text:
        return None
    try:
        code = bytes.fromhex(text)
    except ValueError:
        # unlinked library placeholders
        logger.warning("Bytecode is not plain hex (unlinked libraries?); skipping code hash")
        return None
    return int.from_bytes(keccak(code), 'big')


class DappInfo:
    """Read-only contract metadata used while rendering traces."""

    def __init__(
        self,
        solc_by_hash: Optional[Dict[int, SolcContract]] = None,
        event_map: Optional[Dict[int, Event]] = None,
        sources: Optional[Dict[int, SourceFile]] = None
    ):
        self.solc_by_hash = solc_by_hash or {}
        self.event_map = event_map or {}
        self.sources = sources or {}

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup_contract_by_hash(self, code_hash: Optional[int]) -> Optional[SolcContract]:
        if code_hash is None:
            return None
        return self.solc_by_hash.get(code_hash)

    def lookup_event_by_topic(self, topic: int) -> Optional[Event]:
        return self.event_map.get(topic)

    def lookup_method_signature(self, contract: SolcContract, selector: int) -> Optional[str]:
        method = contract.abi_map.get(selector)
        return method.signature if method else None

    def lookup_method_output_type(
        self,
        contract: SolcContract,
        selector: int
    ) -> Optional[Tuple[str, AbiType]]:
        method = contract.abi_map.get(selector)
        return method.output if method else None

    def resolve_source_location(self, trace) -> TraceLocation:
        """Locate a trace node in its contract source, or explain why not."""
        contract = self.lookup_contract_by_hash(trace.code_hash)
        if contract is None:
            return TraceLocation(NO_SOURCE_MAP, False)
        srcmap = contract.creation_srcmap if trace.is_creation else contract.runtime_srcmap
        if not 0 <= trace.op_index < len(srcmap):
            return TraceLocation(NO_SOURCE_MAP, False)
        position = code_position(self.sources, srcmap[trace.op_index])
        if position is None:
            return TraceLocation(SOURCE_NOT_FOUND, False)
        path, line = position
        return TraceLocation(f"{path}:{line}", True)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_abi(self, contract: SolcContract, abi: List[Dict[str, Any]]) -> None:
        """Register the methods of ``abi`` on ``contract`` and its events globally."""
        for item in abi:
            kind = item.get('type')
            if kind == 'function':
                method = self._method_from_abi(item)
                selector = int.from_bytes(
                    function_signature_to_4byte_selector(method.signature), 'big'
                )
                contract.abi_map[selector] = method
            elif kind == 'event':
                event = self._event_from_abi(item)
                if event is not None:
                    self.event_map[self._event_topic(item)] = event

    @staticmethod
    def _signature(item: Dict[str, Any]) -> str:
        inputs = item.get('inputs', [])
        return f"{item['name']}({','.join(format_abi_type(i) for i in inputs)})"

    def _method_from_abi(self, item: Dict[str, Any]) -> Method:
        signature = self._signature(item)
        outputs = item.get('outputs') or []
        output = None
        if outputs:
            try:
                output = (outputs[0].get('name', ''), parse_type_name(format_abi_type(outputs[0])))
            except TypeParseError as e:
                logger.debug(f"Ignoring output type of {signature}: {e.message}")
        return Method(signature, output)

    def _event_topic(self, item: Dict[str, Any]) -> int:
        return int.from_bytes(event_signature_to_log_topic(self._signature(item)), 'big')

    def _event_from_abi(self, item: Dict[str, Any]) -> Optional[Event]:
        try:
            fields = tuple(
                (parse_type_name(format_abi_type(i)), bool(i.get('indexed', False)))
                for i in item.get('inputs', [])
            )
        except TypeParseError as e:
            logger.warning(f"Skipping event {item.get('name')}: {e.message}")
            return None
        return Event(item['name'], bool(item.get('anonymous', False)), fields)

    def register_contract(
        self,
        name: str,
        code_hash: int,
        abi: List[Dict[str, Any]]
    ) -> SolcContract:
        """Register a contract known only by its ABI (no source maps)."""
        contract = SolcContract(name)
        self.add_abi(contract, abi)
        self.solc_by_hash[code_hash] = contract
        return contract

    @classmethod
    def from_abi(cls, name: str, code_hash: int, abi: List[Dict[str, Any]]) -> 'DappInfo':
        """Build metadata for a single contract known only by its ABI."""
        dapp = cls()
        dapp.register_contract(name, code_hash, abi)
        return dapp

    @classmethod
    def from_combined_json(
        cls,
        data: Dict[str, Any],
        sources: Optional[Dict[int, SourceFile]] = None
    ) -> 'DappInfo':
        """
        Build metadata from parsed solc combined.json output.

        Contracts are registered under the keccak256 hash of both their runtime
        and creation bytecode. Contracts without bytecode (interfaces) still
        contribute their events.

        Raises:
            MetadataError: If the document has no contracts or a malformed entry
        """
        contracts = data.get('contracts')
        if not isinstance(contracts, dict) or not contracts:
            raise MetadataError("No contracts found in combined.json")

        dapp = cls(sources=sources)
        for key, entry in contracts.items():
            contract = SolcContract(key)
            try:
                abi = entry.get('abi', [])
                if isinstance(abi, str):
                    abi = json.loads(abi) if abi else []
                dapp.add_abi(contract, abi)
                contract.runtime_srcmap = parse_source_map(entry.get('srcmap-runtime', ''))
                contract.creation_srcmap = parse_source_map(entry.get('srcmap', ''))
            except (KeyError, ValueError, TypeError) as e:
                raise MetadataError(f"Malformed contract entry {key}: {e}", source=key)

            for bytecode_key in ('bin-runtime', 'bin'):
                code_hash = _code_hash(entry.get(bytecode_key, ''))
                if code_hash is not None:
                    dapp.solc_by_hash[code_hash] = contract
            logger.debug(f"Loaded {key} with {len(contract.abi_map)} methods")

        return dapp


def load_combined_json(
    path: Union[str, Path],
    source_dir: Optional[Union[str, Path]] = None
) -> DappInfo:
    """
    Load a combined.json file and the sources listed in its ``sourceList``.

    Sources are resolved against ``source_dir`` (default: the directory of the
    combined.json file). Missing sources are skipped; nodes pointing into them
    render as ``<source not found>``.

    Raises:
        MetadataError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MetadataError(f"Cannot load {path}: {e}", source=str(path))

    base = Path(source_dir) if source_dir else path.parent
    sources = {}
    for index, source_path in enumerate(data.get('sourceList', [])):
        full_path = base / source_path
        if full_path.exists():
            sources[index] = SourceFile.load(full_path, display_path=source_path)
        else:
            logger.warning(f"Source file not found: {full_path}")

    return DappInfo.from_combined_json(data, sources)
