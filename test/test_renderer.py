import pytest
from eth_abi import encode

from evmfmt.dapp.info import DappInfo, SolcContract
from evmfmt.dapp.source_map import SourceFile, parse_source_map
from evmfmt.format.scalars import format_hex
from evmfmt.trace.nodes import (
    CallContext,
    CreationContext,
    EntryTrace,
    ErrorKind,
    ErrorTrace,
    EventTrace,
    EvmError,
    FrameTrace,
    PleaseFetchContract,
    PleaseFetchSlot,
    QueryTrace,
    ReturnTrace,
    Revert,
    Trace,
    TraceTree,
)
from evmfmt.trace.renderer import ERROR_SELECTOR, render_forest, render_trace, show_call
from evmfmt.utils.colors import AnsiStyle
from evmfmt.utils.exceptions import InvalidUtf8Error

from conftest import FOO_HASH, calldata, selector, topic

NO_MAP = " <no source map>"


def call_trace(data: bytes, code_hash: int = FOO_HASH) -> Trace:
    abi = int.from_bytes(data[:4], 'big') if len(data) >= 4 else None
    return Trace(FrameTrace(CallContext(code_hash, abi, data)), code_hash=code_hash)


def entry(label: str, *children: TraceTree) -> TraceTree:
    return TraceTree(Trace(EntryTrace(label)), tuple(children))


# ============================================================================
# Frames
# ============================================================================

def test_call_with_decoded_arguments(foo_dapp):
    trace = call_trace(calldata("bar(uint256)", ['uint256'], [5]))
    assert render_trace(foo_dapp, trace) == "call Foo::bar(5)" + NO_MAP


def test_call_with_string_arguments(foo_dapp):
    trace = call_trace(calldata("greet(string,uint8)", ['string', 'uint8'], ["bob", 3]))
    assert render_trace(foo_dapp, trace) == 'call Foo::greet("bob", 3)' + NO_MAP


def test_call_without_arguments(foo_dapp):
    trace = call_trace(calldata("poke()", [], []))
    assert render_trace(foo_dapp, trace) == "call Foo::poke()" + NO_MAP


def test_call_to_unknown_method(foo_dapp):
    data = bytes.fromhex("deadbeef") + encode(['uint256'], [5])
    assert render_trace(foo_dapp, call_trace(data)) == (
        "call Foo::[unknown method](" + format_hex(data) + ")" + NO_MAP
    )


def test_call_with_short_calldata_is_fallback(foo_dapp):
    assert render_trace(foo_dapp, call_trace(b"")) == "call Foo::[fallback function](0x)" + NO_MAP


def test_call_with_truncated_arguments_shows_hex(foo_dapp):
    data = calldata("bar(uint256)", [], [])
    assert render_trace(foo_dapp, call_trace(data)) == (
        "call Foo::bar(" + format_hex(data) + ")" + NO_MAP
    )


def test_call_with_tuple_parameter_shows_hex(foo_dapp):
    data = calldata("baz((uint256,bool))", ['(uint256,bool)'], [(1, True)])
    assert render_trace(foo_dapp, call_trace(data)) == (
        "call Foo::baz(" + format_hex(data) + ")" + NO_MAP
    )


def test_call_to_unknown_contract(foo_dapp):
    trace = call_trace(calldata("bar(uint256)", ['uint256'], [5]), code_hash=0x1234)
    assert render_trace(foo_dapp, trace) == "call [unknown]" + NO_MAP


def test_show_call_falls_back_for_unparseable_signature():
    data = b"\x01\x02\x03\x04"
    assert show_call("weird(fixed128x18)", data) == "(0x01020304)"


def test_creation(foo_dapp):
    known = Trace(FrameTrace(CreationContext(FOO_HASH)), code_hash=FOO_HASH, is_creation=True)
    unknown = Trace(FrameTrace(CreationContext(0x99)))
    assert render_trace(foo_dapp, known) == "create Foo" + NO_MAP
    assert render_trace(foo_dapp, unknown) == "create <unknown contract>" + NO_MAP


# ============================================================================
# Returns
# ============================================================================

def test_return_with_known_output_type(foo_dapp):
    data = calldata("bar(uint256)", ['uint256'], [5])
    context = CallContext(FOO_HASH, selector("bar(uint256)"), data)
    trace = Trace(ReturnTrace(encode(['bool'], [True]), context))
    assert render_trace(foo_dapp, trace) == "← bool true"


def test_return_with_dynamic_output_type(foo_dapp):
    data = calldata("greet(string,uint8)", ['string', 'uint8'], ["bob", 3])
    context = CallContext(FOO_HASH, selector("greet(string,uint8)"), data)
    trace = Trace(ReturnTrace(encode(['string'], ["hi bob"]), context))
    assert render_trace(foo_dapp, trace) == '← string "hi bob"'


def test_return_without_output_type_is_hex(foo_dapp):
    context = CallContext(FOO_HASH, selector("poke()"), calldata("poke()", [], []))
    trace = Trace(ReturnTrace(b"\x01\x02", context))
    assert render_trace(foo_dapp, trace) == "← 0x0102"


def test_return_of_undecodable_output_is_hex(foo_dapp):
    context = CallContext(FOO_HASH, selector("bar(uint256)"), b"")
    trace = Trace(ReturnTrace(b"\x01", context))
    assert render_trace(foo_dapp, trace) == "← bool 0x01"


def test_return_from_creation(foo_dapp):
    trace = Trace(ReturnTrace(b"\x60\x80\x60", CreationContext(FOO_HASH)))
    assert render_trace(foo_dapp, trace) == "← 3 bytes of code"


# ============================================================================
# Events, queries and errors
# ============================================================================

def test_known_event_shows_non_indexed_fields(foo_dapp):
    event = EventTrace(encode(['uint256'], [5]), (topic("Transfer(address,uint256)"), 0x11))
    assert render_trace(foo_dapp, Trace(event)) == "Transfer(5)" + NO_MAP


def test_event_without_topics(foo_dapp):
    assert render_trace(foo_dapp, Trace(EventTrace(b"\x01"))) == "log0(0x01)" + NO_MAP


def test_unknown_event(foo_dapp):
    event = EventTrace(b"\xab", (0x1234, 0x5))
    assert render_trace(foo_dapp, Trace(event)) == "log2(0xab, 0x1234, 0x5)" + NO_MAP


def test_unknown_event_with_one_topic(foo_dapp):
    event = EventTrace(b"\x01\x02", (0xbeef,))
    assert render_trace(foo_dapp, Trace(event)) == "log1(0x0102, 0xbeef)" + NO_MAP


def test_fetch_queries(foo_dapp):
    address = int("11" * 20, 16)
    assert render_trace(foo_dapp, Trace(QueryTrace(PleaseFetchContract(address)))) == (
        "fetch contract 0x" + "11" * 20 + NO_MAP
    )
    assert render_trace(foo_dapp, Trace(QueryTrace(PleaseFetchSlot(address, 5)))) == (
        "fetch storage slot 0x5 from 0x" + "11" * 20 + NO_MAP
    )


def test_revert_with_reason(foo_dapp):
    output = ERROR_SELECTOR + encode(['string'], ["nope"])
    assert render_trace(foo_dapp, Trace(ErrorTrace(Revert(output)))) == (
        'error Revert ("nope")' + NO_MAP
    )


def test_revert_with_custom_payload_is_hex(foo_dapp):
    assert render_trace(foo_dapp, Trace(ErrorTrace(Revert(b"\x01\x02")))) == (
        "error Revert 0x0102" + NO_MAP
    )


def test_revert_with_invalid_utf8_reason_raises(foo_dapp):
    output = ERROR_SELECTOR + encode(['bytes'], [b"\xff\xfe"])
    with pytest.raises(InvalidUtf8Error):
        render_trace(foo_dapp, Trace(ErrorTrace(Revert(output))))


def test_other_errors(foo_dapp):
    out_of_gas = EvmError(ErrorKind.OUT_OF_GAS, (10, 20))
    assert render_trace(foo_dapp, Trace(ErrorTrace(out_of_gas))) == "error OutOfGas 10 20" + NO_MAP
    underrun = EvmError(ErrorKind.STACK_UNDERRUN)
    assert render_trace(foo_dapp, Trace(ErrorTrace(underrun))) == "error StackUnderrun" + NO_MAP


def test_entry_label(foo_dapp):
    assert render_trace(foo_dapp, Trace(EntryTrace("test_transfer"))) == "test_transfer"


# ============================================================================
# Locations and styles
# ============================================================================

@pytest.fixture
def mapped_dapp():
    contract = SolcContract(
        "src/Foo.sol:Foo",
        runtime_srcmap=parse_source_map("0:5:0;7:3:0;1:1:1"),
        creation_srcmap=parse_source_map("0:1:0"),
    )
    sources = {0: SourceFile("src/Foo.sol", b"line1\nline2\nline3\n")}
    return DappInfo(solc_by_hash={FOO_HASH: contract}, sources=sources)


def test_resolved_location(mapped_dapp):
    trace = Trace(EventTrace(b""), op_index=1, code_hash=FOO_HASH)
    assert render_trace(mapped_dapp, trace) == "log0(0x) (src/Foo.sol:2)"


def test_creation_location_uses_creation_map(mapped_dapp):
    trace = Trace(EventTrace(b""), op_index=0, code_hash=FOO_HASH, is_creation=True)
    assert render_trace(mapped_dapp, trace) == "log0(0x) (src/Foo.sol:1)"


def test_unresolved_locations(mapped_dapp):
    missing_source = Trace(EventTrace(b""), op_index=2, code_hash=FOO_HASH)
    past_map = Trace(EventTrace(b""), op_index=3, code_hash=FOO_HASH)
    assert render_trace(mapped_dapp, missing_source) == "log0(0x) <source not found>"
    assert render_trace(mapped_dapp, past_map) == "log0(0x)" + NO_MAP


def test_ansi_style(foo_dapp, mapped_dapp):
    style = AnsiStyle()
    assert render_trace(foo_dapp, Trace(EventTrace(b"\x01")), style) == (
        "\x1b[36mlog0(0x01)\x1b[0m \x1b[90m<no source map>\x1b[0m"
    )
    trace = call_trace(calldata("bar(uint256)", ['uint256'], [5]))
    assert render_trace(foo_dapp, trace, style) == (
        "call \x1b[1mFoo::bar(5)\x1b[0m \x1b[90m<no source map>\x1b[0m"
    )
    assert render_trace(foo_dapp, Trace(ErrorTrace(Revert(b""))), style) == (
        "\x1b[91merror\x1b[0m Revert 0x \x1b[90m<no source map>\x1b[0m"
    )
    located = Trace(EventTrace(b""), op_index=1, code_hash=FOO_HASH)
    assert render_trace(mapped_dapp, located, style) == (
        "\x1b[36mlog0(0x)\x1b[0m \x1b[90m(src/Foo.sol:2)\x1b[0m"
    )


# ============================================================================
# Forests
# ============================================================================

def test_render_forest_draws_connectors(foo_dapp):
    forest = [entry("root", entry("a", entry("a1"), entry("a2")), entry("b", entry("b1")))]
    assert render_forest(foo_dapp, forest) == (
        "root\n"
        "├╴a\n"
        "│ ├╴a1\n"
        "│ └╴a2\n"
        "└╴b\n"
        "  └╴b1\n"
    )


def test_render_forest_concatenates_trees(foo_dapp):
    assert render_forest(foo_dapp, [entry("one"), entry("two", entry("x"))]) == "one\ntwo\n└╴x\n"


def test_render_empty_forest(foo_dapp):
    assert render_forest(foo_dapp, []) == ""


def test_render_call_tree(foo_dapp):
    data = calldata("bar(uint256)", ['uint256'], [5])
    context = CallContext(FOO_HASH, selector("bar(uint256)"), data)
    tree = TraceTree(call_trace(data), (
        TraceTree(Trace(EventTrace(encode(['uint256'], [5]), (topic("Transfer(address,uint256)"),)))),
        TraceTree(Trace(ReturnTrace(encode(['bool'], [False]), context))),
    ))
    assert render_forest(foo_dapp, [tree]) == (
        "call Foo::bar(5) <no source map>\n"
        "├╴Transfer(5) <no source map>\n"
        "└╴← bool false\n"
    )
