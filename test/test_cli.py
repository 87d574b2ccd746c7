import json

import pytest
from eth_abi import encode
from eth_utils import keccak

from evmfmt.cli.main import build_parser, main

from conftest import FOO_ABI, calldata


def write_json(path, data):
    path.write_text(json.dumps(data))
    return str(path)


@pytest.fixture
def trace_file(tmp_path):
    data = calldata("bar(uint256)", ['uint256'], [5])
    forest = [{
        "type": "call",
        "code_hash": "0xf00",
        "calldata": "0x" + data.hex(),
        "children": [
            {"type": "fetch_slot", "address": "0x11", "slot": 1},
            {"type": "return", "output": "0x" + encode(['bool'], [True]).hex(),
             "context": {"type": "call", "code_hash": "0xf00", "calldata": "0x" + data.hex()}},
        ],
    }]
    return write_json(tmp_path / "trace.json", forest)


# ============================================================================
# render
# ============================================================================

def test_render_with_abi(tmp_path, trace_file, capsys):
    abi_path = write_json(tmp_path / "Foo.json", {"abi": FOO_ABI})
    assert main(["render", trace_file, "--abi", f"Foo:0xf00:{abi_path}", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert out == (
        "call Foo::bar(5) <no source map>\n"
        "├╴fetch storage slot 0x1 from 0x0000000000000000000000000000000000000011 <no source map>\n"
        "└╴← bool true\n"
    )


def test_render_without_metadata(trace_file, capsys):
    assert main(["render", trace_file, "--no-color"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "call [unknown] <no source map>"
    assert lines[2].startswith("└╴← 0x")


def test_render_with_combined_json(tmp_path, capsys):
    runtime = "6080604052"
    (tmp_path / "Foo.sol").write_text("contract Foo {\n    event E();\n}\n")
    combined = write_json(tmp_path / "combined.json", {
        "contracts": {"Foo.sol:Foo": {
            "abi": json.dumps(FOO_ABI),
            "bin-runtime": runtime,
            "bin": "",
            "srcmap-runtime": "0:10:0;19:10:0",
            "srcmap": "",
        }},
        "sourceList": ["Foo.sol"],
    })
    code_hash = "0x" + keccak(bytes.fromhex(runtime)).hex()
    trace = write_json(tmp_path / "trace.json", [
        {"type": "event", "data": "0x", "code_hash": code_hash, "op_index": 1},
    ])
    assert main(["render", trace, "--combined-json", combined, "--no-color"]) == 0
    assert capsys.readouterr().out == "log0(0x) (Foo.sol:2)\n"


def test_render_reports_bad_trace(tmp_path, capsys):
    trace = write_json(tmp_path / "trace.json", [{"type": "bogus"}])
    assert main(["render", trace, "--no-color"]) == 1
    assert "Unknown trace node type" in capsys.readouterr().err


def test_render_reports_out_of_range_address(tmp_path, capsys):
    trace = write_json(tmp_path / "trace.json", [{"type": "fetch_contract", "address": "0x" + "ff" * 32}])
    assert main(["render", trace, "--no-color"]) == 1
    assert "does not fit in 20 bytes" in capsys.readouterr().err


def test_render_reports_errors_as_json(tmp_path, capsys):
    assert main(["render", str(tmp_path / "missing.json"), "--json"]) == 1
    report = json.loads(capsys.readouterr().err)
    assert report["error"] is True
    assert report["type"] == "TraceFormatError"


def test_render_rejects_bad_abi_entry(trace_file, capsys):
    assert main(["render", trace_file, "--abi", "Foo"]) == 1
    assert "NAME:CODEHASH:PATH" in capsys.readouterr().err


# ============================================================================
# decode / selector
# ============================================================================

def test_decode(capsys):
    data = encode(['uint256', 'string', 'bool[]'], [5, "hi", [True, False]])
    assert main(["decode", "uint256,string,bool[]", "0x" + data.hex()]) == 0
    assert capsys.readouterr().out == '(5, "hi", [true, false])\n'


def test_decode_tuple_types(capsys):
    data = encode(['(uint8,bool)', 'address'], [(1, True), "0x" + "22" * 20])
    assert main(["decode", "(uint8,bool),address", data.hex()]) == 0
    assert capsys.readouterr().out == "((1, true), 0x" + "22" * 20 + ")\n"


def test_decode_skips_selector(capsys):
    data = calldata("bar(uint256)", ['uint256'], [42])
    assert main(["decode", "uint256", "0x" + data.hex(), "--selector"]) == 0
    assert capsys.readouterr().out == "(42)\n"


@pytest.mark.parametrize("argv", [
    ["decode", "uint256", "0x01"],
    ["decode", "uint7", "0x"],
    ["decode", "uint256", "0xzz"],
])
def test_decode_errors(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err


def test_selector(capsys):
    assert main(["selector", "transfer(address,uint256)"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "selector: 0xa9059cbb"
    assert out[1] == "topic:    0x" + keccak(text="transfer(address,uint256)").hex()


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
