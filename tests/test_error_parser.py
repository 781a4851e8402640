"""Tests for transaction error decoding."""

from interfaces.core import Platform
from utils.error_parser import ErrorParser, parse_transaction_error


def test_instruction_error_custom():
    parsed = parse_transaction_error(
        "InstructionError((3, Tagged(Custom(InstructionErrorCustom(6002)))))"
    )

    assert parsed.code == 6002
    assert parsed.name == "TooMuchSolRequired"
    assert parsed.is_slippage
    assert parsed.platform is Platform.PUMP_FUN
    assert parsed.describe().startswith("TooMuchSolRequired (6002): slippage")


def test_hex_program_error():
    parsed = parse_transaction_error("Program failed: custom program error: 0x1775")

    assert parsed.code == 6005
    assert parsed.name == "BondingCurveComplete"
    assert not parsed.is_slippage


def test_json_custom_error():
    parsed = parse_transaction_error('{"InstructionError":[2,{"Custom": 6003}]}')
    assert parsed.name == "TooLittleSolReceived"


def test_unknown_code_keeps_original_text():
    parsed = parse_transaction_error("Custom(7000)")

    assert parsed.code == 7000
    assert parsed.name is None
    assert parsed.describe() == "Custom(7000)"


def test_plain_text():
    parsed = parse_transaction_error("Blockhash not found")
    assert parsed.code is None
    assert parsed.describe() == "Blockhash not found"


def test_empty_error():
    assert parse_transaction_error(None).describe() == "Unknown error"


def test_custom_error_table():
    parser = ErrorParser({42: ("Answer", "the answer")})
    assert parser.parse_error("Custom(42)").describe() == "Answer (42): the answer"
