#!/usr/bin/env python3
"""
SeerOps - Answer Question
Submits an answer to a Reality.eth question, posting the bond in the chain's
native coin.

Usage:
    python answer_question.py --question-id 0x... --answer-index 0 --bond 10       # categorical
    python answer_question.py --question-id 0x... --answer-index INVALID --bond 10
    python answer_question.py --question-id 0x... --answer-value 5000 --bond 10    # scalar
"""

from web3 import Web3

from chain_client import to_raw
from cli_common import add_chain_arg, make_client, new_parser, resolve_chain, run_script
from errors import ValidationError
from markets import ANSWERED_TOO_SOON, INVALID_ANSWER
from seer_abi import REALITY_ETH_ABI

TAG = "ANSWER"

SPECIAL_ANSWERS = {
    "INVALID": INVALID_ANSWER,
    "ANSWERED_TOO_SOON": ANSWERED_TOO_SOON,
}


def parse_args(argv=None):
    parser = new_parser("Submit an answer to a Reality.eth question.")
    parser.add_argument("--question-id", required=True, help="bytes32 question id")
    parser.add_argument("--bond", required=True, help="Bond in native units")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--answer-index", help="Outcome index, INVALID or ANSWERED_TOO_SOON")
    group.add_argument("--answer-value", help="Numeric answer for scalar questions")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def _pad_int(value: str) -> str:
    try:
        number = int(value)
    except ValueError as e:
        raise ValidationError(f"Answer must be an integer, got {value!r}") from e
    if number < 0 or number >= 2 ** 256:
        raise ValidationError(f"Answer out of range: {value}")
    return "0x" + format(number, "064x")


def encode_answer(answer_index: str = None, answer_value: str = None) -> str:
    """bytes32 answer as 0x-hex."""
    if answer_index is not None:
        special = SPECIAL_ANSWERS.get(answer_index.upper())
        return special if special else _pad_int(answer_index)
    if answer_value is not None:
        return _pad_int(answer_value)
    raise ValidationError("Provide --answer-index (categorical) or --answer-value (scalar)")


def parse_question_id(value: str) -> bytes:
    try:
        raw = Web3.to_bytes(hexstr=value)
    except ValueError as e:
        raise ValidationError(f"Invalid --question-id: {value}") from e
    if len(raw) != 32:
        raise ValidationError(f"--question-id must be 32 bytes, got {len(raw)}")
    return raw


def answer(args) -> int:
    answer_hex = encode_answer(args.answer_index, args.answer_value)
    question_id = parse_question_id(args.question_id)
    bond = to_raw(args.bond, 18)
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    reality = client.contract(chain.contracts["REALITY_ETH"], REALITY_ETH_ABI)

    print(f"[{TAG}] Submitting answer {answer_hex} with {args.bond} {chain.native_symbol} bond...")
    tx_func = reality.functions.submitAnswer(question_id, Web3.to_bytes(hexstr=answer_hex), 0)
    client.transact(tx_func, value=bond, label="submitAnswer")
    print(f"[{TAG}] Answer submitted. Timeout starts now (~3.5 days).")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: answer(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
