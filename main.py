"""
otplab – entry point.

Prints every stage of the TOTP pipeline (time, counter, HMAC, dynamic
truncation, code) and verifies codes against a drift window.

Usage
-----
    python main.py generate --secret JBSWY3DPEHPK3PXP
    python main.py verify 123456 --secret JBSWY3DPEHPK3PXP --window 1
    python main.py secret --length 20

Or, if installed as a package:
    otplab generate
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from otplab.clock import TimeManager
from otplab.codec import (
    SecretFormat,
    base32_encode,
    bytes_to_hex,
    decode_secret,
    format_otp,
    generate_secret,
)
from otplab.config import DEFAULT_DIGITS, DEFAULT_STEP, DEFAULT_WINDOW, TOTPConfig
from otplab.errors import OTPError
from otplab.totp import TOTPResult, VerifyResult, generate, verify

logger = logging.getLogger("otplab")

DEMO_SECRET = "JBSWY3DPEHPK3PXP"


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ── Bootstrap ─────────────────────────────────────────────────────────────────

def _build_config(args: argparse.Namespace) -> TOTPConfig:
    """Turn CLI flags into a :class:`TOTPConfig`."""
    fmt = SecretFormat.HEX if args.hex else SecretFormat.BASE32
    secret = decode_secret(args.secret, fmt)
    tm = TimeManager(step=args.step, time_offset=args.offset)
    if args.time is not None:
        tm.freeze_at(args.time)
    return TOTPConfig(secret, algorithm=args.algorithm, digits=args.digits, time_manager=tm)


# ── Rendering ─────────────────────────────────────────────────────────────────

def _print_result(config: TOTPConfig, result: TOTPResult) -> None:
    state = config.time_manager.state()
    t = result.truncation
    print("Time")
    print(f"  unix time   {result.timestamp}")
    print(f"  step        {state.step}s (offset {state.time_offset:+d}s)")
    print(f"  counter     {result.counter}")
    print(f"  remaining   {state.time_remaining}s" + ("  [frozen]" if state.is_frozen else ""))
    print("Secret")
    print(f"  base32      {base32_encode(config.secret)}")
    print(f"  hex         {bytes_to_hex(config.secret)}")
    print(f"HMAC-{result.algorithm.value}")
    print(f"  message     {result.counter_bytes_hex}")
    print(f"  digest      {result.digest_hex}")
    print("Dynamic truncation")
    print(f"  offset      {t.offset} (last byte 0x{result.digest[-1]:02x} & 0x0f)")
    print(f"  bytes       {t.selected_bytes_hex}")
    print(f"  binary      {t.binary_value} (0x{t.binary_value:08x})")
    print(f"  masked      {t.masked_value} (0x{t.masked_value:08x})")
    print(f"  mod 10^{result.digits:<3} {int(result.otp)}")
    print(f"OTP  {format_otp(result.otp)}")


def _print_verification(result: VerifyResult) -> None:
    for check in result.checks:
        code = check.otp if check.otp is not None else "-" * 6
        marks = []
        if check.current:
            marks.append("current")
        if check.matched:
            marks.append("MATCH")
        print(f"  counter {check.counter:>12}  {code}  {' '.join(marks)}".rstrip())
    if result.valid:
        print(f"valid (counter {result.matched_counter})")
    else:
        print("invalid")


# ── Commands ──────────────────────────────────────────────────────────────────

def generate_command(args: argparse.Namespace) -> int:
    config = _build_config(args)
    result = generate(config)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(config, result)
    return 0


def verify_command(args: argparse.Namespace) -> int:
    config = _build_config(args)
    candidate = args.otp.strip()
    if len(candidate) != config.digits or not candidate.isdigit():
        print(f"error: please enter a {config.digits}-digit OTP", file=sys.stderr)
        return 2
    result = verify(config, candidate, window=args.window)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_verification(result)
    logger.info("Verification %s", "succeeded" if result.valid else "failed")
    return 0 if result.valid else 1


def secret_command(args: argparse.Namespace) -> int:
    raw = generate_secret(args.length)
    print(f"base32  {base32_encode(raw)}")
    print(f"hex     {bytes_to_hex(raw)}")
    return 0


# ── Main ──────────────────────────────────────────────────────────────────────

def _add_totp_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--secret",
        "-s",
        default=DEMO_SECRET,
        help=f"Secret, Base32 unless --hex is given (default: {DEMO_SECRET})",
    )
    parser.add_argument("--hex", action="store_true", help="Secret is hex encoded")
    parser.add_argument(
        "--algorithm",
        "-a",
        default="SHA1",
        help="HMAC algorithm: SHA1, SHA256 or SHA512 (default: SHA1)",
    )
    parser.add_argument(
        "--digits",
        "-d",
        type=int,
        default=DEFAULT_DIGITS,
        help=f"Number of digits in the code (default: {DEFAULT_DIGITS})",
    )
    parser.add_argument(
        "--step",
        type=int,
        default=DEFAULT_STEP,
        help=f"Time step in seconds (default: {DEFAULT_STEP})",
    )
    parser.add_argument(
        "--time",
        "-t",
        type=int,
        default=None,
        help="Freeze the clock at this Unix time",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Seconds added to the real clock (default: 0)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otplab",
        description="Step-by-step TOTP (RFC 6238) generator and verifier",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser(
        "generate",
        aliases=["gen"],
        help="Generate the current code and show how it was derived",
    )
    _add_totp_options(gen_parser)

    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a code against the current counter ± window",
    )
    verify_parser.add_argument("otp", help="Code to verify")
    verify_parser.add_argument(
        "--window",
        "-w",
        type=int,
        default=DEFAULT_WINDOW,
        help=f"Counters checked on either side (default: {DEFAULT_WINDOW})",
    )
    _add_totp_options(verify_parser)

    secret_parser = subparsers.add_parser("secret", help="Generate a random secret")
    secret_parser.add_argument(
        "--length",
        "-l",
        type=int,
        default=20,
        help="Secret length in bytes (default: 20)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "generate": generate_command,
        "gen": generate_command,
        "verify": verify_command,
        "secret": secret_command,
    }
    try:
        return commands[args.command](args)
    except OTPError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
