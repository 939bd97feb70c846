"""Command line VietQR generator."""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from .logging_conf import configure_logging
from .renderer import save_qr_image
from .services.errors import ServiceError
from .services.generator import VietQRGenerator
from .vietqr_encoder import VietQROptions

logger = logging.getLogger("vietqr.cli")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

EPILOG = """\
examples:
  vietqr 970436 1234567890 25000 "Thanh toan don hang" "My Store" dynamic.png
  vietqr 970415 0987654321 0 "" "Nguyen Van A" static.png
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vietqr",
        description="Generate a VietQR payment code image.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("bank_bin", help="6-digit BIN of the beneficiary bank")
    parser.add_argument("account_number", help="beneficiary account number")
    parser.add_argument("amount", help="transaction amount in VND, 0 for a static QR")
    parser.add_argument("purpose", help='transaction purpose, "" to omit')
    parser.add_argument("merchant_name", help='beneficiary or merchant name, "" to omit')
    parser.add_argument("output", type=Path, help="output PNG file, e.g. my-qr.png")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: %(default)s)")
    return parser


def parse_amount(text: str) -> int | None:
    """Leading integer of ``text``; anything not positive means a static QR."""

    match = _LEADING_INT.match(text)
    if not match:
        return None
    amount = int(match.group(1))
    return amount if amount > 0 else None


def options_from_args(args: argparse.Namespace) -> VietQROptions:
    return VietQROptions(
        bank_bin=args.bank_bin,
        account_number=args.account_number,
        amount=parse_amount(args.amount),
        purpose=args.purpose or None,
        merchant_name=args.merchant_name or None,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    if not (sys.argv[1:] if argv is None else argv):
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level.upper(), json_logs=False)

    generator = VietQRGenerator()
    try:
        encoded = generator.encode(options_from_args(args))
        print(f"Generated Payload: {encoded.payload}")
        output = save_qr_image(encoded.payload, args.output.resolve(), title=generator.title)
    except ServiceError as exc:
        logger.debug("generation failed", extra={"code": exc.code})
        print(f"Failed to generate QR code: {exc.message}", file=sys.stderr)
        return 1

    print(f"QR code successfully saved to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
