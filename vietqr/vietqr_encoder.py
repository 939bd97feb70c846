"""VietQR (NAPAS) payload encoder and decoder."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from .crc import crc16_ccitt
from .services.errors import InvalidFieldValue, InvalidPayload, MissingRequiredField
from .tlv import TLVItem, build_tlv, format_tlv, parse_tlv

logger = logging.getLogger("vietqr.encoder")

CRC_TAG = "63"
CRC_PREFIX = "6304"

POI_STATIC = "11"
POI_DYNAMIC = "12"


@dataclass(frozen=True)
class PayloadProfile:
    guid: str = "A000000727"
    service_code: str = "QRIBFTTA"
    payload_format: str = "01"
    currency: str = "704"
    country_code: str = "VN"


DEFAULT_PROFILE = PayloadProfile()


@dataclass(frozen=True)
class VietQROptions:
    bank_bin: str | None = None
    account_number: str | None = None
    amount: int | float | Decimal | str | None = None
    purpose: str | None = None
    merchant_name: str | None = None


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str
    point_of_initiation: str


@dataclass(frozen=True)
class DecodedPayload:
    point_of_initiation: str
    bank_bin: str | None
    account_number: str | None
    service_code: str | None
    currency: str | None
    amount: str | None
    country_code: str | None
    merchant_name: str | None
    purpose: str | None
    crc: str
    crc_valid: bool

    @property
    def is_dynamic(self) -> bool:
        return self.point_of_initiation == POI_DYNAMIC


def format_amount(amount: int | float | Decimal | str | None) -> str | None:
    """Render amount as plain decimal text; ``None`` for absent or zero."""

    if amount is None or amount == "":
        return None
    if isinstance(amount, bool):
        raise InvalidFieldValue("amount", "Amount must be a number")
    try:
        value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidFieldValue("amount", f"Amount {amount!r} is not a number") from exc
    if not value.is_finite():
        raise InvalidFieldValue("amount", "Amount must be finite")
    if value < 0:
        raise InvalidFieldValue("amount", "Amount must not be negative")
    if value == 0:
        return None
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def merchant_account_info(options: VietQROptions, profile: PayloadProfile = DEFAULT_PROFILE) -> TLVItem:
    """Tag 38: GUID, beneficiary (BIN + account) and service code."""

    beneficiary = (
        TLVItem(tag="00", value=options.bank_bin),
        TLVItem(tag="01", value=options.account_number),
    )
    return TLVItem(
        tag="38",
        value=(
            TLVItem(tag="00", value=profile.guid),
            TLVItem(tag="01", value=beneficiary),
            TLVItem(tag="02", value=profile.service_code),
        ),
    )


def _require(options: VietQROptions) -> None:
    if not options.bank_bin:
        raise MissingRequiredField("bank_bin", "Bank BIN and account number are required")
    if not options.account_number:
        raise MissingRequiredField("account_number", "Bank BIN and account number are required")


def payload_items(options: VietQROptions, profile: PayloadProfile = DEFAULT_PROFILE) -> list[TLVItem]:
    """Top-level fields in NAPAS order, without the checksum."""

    _require(options)
    amount = format_amount(options.amount)
    return [
        TLVItem(tag="00", value=profile.payload_format),
        TLVItem(tag="01", value=POI_DYNAMIC if amount else POI_STATIC),
        merchant_account_info(options, profile),
        TLVItem(tag="53", value=profile.currency),
        TLVItem(tag="54", value=amount),
        TLVItem(tag="58", value=profile.country_code),
        TLVItem(tag="59", value=options.merchant_name),
        TLVItem(tag="62", value=(TLVItem(tag="08", value=options.purpose),)),
    ]


def encode_payload(options: VietQROptions, profile: PayloadProfile = DEFAULT_PROFILE) -> EncodedPayload:
    """Assemble all fields and append the CRC16 checksum field."""

    items = payload_items(options, profile)
    point_of_initiation = next(str(item.value) for item in items if item.tag == "01")
    payload_no_crc = build_tlv(items)
    crc = crc16_ccitt(f"{payload_no_crc}{CRC_PREFIX}")
    final_payload = f"{payload_no_crc}{format_tlv(CRC_TAG, crc)}"
    logger.debug("payload encoded", extra={"crc": crc, "length": len(final_payload)})
    return EncodedPayload(payload=final_payload, crc=crc, point_of_initiation=point_of_initiation)


def build_payload(options: VietQROptions, profile: PayloadProfile = DEFAULT_PROFILE) -> str:
    return encode_payload(options, profile).payload


def verify_payload(payload: str) -> bool:
    """Check that the trailing checksum matches the rest of the payload."""

    if len(payload) < 8 or payload[-8:-4] != CRC_PREFIX:
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:]


def _sub_fields(value: str) -> dict[str, str]:
    return {item.tag: item.value for item in parse_tlv(value)}  # type: ignore[misc]


def decode_payload(payload: str) -> DecodedPayload:
    """Parse a VietQR string back into its beneficiary and transaction fields."""

    try:
        fields = _sub_fields(payload)
        account_info = _sub_fields(fields.get("38", ""))
        beneficiary = _sub_fields(account_info.get("01", ""))
        additional = _sub_fields(fields.get("62", ""))
    except ValueError as exc:
        raise InvalidPayload(str(exc)) from exc

    crc = fields.get(CRC_TAG)
    if crc is None or len(crc) != 4:
        raise InvalidPayload("Checksum field (tag 63) missing")
    if "01" not in fields:
        raise InvalidPayload("Point of initiation method (tag 01) missing")

    return DecodedPayload(
        point_of_initiation=fields["01"],
        bank_bin=beneficiary.get("00"),
        account_number=beneficiary.get("01"),
        service_code=account_info.get("02"),
        currency=fields.get("53"),
        amount=fields.get("54"),
        country_code=fields.get("58"),
        merchant_name=fields.get("59"),
        purpose=additional.get("08"),
        crc=crc,
        crc_valid=verify_payload(payload),
    )
