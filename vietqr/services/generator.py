"""VietQR generation service."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import settings
from ..monitoring import record_payload_generated
from ..renderer import render_qr_payload
from ..vietqr_encoder import DEFAULT_PROFILE, EncodedPayload, PayloadProfile, VietQROptions, encode_payload

logger = logging.getLogger("vietqr.generator")


@dataclass(slots=True)
class GenerateResult:
    encoded: EncodedPayload
    qr_png_bytes: bytes
    qr_png_base64: str

    @property
    def payload(self) -> str:
        return self.encoded.payload

    @property
    def crc(self) -> str:
        return self.encoded.crc


class VietQRGenerator:
    def __init__(self, profile: PayloadProfile = DEFAULT_PROFILE, title: str | None = None):
        self.profile = profile
        self.title = title or settings.app_name

    def encode(self, options: VietQROptions) -> EncodedPayload:
        encoded = encode_payload(options, self.profile)
        record_payload_generated(encoded.point_of_initiation, len(encoded.payload))
        logger.info(
            "payload generated",
            extra={
                "bank_bin": options.bank_bin,
                "point_of_initiation": encoded.point_of_initiation,
                "crc": encoded.crc,
            },
        )
        return encoded

    def create(self, options: VietQROptions) -> GenerateResult:
        encoded = self.encode(options)
        render = render_qr_payload(encoded.payload, title=self.title)
        return GenerateResult(
            encoded=encoded,
            qr_png_bytes=render["png_bytes"],
            qr_png_base64=render["png_base64"],
        )
