"""Verification of scanned VietQR payloads."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..vietqr_encoder import DecodedPayload, decode_payload
from .errors import InvalidPayload

logger = logging.getLogger("vietqr.verify")


@dataclass(slots=True)
class VerifyResult:
    payload: str
    decoded: DecodedPayload

    @property
    def crc_valid(self) -> bool:
        return self.decoded.crc_valid


class PayloadVerifier:
    def verify(self, payload: str) -> VerifyResult:
        payload = payload.strip()
        if not payload:
            raise InvalidPayload("Payload is empty")

        decoded = decode_payload(payload)
        if not decoded.crc_valid:
            logger.warning("checksum mismatch", extra={"crc": decoded.crc})
        return VerifyResult(payload=payload, decoded=decoded)
