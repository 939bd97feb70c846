"""Pydantic schemas for API contracts."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .vietqr_encoder import VietQROptions


class GenerateQRRequest(BaseModel):
    bank_bin: str = Field(pattern=r"^\d+$", min_length=6, max_length=8, description="Beneficiary bank BIN")
    account_number: str = Field(pattern=r"^\d+$", min_length=1, max_length=19)
    amount: int | None = Field(default=None, ge=0, description="Amount in VND; omit or 0 for a static QR")
    purpose: str | None = None
    merchant_name: str | None = None

    def to_options(self) -> VietQROptions:
        return VietQROptions(
            bank_bin=self.bank_bin,
            account_number=self.account_number,
            amount=self.amount,
            purpose=self.purpose,
            merchant_name=self.merchant_name,
        )


class GenerateQRResponse(BaseModel):
    payload: str
    crc: str
    point_of_initiation: str
    qr_png_base64: str


class VerifyRequest(BaseModel):
    payload: str = Field(min_length=1)


class VerifyResponse(BaseModel):
    crc: str
    crc_valid: bool
    point_of_initiation: str
    bank_bin: str | None = None
    account_number: str | None = None
    service_code: str | None = None
    currency: str | None = None
    amount: str | None = None
    country_code: str | None = None
    merchant_name: str | None = None
    purpose: str | None = None
