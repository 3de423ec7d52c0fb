# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/schemas.py

Esquemas Pydantic de la cuenta corriente.

Los requests validan forma (tipos y rango Numeric(18,2) de importes);
las reglas de negocio (signo, titular, moneda de la cuenta) las aplican
CreditEntryService y CreditAccountService con códigos de error propios.

Autor: TurisCore
Fecha: 2026-09-07
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.finance.schemas import MoneyIn, MoneyOut


class CreditEntryCreateRequest(BaseModel):
    """
    Alta de movimiento. `amount` se informa positivo; el signo lo pone
    el doc_type. Cuenta por `account_id` o por titular + moneda.
    """

    account_id: Optional[int] = Field(default=None, gt=0)
    client_id: Optional[int] = Field(default=None, gt=0)
    operator_id: Optional[int] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, max_length=16)
    amount: Optional[MoneyIn] = None
    concept: Optional[str] = Field(default=None, max_length=2000)
    doc_type: Optional[str] = Field(default=None, max_length=32)
    value_date: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    reference: Optional[str] = Field(default=None, max_length=255)
    booking_id: Optional[int] = Field(default=None, gt=0)
    receipt_id: Optional[int] = Field(default=None, gt=0)
    investment_id: Optional[int] = Field(default=None, gt=0)
    operator_due_id: Optional[int] = Field(default=None, gt=0)


class CreditEntryUpdateRequest(BaseModel):
    """
    Edición de metadatos. Solo los campos presentes en el body se tocan;
    `value_date: null` limpia la fecha valor.
    """

    model_config = ConfigDict(extra="ignore")

    concept: Optional[str] = Field(default=None, max_length=2000)
    value_date: Optional[str] = None
    doc_type: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=255)


class CreditAccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_credit_account: int
    agency_credit_account_id: Optional[int] = None
    subject_type: str
    client_id: Optional[int] = None
    operator_id: Optional[int] = None
    currency: str
    balance: MoneyOut
    credit_limit: Optional[MoneyOut] = None
    enabled: bool


class CreditEntryBaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_entry: int
    agency_credit_entry_id: Optional[int] = None
    account_id: int
    created_at: datetime
    value_date: Optional[date] = None
    concept: str
    amount: MoneyOut
    currency: str
    doc_type: str
    reference: Optional[str] = None
    booking_id: Optional[int] = None
    receipt_id: Optional[int] = None
    investment_id: Optional[int] = None
    operator_due_id: Optional[int] = None
    created_by: Optional[int] = None


class CreditEntryOut(CreditEntryBaseOut):
    account: Optional[CreditAccountOut] = None


class CreditEntryListResponse(BaseModel):
    items: list[CreditEntryOut]
    next_cursor: Optional[int] = None


class CreditEntryDeleteResponse(BaseModel):
    message: str
    id_entry: int
    account_id: int
    balance: MoneyOut


class CreditAccountCreateRequest(BaseModel):
    """
    Alta de cuenta para un titular (pax XOR operador) y moneda.
    `initial_balance` se registra como movimiento de apertura.
    """

    client_id: Optional[int] = Field(default=None, gt=0)
    operator_id: Optional[int] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, max_length=16)
    enabled: Optional[bool] = None
    initial_balance: Optional[MoneyIn] = None
    credit_limit: Optional[MoneyIn] = Field(default=None, ge=0)


class CreditAccountUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: Optional[bool] = None
    credit_limit: Optional[MoneyIn] = Field(default=None, ge=0)


class CreditAccountAdjustRequest(BaseModel):
    """Lleva el saldo a `target_balance` con un único movimiento compensatorio."""

    target_balance: Optional[MoneyIn] = None
    reason: Optional[str] = Field(default=None, max_length=1000)
    value_date: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    reference: Optional[str] = Field(default=None, max_length=255)


class CreditAccountDetailOut(CreditAccountOut):
    created_at: datetime
    updated_at: datetime
    recent_entries: list[CreditEntryBaseOut] = Field(default_factory=list)


class CreditAccountListResponse(BaseModel):
    items: list[CreditAccountOut]
    next_cursor: Optional[int] = None


class CreditAccountAdjustResponse(BaseModel):
    changed: bool
    account: CreditAccountOut
    entry: Optional[CreditEntryBaseOut] = None
    previous_balance: MoneyOut
    target_balance: MoneyOut
    delta: MoneyOut


class CreditAccountDeleteResponse(BaseModel):
    message: str
    id_credit_account: int


__all__ = [
    "CreditEntryCreateRequest",
    "CreditEntryUpdateRequest",
    "CreditAccountOut",
    "CreditEntryBaseOut",
    "CreditEntryOut",
    "CreditEntryListResponse",
    "CreditEntryDeleteResponse",
    "CreditAccountCreateRequest",
    "CreditAccountUpdateRequest",
    "CreditAccountAdjustRequest",
    "CreditAccountDetailOut",
    "CreditAccountListResponse",
    "CreditAccountAdjustResponse",
    "CreditAccountDeleteResponse",
]
# Fin del archivo backend/app/modules/credits/schemas.py
