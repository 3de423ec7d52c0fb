# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/schemas.py

Esquemas Pydantic de grupales.

Los bodies de operaciones masivas conservan los nombres que envía el
cliente web (passengerIds, replacePending, createReceipts, ...). Se
aceptan también en snake_case.

Los ítems de cuotas manuales se reciben laxos (strings o números) y los
normaliza el servicio, que responde con códigos GROUP_* propios.

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.modules.finance.currency import resolve_currency
from app.modules.finance.schemas import MoneyIn, MoneyOut


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Plan de pagos masivo
# ---------------------------------------------------------------------------
class InstallmentIn(_RequestModel):
    due_date: Optional[str] = None
    amount: Any = None
    currency: Optional[str] = None
    service_id: Optional[int] = None


class PaymentPlanRequest(_RequestModel):
    passenger_ids: Optional[list[Any]] = Field(default=None, alias="passengerIds")
    installments: Optional[list[InstallmentIn]] = None
    template_id: Optional[int] = Field(default=None, alias="templateId")
    replace_pending: bool = Field(default=False, alias="replacePending")
    template_base_date: Optional[str] = None


class PaymentPlanResponse(BaseModel):
    ok: bool = True
    created_count: int
    cancelled_pending_count: int
    passengers_count: int
    installments_per_passenger: int
    template_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Cobro masivo
# ---------------------------------------------------------------------------
class CollectRequest(_RequestModel):
    payment_ids: Optional[list[Any]] = Field(default=None, alias="paymentIds")
    passenger_ids: Optional[list[Any]] = Field(default=None, alias="passengerIds")
    create_receipts: bool = Field(default=True, alias="createReceipts")
    issue_date: Optional[str] = None
    concept: Optional[str] = Field(default=None, max_length=200)
    amount_string: Optional[str] = Field(default=None, alias="amountString", max_length=200)
    payment_fee_amount: Any = None
    payment_method_id: Optional[int] = None
    account_id: Optional[int] = None


class CollectBucketOut(BaseModel):
    booking_id: int
    client_id: int
    currency: str
    receipt_id: Optional[int] = None
    payment_ids: list[int]


class CollectResponse(BaseModel):
    ok: bool = True
    settled_count: int
    receipts_count: int
    buckets: list[CollectBucketOut]


# ---------------------------------------------------------------------------
# Plantillas de pago
# ---------------------------------------------------------------------------
class TemplateInstallmentIn(BaseModel):
    due_in_days: int = Field(ge=0, le=3650)
    amount: MoneyIn = Field(gt=0)
    currency: str = Field(min_length=1, max_length=16)

    @field_validator("currency")
    @classmethod
    def _iso_currency(cls, value: str) -> str:
        code = resolve_currency(value)
        if code is None:
            raise ValueError(f"moneda inválida: {value}")
        return code


class TemplateInstallmentOut(BaseModel):
    due_in_days: int
    amount: MoneyOut
    currency: str


class PaymentTemplateCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=400)
    target_type: Optional[str] = None
    payment_mode: Optional[str] = Field(default=None, max_length=60)
    is_active: bool = True
    assigned_user_ids: list[int] = Field(default_factory=list)
    installments: list[TemplateInstallmentIn] = Field(min_length=1, max_length=60)
    metadata: Optional[dict[str, Any]] = None


class PaymentTemplateUpdateRequest(BaseModel):
    """Solo se aplican los campos presentes en el body."""

    name: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = Field(default=None, max_length=400)
    target_type: Optional[str] = None
    payment_mode: Optional[str] = Field(default=None, max_length=60)
    is_active: Optional[bool] = None
    assigned_user_ids: Optional[list[int]] = None
    installments: Optional[list[TemplateInstallmentIn]] = Field(default=None, min_length=1, max_length=60)
    metadata: Optional[dict[str, Any]] = None


class PaymentTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_travel_group_payment_template: int
    agency_travel_group_payment_template_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    target_type: Optional[str] = None
    payment_mode: Optional[str] = None
    is_active: bool
    is_preloaded: bool
    assigned_user_ids: list[int] = Field(default_factory=list)
    installments: list[TemplateInstallmentOut] = Field(default_factory=list)
    # la columna "metadata" se mapea al atributo ORM `extra`
    metadata: Optional[dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("extra", "metadata"),
    )
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PaymentTemplateListResponse(BaseModel):
    items: list[PaymentTemplateOut]


class OkResponse(BaseModel):
    ok: bool = True


__all__ = [
    "InstallmentIn",
    "PaymentPlanRequest",
    "PaymentPlanResponse",
    "CollectRequest",
    "CollectBucketOut",
    "CollectResponse",
    "TemplateInstallmentIn",
    "TemplateInstallmentOut",
    "PaymentTemplateCreateRequest",
    "PaymentTemplateUpdateRequest",
    "PaymentTemplateOut",
    "PaymentTemplateListResponse",
    "OkResponse",
]
# Fin del archivo backend/app/modules/groups/schemas.py
