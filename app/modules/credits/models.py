# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/models.py

Modelos ORM de la cuenta corriente.

Invariante: CreditAccount.balance == Σ CreditEntry.amount de la cuenta.
El importe del movimiento se guarda CON signo (ver enums.DOC_SIGN); el
saldo se mueve siempre en la misma unidad de trabajo que el movimiento.

Autor: TurisCore
Fecha: 2026-09-07
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, Money
from app.shared.utils.time_utils import utcnow
from .enums import CreditSubjectType


class CreditAccount(Base):
    """
    Cuenta corriente por (agencia, titular, moneda).

    Titular: client_id XOR operator_id. El saldo es denormalizado para
    lectura rápida y solo lo mueve CreditEntryService.
    """

    __tablename__ = "credit_accounts"

    id_credit_account: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_credit_account_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    client_id: Mapped[Optional[int]] = mapped_column(ForeignKey("clients.id_client"), nullable=True, index=True)
    operator_id: Mapped[Optional[int]] = mapped_column(ForeignKey("operators.id_operator"), nullable=True, index=True)
    currency: Mapped[str] = mapped_column(String(16), nullable=False)
    balance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    credit_limit: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def subject_type(self) -> str:
        return CreditSubjectType.CLIENT.value if self.client_id is not None else CreditSubjectType.OPERATOR.value

    def __repr__(self) -> str:
        return (
            f"<CreditAccount id={self.id_credit_account} agency={self.id_agency} "
            f"{self.subject_type} {self.currency} balance={self.balance}>"
        )


class CreditEntry(Base):
    """
    Movimiento de cuenta corriente (importe con signo).

    Un movimiento vinculado a otro documento (reserva, recibo, inversión,
    vencimiento de operador) no puede borrarse desde acá: se revierte
    desde el flujo original.
    """

    __tablename__ = "credit_entries"

    id_entry: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_credit_entry_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("credit_accounts.id_credit_account", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    value_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    concept: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(String(16), nullable=False)
    doc_type: Mapped[str] = mapped_column(String(32), nullable=False, default="manual")
    reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    booking_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bookings.id_booking"), nullable=True)
    receipt_id: Mapped[Optional[int]] = mapped_column(ForeignKey("receipts.id_receipt"), nullable=True)
    investment_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    operator_due_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    account: Mapped[CreditAccount] = relationship(CreditAccount, lazy="joined")

    @property
    def is_linked(self) -> bool:
        return any(
            v is not None
            for v in (self.booking_id, self.receipt_id, self.investment_id, self.operator_due_id)
        )

    def __repr__(self) -> str:
        return f"<CreditEntry id={self.id_entry} account={self.account_id} {self.currency} {self.amount}>"


__all__ = ["CreditAccount", "CreditEntry"]
# Fin del archivo backend/app/modules/credits/models.py
