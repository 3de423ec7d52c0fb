# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/models.py

Modelos ORM del lado comercial consumidos por finanzas, grupales y
archivos: reservas, clientes, operadores, servicios, recibos y cuotas.

Los importes son NUMERIC(18,2) y se leen como Decimal. Los campos
derivados de comisión (bases gravadas, comisión por alícuota, IVA sobre
comisión) NO se persisten: se calculan al leer (ver finance.commission).

Autor: TurisCore
Fecha: 2026-09-05
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, JSONType, Money
from app.shared.utils.time_utils import utcnow
from .enums import ClientPaymentStatus


class Client(Base):
    """Pasajero / cliente de la agencia."""

    __tablename__ = "clients"

    id_client: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Client id={self.id_client} agency={self.id_agency}>"


class Operator(Base):
    """Operador / proveedor mayorista."""

    __tablename__ = "operators"

    id_operator: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False, default="")


class Booking(Base):
    """
    Reserva (file). `status == "bloqueada"` congela cambios para roles no
    administrativos. `travel_group_id` la vincula a una grupal.
    """

    __tablename__ = "bookings"

    id_booking: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    id_user: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="abierta")
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    travel_group_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Booking id={self.id_booking} agency={self.id_agency} status={self.status}>"


class Service(Base):
    """
    Servicio vendido dentro de una reserva.

    Campos fiscales declarados por el operador: tax_21, tax_105 (IVA
    facturado), exempt, other_taxes. Interés de tarjeta: raw
    (card_interest) y, si se conoce, su split gravado/IVA.
    """

    __tablename__ = "services"

    id_service: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id_booking", ondelete="CASCADE"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    currency: Mapped[str] = mapped_column(String(16), nullable=False, default="ARS")

    sale_price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    cost_price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    tax_21: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    tax_105: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    exempt: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    other_taxes: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

    card_interest: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    taxable_card_interest: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    vat_on_card_interest: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

    transfer_fee_pct: Mapped[Optional[Decimal]] = mapped_column(Numeric(9, 6), nullable=True)
    transfer_fee_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    extra_costs_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    extra_taxes_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

    def __repr__(self) -> str:
        return f"<Service id={self.id_service} booking={self.booking_id} {self.currency} {self.sale_price}>"


class Receipt(Base):
    """
    Recibo de cobro. Inmutable en importe una vez emitido.

    Si el cobro se hizo en otra moneda, counter_amount/counter_currency
    guardan el contravalor aplicado a la deuda de la reserva.
    """

    __tablename__ = "receipts"

    id_receipt: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_receipt_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    receipt_number: Mapped[str] = mapped_column(String(64), nullable=False)
    issue_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    booking_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bookings.id_booking"), nullable=True, index=True)

    concept: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    amount_string: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    amount_currency: Mapped[str] = mapped_column(String(16), nullable=False, default="ARS")
    currency: Mapped[str] = mapped_column(String(16), nullable=False, default="ARS")
    counter_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    counter_currency: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    payment_fee_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    payment_fee_currency: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    payment_method_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    account_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    service_ids: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)
    client_ids: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Receipt {self.receipt_number} {self.currency} {self.amount}>"


class ClientPayment(Base):
    """Cuota a cobrar a un cliente dentro de una reserva."""

    __tablename__ = "client_payments"

    id_client_payment: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_client_payment_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id_booking"), nullable=False, index=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id_client"), nullable=False, index=True)
    service_id: Mapped[Optional[int]] = mapped_column(ForeignKey("services.id_service"), nullable=True)

    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(String(16), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ClientPaymentStatus.PENDIENTE.value, index=True)
    status_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    receipt_id: Mapped[Optional[int]] = mapped_column(ForeignKey("receipts.id_receipt"), nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return (
            f"<ClientPayment id={self.id_client_payment} booking={self.booking_id} "
            f"client={self.client_id} {self.currency} {self.amount} {self.status}>"
        )


class ClientPaymentAudit(Base):
    """
    Bitácora append-only de transiciones de una cuota.
    Nunca se actualiza ni se borra desde la aplicación.
    """

    __tablename__ = "client_payment_audits"

    id_audit: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_payment_id: Mapped[int] = mapped_column(
        ForeignKey("client_payments.id_client_payment", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    from_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    to_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    changed_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)


__all__ = [
    "Client",
    "Operator",
    "Booking",
    "Service",
    "Receipt",
    "ClientPayment",
    "ClientPaymentAudit",
]
# Fin del archivo backend/app/modules/bookings/models.py
