# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests para TurisCore.

Ajustes clave:
- PYTHON_ENV=test antes de importar la app (EnvTestingSettings).
- Motor ASYNC sqlite+aiosqlite en memoria con StaticPool: una base nueva
  por test, creada desde la metadata única (Base.metadata).
- Fixture principal: db_session (AsyncSession, expire_on_commit=False).
- Cliente httpx con ASGITransport; la app usa la misma sesión del test,
  un AuthContext configurable y un storage falso (sin red).
- Helpers de seed para agencias, reservas, servicios, cuotas y grupales.
"""

import os
import sys
import pathlib
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

os.environ["PYTHON_ENV"] = "test"
os.environ.setdefault("FILES_ENABLED", "true")

BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.shared.database import Base

# Importar TODOS los modelos para registrarlos en Base.metadata
from app.shared.database.agency_counters import AgencyCounter  # noqa: F401
from app.modules.bookings.models import (
    Booking,
    Client,
    ClientPayment,
    Operator,
    Receipt,
    Service,
)
from app.modules.credits.models import CreditAccount, CreditEntry  # noqa: F401
from app.modules.files.models import AgencyStorageConfig, AgencyStorageUsage, FileAsset  # noqa: F401
from app.modules.groups.models import (
    TravelGroup,
    TravelGroupPassenger,
    TravelGroupPaymentTemplate,
)
from app.shared.auth_context import AuthContext

AGENCY_ID = 1
OTHER_AGENCY_ID = 2


# -----------------------------------------------------------------------------
# Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
async def db_session(engine):
    """Sesión ASYNC; rollback de lo pendiente al terminar."""
    SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


# -----------------------------------------------------------------------------
# Auth y storage falsos
# -----------------------------------------------------------------------------
@dataclass
class AuthState:
    ctx: AuthContext = field(default_factory=lambda: AuthContext(id_user=10, id_agency=AGENCY_ID, role="gerente"))

    def as_role(self, role: str, *, id_agency: int = AGENCY_ID, id_user: int = 10) -> AuthContext:
        self.ctx = AuthContext(id_user=id_user, id_agency=id_agency, role=role)
        return self.ctx


@pytest.fixture
def auth() -> AuthState:
    return AuthState()


class FakeStorage:
    """Storage en memoria: registra firmas y borrados."""

    bucket = "turiscore-test"

    def __init__(self) -> None:
        self.presigned: list[tuple[str, str, int]] = []
        self.deleted: list[str] = []
        self.fail_delete = False

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        self.presigned.append((key, content_type, expires_in))
        return f"https://storage.test/{self.bucket}/{key}?X-Amz-Expires={expires_in}"

    async def delete_object(self, key: str) -> None:
        if self.fail_delete:
            from app.modules.files.services import StorageOperationError

            raise StorageOperationError(f"delete_object {key}: boom")
        self.deleted.append(key)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


# -----------------------------------------------------------------------------
# App FastAPI y cliente httpx
# -----------------------------------------------------------------------------
@pytest.fixture(scope="session")
def app():
    """Carga la app principal **después** de setear env vars."""
    from app.main import app as fastapi_app

    return fastapi_app


@pytest.fixture
async def client(app, db_session, auth, storage):
    from app.modules.files.services import get_storage_client
    from app.shared.auth_context import get_auth_context
    from app.shared.database.database import get_async_session

    async def _session_override():
        yield db_session

    app.dependency_overrides[get_async_session] = _session_override
    app.dependency_overrides[get_auth_context] = lambda: auth.ctx
    app.dependency_overrides[get_storage_client] = lambda: storage
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as http:
            yield http
    finally:
        app.dependency_overrides.clear()


# -----------------------------------------------------------------------------
# Seed
# -----------------------------------------------------------------------------
class Seed:
    """Altas mínimas para armar escenarios; cada método hace flush+commit."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, obj: Any) -> Any:
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def client(self, *, id_agency: int = AGENCY_ID, first_name: str = "Ana") -> Client:
        return await self._save(Client(id_agency=id_agency, first_name=first_name, last_name="Pax"))

    async def operator(self, *, id_agency: int = AGENCY_ID, name: str = "Mayorista") -> Operator:
        return await self._save(Operator(id_agency=id_agency, name=name))

    async def booking(
        self,
        *,
        id_agency: int = AGENCY_ID,
        status: str = "abierta",
        travel_group_id: Optional[int] = None,
    ) -> Booking:
        return await self._save(
            Booking(id_agency=id_agency, status=status, travel_group_id=travel_group_id)
        )

    async def service(self, booking: Booking, **fields: Any) -> Service:
        fields.setdefault("currency", "USD")
        fields.setdefault("sale_price", Decimal("1000"))
        fields.setdefault("cost_price", Decimal("800"))
        return await self._save(Service(id_agency=booking.id_agency, booking_id=booking.id_booking, **fields))

    async def payment(
        self,
        booking: Booking,
        client: Client,
        *,
        amount: str = "100",
        currency: str = "USD",
        status: str = "PENDIENTE",
        due_date: date = date(2026, 11, 1),
        service_id: Optional[int] = None,
    ) -> ClientPayment:
        return await self._save(
            ClientPayment(
                id_agency=booking.id_agency,
                booking_id=booking.id_booking,
                client_id=client.id_client,
                service_id=service_id,
                amount=Decimal(amount),
                currency=currency,
                due_date=due_date,
                status=status,
            )
        )

    async def receipt(
        self,
        booking: Booking,
        *,
        amount: str = "100",
        currency: str = "USD",
        client_ids: Optional[list[int]] = None,
    ) -> Receipt:
        return await self._save(
            Receipt(
                id_agency=booking.id_agency,
                booking_id=booking.id_booking,
                receipt_number=f"R-{booking.id_booking}",
                amount=Decimal(amount),
                amount_currency=currency,
                currency=currency,
                client_ids=client_ids or [],
            )
        )

    async def group(
        self,
        *,
        id_agency: int = AGENCY_ID,
        type: str = "AGENCIA",
        status: str = "PUBLICADA",
        start_date: Optional[date] = date(2026, 12, 1),
    ) -> TravelGroup:
        return await self._save(
            TravelGroup(id_agency=id_agency, name="Bariloche 2026", type=type, status=status, start_date=start_date)
        )

    async def passenger(self, group: TravelGroup, booking: Optional[Booking], client: Optional[Client]) -> TravelGroupPassenger:
        return await self._save(
            TravelGroupPassenger(
                id_agency=group.id_agency,
                travel_group_id=group.id_travel_group,
                booking_id=booking.id_booking if booking else None,
                client_id=client.id_client if client else None,
            )
        )

    async def template(
        self,
        *,
        id_agency: int = AGENCY_ID,
        installments: Optional[list[dict]] = None,
        target_type: Optional[str] = None,
        assigned_user_ids: Optional[list[int]] = None,
        is_active: bool = True,
        name: str = "Plan 2 cuotas",
    ) -> TravelGroupPaymentTemplate:
        return await self._save(
            TravelGroupPaymentTemplate(
                id_agency=id_agency,
                name=name,
                target_type=target_type,
                is_active=is_active,
                assigned_user_ids=assigned_user_ids or [],
                installments=installments
                if installments is not None
                else [
                    {"due_in_days": 0, "amount": 500.0, "currency": "USD"},
                    {"due_in_days": 30, "amount": 500.0, "currency": "USD"},
                ],
            )
        )

    async def storage_config(
        self,
        *,
        id_agency: int = AGENCY_ID,
        enabled: bool = True,
        storage_pack_count: int = 1,
    ) -> AgencyStorageConfig:
        return await self._save(
            AgencyStorageConfig(id_agency=id_agency, enabled=enabled, storage_pack_count=storage_pack_count)
        )


@pytest.fixture
def seed(db_session) -> Seed:
    return Seed(db_session)
