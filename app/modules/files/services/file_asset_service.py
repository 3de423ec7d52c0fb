# -*- coding: utf-8 -*-
"""
backend/app/modules/files/services/file_asset_service.py

Ciclo de vida de archivos adjuntos (reserva, pax o servicio).

Flujo de subida:
1. POST prepara: valida destino, nombre, MIME y tamaño, rol, pertenencia
   a la agencia y bloqueo de la reserva; purga pending vencidos; proyecta
   el cupo; emite URL PUT prefirmada y crea la fila `pending`.
2. El navegador sube el objeto directo al bucket.
3. PATCH {action: "confirm"} pasa la fila a `active` y suma el tamaño al
   uso de almacenamiento y transferencia del mes (idempotente).

La baja borra el objeto (si el bucket falla se loguea y se sigue), la
fila y descuenta el uso si el archivo estaba activo.

Autor: TurisCore
Fecha: 2026-09-11
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.models import Booking
from app.modules.bookings.repositories import BookingRepository, ClientRepository, ServiceRepository
from app.modules.files.enums import ALLOWED_FILE_MIME, FileStatus, FileTarget
from app.modules.files.models import FileAsset
from app.modules.files.repositories import file_asset_repository, storage_usage_repository
from app.modules.files.schemas import FileUploadRequest
from app.modules.files.utils import build_storage_key
from app.observability.collectors import file_pending_purged_total
from app.shared.auth_context import AuthContext
from app.shared.config import settings as app_settings
from app.shared.database import next_agency_counter, transactional
from app.shared.permissions import Action, can
from app.shared.utils.http_exceptions import (
    BadRequestException,
    ForbiddenException,
    InternalServerException,
    NotFoundException,
)
from app.shared.utils.time_utils import utcnow

from .storage_client import ObjectStorageClient, StorageOperationError

logger = logging.getLogger(__name__)

BLOCKED_BOOKING_STATUS = "bloqueada"
QUOTA_TOLERANCE_NUM, QUOTA_TOLERANCE_DEN = 11, 10  # 110 % del cupo
GIB = 1024 ** 3


@dataclass(frozen=True)
class TargetPick:
    target: FileTarget
    booking_id: Optional[int]
    client_id: Optional[int]
    service_id: Optional[int]

    @property
    def target_id(self) -> int:
        if self.target is FileTarget.SERVICE:
            return int(self.service_id)
        if self.target is FileTarget.CLIENT:
            return int(self.client_id)
        return int(self.booking_id)


@dataclass
class UploadTicket:
    upload_url: str
    headers: Dict[str, str]
    file: FileAsset


def pick_target(
    booking_id: Optional[int],
    client_id: Optional[int],
    service_id: Optional[int],
) -> Optional[TargetPick]:
    """
    Resuelve el destino del archivo.

    - servicio: no admite otro id
    - pax: puede traer la reserva como contexto
    - reserva: sólo booking_id
    Ids <= 0 cuentan como ausentes. None si la combinación es inválida.
    """
    booking_id = booking_id if booking_id and booking_id > 0 else None
    client_id = client_id if client_id and client_id > 0 else None
    service_id = service_id if service_id and service_id > 0 else None

    if service_id:
        if client_id or booking_id:
            return None
        return TargetPick(FileTarget.SERVICE, None, None, service_id)
    if client_id:
        return TargetPick(FileTarget.CLIENT, booking_id, client_id, None)
    if booking_id:
        return TargetPick(FileTarget.BOOKING, booking_id, None, None)
    return None


def storage_limit_bytes(pack_count: Optional[int], pack_gb: int) -> int:
    """Cupo contratado: packs (mínimo 1) × GB por pack."""
    packs = max(1, int(pack_count or 1))
    return packs * pack_gb * GIB


def exceeds_quota(storage_bytes: int, pending_bytes: int, size_bytes: int, limit_bytes: int) -> bool:
    """True si la subida dejaría el uso proyectado en 110 % del cupo o más."""
    projected = storage_bytes + pending_bytes + size_bytes
    return projected * QUOTA_TOLERANCE_DEN >= limit_bytes * QUOTA_TOLERANCE_NUM


def is_blocked(booking: Optional[Booking]) -> bool:
    return booking is not None and (booking.status or "").strip().lower() == BLOCKED_BOOKING_STATUS


class FileAssetService:
    """Preparación, confirmación, consulta y baja de archivos."""

    def __init__(
        self,
        storage: Optional[ObjectStorageClient] = None,
        bookings: Optional[BookingRepository] = None,
        clients: Optional[ClientRepository] = None,
        services: Optional[ServiceRepository] = None,
        settings: Any = None,
    ):
        self.storage = storage
        self.bookings = bookings or BookingRepository()
        self.clients = clients or ClientRepository()
        self.services = services or ServiceRepository()
        self.settings = settings or app_settings

    # ------------------------------------------------------------------
    # Helpers de autorización
    # ------------------------------------------------------------------
    @staticmethod
    def ensure_can_manage(ctx: AuthContext) -> None:
        if not can(ctx.role, Action.FILES_MANAGE):
            raise ForbiddenException(
                "Tu rol no puede gestionar archivos.",
                code="FILE_FORBIDDEN",
            )

    @staticmethod
    def ensure_not_blocked(ctx: AuthContext, booking: Optional[Booking]) -> None:
        if is_blocked(booking) and not can(ctx.role, Action.BOOKING_OVERRIDE_BLOCKED):
            raise ForbiddenException(
                "La reserva está bloqueada.",
                code="FILE_BOOKING_LOCKED",
                solution="Pedí a gerencia o administración que desbloquee la reserva.",
            )

    def _require_storage(self) -> ObjectStorageClient:
        if self.storage is None:
            raise InternalServerException(
                "El almacenamiento de archivos no está disponible.",
                code="FILES_STORAGE_UNAVAILABLE",
            )
        return self.storage

    async def _booking_for_file(self, session: AsyncSession, file: FileAsset) -> Optional[Booking]:
        """Reserva que gobierna el bloqueo: la propia o la del servicio."""
        if file.booking_id:
            return await self.bookings.get_for_agency(session, file.booking_id, file.id_agency)
        if file.service_id:
            service = await self.services.get_for_agency(session, file.service_id, file.id_agency)
            if service is not None:
                return await self.bookings.get_for_agency(session, service.booking_id, file.id_agency)
        return None

    async def _check_target(self, session: AsyncSession, ctx: AuthContext, pick: TargetPick) -> None:
        """Destino (y reserva de contexto) existentes en la agencia y sin bloqueo."""
        booking: Optional[Booking] = None
        if pick.target is FileTarget.SERVICE:
            service = await self.services.get_for_agency(session, pick.service_id, ctx.id_agency)
            if service is None:
                raise NotFoundException("Servicio no encontrado.", code="FILE_SERVICE_NOT_FOUND")
            booking = await self.bookings.get_for_agency(session, service.booking_id, ctx.id_agency)
        else:
            if pick.target is FileTarget.CLIENT:
                client = await self.clients.get_for_agency(session, pick.client_id, ctx.id_agency)
                if client is None:
                    raise NotFoundException("Pax no encontrado.", code="FILE_CLIENT_NOT_FOUND")
            if pick.booking_id:
                booking = await self.bookings.get_for_agency(session, pick.booking_id, ctx.id_agency)
                if booking is None:
                    raise NotFoundException("Reserva no encontrada.", code="FILE_BOOKING_NOT_FOUND")
        self.ensure_not_blocked(ctx, booking)

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    async def list_files(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        *,
        booking_id: Optional[int] = None,
        client_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> Sequence[FileAsset]:
        """Archivos activos de un destino de la agencia."""
        if booking_id:
            if await self.bookings.get_for_agency(session, booking_id, ctx.id_agency) is None:
                raise NotFoundException("Reserva no encontrada.", code="FILE_BOOKING_NOT_FOUND")
            return await file_asset_repository.list_active_for_target(
                session, id_agency=ctx.id_agency, booking_id=booking_id
            )
        if client_id:
            if await self.clients.get_for_agency(session, client_id, ctx.id_agency) is None:
                raise NotFoundException("Pax no encontrado.", code="FILE_CLIENT_NOT_FOUND")
            return await file_asset_repository.list_active_for_target(
                session, id_agency=ctx.id_agency, client_id=client_id
            )
        if service_id:
            if await self.services.get_for_agency(session, service_id, ctx.id_agency) is None:
                raise NotFoundException("Servicio no encontrado.", code="FILE_SERVICE_NOT_FOUND")
            return await file_asset_repository.list_active_for_target(
                session, id_agency=ctx.id_agency, service_id=service_id
            )
        raise BadRequestException(
            "Faltan parámetros.",
            code="FILE_TARGET_REQUIRED",
            solution="Indicá booking_id, client_id o service_id.",
        )

    async def get_file(self, session: AsyncSession, ctx: AuthContext, file_id: int) -> FileAsset:
        file = await file_asset_repository.get_for_agency(session, id_agency=ctx.id_agency, file_id=file_id)
        if file is None:
            raise NotFoundException("Archivo no encontrado.", code="FILE_NOT_FOUND")
        return file

    # ------------------------------------------------------------------
    # Subida
    # ------------------------------------------------------------------
    async def prepare_upload(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: FileUploadRequest,
    ) -> UploadTicket:
        pick = pick_target(payload.booking_id, payload.client_id, payload.service_id)
        if pick is None:
            raise BadRequestException(
                "Debes indicar booking_id, client_id o service_id.",
                code="FILE_TARGET_INVALID",
                solution="Un archivo de servicio no admite otro destino.",
            )

        file_name = (payload.file_name or "").strip()
        content_type = (payload.content_type or "").strip()
        size_bytes = payload.size_bytes or 0
        if not file_name:
            raise BadRequestException("Nombre de archivo inválido.", code="FILE_NAME_INVALID")
        if content_type not in ALLOWED_FILE_MIME:
            raise BadRequestException(
                "Tipo de archivo no permitido.",
                code="FILE_MIME_NOT_ALLOWED",
                solution="Subí un PDF o una imagen JPG, PNG o WEBP.",
            )
        if size_bytes <= 0:
            raise BadRequestException("Tamaño inválido.", code="FILE_SIZE_INVALID")
        if size_bytes > self.settings.files_max_bytes:
            raise BadRequestException(
                f"El archivo supera {self.settings.files_max_mb}MB.",
                code="FILE_TOO_LARGE",
            )

        self.ensure_can_manage(ctx)
        await self._check_target(session, ctx, pick)

        config = await storage_usage_repository.get_config(session, ctx.id_agency)
        if config is None or not config.enabled:
            raise ForbiddenException(
                "Almacenamiento no habilitado.",
                code="FILE_STORAGE_DISABLED",
                solution="Contactá a soporte para habilitar el almacenamiento de archivos.",
            )

        now = utcnow()
        cutoff = now - timedelta(hours=self.settings.files_pending_ttl_hours)
        try:
            async with transactional(session):
                purged = await file_asset_repository.purge_expired_pending(session, cutoff=cutoff)
                usage = await storage_usage_repository.ensure_usage(session, ctx.id_agency, today=now.date())
                storage_bytes = int(usage.storage_bytes or 0)
        except SQLAlchemyError as exc:
            logger.exception("Error purgando pendientes agency=%s: %s", ctx.id_agency, exc)
            raise InternalServerException("Error al preparar la subida.", code="FILE_UPLOAD_ERROR") from exc
        if purged:
            file_pending_purged_total.inc(purged)
            logger.info("FileAsset pending vencidos purgados: %s", purged)

        pending_bytes = await file_asset_repository.sum_pending_bytes(
            session, id_agency=ctx.id_agency, since=cutoff
        )
        limit = storage_limit_bytes(config.storage_pack_count, self.settings.files_storage_pack_gb)
        if exceeds_quota(storage_bytes, pending_bytes, size_bytes, limit):
            raise ForbiddenException(
                "Superaste el 110% del cupo. Necesitás ampliar para seguir subiendo.",
                code="FILE_QUOTA_EXCEEDED",
                solution="Ampliá el almacenamiento contratado o borrá archivos que no uses.",
                details={
                    "storage_bytes": storage_bytes,
                    "pending_bytes": pending_bytes,
                    "limit_bytes": limit,
                },
            )

        storage = self._require_storage()
        key = build_storage_key(ctx.id_agency, pick.target, pick.target_id, file_name)
        try:
            upload_url = await storage.presign_put(
                key, content_type, self.settings.files_upload_url_ttl_seconds
            )
        except StorageOperationError as exc:
            logger.error("No se pudo firmar la subida key=%s: %s", key, exc)
            raise InternalServerException("Error al preparar la subida.", code="FILE_UPLOAD_ERROR") from exc

        try:
            async with transactional(session):
                agency_file_id = await next_agency_counter(session, ctx.id_agency, "file")
                file = FileAsset(
                    agency_file_id=agency_file_id,
                    id_agency=ctx.id_agency,
                    booking_id=pick.booking_id if pick.target is not FileTarget.SERVICE else None,
                    client_id=pick.client_id,
                    service_id=pick.service_id,
                    original_name=file_name,
                    display_name=None,
                    mime_type=content_type,
                    size_bytes=size_bytes,
                    storage_key=key,
                    status=FileStatus.PENDING.value,
                    created_by=ctx.id_user,
                    created_at=now,
                    download_count=0,
                )
                session.add(file)
                await session.flush()
        except SQLAlchemyError as exc:
            logger.exception("Error creando FileAsset agency=%s key=%s: %s", ctx.id_agency, key, exc)
            raise InternalServerException("Error al preparar la subida.", code="FILE_UPLOAD_ERROR") from exc

        logger.info(
            "Upload preparado: file=%s agency=%s target=%s-%s size=%s",
            file.id_file,
            ctx.id_agency,
            pick.target.value,
            pick.target_id,
            size_bytes,
        )
        return UploadTicket(upload_url=upload_url, headers={"Content-Type": content_type}, file=file)

    # ------------------------------------------------------------------
    # Confirmación
    # ------------------------------------------------------------------
    async def confirm(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        file_id: int,
        action: Optional[str],
    ) -> FileAsset:
        self.ensure_can_manage(ctx)
        if (action or "").strip().lower() != "confirm":
            raise BadRequestException(
                "Acción inválida.",
                code="FILE_ACTION_INVALID",
                solution='Enviá {"action": "confirm"}.',
            )

        file = await self.get_file(session, ctx, file_id)
        if file.is_active:
            return file
        self.ensure_not_blocked(ctx, await self._booking_for_file(session, file))

        try:
            async with transactional(session):
                locked = await file_asset_repository.get_for_update(session, file.id_file)
                if locked is None:
                    raise NotFoundException("Archivo no encontrado.", code="FILE_NOT_FOUND")
                if not locked.is_active:
                    usage = await storage_usage_repository.ensure_usage(
                        session, locked.id_agency, today=utcnow().date(), for_update=True
                    )
                    usage.storage_bytes = int(usage.storage_bytes or 0) + locked.size_bytes
                    usage.transfer_bytes = int(usage.transfer_bytes or 0) + locked.size_bytes
                    locked.status = FileStatus.ACTIVE.value
                    await session.flush()
        except SQLAlchemyError as exc:
            logger.exception("Error confirmando FileAsset %s: %s", file_id, exc)
            raise InternalServerException("Error al confirmar archivo.", code="FILE_CONFIRM_ERROR") from exc

        logger.info("FileAsset confirmado: file=%s agency=%s size=%s", locked.id_file, ctx.id_agency, locked.size_bytes)
        return locked

    # ------------------------------------------------------------------
    # Baja
    # ------------------------------------------------------------------
    async def delete(self, session: AsyncSession, ctx: AuthContext, file_id: int) -> None:
        self.ensure_can_manage(ctx)
        file = await self.get_file(session, ctx, file_id)
        self.ensure_not_blocked(ctx, await self._booking_for_file(session, file))

        storage = self._require_storage()
        try:
            await storage.delete_object(file.storage_key)
        except StorageOperationError as exc:
            # El objeto huérfano no impide borrar el registro
            logger.error("No se pudo borrar el objeto key=%s: %s", file.storage_key, exc)

        try:
            async with transactional(session):
                locked = await file_asset_repository.get_for_update(session, file.id_file)
                if locked is None:
                    raise NotFoundException("Archivo no encontrado.", code="FILE_NOT_FOUND")
                if locked.is_active:
                    usage = await storage_usage_repository.ensure_usage(
                        session, locked.id_agency, today=utcnow().date(), for_update=True
                    )
                    usage.storage_bytes = max(0, int(usage.storage_bytes or 0) - locked.size_bytes)
                await session.delete(locked)
                await session.flush()
        except SQLAlchemyError as exc:
            logger.exception("Error borrando FileAsset %s: %s", file_id, exc)
            raise InternalServerException("Error al borrar archivo.", code="FILE_DELETE_ERROR") from exc

        logger.info("FileAsset borrado: file=%s agency=%s", file_id, ctx.id_agency)


__all__ = [
    "FileAssetService",
    "TargetPick",
    "UploadTicket",
    "pick_target",
    "storage_limit_bytes",
    "exceeds_quota",
    "is_blocked",
]
# Fin del archivo backend/app/modules/files/services/file_asset_service.py
