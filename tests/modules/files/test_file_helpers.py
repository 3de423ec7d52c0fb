# -*- coding: utf-8 -*-
"""
backend/tests/modules/files/test_file_helpers.py

Funciones puras del módulo Files: nombres seguros, claves de storage,
resolución de destino y proyección de cupo.
"""

import pytest

from app.modules.files.enums import FileTarget
from app.modules.files.services.file_asset_service import (
    GIB,
    exceeds_quota,
    pick_target,
    storage_limit_bytes,
)
from app.modules.files.utils import build_storage_key, safe_file_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("José.pdf", "Jose_.pdf"),
        ("C:\\docs\\voucher final.PDF", "voucher_final.PDF"),
        ("/tmp/../pasaporte (1).png", "pasaporte_1_.png"),
        ("", "archivo"),
        (None, "archivo"),
        ("ñ", "n"),
        ("***", "archivo"),
    ],
)
def test_safe_file_name(raw, expected):
    assert safe_file_name(raw) == expected


def test_safe_file_name_is_truncated():
    assert len(safe_file_name("a" * 300 + ".pdf")) == 120


def test_build_storage_key_layout():
    key = build_storage_key(7, FileTarget.CLIENT, 42, "José.pdf", stamp_ms=1700000000000, rand="abc123")
    assert key == "agencies/7/files/client-42/1700000000000-abc123-Jose_.pdf"


def test_build_storage_key_random_token():
    key = build_storage_key(1, FileTarget.BOOKING, 3, "x.pdf")
    stamp, token, name = key.rsplit("/", 1)[1].split("-", 2)
    assert stamp.isdigit()
    assert len(token) == 6
    assert name == "x.pdf"


@pytest.mark.parametrize(
    "ids, expected",
    [
        ((5, None, None), (FileTarget.BOOKING, 5, None, None)),
        ((None, 8, None), (FileTarget.CLIENT, None, 8, None)),
        ((5, 8, None), (FileTarget.CLIENT, 5, 8, None)),
        ((None, None, 9), (FileTarget.SERVICE, None, None, 9)),
        ((0, -1, 9), (FileTarget.SERVICE, None, None, 9)),
    ],
)
def test_pick_target(ids, expected):
    pick = pick_target(*ids)
    assert (pick.target, pick.booking_id, pick.client_id, pick.service_id) == expected


@pytest.mark.parametrize("ids", [(None, None, None), (0, 0, 0), (5, None, 9), (None, 8, 9)])
def test_pick_target_invalid(ids):
    assert pick_target(*ids) is None


def test_target_id_follows_target():
    assert pick_target(5, 8, None).target_id == 8
    assert pick_target(5, None, None).target_id == 5


def test_storage_limit_has_at_least_one_pack():
    assert storage_limit_bytes(None, 5) == 5 * GIB
    assert storage_limit_bytes(0, 5) == 5 * GIB
    assert storage_limit_bytes(3, 5) == 15 * GIB


def test_quota_tolerance_is_110_percent():
    limit = 1000
    assert not exceeds_quota(900, 100, 99, limit)
    assert exceeds_quota(900, 100, 100, limit)
    assert exceeds_quota(0, 0, 1200, limit)
