# -*- coding: utf-8 -*-
"""
backend/tests/modules/files/test_storage_client.py

Cliente S3 (boto3 mockeado): firma de PUT, borrado, errores y
configuración faltante.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from pydantic import SecretStr

from app.modules.files.services import (
    S3ObjectStorage,
    StorageConfigurationError,
    StorageOperationError,
    build_storage_client,
)


async def test_presign_put_uses_bucket_key_and_content_type():
    boto = MagicMock()
    boto.generate_presigned_url.return_value = "https://signed"
    storage = S3ObjectStorage(boto, "bucket-a")

    url = await storage.presign_put("agencies/1/files/x.pdf", "application/pdf", 300)

    assert url == "https://signed"
    boto.generate_presigned_url.assert_called_once_with(
        "put_object",
        Params={"Bucket": "bucket-a", "Key": "agencies/1/files/x.pdf", "ContentType": "application/pdf"},
        ExpiresIn=300,
    )


async def test_delete_object_wraps_client_errors():
    boto = MagicMock()
    boto.delete_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "DeleteObject")
    storage = S3ObjectStorage(boto, "bucket-a")

    with pytest.raises(StorageOperationError):
        await storage.delete_object("k")


def test_build_storage_client_names_missing_settings():
    settings = SimpleNamespace(
        spaces_access_key=SecretStr("key"),
        spaces_secret_key=None,
        spaces_files_bucket="",
        spaces_endpoint="https://example.test",
        spaces_region="us-east-1",
    )

    with pytest.raises(StorageConfigurationError) as exc:
        build_storage_client(settings)

    assert "SPACES_SECRET_KEY" in str(exc.value)
    assert "SPACES_FILES_BUCKET" in str(exc.value)
    assert "SPACES_ACCESS_KEY" not in str(exc.value)


def test_build_storage_client_with_credentials():
    settings = SimpleNamespace(
        spaces_access_key=SecretStr("key"),
        spaces_secret_key=SecretStr("secret"),
        spaces_files_bucket="turiscore-files",
        spaces_endpoint="https://nyc3.digitaloceanspaces.com",
        spaces_region="us-east-1",
    )

    storage = build_storage_client(settings)

    assert isinstance(storage, S3ObjectStorage)
    assert storage.bucket == "turiscore-files"
