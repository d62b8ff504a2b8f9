"""Integration tests for the upload routes."""

from typing import AsyncGenerator
import pytest
from botocore.stub import ANY
from httpx import AsyncClient, ASGITransport
from upload_manager.core.dependencies import get_storage_service
from upload_manager.main import app
from tests.fakes import CLIENT_MAX_SIZE


@pytest.fixture
async def stubbed_client(storage_service, stubber) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client backed by the stubbed real S3 client."""
    app.dependency_overrides[get_storage_service] = lambda: storage_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_upload_file(client: AsyncClient, fake_client):
    """Test uploading a file returns its size and href."""
    response = await client.post(
        "/uploads/avatar",
        files={"file": ("file.txt", b"hello world", "text/plain")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["size"] == 11
    assert body["filename"].startswith("https://s3.test.com/test-bucket/avatar_")
    _, params = fake_client.calls[0]
    assert params["ExtraArgs"]["ContentDisposition"] == "inline; filename=file.txt"


@pytest.mark.asyncio
async def test_upload_file_too_large(client: AsyncClient):
    """Test oversized uploads are rejected with 413."""
    response = await client.post(
        "/uploads/avatar",
        files={"file": ("large.bin", b"x" * (CLIENT_MAX_SIZE + 1), "application/octet-stream")},
    )

    assert response.status_code == 413
    assert response.json() == {
        "detail": "File size exceeded the limit of 1048576 bytes.",
        "error_code": "FileSizeExceeded",
    }


@pytest.mark.asyncio
async def test_upload_declared_too_large_is_rejected_before_parsing(client: AsyncClient, fake_client):
    """Test a Content-Length well past the limit never reaches the store."""
    response = await client.post(
        "/uploads/avatar",
        files={"file": ("large.bin", b"x" * (CLIENT_MAX_SIZE + 128 * 1024), "application/octet-stream")},
    )

    assert response.status_code == 413
    assert response.json()["error_code"] == "FileSizeExceeded"
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_upload_without_file_field(client: AsyncClient, fake_client):
    response = await client.post("/uploads/avatar", data={"note": "no file"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "InvalidArgument"
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_resolve_access_url(client: AsyncClient):
    """Test resolving returns the same cached URL twice."""
    payload = {"href": "https://s3.test.com/test-bucket/file.txt", "filename": "file.txt"}

    first = await client.post("/uploads/resolve", json=payload)
    second = await client.post("/uploads/resolve", json=payload)

    assert first.status_code == 200
    assert first.json()["href"] != payload["href"]
    assert first.json()["href"] == second.json()["href"]
    assert first.json()["filename"] == "file.txt"


@pytest.mark.asyncio
async def test_part_sizes(client: AsyncClient):
    response = await client.get("/uploads/multipart/part-sizes")

    assert response.status_code == 200
    assert response.json() == {
        "minimum_part_size": 5 * 1024 * 1024,
        "default_part_size": 10 * 1024 * 1024,
    }


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["storage"] is True


@pytest.mark.asyncio
async def test_delete_object(stubbed_client: AsyncClient, stubber):
    stubber.add_response("delete_object", {}, {"Bucket": "test-bucket", "Key": "key.txt"})

    response = await stubbed_client.delete(
        "/uploads", params={"href": "https://s3.test.com/test-bucket/key.txt?X=1"}
    )

    assert response.status_code == 204


@pytest.mark.asyncio
async def test_delete_missing_object(stubbed_client: AsyncClient, stubber):
    stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)

    response = await stubbed_client.delete(
        "/uploads", params={"href": "https://s3.test.com/test-bucket/missing.txt"}
    )

    assert response.status_code == 502
    assert response.json()["error_code"] == "DeleteFailed"


@pytest.mark.asyncio
async def test_multipart_flow(stubbed_client: AsyncClient, stubber):
    """Test begin, commit and cancel over HTTP."""
    stubber.add_response(
        "create_multipart_upload",
        {"UploadId": "test-upload-id"},
        {
            "Bucket": "test-bucket",
            "Key": ANY,
            "ContentType": "video/mp4",
            "ContentDisposition": "inline; movie.mp4",
            "StorageClass": "INTELLIGENT_TIERING",
        },
    )

    response = await stubbed_client.post(
        "/uploads/multipart/video/begin",
        json={"filename": "movie.mp4", "content_type": "video/mp4", "size": 1024, "chunk_size": 513},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["uploadId"] == "test-upload-id"
    assert body["fileKey"].startswith("video_")
    assert [(p["partNumber"], p["chunkSize"]) for p in body["uploadParts"]] == [(1, 513), (2, 511)]
    assert all("X-Amz-Signature=" in p["url"] for p in body["uploadParts"])

    commit_data = {"Parts": [{"PartNumber": 1, "ETag": '"a"'}, {"PartNumber": 2, "ETag": '"b"'}]}
    stubber.add_response("complete_multipart_upload", {})
    stubber.add_response("head_object", {"ContentLength": 1024, "ContentType": "video/mp4"})

    response = await stubbed_client.post(
        "/uploads/multipart/commit",
        json={
            "fileKey": body["fileKey"],
            "uploadId": body["uploadId"],
            "filename": "movie.mp4",
            "providerCommitData": commit_data,
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "href": f"https://s3.test.com/test-bucket/{body['fileKey']}",
        "filename": "movie.mp4",
        "size": 1024,
        "content_type": "video/mp4",
    }

    stubber.add_client_error(
        "abort_multipart_upload", service_error_code="NoSuchUpload", http_status_code=404
    )
    response = await stubbed_client.post(
        "/uploads/multipart/cancel",
        json={"fileKey": body["fileKey"], "uploadId": body["uploadId"]},
    )

    assert response.status_code == 502
    assert response.json()["error_code"] == "MultipartCancelFailed"


@pytest.mark.asyncio
async def test_multipart_begin_invalid_size(stubbed_client: AsyncClient, stubber):
    stubber.add_response("create_multipart_upload", {"UploadId": "test-upload-id"})

    response = await stubbed_client.post(
        "/uploads/multipart/video/begin",
        json={"filename": "movie.mp4", "content_type": "video/mp4", "size": 0, "chunk_size": 512},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "InvalidArgument"


@pytest.mark.asyncio
async def test_multipart_cancel(stubbed_client: AsyncClient, stubber):
    stubber.add_response("abort_multipart_upload", {})

    response = await stubbed_client.post(
        "/uploads/multipart/cancel",
        json={"fileKey": "video_1", "uploadId": "test-upload-id"},
    )

    assert response.status_code == 204
