"""
Blob storage for uploaded profile files when they are not kept inline.
storage_backend=s3 stores under {s3_key_prefix}/{user_id}/{file_name};
storage_backend=local writes under {upload_dir}/{user_id}/{file_name}.
The user_files record keeps only the returned URL.
"""
import uuid
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

from backend.app.core.config import settings
from backend.app.core.logging_config import get_logger

logger = get_logger("services.blob_storage")


def _get_s3_client():
    """Get configured S3 client."""
    if not settings.aws_access_key_id or not settings.aws_secret_access_key:
        raise ValueError("AWS credentials not configured (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)")
    return boto3.client(
        "s3",
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
    )


def _blob_name(original_name: str) -> str:
    return f"{uuid.uuid4()}{Path(original_name or '').suffix.lower()}"


def store_blob(data: bytes, original_name: str, user_id: int, mime_type: str) -> dict:
    """
    Store file bytes in the configured blob backend.

    Returns:
        dict with key, url
    """
    name = _blob_name(original_name)
    if settings.storage_backend == "s3":
        return _upload_to_s3(data, name, user_id, mime_type)
    return _write_local(data, name, user_id)


def _upload_to_s3(data: bytes, file_name: str, user_id: int, mime_type: str) -> dict:
    key = f"{settings.s3_key_prefix}/{user_id}/{file_name}"
    logger.info(
        "S3 upload started bucket=%s region=%s key=%s user_id=%s size_bytes=%d",
        settings.aws_bucket_name,
        settings.aws_region,
        key,
        user_id,
        len(data),
    )
    try:
        s3 = _get_s3_client()
        s3.put_object(
            Bucket=settings.aws_bucket_name,
            Key=key,
            Body=data,
            ContentType=mime_type,
        )
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        msg = e.response.get("Error", {}).get("Message", str(e))
        logger.error(
            "S3 upload failed bucket=%s key=%s user_id=%s error_code=%s error_message=%s",
            settings.aws_bucket_name,
            key,
            user_id,
            code,
            msg,
        )
        raise RuntimeError(f"S3 upload failed - {code}: {msg}") from e
    url = f"https://{settings.aws_bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"
    logger.info("S3 upload success bucket=%s key=%s", settings.aws_bucket_name, key)
    return {"key": key, "url": url}


def _write_local(data: bytes, file_name: str, user_id: int) -> dict:
    folder = Path(settings.upload_dir) / str(user_id)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / file_name
    try:
        path.write_bytes(data)
    except OSError as e:
        logger.error("Local blob write failed path=%s error=%s", path, e)
        raise RuntimeError(f"Failed to save file: {e}") from e
    key = f"{user_id}/{file_name}"
    logger.info("Stored local blob user_id=%s path=%s size_bytes=%d", user_id, path, len(data))
    return {"key": key, "url": f"/{settings.upload_dir}/{key}"}


def parse_s3_key_from_url(url: str) -> str | None:
    """Extract S3 object key from an S3 URL. Returns None if not one of ours."""
    if not url or not url.startswith("http"):
        return None
    parts = url.replace("https://", "").replace("http://", "").split("/", 1)
    if len(parts) != 2:
        return None
    host, path = parts
    if settings.aws_bucket_name in host and path.startswith(f"{settings.s3_key_prefix}/"):
        return path
    return None


def _local_path(url: str) -> Path | None:
    prefix = f"/{settings.upload_dir}/"
    if not url.startswith(prefix):
        return None
    relative = Path(url[len(prefix):])
    if ".." in relative.parts:
        return None
    return Path(settings.upload_dir) / relative


def load_blob(url: str) -> bytes:
    """Read a stored blob back. Raises FileNotFoundError when it is gone."""
    key = parse_s3_key_from_url(url)
    if key:
        try:
            obj = _get_s3_client().get_object(Bucket=settings.aws_bucket_name, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("NoSuchKey", "404"):
                raise FileNotFoundError(key) from e
            raise RuntimeError(f"S3 download failed - {code}") from e
        return obj["Body"].read()
    path = _local_path(url or "")
    if path is None or not path.exists():
        raise FileNotFoundError(url)
    return path.read_bytes()


def delete_blob(url: str | None) -> bool:
    """Delete a stored blob. Returns True if deleted or nothing to delete."""
    if not url:
        return True
    key = parse_s3_key_from_url(url)
    if key:
        try:
            _get_s3_client().delete_object(Bucket=settings.aws_bucket_name, Key=key)
            logger.info("S3 delete success bucket=%s key=%s", settings.aws_bucket_name, key)
            return True
        except (ClientError, ValueError) as e:
            logger.warning("S3 delete failed key=%s error=%s", key, e)
            return False
    path = _local_path(url)
    if path is not None and path.exists():
        try:
            path.unlink()
            logger.info("Deleted local blob path=%s", path)
        except OSError as e:
            logger.warning("Failed to delete local blob %s: %s", path, e)
            return False
    return True
