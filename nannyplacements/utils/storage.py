"""
Document storage utilities for worker verification uploads.
Handles validation, upload to S3-compatible storage and presigned URL generation.
"""

import logging
import uuid
from typing import Optional, Tuple

import boto3
from botocore.client import Config

from ..config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_BUCKET_NAME,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

IMAGE_MIME_TYPES = ["image/png", "image/jpeg", "image/jpg", "image/webp"]
PDF_MIME_TYPES = ["application/pdf"]
VIDEO_MIME_TYPES = ["video/mp4", "video/quicktime", "video/webm"]

# Per document type: allowed MIME types, allowed extensions, max size in bytes
DOCUMENT_RULES = {
    "criminal_check": (PDF_MIME_TYPES + IMAGE_MIME_TYPES, ("pdf", "png", "jpg", "jpeg", "webp"), 10 * 1024 * 1024),
    "credit_check": (PDF_MIME_TYPES + IMAGE_MIME_TYPES, ("pdf", "png", "jpg", "jpeg", "webp"), 10 * 1024 * 1024),
    "proof_of_residence": (PDF_MIME_TYPES + IMAGE_MIME_TYPES, ("pdf", "png", "jpg", "jpeg", "webp"), 10 * 1024 * 1024),
    "interview_video": (VIDEO_MIME_TYPES, ("mp4", "mov", "webm"), 50 * 1024 * 1024),
    "profile_picture": (IMAGE_MIME_TYPES, ("png", "jpg", "jpeg", "webp"), 5 * 1024 * 1024),
}

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


# Created on first use and shared across requests
_storage_client = None


def get_storage_client():
    """Get configured boto3 client for the S3-compatible document bucket"""
    global _storage_client
    if _storage_client is None:
        _storage_client = boto3.client(
            "s3",
            endpoint_url=STORAGE_ENDPOINT_URL,
            aws_access_key_id=STORAGE_ACCESS_KEY_ID,
            aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
            region_name=STORAGE_REGION,
        )
        logger.info(f"🪣 Storage client created for bucket {STORAGE_BUCKET_NAME}")
    return _storage_client


def validate_document_file(
    document_type: str, filename: Optional[str], size_bytes: int, mime_type: Optional[str]
) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded document before storing it.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if document_type not in DOCUMENT_RULES:
        return False, f"Unknown document type. Allowed: {', '.join(DOCUMENT_RULES)}"

    mime_types, extensions, max_size = DOCUMENT_RULES[document_type]

    if not filename:
        return False, "Filename is required"

    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            return False, f"Invalid filename - contains dangerous character '{char}'"

    if len(filename) > 255:
        return False, "Filename too long - maximum 255 characters"

    ext = filename.lower().rsplit(".", 1)[-1] if "." in filename else ""
    if ext not in extensions:
        return False, f"File extension not allowed. Use: {', '.join(extensions)}"

    if mime_type not in mime_types:
        return False, f"Invalid file type. Allowed types: {', '.join(mime_types)}"

    if size_bytes == 0:
        return False, "File is empty"

    if size_bytes > max_size:
        return False, (
            f"File size exceeds {max_size / (1024 * 1024):.0f}MB limit. "
            f"Your file is {size_bytes / (1024 * 1024):.2f}MB."
        )

    return True, None


def build_document_key(user_id: str, document_type: str, filename: str) -> str:
    """Object key for a document; keys are stored in the database, never URLs"""
    ext = filename.lower().rsplit(".", 1)[-1]
    return f"documents/{user_id}/{document_type}-{uuid.uuid4()}.{ext}"


def upload_object(key: str, contents: bytes, content_type: str) -> None:
    client = get_storage_client()
    client.put_object(
        Bucket=STORAGE_BUCKET_NAME,
        Key=key,
        Body=contents,
        ContentType=content_type,
    )
    logger.info(f"✅ Uploaded object: {key}")


def generate_presigned_url(key: Optional[str], expiration: int = PRESIGNED_URL_EXPIRATION) -> Optional[str]:
    """Generate a presigned GET URL for a private object; None when no key or on failure"""
    if not key:
        return None
    try:
        client = get_storage_client()
        return client.generate_presigned_url(
            "get_object",
            Params={"Bucket": STORAGE_BUCKET_NAME, "Key": key, "ResponseContentDisposition": "inline"},
            ExpiresIn=expiration,
        )
    except Exception as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        return None
