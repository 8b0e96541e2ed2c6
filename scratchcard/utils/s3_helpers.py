import os
import uuid
import re
import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

S3_ENDPOINT = os.getenv("S3_ENDPOINT", "http://127.0.0.1:9000")
S3_REGION = os.getenv("S3_REGION", "us-east-1")
S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY", "minioadmin")
S3_SECRET_KEY = os.getenv("S3_SECRET_KEY", "minioadmin")
S3_BUCKET = os.getenv("S3_BUCKET", "cnic-dev")
USE_PATH = os.getenv("S3_USE_PATH_STYLE", "true").lower() == "true"

CNIC_PREFIX = "cnic"


def _client():
    return boto3.client(
        "s3",
        endpoint_url=S3_ENDPOINT,
        region_name=S3_REGION,
        aws_access_key_id=S3_ACCESS_KEY,
        aws_secret_access_key=S3_SECRET_KEY,
        config=Config(s3={"addressing_style": "path" if USE_PATH else "virtual"}),
    )


_slug_re = re.compile(r"[^a-z0-9]+")


def _safe_name(name: str) -> str:
    base = name.strip().lower()
    base = _slug_re.sub("-", base).strip("-") or "file"
    return base


def cnic_prefix(verified_code_id: str) -> str:
    return f"{CNIC_PREFIX}/{verified_code_id}/"


def make_cnic_key(verified_code_id: str, filename: str) -> str:
    ext = ""
    if "." in filename:
        parts = filename.rsplit(".", 1)
        filename, ext = parts[0], "." + parts[1].lower()
    return f"{cnic_prefix(verified_code_id)}{uuid.uuid4().hex}-{_safe_name(filename)}{ext}"


def presign_put(key: str, content_type: str, expires: int = 900) -> dict:
    s3 = _client()
    url = s3.generate_presigned_url(
        ClientMethod="put_object",
        Params={"Bucket": S3_BUCKET, "Key": key, "ContentType": content_type},
        ExpiresIn=expires,
        HttpMethod="PUT",
    )
    return {"upload_url": url, "required_headers": {"Content-Type": content_type}}


def put_fileobj(key: str, fileobj, content_type: str) -> None:
    _client().upload_fileobj(
        fileobj, S3_BUCKET, key, ExtraArgs={"ContentType": content_type}
    )


def object_head(key: str) -> dict | None:
    """head_object metadata (ContentLength, ContentType, ...) or None if absent."""
    try:
        return _client().head_object(Bucket=S3_BUCKET, Key=key)
    except ClientError as e:
        code = str(e.response.get("Error", {}).get("Code", ""))
        if code in ("404", "NoSuchKey", "NotFound"):
            return None
        raise


def delete_object(key: str) -> None:
    _client().delete_object(Bucket=S3_BUCKET, Key=key)


def public_url(key: str) -> str:
    if USE_PATH:
        return f"{S3_ENDPOINT.rstrip('/')}/{S3_BUCKET}/{key}"
    from urllib.parse import urlparse

    ep = urlparse(S3_ENDPOINT)
    return f"{ep.scheme}://{S3_BUCKET}.{ep.netloc}/{key}"
