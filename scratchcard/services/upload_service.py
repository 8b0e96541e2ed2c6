"""
CNIC photo upload flow.

The upload page is addressed by an encrypted upload token instead of the raw
verification id. The photo goes to the S3 bucket (either presigned PUT from
the browser or streamed through the API); the resulting key and URL are then
handed to the claim workflow.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import current_app

from scratchcard.errors import AlreadyClaimedError, ForbiddenError, ValidationError
from scratchcard.services.claim_service import (
    EnterClaimResult,
    enter_claim,
    has_claimed,
    is_eligible_for_upload,
)
from scratchcard.utils.crypto import UploadTokenCipher, UploadTokenError
from scratchcard.utils.media_validators import (
    validate_content_type,
    validate_filename,
    validate_size,
)
from scratchcard.utils.s3_helpers import (
    cnic_prefix,
    delete_object,
    make_cnic_key,
    object_head,
    presign_put,
    public_url,
    put_fileobj,
)

logger = logging.getLogger(__name__)

SUBMITTED_MSG = "The Photo has already been submitted"
NOT_VERIFIED_MSG = "please make sure to verify your code before coming to this page"


def _cipher() -> UploadTokenCipher:
    return current_app.extensions["upload_token_cipher"]


def issue_upload_token(verified_code_id: str) -> str:
    return _cipher().encrypt(str(verified_code_id))


def resolve_token(token: str) -> str:
    try:
        return _cipher().decrypt(token)
    except UploadTokenError:
        logger.warning("rejected upload token %.16s...", token or "")
        raise


def upload_status(token: str) -> Dict[str, Any]:
    verified_code_id = resolve_token(token)
    return {
        "hasClaimed": has_claimed(verified_code_id),
        "eligible": is_eligible_for_upload(verified_code_id),
    }


def _require_upload_allowed(verified_code_id: str) -> None:
    if has_claimed(verified_code_id):
        raise AlreadyClaimedError(SUBMITTED_MSG)
    if not is_eligible_for_upload(verified_code_id):
        raise ForbiddenError(NOT_VERIFIED_MSG)


def _check(result) -> None:
    ok, err = result
    if not ok:
        raise ValidationError(err)


def presign_cnic_upload(token: str, filename: str, content_type: str) -> Dict[str, Any]:
    verified_code_id = resolve_token(token)
    _check(validate_filename(filename))
    _check(validate_content_type(content_type))
    _require_upload_allowed(verified_code_id)

    key = make_cnic_key(verified_code_id, filename)
    return {"key": key, **presign_put(key, content_type)}


def complete_cnic_upload(token: str, key: str, size_bytes: int | None = None) -> EnterClaimResult:
    """
    Enter the claim for a photo the browser PUT to a presigned URL.

    The size check uses the stored object's ContentLength; ``size_bytes`` from
    the client is only an early reject.
    """
    verified_code_id = resolve_token(token)
    if not key or not key.startswith(cnic_prefix(verified_code_id)):
        raise ValidationError("invalid key")
    _check(validate_size(size_bytes))
    head = object_head(key)
    if head is None:
        raise ValidationError("upload not found")
    ok, err = validate_size(head.get("ContentLength"))
    if not ok:
        delete_object(key)
        logger.warning("oversized cnic upload removed key=%s", key)
        raise ValidationError(err)

    # no cleanup on a refused claim here: the key may already back an entered claim
    return enter_claim(verified_code_id, storage_id=key, cnic_image_url=public_url(key))


def _stream_size(stream) -> int:
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def store_cnic_image(token: str, file) -> EnterClaimResult:
    """Server-side variant: stream the posted photo to S3, then enter the claim."""
    verified_code_id = resolve_token(token)
    if file is None:
        raise ValidationError("file required")
    _check(validate_filename(file.filename))
    _check(validate_content_type(file.mimetype))
    # multipart parts carry no Content-Length; measure the spooled body
    _check(validate_size(_stream_size(file.stream)))
    _require_upload_allowed(verified_code_id)

    key = make_cnic_key(verified_code_id, file.filename)
    put_fileobj(key, file.stream, file.mimetype)
    logger.info("cnic stored key=%s verified_code_id=%s", key, verified_code_id)

    result = enter_claim(verified_code_id, storage_id=key, cnic_image_url=public_url(key))
    if not result.ok:
        # the key was minted for this request, nothing else points at it
        delete_object(key)
        logger.info("cnic removed key=%s outcome=%s", key, result.outcome.value)
    return result
