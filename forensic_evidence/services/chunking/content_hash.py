"""Content hashing for document integrity and deduplication."""

import hashlib
import hmac
from typing import Optional

from forensic_evidence.config.settings import settings
from forensic_evidence.schemas.document import Document
from forensic_evidence.services.chunking.page_detectors import split_into_pages
from forensic_evidence.utils.exceptions import ContentHashError
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


def compute_content_hash(text: str, algorithm: Optional[str] = None) -> str:
    """Compute a hex digest over the exact UTF-8 bytes of text.

    Args:
        text: Raw document text
        algorithm: hashlib algorithm name (default from settings, sha256)

    Returns:
        str: Lowercase hex digest

    Raises:
        ContentHashError: If text is not a string or the algorithm is unavailable
    """
    if not isinstance(text, str):
        raise ContentHashError(f"Content must be str, got {type(text).__name__}")

    algorithm = algorithm or settings.content_hash_algorithm
    try:
        digest = hashlib.new(algorithm)
    except (ValueError, TypeError) as e:
        LOGGER.error(f"Hash algorithm unavailable: {algorithm}")
        raise ContentHashError(f"Hash algorithm unavailable: {algorithm}", original_error=e)

    digest.update(text.encode("utf-8"))
    return digest.hexdigest()


def verify_content_hash(text: str, expected_hash: str, algorithm: Optional[str] = None) -> bool:
    """Check text against a previously recorded digest.

    Args:
        text: Raw document text
        expected_hash: Digest recorded at ingestion
        algorithm: hashlib algorithm name

    Returns:
        bool: True if the digests match
    """
    actual = compute_content_hash(text, algorithm)
    return hmac.compare_digest(actual, (expected_hash or "").lower())


def build_document(document_id: str, text: str) -> Document:
    """Create the immutable ingestion record for a document.

    Args:
        document_id: Document id
        text: Full OCR text

    Returns:
        Document: Record with content hash and detected page count
    """
    pages, _ = split_into_pages(text)
    return Document(
        id=document_id,
        raw_text=text,
        content_hash=compute_content_hash(text),
        page_count=len(pages),
    )
