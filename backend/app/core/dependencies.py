"""
Request dependencies for FastAPI.

Authentication happens upstream; routes here only need to know which tenant's
ledger they are computing over.
"""

from fastapi import Header, HTTPException, status


async def get_owner_id(x_owner_id: str = Header(None, alias="X-Owner-ID")) -> str:
    """
    FastAPI dependency resolving the owning tenant of a request.

    Returns:
        The owner identifier from the ``X-Owner-ID`` header

    Raises:
        HTTPException: 400 if the header is missing or blank
    """
    if x_owner_id is None or not x_owner_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Owner-ID header is required",
        )
    return x_owner_id.strip()
