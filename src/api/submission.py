"""Reading JSON or multipart request bodies shared by the catalog routes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException, Request, status
from starlette.datastructures import UploadFile

from src.services.catalog.errors import PayloadValidationError
from src.services.storage.uploads import uploaded_files

_NOT_AN_OBJECT = "Request body must be a JSON object"


async def read_submission(
    request: Request, file_field: str, max_files: int
) -> tuple[Mapping[str, Any], list[UploadFile]]:
    """Return the submitted fields and the files sent under ``file_field``.

    JSON bodies carry native values and no files; anything else is parsed
    as a form.
    """

    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": _NOT_AN_OBJECT, "error": str(exc)},
            ) from exc
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": _NOT_AN_OBJECT, "error": type(body).__name__},
            )
        return body, []

    form = await request.form(max_files=max_files + 1)
    files = uploaded_files(form, file_field)
    if len(files) > max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": f"At most {max_files} file(s) can be uploaded",
                "error": f"{len(files)} files sent under {file_field}",
            },
        )
    return form, files


def invalid_payload(message: str, error: PayloadValidationError) -> HTTPException:
    """400 carrying the failed operation, the reason and per-field details."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": message, "error": error.message, "details": error.details},
    )
