"""Binding sessions API router."""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Response, UploadFile

from choropleth_api.dependencies import get_session_service
from choropleth_api.exceptions import BindingNotReadyError
from choropleth_api.models.requests import CreateSessionRequest, UpdateSettingsRequest
from choropleth_api.models.responses import (
    BindingResponse,
    GeometryUploadResponse,
    SessionResponse,
    TableUploadResponse,
)
from choropleth_api.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["sessions"])


@router.post("/sessions", response_model=SessionResponse, status_code=201)
def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
):
    """
    Create an empty binding session.

    Args:
        request: Session title
        session_service: Session service dependency

    Returns:
        Session summary
    """
    session = session_service.create_session(title=request.title)
    return SessionResponse(**session.summary())


@router.get("/sessions", response_model=List[SessionResponse])
def list_sessions(session_service: SessionService = Depends(get_session_service)):
    """List live sessions, most recently used first."""
    return [SessionResponse(**s.summary()) for s in session_service.list_sessions()]


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
):
    """Get a session summary."""
    return SessionResponse(**session_service.get_session(session_id).summary())


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
):
    """Delete a session and everything loaded into it."""
    session_service.delete_session(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/table", response_model=TableUploadResponse)
async def upload_table(
    session_id: str,
    file: UploadFile = File(..., description="CSV table with a region column and a value column"),
    session_service: SessionService = Depends(get_session_service),
):
    """
    Upload the data table for a session.

    A table that fails validation is still stored so its report can be shown;
    the session is not ready until a valid table is loaded.

    Args:
        session_id: Session identifier
        file: Uploaded CSV file
        session_service: Session service dependency

    Returns:
        Validation report, columns, a preview and the selected columns

    Raises:
        WrongFileTypeError: If the file is not a CSV file
        FileTooLargeError: If the file exceeds the upload limit
    """
    session = session_service.get_session(session_id)
    content = await file.read()
    validation = session.load_table(content, filename=file.filename or "")
    logger.info(
        f"Session {session_id}: loaded table {file.filename} "
        f"({validation.row_count} rows, {len(validation.errors)} errors)"
    )

    return TableUploadResponse(
        filename=session.table_filename,
        columns=session.table.columns,
        validation=validation.to_dict(),
        preview=session.table.preview(),
        region_column=session.settings.region_column,
        value_column=session.settings.value_column,
    )


@router.post("/sessions/{session_id}/geometry", response_model=GeometryUploadResponse)
async def upload_geometry(
    session_id: str,
    file: UploadFile = File(..., description="SVG document whose elements are map regions"),
    session_service: SessionService = Depends(get_session_service),
):
    """
    Upload the geometry document for a session.

    Raises:
        WrongFileTypeError: If the file is not an SVG file
        FileTooLargeError: If the file exceeds the upload limit
    """
    session = session_service.get_session(session_id)
    content = await file.read()
    candidates = session.load_geometry(content, filename=file.filename or "")
    logger.info(f"Session {session_id}: extracted {len(candidates)} regions from {file.filename}")

    return GeometryUploadResponse(
        filename=session.geometry_filename,
        candidate_count=len(candidates),
        candidates=candidates,
    )


@router.put("/sessions/{session_id}/settings", response_model=SessionResponse)
def update_settings(
    session_id: str,
    request: UpdateSettingsRequest,
    session_service: SessionService = Depends(get_session_service),
):
    """
    Change binding settings. Fields left out of the request keep their value.

    Raises:
        BindingError: If a column, scheme or method cannot be applied
    """
    session = session_service.get_session(session_id)
    changes = request.model_dump(exclude_unset=True)
    if changes.get("classify_values") is None:
        changes.pop("classify_values", None)
    session.update_settings(**changes)
    return SessionResponse(**session.summary())


@router.get("/sessions/{session_id}/binding", response_model=BindingResponse)
def get_binding(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
):
    """
    Get matches, classification, colors and legend for a session.

    Raises:
        BindingNotReadyError: If no valid table is loaded or columns are not selected
    """
    session = session_service.get_session(session_id)
    if not session.is_ready:
        raise BindingNotReadyError(
            f"Session '{session_id}' needs a valid table with region and value columns selected"
        )

    result = session.current_result().to_dict()
    legend = result.pop("legend")
    return BindingResponse(
        session_id=session_id,
        legend={"title": session.title, **legend},
        **result,
    )


@router.get("/sessions/{session_id}/export")
def export_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
):
    """
    Download the table with matched region and confidence columns appended.

    Raises:
        BindingNotReadyError: If no valid table is loaded or columns are not selected
    """
    session = session_service.get_session(session_id)
    if not session.is_ready:
        raise BindingNotReadyError(
            f"Session '{session_id}' needs a valid table with region and value columns selected"
        )

    stem = (session.table_filename or "data").rsplit(".", 1)[0]
    return Response(
        content=session.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{stem}_matched.csv"'},
    )
