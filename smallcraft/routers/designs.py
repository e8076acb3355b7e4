"""Designs router: saved designs, evaluation and import/export."""

import dataclasses
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.database import get_db
from smallcraft.schemas.design import CsvImportRequest, Design, ImportResponse, NameCheckResponse
from smallcraft.schemas.rules import DesignEvaluationResponse, EvaluationRequest
from smallcraft.services.design_service import evaluate_design
from smallcraft.services.design_store import (
    delete_design,
    get_design,
    list_designs,
    name_exists,
    save_design,
)
from smallcraft.services.interchange import (
    csv_filename,
    export_design_csv,
    export_designs_json,
    import_design_csv,
    import_designs_json,
)

router = APIRouter(prefix="/designs", tags=["designs"])


async def _save_or_raise(design: Design, db: AsyncSession) -> Design:
    """Save and reload a design, mapping store errors to HTTP errors."""
    if await name_exists(design.name, db, exclude_id=design.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A design named '{design.name.strip()}' already exists",
        )
    try:
        design_id = await save_design(design, db)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return await get_design(design_id, db)


@router.get("", response_model=list[Design])
async def get_designs(db: AsyncSession = Depends(get_db)):
    return await list_designs(db)


@router.post("", response_model=Design, status_code=status.HTTP_201_CREATED)
async def create_design(design: Design, db: AsyncSession = Depends(get_db)):
    return await _save_or_raise(design.model_copy(update={"id": None}), db)


@router.get("/name-exists", response_model=NameCheckResponse)
async def check_name(
    name: str,
    exclude_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return NameCheckResponse(name=name, exists=await name_exists(name, db, exclude_id=exclude_id))


@router.post("/evaluate", response_model=DesignEvaluationResponse)
async def evaluate(payload: EvaluationRequest):
    """Mass, cost, fuel, weapon usage, crew and issues for an unsaved design."""
    evaluation = evaluate_design(payload.design, payload.weeks, payload.hours)
    data = dataclasses.asdict(evaluation)
    data["costs"]["total"] = evaluation.costs.total
    return DesignEvaluationResponse.model_validate(data)


@router.get("/export")
async def export_all(db: AsyncSession = Depends(get_db)):
    """All designs as a downloadable JSON array."""
    designs = await list_designs(db)
    return Response(
        content=export_designs_json(designs),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="smallcraft_designs.json"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_json(request: Request, db: AsyncSession = Depends(get_db)):
    """Import a JSON array of designs; each is saved as a new record."""
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    try:
        result = await import_designs_json(text, db)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ImportResponse(imported=result.imported, failed=result.failed, errors=result.errors)


@router.post("/import/csv", response_model=Design, status_code=status.HTTP_201_CREATED)
async def import_csv(payload: CsvImportRequest, db: AsyncSession = Depends(get_db)):
    """Rebuild a design from a summary CSV and save it."""
    design = import_design_csv(payload.content, payload.filename)
    return await _save_or_raise(design, db)


@router.get("/{design_id}", response_model=Design)
async def read_design(design_id: int, db: AsyncSession = Depends(get_db)):
    design = await get_design(design_id, db)
    if design is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Design not found")
    return design


@router.put("/{design_id}", response_model=Design)
async def update_design(design_id: int, design: Design, db: AsyncSession = Depends(get_db)):
    if await get_design(design_id, db) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Design not found")
    return await _save_or_raise(design.model_copy(update={"id": design_id}), db)


@router.delete("/{design_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_design(design_id: int, db: AsyncSession = Depends(get_db)):
    if not await delete_design(design_id, db):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Design not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{design_id}/export.csv")
async def export_csv(design_id: int, db: AsyncSession = Depends(get_db)):
    design = await get_design(design_id, db)
    if design is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Design not found")
    return Response(
        content=export_design_csv(design),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{csv_filename(design)}"'},
    )
