from typing import Dict, List
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.ordering import PositionUpdate
from app.schemas.unit import Unit, UnitCreate, UnitUpdate, UnitWithLessons
from app.services.unit import unit_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Unit], status_code=status.HTTP_201_CREATED)
def create_unit(
    unit_in: UnitCreate,
    db: Session = Depends(deps.get_db),
):
    unit = unit_service.create_unit(db, unit_in=unit_in)
    return APIResponse(message="Unit created successfully", data=Unit.model_validate(unit), code=201)

@router.get("/course/{course_id}", response_model=APIResponse[List[UnitWithLessons]])
def get_units_by_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    units = unit_service.get_units_by_course(db, course_id=course_id)
    return APIResponse(message="Units retrieved successfully", data=[UnitWithLessons.model_validate(u) for u in units])

@router.get("/{unit_id}", response_model=APIResponse[UnitWithLessons])
def get_unit(
    unit_id: int,
    db: Session = Depends(deps.get_db),
):
    unit = unit_service.get_unit(db, unit_id=unit_id)
    return APIResponse(message="Unit retrieved successfully", data=UnitWithLessons.model_validate(unit))

@router.put("/{unit_id}", response_model=APIResponse[Unit])
def update_unit(
    unit_id: int,
    unit_in: UnitUpdate,
    db: Session = Depends(deps.get_db),
):
    unit = unit_service.update_unit(db, unit_id=unit_id, unit_in=unit_in)
    return APIResponse(message="Unit updated successfully", data=Unit.model_validate(unit))

@router.put("/{unit_id}/move", response_model=APIResponse[Unit])
def move_unit(
    unit_id: int,
    position: PositionUpdate,
    db: Session = Depends(deps.get_db),
):
    unit = unit_service.move_to_position(db, unit_id=unit_id, new_order=position.order)
    return APIResponse(message="Unit moved successfully", data=Unit.model_validate(unit))

@router.post("/{course_id}/reorder", response_model=APIResponse[List[Unit]])
def reorder_units(
    course_id: int,
    unit_orders: Dict[int, int] = Body(..., examples=[{"3": 1, "1": 2}]),
    db: Session = Depends(deps.get_db),
):
    units = unit_service.reorder(db, course_id=course_id, unit_orders=unit_orders)
    return APIResponse(message="Units reordered successfully", data=[Unit.model_validate(u) for u in units])

@router.delete("/{unit_id}", response_model=APIResponse)
def delete_unit(
    unit_id: int,
    db: Session = Depends(deps.get_db),
):
    unit_service.delete_unit(db, unit_id=unit_id)
    return APIResponse(message="Unit deleted successfully")
