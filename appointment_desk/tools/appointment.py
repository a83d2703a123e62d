from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from appointment_desk.dependencies.services import get_table_view
from appointment_desk.schemas.view import DeleteOutcome, NavigationIntent, TableViewState
from appointment_desk.services import AppointmentTableView

router = APIRouter()


@router.get("/view", response_model=TableViewState)
async def view_appointments(
    query: Optional[str] = None,
    view: AppointmentTableView = Depends(get_table_view),
):
    if query is not None:
        view.set_query(query)
    return view.render()


@router.post("/refresh", response_model=TableViewState)
async def refresh_appointments(
    view: AppointmentTableView = Depends(get_table_view),
):
    result = await view.refresh()
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.message)
    return view.render()


@router.delete("/{appointment_id}", response_model=DeleteOutcome)
async def delete_appointment(
    appointment_id: int,
    view: AppointmentTableView = Depends(get_table_view),
):
    result = await view.delete(appointment_id)
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.message)
    return DeleteOutcome(ok=True, view=view.render())


@router.get("/{appointment_id}/details", response_model=NavigationIntent)
async def appointment_details(
    appointment_id: int,
    view: AppointmentTableView = Depends(get_table_view),
):
    return NavigationIntent(redirect=view.view_details(appointment_id))
