from fastapi import APIRouter, Depends, Query, Request, Response
from starlette.concurrency import run_in_threadpool
from typing import List, Optional

from expense_svc.core.config import Settings
from expense_svc.core.logging import user_id_ctx
from expense_svc.models import Expense, ExpenseIn, ExpenseModifyIn
from expense_svc.services.expense_service import ExpenseService

router = APIRouter(prefix="/expense", tags=["expense"])

# Dependencies -----------------------------------------------------


def get_expense_service(request: Request) -> ExpenseService:
    return request.app.state.expense_service


def _credential(request: Request, name: str) -> Optional[str]:
    # Headers win over cookies of the same name.
    return request.headers.get(name) or request.cookies.get(name)


async def get_current_user(
    request: Request,
    service: ExpenseService = Depends(get_expense_service),
) -> str:
    """Authenticate the request and return the owner id.

    The identity check is a blocking HTTP call, so it runs in the threadpool.
    """
    settings: Settings = request.app.state.settings
    identity = _credential(request, settings.auth_id_header)
    secret = _credential(request, settings.auth_token_header)
    owner = await run_in_threadpool(service.authenticate, identity, secret)
    user_id_ctx.set(owner)
    return owner


# Routes -----------------------------------------------------------
@router.get(
    "/list", response_model=List[Expense], summary="List the caller's expenses"
)
def list_expenses(
    month: Optional[str] = Query(
        None, description="Filter: calendar month as YYYY-MM or YYYY-M"
    ),
    owner: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.list_expenses(owner, month)


@router.post("/create", response_model=Expense, summary="Create an expense")
def create_expense(
    payload: ExpenseIn,
    owner: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.create_expense(owner, payload)


@router.post("/modify", response_model=Expense, summary="Replace an existing expense")
def modify_expense(
    payload: ExpenseModifyIn,
    owner: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.modify_expense(owner, payload)


@router.get("/delete", summary="Delete an expense")
def delete_expense(
    expense_id: int = Query(..., alias="id", description="Expense identifier"),
    owner: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    service.delete_expense(owner, expense_id)
    return Response(status_code=200)
