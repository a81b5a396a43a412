from fastapi import APIRouter

from leavedesk.api.balances import balance_router
from leavedesk.api.employees import employees_router
from leavedesk.api.leaves import leaves_router

api_router = APIRouter()
api_router.include_router(leaves_router)
api_router.include_router(balance_router)
api_router.include_router(employees_router)
