import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from splitledger.core.config import settings
from splitledger.core.exceptions import InvalidArgument, NotFound, PermissionDenied, StoreFailure
from splitledger.api.v1.routes.user import router as user_router
from splitledger.api.v1.routes.group import router as group_router
from splitledger.api.v1.routes.request import router as request_router
from splitledger.api.v1.routes.expense import router as expense_router
from splitledger.api.v1.routes.balances import router as balances_router
import splitledger.db.base  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Split Ledger")

def _error(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler

app.add_exception_handler(NotFound, _error(404))
app.add_exception_handler(InvalidArgument, _error(400))
app.add_exception_handler(PermissionDenied, _error(403))
app.add_exception_handler(StoreFailure, _error(503))

@app.get("/")
async def root():
    return {"message": "Split Ledger is live"}

app.include_router(user_router, prefix="/api/v1/users")
app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(request_router, prefix="/api/v1/requests")
app.include_router(expense_router, prefix="/api/v1/expense")
app.include_router(balances_router, prefix="/api/v1/balances")
