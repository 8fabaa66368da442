from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.v1.router import api_router
from app.core.policies import PolicyDenied

# Register every model with Base.metadata before mappers are configured
from app.models import audit_log, category_limit, customer, lead, user  # noqa: F401


app = FastAPI(
    title="Dealership CRM API",
    description="Lead tracking, finance approvals and role-based access for a car dealership",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PolicyDenied)
async def policy_denied_handler(request: Request, exc: PolicyDenied):
    """Render policy denials with their structured body (401/403)."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.decision.status_code == 401 else None
    return JSONResponse(status_code=exc.decision.status_code, content=exc.decision.body, headers=headers)


app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "dealership-crm-api", "version": "0.1.0"}
