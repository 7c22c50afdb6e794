import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app import config
from app.database import engine, Base
from app.errors import LegalOfficeError
from app.i18n import resolve_language, translate
from app.auth.routes import router as auth_router
from app.clients.routes import router as clients_router
from app.cases.routes import router as cases_router
from app.documents.routes import router as documents_router
from app.tasks.routes import router as tasks_router
from app.time_entries.routes import router as time_entries_router
from app.expenses.routes import router as expenses_router
from app.invoices.routes import router as invoices_router
from app.calendar.routes import router as calendar_router
from app.notifications.routes import router as notifications_router
from app.templates.routes import router as templates_router
from app.reports.routes import router as reports_router
from app.ai.routes import router as ai_router
from app.shared_docs.routes import router as shared_docs_router
from app.client_portal.routes import router as client_auth_router, admin_router as client_portal_admin_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Law Office Management API",
    description="Cases, clients, documents, billing and a client portal for law offices",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin-allow-popups"
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response

app.add_middleware(SecurityHeadersMiddleware)

@app.exception_handler(LegalOfficeError)
async def legal_office_error_handler(request: Request, exc: LegalOfficeError):
    language = resolve_language(request.headers.get("accept-language"))
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": translate(exc.message_key, language), "code": exc.code},
        headers=exc.headers
    )

# Include routers
app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(cases_router)
app.include_router(documents_router)
app.include_router(tasks_router)
app.include_router(time_entries_router)
app.include_router(expenses_router)
app.include_router(invoices_router)
app.include_router(calendar_router)
app.include_router(notifications_router)
app.include_router(templates_router)
app.include_router(reports_router)
app.include_router(ai_router)
app.include_router(shared_docs_router)
app.include_router(client_auth_router)
app.include_router(client_portal_admin_router)

@app.get("/")
def root():
    return {
        "message": "Law Office Management API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
def health_check():
    return {"status": "healthy"}
