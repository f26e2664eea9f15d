import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from shiori.core.config import Base, engine, get_db, settings
from shiori.core.exceptions import register_exception_handlers
from shiori.core.security import get_current_user_optional
from shiori.api.routers import auth, diary
from shiori.models import User

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("shiori")

# =====================================================================
# CREATE APP
# =====================================================================

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Personal multi-user diary API",
    version=settings.APP_VERSION,
)

register_exception_handlers(app)

# =====================================================================
# CORS MIDDLEWARE
# =====================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

# =====================================================================
# DATABASE INITIALIZATION
# =====================================================================

Base.metadata.create_all(bind=engine)
logger.info(f"Database ready ({engine.url.get_backend_name()})")

# =====================================================================
# HEALTH CHECK (before routers)
# =====================================================================


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint."""
    db.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "connected"}


# =====================================================================
# ROUTES
# =====================================================================

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(diary.router, prefix=settings.API_PREFIX)

logger.info("All routers included")

# =====================================================================
# ROOT ENDPOINT
# =====================================================================


@app.get("/")
def root(current_user: Optional[User] = Depends(get_current_user_optional)):
    """API root endpoint."""
    prefix = settings.API_PREFIX
    info = {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "authentication": "JWT",
        "docs": "/docs",
        "public_endpoints": [
            f"POST {prefix}/auth/register",
            f"POST {prefix}/auth/login",
            f"POST {prefix}/auth/validate",
            f"POST {prefix}/auth/check-username",
            f"POST {prefix}/auth/check-email",
        ],
        "protected_endpoints": [
            f"GET {prefix}/auth/me",
            f"POST {prefix}/auth/logout",
            f"GET {prefix}/days",
            f"GET {prefix}/days/{{date}}",
            f"GET {prefix}/today",
            f"POST {prefix}/today/entries",
            f"GET {prefix}/statistics",
            f"GET {prefix}/export",
        ],
    }
    if current_user is not None:
        info["authenticated_as"] = current_user.username
    return info
