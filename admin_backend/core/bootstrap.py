import logging

from admin_backend.api.v1.routers import auth, failed_jobs, roles, users

logger = logging.getLogger(__name__)


def bootstrap_app(app):
    # The login routes stay outside BACKEND_PREFIX so the auth gate never covers them
    app.include_router(auth.router, tags=["Authentication"])

    app.include_router(users.router, tags=["Users"])
    app.include_router(roles.router, tags=["Roles"])
    app.include_router(failed_jobs.router, tags=["Failed jobs"])
    logger.info("Backend routes registered.")
