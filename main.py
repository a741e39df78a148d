import uvicorn

from app.core.app import app  # noqa: F401
from app.core.config import settings

if __name__ == "__main__":
    reload = settings.APP_ENV == "development"
    uvicorn.run("app.core.app:app", host="0.0.0.0", port=settings.PORT, reload=reload)
