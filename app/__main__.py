import uvicorn

from app.core.config import settings

uvicorn.run("app.main:app", host=settings.host, port=settings.port)
