# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nursenotes.config import settings
from nursenotes.routers import documents, drive, generate, images, notes, redeploy
from nursenotes.utils.logger_setup import setup_logging

log = logging.getLogger("nursenotes")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # runs for `python main.py` and `uvicorn main:app` alike
    setup_logging(log_dir=settings.LOG_DIR, console_level=settings.LOG_LEVEL)
    log.info("starting %s", settings.PROJECT_NAME)
    yield

def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    # === CORS ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # "*" with credentials is rejected by browsers
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (generate, redeploy, notes, documents, drive, images):
        app.include_router(module.router)

    @app.get("/health")
    def health():
        model = settings.LOCAL_LLM_MODEL if settings.USE_LOCAL_LLM else settings.OPENAI_MODEL
        return {"ok": True, "notes_dir": settings.NOTES_DIR, "model": model}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
