import os
from dotenv import load_dotenv
from pydantic import BaseModel
load_dotenv()

class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "NurseNotes-AI")
    NOTES_DIR: str = os.getenv("NOTES_DIR", os.path.join(os.path.expanduser("~"), "NurseNotesDev"))

    USE_LOCAL_LLM: bool = os.getenv("USE_LOCAL_LLM", "false").lower() == "true"
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TEMPERATURE: float = float(os.getenv("OPENAI_TEMPERATURE", "0.2"))

    # Local LLM (OpenAI-compatible server)
    LOCAL_LLM_BASE_URL: str = os.getenv("LOCAL_LLM_BASE_URL", "http://localhost:11434/v1")
    LOCAL_LLM_API_KEY: str = os.getenv("LOCAL_LLM_API_KEY", "ollama")
    LOCAL_LLM_MODEL: str = os.getenv("LOCAL_LLM_MODEL", "llama3.1:8b-instruct-q4_K_M")
    LOCAL_LLM_TEMPERATURE: float = float(os.getenv("LOCAL_LLM_TEMPERATURE", "0.2"))
    LOCAL_LLM_MAX_TOKENS: int = int(os.getenv("LOCAL_LLM_MAX_TOKENS", "8000"))

    # Google Drive backup (OAuth happens in the browser, we only receive the access token)
    GOOGLE_CLIENT_ID: str | None = os.getenv("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET: str | None = os.getenv("GOOGLE_CLIENT_SECRET")
    DRIVE_BACKUP_FOLDER: str = os.getenv("DRIVE_BACKUP_FOLDER", "NurseNotes-AI-Backup")

    NIH_SEARCH_URL: str = os.getenv("NIH_SEARCH_URL", "https://openaccess-api.nih.gov/api/search")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    @property
    def llm_configured(self) -> bool:
        return self.USE_LOCAL_LLM or bool(self.OPENAI_API_KEY)

settings = Settings()
