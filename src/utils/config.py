from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações da aplicação, lidas do ambiente (ou de um .env local).
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Banco ---
    DATABASE_URL: str = "sqlite:///./flashcards.db"

    # --- Provedor de IA (Groq) ---
    GROQ_API_KEY: str = ""
    GENERATION_MODEL: str = "llama-3.3-70b-versatile"
    GENERATION_TEMPERATURE: float = 0.7
    GENERATION_TIMEOUT_SECONDS: float = 30.0

    # --- Limites de entrada ---
    TEXT_MIN_LENGTH: int = 100
    TEXT_MAX_LENGTH: int = 10_000
    MAX_CANDIDATES: int = 50

    # --- Limites dos cards e sessões ---
    CARD_FRONT_MAX_LENGTH: int = 1000
    CARD_BACK_MAX_LENGTH: int = 1000
    SESSION_NAME_MAX_LENGTH: int = 255

    # --- Logging ---
    LOG_LEVEL: str = "INFO"


settings = Settings()
