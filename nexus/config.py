from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite:///./nexus.db", validation_alias="DATABASE_URL")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", validation_alias="LOG_DIR")
    log_to_console: bool = Field(default=False, validation_alias="LOG_TO_CONSOLE")

    jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=7 * 24 * 60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Upper bound for a single request, enforced by middleware in nexus.api
    request_timeout_seconds: float = Field(default=15.0, validation_alias="REQUEST_TIMEOUT_SECONDS")

    insight_llm_enabled: bool = Field(default=False, validation_alias="INSIGHT_LLM_ENABLED")
    insight_llm_timeout_seconds: float = Field(default=8.0, validation_alias="INSIGHT_LLM_TIMEOUT_SECONDS")
    ollama_base_url: str = Field(default="http://localhost:11434", validation_alias="OLLAMA_BASE_URL")
    ollama_model: str = Field(default="qwen:latest", validation_alias="OLLAMA_MODEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def create_db():
    # Import for side effects: registers every table on Base.metadata.
    import nexus.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def reset_db():
    import nexus.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
    create_db()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
