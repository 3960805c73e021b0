from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./assister.db")
    jwt_secret: str = os.getenv("JWT_SECRET", "change-me")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    # Tokens are long-lived; the user_tokens ledger decides whether they are still valid.
    jwt_expire_days: int = int(os.getenv("JWT_EXPIRE_DAYS", "365"))

    reference_timezone: str = os.getenv("REFERENCE_TIMEZONE", "Asia/Kolkata")

    firebase_config: str = os.getenv("FIREBASE_CONFIG", "")

    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def get_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
