from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = os.getenv("APP_NAME", "Where2Tattoo")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # MongoDB Settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "where2tattoo_db")

    # JWT Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your_secret_key_here")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Next.js frontend
    ]

    # Uploads
    UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "./uploads")

    # Availability: when the taken-times lookup fails, show all slots (true)
    # or refuse to answer until it succeeds (false)
    AVAILABILITY_FAIL_OPEN: bool = os.getenv("AVAILABILITY_FAIL_OPEN", "true").lower() == "true"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
