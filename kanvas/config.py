"""Configuration for Kanvas Editor Service"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Service info
    SERVICE_NAME: str = "Kanvas Editor Service"
    SERVICE_HOST: str = os.getenv("SERVICE_HOST", "0.0.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    # Dashboard storage
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./kanvas.db")

    # Database collaborator endpoints (list tables, execute query, ...)
    KANVAS_API_URL: str = os.getenv("KANVAS_API_URL", "http://localhost/kanvas/api/mysql")
    DASHBOARD_STORE_URL: str = os.getenv("DASHBOARD_STORE_URL", "")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30.0"))

    # Canvas geometry
    CANVAS_WIDTH: int = int(os.getenv("CANVAS_WIDTH", "1000"))
    CANVAS_HEIGHT: int = int(os.getenv("CANVAS_HEIGHT", "1000"))
    GRID_SIZE: int = int(os.getenv("GRID_SIZE", "10"))

    # Export
    EXPORT_DIR: str = os.getenv("EXPORT_DIR", "./exports")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def dashboard_endpoint(self) -> str:
        """Save/load endpoint; defaults to dashboard.php next to the other scripts"""
        return self.DASHBOARD_STORE_URL or f"{self.KANVAS_API_URL.rstrip('/')}/dashboard.php"

    class Config:
        case_sensitive = True


settings = Settings()
