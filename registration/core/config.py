# ================================
# file: registration/core/config.py
# ================================
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    SERVICE_NAME: str = "junior-core-registration"
    LOG_LEVEL: str = "INFO"

    # Địa chỉ Storage Collaborator mà relay gửi tới (override bằng ENV hoặc .env)
    STORAGE_URL: str = "http://localhost:8000/storage/exec"

    # Bật endpoint lưu trữ nội bộ (ghi file .xlsx)
    STORAGE_ENABLED: bool = True
    SHEET_PATH: str = "data/registrations.xlsx"
    SHEET_TITLE: str = "Registrations"

    # Chữ số đầu hợp lệ của số di động (bản cũ: 7-9)
    PHONE_LEADING_DIGITS: str = "6-9"

    SESSION_SECRET: str = "change-me-please"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

# singleton settings cho toàn app
settings = Settings()
