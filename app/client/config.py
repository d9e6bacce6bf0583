# app/client/config.py

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    API 클라이언트 설정입니다. 환경 변수는 `STOCKKEEPER_` 접두사를 사용합니다.
    (예: STOCKKEEPER_API_URL=http://localhost:8000/api/v1)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOCKKEEPER_",
        extra="ignore",
    )

    API_URL: str = Field("http://localhost:8000/api/v1", description="Base URL including the /api/v1 prefix")
    TOKEN_FILE: Optional[str] = Field(None, description="File used to persist the access token between runs")
    TIMEOUT: float = Field(10.0, description="Request timeout in seconds")
    SEARCH_DEBOUNCE_SECONDS: float = Field(0.3, description="Delay before a search query is sent")


client_settings = ClientSettings()
