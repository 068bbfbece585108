# healthflow/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== App =====
    APP_NAME: str = "HealthFlow TeleAtendimento API"
    ENV: str = "dev"
    # TZ da clínica: define o que conta como "hoje" nas estatísticas
    TIMEZONE: str = "America/Sao_Paulo"

    # ===== HTTP =====
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]
    # None = Swagger só em dev
    DOCS_ENABLED: Optional[bool] = None

    # ===== Dados =====
    # Carrega pacientes/médicos/consulta de demonstração ao subir
    SEED_DEMO_DATA: bool = True

    # ===== Logging =====
    LOG_LEVEL: str = "INFO"
    UVICORN_LOG_LEVEL: str = "INFO"

    def model_post_init(self, __context) -> None:
        """
        Normaliza:
          - API_PREFIX sem barra final ("/api/" → "/api", "/" → "")
          - DOCS_ENABLED derivado de ENV quando não informado
          - níveis de log em maiúsculas
        """
        self.API_PREFIX = self.API_PREFIX.rstrip("/")
        if self.API_PREFIX and not self.API_PREFIX.startswith("/"):
            self.API_PREFIX = "/" + self.API_PREFIX

        if self.DOCS_ENABLED is None:
            self.DOCS_ENABLED = self.ENV == "dev"

        self.LOG_LEVEL = self.LOG_LEVEL.upper()
        self.UVICORN_LOG_LEVEL = self.UVICORN_LOG_LEVEL.upper()


settings = Settings()
