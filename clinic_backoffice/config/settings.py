from functools import lru_cache

import pytz
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Clinic Back-Office API"
    PROJECT_DESCRIPTION: str = "Validación de turnos y recordatorios por WhatsApp"
    VERSION: str = "0.1.0"

    # Application Settings
    ENVIRONMENT: str = Field("development", description="Entorno de ejecución (development, production, test)")
    DEBUG: bool = Field(False, description="Modo debug")
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")
    LOG_FORMAT: str = Field("colored", description="Formato de logs: colored, json o plain")
    SENTRY_DSN: str | None = Field(None, description="DSN de Sentry (deshabilitado si es None)")
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"], description="Orígenes permitidos para CORS")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="Host de PostgreSQL")
    DB_PORT: int = Field(5432, description="Puerto de PostgreSQL")
    DB_NAME: str = Field("clinic", description="Nombre de la base de datos")
    DB_USER: str = Field("postgres", description="Usuario de PostgreSQL")
    DB_PASSWORD: str | None = Field(None, description="Contraseña de PostgreSQL")
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(10, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(20, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout para obtener conexión del pool")

    # Clinic Settings
    CLINIC_TIMEZONE: str = Field(
        "America/Argentina/Buenos_Aires",
        description="Zona horaria de la clínica (horarios de atención y textos de recordatorio)",
    )

    # WhatsApp Cloud API settings
    # Credentials and template live in the whatsapp_config table, not here.
    WHATSAPP_API_BASE: str = Field("https://graph.facebook.com", description="URL base para la API de WhatsApp")
    WHATSAPP_API_VERSION: str = Field("v20.0", description="Versión de la API de WhatsApp")
    WHATSAPP_TIMEOUT_SECONDS: float = Field(30.0, description="Timeout de requests a la API de WhatsApp")

    # Reminder Scheduler Settings
    REMINDER_SCHEDULER_ENABLED: bool = Field(True, description="Iniciar el scheduler de recordatorios en startup")
    REMINDER_TICK_INTERVAL_SECONDS: int = Field(
        300, description="Intervalo entre ejecuciones del scheduler de recordatorios"
    )
    REMINDER_TICK_TIMEOUT_SECONDS: int = Field(300, description="Tiempo máximo de una ejecución del scheduler")
    REMINDER_WINDOW_MINUTES: int = Field(60, description="Ancho de la ventana de búsqueda por recordatorio")
    REMINDER_RETRY_BATCH_SIZE: int = Field(50, description="Máximo de recordatorios reintentados por ejecución")
    REMINDER_MAX_ATTEMPTS: int = Field(3, description="Intentos máximos de envío por recordatorio")
    REMINDER_SEND_DELAY_SECONDS: float = Field(
        0.5, description="Pausa entre envíos para respetar el rate limit de WhatsApp"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("CLINIC_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Valida que la zona horaria exista en la base de pytz"""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"colored", "json", "plain"}
        if v not in allowed:
            raise ValueError(f"LOG_FORMAT must be one of {sorted(allowed)}")
        return v

    @field_validator("REMINDER_WINDOW_MINUTES", "REMINDER_TICK_INTERVAL_SECONDS", "REMINDER_TICK_TIMEOUT_SECONDS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Value must be greater than zero")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """URL síncrona usada por Alembic"""
        auth = self.DB_USER if not self.DB_PASSWORD else f"{self.DB_USER}:{self.DB_PASSWORD}"
        return f"postgresql://{auth}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_test(self) -> bool:
        return self.ENVIRONMENT.lower() == "test"

    @property
    def clinic_tz(self) -> pytz.BaseTzInfo:
        """Zona horaria de la clínica como objeto pytz"""
        return pytz.timezone(self.CLINIC_TIMEZONE)


@lru_cache
def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    return Settings()
