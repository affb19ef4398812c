from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración del motor. Se lee de variables de entorno con prefijo
    EXTRATO_ (p.ej. EXTRATO_CURRENCY) o de un archivo .env.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRATO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Moneda fija de todos los drivers (no hay multi-moneda)
    currency: str = "BRL"
    # Solo informativo: las fechas de los PDFs no se convierten de zona horaria
    default_timezone: str = "America/Sao_Paulo"
    # Cuántos caracteres/bytes mira el detector de formato
    detection_sample_size: int = 1000
    # Tope de tamaño que aplica el CLI antes de invocar el parser
    max_content_bytes: int = 20 * 1024 * 1024
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    return Settings()
