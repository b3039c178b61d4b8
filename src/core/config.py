"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El cliente Jira y la CLI leen host, credenciales y política de reintentos
  desde un único contrato.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "jira-audit"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "jira-audit"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "jira-audit"
    return Path.home() / ".config" / "jira-audit"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves existentes que no aparecen en `values` se conservan.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# jira-audit user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="JIRA_AUDIT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    jira_host: str = Field(
        default="agiledigital.atlassian.net",
        min_length=1,
        description="Host de Jira Cloud (sin esquema).",
    )
    jira_api_version: str = Field(
        default="3",
        min_length=1,
        description="Versión de la API REST de plataforma (/rest/api/<v>).",
    )
    username: str | None = Field(
        default=None,
        description="Usuario (email) para autenticación básica.",
    )
    password: str | None = Field(
        default=None,
        description="API token asociado al usuario.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="jira-audit/0.1",
        min_length=1,
        description="User-Agent para peticiones a Jira.",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Reintentos máximos ante fallos transitorios (red, 429, 5xx).",
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base del backoff exponencial entre reintentos (segundos).",
    )
    retry_after_max_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Tope para la espera pedida por `Retry-After` (segundos).",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING, ...).",
    )

    @property
    def base_url(self) -> str:
        return f"https://{self.jira_host}"
