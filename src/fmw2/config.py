from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from fmw2.exceptions import ConfigError

class AppSettings(BaseSettings):
    name: str = "FMW2 Templates"
    version: str = "1.0.0"
    timezone: str = "Asia/Singapore"  # "today" and picker timestamps are read in this zone

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

class PathSettings(BaseSettings):
    db_path: Path = Path("./data/fmw2.db")


class UnitSettings(BaseSettings):
    """
    Unit-specific text interpolated into the generated reports.
    """
    unit_name: str = "11FMD"
    unit_path: str = "1AMB/ 11FMD/ FMW2"
    ranks: list[str] = [
        "REC",
        "PTE",
        "LCP",
        "CPL",
        "CFC",
        "3SG",
        "2SG",
        "2LT",
        "LTA",
        "ME1T",
        "ME1",
        "ME2",
    ]
    recommended_by_default: str = "ME3 Alex"
    medical_centre_default: str = "Sungei Gedong Medical Centre"
    location_abbreviations: dict[str, str] = {
        "Sungei Gedong Medical Centre": "SGMC",
    }
    vehicle_location_default: str = "MSVS Level "
    default_num_guards: int = 3

class SecuritySettings(BaseSettings):
    """
    Optional guard on the log endpoint and request size cap.
    """
    api_token: Optional[str] = None  # Bearer token or X-API-Key
    basic_user: Optional[str] = None
    basic_pass: Optional[str] = None
    max_body_kb: int = 256

class LoggingSettings(BaseSettings):
    log_requests: bool = True
    level: str = "INFO"
    record_generations: bool = True

class StorageSettings(BaseSettings):
    """
    Generation-log sink selection:
    - sqlite (local/dev default)
    - firestore (cloud)
    """
    backend: str = "sqlite"  # sqlite|firestore
    firestore_project_id: Optional[str] = None
    firestore_database: str = "(default)"
    firestore_collection: str = "fmw2_logs"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    paths: PathSettings = PathSettings()
    unit: UnitSettings = UnitSettings()
    security: SecuritySettings = SecuritySettings()
    logging: LoggingSettings = LoggingSettings()
    storage: StorageSettings = StorageSettings()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        # Load from default path if exists
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        if not path:
            return cls()
        if not Path(path).exists():
            raise ConfigError(f"Config file not found: {path}")

        with open(path, "r") as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {path} must hold a mapping of settings groups")
        try:
            return cls(**config_data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings in {path}: {exc}") from exc

settings = Settings.load()
