from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DB_URI: str = "sqlite:///./watermon.db"
    CORS_ORIGINS: str = "http://localhost:5173"
    # "<id>:<name>" pairs, comma separated
    LOCATIONS: str = "0:Doha,1:Al Khor,2:Al Wakrah"
    LOG_LEVEL: str = "INFO"
    # Dashboard poller
    POLLER_ENABLED: bool = True
    POLL_INTERVAL_SECONDS: float = 1.0
    ALERT_SUPPRESSION_SECONDS: float = 60.0
    # Alert notification webhook (optional)
    NOTIFY_WEBHOOK_URL: str = ""
    NOTIFY_WEBHOOK_TOKEN: str = ""
    EXTERNAL_TIMEOUT_SECONDS: float = 8.0

    model_config = SettingsConfigDict(
        env_file=[
            Path(__file__).resolve().parents[2] / ".env",
            Path(".env"),
        ],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def location_names(self) -> dict[int, str]:
        locations = {}
        for item in self.LOCATIONS.split(","):
            item = item.strip()
            if not item:
                continue
            ident, _, name = item.partition(":")
            locations[int(ident)] = name.strip() or f"Location {ident.strip()}"
        return locations


settings = Settings()
