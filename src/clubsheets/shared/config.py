import os
from dotenv import load_dotenv
from pydantic import BaseModel

from .consts import CONFIG_SHEET_NAME


class Config(BaseModel):
    # Keys
    KEYS_PATH: str

    # Config spreadsheet
    CONFIG_SPREADSHEET_ID: str
    CONFIG_SHEET_NAME: str = CONFIG_SHEET_NAME

    # Modules registering reports, comma separated
    REPORT_MODULES: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Relax time each round in second, 0 to run a single round
    RELAX_TIME_EACH_ROUND: int = 0

    @staticmethod
    def from_env(dotenv_path: str = "settings.env") -> "Config":
        load_dotenv(dotenv_path)
        return Config.model_validate(os.environ)

    @property
    def report_modules(self) -> list[str]:
        return [name.strip() for name in self.REPORT_MODULES.split(",") if name.strip()]
