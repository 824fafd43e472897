import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_FILE = Path.home() / ".summary_shelf_env"
DEFAULT_DATA_DIR = Path.home() / ".summary_shelf"


@dataclass
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = ENV_FILE) -> "Settings":
        """Read settings from the environment, after loading the dotenv files."""
        if env_file is not None:
            load_dotenv(env_file)
        load_dotenv(find_dotenv(usecwd=True))  # ./.env; never overrides what is already set

        data_dir = os.getenv("SUMMARY_SHELF_DATA_DIR")
        log_level = os.getenv("SUMMARY_SHELF_LOG_LEVEL") or "WARNING"
        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            log_level=log_level.upper(),
        )
