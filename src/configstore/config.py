"""Environment configuration for configstore"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Minimal configuration"""

    # Backing file used by Configuration.from_env()
    CONFIG_FILE = Path(os.getenv("CONFIGSTORE_FILE", "config.properties"))

    # Text encoding of settings files
    ENCODING = os.getenv("CONFIGSTORE_ENCODING", "utf-8")

    # Debug-only configuration groups are persisted only when this is set
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

config = Config()
