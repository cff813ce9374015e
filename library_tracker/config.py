import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Storage
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "library_data.json")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")


settings = Settings()
