import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv() # Load environment variables from .env file

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    # pump.fun metadata pinning + PumpPortal Lightning trade API
    PUMP_IPFS_ENDPOINT: str = os.getenv("PUMP_IPFS_ENDPOINT", "https://pump.fun/api/ipfs")
    PUMP_TRADE_ENDPOINT: str = os.getenv("PUMP_TRADE_ENDPOINT", "https://pumpportal.fun/api/trade")
    PUMPPORTAL_API_KEY: str = os.getenv("PUMPPORTAL_API_KEY", "")

    # Public gateway used to turn ipfs:// URIs into fetchable URLs
    IPFS_GATEWAY_URL: str = os.getenv("IPFS_GATEWAY_URL", "https://ipfs.io/ipfs/")

    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30.0"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")  # empty string disables the file log


settings = Settings()
