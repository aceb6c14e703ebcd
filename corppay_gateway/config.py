"""Configuration management using Pydantic Settings"""

from datetime import time
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "corppay-gateway"
    log_level: str = "INFO"

    # Seed data (credentials.json / accounts.json); None uses the bundled files
    seed_dir: Optional[Path] = None

    # Payment modes and settlement-network limits
    payment_modes: List[str] = ["FT", "RTGS", "IMPS", "NEFT"]
    neft_enabled: bool = True
    high_value_threshold: Decimal = Decimal("200000")
    neft_min_amount: Decimal = Decimal("1000")
    neft_max_amount: Decimal = Decimal("500000")
    neft_cutoff: time = time(17, 0)

    # Envelope operation names: "<operation>_Req" / "<operation>_Res"
    payment_operation: str = "Single_Payment_Corp"
    status_operation: str = "get_Single_Payment_Status_Corp"
    accounts_operation: str = "getListofAccountsfromCorpID"

    # Opaque value placed in the Signature block
    signature_value: str = "Signature"

    @property
    def enabled_modes(self) -> List[str]:
        """Mode set accepted by the schema validator"""
        if self.neft_enabled:
            return list(self.payment_modes)
        return [mode for mode in self.payment_modes if mode != "NEFT"]


settings = Settings()
