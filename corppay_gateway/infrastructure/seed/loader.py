"""Loads credential and account seed data from JSON files"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from corppay_gateway.domain.exceptions import SeedDataError
from corppay_gateway.domain.models import AccountSnapshot, Credential

BUNDLED_SEED_DIR = Path(__file__).resolve().parent / "data"


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise SeedDataError(f"Seed file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
    except ValueError as e:
        raise SeedDataError(f"Invalid JSON in seed file {path}: {e}") from e


def load_credentials(seed_dir: Optional[Path] = None) -> List[Credential]:
    """Read credentials.json from seed_dir (bundled data when None)"""
    data = _read_json((seed_dir or BUNDLED_SEED_DIR) / "credentials.json")
    try:
        return [
            Credential(
                username=str(item["username"]),
                password=str(item["password"]),
                corp_id=str(item["corp_id"]),
            )
            for item in data["credentials"]
        ]
    except (KeyError, TypeError) as e:
        raise SeedDataError(f"Invalid credential seed data: {e}") from e


def load_accounts(seed_dir: Optional[Path] = None) -> List[AccountSnapshot]:
    """Read accounts.json from seed_dir (bundled data when None)"""
    data = _read_json((seed_dir or BUNDLED_SEED_DIR) / "accounts.json")
    try:
        return [
            AccountSnapshot(
                acct_number=str(item["acct_number"]),
                # Balances are strings in the seed file so no float parsing happens
                balance=Decimal(str(item["balance"])),
                owner_corp_id=str(item["owner_corp_id"]),
                acct_type=str(item.get("acct_type", "SAV")),
                currency=str(item.get("currency", "INR")),
            )
            for item in data["accounts"]
        ]
    except (KeyError, TypeError, InvalidOperation) as e:
        raise SeedDataError(f"Invalid account seed data: {e}") from e
