"""Reference number generation for settled payments"""

import secrets
import string


def generate_reference(prefix: str, length: int) -> str:
    """Prefix followed by `length` random digits, e.g. REF + 12 digits"""
    return prefix + "".join(secrets.choice(string.digits) for _ in range(length))


def generate_ref_no() -> str:
    return generate_reference("REF", 12)


def generate_utr_no() -> str:
    return generate_reference("UTR", 14)


def generate_po_num() -> str:
    return generate_reference("PO", 12)
