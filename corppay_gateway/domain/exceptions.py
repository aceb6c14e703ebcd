"""Domain-specific exceptions"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes returned in the Error_Cde field of a FAILED or HELD envelope"""

    SCHEMA_VALIDATION = "ER002"
    AUTHORIZATION = "ER003"
    BAD_ENCODING = "ER004"
    UNEXPECTED = "ER006"
    BUSINESS_RULE = "ER012"
    DUPLICATE_TRANSACTION = "ER013"
    CUTOFF_HOLD = "ER101"


class DomainException(Exception):
    """Base exception for domain layer"""

    error_code: ErrorCode = ErrorCode.UNEXPECTED

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


# Authentication

class AuthError(DomainException):
    """Caller identity could not be established"""

    error_code = ErrorCode.AUTHORIZATION


class MissingOrMalformedAuthError(AuthError):
    """Authorization header absent or not using the Basic scheme"""


class BadEncodingAuthError(AuthError):
    """Basic payload is not valid base64 or not UTF-8"""

    error_code = ErrorCode.BAD_ENCODING


class MalformedAuthError(AuthError):
    """Decoded credentials lack a single ':' separator"""


class InvalidCredentialsError(AuthError):
    """Username/password pair is not registered"""


class CorpMismatchError(AuthError):
    """Identity established but does not belong to the claimed Corp_ID"""


class AccountOwnershipError(AuthError):
    """Debit account is owned by a different corp than the caller"""


# Schema validation

class SchemaError(DomainException):
    """Request fields failed presence, shape or character-class checks"""

    error_code = ErrorCode.SCHEMA_VALIDATION


class MissingEnvelopeError(SchemaError):
    """Named request wrapper is absent from the payload"""


class InvalidFieldError(SchemaError):
    """A header field is missing or not alphanumeric within 16 characters"""

    def __init__(self, field_name: str):
        super().__init__(
            f"Invalid or missing field: {field_name}",
            f"{field_name} must be alphanumeric and no longer than 16 characters",
        )
        self.field_name = field_name


class UnknownAccountError(SchemaError):
    """Debit_Acct_No is missing or not registered"""


class InvalidAmountError(SchemaError):
    """Amount is not a finite positive decimal"""


class InvalidModeError(SchemaError):
    """Mode_of_Pay is outside the configured mode set"""


# Business rules

class RuleError(DomainException):
    """Request is well-formed but violates a settlement rule"""

    error_code = ErrorCode.BUSINESS_RULE


class AmountTooHighForModeError(RuleError):
    pass


class AmountTooLowForModeError(RuleError):
    pass


class AmountOutOfBandForModeError(RuleError):
    pass


class CutoffExceededHold(RuleError):
    """NEFT request arrived after the daily cutoff; deferred, not rejected"""

    error_code = ErrorCode.CUTOFF_HOLD


# Ledger

class LedgerError(DomainException):
    """Mock ledger refused an operation"""

    error_code = ErrorCode.BUSINESS_RULE


class AccountNotFoundError(LedgerError):
    pass


class InsufficientFundsError(LedgerError):
    """Debit would drive the balance below zero"""


# Inquiries

class NotFoundError(DomainException):
    """Inquiry matched nothing for the caller's corp"""


class NoAccountsFoundError(NotFoundError):
    pass


class TransactionNotFoundError(NotFoundError):
    pass


class SeedDataError(DomainException):
    """Credential or account seed files are missing or malformed"""
