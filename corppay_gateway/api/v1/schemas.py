"""Pydantic schemas for the response envelopes"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnvelopeModel(BaseModel):
    """Base for envelope blocks whose JSON keys are not snake_case"""

    model_config = ConfigDict(populate_by_name=True)


class ResponseHeader(EnvelopeModel):
    """Header block echoed back on every domain response"""

    tran_id: str = Field("", alias="TranID")
    corp_id: str = Field("", alias="Corp_ID")
    maker_id: str = Field("", alias="Maker_ID")
    checker_id: str = Field("", alias="Checker_ID")
    approver_id: str = Field("", alias="Approver_ID")
    status: str = Field(..., alias="Status")
    error_cde: str = Field("", alias="Error_Cde")
    error_desc: str = Field("", alias="Error_Desc")


class PaymentResponseBody(EnvelopeModel):
    """Body of a SUCCESS payment response"""

    ref_no: str = Field(..., alias="RefNo")
    utr_no: str = Field(..., alias="UTRNo")
    po_num: str = Field(..., alias="PONum")
    debit_acct_no: str = Field(..., alias="Debit_Acct_No")
    amount: Decimal = Field(..., alias="Amount")
    remaining_balance: Decimal = Field(..., alias="Remaining_Balance")
    ben_ifsc: str = Field("", alias="BenIFSC")
    txn_time: str = Field(..., alias="Txn_Time")
    mode_of_pay: str = Field(..., alias="Mode_of_Pay")


class AccountBalance(EnvelopeModel):
    amount_value: Decimal = Field(..., alias="amountValue")
    currency_code: str = Field(..., alias="currencyCode")


class AccountInfo(EnvelopeModel):
    """Single account in a listing"""

    acct_balance: AccountBalance = Field(..., alias="acctBalance")
    acct_curr_code: str = Field(..., alias="acctCurrCode")
    acct_number: str = Field(..., alias="acctNumber")
    acct_type: str = Field(..., alias="acctType")


class AccountListBody(EnvelopeModel):
    cif_info: List[AccountInfo] = Field(..., alias="cifInfo")


class PaymentStatusBody(EnvelopeModel):
    """Body of a status inquiry; reference numbers are null while a payment is held"""

    tran_id: str = Field(..., alias="TranID")
    txn_status: str = Field(..., alias="Txn_Status")
    ref_no: Optional[str] = Field(None, alias="RefNo")
    utr_no: Optional[str] = Field(None, alias="UTRNo")
    po_num: Optional[str] = Field(None, alias="PONum")
    debit_acct_no: str = Field(..., alias="Debit_Acct_No")
    amount: Decimal = Field(..., alias="Amount")
    ben_ifsc: str = Field("", alias="BenIFSC")
    txn_time: str = Field(..., alias="Txn_Time")
    mode_of_pay: str = Field(..., alias="Mode_of_Pay")


class SignatureBlock(EnvelopeModel):
    signature: str = Field(..., alias="Signature")


class TransportErrorResponse(BaseModel):
    """Flat error returned with a non-200 HTTP status"""

    httpCode: str
    httpMessage: str
    moreInformation: str
    moreDetails: Optional[str] = None
