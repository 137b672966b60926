from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RequestSchema(BaseModel):
    # amounts stay untyped so the services report InvalidAmount themselves
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


class ConvertRequestSchema(RequestSchema):
    amount: Optional[Any] = None
    currency: Optional[Any] = "USDT"


class RegisterTransactionSchema(RequestSchema):
    hash: Optional[str] = Field(default=None, validation_alias=AliasChoices("hash", "txHash"))
    from_address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("from", "fromAddress", "from_address")
    )
    to_address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("to", "toAddress", "to_address")
    )
    amount: Optional[Any] = None
    currency: Optional[Any] = "USDT"
    gas_used: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("gasUsed", "gas_used")
    )
    gas_price: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("gasPrice", "gas_price")
    )


class SendCryptoSchema(RequestSchema):
    to_address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("toAddress", "to_address", "to")
    )
    amount: Optional[Any] = None
    asset: Optional[Any] = Field(default="USDT", validation_alias=AliasChoices("asset", "currency"))


class WithdrawalRequestSchema(RequestSchema):
    amount: Optional[Any] = None
    bank_details: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("bankDetails", "bank_details")
    )


class ErrorResponseSchema(BaseModel):
    error: str
    message: str
