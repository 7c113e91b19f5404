"""Tests for compiling schemas to Pydantic models."""

import pytest
from pydantic import BaseModel, ValidationError

from isoschema import Err, ErrorKind, Ok, to_pydantic, validate
from isoschema.validation import Optional, Text
from tests.schemas import (
    VALID_IBAN,
    AccountStatement,
    ActiveCurrencyAndAmount,
    CashAccount,
    CreditDebitCode,
    PostalAddress,
)


class TestToPydantic:
    def test_simple_model(self):
        Amount = to_pydantic(ActiveCurrencyAndAmount)
        assert issubclass(Amount, BaseModel)
        assert Amount.__name__ == "ActiveCurrencyAndAmount"

        amt = Amount.model_validate({"@Ccy": "USD", "$value": "10.5"})
        assert amt.ccy == "USD"
        assert amt.value == 10.5

    def test_populate_by_name(self):
        Amount = to_pydantic(ActiveCurrencyAndAmount)
        amt = Amount(ccy="USD", value=1.0)
        assert amt.model_dump(by_alias=True) == {"@Ccy": "USD", "$value": 1.0}

    def test_required_fields(self):
        Amount = to_pydantic(ActiveCurrencyAndAmount)
        with pytest.raises(ValidationError):
            Amount.model_validate({"@Ccy": "USD"})

    def test_optional_fields(self):
        Address = to_pydantic(PostalAddress)
        addr = Address.model_validate({"Ctry": "DE"})
        assert addr.ctry == "DE"
        assert addr.strt_nm is None
        assert addr.adr_line is None

    def test_dict_schema(self):
        Party = to_pydantic({"nm": Text(), "ctry": Optional(Text())}, name="Party")
        assert Party.__name__ == "Party"
        assert Party(nm="ACME").ctry is None

    def test_not_a_record(self):
        with pytest.raises(TypeError):
            to_pydantic(Text())


class TestModelValidation:
    def test_model_instance_is_validated(self):
        Amount = to_pydantic(ActiveCurrencyAndAmount)
        result = validate(Amount(ccy="USD", value=1.0), ActiveCurrencyAndAmount)
        assert isinstance(result, Ok)

        result = validate(Amount(ccy="usd", value=1.0), ActiveCurrencyAndAmount)
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.PATTERN_MISMATCH

    def test_choice_becomes_optional_alternatives(self):
        Account = to_pydantic(CashAccount)
        acct = Account.model_validate({"Id": {"IBAN": VALID_IBAN}})
        assert acct.id.iban == VALID_IBAN
        assert acct.id.othr is None
        assert isinstance(CashAccount.validate(acct), Ok)

    def test_choice_arity_checked_on_models(self):
        Account = to_pydantic(CashAccount)
        acct = Account.model_validate(
            {"Id": {"IBAN": VALID_IBAN, "Othr": {"Id": "ACC-1"}}}
        )
        result = CashAccount.validate(acct)
        assert result.error.kind is ErrorKind.MULTIPLE_CHOICE_ALTERNATIVES_POPULATED

    def test_nested_statement(self):
        Statement = to_pydantic(AccountStatement)
        stmt = Statement.model_validate(
            {
                "Id": "STMT-0001",
                "Acct": {"Id": {"IBAN": VALID_IBAN}},
                "Ntry": [{"Amt": {"@Ccy": "EUR", "$value": -1}, "CdtDbtInd": "DBIT"}],
            }
        )
        assert stmt.ntry[0].cdt_dbt_ind is CreditDebitCode.DBIT

        result = AccountStatement.validate(stmt)
        assert result.error.kind is ErrorKind.BELOW_MINIMUM
        assert result.error.path == ("ntry", 0, "amt", "value")
