"""Tests for recoflag.core.models — accounts, flags, view-model."""

import pytest

from recoflag.config import FALLBACK_BLOCK_NAME
from recoflag.core.models import (
    Account,
    Flag,
    FlagMetadata,
    LandingPage,
    LogEntry,
    Product,
)


class TestAccount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("account-1", Account.PRIMARY),
            ("account-2", Account.SECONDARY),
            ("account-3", Account.TERTIARY),
        ],
    )
    def test_known_selectors(self, value, expected):
        assert Account.from_param(value) is expected

    @pytest.mark.parametrize("value", [None, "", "account-4", "ACCOUNT-2", " account-2"])
    def test_unknown_selectors_use_primary(self, value):
        assert Account.from_param(value) is Account.PRIMARY


class TestFlag:
    def test_absent_flag_returns_default(self):
        assert Flag(key="k").value("fallback") == "fallback"

    def test_null_value_returns_default(self):
        flag = Flag(key="k", raw_value=None, exists=True)
        assert flag.value("fallback") == "fallback"

    def test_matching_type_returns_value(self):
        flag = Flag(key="k", raw_value="reco-1", exists=True)
        assert flag.value("fallback") == "reco-1"

    def test_type_mismatch_returns_default(self):
        flag = Flag(key="k", raw_value=12, exists=True)
        assert flag.value("fallback") == "fallback"

    def test_bool_is_not_a_number(self):
        flag = Flag(key="k", raw_value=True, exists=True)
        assert flag.value(0) == 0

    def test_int_and_float_are_compatible(self):
        flag = Flag(key="k", raw_value=2.5, exists=True)
        assert flag.value(1) == 2.5

    def test_no_default_returns_any_value(self):
        flag = Flag(key="k", raw_value={"a": 1}, exists=True)
        assert flag.value() == {"a": 1}

    def test_absent_flag_metadata_is_empty(self):
        assert Flag(key="k").metadata == FlagMetadata()


class TestProduct:
    def test_keeps_unknown_fields(self):
        product = Product.model_validate({"id": "p1", "name": "Lamp", "stock": 3})
        assert product.id == "p1"
        assert product.model_dump()["stock"] == 3

    def test_values_kept_verbatim(self):
        product = Product.model_validate({"id": 123, "name": ["Multi"], "price": {"amount": 10}})
        assert product.id == 123
        assert product.name == ["Multi"]
        assert product.price == {"amount": 10}
        assert Product.model_validate({}).price is None


class TestLogEntry:
    def test_to_dict_omits_missing_data(self):
        entry = LogEntry(timestamp="10:00:00", level="INFO", message="hi")
        assert entry.to_dict() == {"timestamp": "10:00:00", "level": "INFO", "message": "hi"}

    def test_to_dict_keeps_data(self):
        entry = LogEntry(timestamp="10:00:00", level="INFO", message="hi", data={"a": 1})
        assert entry.to_dict()["data"] == {"a": 1}


class TestLandingPage:
    def test_fallback_serializes_all_defaults(self):
        data = LandingPage.fallback().to_json()
        assert data == {
            "products": [],
            "flagValue": None,
            "blockName": FALLBACK_BLOCK_NAME,
            "visitorId": "",
            "customAccountValue": None,
            "flagKey": "",
            "userContext": {},
            "flagMetadata": None,
            "flagshipLogs": [],
        }

    def test_context_values_keep_their_types(self):
        page = LandingPage(user_context={"foo": 3, "bar": True, "baz": "x"})
        context = page.to_json()["userContext"]
        assert context["foo"] == 3
        assert context["bar"] is True
        assert context["baz"] == "x"
