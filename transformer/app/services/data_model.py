"""
Data model construction and JSON codec helpers.

A data model is the generic mapping exposed to a template: string keys,
nested dicts, lists and JSON scalars. It is created fresh for every
request and never shared.

Conversion is explicit per input shape. Typed customer records are
converted field by field rather than by introspection, so that the keys
a template can see are exactly the ones listed below.

Null handling:
- None values are omitted from mappings.
- A template that references an omitted key fails under the engine's
  strict-undefined policy instead of rendering the text "None".
- None items inside lists are kept, so list positions stay stable. The
  engine refuses to output a bare None; templates emit them with the
  json filter, which writes null.
"""

import json
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

import orjson

from transformer.app.errors import (
    ConversionError,
    MalformedInputError,
    OutputNotJsonError,
)
from transformer.app.schemas.customer import (
    AccountInfo,
    ContactPreferences,
    CustomerInput,
    PersonalInfo,
)

DataModel = Dict[str, Any]


def _compact(entries: List[Tuple[str, Any]]) -> DataModel:
    return {key: value for key, value in entries if value is not None}


# ---------------------------------------------------------------------------
# Typed customer records
# ---------------------------------------------------------------------------


def personal_info_data_model(info: PersonalInfo) -> DataModel:
    return _compact(
        [
            ("firstName", info.first_name),
            ("lastName", info.last_name),
            ("dateOfBirth", info.date_of_birth),
            ("email", info.email),
            ("phoneNumber", info.phone_number),
        ]
    )


def account_data_model(account: AccountInfo) -> DataModel:
    return _compact(
        [
            ("accountNumber", account.account_number),
            ("accountType", account.account_type),
            ("balance", account.balance),
            ("currency", account.currency),
            ("status", account.status),
        ]
    )


def preferences_data_model(preferences: ContactPreferences) -> DataModel:
    return _compact(
        [
            ("emailNotifications", preferences.email_notifications),
            ("smsNotifications", preferences.sms_notifications),
            ("preferredLanguage", preferences.preferred_language),
        ]
    )


def customer_data_model(customer: CustomerInput) -> DataModel:
    """
    Convert a CustomerInput into a template data model.

    Nested records become nested mappings and the account list becomes
    a list of mappings, in declaration order.
    """
    personal_info: Optional[DataModel] = None
    if customer.personal_info is not None:
        personal_info = personal_info_data_model(customer.personal_info)

    accounts: Optional[List[DataModel]] = None
    if customer.accounts is not None:
        accounts = [account_data_model(a) for a in customer.accounts]

    preferences: Optional[DataModel] = None
    if customer.preferences is not None:
        preferences = preferences_data_model(customer.preferences)

    return _compact(
        [
            ("customerId", customer.customer_id),
            ("personalInfo", personal_info),
            ("accounts", accounts),
            ("preferences", preferences),
        ]
    )


# ---------------------------------------------------------------------------
# Generic mappings
# ---------------------------------------------------------------------------


def _copy_container(value: Any, path: str, pending: list) -> Any:
    if isinstance(value, Mapping):
        copy: Any = {}
    elif isinstance(value, (list, tuple)):
        copy = []
    else:
        return value
    pending.append((value, copy, path))
    return copy


def _generic_mapping(mapping: Mapping) -> DataModel:
    # Iterative so that nesting depth is bounded by the JSON parser,
    # not by the interpreter's recursion limit.
    result: DataModel = {}
    pending: list = [(mapping, result, "")]

    while pending:
        source, target, path = pending.pop()

        if isinstance(target, dict):
            for key, value in source.items():
                if not isinstance(key, str):
                    raise ConversionError(
                        f"Data model keys must be strings, got "
                        f"{type(key).__name__} key {key!r} at '{path or '$'}'"
                    )
                if value is None:
                    continue
                child = f"{path}.{key}" if path else key
                target[key] = _copy_container(value, child, pending)
        else:
            for index, item in enumerate(source):
                target.append(
                    _copy_container(item, f"{path}[{index}]", pending)
                )

    return result


def mapping_data_model(mapping: Mapping) -> DataModel:
    """
    Deep-copy a generic mapping into a data model.

    Key order is preserved. Nested mappings are copied, tuples become
    lists, and None values are dropped from mappings (list items are
    kept as they are). Nesting depth is limited only by the parser.
    """
    return _generic_mapping(mapping)


def to_data_model(value: Any) -> DataModel:
    """
    Convert any supported input shape into a data model.

    Raises:
        ConversionError: the value is not a CustomerInput or a mapping
    """
    if isinstance(value, CustomerInput):
        return customer_data_model(value)
    if isinstance(value, Mapping):
        return mapping_data_model(value)
    raise ConversionError(
        f"Cannot convert a value of type {type(value).__name__} "
        "to a template data model; a JSON object is required"
    )


# ---------------------------------------------------------------------------
# JSON codec
# ---------------------------------------------------------------------------

# orjson handles integers up to 64 bits and turns longer ones into floats.
# Documents with a 19+ digit run are parsed with the standard library
# instead, which keeps such integers exact.
_LONG_DIGITS = re.compile(r"\d{19,}")
_LONG_DIGITS_BYTES = re.compile(rb"\d{19,}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str | bytes) -> Any:
    pattern = _LONG_DIGITS_BYTES if isinstance(text, bytes) else _LONG_DIGITS
    if pattern.search(text) is None:
        return orjson.loads(text)
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON document is nested too deeply") from exc


def parse_json_text(text: str | bytes) -> Any:
    """
    Parse raw input JSON.

    Raises:
        MalformedInputError: the text is not valid JSON
    """
    try:
        return _loads(text)
    except ValueError as exc:
        raise MalformedInputError(f"Malformed JSON input: {exc}") from exc


def parse_rendered_output(text: str) -> Any:
    """
    Parse rendered template output back into a JSON value.

    Raises:
        OutputNotJsonError: the rendered text is not valid JSON
    """
    try:
        return _loads(text)
    except ValueError as exc:
        raise OutputNotJsonError(
            f"Template output is not valid JSON: {exc}"
        ) from exc


def dump_json(value: Any) -> str:
    """Serialize a value as compact JSON text."""
    try:
        return orjson.dumps(value).decode("utf-8")
    except orjson.JSONEncodeError:
        # Integers wider than 64 bits.
        return json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
