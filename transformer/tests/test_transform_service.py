import json
import logging

import pytest

from transformer.app.errors import (
    ConversionError,
    MalformedInputError,
    RenderingError,
    TemplateNotFoundError,
)
from transformer.app.schemas.customer import CustomerInput
from transformer.app.services.transform import TransformService


def test_transform_customer_input(service: TransformService, ann_lee: dict):
    output = service.transform(
        CustomerInput.model_validate(ann_lee), "customer-transform.ftl"
    )

    assert json.loads(output) == {"id": "C1", "name": "Ann Lee"}


def test_transform_plain_mapping(service: TransformService, ann_lee: dict):
    output = service.transform(ann_lee, "customer-transform.ftl")

    assert json.loads(output) == {"id": "C1", "name": "Ann Lee"}


def test_transform_echo_round_trips_known_fields(service: TransformService):
    customer = CustomerInput.model_validate(
        {
            "customerId": "C7",
            "personalInfo": {"firstName": "Zoë"},
            "accounts": [{"accountNumber": "A-1", "balance": 12.5}],
        }
    )

    echoed = json.loads(service.transform(customer, "echo.ftl"))

    assert echoed == {
        "customerId": "C7",
        "firstName": "Zoë",
        "accounts": [{"accountNumber": "A-1", "balance": 12.5}],
    }


def test_transform_rejects_scalar_input(service: TransformService):
    with pytest.raises(ConversionError):
        service.transform("C1", "customer-transform.ftl")


def test_transform_raw(service: TransformService):
    output = service.transform_raw(
        '{"order": {"id": "O-9", "total": 30, "items": [1, 2, 3]}}',
        "raw-order.ftl",
    )

    assert json.loads(output) == {"order": "O-9", "total": 30, "items": 3}


def test_transform_raw_accepts_bytes(service: TransformService, ann_lee: dict):
    output = service.transform_raw(
        json.dumps(ann_lee).encode("utf-8"), "customer-transform.ftl"
    )

    assert json.loads(output) == {"id": "C1", "name": "Ann Lee"}


def test_transform_raw_malformed_input(service: TransformService):
    with pytest.raises(MalformedInputError):
        service.transform_raw("not-json", "customer-transform.ftl")


def test_transform_raw_top_level_array_is_a_conversion_error(
    service: TransformService,
):
    with pytest.raises(ConversionError):
        service.transform_raw("[1, 2, 3]", "customer-transform.ftl")


def test_transform_raw_null_field_is_treated_as_missing(service: TransformService):
    with pytest.raises(RenderingError):
        service.transform_raw(
            '{"customerId": null, "personalInfo": '
            '{"firstName": "Ann", "lastName": "Lee"}}',
            "customer-transform.ftl",
        )


def test_transform_missing_template(service: TransformService, ann_lee: dict):
    with pytest.raises(TemplateNotFoundError):
        service.transform(ann_lee, "nope.ftl")


def test_transform_is_idempotent(service: TransformService, ann_lee: dict):
    customer = CustomerInput.model_validate(ann_lee)

    first = service.transform(customer, "customer-transform.ftl")
    second = service.transform(customer, "customer-transform.ftl")

    assert first == second


def test_transform_logs_template_name(
    service: TransformService, ann_lee: dict, caplog
):
    with caplog.at_level(logging.INFO, logger="transformer"):
        service.transform(ann_lee, "customer-transform.ftl")

    records = [r for r in caplog.records if r.getMessage() == "transform_started"]
    assert records
    assert records[0].template == "customer-transform.ftl"
