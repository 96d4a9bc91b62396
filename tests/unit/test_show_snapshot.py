"""Unit tests for the versioned show snapshot schema."""

import pytest

from src.ss_common.enums import DealType
from src.ss_settlement.domain.engine import compute
from src.ss_settlement.domain.models import SettlementInput
from src.ss_show.domain.snapshot import (
    CURRENT_SCHEMA_VERSION,
    SnapshotError,
    dump_inputs,
    dump_results,
    load_inputs,
    load_results,
)

_INPUT = SettlementInput(
    ticket_price=25.0,
    tickets_sold=200,
    tax_rate=10.0,
    total_expenses=500.0,
    deal_type=DealType.PERCENTAGE,
    percentage=50.0,
    artist_name="The Band",
)


def test_dumped_blobs_carry_schema_version() -> None:
    assert dump_inputs(_INPUT)["schema_version"] == CURRENT_SCHEMA_VERSION
    assert dump_results(compute(_INPUT))["schema_version"] == CURRENT_SCHEMA_VERSION


def test_inputs_blob_is_json_ready() -> None:
    assert dump_inputs(_INPUT)["deal_type"] == "percentage"


def test_load_restores_domain_values() -> None:
    assert load_inputs(dump_inputs(_INPUT)) == _INPUT
    result = compute(_INPUT)
    assert load_results(dump_results(result)) == result


def test_unknown_version_fails_closed() -> None:
    blob = dump_inputs(_INPUT) | {"schema_version": 2}
    with pytest.raises(SnapshotError):
        load_inputs(blob)


def test_unexpected_field_fails_closed() -> None:
    blob = dump_results(compute(_INPUT)) | {"bonus": 1}
    with pytest.raises(SnapshotError):
        load_results(blob)


@pytest.mark.parametrize("blob", [None, "not a dict", {"deal_type": "barter"}])
def test_garbage_inputs_fail_closed(blob: object) -> None:
    with pytest.raises(SnapshotError):
        load_inputs(blob)
