"""Tests for the aggregation engine's limit and scope policy."""

import pytest

from transit_analytics.errors import InvalidArgumentError, StoreError
from transit_analytics.repositories.base import BreakdownCount
from transit_analytics.services.aggregation import (
    AggregationEngine,
    BreakdownScope,
    clamp_limit,
    parse_scope,
)


@pytest.mark.parametrize(
    "requested, expected",
    [(None, 5), (0, 5), (-3, 5), (1, 1), (5, 5), (100, 100), (101, 100), (10_000, 100)],
)
def test_clamp_limit(requested, expected):
    assert clamp_limit(requested, 5) == expected


@pytest.mark.parametrize("value, expected", [("line", BreakdownScope.LINE), (" Station ", BreakdownScope.STATION)])
def test_parse_scope(value, expected):
    assert parse_scope(value) is expected


@pytest.mark.parametrize("value", [None, "", "network"])
def test_parse_scope_rejects_unknown(value):
    with pytest.raises(InvalidArgumentError, match="scope must be 'line' or 'station'"):
        parse_scope(value)


@pytest.mark.asyncio
@pytest.mark.parametrize("scope", list(BreakdownScope))
@pytest.mark.parametrize("requested, expected", [(None, 5), (0, 5), (-1, 5), (500, 100)])
async def test_top_breakdowns_limit_policy(mock_repository, scope, requested, expected):
    breakdowns = [BreakdownCount(name="Bishan", count=4)]
    mock_repository.top_breakdowns_by_line.return_value = breakdowns
    mock_repository.top_breakdowns_by_station.return_value = breakdowns
    engine = AggregationEngine(mock_repository)

    result = await engine.top_breakdowns(scope, requested)

    assert result == breakdowns
    if scope is BreakdownScope.LINE:
        called, untouched = mock_repository.top_breakdowns_by_line, mock_repository.top_breakdowns_by_station
    else:
        called, untouched = mock_repository.top_breakdowns_by_station, mock_repository.top_breakdowns_by_line
    called.assert_awaited_once_with(expected)
    untouched.assert_not_called()


@pytest.mark.asyncio
async def test_recent_disruptions_normalises_filters(mock_repository):
    mock_repository.recent_disruptions.return_value = []
    engine = AggregationEngine(mock_repository)

    await engine.recent_disruptions("   ", " Bishan ", None)

    mock_repository.recent_disruptions.assert_awaited_once_with(None, "Bishan", 20)


@pytest.mark.asyncio
async def test_store_failure_propagates(mock_repository):
    mock_repository.line_mtbf.side_effect = StoreError("boom")
    engine = AggregationEngine(mock_repository)

    with pytest.raises(StoreError):
        await engine.mtbf()
