"""Tests for CLI date filter helpers."""

from datetime import date

import click
import pytest

from ledgerbook.cli.date_filters import period_options, resolve_cli_date_range
from ledgerbook.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


@pytest.mark.parametrize(
    "flags, start_date, message",
    [
        ({"this-month": True, "last-week": True}, None, "Only one period option"),
        ({"last-year": True}, "2024-01-01", "cannot be combined"),
        ({}, "someday", "Invalid start date"),
    ],
)
def test_resolve_cli_date_range_errors(capsys, flags, start_date, message):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=start_date, end_date=None, period_flags=flags)

    assert excinfo.value.exit_code == 1
    assert message in capsys.readouterr().err


def test_resolve_cli_date_range_period_flag_with_underscores():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"last_month": True}
    )
    assert (start, end) == get_date_range("last-month")


def test_resolve_cli_date_range_explicit_and_default():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="2024-01-02", end_date=None, period_flags={}
    )
    assert (start, end) == (date(2024, 1, 2), None)

    default_range = (date(2020, 1, 1), date(2020, 1, 31))
    assert (
        resolve_cli_date_range(
            _ctx(), start_date=None, end_date=None, period_flags={}, default_range=default_range
        )
        == default_range
    )


def test_period_options_adds_flags():
    @click.command()
    @period_options
    def command(**kwargs):
        pass

    names = [param.name for param in command.params]
    assert names == ["this_month", "this_year", "this_week", "last_month", "last_year", "last_week"]
