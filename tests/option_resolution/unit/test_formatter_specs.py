"""Formatter spec builder tests."""

from __future__ import annotations

import re

import pytest
from simple_bdd_runner.option_resolution.formatter_specs import (
    CONSOLE_CONFLICT_MESSAGE,
    FormatterSpecBuilder,
    merge_formatter_specs,
    parse_formatter_value,
)
from simple_bdd_runner.option_resolution.resolution_errors import (
    ConfigurationConflictError,
    InvalidArgumentError,
)
from simple_bdd_runner.option_resolution.runtime_settings import FormatterSpec


def test_parses_name_and_options() -> None:
    assert parse_formatter_value("junit,fileattribute=true,dir=a=b") == (
        "junit",
        {"fileattribute": "true", "dir": "a=b"},
    )


@pytest.mark.parametrize("value", ["pretty,verbose", "pretty,=x", ",a=b"])
def test_rejects_malformed_formatter_value(value: str) -> None:
    with pytest.raises(InvalidArgumentError):
        parse_formatter_value(value)


def test_out_binds_to_latest_unbound_spec() -> None:
    builder = FormatterSpecBuilder()
    builder.add_format("pretty")
    builder.add_format("json")
    builder.add_output("report.json")

    assert builder.build() == (
        FormatterSpec(name="pretty"),
        FormatterSpec(name="json", destination="report.json"),
    )


def test_out_walks_back_to_earlier_unbound_spec() -> None:
    builder = FormatterSpecBuilder()
    builder.add_format("html")
    builder.add_format("json")
    builder.add_output("report.json")
    builder.add_output("report.html")

    assert builder.build() == (
        FormatterSpec(name="html", destination="report.html"),
        FormatterSpec(name="json", destination="report.json"),
    )


def test_out_without_unbound_spec_declares_pretty() -> None:
    builder = FormatterSpecBuilder()
    builder.add_format("json")
    builder.add_output("report.json")
    builder.add_output("pretty.txt")

    assert builder.build() == (
        FormatterSpec(name="json", destination="report.json"),
        FormatterSpec(name="pretty", destination="pretty.txt"),
    )


def test_merge_without_conflict_orders_console_first() -> None:
    merged = merge_formatter_specs(
        [FormatterSpec(name="rerun", destination="rerun.txt")],
        [FormatterSpec(name="progress"), FormatterSpec(name="json", destination="out.json")],
    )

    assert [spec.name for spec in merged] == ["progress", "rerun", "json"]


def test_merge_drops_profile_console_spec_when_cli_has_one() -> None:
    merged = merge_formatter_specs([FormatterSpec(name="progress")], [FormatterSpec(name="pretty")])

    assert merged == (FormatterSpec(name="progress"),)


@pytest.mark.parametrize(
    ("cli_specs", "profile_specs"),
    [
        ([FormatterSpec(name="a"), FormatterSpec(name="b")], []),
        ([], [FormatterSpec(name="a"), FormatterSpec(name="b")]),
        (
            [FormatterSpec(name="a"), FormatterSpec(name="b")],
            [FormatterSpec(name="c", destination="c.txt")],
        ),
    ],
)
def test_merge_rejects_more_than_one_console_spec(
    cli_specs: list[FormatterSpec], profile_specs: list[FormatterSpec]
) -> None:
    with pytest.raises(ConfigurationConflictError, match=re.escape(CONSOLE_CONFLICT_MESSAGE)):
        merge_formatter_specs(cli_specs, profile_specs)
