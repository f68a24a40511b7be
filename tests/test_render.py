"""Tests for the plugin status line renderer."""

from __future__ import annotations

import json

import pytest

from check_nsc_web.config.models import ApiVersion, CheckConfig
from check_nsc_web.domain.decoder import decode_response
from check_nsc_web.domain.models import CanonicalResult, Metric, ResultLine, Severity
from check_nsc_web.domain.render import perfdata_fragment, quote_label, render
from check_nsc_web.domain.normalize import NormalizedMetric


def _result(*lines: ResultLine, severity: Severity = Severity.OK) -> CanonicalResult:
    return CanonicalResult(command="check", severity=severity, lines=list(lines))


def test_legacy_cpu_example_with_rounding(legacy_cpu_body):
    """The documented check_cpu example renders byte for byte."""
    result = decode_response(json.dumps(legacy_cpu_body).encode(), ApiVersion.LEGACY)
    output = render(result, CheckConfig(float_round=2))
    assert output.line == "CPU load ok|'load'=0.42%;0.80;0.95;;"
    assert output.exit_code == 0


def test_legacy_cpu_example_without_value(legacy_cpu_body):
    """Without a value the metric and the pipe disappear."""
    perf = legacy_cpu_body["payload"][0]["lines"][0]["perf"][0]["float_value"]
    del perf["value"]
    result = decode_response(json.dumps(legacy_cpu_body).encode(), ApiVersion.LEGACY)
    output = render(result, CheckConfig(float_round=2))
    assert output.line == "CPU load ok"
    assert output.exit_code == 0


def test_v1_example_full_precision(v1_drive_body):
    """All five fields are rendered and the exit code follows the result."""
    result = decode_response(json.dumps(v1_drive_body).encode(), ApiVersion.V1)
    output = render(result, CheckConfig(api_version=ApiVersion.V1))
    assert output.line == (
        "C:\\: 45GB/50GB used|'C:\\ used'=45GB;40;45;0;50 'C:\\ used %'=90%;80;;;"
    )
    assert output.exit_code == 2


@pytest.mark.parametrize("severity", list(Severity))
def test_exit_code_matches_severity(severity):
    """The exit code is the severity ordinal."""
    output = render(_result(ResultLine(message="m"), severity=severity), CheckConfig())
    assert output.exit_code == int(severity)


@pytest.mark.parametrize(
    "metric",
    [
        Metric(value=1.0),
        Metric(value=1.0, unit="s"),
        Metric(value=1.0, critical=3.0),
        Metric(value=1.0, maximum=3.0),
        Metric(value=1.0, warning=1.0, critical=2.0, minimum=0.0, maximum=3.0),
    ],
)
def test_fragment_always_has_five_fields(metric):
    """Trailing empty fields are never elided."""
    line = ResultLine(message="m", metrics={"x": metric})
    output = render(_result(line), CheckConfig())
    fragment = output.line.split("|", 1)[1]
    assert fragment.split("=", 1)[1].count(";") == 4


def test_metric_without_value_is_skipped_among_others():
    """Only metrics with a value reach the perfdata block."""
    line = ResultLine(
        message="m",
        metrics={
            "a": Metric(value=1.0),
            "b": Metric(warning=5.0, critical=6.0),
            "c": Metric(value=2.0),
        },
    )
    output = render(_result(line), CheckConfig())
    assert output.line == "m|'a'=1;;;; 'c'=2;;;;"


def test_multiple_lines_join_messages_and_metrics_in_order():
    """Messages are trimmed and joined; metrics keep line then wire order."""
    result = _result(
        ResultLine(message="  C: ok \n", metrics={"c": Metric(value=1.0)}),
        ResultLine(message="   "),
        ResultLine(message="D: ok", metrics={"d": Metric(value=2.0)}),
    )
    output = render(result, CheckConfig())
    assert output.line == "C: ok, D: ok|'c'=1;;;; 'd'=2;;;;"


def test_custom_message_separator():
    """The separator between line messages is configurable."""
    result = _result(ResultLine(message="a"), ResultLine(message="b"))
    assert render(result, CheckConfig(message_separator=" / ")).line == "a / b"


def test_extra_text_without_perfdata():
    """Extra text follows the message after one space."""
    output = render(_result(ResultLine(message="ok")), CheckConfig(extra_text="(dc1)"))
    assert output.line == "ok (dc1)"


def test_extra_text_with_perfdata():
    """Extra text goes before the pipe."""
    result = _result(ResultLine(message="ok", metrics={"x": Metric(value=1.5)}))
    output = render(result, CheckConfig(extra_text="(dc1)"))
    assert output.line == "ok (dc1)|'x'=1.5;;;;"


@pytest.mark.parametrize("message", ["", "   "])
def test_extra_text_without_message_has_no_leading_space(message):
    """Extra text stands alone when every line message is empty."""
    result = _result(ResultLine(message=message, metrics={"x": Metric(value=1.0)}))
    assert render(result, CheckConfig(extra_text="(dc1)")).line == "(dc1)|'x'=1;;;;"


def test_v1_null_metric_is_omitted():
    """A null v1 perf value drops that metric and keeps the others."""
    body = b'{"result":1,"lines":[{"message":"m","perf":{"a":null,"b":{"value":2}}}]}'
    output = render(decode_response(body, ApiVersion.V1), CheckConfig())
    assert output == ("m|'b'=2;;;;", 1)


def test_empty_result_renders_empty_line():
    """A result without lines renders an empty message."""
    assert render(_result(), CheckConfig()).line == ""


def test_quote_label_doubles_single_quotes():
    """Embedded single quotes are escaped by doubling."""
    assert quote_label("it's") == "'it''s'"
    assert quote_label("load") == "'load'"


def test_perfdata_fragment_format():
    """Fragment layout is 'label'=value[UOM];warn;crit;min;max."""
    metric = NormalizedMetric(value="1", unit="B", critical="3", maximum="9")
    assert perfdata_fragment("mem", metric) == "'mem'=1B;;3;;9"
