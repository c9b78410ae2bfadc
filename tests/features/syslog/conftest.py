"""BDD step definitions for the syslog and service directory features."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path

import httpx
import pytest
from pytest_bdd import given, parsers, then, when

from pzcommon.adapters.writers.file import FileWriter
from pzcommon.adapters.writers.in_memory import InMemoryWriter
from pzcommon.config.system import SystemConfig
from pzcommon.core.encoding.rfc5424 import format_message, parse_message
from pzcommon.core.errors import InvalidCountError, InvalidMessageError, StartupHealthError
from pzcommon.core.models import AuditElement, MetricElement, SyslogMessage

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class SyslogScenarioContext:
    """Mutable state shared by the steps of one scenario."""

    path: Path | None = None
    writer: FileWriter | None = None
    memory: InMemoryWriter = field(default_factory=InMemoryWriter)
    message: SyslogMessage | None = None
    line: str = ""
    parsed: SyslogMessage | None = None
    read_result: list[SyslogMessage] = field(default_factory=list)
    error: Exception | None = None
    client: httpx.Client | None = None
    system: SystemConfig | None = None


@pytest.fixture
def ctx() -> SyslogScenarioContext:
    """Fresh scenario context for each test."""
    return SyslogScenarioContext()


# === Records ===


@given(
    parsers.parse(
        'a record from host "{host}" application "{application}" '
        'process "{process}" with message id "{message_id}" and text "{text}"'
    )
)
def given_record(
    ctx: SyslogScenarioContext,
    host: str,
    application: str,
    process: str,
    message_id: str,
    text: str,
) -> None:
    ctx.message = SyslogMessage(
        facility=1,
        severity=6,
        timestamp="2023-01-02T03:04:05Z",
        host_name=host,
        application=application,
        process=process,
        message_id=message_id,
        message=text,
    )


@given(parsers.parse('the record audits actor "{actor}" doing "{action}" to "{actee}"'))
def given_audit(ctx: SyslogScenarioContext, actor: str, action: str, actee: str) -> None:
    ctx.message = replace(ctx.message, audit_data=AuditElement(actor, action, actee))


@given(parsers.parse('the record measures "{name}" at {value:g} on "{object}"'))
def given_metric(ctx: SyslogScenarioContext, name: str, value: float, object: str) -> None:
    ctx.message = replace(ctx.message, metric_data=MetricElement(name, value, object))


@given(parsers.parse('the record text continues on a second line "{line}"'))
def given_second_line(ctx: SyslogScenarioContext, line: str) -> None:
    ctx.message = replace(ctx.message, message=f"{ctx.message.message}\n{line}")


@given(parsers.parse("the record has severity {severity:d}"))
def given_severity(ctx: SyslogScenarioContext, severity: int) -> None:
    ctx.message = replace(ctx.message, severity=severity)


@when("the record is serialized")
def when_serialized(ctx: SyslogScenarioContext) -> None:
    ctx.line = format_message(ctx.message)


@when("the line is parsed")
def when_parsed(ctx: SyslogScenarioContext) -> None:
    ctx.parsed = parse_message(ctx.line)


@when("the record is validated")
def when_validated(ctx: SyslogScenarioContext) -> None:
    try:
        ctx.message.validate()
    except InvalidMessageError as e:
        ctx.error = e


@then(parsers.parse("the structured data is '{expected}'"))
def then_structured_data(ctx: SyslogScenarioContext, expected: str) -> None:
    # six header fields, then SD, then the free text
    rest = ctx.line.split(" ", 6)[6]
    assert rest == f"{expected} {ctx.message.message}"


@then("the record is a security audit")
def then_security_audit(ctx: SyslogScenarioContext) -> None:
    assert ctx.message.is_security_audit()


@then("the parsed record equals the original")
def then_parsed_equal(ctx: SyslogScenarioContext) -> None:
    assert ctx.parsed == ctx.message


@then(parsers.parse('validation fails mentioning "{word}"'))
def then_validation_fails(ctx: SyslogScenarioContext, word: str) -> None:
    assert isinstance(ctx.error, InvalidMessageError)
    assert word in str(ctx.error)


@then("validation succeeds")
def then_validation_succeeds(ctx: SyslogScenarioContext) -> None:
    assert ctx.error is None


# === File sink ===


@given(parsers.parse('a file sink at "{name}"'))
def given_file_sink(ctx: SyslogScenarioContext, tmp_path: Path, name: str) -> None:
    ctx.path = tmp_path / name
    ctx.writer = FileWriter(ctx.path)


@when("the record is written to the sink")
def when_written(ctx: SyslogScenarioContext) -> None:
    try:
        ctx.writer.write(ctx.message)
    finally:
        ctx.writer.close()


@then(parsers.parse('the file contains exactly "{expected}"'))
def then_file_contains(ctx: SyslogScenarioContext, expected: str) -> None:
    assert ctx.path.read_text(encoding="utf-8") == expected + "\n"


# === In-memory sink ===


@given(parsers.parse('an in-memory sink holding records "{texts}"'))
def given_memory_records(ctx: SyslogScenarioContext, texts: str) -> None:
    for text in texts.split(", "):
        ctx.memory.write(SyslogMessage(message=text))


@when(parsers.parse("I read {count} records"))
def when_read(ctx: SyslogScenarioContext, count: str) -> None:
    try:
        ctx.read_result = ctx.memory.read(int(count))
    except InvalidCountError as e:
        ctx.error = e


@then(parsers.re(r'I get "(?P<texts>.*)"'))
def then_read_texts(ctx: SyslogScenarioContext, texts: str) -> None:
    expected = texts.split(", ") if texts else []
    assert [m.message for m in ctx.read_result] == expected


@then("the read fails with an invalid count")
def then_invalid_count(ctx: SyslogScenarioContext) -> None:
    assert isinstance(ctx.error, InvalidCountError)


# === Service directory ===


@given("no platform service bindings")
def given_no_bindings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VCAP_SERVICES", raising=False)


@given(parsers.parse('the platform binds "{name}" at "{host}"'))
def given_binding(monkeypatch: pytest.MonkeyPatch, name: str, host: str) -> None:
    services = {"user-provided": [{"name": name, "credentials": {"host": host}}]}
    monkeypatch.setenv("VCAP_SERVICES", json.dumps(services))


@given(parsers.parse("every service answers with status {status:d}"))
def given_status(
    ctx: SyslogScenarioContext,
    mock_client: Callable[[Handler], httpx.Client],
    status: int,
) -> None:
    ctx.client = mock_client(lambda request: httpx.Response(status))


@when(parsers.parse('"{name}" starts requiring "{required}"'))
def when_starts(ctx: SyslogScenarioContext, name: str, required: str) -> None:
    try:
        ctx.system = SystemConfig(name, [required], client=ctx.client)
    except StartupHealthError as e:
        ctx.error = e


@then(parsers.parse('the address of "{name}" is the own address'))
def then_own_address(ctx: SyslogScenarioContext, name: str) -> None:
    assert ctx.system.address_of(name) == ctx.system.address


@then(parsers.parse('the url of "{name}" is "{url}"'))
def then_url(ctx: SyslogScenarioContext, name: str, url: str) -> None:
    assert ctx.system.url_of(name) == url


@then(parsers.parse('startup fails naming "{name}"'))
def then_startup_fails(ctx: SyslogScenarioContext, name: str) -> None:
    assert isinstance(ctx.error, StartupHealthError)
    assert ctx.error.service == name
    assert name in str(ctx.error)
