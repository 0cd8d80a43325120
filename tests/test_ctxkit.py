import re

from snowcore.ctxkit import (
    Context,
    RequestContext,
    generate_trace_id,
    get_client_id,
    get_host,
    get_server_id,
    get_trace_id,
    set_client_id,
    set_host,
    set_server_id,
    set_trace_id,
)

TRACE_RE = re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$")


def test_client_id_round_trip():
    c = RequestContext()
    set_client_id(c, "1")
    assert get_client_id(c) == "1"


def test_trace_id_round_trip_then_generate():
    c = RequestContext()
    set_trace_id(c, "2")
    assert get_trace_id(c) == "2"
    trace_id, _ = generate_trace_id(c)
    assert get_trace_id(c) == trace_id
    assert trace_id != "2"


def test_host_round_trip():
    c = RequestContext()
    set_host(c, "3")
    assert get_host(c) == "3"
    assert get_server_id(c) == ""


def test_server_id_round_trip():
    c = RequestContext()
    set_server_id(c, "4")
    assert get_server_id(c) == "4"


def test_plain_context_is_not_mutated():
    base = Context()
    derived = set_trace_id(base, "abc")
    assert get_trace_id(derived) == "abc"
    assert get_trace_id(base) == ""


def test_values_accumulate():
    ctx = set_host(set_client_id(Context(), "1.2.3.4"), "example.com")
    assert get_client_id(ctx) == "1.2.3.4"
    assert get_host(ctx) == "example.com"


def test_non_string_value_reads_empty():
    ctx = Context().with_value("x-trace-id", 5)
    assert get_trace_id(ctx) == ""
    assert ctx.value("x-trace-id") == 5


def test_generate_trace_id_format():
    trace_id, ctx = generate_trace_id(Context())
    assert TRACE_RE.match(trace_id)
    assert get_trace_id(ctx) == trace_id
    other, _ = generate_trace_id(Context())
    assert other != trace_id