"""Tests for route outcomes and their rendering."""
import asyncio
import json

import pytest

from gateway.outcome import NotFound, NotFoundError, Ok, UpstreamFailure, settle
from gateway.pipeline import render


async def _value():
    return [1, 2]


async def _missing():
    raise NotFoundError()


async def _broken():
    raise ConnectionError("reset by peer")


def test_settle_classifies_results():
    assert asyncio.run(settle(_value())) == Ok([1, 2])
    assert asyncio.run(settle(_missing())) == NotFound("Not found")

    failure = asyncio.run(settle(_broken()))
    assert isinstance(failure, UpstreamFailure)
    assert isinstance(failure.error, ConnectionError)


def test_render_ok(errors):
    response = render(Ok({"name": "Naruto"}), errors)
    assert response.status_code == 200
    assert json.loads(response.body) == {"results": {"name": "Naruto"}}


def test_render_not_found(errors):
    response = render(NotFound(), errors)
    assert response.status_code == 404
    assert json.loads(response.body) == {"error": "Not found"}


def test_render_failure_reports_error(errors):
    error = ConnectionError("reset by peer")
    response = render(UpstreamFailure(error), errors, "/recent/1")

    assert response.status_code == 500
    assert json.loads(response.body) == {"error": "Internal Server Error"}
    assert errors.errors == [(error, "/recent/1")]


def test_render_survives_failing_error_sink():
    class BrokenSink:
        def record_error(self, error, path=None):
            raise OSError("disk full")

    response = render(UpstreamFailure(RuntimeError("x")), BrokenSink())
    assert response.status_code == 500


def test_render_rejects_unknown_outcomes(errors):
    with pytest.raises(TypeError):
        render("not an outcome", errors)
