"""Tests for perch.context: request and warning ContextVars."""

import pytest

from perch.context import add_response_warning, get_request, request_var, response_warnings, warnings_var
from perch.http.request import Request


class TestRequestVar:
    def test_outside_request(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_inside_request(self) -> None:
        request = Request(method="PUT", path="/books/_doc/1")
        token = request_var.set(request)
        try:
            assert get_request() is request
        finally:
            request_var.reset(token)


class TestResponseWarnings:
    def test_no_request_in_flight(self) -> None:
        assert add_response_warning("w") is False
        assert response_warnings() == ()

    def test_collects_unique_values(self) -> None:
        token = warnings_var.set([])
        try:
            assert add_response_warning("a") is True
            add_response_warning("b")
            add_response_warning("a")
            assert response_warnings() == ("a", "b")
        finally:
            warnings_var.reset(token)
