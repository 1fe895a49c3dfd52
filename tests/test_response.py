"""
Unit tests for the response envelope and result types.

Run with: pytest tests/test_response.py -v
"""

from onebot_bridge.domain.response import (
    Err,
    ErrorKind,
    OB11Response,
    Ok,
    error_detail,
    to_envelope,
)


class TestOB11Response:
    def test_ok_envelope_shape(self):
        assert OB11Response.ok({"a": 1}) == {
            "status": "ok",
            "retcode": 0,
            "data": {"a": 1},
            "message": "",
            "wording": "",
        }

    def test_error_envelope_shape(self):
        envelope = OB11Response.error("unsupported api foo", 200)

        assert envelope["status"] == "failed"
        assert envelope["retcode"] == 200
        assert envelope["data"] is None
        assert envelope["message"] == "unsupported api foo"
        assert envelope["wording"] == "unsupported api foo"


class TestToEnvelope:
    def test_ok_result(self):
        assert to_envelope(Ok([1, 2])) == OB11Response.ok([1, 2])

    def test_err_result_keeps_retcode(self):
        envelope = to_envelope(Err(ErrorKind.INVALID_PAYLOAD, "bad payload", retcode=400))

        assert envelope["status"] == "failed"
        assert envelope["retcode"] == 400
        assert envelope["message"] == "bad payload"

    def test_err_default_retcode_is_200(self):
        assert to_envelope(Err(ErrorKind.HANDLER_FAILURE, "x"))["retcode"] == 200


class TestErrorDetail:
    def test_prefers_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            detail = error_detail(e)

        assert "Traceback" in detail
        assert "RuntimeError: boom" in detail

    def test_unraised_exception_still_has_message(self):
        assert "boom" in error_detail(ValueError("boom"))
