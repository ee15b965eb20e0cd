from pharmassist.error_handler import (
    EmbeddingError,
    ErrorHandler,
    NotFoundError,
    PharmAssistError,
    StoreError,
    UpstreamError,
)


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(StoreError("boom"), context={"k": "v"})
    assert out["fallback"] is True
    assert out["error_type"] == "StoreError"
    assert "internal error" in out["message"].lower()
    assert "boom" in out["metadata"]["error"]
    assert out["metadata"]["context"] == {"k": "v"}


def test_domain_errors_share_a_base():
    for cls in (UpstreamError, EmbeddingError, StoreError, NotFoundError):
        assert issubclass(cls, PharmAssistError)
