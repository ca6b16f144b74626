"""Tests for the domain exception hierarchy."""

import pytest

from medsync.core.exceptions import (
    CredentialStoreError,
    MedsyncError,
    OtpDeliveryError,
    OtpThrottledError,
)


class TestExceptions:
    """Test exception hierarchy."""

    def test_delivery_error_keeps_method(self) -> None:
        """Should record the channel that failed."""
        error = OtpDeliveryError("smtp down", method="email")

        assert str(error) == "smtp down"
        assert error.method == "email"

    def test_throttled_is_delivery_error(self) -> None:
        """Should be catchable as a delivery failure."""
        with pytest.raises(OtpDeliveryError):
            raise OtpThrottledError("slow down", method="phone")

    @pytest.mark.parametrize("exc_type", [OtpDeliveryError, OtpThrottledError, CredentialStoreError])
    def test_all_inherit_from_base(self, exc_type: type[Exception]) -> None:
        """Should derive from MedsyncError."""
        assert issubclass(exc_type, MedsyncError)
