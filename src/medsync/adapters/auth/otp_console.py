"""Console-based OTP gateway for demo/dev mode.

Prints a fixed demo code to stdout instead of sending it, and accepts
exactly that code. Select it with MEDSYNC_MOCK_MODE; never use it in
production.
"""

from medsync.core.auth.messages import describe_destination
from medsync.core.auth.otp import OTP_EXPIRY_MINUTES
from medsync.core.auth.recovery import OtpGateway
from medsync.core.auth.types import DeliveryReceipt, RecoveryMethod

DEMO_OTP = "123456"


class ConsoleOtpGateway:
    """Mock OTP gateway for demo/dev mode.

    This is useful for:
    - Local development without SMTP or SMS setup
    - Demo environments
    - Testing the recovery and verification flows
    """

    def __init__(self, demo_code: str = DEMO_OTP) -> None:
        """Initialize the console gateway.

        Args:
            demo_code: The only code this gateway accepts.
        """
        self._demo_code = demo_code

    async def request_otp(self, identifier: str, method: RecoveryMethod) -> DeliveryReceipt:
        """Print the demo code to the console.

        Args:
            identifier: Email address or phone number.
            method: Channel the code would be sent on.

        Returns:
            DeliveryReceipt (console printing always succeeds).
        """
        print("\n" + "=" * 70, flush=True)
        print("[ONE-TIME CODE] Code issued for demo/dev mode", flush=True)
        print(f"  {method.value.title()}: {identifier}", flush=True)
        print(f"  Code:  {self._demo_code}", flush=True)
        print("=" * 70 + "\n", flush=True)
        return DeliveryReceipt(
            destination=describe_destination(identifier, method),
            expires_in_minutes=OTP_EXPIRY_MINUTES,
        )

    async def verify_otp(self, identifier: str, method: RecoveryMethod, candidate: str) -> bool:
        """Accept the demo code only."""
        return candidate == self._demo_code


# Verify we implement the protocol
_gateway: OtpGateway = ConsoleOtpGateway()
