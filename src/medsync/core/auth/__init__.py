"""Auth domain: credential recovery and e-mail verification flows."""

from medsync.core.auth.controller import RecoveryConfig, RecoveryFlowController
from medsync.core.auth.cooldown import CooldownTimer
from medsync.core.auth.password import (
    hash_password,
    is_strong_enough,
    password_strength,
    strength_label,
    verify_password,
)
from medsync.core.auth.recovery import CredentialStore, OtpGateway
from medsync.core.auth.sessions import (
    FlowRegistry,
    RecoverySessionRegistry,
    VerificationSessionRegistry,
)
from medsync.core.auth.types import (
    Account,
    Complete,
    DeliveryReceipt,
    EnterIdentifier,
    EnterOtp,
    FlowError,
    RecoveryErrorCode,
    RecoveryMethod,
    RecoveryStep,
    SetNewPassword,
)
from medsync.core.auth.verification import EmailVerificationController

__all__ = [
    "Account",
    "Complete",
    "CooldownTimer",
    "CredentialStore",
    "DeliveryReceipt",
    "EmailVerificationController",
    "EnterIdentifier",
    "EnterOtp",
    "FlowError",
    "FlowRegistry",
    "OtpGateway",
    "RecoveryConfig",
    "RecoveryErrorCode",
    "RecoveryFlowController",
    "RecoveryMethod",
    "RecoverySessionRegistry",
    "RecoveryStep",
    "SetNewPassword",
    "VerificationSessionRegistry",
    "hash_password",
    "is_strong_enough",
    "password_strength",
    "strength_label",
    "verify_password",
]
