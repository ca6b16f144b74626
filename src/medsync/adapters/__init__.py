"""Adapters - Infrastructure implementations of core interfaces.

This package contains the concrete implementations of the Protocol
interfaces defined in the core module.

Adapters are organized by type:
- auth/: OTP gateways (console demo, issuing) and credential stores
- notifications/: Email (SMTP) and SMS (webhook) delivery
"""
