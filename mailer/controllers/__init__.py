"""
Controllers Package

High-level email coordination.
"""

from mailer.controllers.email_controller import EmailController

__all__ = ["EmailController"]
