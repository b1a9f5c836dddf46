"""Stamp command handling independent of the chat transport."""

from .service import CommandResult, MemberRef, StampCommandService, StampRequest, Subcommand

__all__ = [
    "CommandResult",
    "MemberRef",
    "StampCommandService",
    "StampRequest",
    "Subcommand",
]
