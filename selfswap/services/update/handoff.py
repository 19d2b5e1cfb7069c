"""Encode and decode the argument list passed between updater generations.

The handoff message is the only state that travels from one process
generation to the next.  It is a flat list of tokens::

    --remote <url> --local <absolute path> [--args <token> ...]

``--remote`` and ``--local`` may appear in any order.  Everything after
``--args`` is forwarded verbatim to the relaunched artifact, including tokens
that look like flags.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from selfswap.services.update.constants import ARGS_FLAG, LOCAL_FLAG, REMOTE_FLAG
from selfswap.services.update.models import MalformedInputError, UpdateRequest


__all__ = ["decode_arguments", "encode_request"]


def encode_request(request: UpdateRequest) -> Tuple[str, ...]:
    """Return the handoff tokens describing ``request``."""

    tokens = [
        REMOTE_FLAG,
        request.remote_location,
        LOCAL_FLAG,
        str(request.local_destination.absolute()),
    ]
    if request.restart_arguments:
        tokens.append(ARGS_FLAG)
        tokens.extend(request.restart_arguments)
    return tuple(tokens)


def decode_arguments(argv: Sequence[str]) -> UpdateRequest:
    """Parse ``argv`` back into an :class:`UpdateRequest`.

    Raises :class:`MalformedInputError` when ``--remote`` or ``--local`` is
    missing or has no value.
    """

    arguments = list(argv)
    if ARGS_FLAG in arguments:
        split = arguments.index(ARGS_FLAG)
        options, restart_arguments = arguments[:split], arguments[split + 1 :]
    else:
        options, restart_arguments = arguments, []

    remote_location = _take_value(options, REMOTE_FLAG)
    local_destination = _take_value(options, LOCAL_FLAG)
    return UpdateRequest.create(remote_location, local_destination, restart_arguments)


def _take_value(options: list[str], flag: str) -> str:
    try:
        index = options.index(flag)
    except ValueError:
        raise MalformedInputError(f"Missing required argument {flag}") from None
    if index + 1 >= len(options):
        raise MalformedInputError(f"Argument {flag} requires a value")
    value = options[index + 1]
    del options[index : index + 2]
    return value
