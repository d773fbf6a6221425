# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abstract base class for status query protocols."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcstatuslog.address import ServerAddress
    from mcstatuslog.models import ServerStatus


class StatusProtocol(ABC):
    """One status round trip against a server speaking a given edition."""

    @abstractmethod
    async def query(self, address: ServerAddress) -> ServerStatus:
        """Open a session, request status, close the session.

        Args:
            address: Validated server address

        Returns:
            Status carrying the payload for this protocol's edition

        Raises:
            ConnectionFailure: If the server cannot be reached
            DecodeFailure: If the reply does not match the protocol
        """
