"""utts package bootstrap.

The stateful part of utts is the notification store under
:mod:`utts.notifications`; everything else is presentation or a thin adapter
over an external command.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.2.0"
