"""Audit logging for import session transitions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def log_import_event(
    event_name: str,
    *,
    session_id: str | None = None,
    file_name: str | None = None,
    state: str | None = None,
    row_counts: Mapping[str, int] | None = None,
    **details: Any,
) -> None:
    """
    Log one step of an import session as a single info line.

    ``row_counts`` carries the session tallies known so far: ``total``,
    ``valid`` and ``invalid`` once the file is validated, ``succeeded`` and
    ``failed`` once it is committed. The same values are attached to the
    record as ``import_*`` attributes for structured handlers.
    """
    counts = dict(row_counts or {})
    logger.info(
        "import %s session=%s file=%s state=%s rows=%s details=%s",
        event_name,
        session_id,
        file_name,
        state,
        counts,
        details,
        extra={
            "import_event": event_name,
            "import_session_id": session_id,
            "import_state": state,
            "import_row_counts": counts,
        },
    )
