from __future__ import annotations

import pendulum

TIMESTAMP_FORMAT = "YYYY-MM-DD_HH-mm-ss"


def run_timestamp(reference: pendulum.DateTime | None = None) -> str:
    ref = reference or pendulum.now()
    return ref.format(TIMESTAMP_FORMAT)
