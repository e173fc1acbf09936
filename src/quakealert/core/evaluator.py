"""Severity evaluation for freshly fetched feed snapshots."""

from typing import Optional, Sequence

from .models import SeismicEvent


def evaluate_severity(
    previous_snapshot: Sequence[SeismicEvent],
    new_snapshot: Sequence[SeismicEvent],
    threshold: float,
) -> Optional[SeismicEvent]:
    """
    Decide whether the newest event of a poll warrants an alert.

    Both snapshots are newest-first. Only the head of each is compared: an alert
    fires when both are non-empty, the newest ids differ and the new head's
    magnitude reaches ``threshold``. Several severe events arriving within one
    poll window therefore alert only once, for the newest of them.

    Returns:
        The qualifying event, or None when nothing should fire
    """
    if not previous_snapshot or not new_snapshot:
        return None

    latest_new = new_snapshot[0]
    latest_old = previous_snapshot[0]

    if latest_new.id == latest_old.id:
        return None

    if latest_new.magnitude >= threshold:
        return latest_new

    return None
