"""Loan lifecycle state machine.

Admins move a loan one way through::

    pending --approve--> approved --disburse--> active --complete--> completed
    pending --reject---> rejected

Every transition is applied as a conditional update (the row must still
be in the expected source status) and, once that update has committed,
recorded by exactly one activity log entry for the borrower.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ecredit.exceptions import BackendUnavailableError, IllegalTransitionError, NotFoundError
from ecredit.logging import loan_context
from ecredit.models.lending import ActivityLogEntry, ActivityType, Loan, LoanAction, LoanStatus
from ecredit.serialization import utcnow
from ecredit.store.base import ACTIVITY_LOG, LOANS, TableClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """One legal edge of the lifecycle graph and its side effects."""

    source: LoanStatus
    action: LoanAction
    target: LoanStatus
    timestamp_field: str
    activity_type: ActivityType
    description: str


TRANSITIONS: dict[tuple[LoanStatus, LoanAction], Transition] = {
    (t.source, t.action): t
    for t in (
        Transition(
            LoanStatus.PENDING,
            LoanAction.APPROVE,
            LoanStatus.APPROVED,
            "approval_date",
            ActivityType.LOAN_APPROVED,
            "Loan approved by admin",
        ),
        Transition(
            LoanStatus.PENDING,
            LoanAction.REJECT,
            LoanStatus.REJECTED,
            "approval_date",  # rejection time shares the approval column
            ActivityType.LOAN_REJECTED,
            "Loan rejected by admin",
        ),
        Transition(
            LoanStatus.APPROVED,
            LoanAction.DISBURSE,
            LoanStatus.ACTIVE,
            "disbursement_date",
            ActivityType.LOAN_DISBURSED,
            "Loan disbursed by admin",
        ),
        Transition(
            LoanStatus.ACTIVE,
            LoanAction.COMPLETE,
            LoanStatus.COMPLETED,
            "completion_date",
            ActivityType.LOAN_COMPLETED,
            "Loan completed by admin",
        ),
    )
}


def allowed_actions(status: LoanStatus) -> list[LoanAction]:
    """Actions an admin may take on a loan in ``status``."""
    return [action for (source, action) in TRANSITIONS if source == status]


def find_transition(loan_id: str, status: LoanStatus, action: LoanAction | str) -> Transition:
    """Look up the transition for ``action`` from ``status``.

    Raises
    ------
    IllegalTransitionError
        If the action is unknown or not allowed from ``status``.
    """
    try:
        action = LoanAction(action)
    except ValueError:
        raise IllegalTransitionError(loan_id, status.value, str(action)) from None
    transition = TRANSITIONS.get((status, action))
    if transition is None:
        raise IllegalTransitionError(loan_id, status.value, action.value)
    return transition


@dataclass(frozen=True)
class TransitionOutcome:
    """A committed transition: the updated loan and its audit entry."""

    loan: Loan
    activity: ActivityLogEntry


def transition_loan(
    tables: TableClient,
    loan_id: str,
    action: LoanAction | str,
    now: datetime | None = None,
) -> TransitionOutcome:
    """Apply an admin action to a loan.

    Parameters
    ----------
    tables : TableClient
        Backend tables.
    loan_id : str
        Loan to transition.
    action : LoanAction | str
        approve, reject, disburse or complete.
    now : datetime | None
        Transition time (defaults to the current UTC time).

    Returns
    -------
    TransitionOutcome
        The loan after the update and the activity entry recorded for it.

    Raises
    ------
    NotFoundError
        No loan with ``loan_id`` exists.
    IllegalTransitionError
        The action is not valid from the loan's status, including when
        another admin changed the status between read and update.
    BackendUnavailableError
        The backend failed; the loan may or may not have been updated if
        the failure happened while writing the audit entry.
    """
    row = tables.get(LOANS, loan_id)
    if row is None:
        raise NotFoundError(LOANS, loan_id)
    loan = Loan.from_row(row)

    transition = find_transition(loan_id, loan.status, action)
    now = now or utcnow()

    updated = tables.update(
        LOANS,
        {"status": transition.target.value, transition.timestamp_field: now},
        filters={"id": loan_id, "status": transition.source.value},
    )
    if not updated:
        # Zero rows changed: the loan vanished or someone else moved it first.
        current = tables.get(LOANS, loan_id)
        if current is None:
            raise NotFoundError(LOANS, loan_id)
        logger.warning(
            "Loan %s changed concurrently to %s; %s not applied",
            loan_id,
            current.get("status"),
            transition.action.value,
            extra=loan_context(loan_id=loan_id, action=transition.action),
        )
        raise IllegalTransitionError(loan_id, str(current.get("status")), transition.action.value)
    if len(updated) > 1:
        raise BackendUnavailableError(f"Update of loan {loan_id} affected {len(updated)} rows")

    loan = Loan.from_row(updated[0])

    try:
        entry_row = tables.insert(
            ACTIVITY_LOG,
            {
                "user_id": loan.user_id,
                "activity_type": transition.activity_type.value,
                "description": transition.description,
                "amount": loan.amount,
                "created_at": now,
            },
        )
    except BackendUnavailableError:
        logger.error(
            "Loan %s is now %s but its %s activity entry was not recorded",
            loan_id,
            loan.status.value,
            transition.activity_type.value,
            extra=loan_context(loan_id=loan_id, user_id=loan.user_id, status=loan.status),
        )
        raise

    logger.info(
        "Loan %s: %s -> %s (%s)",
        loan_id,
        transition.source.value,
        transition.target.value,
        transition.action.value,
        extra=loan_context(
            loan_id=loan_id,
            user_id=loan.user_id,
            action=transition.action,
            status=loan.status,
            amount=loan.amount,
        ),
    )
    return TransitionOutcome(loan=loan, activity=ActivityLogEntry.from_row(entry_row))
