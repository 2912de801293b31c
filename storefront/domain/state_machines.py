"""State machines for domain entities.

Deterministic state machine that defines valid transitions for the
category tree drag gesture. The coordinator drives it; every input
surface (pointer drag, keyboard reordering, batch API) goes through
the same transitions.
"""

from enum import Enum

from storefront.domain.exceptions import InvalidStateTransitionError


# ============================================================================
# Gesture State Machine
# ============================================================================


class GestureStatus(str, Enum):
    """Drag gesture lifecycle states.

    State diagram:
        IDLE ◄──────────────────────────────────────────┐
          │                                             │
          │ begin_drag                                  │ cancel
          ▼                                             │
        DRAGGING ◄──── leave_target ────┐ ──────────────┤
          │                             │               │
          │ hover                       │               │
          ▼                             │               │
        HOVER_TARGET ───────────────────┘ ──────────────┤
          │     ▲                                       │
          │     └── hover (new target)                  │
          │ drop                                        │
          ▼                                             │
        DROPPED ─── no-op / rejected ───────────────────┤
          │                                             │
          │ apply optimistically                        │
          ▼                                             │
        COMMITTING ─── saved ───────────────────────────┤
          │                                             │
          │ save failed                                 │
          ▼                                             │
        REVERTING ─── reloaded ─────────────────────────┘
    """

    IDLE = "idle"
    DRAGGING = "dragging"
    HOVER_TARGET = "hover_target"
    DROPPED = "dropped"
    COMMITTING = "committing"
    REVERTING = "reverting"

    def can_transition_to(self, target: "GestureStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _GESTURE_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["GestureStatus"]:
        """Get list of valid target states.

        Returns:
            List of states that can be transitioned to.
        """
        return list(_GESTURE_TRANSITIONS.get(self, set()))

    def is_cancellable(self) -> bool:
        """Check if the gesture can still be abandoned without side effects.

        Returns:
            True if no planning or persistence has started.
        """
        return self in {GestureStatus.DRAGGING, GestureStatus.HOVER_TARGET, GestureStatus.DROPPED}


_GESTURE_TRANSITIONS: dict[GestureStatus, set[GestureStatus]] = {
    GestureStatus.IDLE: {GestureStatus.DRAGGING},
    GestureStatus.DRAGGING: {GestureStatus.HOVER_TARGET, GestureStatus.IDLE},
    GestureStatus.HOVER_TARGET: {
        GestureStatus.HOVER_TARGET,
        GestureStatus.DRAGGING,
        GestureStatus.DROPPED,
        GestureStatus.IDLE,
    },
    GestureStatus.DROPPED: {GestureStatus.COMMITTING, GestureStatus.IDLE},
    GestureStatus.COMMITTING: {GestureStatus.IDLE, GestureStatus.REVERTING},
    GestureStatus.REVERTING: {GestureStatus.IDLE},
}


# ============================================================================
# State Machine Helpers
# ============================================================================


def validate_gesture_transition(
    gesture_id: str,
    current_status: GestureStatus,
    target_status: GestureStatus,
) -> None:
    """Validate and raise if gesture state transition is invalid.

    Args:
        gesture_id: Gesture identifier for error message.
        current_status: Current gesture status.
        target_status: Target gesture status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="Gesture",
            entity_id=gesture_id,
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )
