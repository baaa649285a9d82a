"""
Finance Store

An explicit container around the pure reducer. Whoever builds the store
owns it: there is no module-level state.

The store applies one intent at a time, remembers the latest rejection
and notifies subscribers after every accepted change.
"""

from collections.abc import Callable
from datetime import date
from typing import Optional

import structlog

from household_finance.engine.actions import Intent
from household_finance.engine.reducer import Rejection, Transition, transition
from household_finance.models.state import AppState


Listener = Callable[[AppState], None]


class FinanceStore:
    """
    Holds the current AppState.

    Usage:
        store = FinanceStore(initial_state)
        unsubscribe = store.subscribe(lambda s: print(len(s.transactions)))
        store.dispatch(AddTransaction(draft=...))
    """

    def __init__(
        self,
        initial_state: AppState,
        clock: Optional[Callable[[], date]] = None,
    ):
        """
        Args:
            initial_state: Starting state (loaded or seeded)
            clock: Returns "today"; defaults to the system date
        """
        self._state = initial_state
        self._clock = clock or date.today
        self._listeners: list[Listener] = []
        self._last_rejection: Optional[Rejection] = None
        self._logger = structlog.get_logger(__name__)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def last_rejection(self) -> Optional[Rejection]:
        """Rejection of the most recent dispatch, None if it was accepted."""
        return self._last_rejection

    @property
    def today(self) -> date:
        return self._clock()

    def dispatch(self, action: Intent) -> Transition:
        """Apply an intent, notify subscribers if the state changed."""
        result = transition(self._state, action, self.today)
        self._last_rejection = result.rejection

        if result.rejection is not None:
            self._logger.warning(
                "intent_rejected",
                kind=action.kind,
                reason=result.rejection.reason.value,
            )
            return result

        self._logger.debug("intent_applied", kind=action.kind)
        if result.state is not self._state:
            self._state = result.state
            for listener in list(self._listeners):
                listener(self._state)
        return result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace_state(self, state: AppState) -> None:
        """Swap in a whole new state (e.g. after loading) and notify."""
        self._state = state
        self._last_rejection = None
        for listener in list(self._listeners):
            listener(self._state)
