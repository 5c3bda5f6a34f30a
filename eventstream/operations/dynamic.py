"""
EventStream Dynamic Operations - Streams of Streams
===================================================

`flat_map` turns every value into a child stream and forwards whatever the
children emit. Children live only as long as the parent subscription:

- with a `limit`, the oldest child is stopped before a new one starts
  (`flat_map_latest` is `limit=1`)
- a child that ends on its own is dropped from the active set, the parent
  keeps running
- child errors are forwarded to the parent's error channel
- unsubscribing the parent stops the remaining children in creation order,
  then the parent's producer
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional, TypeVar

from ..pipeline import Sink, emit, on_values
from ..signals import Error, attempt
from ..subscription import Subscription, SubscriptionContext, run_all

if TYPE_CHECKING:
    from ..stream import EventStream

T = TypeVar("T")
U = TypeVar("U")


class DynamicOperationsMixin:
    """Operations that spawn a child stream per value."""

    def flat_map(
        self, func: Callable[[T], "EventStream[U]"], limit: Optional[int] = None
    ) -> "EventStream[U]":
        """
        Subscribe to `func(value)` for every value and merge the children.

        Args:
            func: Builds the child stream for a value
            limit: Maximum number of children running at once; unbounded when
                None

        Raises:
            ValueError: If `limit` is smaller than 1
        """
        from ..stream import EventStream

        if limit is not None and limit < 1:
            raise ValueError(f"flat_map() limit must be at least 1, got {limit}")

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            children: List[Subscription] = []

            def stop_children() -> None:
                active = list(children)
                children.clear()
                if active:
                    logging.debug(f"Stopping {len(active)} child stream(s)")
                run_all(child.unsubscribe for child in active)

            context.add_teardown(stop_children)

            def on_value(value: Any) -> None:
                result = attempt(func, value)
                if result.is_error:
                    next(result)
                    return
                child = result.value
                if not isinstance(child, EventStream):
                    next(
                        Error(
                            TypeError(
                                f"flat_map() function must return an EventStream, got {type(child).__name__}"
                            )
                        )
                    )
                    return

                while limit is not None and len(children) >= limit:
                    oldest = children.pop(0)
                    logging.debug(f"Replacing child stream {oldest!r}")
                    oldest.unsubscribe()

                subscription: Optional[Subscription] = None

                def on_child_value(child_value: Any) -> None:
                    if not context.closed:
                        emit(next, child_value)

                def on_child_end() -> None:
                    if subscription in children:
                        children.remove(subscription)

                def on_child_error(error: Exception) -> None:
                    if not context.closed:
                        next(Error(error))

                subscription = child.subscribe(
                    on_child_value, on_child_end, on_child_error
                )
                # The child may have ended the parent while starting
                if context.closed:
                    subscription.unsubscribe()
                elif not subscription.closed:
                    children.append(subscription)

            return on_values(next, on_value)

        return self._derive(step, "flat_map")

    def flat_map_latest(
        self, func: Callable[[T], "EventStream[U]"]
    ) -> "EventStream[U]":
        """Like `flat_map`, but only the most recent child stays subscribed."""
        return self.flat_map(func, limit=1)
