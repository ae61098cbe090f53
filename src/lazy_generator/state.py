"""Shared production state driving one producer through its yields."""

import logging
from enum import Enum
from typing import Any, Iterator, Optional

from .errors import GeneratorMisuseError, check

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for "no current value"; ``None`` is a legal yielded value."""

    def __repr__(self) -> str:
        return "<absent>"


ABSENT: Any = _Absent()


class ProductionStatus(str, Enum):
    """Progress of a producer."""

    NOT_STARTED = "not_started"
    SUSPENDED = "suspended"
    DONE = "done"


class ProductionState:
    """
    Progress record of a single producer.

    Holds the suspended producer frame, the most recently yielded value and
    any failure the producer raised. Every owning ``Generator`` handle keeps
    a strong reference to one instance; weak handles and iterators only keep
    a ``weakref.ref``. When the last owner goes away the instance is
    collected and the suspended producer is closed at its current yield.
    """

    def __init__(
        self,
        frame: Iterator[Any],
        name: str,
        propagate_failures: bool = True,
    ):
        """
        Initialize production state.

        Args:
            frame: Unstarted Python generator object running the producer
            name: Producer name used in log records
            propagate_failures: Capture producer failures for re-raising
                instead of treating them as ordinary completion
        """
        self.name = name
        self.propagate_failures = propagate_failures
        self.status = ProductionStatus.NOT_STARTED
        self.current_value: Any = ABSENT
        self.deferred_failure: Optional[BaseException] = None
        self._frame: Optional[Iterator[Any]] = frame
        self._running = False

    def __repr__(self) -> str:
        return f"<ProductionState {self.name} {self.status.value}>"

    def __del__(self):
        self.close()

    def has_value(self) -> bool:
        """Check whether a yielded value is currently available."""
        return self.current_value is not ABSENT

    def is_done(self) -> bool:
        """Check whether the producer has finished, normally or by failing."""
        return self.status is ProductionStatus.DONE

    def resume(self) -> bool:
        """
        Run the producer until its next yield or its end.

        A failure raised by the producer is never raised from here: it is
        stored in ``deferred_failure`` (or logged and dropped when failure
        propagation is disabled) and the state becomes done.

        Returns:
            True if a new value is available, False once the producer is done
        """
        if self.status is ProductionStatus.DONE:
            return False
        check(not self._running, f"Attempted to advance producer {self.name} from inside itself")

        if self.status is ProductionStatus.NOT_STARTED:
            logger.debug(f"Starting producer {self.name}")

        self._running = True
        try:
            value = next(self._frame)
        except StopIteration:
            logger.debug(f"Producer {self.name} completed")
            self._finish()
            return False
        except GeneratorMisuseError:
            self._finish()
            raise
        except Exception as e:
            if self.propagate_failures:
                # Drop this frame from the traceback; it references self.
                self.deferred_failure = e.with_traceback(e.__traceback__.tb_next)
                logger.debug(f"Producer {self.name} failed, deferring {e!r}")
            else:
                logger.warning(
                    f"Producer {self.name} failed, treating as completion: {e!r}",
                    exc_info=e,
                )
            self._finish()
            return False
        except BaseException:
            self._finish()
            raise
        finally:
            self._running = False

        self.current_value = value
        self.status = ProductionStatus.SUSPENDED
        return True

    def raise_if_failed(self) -> None:
        """Raise the deferred producer failure, at most once."""
        failure, self.deferred_failure = self.deferred_failure, None
        if failure is not None:
            raise failure

    def close(self) -> None:
        """Unwind a suspended producer as if it returned at its current yield."""
        frame, self._frame = self._frame, None
        self.current_value = ABSENT
        self.status = ProductionStatus.DONE
        if frame is None:
            return

        logger.debug(f"Tearing down producer {self.name}")
        try:
            frame.close()
        except Exception:
            # Nobody is left to receive this.
            logger.exception(f"Producer {self.name} raised during teardown")

    def _finish(self) -> None:
        self._frame = None
        self.current_value = ABSENT
        self.status = ProductionStatus.DONE
