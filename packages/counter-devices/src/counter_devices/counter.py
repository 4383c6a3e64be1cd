from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import threading

from counter_core import CounterHttpClient
from counter_core.errors import CounterError, ConfirmationError, OperationInProgressError
from counter_core.states import Endpoint, OperationPhase, parse_count

logger = logging.getLogger(__name__)

STATUS_IDLE = "Idle"
STATUS_FETCHING = "Fetching..."
STATUS_UPDATED = "Updated"
STATUS_INCREMENTING = "Incrementing..."
STATUS_INCREMENTED = "Incremented"
STATUS_DECREMENTING = "Decrementing..."
STATUS_DECREMENTED = "Decremented"
STATUS_ERROR_PREFIX = "Error: "


@dataclass(frozen=True)
class CounterState:
    """Snapshot of the address, value and status held by a CounterClient."""
    address: str
    value: Optional[str]
    status: str
    phase: OperationPhase
    error: Optional[CounterError] = None

    @property
    def ok(self) -> bool:
        return self.phase == OperationPhase.SUCCEEDED

    @property
    def busy(self) -> bool:
        return self.phase == OperationPhase.IN_FLIGHT

    @property
    def count(self) -> int:
        """
        The counter value as an integer.

        The raw text is kept as read from the device; it is only parsed here.

        Raises:
            ProtocolError: If no value was read yet or it is not a decimal integer
        """
        return parse_count(self.value)


@dataclass(frozen=True)
class Mutation:
    """A mutating request together with the statuses shown while it runs and after it succeeds."""
    endpoint: Endpoint
    pending_status: str
    done_status: str


INCREMENT = Mutation(Endpoint.ADD, STATUS_INCREMENTING, STATUS_INCREMENTED)
DECREMENT = Mutation(Endpoint.SUB, STATUS_DECREMENTING, STATUS_DECREMENTED)

StateListener = Callable[[CounterState], None]


class CounterClient:
    """
    Remote control for a single counter device.

    Every operation returns a CounterState and never raises for a failed
    request; failures are reported through the status and error fields.
    The value only changes on a successful read of /count, including the
    confirmation read issued after each successful mutation.

    Overlapping invocations are not guarded unless ``guard_overlapping`` is
    set, in which case a call arriving while another is in flight is
    rejected without touching the held state.
    """

    def __init__(self, address: str = "", http: Optional[CounterHttpClient] = None,
                 guard_overlapping: bool = False):
        self.address = address
        self.http = http if http is not None else CounterHttpClient()
        self._value: Optional[str] = None
        self._status = STATUS_IDLE
        self._phase = OperationPhase.IDLE
        self._error: Optional[CounterError] = None
        self._listeners: List[StateListener] = []
        self._in_flight = threading.Lock() if guard_overlapping else None

    @property
    def value(self) -> Optional[str]:
        return self._value

    @property
    def status(self) -> str:
        return self._status

    @property
    def phase(self) -> OperationPhase:
        return self._phase

    @property
    def state(self) -> CounterState:
        return self.snapshot()

    def snapshot(self) -> CounterState:
        return CounterState(
            address=self.address,
            value=self._value,
            status=self._status,
            phase=self._phase,
            error=self._error,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with a snapshot at every state transition. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self, address: Optional[str] = None) -> CounterState:
        """Read the counter from the device and store it as the new value."""
        return self._run(address, self._refresh)

    def increment(self, address: Optional[str] = None) -> CounterState:
        """Ask the device to increment its counter, then confirm with a refresh."""
        return self._run(address, lambda target: self._mutate(target, INCREMENT))

    def decrement(self, address: Optional[str] = None) -> CounterState:
        """Ask the device to decrement its counter, then confirm with a refresh."""
        return self._run(address, lambda target: self._mutate(target, DECREMENT))

    def close(self) -> None:
        self.http.close()

    def _run(self, address: Optional[str], operation: Callable[[str], CounterState]) -> CounterState:
        if self._in_flight is None:
            return operation(self._take_address(address))

        if not self._in_flight.acquire(blocking=False):
            error = OperationInProgressError("operation already in progress")
            logger.warning(f"Rejected request for {address or self.address}: {error}")
            return CounterState(
                address=self.address,
                value=self._value,
                status=f"{STATUS_ERROR_PREFIX}{error}",
                phase=OperationPhase.FAILED,
                error=error,
            )
        try:
            return operation(self._take_address(address))
        finally:
            self._in_flight.release()

    def _take_address(self, address: Optional[str]) -> str:
        if address is not None:
            self.address = address
        return self.address

    def _refresh(self, address: str) -> CounterState:
        try:
            self._read_count(address)
        except CounterError as e:
            return self._fail(e)
        return self._transition(STATUS_UPDATED, OperationPhase.SUCCEEDED)

    def _read_count(self, address: str) -> None:
        """Read /count and store the body as the value, leaving the operation in flight."""
        self._transition(STATUS_FETCHING, OperationPhase.IN_FLIGHT)
        body = self.http.get_text(address, Endpoint.COUNT)
        self._value = body
        logger.debug(f"Counter at {address} reads {body!r}")

    def _mutate(self, address: str, mutation: Mutation) -> CounterState:
        self._transition(mutation.pending_status, OperationPhase.IN_FLIGHT)
        try:
            reply = self.http.post_text(address, mutation.endpoint)
        except CounterError as e:
            return self._fail(e)

        # The reply text is not the new value; only /count is authoritative.
        logger.info(f"{mutation.endpoint.path} accepted by {address}: {reply[:80]!r}")

        try:
            self._read_count(address)
        except CounterError as e:
            error = ConfirmationError(f"{mutation.done_status} on device but refresh failed: {e}", e)
            return self._fail(error)

        return self._transition(mutation.done_status, OperationPhase.SUCCEEDED)

    def _fail(self, error: CounterError) -> CounterState:
        logger.warning(f"Counter operation against {self.address} failed: {error}")
        return self._transition(f"{STATUS_ERROR_PREFIX}{error}", OperationPhase.FAILED, error)

    def _transition(self, status: str, phase: OperationPhase,
                    error: Optional[CounterError] = None) -> CounterState:
        self._status = status
        self._phase = phase
        self._error = error
        state = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Counter state listener failed")
        return state
