"""Counter Remote Devices - orchestration of reads and mutations against a counter device."""

from .counter import CounterClient, CounterState, Mutation, INCREMENT, DECREMENT

__all__ = ["CounterClient", "CounterState", "Mutation", "INCREMENT", "DECREMENT"]
