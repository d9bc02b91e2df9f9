"""Tests for the domain event message bus."""

from dataclasses import dataclass

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass
class SomethingHappened(DomainEvent):
    what: str


@dataclass
class NobodyCares(DomainEvent):
    pass


def test_all_handlers_receive_event():
    bus = MessageBus()
    first, second = [], []
    bus.register_event_handler(SomethingHappened, first.append)
    bus.register_event_handler(SomethingHappened, second.append)

    event = SomethingHappened(what="it")
    bus.publish_events([event])

    assert first == [event]
    assert second == [event]


def test_failing_handler_does_not_stop_others():
    bus = MessageBus()
    received = []

    def broken(event):
        raise RuntimeError("handler failed")

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, received.append)

    bus.publish_events([SomethingHappened(what="it")])

    assert len(received) == 1


def test_unhandled_events_are_ignored():
    MessageBus().publish_events([NobodyCares()])

