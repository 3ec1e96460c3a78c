"""Tests pour ChangeBroadcaster."""

from videostore.core.events import AggregateKind, ChangeEvent, Outcome
from videostore.services.notifier import CHANNEL_MESSAGES


class TestChangeBroadcaster:
    def test_events_reach_subscribers_of_their_kind(self, broadcaster):
        received = []
        broadcaster.subscribe(AggregateKind.MOVIE, lambda msg, event: received.append(msg))

        delivered = broadcaster.publish(
            [
                ChangeEvent(AggregateKind.ACTOR, "register_actor", (1,)),
                ChangeEvent(AggregateKind.MOVIE, "register_movie", ("tt0107048",)),
            ]
        )

        assert received == ["movieListNotification"]
        assert delivered == 1

    def test_unsubscribe(self, broadcaster):
        received = []
        unsubscribe = broadcaster.subscribe(
            AggregateKind.ACTOR, lambda msg, event: received.append(event)
        )

        unsubscribe()
        broadcaster.publish([ChangeEvent(AggregateKind.ACTOR, "unregister_actor", (1,))])

        assert received == []
        assert broadcaster.subscriber_count(AggregateKind.ACTOR) == 0

    def test_failing_subscriber_does_not_stop_others(self, broadcaster):
        received = []

        def failing(msg, event):
            raise RuntimeError("websocket fermé")

        broadcaster.subscribe(AggregateKind.ACTOR, failing)
        broadcaster.subscribe(AggregateKind.ACTOR, lambda msg, event: received.append(event))

        delivered = broadcaster.publish([ChangeEvent(AggregateKind.ACTOR, "update_actor", (1,))])

        assert len(received) == 1
        assert delivered == 1

    def test_registration_events_are_published_after_commit(
        self, service, broadcaster, sample_actor
    ):
        received = []
        broadcaster.subscribe(AggregateKind.ACTOR, lambda msg, event: received.append(event))

        outcome = service.register_actor(sample_actor)
        assert received == []

        broadcaster.publish(outcome.events)
        assert [str(event) for event in received] == [f"register_actor( {outcome.value.id} )"]

    def test_channel_per_kind(self):
        assert CHANNEL_MESSAGES == {
            AggregateKind.ACTOR: "actorListNotification",
            AggregateKind.MOVIE: "movieListNotification",
        }


class TestOutcome:
    def test_no_events_means_unchanged(self):
        outcome = Outcome(value=False)

        assert not outcome.changed
        assert outcome.kinds() == set()
