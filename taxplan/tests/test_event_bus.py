import logging
import unittest
from taxplan.events.Event_Bus import EventBus, TAXPLAN_GENERATED
from taxplan.events.event_helpers import subscribe_logging_listener


class TestEventBus(unittest.TestCase):

    def test_publish_reaches_subscribers_once(self):
        bus = EventBus()
        received = []
        callback = lambda name, payload: received.append((name, payload))
        bus.subscribe(TAXPLAN_GENERATED, callback)
        bus.subscribe(TAXPLAN_GENERATED, callback)
        bus.publish(TAXPLAN_GENERATED, {"plan_id": "p1"})
        self.assertEqual(received, [(TAXPLAN_GENERATED, {"plan_id": "p1"})])
        bus.unsubscribe(TAXPLAN_GENERATED, callback)
        bus.publish(TAXPLAN_GENERATED, {"plan_id": "p2"})
        self.assertEqual(len(received), 1)

    def test_failing_subscriber_does_not_stop_delivery(self):
        bus = EventBus()
        received = []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe(TAXPLAN_GENERATED, broken)
        bus.subscribe(TAXPLAN_GENERATED, lambda name, payload: received.append(payload))
        with self.assertLogs("taxplan.events.Event_Bus", level=logging.ERROR):
            bus.publish(TAXPLAN_GENERATED, "payload")
        self.assertEqual(received, ["payload"])

    def test_logging_listener(self):
        bus = EventBus()
        subscribe_logging_listener(bus)
        with self.assertLogs("taxplan.events.Event_Bus", level=logging.INFO) as logs:
            bus.publish(TAXPLAN_GENERATED, {"plan_id": "p1"})
        self.assertIn("taxplan.generated", logs.output[0])


if __name__ == '__main__':
    unittest.main()
