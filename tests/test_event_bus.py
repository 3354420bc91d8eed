from nebula.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_emit_without_subscribers_is_a_no_op():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe("ordered", lambda sender, **kwargs: calls.append("first"))
    bus.subscribe("ordered", lambda sender, **kwargs: calls.append("second"))
    bus.emit("ordered")
    assert calls == ["first", "second"]
