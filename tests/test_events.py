from tsdoc.utils.events import _REGISTRY, SequenceStarted, publish, subscribe


def test_subscribe_and_publish():
    received = []

    @subscribe(SequenceStarted)
    def _on_start(evt):
        received.append(evt.name)

    try:
        publish(SequenceStarted(name="Deploy", source="deploy.xml"))
    finally:
        _REGISTRY[SequenceStarted].remove(_on_start)

    assert received == ["Deploy"]


def test_failing_handler_does_not_raise(caplog):
    @subscribe(SequenceStarted)
    def _boom(evt):
        raise RuntimeError("handler broke")

    try:
        publish(SequenceStarted(name="Deploy", source="deploy.xml"))
    finally:
        _REGISTRY[SequenceStarted].remove(_boom)

    assert "handler broke" in caplog.text
