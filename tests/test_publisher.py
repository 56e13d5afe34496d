import threading

import numpy as np

from tremas.config.schema import GenerationRequest
from tremas.publisher import BatchPublisher
from tremas.types import SampleBatch


def _tagged(n):
    return SampleBatch(np.zeros((n, 2)), np.zeros((n, 3)), np.zeros(n), requested=n, attempts=n)


def test_regenerate_now_publishes_real_batch():
    req = GenerationRequest(depth=2, density=0.1, base_radius=0.1, samples=200)
    with BatchPublisher() as pub:
        assert pub.current is None
        batch = pub.regenerate_now(req, seed=3)
        assert pub.current is batch
        assert pub.published_ticket == 1
        assert batch.count <= 200


def test_stale_result_is_dropped():
    gate = threading.Event()
    calls = []

    def generate(request, seed):
        calls.append(request.samples)
        if request.samples == 1:
            gate.wait(5)
        return _tagged(request.samples)

    seen = []
    with BatchPublisher(generate=generate) as pub:
        pub.subscribe(seen.append)
        f_old = pub.submit(GenerationRequest(samples=1))
        f_new = pub.submit(GenerationRequest(samples=2))
        gate.set()
        old, new = f_old.result(5), f_new.result(5)

    assert old.count == 1 and new.count == 2
    assert pub.current is new
    assert pub.published_ticket == 2
    assert len(seen) == 1 and seen[0] is new
    assert calls == [1, 2]


def test_failed_generation_keeps_previous_batch():
    def generate(request, seed):
        if request.samples == 13:
            raise RuntimeError("boom")
        return _tagged(request.samples)

    with BatchPublisher(generate=generate) as pub:
        first = pub.regenerate_now(GenerationRequest(samples=3))
        fut = pub.submit(GenerationRequest(samples=13))
        assert isinstance(fut.exception(5), RuntimeError)
    assert pub.current is first


def test_failing_subscriber_does_not_block_publication(caplog):
    seen = []

    def broken(batch):
        raise ValueError("subscriber bug")

    with BatchPublisher(generate=lambda request, seed: _tagged(request.samples)) as pub:
        pub.subscribe(broken)
        pub.subscribe(seen.append)
        fut = pub.submit(GenerationRequest(samples=5))
        batch = fut.result(5)
        assert fut.exception() is None
    assert pub.current is batch
    assert seen == [batch]
    assert "subscriber" in caplog.text
