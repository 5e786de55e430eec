"""Tests for the invoker strategies.

Coverage:
- AppendInvoker protocol conformance
- CachedAppendInvoker: static and instance targets, construction checks, failure wrapping
- ReacquireAppendInvoker: per-call factory + lookup, varying instance types, failure wrapping
"""

from __future__ import annotations

import threading

import pytest
import sample_targets
from hypothesis import given, settings
from hypothesis import strategies as st

from invokelog.errors import ConfigurationError, DeliveryError
from invokelog.invokers import AppendInvoker, CachedAppendInvoker, ReacquireAppendInvoker


class TestProtocol:
    def test_both_strategies_are_append_invokers(self):
        cached = CachedAppendInvoker(None, sample_targets.Sink.append)
        reacquire = ReacquireAppendInvoker(sample_targets.Factory.get, "append")
        assert isinstance(cached, AppendInvoker)
        assert isinstance(reacquire, AppendInvoker)


# =============================================================================
# Cached
# =============================================================================


class TestCachedAppendInvoker:
    def test_static_target(self):
        invoker = CachedAppendInvoker(None, sample_targets.Sink.append)
        invoker.append("one")
        invoker.append("two")
        assert sample_targets.Sink.lines == ["one", "two"]
        assert invoker.is_static

    def test_instance_target(self):
        sink = sample_targets.InstanceSink()
        invoker = CachedAppendInvoker(sink, sink.append)
        invoker.append("one")
        assert sink.lines == ["one"]
        assert invoker.instance is sink
        assert not invoker.is_static

    def test_none_method_rejected(self):
        with pytest.raises(ConfigurationError, match="method cannot be None"):
            CachedAppendInvoker(None, None)

    def test_non_callable_method_rejected(self):
        with pytest.raises(ConfigurationError, match="callable"):
            CachedAppendInvoker(None, "append")  # type: ignore[arg-type]

    def test_target_failure_becomes_delivery_error(self):
        invoker = CachedAppendInvoker(None, sample_targets.FailingSink.append)
        with pytest.raises(DeliveryError) as exc_info:
            invoker.append("x")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_call_mechanism_failure_is_also_delivery_error(self):
        """A signature mismatch at call time surfaces the same way as a target error."""
        invoker = CachedAppendInvoker(None, sample_targets.BadSignatures.append)
        with pytest.raises(DeliveryError) as exc_info:
            invoker.append("x")
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_repr_names_target(self):
        invoker = CachedAppendInvoker(None, sample_targets.Sink.append)
        assert "sample_targets.Sink.append" in repr(invoker)
        assert "static" in repr(invoker)

    def test_concurrent_appends(self):
        sink = sample_targets.InstanceSink()
        invoker = CachedAppendInvoker(sink, sink.append)

        def worker(n: int) -> None:
            for i in range(50):
                invoker.append(f"{n}:{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(sink.lines) == 200

    @given(st.lists(st.text(max_size=20), max_size=30))
    @settings(max_examples=30)
    def test_every_text_delivered_once_in_order(self, texts):
        sample_targets.reset()
        invoker = CachedAppendInvoker(None, sample_targets.Sink.append)
        for text in texts:
            invoker.append(text)
        assert sample_targets.Sink.lines == texts


# =============================================================================
# Reacquire
# =============================================================================


class TestReacquireAppendInvoker:
    def test_construction_does_not_call_factory(self):
        ReacquireAppendInvoker(sample_targets.Factory.get, "append")
        assert sample_targets.Factory.calls == 0

    def test_fresh_instance_per_append(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.get, "append")
        invoker.append("one")
        invoker.append("two")
        first, second = sample_targets.Factory.instances
        assert first is not second
        assert first.lines == ["one"]
        assert second.lines == ["two"]

    def test_method_resolved_on_each_runtime_type(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.rotating, "append")
        invoker.append("a")
        invoker.append("b")
        first, second = sample_targets.Factory.instances
        assert isinstance(first, sample_targets.InstanceSink)
        assert isinstance(second, sample_targets.OtherSink)
        assert first.lines == ["a"]
        assert second.lines == ["other:b"]

    def test_none_factory_rejected(self):
        with pytest.raises(ConfigurationError, match="factory cannot be None"):
            ReacquireAppendInvoker(None, "append")

    @pytest.mark.parametrize("append", [None, ""])
    def test_missing_append_name_rejected(self, append):
        with pytest.raises(ConfigurationError, match="append cannot be empty"):
            ReacquireAppendInvoker(sample_targets.Factory.get, append)

    def test_factory_failure(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.broken, "append")
        with pytest.raises(DeliveryError) as exc_info:
            invoker.append("x")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_none_instance_fails_at_lookup(self):
        """A None from the factory is not special-cased; the lookup fails instead."""
        invoker = ReacquireAppendInvoker(sample_targets.Factory.none, "append")
        with pytest.raises(DeliveryError, match="no append attribute"):
            invoker.append("x")

    def test_instance_without_method(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.plain, "append")
        with pytest.raises(DeliveryError, match="no append attribute 'append'"):
            invoker.append("x")

    def test_attribute_read_failure_on_instance(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.proxy, "append")
        with pytest.raises(DeliveryError, match="proxy backend unavailable") as exc_info:
            invoker.append("x")
        assert isinstance(exc_info.value.__cause__, ConfigurationError)
        assert isinstance(exc_info.value.__cause__.__cause__, RuntimeError)

    def test_target_failure(self):
        invoker = ReacquireAppendInvoker(lambda: sample_targets.FailingSink(), "append")
        with pytest.raises(DeliveryError) as exc_info:
            invoker.append("x")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_repr(self):
        invoker = ReacquireAppendInvoker(sample_targets.Factory.get, "append")
        assert repr(invoker) == "ReacquireAppendInvoker(sample_targets.Factory.get, 'append')"

    @given(st.integers(min_value=1, max_value=25))
    @settings(max_examples=15)
    def test_factory_called_once_per_append(self, n):
        sample_targets.reset()
        invoker = ReacquireAppendInvoker(sample_targets.Factory.get, "append")
        for i in range(n):
            invoker.append(str(i))
        assert sample_targets.Factory.calls == n
        assert len({id(inst) for inst in sample_targets.Factory.instances}) == n
