"""
Mutation gate and request supersession.
"""
import asyncio

import pytest

from core.coordination import MutationGate, MutationInFlight, Supersession, Superseded


class TestMutationGate:
    """At most one save per (user, resource) at a time."""

    def test_second_save_for_same_key_is_rejected(self):
        async def scenario():
            gate = MutationGate()
            async with gate.hold(("u-1", "branches")):
                assert gate.is_busy(("u-1", "branches"))
                with pytest.raises(MutationInFlight):
                    async with gate.hold(("u-1", "branches")):
                        pass
                async with gate.hold(("u-2", "branches")):
                    pass
            return gate

        gate = asyncio.run(scenario())
        assert not gate.is_busy(("u-1", "branches"))

    def test_gate_released_after_failure(self):
        async def scenario():
            gate = MutationGate()
            with pytest.raises(RuntimeError):
                async with gate.hold("k"):
                    raise RuntimeError("mutation failed")
            return gate.is_busy("k")

        assert asyncio.run(scenario()) is False


class TestSupersession:
    """The latest request for a key wins; the earlier one is cancelled."""

    def test_newer_request_supersedes_older(self):
        async def scenario():
            runner = Supersession()
            started = asyncio.Event()

            async def slow():
                started.set()
                await asyncio.sleep(10)
                return "old"

            async def fast():
                return "new"

            first = asyncio.ensure_future(runner.run("reports", slow()))
            await started.wait()
            latest = await runner.run("reports", fast())
            with pytest.raises(Superseded):
                await first
            return latest

        assert asyncio.run(scenario()) == "new"

    def test_different_keys_do_not_interfere(self):
        async def scenario():
            runner = Supersession()

            async def value(v):
                await asyncio.sleep(0)
                return v

            return await asyncio.gather(runner.run("a", value(1)), runner.run("b", value(2)))

        assert asyncio.run(scenario()) == [1, 2]

    def test_errors_propagate(self):
        async def scenario():
            runner = Supersession()

            async def boom():
                raise ValueError("upstream exploded")

            await runner.run("a", boom())

        with pytest.raises(ValueError):
            asyncio.run(scenario())
