import anyio
import pytest

from src.platform.exception.exceptions import LockTimeoutError
from src.platform.logging.loguru_io_config import inventory_key_var
from src.platform.state.keyed_lock import KeyedLock


class TestKeyedLock:
    @pytest.fixture
    def lock(self):
        return KeyedLock(timeout=0.5)

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self, lock):
        active = 0
        max_active = 0

        async def critical_section():
            nonlocal active, max_active
            async with lock.hold(key='inventory:dune:pvr'):
                active += 1
                max_active = max(max_active, active)
                await anyio.sleep(0.01)
                active -= 1

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(critical_section)

        assert max_active == 1

    @pytest.mark.asyncio
    async def test_different_keys_run_concurrently(self, lock):
        both_inside = anyio.Event()
        inside: set[str] = set()

        async def critical_section(key: str):
            async with lock.hold(key=key):
                inside.add(key)
                if len(inside) == 2:
                    both_inside.set()
                with anyio.fail_after(1):
                    await both_inside.wait()

        async with anyio.create_task_group() as tg:
            tg.start_soon(critical_section, 'inventory:dune:pvr')
            tg.start_soon(critical_section, 'inventory:dune:inox')

        assert inside == {'inventory:dune:pvr', 'inventory:dune:inox'}

    @pytest.mark.asyncio
    async def test_timeout_raises_retryable_error(self):
        lock = KeyedLock(timeout=0.05)
        acquired = anyio.Event()
        release = anyio.Event()

        async def holder():
            async with lock.hold(key='k'):
                acquired.set()
                await release.wait()

        async with anyio.create_task_group() as tg:
            tg.start_soon(holder)
            await acquired.wait()

            with pytest.raises(LockTimeoutError):
                async with lock.hold(key='k'):
                    pass
            release.set()

    @pytest.mark.asyncio
    async def test_released_on_error_and_cleaned_up(self, lock):
        with pytest.raises(RuntimeError):
            async with lock.hold(key='k'):
                assert lock.is_locked(key='k')
                raise RuntimeError('boom')

        assert not lock.is_locked(key='k')
        assert len(lock) == 0

        async with lock.hold(key='k'):
            pass

    @pytest.mark.asyncio
    async def test_key_is_bound_to_log_context_while_held(self, lock):
        assert inventory_key_var.get() == '-'

        async with lock.hold(key='inventory:dune:pvr'):
            assert inventory_key_var.get() == 'inventory:dune:pvr'

        assert inventory_key_var.get() == '-'
