import threading
import time

from payroll_api.services.locks import KeyedLock


def test_same_key_serialised_other_keys_free():
    locks = KeyedLock()
    active = {"a": 0}
    peak = {"a": 0}
    guard = threading.Lock()

    def work(key):
        with locks.hold(key):
            with guard:
                active[key] = active.get(key, 0) + 1
                peak[key] = max(peak.get(key, 0), active[key])
            time.sleep(0.01)
            with guard:
                active[key] -= 1

    threads = [threading.Thread(target=work, args=((1, 1),)) for _ in range(5)]
    threads += [threading.Thread(target=work, args=((2, 1),)) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert peak[(1, 1)] == 1
    assert peak[(2, 1)] == 1
    # released keys are dropped
    assert locks._locks == {}
