import threading

from django.db import connection


def run_concurrently(*calls):
    """
    Start every call on its own thread at the same moment and wait for all
    of them. Returns one (result, exception) pair per call, in call order.
    """
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            outcomes[index] = (call(), None)
        except Exception as exc:
            outcomes[index] = (None, exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes
