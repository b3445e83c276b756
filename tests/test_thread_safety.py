"""
Thread Safety Tests

Verifies that concurrent lookups of the same singleton never construct it
twice, and that prototypes stay independent across threads.
"""

import concurrent.futures
import os
import sys
import threading
import time
import unittest
from typing import List

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from beanjection import AnnotationConfigContext, BeanDefinition, BeanjectionContainer, bean, configuration, lazy


CONSTRUCTIONS: List[int] = []
CONSTRUCTIONS_LOCK = threading.Lock()


class SlowService:
    """Service whose construction takes a while"""

    def __init__(self):
        with CONSTRUCTIONS_LOCK:
            CONSTRUCTIONS.append(threading.current_thread().ident)
        time.sleep(0.05)
        self.thread_id = threading.current_thread().ident


@configuration
class SlowConfig:

    @bean
    @lazy
    def slow_service(self) -> SlowService:
        return SlowService()


class TestConcurrentSingletonCreation(unittest.TestCase):
    """Concurrent get_bean on a singleton"""

    def setUp(self):
        CONSTRUCTIONS.clear()

    def test_container_creates_singleton_once(self):
        container = BeanjectionContainer()
        container.register_bean_definition("slow", BeanDefinition(bean_class=SlowService))

        results: List[SlowService] = []
        errors: List[Exception] = []

        def resolve_in_thread():
            try:
                results.append(container.get_bean("slow"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=resolve_in_thread) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(errors), 0, f"Errors occurred: {errors}")
        self.assertEqual(len(results), 10)
        self.assertEqual(len(CONSTRUCTIONS), 1)
        self.assertTrue(all(result is results[0] for result in results))

    def test_lazy_factory_method_bean_created_once(self):
        with AnnotationConfigContext(SlowConfig) as context:
            self.assertEqual(len(CONSTRUCTIONS), 0)

            with concurrent.futures.ThreadPoolExecutor(max_workers=5) as executor:
                futures = [executor.submit(context.get_bean, "slow_service") for _ in range(20)]
                results = [f.result() for f in futures]

        self.assertEqual(len(CONSTRUCTIONS), 1)
        self.assertEqual(len({id(result) for result in results}), 1)


class TestConcurrentPrototypes(unittest.TestCase):
    """Prototypes created concurrently"""

    def test_each_thread_gets_its_own_instance(self):
        CONSTRUCTIONS.clear()
        container = BeanjectionContainer()
        container.register_bean_definition(
            "slow", BeanDefinition(bean_class=SlowService, scope="prototype")
        )

        with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
            futures = [executor.submit(container.get_bean, "slow") for _ in range(8)]
            results = [f.result() for f in futures]

        self.assertEqual(len(CONSTRUCTIONS), 8)
        self.assertEqual(len({id(result) for result in results}), 8)


if __name__ == '__main__':
    unittest.main()
