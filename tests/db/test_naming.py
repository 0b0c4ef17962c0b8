from __future__ import annotations

import re
import threading

from stagedinsert import StagingNameSource


def test_name_combines_table_counter_and_random_part() -> None:
    source = StagingNameSource()
    first, second = source("orders"), source("orders")

    assert re.fullmatch(r"orders_1_[0-9a-f]{12}", first)
    assert re.fullmatch(r"orders_2_[0-9a-f]{12}", second)


def test_schema_qualified_and_odd_table_names() -> None:
    source = StagingNameSource()
    assert source("dbo.Orders").startswith("orders_")
    assert source("2024").startswith("stg_2024_")


def test_long_table_names_are_truncated() -> None:
    name = StagingNameSource(max_length=40)("x" * 200)
    assert len(name) <= 40
    assert name.startswith("xxx")


def test_names_are_unique_across_threads() -> None:
    source = StagingNameSource()
    names: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [source("orders") for _ in range(200)]
        with lock:
            names.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(names) == 1600
    assert len(set(names)) == 1600
