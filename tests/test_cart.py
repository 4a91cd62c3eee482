import threading
from decimal import Decimal

from checkout_pricing.engine import Cart, Checkout, MeasuredQuantity, Sku, Unit


def test_add_merges_per_sku_and_unit():
    cart = Cart()
    cart.add(Sku("A"), MeasuredQuantity.single())
    cart.add(Sku("A"), MeasuredQuantity.single())
    cart.add(Sku("A"), MeasuredQuantity(Unit.WEIGHT_IN_KG, "0.5"))

    assert cart.amount(Sku("A")) == Decimal(2)
    assert cart.amount(Sku("A"), Unit.WEIGHT_IN_KG) == Decimal("0.5")
    assert cart.amount(Sku("B")) == Decimal(0)
    assert len(cart) == 1


def test_snapshot_is_detached_from_later_scans():
    cart = Cart()
    cart.add(Sku("A"), MeasuredQuantity.single())
    snapshot = cart.snapshot()

    cart.add(Sku("A"), MeasuredQuantity.single())
    cart.add(Sku("B"), MeasuredQuantity.single())
    assert snapshot == {Sku("A"): {Unit.QUANTITY: Decimal(1)}}


def test_reset_does_not_touch_existing_snapshots():
    cart = Cart()
    cart.add(Sku("A"), MeasuredQuantity.single())
    snapshot = cart.snapshot()
    cart.reset()

    assert cart.is_empty()
    assert snapshot[Sku("A")][Unit.QUANTITY] == Decimal(1)


def test_concurrent_scans_lose_no_updates(default_rules):
    checkout = Checkout(default_rules)
    threads_count = 8
    scans_per_thread = 300
    start = threading.Barrier(threads_count)

    def worker():
        start.wait()
        for _ in range(scans_per_thread):
            checkout.record("A")
            checkout.record("B", MeasuredQuantity(Unit.QUANTITY, 2))

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert checkout.cart.amount(Sku("A")) == Decimal(threads_count * scans_per_thread)
    assert checkout.cart.amount(Sku("B")) == Decimal(threads_count * scans_per_thread * 2)
    # 2400 A = 800 x 130, 4800 B = 2400 x 45
    assert checkout.total_price() == Decimal("212000.00")


def test_total_during_concurrent_scans_sees_a_consistent_snapshot(default_rules):
    checkout = Checkout(default_rules)
    stop = threading.Event()
    totals = []

    def scanner():
        while not stop.is_set():
            checkout.record("A")

    thread = threading.Thread(target=scanner)
    thread.start()
    try:
        for _ in range(50):
            totals.append(checkout.total_price())
    finally:
        stop.set()
        thread.join()

    for total in totals:
        # n x A costs 130 per full bundle plus 0, 50 or 100
        assert total % 130 in {Decimal(0), Decimal(50), Decimal(100)}
