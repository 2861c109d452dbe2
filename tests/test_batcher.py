import math

import pytest

from s3purge.batcher import batch_keys

from fakes import make_keys


@pytest.mark.parametrize("count,size", [(1, 1), (10, 500), (500, 500), (501, 500), (1200, 500), (999, 7)])
def test_every_key_lands_in_exactly_one_batch(count, size):
    keys = make_keys(count)

    batches = list(batch_keys(iter(keys), size))

    assert len(batches) == math.ceil(count / size)
    assert all(0 < len(batch) <= size for batch in batches)
    assert [key for batch in batches for key in batch] == keys


def test_last_short_batch_is_kept():
    batches = list(batch_keys(make_keys(1200), 500))

    assert [len(batch) for batch in batches] == [500, 500, 200]


def test_no_keys_no_batches():
    assert list(batch_keys(iter([]), 500)) == []


def test_batches_are_immutable():
    batch = next(batch_keys(['a', 'b'], 10))

    assert batch == ('a', 'b')
    assert isinstance(batch, tuple)


def test_batch_emitted_as_soon_as_full():
    consumed = []

    def keys():
        for key in make_keys(5):
            consumed.append(key)
            yield key

    batches = batch_keys(keys(), 2)
    assert next(batches) == ('obj/00000', 'obj/00001')
    assert len(consumed) == 2


@pytest.mark.parametrize("size", [0, -1])
def test_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        list(batch_keys(['a'], size))
