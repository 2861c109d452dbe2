def batch_keys(keys, batch_size):
    """Group keys into tuples of at most batch_size; the last one may be shorter."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be greater than 0, got {batch_size}")

    batch = []
    for key in keys:
        batch.append(key)
        if len(batch) == batch_size:
            yield tuple(batch)
            batch = []
    if batch:
        yield tuple(batch)
