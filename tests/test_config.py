import argparse

import pytest

from s3purge.config import PurgeConfig, batch_size, build_s3_client, parse_duration, positive_int


@pytest.mark.parametrize("text,seconds", [
    ("5s", 5),
    ("500ms", 0.5),
    ("1m", 60),
    ("1m30s", 90),
    ("2h", 7200),
    ("1.5s", 1.5),
    ("10", 10),
    ("0.25", 0.25),
    (" 5S ", 5),
])
def test_parse_duration(text, seconds):
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "s", "5x", "fast", "5s later", "0s", "0", "-1", "s5", "inf", "infinity", "1e400", "nan"])
def test_parse_duration_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_duration(text)


def test_positive_int():
    assert positive_int("250") == 250
    for bad in ("0", "-2", "ten", "1.5"):
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int(bad)


def test_batch_size_limit():
    assert batch_size("1000") == 1000
    assert batch_size("1") == 1
    with pytest.raises(argparse.ArgumentTypeError):
        batch_size("1001")


def test_build_client_for_custom_endpoint():
    config = PurgeConfig(bucket='logs', endpoint='http://minio.local:9000', access_key='AK', secret_key='SK',
                         region='us-east-1', concurrency=64)

    s3 = build_s3_client(config)

    assert s3.meta.endpoint_url == 'http://minio.local:9000'
    assert s3.meta.region_name == 'us-east-1'
    assert s3.meta.config.max_pool_connections == 64
    credentials = s3._request_signer._credentials
    assert credentials.access_key == 'AK'
    assert credentials.secret_key == 'SK'


def test_build_client_uses_default_chain(monkeypatch):
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'env-key')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'env-secret')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'eu-west-1')

    s3 = build_s3_client(PurgeConfig(bucket='logs', concurrency=10))

    assert s3.meta.region_name == 'eu-west-1'
    assert s3.meta.config.max_pool_connections == 10
    assert s3._request_signer._credentials.access_key == 'env-key'
