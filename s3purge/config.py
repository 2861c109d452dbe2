import argparse
import math
import re
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config

DEFAULT_CONCURRENCY = 250
DEFAULT_BATCH_SIZE = 500
DEFAULT_RATE_DISPLAY_INTERVAL = "5s"
MAX_BATCH_SIZE = 1000  # DeleteObjects accepts up to 1000 keys per request

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


def parse_duration(value):
    """Parse a duration like '5s', '500ms', '1m30s' or bare seconds into seconds."""
    text = value.strip().lower()
    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos == 0 or pos != len(text):
            raise argparse.ArgumentTypeError(f"invalid duration: '{value}'")
    if not math.isfinite(seconds):
        raise argparse.ArgumentTypeError(f"duration must be finite: '{value}'")
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"duration must be positive: '{value}'")
    return seconds


def positive_int(value):
    """argparse type for integers greater than zero."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {number}")
    return number


def batch_size(value):
    """argparse type for the number of keys sent in one DeleteObjects call."""
    number = positive_int(value)
    if number > MAX_BATCH_SIZE:
        raise argparse.ArgumentTypeError(f"must be at most {MAX_BATCH_SIZE}: {number}")
    return number


@dataclass
class PurgeConfig:
    bucket: str
    endpoint: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    concurrency: int = DEFAULT_CONCURRENCY
    batch_size: int = DEFAULT_BATCH_SIZE
    rate_display_interval: float = 5.0
    log_level: str = "info"

    @classmethod
    def from_args(cls, args):
        return cls(
            bucket=args.bucket,
            endpoint=args.endpoint,
            access_key=args.access_key,
            secret_key=args.secret_key,
            region=args.region,
            concurrency=args.concurrency,
            batch_size=args.batch_size,
            rate_display_interval=args.rate_display_interval,
            log_level=args.log_level,
        )


def build_s3_client(config):
    """Create the S3 client shared by the lister and every deletion task."""
    client_kwargs = {
        # one pooled connection per deletion task, otherwise urllib3 discards connections
        "config": Config(max_pool_connections=config.concurrency),
    }
    if config.endpoint:
        client_kwargs["endpoint_url"] = config.endpoint
    if config.region:
        client_kwargs["region_name"] = config.region
    if config.access_key and config.secret_key:
        client_kwargs["aws_access_key_id"] = config.access_key
        client_kwargs["aws_secret_access_key"] = config.secret_key
    return boto3.client("s3", **client_kwargs)
