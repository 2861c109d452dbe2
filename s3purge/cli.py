import argparse
import logging
import os
import sys
import time
from datetime import datetime

from botocore.exceptions import BotoCoreError, ClientError

from . import __version__
from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_RATE_DISPLAY_INTERVAL,
    LOG_LEVELS,
    PurgeConfig,
    batch_size,
    build_s3_client,
    parse_duration,
    positive_int,
)
from .lister import bucket_exists
from .purge import purge_bucket

# SDK loggers are far too chatty at DEBUG for a per-key deletion log
NOISY_LOGGERS = ('boto3', 'botocore', 'urllib3', 's3transfer')


def setup_logger(log_file, level=logging.INFO):
    """Setup logger to log messages to both console and file."""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Create handlers
    console_handler = logging.StreamHandler()
    file_handler = logging.FileHandler(log_file)

    # Create formatters and add them to the handlers
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', '%Y-%m-%d %H:%M:%S')
    console_handler.setFormatter(formatter)
    file_handler.setFormatter(formatter)

    # Add handlers to the logger
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    return [console_handler, file_handler]


def teardown_logger(handlers):
    """Detach and close the handlers added by setup_logger."""
    logger = logging.getLogger()
    for handler in handlers:
        logger.removeHandler(handler)
        handler.close()


def log_level_from_name(name):
    name = name.lower()
    if name == 'warn':
        name = 'warning'
    return getattr(logging, name.upper())


def build_parser():
    parser = argparse.ArgumentParser(prog='s3purge', description="Delete all objects in an S3-compatible bucket.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("bucket", help="Name of the S3 bucket")
    parser.add_argument("--endpoint", "-e", help="S3-compatible endpoint URL (default: AWS)")
    parser.add_argument("--access-key", help="Access key ID (default: boto3 credential chain)")
    parser.add_argument("--secret-key", help="Secret access key (default: boto3 credential chain)")
    parser.add_argument("--region", help="Region name")
    parser.add_argument("--concurrency", "-c", type=positive_int, default=DEFAULT_CONCURRENCY,
                        help=f"Number of concurrent deletions (default: {DEFAULT_CONCURRENCY})")
    parser.add_argument("--batch-size", "-b", type=batch_size, default=DEFAULT_BATCH_SIZE,
                        help=f"Keys per delete request, at most 1000 (default: {DEFAULT_BATCH_SIZE})")
    parser.add_argument("--rate-display-interval", "-r", type=parse_duration, default=DEFAULT_RATE_DISPLAY_INTERVAL,
                        help=f"Interval to display deletion rate, e.g. 5s, 500ms, 1m (default: {DEFAULT_RATE_DISPLAY_INTERVAL})")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info", type=str.lower,
                        help="Log level (default: info)")
    parser.add_argument("--log-file", "-l", help="Log file to store the output")
    parser.add_argument("--log-dir", "-d", help="Directory to store the log file", default="./.script-logs")
    return parser


def run(config):
    """Purge one bucket; return the process exit code."""
    s3 = build_s3_client(config)

    if not bucket_exists(s3, config.bucket):
        logging.error(f"Bucket '{config.bucket}' does not exist or is not accessible.")
        return 1

    try:
        result = purge_bucket(
            s3,
            config.bucket,
            batch_size=config.batch_size,
            concurrency=config.concurrency,
            rate_display_interval=config.rate_display_interval,
        )
    except (ClientError, BotoCoreError) as e:
        logging.error(f"Failed to list objects in bucket '{config.bucket}': {e}")
        return 1

    if result.batches_failed:
        logging.warning(f"{result.batches_failed} of {result.batches_submitted} batches were not fully deleted.")
    print(f"Deleted {result.deleted} objects from bucket '{result.bucket}'.")
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Static credentials only make sense as a pair
    if bool(args.access_key) != bool(args.secret_key):
        parser.error("--access-key and --secret-key must be given together")

    config = PurgeConfig.from_args(args)

    # Define the default log file path
    log_dir = args.log_dir
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)
    log_file = args.log_file or os.path.join(log_dir, f"script_run_{datetime.now().strftime('%Y_%m_%d___%H%M%S')}.log")

    # Setup logger
    handlers = setup_logger(log_file, log_level_from_name(config.log_level))
    logging.info(f"Starting S3 purge: endpoint={config.endpoint or 'aws'} bucket={config.bucket} concurrency={config.concurrency}")

    start_time = time.time()
    try:
        exit_code = run(config)
    except Exception as e:
        logging.error(f"Unhandled exception: {e}")
        exit_code = 1
    logging.info(f"Total script duration: {time.time() - start_time:.2f} seconds")
    teardown_logger(handlers)

    # Rename the log file if the purge failed
    if exit_code != 0:
        root, ext = os.path.splitext(log_file)
        error_log_file = f"{root}__errorred{ext}"
        os.rename(log_file, error_log_file)
        log_file = error_log_file

    # Print out the log file location at the end
    print(f"THE LOG FILE LOCATION IS: {log_file}")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
