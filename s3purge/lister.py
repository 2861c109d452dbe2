import logging

from botocore.exceptions import BotoCoreError, ClientError


def bucket_exists(s3, bucket_name):
    """Check if a bucket exists."""
    try:
        s3.head_bucket(Bucket=bucket_name)
        return True
    except (ClientError, BotoCoreError) as e:
        logging.warning(f"head_bucket failed for '{bucket_name}': {e}")
        return False


def list_keys(s3, bucket_name):
    """Yield every object key in the bucket, one listing page at a time.

    Keys come out in whatever order the backend returns them. A failing page
    request is not retried: the error propagates and ends the listing.
    """
    # To overcome the 1000 records limitation, use paginator
    paginator = s3.get_paginator('list_objects_v2')
    for page in paginator.paginate(Bucket=bucket_name):
        for obj in page.get('Contents', []):
            yield obj['Key']
