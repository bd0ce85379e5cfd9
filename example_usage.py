#!/usr/bin/env python3
"""
Basic usage examples for the HMAC data source client.

Reads SERVER_URL, CLIENT_ID, SECRET_KEY, AUTH_METHOD and BASE_PATH from the
environment, then lists things. Pass a thing id to also list its data
streams and the last 24 hours of observations.

    python example_usage.py [THING_ID]
"""

import datetime
import json
import logging
import sys

from hmac_datasource import DataSource, HMACClientError, PluginSettings


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.INFO)

    settings = PluginSettings.from_env()
    missing = settings.missing_fields()
    if missing:
        print(f"Configuration incomplete: {'; '.join(missing)}")
        return 1

    print("=== HMAC Data Source Usage Examples ===\n")
    print(f"   Settings: {json.dumps(settings.to_json_data())}\n")

    with DataSource(settings) as source:
        try:
            print("1. Checking health...")
            health = source.check_health()
            print(f"   {'✓' if health.ok else '✗'} {health.message}\n")
            if not health.ok:
                return 1

            print("2. Querying things...")
            things = source.get_things()
            print(json.dumps([thing.to_dict() for thing in things], indent=2))
            print()

            if len(sys.argv) < 2:
                return 0
            thing_id = sys.argv[1]

            print(f"3. Querying data streams at site {thing_id}...")
            streams = source.get_data_streams(thing_id)
            print(json.dumps([stream.to_dict() for stream in streams], indent=2))
            print()

            print("4. Querying observations for the last 24 hours...")
            until = datetime.datetime.now(datetime.timezone.utc)
            from_ = until - datetime.timedelta(days=1)
            for series in source.query_observations(thing_id, from_, until):
                print(f"   {series.name}: {len(series)} readings")
        except HMACClientError as e:
            print(f"   ✗ Request failed: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
