import logging
import sys
from typing import List, Optional

from counter_core import CounterHttpClient
from counter_devices import CounterClient

COMMANDS = {
    "refresh": "refresh",
    "get": "refresh",
    "add": "increment",
    "inc": "increment",
    "increment": "increment",
    "sub": "decrement",
    "dec": "decrement",
    "decrement": "decrement",
}


def print_usage():
    print("Usage: counter-cli [--verbose] <address> [command ...]")
    print()
    print("Commands (run in order, default: refresh):")
    print("  refresh, get            read the counter")
    print("  add, inc, increment     increment the counter")
    print("  sub, dec, decrement     decrement the counter")
    print()
    print("Example:")
    print("  counter-cli 192.168.0.223 refresh add")


def main(argv: Optional[List[str]] = None, http: Optional[CounterHttpClient] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = "--verbose" in args
    if verbose:
        args.remove("--verbose")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args:
        print_usage()
        return 2

    address, commands = args[0], args[1:] or ["refresh"]
    unknown = [command for command in commands if command not in COMMANDS]
    if unknown:
        print(f"Error: unknown command(s): {', '.join(unknown)}")
        print_usage()
        return 2

    print(f"Using device at: {address}")
    client = CounterClient(address, http=http)

    failed = False
    try:
        for command in commands:
            state = getattr(client, COMMANDS[command])()
            value = state.value if state.value is not None else "-"
            print(f"{command}: {state.status} (count: {value})")
            failed = failed or not state.ok
    finally:
        client.close()

    return 1 if failed else 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
