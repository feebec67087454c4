"""Launch script for the hexcrawl sandbox server."""

import argparse

import uvicorn

from ..config import ENV_PREFIX, resolve


def main(argv=None):
    """Start the sandbox server."""
    p = argparse.ArgumentParser(prog="python -m hexcrawl.server.run")
    p.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    p.add_argument("--env-prefix", type=str, default=ENV_PREFIX)
    args = p.parse_args(argv)
    server = resolve(args.config, args.env_prefix)["server"]

    print("=" * 70)
    print("hexcrawl sandbox server")
    print("=" * 70)
    print(f"\nOpen http://{server['host']}:{server['port']}/docs in your browser")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 70 + "\n")

    uvicorn.run(
        "hexcrawl.server.app:app",
        host=server["host"],
        port=int(server["port"]),
        reload=bool(server["reload"]),
        log_level=server["log_level"],
    )


if __name__ == "__main__":
    main()
