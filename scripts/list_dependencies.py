#!/usr/bin/env python3
"""Local CLI entrypoint to list a service's runtime files outside the framework.

Usage:
  python scripts/list_dependencies.py --service-file serverless.yml [--function NAME] [--output lines]

This calls the same resolver used by the packaging hooks.
"""

from __future__ import annotations

from include_dependencies.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
