# -*- coding: utf-8 -*-
"""# gpcli

A command-line client for the Globalping network: run ping, traceroute, DNS
and MTR measurements from probes around the world.

- `gpcli.session`: session history, infinite-mode polling window and engine
- `gpcli.api`: HTTP client for the measurement API
- `gpcli.view`: terminal rendering
- `gpcli.cli`: the `gpcli` command
"""

from ._version import __version__
