"""
Command-line interface for gpcli.

Built with click. Measurement commands share the `TARGET from LOCATION`
syntax and the options in `gpcli.cli.measure.measurement_options`.

CLI Tree
--------

```
$ gpcli --tree
cli
└── dns
└── mtr
└── ping
└── session
    └── clear
    └── list
└── traceroute
```

Examples
--------
```bash
$ gpcli ping jsdelivr.com from Germany --limit 2
$ gpcli traceroute jsdelivr.com from last
$ gpcli ping jsdelivr.com from @-2 --infinite
```
"""

from .base import cli, tree_option
from .measure import dns, mtr, ping, traceroute

# Register measurement commands directly under cli
cli.add_command(ping)
cli.add_command(traceroute)
cli.add_command(dns)
cli.add_command(mtr)

__all__ = ["cli", "tree_option"]
