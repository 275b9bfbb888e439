# scrubd

`scrubd` takes stock of what container runtimes and the Linux host know
about containers: network interfaces, routes, network namespaces, mounts,
overlay snapshots, runtime cgroups and processes on the host side, and the
containers that Docker, Podman and containerd are tracking on the runtime
side. Comparing the two is how leftovers such as orphaned veth interfaces
or stale namespaces can be spotted.

It is a library with two halves:

* **Host inspection** (`scrubd.inspect`) reads `/sys/class/net`,
  `/proc/net/route`, `/var/run/netns`, `/proc`, `/proc/self/mountinfo`,
  the cgroup filesystem under `/sys/fs/cgroup` and the Docker and
  containerd overlay snapshot directories.
* **Runtime inventory** (`scrubd.runtime`) asks Docker and Podman over
  their Unix-socket HTTP APIs, and containerd over its CRI gRPC service
  (`runtime.v1`, then `runtime.v1alpha2`), which containers they know.
  Rootless sockets under `$XDG_RUNTIME_DIR` and `/run/user/<uid>` are
  tried after the system sockets.

Every call only reads. Collection problems such as a missing socket or an
unreadable directory do not raise; they come back as human-readable
warnings next to whatever could be collected.

## Requirements

* Python 3.10 or later
* Linux for host inspection; on any other platform the host inventory
  holds a single warning and no resources
* `grpcio`, used to talk to containerd

Reading other users' processes, namespaces and runtime sockets usually
needs root.

## Inspecting the host

```python
import json

from scrubd.inspect.host import default_host_collector

collector = default_host_collector()
inventory = collector.inventory()

for warning in inventory.warnings:
    print("warning:", warning)

print(json.dumps(inventory.to_dict(), indent=2))
```

Each resource kind can also be collected on its own; every method returns
the items found together with a list of warnings:

```python
interfaces, warnings = collector.network_interfaces()
routes, warnings = collector.routes()
namespaces, warnings = collector.network_namespaces()
mounts, warnings = collector.mounts()
snapshots, warnings = collector.snapshots()
cgroups, warnings = collector.cgroups()
processes, warnings = collector.processes()
```

To inspect a prepared directory tree instead of the live system, build a
`HostCollector` from your own `scrubd.inspect.resources.Paths`. When
`cgroup_root` is set the cgroup hierarchy is walked for Docker,
containerd, libpod and Kubernetes pod cgroups; when it is empty the
`cgroup` file (normally `/proc/self/cgroup`) is parsed instead.

The parsers are usable on their own too, for example
`scrubd.inspect.mounts.parse_mount_info`,
`scrubd.inspect.routes.parse_proc_net_route` and
`scrubd.inspect.cgroups.parse_cgroups`; they raise `ValueError` on a
malformed line.

## Asking the container runtimes

```python
from scrubd.runtime.collector import default_collector
from scrubd.runtime.models import RuntimeName

collector = default_collector()

for inventory in collector.inventories(RuntimeName.AUTO):
    state = "available" if inventory.available else "unavailable"
    print(f"{inventory.runtime}: {state}, {len(inventory.containers)} containers")
    for warning in inventory.warnings:
        print("  warning:", warning)
```

`RuntimeName.AUTO` queries Docker, containerd and Podman in that order;
pass `RuntimeName.DOCKER`, `RuntimeName.CONTAINERD` or `RuntimeName.PODMAN`
to ask just one. Any other name gives a single inventory carrying the
warning `unknown runtime`; `scrubd.runtime.models.valid_name` tells the
names apart.

Each `Container` carries its id, names, image, state, status and network
mode; for Docker and Podman the main PID is filled in from a per-container
inspect request. `Inventory.to_dict()` gives JSON-ready data.

Socket locations come from `scrubd.runtime.models.default_paths()`; build
a `Collector` from your own `Paths` to point it somewhere else.

## What it does not do

`scrubd` only collects. It does not decide which of the collected items
are leaks, does not write scan reports, and never removes or changes
anything on the host. It has no command-line program; it is used from
Python.