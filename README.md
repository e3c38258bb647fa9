# unitdeck

A curses interface for looking after systemd services. It lists every loaded
`.service` unit with its active and sub state, unit file state, load state and
description. From the list you can start, stop, restart, enable and disable a
service, read its journal, and see its runtime properties (exec commands, PIDs,
timestamps, restart policy, user and group, resource limits).

## Requirements

- Linux with systemd
- `busctl` on the `PATH`; every request to systemd goes through it, on the
  system bus
- `journalctl` on the `PATH` for the log view
- Python 3.10 or later; no third-party packages

Changing a service usually needs privileges. When systemd refuses an action,
a popup shows the reason, with a readable message for the common D-Bus errors
(authorization required, access denied, no such unit, no reply, service
unknown). Run the program with `sudo` to manage system services.

## Installation

```
pip install .
```

## Running

```
unitdeck
```

The command takes no options apart from `--help`.

## Keys

`Ctrl + c` quits from any view. When an error popup is shown, any key
dismisses it.

### Service list

| Key               | Action                                  |
|-------------------|-----------------------------------------|
| ↑ / ↓             | Move the selection (wraps around)       |
| PageUp / PageDown | Move ten rows (wraps around)            |
| `s`               | Start the selected service              |
| `x`               | Stop the selected service               |
| `r`               | Restart the selected service            |
| `e`               | Enable the selected service             |
| `d`               | Disable the selected service            |
| `u`               | Reload the whole list                   |
| `v`               | Open the selected service's logs        |
| `p`               | Open the selected service's properties  |
| `i`               | Start typing a name filter              |
| `Esc`             | Clear the filter                        |

After each action the list is reloaded. Enabling or disabling a service is
followed by a daemon reload.

While typing a filter, ← / → move the cursor, Backspace deletes, `Enter`
submits and `Esc` stops editing. The list is narrowed as you type; matching
ignores case and is done on the name without its `.service` suffix. List keys
are ignored while the filter is being edited.

### Log view

The journal (`journalctl -eu <unit> --no-pager`) is shown newest line first.
Auto-refresh is on when the view opens, shown by a highlighted border, and
reloads the journal every second.

| Key               | Action                     |
|-------------------|----------------------------|
| ↑ / ↓             | Scroll one line            |
| PageUp / PageDown | Scroll ten lines           |
| ← / →             | Switch to properties       |
| `a`               | Toggle auto-refresh        |
| `q`               | Back to the list           |

### Properties view

The properties are reloaded every second while the view is open.

| Key               | Action                     |
|-------------------|----------------------------|
| ↑ / ↓             | Scroll one line            |
| PageUp / PageDown | Scroll ten lines           |
| ← / →             | Switch to logs             |
| `q`               | Back to the list           |

## Using it from Python

The service operations work without the interface:

```python
from unitdeck.services_manager import ServicesManager
from unitdeck.systemd import SystemdError, SystemdServiceAdapter

manager = ServicesManager(SystemdServiceAdapter(), 0.2)

services = manager.list_services()
for service in services:
    print(service.formatted_name(), service.state.active, service.state.sub)

service = services[0]
try:
    manager.restart_service(service)
except SystemdError as exc:
    print(f"restart failed: {exc}")

manager.update_properties(service)
print(service.properties.formatted_exec_start())
print(manager.get_log(service))
```

- `ServicesManager.list_services()` returns the services sorted by name,
  ignoring case.
- `ServicesManager.update_properties(service)` loads the unit's runtime
  properties into `service.properties` (a `ServiceProperty`).
- The start, stop, restart, enable and disable calls wait a short delay (the
  second argument, 0.2 seconds by default) after asking systemd.
- `SystemdServiceAdapter` raises `SystemdError` when `busctl` fails or cannot
  be run. It takes an optional `runner` callable in place of
  `subprocess.run`, which is handy for testing.
- Any object with the methods of `unitdeck.repository.ServiceRepository`
  (plus `reload_daemon` and `get_service_property`) can be given to
  `ServicesManager` in place of the systemd adapter.

## Limitations

- Only the system instance of systemd is managed; user services
  (`systemctl --user`) are not shown.
- Only units that systemd currently has loaded appear in the list; unit files
  that are installed but not loaded are not listed.
- Unit files cannot be edited, created or masked from the interface.

## Running the tests

```
pip install ".[test]"
pytest
```